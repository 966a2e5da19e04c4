import numpy as np
from scipy import sparse

from sklocomotion.optimization.component import inf
from sklocomotion.optimization.component import ConstraintSet
from sklocomotion.variables.nodes_variables import NOT_OPTIMIZED
from sklocomotion.variables.nodes_variables import X
from sklocomotion.variables.nodes_variables import Y
from sklocomotion.variables.nodes_variables import Z
from sklocomotion.variables.polynomial import POS


class TerrainConstraint(ConstraintSet):
    """Endeffector nodes on the terrain in stance and above it in swing.

    One row ``p_z - h(p_x, p_y)`` for every node with an optimized height.
    Nodes sharing a variable are only constrained once.

    Parameters
    ----------
    terrain : sklocomotion.terrain.HeightMap
        terrain height.
    ee_motion : sklocomotion.variables.NodesVariablesEEMotion
        position nodes of one endeffector.
    max_height : float
        maximum height above the terrain of swing nodes.
    """

    def __init__(self, terrain, ee_motion, max_height=inf):
        self.terrain = terrain
        self.ee_motion = ee_motion
        self.max_height = max_height
        self.node_ids = []
        seen = set()
        for node_id in range(ee_motion.n_nodes):
            idx = ee_motion.get_opt_index(node_id, POS, Z)
            if idx == NOT_OPTIMIZED or idx in seen:
                continue
            seen.add(idx)
            self.node_ids.append(node_id)
        super(TerrainConstraint, self).__init__(
            'terrain-' + ee_motion.name, len(self.node_ids))

    def get_values(self):
        nodes = self.ee_motion.get_nodes()
        g = np.zeros(self.get_rows())
        for row, node_id in enumerate(self.node_ids):
            p = nodes[node_id, POS]
            g[row] = p[Z] - self.terrain.get_height(p[X], p[Y])
        return g

    def get_bounds(self):
        bounds = np.zeros((self.get_rows(), 2))
        for row, node_id in enumerate(self.node_ids):
            if not self.ee_motion.is_constant_node(node_id):
                bounds[row, 1] = self.max_height
        return bounds

    def get_jacobian_block(self, var_set_name):
        if var_set_name != self.ee_motion.name:
            return None
        nodes = self.ee_motion.get_nodes()
        rows = []
        cols = []
        data = []
        for row, node_id in enumerate(self.node_ids):
            p = nodes[node_id, POS]
            derivatives = [
                (X, -self.terrain.get_height_derivative_wrt_x(p[X], p[Y])),
                (Y, -self.terrain.get_height_derivative_wrt_y(p[X], p[Y])),
                (Z, 1.0)]
            for dim, value in derivatives:
                idx = self.ee_motion.get_opt_index(node_id, POS, dim)
                if idx == NOT_OPTIMIZED:
                    continue
                rows.append(row)
                cols.append(idx)
                data.append(value)
        return sparse.csr_matrix(
            (data, (rows, cols)),
            shape=(self.get_rows(), self.ee_motion.get_rows()))
