import numpy as np
from scipy import sparse

from sklocomotion.optimization.component import ConstraintSet
from sklocomotion.variables.nodes_variables import NOT_OPTIMIZED
from sklocomotion.variables.nodes_variables import X
from sklocomotion.variables.nodes_variables import Y
from sklocomotion.variables.polynomial import POS
from sklocomotion.variables.polynomial import VEL


class SwingConstraint(ConstraintSet):
    """Place intermediate swing nodes halfway between the footholds.

    For every node inside a swing phase the horizontal position is the
    center of its neighbors and the horizontal velocity the average one
    over the swing, which avoids degenerate swing motions.

    Parameters
    ----------
    ee_motion : sklocomotion.variables.NodesVariablesEEMotion
        position nodes of one endeffector.
    t_swing_avg : float
        average duration of a swing phase.
    """

    def __init__(self, ee_motion, t_swing_avg):
        if t_swing_avg <= 0.0:
            raise ValueError(
                'swing duration must be positive, got {}'.format(t_swing_avg))
        self.ee_motion = ee_motion
        self.t_swing_avg = t_swing_avg
        self.pure_swing_node_ids = [
            node_id for node_id in range(1, ee_motion.n_nodes - 1)
            if not ee_motion.is_constant_node(node_id)]
        super(SwingConstraint, self).__init__(
            'swing-' + ee_motion.name, len(self.pure_swing_node_ids) * 4)

    def get_values(self):
        nodes = self.ee_motion.get_nodes()
        g = np.zeros(self.get_rows())
        row = 0
        for node_id in self.pure_swing_node_ids:
            prev = nodes[node_id - 1, POS]
            curr = nodes[node_id]
            nxt = nodes[node_id + 1, POS]
            distance_xy = nxt[:2] - prev[:2]
            xy_center = prev[:2] + 0.5 * distance_xy
            des_vel_center = distance_xy / self.t_swing_avg
            for dim in (X, Y):
                g[row] = curr[POS, dim] - xy_center[dim]
                g[row + 1] = curr[VEL, dim] - des_vel_center[dim]
                row += 2
        return g

    def get_bounds(self):
        return np.zeros((self.get_rows(), 2))

    def get_jacobian_block(self, var_set_name):
        if var_set_name != self.ee_motion.name:
            return None
        rows = []
        cols = []
        data = []

        def add(row, node_id, deriv, dim, value):
            idx = self.ee_motion.get_opt_index(node_id, deriv, dim)
            if idx != NOT_OPTIMIZED:
                rows.append(row)
                cols.append(idx)
                data.append(value)

        row = 0
        for node_id in self.pure_swing_node_ids:
            for dim in (X, Y):
                add(row, node_id, POS, dim, 1.0)
                add(row, node_id - 1, POS, dim, -0.5)
                add(row, node_id + 1, POS, dim, -0.5)
                add(row + 1, node_id, VEL, dim, 1.0)
                add(row + 1, node_id - 1, POS, dim, 1.0 / self.t_swing_avg)
                add(row + 1, node_id + 1, POS, dim, -1.0 / self.t_swing_avg)
                row += 2
        return sparse.csr_matrix(
            (data, (rows, cols)),
            shape=(self.get_rows(), self.ee_motion.get_rows()))
