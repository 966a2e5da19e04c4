import numpy as np
from scipy import sparse

from sklocomotion.optimization.component import inf
from sklocomotion.optimization.component import ConstraintSet
from sklocomotion.terrain.height_map import Direction
from sklocomotion.terrain.height_map import X_
from sklocomotion.terrain.height_map import Y_
from sklocomotion.variables.nodes_variables import NOT_OPTIMIZED
from sklocomotion.variables.nodes_variables import X
from sklocomotion.variables.nodes_variables import Y
from sklocomotion.variables.polynomial import POS


class ForceConstraint(ConstraintSet):
    """Unilateral contact forces inside a linearized friction cone.

    For every optimized stance force node the force is expressed in the
    terrain basis at the foothold of that stance phase. The normal
    component is pushed into the ground and limited, the tangential ones
    stay inside the friction pyramid.

    Parameters
    ----------
    terrain : sklocomotion.terrain.HeightMap
        terrain basis and friction coefficient.
    force_limit_in_normal_direction : float
        maximum normal force.
    ee_force : sklocomotion.variables.NodesVariablesEEForce
        force nodes of one endeffector.
    ee_motion : sklocomotion.variables.NodesVariablesEEMotion
        position nodes of the same endeffector.
    """

    n_constraints_per_node = 5

    def __init__(self, terrain, force_limit_in_normal_direction, ee_force,
                 ee_motion):
        self.terrain = terrain
        self.fn_max = force_limit_in_normal_direction
        self.mu = terrain.get_friction_coeff()
        self.ee_force = ee_force
        self.ee_motion = ee_motion
        self.pure_stance_force_node_ids = [
            node_id for node_id in range(ee_force.n_nodes)
            if ee_force.get_opt_index(node_id, POS, X) != NOT_OPTIMIZED]
        super(ForceConstraint, self).__init__(
            'force-' + ee_force.name,
            len(self.pure_stance_force_node_ids)
            * self.n_constraints_per_node)

    def _get_motion_node(self, force_node_id):
        # the foothold of a stance phase is the first node of that phase
        phase = self.ee_force.get_phase(force_node_id)
        for poly_id, info in enumerate(self.ee_motion.polynomial_info):
            if info.phase == phase:
                return poly_id
        raise ValueError(
            'phase {} not found in {}'.format(phase, self.ee_motion.name))

    def _get_rows_coefficients(self, p):
        # each row is coefficient.dot(f)
        n = self.terrain.get_normalized_basis(Direction.Normal, p[X], p[Y])
        t1 = self.terrain.get_normalized_basis(Direction.Tangent1, p[X], p[Y])
        t2 = self.terrain.get_normalized_basis(Direction.Tangent2, p[X], p[Y])
        return np.array([n,
                         t1 - self.mu * n,
                         t1 + self.mu * n,
                         t2 - self.mu * n,
                         t2 + self.mu * n])

    def _get_rows_coefficients_derivative(self, p, dim):
        basis = [self.terrain.get_derivative_of_normalized_basis_wrt(
            direction, dim, p[X], p[Y]) for direction in
            (Direction.Normal, Direction.Tangent1, Direction.Tangent2)]
        dn, dt1, dt2 = basis
        return np.array([dn,
                         dt1 - self.mu * dn,
                         dt1 + self.mu * dn,
                         dt2 - self.mu * dn,
                         dt2 + self.mu * dn])

    def get_values(self):
        g = np.zeros(self.get_rows())
        force_nodes = self.ee_force.get_nodes()
        motion_nodes = self.ee_motion.get_nodes()
        for i, node_id in enumerate(self.pure_stance_force_node_ids):
            f = force_nodes[node_id, POS]
            p = motion_nodes[self._get_motion_node(node_id), POS]
            row = i * self.n_constraints_per_node
            g[row:row + self.n_constraints_per_node] = \
                self._get_rows_coefficients(p).dot(f)
        return g

    def get_bounds(self):
        bounds = np.zeros((self.get_rows(), 2))
        for i in range(len(self.pure_stance_force_node_ids)):
            row = i * self.n_constraints_per_node
            bounds[row] = (0.0, self.fn_max)
            bounds[row + 1] = (-inf, 0.0)
            bounds[row + 2] = (0.0, inf)
            bounds[row + 3] = (-inf, 0.0)
            bounds[row + 4] = (0.0, inf)
        return bounds

    def get_jacobian_block(self, var_set_name):
        if var_set_name == self.ee_force.name:
            nodes_variables = self.ee_force
        elif var_set_name == self.ee_motion.name:
            nodes_variables = self.ee_motion
        else:
            return None
        force_nodes = self.ee_force.get_nodes()
        motion_nodes = self.ee_motion.get_nodes()
        jac = sparse.lil_matrix((self.get_rows(), nodes_variables.get_rows()))
        for i, node_id in enumerate(self.pure_stance_force_node_ids):
            row = i * self.n_constraints_per_node
            motion_node_id = self._get_motion_node(node_id)
            p = motion_nodes[motion_node_id, POS]
            if nodes_variables is self.ee_force:
                coefficients = self._get_rows_coefficients(p)
                for dim in range(3):
                    idx = self.ee_force.get_opt_index(node_id, POS, dim)
                    if idx == NOT_OPTIMIZED:
                        continue
                    for k in range(self.n_constraints_per_node):
                        jac[row + k, idx] += coefficients[k, dim]
            else:
                f = force_nodes[node_id, POS]
                for dim, terrain_dim in ((X, X_), (Y, Y_)):
                    idx = self.ee_motion.get_opt_index(
                        motion_node_id, POS, dim)
                    if idx == NOT_OPTIMIZED:
                        continue
                    derivative = self._get_rows_coefficients_derivative(
                        p, terrain_dim).dot(f)
                    for k in range(self.n_constraints_per_node):
                        jac[row + k, idx] += derivative[k]
        return jac.tocsr()
