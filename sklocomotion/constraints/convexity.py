import numpy as np
from scipy import sparse

from sklocomotion.optimization.component import ConstraintSet
from sklocomotion.variables import variable_names


class ConvexityConstraint(ConstraintSet):
    """Load fractions of all endeffectors sum up to one.

    One row per load interval, e.g. for a quadruped

    .. math::
        \\lambda_{LF} + \\lambda_{RF} + \\lambda_{LH} + \\lambda_{RH} = 1

    Parameters
    ----------
    ee_load : sklocomotion.variables.EndeffectorLoad
        load fractions of all endeffectors.
    """

    def __init__(self, ee_load):
        super(ConvexityConstraint, self).__init__(
            'convexity', ee_load.n_intervals)
        self.ee_load = ee_load

    def get_values(self):
        return np.sum(self.ee_load.loads, axis=1)

    def get_bounds(self):
        bounds = np.empty((self.get_rows(), 2))
        bounds[:, 0] = 1.0
        bounds[:, 1] = 1.0
        return bounds

    def get_jacobian_block(self, var_set_name):
        if var_set_name != variable_names.EE_LOAD:
            return None
        n_ee = self.ee_load.n_ee
        rows = np.repeat(np.arange(self.get_rows()), n_ee)
        cols = np.arange(self.get_rows() * n_ee)
        data = np.ones(len(cols))
        return sparse.csr_matrix(
            (data, (rows, cols)),
            shape=(self.get_rows(), self.ee_load.get_rows()))
