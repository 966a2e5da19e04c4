import numpy as np
from scipy import sparse

from sklocomotion.optimization.component import ConstraintSet


def discretize_time(total_time, dt, eps=1e-10):
    """Sample times ``k * dt`` below ``total_time``, followed by it.

    Examples
    --------
    >>> discretize_time(1.0, 0.3)
    array([0. , 0.3, 0.6, 0.9, 1. ])
    >>> discretize_time(1.0, 0.5)
    array([0. , 0.5, 1. ])
    """
    if total_time <= 0.0 or dt <= 0.0:
        raise ValueError(
            'total_time and dt must be positive, got {} and {}'.format(
                total_time, dt))
    times = []
    k = 0
    while k * dt < total_time - eps:
        times.append(k * dt)
        k += 1
    times.append(total_time)
    return np.array(times)


class TimeDiscretizationConstraint(ConstraintSet):
    """Constraint evaluated at a fixed set of sample times.

    Subclasses implement the three per-instance hooks. Rows are ordered by
    sample index, then by dimension, see :meth:`get_row`.

    Parameters
    ----------
    name : str
        name of the constraint.
    total_time : float
        duration of the motion.
    dt : float
        spacing of the sample times.
    n_constraints_per_instance : int
        rows added at every sample time.
    """

    def __init__(self, name, total_time, dt, n_constraints_per_instance):
        self.dts = discretize_time(total_time, dt)
        self.n_constraints_per_instance = n_constraints_per_instance
        super(TimeDiscretizationConstraint, self).__init__(
            name, len(self.dts) * n_constraints_per_instance)

    def get_number_of_nodes(self):
        return len(self.dts)

    def get_row(self, k, dim):
        return k * self.n_constraints_per_instance + dim

    def get_values(self):
        g = np.zeros(self.get_rows())
        for k, t in enumerate(self.dts):
            self.update_constraint_at_instance(t, k, g)
        return g

    def get_bounds(self):
        bounds = np.zeros((self.get_rows(), 2))
        for k, t in enumerate(self.dts):
            self.update_bounds_at_instance(t, k, bounds)
        return bounds

    def get_jacobian_block(self, var_set_name):
        n_cols = self.variables.get_component(var_set_name).get_rows()
        jac = sparse.lil_matrix((self.get_rows(), n_cols))
        for k, t in enumerate(self.dts):
            self.update_jacobian_at_instance(t, k, var_set_name, jac)
        return jac.tocsr()

    def update_constraint_at_instance(self, t, k, g):
        """Write the rows of sample ``k`` at time ``t`` into ``g``."""
        raise NotImplementedError

    def update_bounds_at_instance(self, t, k, bounds):
        """Write the bounds of sample ``k`` at time ``t`` into ``bounds``."""
        raise NotImplementedError

    def update_jacobian_at_instance(self, t, k, var_set_name, jac):
        """Write the Jacobian rows of sample ``k`` wrt one variable set.

        ``jac`` is a ``scipy.sparse.lil_matrix`` spanning all rows of this
        constraint and the columns of ``var_set_name``. Sets the constraint
        does not depend on are left untouched.
        """
        raise NotImplementedError

    def _set_rows(self, jac, k, block):
        # scatter a (n_constraints_per_instance, n_cols) block of sample k
        row = self.get_row(k, 0)
        if sparse.issparse(block):
            block = block.toarray()
        jac[row:row + block.shape[0], :] = block
