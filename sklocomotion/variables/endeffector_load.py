from logging import getLogger

import numpy as np

from sklocomotion.optimization.component import make_bounds
from sklocomotion.optimization.component import VariableSet
from sklocomotion.variables import variable_names


logger = getLogger(__name__)


class EndeffectorLoad(VariableSet):
    """Share of the body weight carried by each endeffector.

    The time ``[0, total_time]`` is split into intervals of length ``dt``
    and every endeffector holds one load fraction in ``[0, 1]`` per
    interval. Values are ordered by interval, then by endeffector.

    Parameters
    ----------
    n_ee : int
        number of endeffectors.
    total_time : float
        duration of the motion.
    dt : float
        length of one interval.
    is_in_contact : callable, optional
        ``is_in_contact(t, ee)``. Endeffectors not in contact at the middle
        of an interval have their fraction bounded to zero.
    """

    def __init__(self, n_ee, total_time, dt, is_in_contact=None):
        if n_ee < 1:
            raise ValueError('at least one endeffector is required')
        if total_time <= 0.0 or dt <= 0.0:
            raise ValueError(
                'total_time and dt must be positive, got {} and {}'.format(
                    total_time, dt))
        self.n_ee = n_ee
        self.dt = float(dt)
        self.total_time = float(total_time)
        self.n_intervals = max(int(np.ceil(total_time / dt - 1e-9)), 1)
        super(EndeffectorLoad, self).__init__(
            variable_names.EE_LOAD, self.n_intervals * n_ee)
        self.loads = np.full((self.n_intervals, n_ee), 1.0 / n_ee)
        self._bounds = make_bounds(self.get_rows(), (0.0, 1.0))
        if is_in_contact is not None:
            self._bound_swing_legs(is_in_contact)

    def _bound_swing_legs(self, is_in_contact):
        for k in range(self.n_intervals):
            t_mid = min((k + 0.5) * self.dt, self.total_time)
            in_contact = [bool(is_in_contact(t_mid, ee))
                          for ee in range(self.n_ee)]
            if not any(in_contact):
                logger.warning(
                    'no endeffector in contact at t=%.3f, '
                    'load fractions can not sum up to one', t_mid)
            n_stance = max(sum(in_contact), 1)
            for ee in range(self.n_ee):
                if not in_contact[ee]:
                    self._bounds[self.index(k, ee)] = (0.0, 0.0)
                    self.loads[k, ee] = 0.0
                else:
                    self.loads[k, ee] = 1.0 / n_stance

    def index(self, k, ee):
        return k * self.n_ee + ee

    def get_interval_id(self, t):
        t = min(max(t, 0.0), self.total_time)
        return min(int(np.floor(t / self.dt)), self.n_intervals - 1)

    def get_load_values(self, t):
        """Load fractions of all endeffectors in the interval owning ``t``.

        Query for inspecting a solution. The fractions only enter the
        problem through :class:`ConvexityConstraint`, which reads all
        intervals at once.
        """
        return self.loads[self.get_interval_id(t)].copy()

    def get_values(self):
        return self.loads.ravel().copy()

    def set_variables(self, x):
        self.loads = np.array(x, dtype=np.float64).reshape(
            self.n_intervals, self.n_ee)

    def get_bounds(self):
        return self._bounds.copy()
