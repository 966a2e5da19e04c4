import numpy as np
from scipy import sparse

from sklocomotion.optimization.component import VariableSet
from sklocomotion.variables.node_spline import get_segment_id
from sklocomotion.variables import variable_names


class PhaseDurations(VariableSet):
    """Alternating contact and swing phase durations of one endeffector.

    The total time is fixed. If the durations are optimized, the first
    ``n_phases - 1`` durations are variables and the last one is whatever
    remains of the total time, so the durations always sum up to it.

    Parameters
    ----------
    ee : int
        endeffector id.
    timings : list[float]
        initial duration of every phase.
    is_first_phase_in_contact : bool
        contact state of the first phase.
    min_duration : float
        lower bound of each optimized duration.
    max_duration : float
        upper bound of each optimized duration.
    optimize : bool
        whether the durations are optimization variables.
    """

    def __init__(self, ee, timings, is_first_phase_in_contact,
                 min_duration=0.2, max_duration=1.0, optimize=False):
        timings = np.array(timings, dtype=np.float64)
        if timings.ndim != 1 or len(timings) == 0:
            raise ValueError('at least one phase duration is required')
        if np.any(timings <= 0.0):
            raise ValueError(
                'phase durations must be positive, got {}'.format(timings))
        if min_duration <= 0.0:
            raise ValueError('min_duration must be positive')
        if min_duration > max_duration:
            raise ValueError(
                'min_duration {} exceeds max_duration {}'.format(
                    min_duration, max_duration))
        self.optimized = optimize
        n_vars = len(timings) - 1 if optimize else 0
        super(PhaseDurations, self).__init__(
            variable_names.ee_schedule(ee), n_vars)
        self.ee = ee
        self.durations = timings
        self.t_total = float(np.sum(timings))
        self.is_first_phase_in_contact = is_first_phase_in_contact
        self.phase_duration_bounds = (min_duration, max_duration)

    @property
    def n_phases(self):
        return len(self.durations)

    def get_values(self):
        return self.durations[:self.get_rows()].copy()

    def set_variables(self, x):
        if self.get_rows() == 0:
            return
        self.durations[:-1] = x
        self.durations[-1] = self.t_total - np.sum(x)

    def get_bounds(self):
        bounds = np.empty((self.get_rows(), 2))
        bounds[:, 0] = self.phase_duration_bounds[0]
        bounds[:, 1] = self.phase_duration_bounds[1]
        return bounds

    def get_phase_durations(self):
        return self.durations.copy()

    def get_total_time(self):
        return self.t_total

    def get_phase_id(self, t):
        t = min(max(t, 0.0), self.t_total)
        return get_segment_id(t, self.durations)[0]

    def is_contact_phase(self, t):
        """Contact state at ``t``, phases alternate from the first."""
        is_even_phase = self.get_phase_id(t) % 2 == 0
        if is_even_phase:
            return self.is_first_phase_in_contact
        return not self.is_first_phase_in_contact

    def get_jacobian_of_pos(self, current_phase, dx_dT, xd):
        """Chain rule of a spline value through the phase durations.

        Parameters
        ----------
        current_phase : int
            phase containing the queried time.
        dx_dT : numpy.ndarray
            derivative of the spline value wrt the current phase duration.
        xd : numpy.ndarray
            time derivative of the spline value.

        Returns
        -------
        jac : scipy.sparse.csr_matrix
            (n_dim, n_vars) Jacobian wrt the duration variables.
        """
        n_dim = len(xd)
        jac = np.zeros((n_dim, self.get_rows()))
        if self.get_rows() == 0:
            return sparse.csr_matrix(jac)
        in_last_phase = current_phase == self.n_phases - 1
        # the current phase stretches the spline
        if not in_last_phase:
            jac[:, current_phase] = dx_dT
        for phase in range(current_phase):
            # previous phases shift the spline in time
            jac[:, phase] = -xd
            # in the last phase they also compress it, the total is fixed
            if in_last_phase:
                jac[:, phase] -= dx_dT
        return sparse.csr_matrix(jac)
