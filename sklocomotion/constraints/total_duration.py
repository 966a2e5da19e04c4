import numpy as np
from scipy import sparse

from sklocomotion.optimization.component import ConstraintSet
from sklocomotion.variables import variable_names


class TotalDurationConstraint(ConstraintSet):
    """Keep the last phase of an endeffector within the duration bounds.

    The last phase lasts whatever remains of the total time after the
    optimized phases, so the sum of the optimized durations is bounded to
    ``[T - max_duration, T - min_duration]``.

    Parameters
    ----------
    phase_durations : sklocomotion.variables.PhaseDurations
        optimized phase durations of one endeffector.
    """

    def __init__(self, phase_durations):
        super(TotalDurationConstraint, self).__init__(
            'totalduration-{}'.format(phase_durations.ee), 1)
        self.phase_durations = phase_durations

    def get_values(self):
        return np.array([np.sum(self.phase_durations.get_values())])

    def get_bounds(self):
        t_total = self.phase_durations.get_total_time()
        min_duration, max_duration = self.phase_durations.phase_duration_bounds
        return np.array([[t_total - max_duration, t_total - min_duration]])

    def get_jacobian_block(self, var_set_name):
        if var_set_name != variable_names.ee_schedule(self.phase_durations.ee):
            return None
        return sparse.csr_matrix(
            np.ones((1, self.phase_durations.get_rows())))
