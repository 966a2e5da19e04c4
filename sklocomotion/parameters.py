"""Settings of the nonlinear program built by :class:`NlpFactory`."""

from enum import Enum
from logging import getLogger

import numpy as np

from sklocomotion.variables.nodes_variables import X
from sklocomotion.variables.nodes_variables import Y
from sklocomotion.variables.nodes_variables import Z


logger = getLogger(__name__)


class ConstraintName(Enum):
    Dynamic = 'dynamic'
    EndeffectorRom = 'endeffector-rom'
    TotalTime = 'total-time'
    Terrain = 'terrain'
    Force = 'force'
    Swing = 'swing'
    Convexity = 'convexity'


class CostName(Enum):
    ForcesCost = 'forces'
    EEMotionCost = 'ee-motion'
    BaseMotionCost = 'base-motion'


class Parameters(object):
    """Discretization, used constraints and costs of the problem.

    The contact schedule of every endeffector is given by
    ``ee_phase_durations`` and ``ee_in_contact_at_start`` before building
    the problem. All endeffectors must span the same total time.

    Examples
    --------
    >>> params = Parameters()
    >>> params.ee_phase_durations = [[0.4, 0.2, 0.4]]
    >>> params.ee_in_contact_at_start = [True]
    >>> params.get_total_time()
    1.0
    """

    def __init__(self):
        self.ee_phase_durations = []
        self.ee_in_contact_at_start = []

        self.duration_base_polynomial = 0.1
        self.ee_polynomials_per_swing_phase = 2
        self.force_polynomials_per_stance_phase = 3

        self.dt_constraint_dynamic = 0.1
        self.dt_constraint_range_of_motion = 0.08
        self.dt_load = 0.1

        self.force_limit_in_normal_direction = 1000.0
        self.bound_phase_duration = (0.2, 1.0)

        self.bounds_final_lin_pos = [X, Y]
        self.bounds_final_lin_vel = [X, Y, Z]
        self.bounds_final_ang_pos = [X, Y, Z]
        self.bounds_final_ang_vel = [X, Y, Z]

        self.constraints = [
            ConstraintName.Terrain,
            ConstraintName.Dynamic,
            ConstraintName.EndeffectorRom,
            ConstraintName.Force,
        ]
        self.costs = []

    def optimize_phase_durations(self):
        """Make the phase durations variables, bounded in total time."""
        if ConstraintName.TotalTime not in self.constraints:
            self.constraints.append(ConstraintName.TotalTime)

    def set_swing_constraint(self):
        if ConstraintName.Swing not in self.constraints:
            self.constraints.append(ConstraintName.Swing)

    def add_cost(self, name, weight):
        self.costs.append((name, weight))

    def is_optimize_time_variables(self):
        return ConstraintName.TotalTime in self.constraints

    def get_used_constraints(self):
        return list(self.constraints)

    def get_cost_weights(self):
        return list(self.costs)

    def get_ee_count(self):
        return len(self.ee_phase_durations)

    def get_phase_count(self, ee):
        return len(self.ee_phase_durations[ee])

    def get_total_time(self):
        """Total time of the motion, the sum of the phase durations.

        Raises
        ------
        ValueError
            if no contact schedule is set or endeffectors span different
            times.
        """
        if len(self.ee_phase_durations) == 0:
            raise ValueError('no phase durations are set')
        if len(self.ee_in_contact_at_start) != len(self.ee_phase_durations):
            raise ValueError(
                '{} initial contact flags for {} endeffectors'.format(
                    len(self.ee_in_contact_at_start),
                    len(self.ee_phase_durations)))
        totals = [float(np.sum(durations))
                  for durations in self.ee_phase_durations]
        if not np.allclose(totals, totals[0]):
            raise ValueError(
                'endeffectors span different total times {}'.format(totals))
        return totals[0]

    def get_base_poly_durations(self):
        """Durations of the base polynomials covering the total time.

        All polynomials last ``duration_base_polynomial`` except the last
        one, which takes the remainder.
        """
        t_total = self.get_total_time()
        dt = self.duration_base_polynomial
        if dt <= 0.0:
            raise ValueError(
                'duration_base_polynomial must be positive, got {}'.format(dt))
        durations = []
        t_left = t_total
        eps = 1e-10
        while t_left > dt + eps:
            durations.append(dt)
            t_left -= dt
        durations.append(t_left)
        logger.debug('%d base polynomials over %.3fs',
                     len(durations), t_total)
        return durations

    def get_average_swing_duration(self, ee):
        """Mean duration of the swing phases of ``ee``."""
        durations = self.ee_phase_durations[ee]
        first_swing = 1 if self.ee_in_contact_at_start[ee] else 0
        swings = durations[first_swing::2]
        if len(swings) == 0:
            return float(np.mean(durations))
        return float(np.mean(swings))
