from logging import getLogger

import numpy as np

from sklocomotion.coordinates.math import quaternion2matrix
from sklocomotion.state import AngularState
from sklocomotion.state import RobotStateCartesian
from sklocomotion.variables.angular_state_converter import \
    AngularStateConverter


logger = getLogger(__name__)


class TrajectorySampler(object):
    """Robot states sampled every ``dt`` from the current splines.

    The samples are computed lazily on each iteration, so iterating again
    after the variables changed yields the new motion. Times are ``k * dt``
    up to the total time, which is included within a tolerance of 1e-5.

    Parameters
    ----------
    spline_holder : sklocomotion.variables.SplineHolder
        splines linked to the variables.
    dt : float
        sampling period.

    Examples
    --------
    >>> sampler = TrajectorySampler(spline_holder, 0.02)  # doctest: +SKIP
    >>> [state.t for state in sampler][:2]  # doctest: +SKIP
    [0.0, 0.02]
    """

    def __init__(self, spline_holder, dt):
        if dt <= 0.0:
            raise ValueError('dt must be positive, got {}'.format(dt))
        self.spline_holder = spline_holder
        self.dt = dt

    def get_times(self):
        t_total = self.spline_holder.get_total_time()
        n_samples = int(np.floor((t_total + 1e-5) / self.dt)) + 1
        return [k * self.dt for k in range(n_samples)]

    def __len__(self):
        return len(self.get_times())

    def __iter__(self):
        for t in self.get_times():
            yield self.get_state(t)

    def get_state(self, t):
        holder = self.spline_holder
        base_angular = AngularStateConverter(holder.base_angular)
        base_ang = AngularState(
            base_angular.get_quaternion_base_to_world(t),
            base_angular.get_angular_velocity_in_world(t),
            base_angular.get_angular_acceleration_in_world(t))
        return RobotStateCartesian(
            t=t,
            base_lin=holder.base_linear.get_point(t),
            base_ang=base_ang,
            ee_contact=[spline.is_constant_phase(t)
                        for spline in holder.ee_motion],
            ee_motion=[spline.get_point(t) for spline in holder.ee_motion],
            ee_force=np.array([spline.get_point(t).p
                               for spline in holder.ee_force]))


def compute_joint_trajectory(samples, ik):
    """Joint angles of every leg along sampled robot states.

    Parameters
    ----------
    samples : iterable of RobotStateCartesian
        states, e.g. a :class:`TrajectorySampler`.
    ik : sklocomotion.models.InverseKinematics
        inverse kinematics of the legs.

    Returns
    -------
    angles : list[list[numpy.ndarray]]
        joint angles per sample and endeffector.
    success : numpy.ndarray
        (n_samples, n_ee) flags, False where no solution was found.
    """
    angles = []
    success = []
    for state in samples:
        w_R_b = quaternion2matrix(state.base_ang.q)
        angles_k = []
        success_k = []
        for ee in range(state.n_ee):
            pos_b = w_R_b.T.dot(state.ee_motion[ee].p - state.base_lin.p)
            q, ok = ik.get_joint_angles(pos_b, ee)
            angles_k.append(q)
            success_k.append(ok)
        angles.append(angles_k)
        success.append(success_k)
    success = np.array(success, dtype=bool)
    n_failed = int(np.count_nonzero(~success))
    if n_failed > 0:
        logger.warning('%d endeffector positions out of reach', n_failed)
    return angles, success
