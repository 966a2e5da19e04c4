from logging import getLogger

import numpy as np


logger = getLogger(__name__)


class InverseKinematics(object):
    """Joint angles of one leg reaching an endeffector position.

    A position that can not be reached is reported through the returned
    success flag, never raised.
    """

    def get_joint_angles(self, pos_b, ee):
        """Joint angles of leg ``ee`` placing its foot at ``pos_b``.

        Parameters
        ----------
        pos_b : numpy.ndarray
            endeffector position in base frame.
        ee : int
            endeffector id.

        Returns
        -------
        angles : numpy.ndarray
            joint angles of the leg.
        success : bool
            False if no solution within the joint limits exists.
        """
        raise NotImplementedError

    def get_upper_joint_limits(self, ee):
        raise NotImplementedError

    def get_lower_joint_limits(self, ee):
        raise NotImplementedError


class ThreeJointLegInverseKinematics(InverseKinematics):
    """Closed form solution of legs with an abduction, hip and knee joint.

    The abduction joint rotates about the base x axis, hip and knee joints
    about the y axis of the leg. With all joints at zero the leg points
    straight down.

    Parameters
    ----------
    hip_offsets_b : numpy.ndarray or list
        (n_ee, 3) position of each abduction joint in base frame.
    upper_leg_length : float
        distance from hip to knee.
    lower_leg_length : float
        distance from knee to foot.
    lower_limits : list[float]
        lower limits of the three joints.
    upper_limits : list[float]
        upper limits of the three joints.
    knee_sign : float
        -1 bends the knee backwards, 1 forwards.

    Examples
    --------
    >>> ik = ThreeJointLegInverseKinematics([[0.0, 0.0, 0.0]], 0.3, 0.3)
    >>> angles, success = ik.get_joint_angles([0.0, 0.0, -0.5], 0)
    >>> success
    True
    """

    def __init__(self, hip_offsets_b, upper_leg_length, lower_leg_length,
                 lower_limits=(-np.pi, -np.pi, -np.pi),
                 upper_limits=(np.pi, np.pi, np.pi),
                 knee_sign=-1.0):
        if upper_leg_length <= 0.0 or lower_leg_length <= 0.0:
            raise ValueError('leg lengths must be positive')
        self.hip_offsets_b = np.array(hip_offsets_b, dtype=np.float64)
        self.l1 = float(upper_leg_length)
        self.l2 = float(lower_leg_length)
        self.lower_limits = np.array(lower_limits, dtype=np.float64)
        self.upper_limits = np.array(upper_limits, dtype=np.float64)
        self.knee_sign = 1.0 if knee_sign >= 0 else -1.0

    def get_upper_joint_limits(self, ee):
        return self.upper_limits.copy()

    def get_lower_joint_limits(self, ee):
        return self.lower_limits.copy()

    def get_joint_angles(self, pos_b, ee):
        p = np.asarray(pos_b, dtype=np.float64) - self.hip_offsets_b[ee]
        # abduction brings the foot into the sagittal plane of the leg
        q_haa = np.arctan2(p[1], -p[2])
        r = np.sqrt(p[1] ** 2 + p[2] ** 2)
        x, z = p[0], -r

        success = True
        cos_knee = (x ** 2 + z ** 2 - self.l1 ** 2 - self.l2 ** 2) \
            / (2.0 * self.l1 * self.l2)
        if abs(cos_knee) > 1.0:
            success = False
            cos_knee = np.clip(cos_knee, -1.0, 1.0)
        q_kfe = self.knee_sign * np.arccos(cos_knee)
        alpha = np.arctan2(-x, -z)
        beta = np.arctan2(self.l2 * np.sin(q_kfe),
                          self.l1 + self.l2 * np.cos(q_kfe))
        q_hfe = alpha - beta

        angles = np.array([q_haa, q_hfe, q_kfe])
        if np.any(angles < self.lower_limits) \
                or np.any(angles > self.upper_limits):
            success = False
        if not success:
            logger.debug('no inverse kinematics solution for ee %d at %s',
                         ee, pos_b)
        return angles, success

    def forward_kinematics(self, angles, ee):
        """Foot position in base frame, the inverse of
        :meth:`get_joint_angles`.
        """
        q_haa, q_hfe, q_kfe = angles
        x = -self.l1 * np.sin(q_hfe) - self.l2 * np.sin(q_hfe + q_kfe)
        z = -self.l1 * np.cos(q_hfe) - self.l2 * np.cos(q_hfe + q_kfe)
        c, s = np.cos(q_haa), np.sin(q_haa)
        # rotate the sagittal plane point about the base x axis
        p = np.array([x, -s * z, c * z])
        return p + self.hip_offsets_b[ee]
