import collections

import numpy as np

from sklocomotion.variables.polynomial import State


AngularState = collections.namedtuple('AngularState', ['q', 'w', 'wd'])


def _vector(value):
    if value is None:
        return np.zeros(3)
    value = np.array(value, dtype=np.float64)
    if value.shape != (3,):
        raise ValueError('expected a 3d vector, got shape {}'.format(
            value.shape))
    return value


class BaseState(object):
    """Linear and euler angle state of the robot base.

    Parameters
    ----------
    lin_pos : list or numpy.ndarray, optional
        position in world.
    lin_vel : list or numpy.ndarray, optional
        linear velocity in world.
    ang_pos : list or numpy.ndarray, optional
        euler angles [roll, pitch, yaw].
    ang_vel : list or numpy.ndarray, optional
        euler rates.
    """

    def __init__(self, lin_pos=None, lin_vel=None, ang_pos=None,
                 ang_vel=None):
        self.lin = State(_vector(lin_pos), _vector(lin_vel), np.zeros(3))
        self.ang = State(_vector(ang_pos), _vector(ang_vel), np.zeros(3))

    def __repr__(self):
        return '<BaseState lin={} ang={}>'.format(
            self.lin.p.tolist(), self.ang.p.tolist())


class RobotStateCartesian(object):
    """Snapshot of base and endeffectors at one time.

    Attributes
    ----------
    t : float
        global time.
    base_lin : sklocomotion.variables.State
        base position, velocity and acceleration.
    base_ang : AngularState
        quaternion [w, x, y, z], angular velocity and acceleration in world.
    ee_contact : list[bool]
        contact flag of every endeffector.
    ee_motion : list[sklocomotion.variables.State]
        position, velocity and acceleration of every endeffector.
    ee_force : numpy.ndarray
        (n_ee, 3) endeffector forces.
    """

    def __init__(self, t, base_lin, base_ang, ee_contact, ee_motion,
                 ee_force):
        self.t = t
        self.base_lin = base_lin
        self.base_ang = base_ang
        self.ee_contact = ee_contact
        self.ee_motion = ee_motion
        self.ee_force = ee_force

    @property
    def n_ee(self):
        return len(self.ee_contact)

    def __repr__(self):
        return '<RobotStateCartesian t={:.3f} contact={}>'.format(
            self.t, self.ee_contact)
