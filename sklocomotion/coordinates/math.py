from __future__ import absolute_import

import math
from math import pi

import numpy as np


# epsilon for testing whether a number is close to zero
_EPS = np.finfo(float).eps * 4.0

# half width of the band around +-pi/2 pitch treated as gimbal lock
GIMBAL_TOLERANCE = 1e-3


def rotation_matrix(theta, axis):
    """Return the rotation matrix about a principal axis.

    Parameters
    ----------
    theta : float
        radian
    axis : str
        rotation axis, one of 'x', 'y', 'z'.

    Returns
    -------
    rot : numpy.ndarray
        3x3 rotation matrix of counterclockwise rotation by theta.

    Examples
    --------
    >>> import numpy as np
    >>> from sklocomotion.coordinates.math import rotation_matrix
    >>> rotation_matrix(np.pi / 2.0, 'z').round(3)
    array([[ 0., -1.,  0.],
           [ 1.,  0.,  0.],
           [ 0.,  0.,  1.]])
    """
    c = np.cos(theta)
    s = np.sin(theta)
    if axis == 'x':
        return np.array([[1.0, 0.0, 0.0],
                         [0.0, c, -s],
                         [0.0, s, c]])
    elif axis == 'y':
        return np.array([[c, 0.0, s],
                         [0.0, 1.0, 0.0],
                         [-s, 0.0, c]])
    elif axis == 'z':
        return np.array([[c, -s, 0.0],
                         [s, c, 0.0],
                         [0.0, 0.0, 1.0]])
    raise ValueError('axis must be one of x, y, z, got {}'.format(axis))


def _rotation_matrix_derivative(theta, axis):
    c = np.cos(theta)
    s = np.sin(theta)
    if axis == 'x':
        return np.array([[0.0, 0.0, 0.0],
                         [0.0, -s, -c],
                         [0.0, c, -s]])
    elif axis == 'y':
        return np.array([[-s, 0.0, c],
                         [0.0, 0.0, 0.0],
                         [-c, 0.0, -s]])
    return np.array([[-s, -c, 0.0],
                     [c, -s, 0.0],
                     [0.0, 0.0, 0.0]])


def rpy_matrix(az, ay, ax):
    """Return rotation matrix from yaw-pitch-roll

    This function creates a new rotation matrix which has been
    rotated ax radian around x-axis in WORLD, ay radian around y-axis in WORLD,
    and az radian around z axis in WORLD, in this order, i.e.
    ``Rz(az) Ry(ay) Rx(ax)``. These angles can be extracted by
    the rpy_angle function.

    Parameters
    ----------
    az : float
        rotated around z-axis(yaw) in radian.
    ay : float
        rotated around y-axis(pitch) in radian.
    ax : float
        rotated around x-axis(roll) in radian.

    Returns
    -------
    r : numpy.ndarray
        rotation matrix
    """
    return rotation_matrix(az, 'z').dot(
        rotation_matrix(ay, 'y')).dot(rotation_matrix(ax, 'x'))


def euler_zyx_to_matrix(euler):
    """Rotation matrix of euler angles given in (roll, pitch, yaw) order.

    Parameters
    ----------
    euler : list or numpy.ndarray
        [roll, pitch, yaw] in radian.

    Returns
    -------
    r : numpy.ndarray
        ``Rz(yaw) Ry(pitch) Rx(roll)``, mapping base to world.
    """
    roll, pitch, yaw = euler
    return rpy_matrix(yaw, pitch, roll)


def euler_zyx_matrix_derivatives(euler):
    """Partial derivatives of ``euler_zyx_to_matrix`` wrt each angle.

    Parameters
    ----------
    euler : list or numpy.ndarray
        [roll, pitch, yaw] in radian.

    Returns
    -------
    dR : numpy.ndarray
        (3, 3, 3) array, ``dR[i]`` is the derivative wrt ``euler[i]``.
    """
    roll, pitch, yaw = euler
    rx = rotation_matrix(roll, 'x')
    ry = rotation_matrix(pitch, 'y')
    rz = rotation_matrix(yaw, 'z')
    drx = _rotation_matrix_derivative(roll, 'x')
    dry = _rotation_matrix_derivative(pitch, 'y')
    drz = _rotation_matrix_derivative(yaw, 'z')
    return np.array([rz.dot(ry).dot(drx),
                     rz.dot(dry).dot(rx),
                     drz.dot(ry).dot(rx)])


def rpy_angle(matrix):
    """Decomposing a rotation matrix to yaw-pitch-roll.

    Parameters
    ----------
    matrix : list or numpy.ndarray
        3x3 rotation matrix

    Returns
    -------
    rpy : tuple(numpy.ndarray, numpy.ndarray)
        pair of rpy in yaw-pitch-roll order.
    """
    matrix = np.asarray(matrix, dtype=np.float64)
    if np.sqrt(matrix[1, 0] ** 2 + matrix[0, 0] ** 2) < _EPS:
        a = 0.0
    else:
        a = np.arctan2(matrix[1, 0], matrix[0, 0])
    sa = np.sin(a)
    ca = np.cos(a)
    b = np.arctan2(-matrix[2, 0], ca * matrix[0, 0] + sa * matrix[1, 0])
    c = np.arctan2(sa * matrix[0, 2] - ca * matrix[1, 2],
                   -sa * matrix[0, 1] + ca * matrix[1, 1])
    rpy = np.array([a, b, c])

    a = a + np.pi
    sa = np.sin(a)
    ca = np.cos(a)
    b = np.arctan2(-matrix[2, 0], ca * matrix[0, 0] + sa * matrix[1, 0])
    c = np.arctan2(sa * matrix[0, 2] - ca * matrix[1, 2],
                   -sa * matrix[0, 1] + ca * matrix[1, 1])
    return rpy, np.array([a, b, c])


def matrix2quaternion(m):
    """Returns quaternion of given rotation matrix.

    Parameters
    ----------
    m : list or numpy.ndarray
        3x3 rotation matrix

    Returns
    -------
    quaternion : numpy.ndarray
        quaternion [w, x, y, z] order

    Examples
    --------
    >>> import numpy as np
    >>> from sklocomotion.coordinates.math import matrix2quaternion
    >>> matrix2quaternion(np.eye(3))
    array([1., 0., 0., 0.])
    """
    m = np.array(m, dtype=np.float64)
    tr = m[0, 0] + m[1, 1] + m[2, 2]
    if tr > 0:
        S = math.sqrt(tr + 1.0) * 2
        qw = 0.25 * S
        qx = (m[2, 1] - m[1, 2]) / S
        qy = (m[0, 2] - m[2, 0]) / S
        qz = (m[1, 0] - m[0, 1]) / S
    elif (m[0, 0] > m[1, 1]) and (m[0, 0] > m[2, 2]):
        S = math.sqrt(1. + m[0, 0] - m[1, 1] - m[2, 2]) * 2
        qw = (m[2, 1] - m[1, 2]) / S
        qx = 0.25 * S
        qy = (m[0, 1] + m[1, 0]) / S
        qz = (m[0, 2] + m[2, 0]) / S
    elif m[1, 1] > m[2, 2]:
        S = math.sqrt(1. + m[1, 1] - m[0, 0] - m[2, 2]) * 2
        qw = (m[0, 2] - m[2, 0]) / S
        qx = (m[0, 1] + m[1, 0]) / S
        qy = 0.25 * S
        qz = (m[1, 2] + m[2, 1]) / S
    else:
        S = math.sqrt(1. + m[2, 2] - m[0, 0] - m[1, 1]) * 2
        qw = (m[1, 0] - m[0, 1]) / S
        qx = (m[0, 2] + m[2, 0]) / S
        qy = (m[1, 2] + m[2, 1]) / S
        qz = 0.25 * S
    return np.array([qw, qx, qy, qz])


def quaternion2matrix(q):
    """Returns matrix of given quaternion.

    Parameters
    ----------
    q : list or numpy.ndarray
        quaternion [w, x, y, z] order, normalized before conversion.

    Returns
    -------
    rot : numpy.ndarray
        3x3 rotation matrix

    Examples
    --------
    >>> from sklocomotion.coordinates.math import quaternion2matrix
    >>> quaternion2matrix([1, 0, 0, 0])
    array([[1., 0., 0.],
           [0., 1., 0.],
           [0., 0., 1.]])
    """
    q = np.array(q, dtype=np.float64)
    norm = np.linalg.norm(q)
    if norm < _EPS:
        raise ValueError('quaternion of zero norm can not be converted')
    q0, q1, q2, q3 = q / norm

    m = np.zeros((3, 3))
    m[0, 0] = q0 * q0 + q1 * q1 - q2 * q2 - q3 * q3
    m[0, 1] = 2 * (q1 * q2 - q0 * q3)
    m[0, 2] = 2 * (q1 * q3 + q0 * q2)

    m[1, 0] = 2 * (q1 * q2 + q0 * q3)
    m[1, 1] = q0 * q0 - q1 * q1 + q2 * q2 - q3 * q3
    m[1, 2] = 2 * (q2 * q3 - q0 * q1)

    m[2, 0] = 2 * (q1 * q3 - q0 * q2)
    m[2, 1] = 2 * (q2 * q3 + q0 * q1)
    m[2, 2] = q0 * q0 - q1 * q1 - q2 * q2 + q3 * q3
    return m


def outer_product_matrix(v):
    """Returns outer product matrix of given v.

    Returns following outer product matrix.

    .. math::
        \\left(
            \\begin{array}{ccc}
              0 & -v_2 & v_1 \\\\
              v_2 & 0 & -v_0 \\\\
              -v_1 & v_0 & 0
            \\end{array}
        \\right)

    Parameters
    ----------
    v : numpy.ndarray or list
        [x, y, z]

    Returns
    -------
    matrix : numpy.ndarray
        3x3 skew symmetric matrix, ``outer_product_matrix(a).dot(b)``
        equals ``cross(a, b)``.
    """
    return np.array([[0.0, -v[2], v[1]],
                     [v[2], 0.0, -v[0]],
                     [-v[1], v[0], 0.0]])


def wrap_angle(angle):
    """Wrap an angle into [-pi, pi).

    Angles already inside the interval are returned unchanged so that
    wrapping is exactly idempotent.
    """
    if -pi <= angle < pi:
        return angle
    wrapped = math.fmod(angle + pi, 2.0 * pi)
    if wrapped < 0.0:
        wrapped += 2.0 * pi
    wrapped -= pi
    if wrapped >= pi:
        wrapped = -pi
    return wrapped


def _flip_by_pi(angle):
    if angle < 0:
        return angle + pi
    return angle - pi


def unique_euler_zyx(zyx_non_unique, tol=GIMBAL_TOLERANCE):
    """Returns unique Euler angles in [-pi,pi),[-pi/2,pi/2],[-pi,pi).

    Euler ZYX angles are not unique: (yaw + pi, pi - pitch, roll + pi)
    describes the same orientation as (yaw, pitch, roll), and at a pitch of
    +-pi/2 only a combination of yaw and roll is defined. A pitch beyond
    +-pi/2 is first flipped back into [-pi/2, pi/2]. Within ``tol`` of
    +-pi/2 roll is then collapsed to zero and absorbed into yaw, as
    ``yaw - roll`` at +pi/2 and ``yaw + roll`` at -pi/2. These are the
    signs that leave the rotation unchanged, ``yaw + roll`` at +pi/2 would
    describe a different orientation.

    A pitch of exactly +pi/2 has no representative below pi/2, so it is the
    only value returned on the upper end of the pitch interval.

    Parameters
    ----------
    zyx_non_unique : list or numpy.ndarray
        [yaw, pitch, roll] in radian.
    tol : float
        half width of the gimbal band around +-pi/2.

    Returns
    -------
    zyx : numpy.ndarray
        canonical [yaw, pitch, roll].

    Examples
    --------
    >>> import numpy as np
    >>> from sklocomotion.coordinates.math import unique_euler_zyx
    >>> unique_euler_zyx([0.5, np.pi / 2 + 1.0, 0.0])
    array([-2.64159265,  0.57079633, -3.14159265])
    >>> unique_euler_zyx([0.3, np.pi / 2 + 5e-4, 0.4])
    array([-0.1       ,  1.57029633,  0.        ])
    """
    yaw, pitch, roll = [wrap_angle(float(a)) for a in zyx_non_unique]

    if pitch < -pi / 2:
        yaw = _flip_by_pi(yaw)
        pitch = -pi - pitch
        roll = _flip_by_pi(roll)
    elif pitch > pi / 2:
        yaw = _flip_by_pi(yaw)
        pitch = pi - pitch
        roll = _flip_by_pi(roll)

    if pitch <= -pi / 2 + tol:
        # only yaw + roll is observable
        yaw = wrap_angle(yaw + roll)
        roll = 0.0
    elif pitch >= pi / 2 - tol:
        # only yaw - roll is observable
        yaw = wrap_angle(yaw - roll)
        roll = 0.0

    return np.array([yaw, pitch, roll])


def matrix2euler_zyx(matrix):
    """Canonical euler angles in (roll, pitch, yaw) order of a rotation.

    Parameters
    ----------
    matrix : numpy.ndarray
        3x3 rotation matrix mapping base to world.

    Returns
    -------
    euler : numpy.ndarray
        [roll, pitch, yaw] such that ``euler_zyx_to_matrix`` reproduces
        ``matrix``.
    """
    zyx = unique_euler_zyx(rpy_angle(matrix)[0])
    return zyx[::-1].copy()
