"""Angular state of the base from a spline of euler angles.

The base orientation is parameterized by euler angles ``u = (roll, pitch,
yaw)`` with ``R = Rz(yaw) Ry(pitch) Rx(roll)``. The angular velocity in world
frame is ``w = M(u) ud`` and its derivative ``wd = M(u) udd + Md(u, ud) ud``.
"""

import numpy as np
from scipy import sparse

from sklocomotion.coordinates.math import euler_zyx_matrix_derivatives
from sklocomotion.coordinates.math import euler_zyx_to_matrix
from sklocomotion.coordinates.math import matrix2quaternion
from sklocomotion.variables.polynomial import ACC
from sklocomotion.variables.polynomial import POS
from sklocomotion.variables.polynomial import VEL


def euler_rate_matrix(euler):
    """Matrix ``M`` mapping euler rates to angular velocity in world."""
    _, pitch, yaw = euler
    cy, sy = np.cos(pitch), np.sin(pitch)
    cz, sz = np.cos(yaw), np.sin(yaw)
    return np.array([[cy * cz, -sz, 0.0],
                     [cy * sz, cz, 0.0],
                     [-sy, 0.0, 1.0]])


def euler_rate_matrix_derivatives(euler):
    """``dM[i]`` is the derivative of ``M`` wrt ``euler[i]``."""
    _, pitch, yaw = euler
    cy, sy = np.cos(pitch), np.sin(pitch)
    cz, sz = np.cos(yaw), np.sin(yaw)
    dM = np.zeros((3, 3, 3))
    dM[1] = [[-sy * cz, 0.0, 0.0],
             [-sy * sz, 0.0, 0.0],
             [-cy, 0.0, 0.0]]
    dM[2] = [[-cy * sz, -cz, 0.0],
             [cy * cz, -sz, 0.0],
             [0.0, 0.0, 0.0]]
    return dM


def euler_rate_matrix_second_derivatives(euler):
    """``ddM[i, j]`` is the derivative of ``M`` wrt ``euler[i]`` and ``[j]``."""
    _, pitch, yaw = euler
    cy, sy = np.cos(pitch), np.sin(pitch)
    cz, sz = np.cos(yaw), np.sin(yaw)
    ddM = np.zeros((3, 3, 3, 3))
    ddM[1, 1] = [[-cy * cz, 0.0, 0.0],
                 [-cy * sz, 0.0, 0.0],
                 [sy, 0.0, 0.0]]
    ddM[1, 2] = [[sy * sz, 0.0, 0.0],
                 [-sy * cz, 0.0, 0.0],
                 [0.0, 0.0, 0.0]]
    ddM[2, 1] = ddM[1, 2]
    ddM[2, 2] = [[-cy * cz, sz, 0.0],
                 [-cy * sz, -cz, 0.0],
                 [0.0, 0.0, 0.0]]
    return ddM


def _columns(matrices, v):
    # column i is matrices[i].dot(v)
    return np.stack([m.dot(v) for m in matrices], axis=1)


def get_angular_velocity(euler, euler_rates):
    return euler_rate_matrix(euler).dot(euler_rates)


def get_angular_acceleration(euler, euler_rates, euler_accs):
    dM = euler_rate_matrix_derivatives(euler)
    Md = np.tensordot(euler_rates, dM, axes=1)
    return euler_rate_matrix(euler).dot(euler_accs) + Md.dot(euler_rates)


class AngularStateConverter(object):
    """World frame angular state and its Jacobians from an euler spline.

    Parameters
    ----------
    euler : sklocomotion.variables.NodeSpline
        three dimensional spline of (roll, pitch, yaw).
    """

    def __init__(self, euler):
        self.euler = euler

    @staticmethod
    def get_state(euler_state):
        """Quaternion, angular velocity and acceleration of an euler state.

        Parameters
        ----------
        euler_state : sklocomotion.variables.State
            euler angles, rates and accelerations.

        Returns
        -------
        quaternion : numpy.ndarray
            [w, x, y, z] base to world.
        w : numpy.ndarray
            angular velocity in world frame.
        wd : numpy.ndarray
            angular acceleration in world frame.
        """
        u, ud, udd = euler_state
        quaternion = matrix2quaternion(euler_zyx_to_matrix(u))
        return (quaternion,
                get_angular_velocity(u, ud),
                get_angular_acceleration(u, ud, udd))

    def get_rotation_matrix_base_to_world(self, t):
        return euler_zyx_to_matrix(self.euler.get_point(t).p)

    def get_quaternion_base_to_world(self, t):
        return matrix2quaternion(self.get_rotation_matrix_base_to_world(t))

    def get_angular_velocity_in_world(self, t):
        state = self.euler.get_point(t)
        return get_angular_velocity(state.p, state.v)

    def get_angular_acceleration_in_world(self, t):
        state = self.euler.get_point(t)
        return get_angular_acceleration(state.p, state.v, state.a)

    def get_derivative_of_angular_velocity_wrt_coeff(self, t):
        """Jacobian of ``w(t)`` wrt the euler spline variables.

        Returns
        -------
        jac : scipy.sparse.csr_matrix
            (3, n_vars) matrix.
        """
        u, ud, _ = self.euler.get_point(t)
        jac_u = self.euler.get_jacobian_wrt_nodes(t, POS)
        jac_ud = self.euler.get_jacobian_wrt_nodes(t, VEL)
        dw_du = _columns(euler_rate_matrix_derivatives(u), ud)
        return sparse.csr_matrix(
            sparse.csr_matrix(dw_du).dot(jac_u)
            + sparse.csr_matrix(euler_rate_matrix(u)).dot(jac_ud))

    def get_derivative_of_angular_acceleration_wrt_coeff(self, t):
        """Jacobian of ``wd(t)`` wrt the euler spline variables.

        Returns
        -------
        jac : scipy.sparse.csr_matrix
            (3, n_vars) matrix.
        """
        u, ud, udd = self.euler.get_point(t)
        jac_u = self.euler.get_jacobian_wrt_nodes(t, POS)
        jac_ud = self.euler.get_jacobian_wrt_nodes(t, VEL)
        jac_udd = self.euler.get_jacobian_wrt_nodes(t, ACC)

        dM = euler_rate_matrix_derivatives(u)
        ddM = euler_rate_matrix_second_derivatives(u)
        Md = np.tensordot(ud, dM, axes=1)

        # wd = M udd + Md ud, Md is linear in ud
        dwd_du = _columns(dM, udd)
        dwd_du += np.stack(
            [np.tensordot(ud, ddM[:, k], axes=1).dot(ud) for k in range(3)],
            axis=1)
        dwd_dud = Md + _columns(dM, ud)
        return sparse.csr_matrix(
            sparse.csr_matrix(dwd_du).dot(jac_u)
            + sparse.csr_matrix(dwd_dud).dot(jac_ud)
            + sparse.csr_matrix(euler_rate_matrix(u)).dot(jac_udd))

    def get_derivative_of_rotation_matrix_wrt_coeff(self, t, v, inverse=False):
        """Jacobian of a rotated constant vector wrt the spline variables.

        Parameters
        ----------
        t : float
            global time.
        v : numpy.ndarray
            vector held constant.
        inverse : bool
            if True the Jacobian of ``R(t)^T v`` is returned, otherwise
            of ``R(t) v``.

        Returns
        -------
        jac : scipy.sparse.csr_matrix
            (3, n_vars) matrix.
        """
        u = self.euler.get_point(t).p
        dR = euler_zyx_matrix_derivatives(u)
        if inverse:
            dR = np.transpose(dR, (0, 2, 1))
        jac_u = self.euler.get_jacobian_wrt_nodes(t, POS)
        return sparse.csr_matrix(
            sparse.csr_matrix(_columns(dR, v)).dot(jac_u))
