"""Single rigid body dynamics of a legged robot.

The body is a rigid body of constant mass and inertia pushed by the
endeffector forces. With ``c`` the center of mass, ``p_i`` and ``f_i`` the
endeffector positions and forces the residual

.. math::
    \\begin{array}{l}
    I_w \\dot{\\omega} + \\omega \\times I_w \\omega
        - \\sum_i (p_i - c) \\times f_i \\\\
    m \\ddot{c} - \\sum_i f_i - m g
    \\end{array}

is zero for a physically consistent motion.
"""

import numpy as np
from scipy import sparse

from sklocomotion.coordinates.math import outer_product_matrix


GRAVITY = 9.80665

AX = 0
LX = 3


def build_inertia_tensor(ixx, iyy, izz, ixy=0.0, ixz=0.0, iyz=0.0):
    return np.array([[ixx, ixy, ixz],
                     [ixy, iyy, iyz],
                     [ixz, iyz, izz]])


class SingleRigidBodyDynamics(object):
    """Newton-Euler residual of a single rigid body.

    Call :meth:`set_current` with the state at one time, then query the
    violation and its Jacobians.

    Parameters
    ----------
    mass : float
        mass of the body in kg.
    inertia_b : numpy.ndarray
        3x3 inertia tensor in base frame.
    n_ee : int
        number of endeffectors.
    gravity : float
        magnitude of gravity along -z.
    """

    def __init__(self, mass, inertia_b, n_ee, gravity=GRAVITY):
        if mass <= 0.0:
            raise ValueError('mass must be positive, got {}'.format(mass))
        inertia_b = np.array(inertia_b, dtype=np.float64)
        if inertia_b.shape != (3, 3):
            raise ValueError(
                'inertia must be a 3x3 matrix, got {}'.format(
                    inertia_b.shape))
        self.mass = float(mass)
        self.inertia_b = inertia_b
        self.n_ee = n_ee
        self.g = gravity

        self.com_pos = np.zeros(3)
        self.com_acc = np.zeros(3)
        self.w_R_b = np.eye(3)
        self.omega = np.zeros(3)
        self.omega_dot = np.zeros(3)
        self.ee_forces = np.zeros((n_ee, 3))
        self.ee_pos = np.zeros((n_ee, 3))

    def m(self):
        return self.mass

    def set_current(self, com_pos, com_acc, w_R_b, omega, omega_dot,
                    ee_forces, ee_pos):
        """Set the state the residual and its Jacobians are taken at.

        Parameters
        ----------
        com_pos : numpy.ndarray
            center of mass position in world.
        com_acc : numpy.ndarray
            center of mass acceleration in world.
        w_R_b : numpy.ndarray
            rotation from base to world.
        omega : numpy.ndarray
            angular velocity in world.
        omega_dot : numpy.ndarray
            angular acceleration in world.
        ee_forces : numpy.ndarray
            (n_ee, 3) forces acting on the body in world.
        ee_pos : numpy.ndarray
            (n_ee, 3) endeffector positions in world.
        """
        self.com_pos = np.asarray(com_pos, dtype=np.float64)
        self.com_acc = np.asarray(com_acc, dtype=np.float64)
        self.w_R_b = np.asarray(w_R_b, dtype=np.float64)
        self.omega = np.asarray(omega, dtype=np.float64)
        self.omega_dot = np.asarray(omega_dot, dtype=np.float64)
        self.ee_forces = np.asarray(ee_forces, dtype=np.float64)
        self.ee_pos = np.asarray(ee_pos, dtype=np.float64)

    def get_inertia_in_world(self):
        return self.w_R_b.dot(self.inertia_b).dot(self.w_R_b.T)

    def get_dynamic_violation(self):
        """Residual of the angular (first 3) and linear (last 3) dynamics."""
        f_sum = np.zeros(3)
        tau_sum = np.zeros(3)
        for f, p in zip(self.ee_forces, self.ee_pos):
            f_sum += f
            tau_sum += np.cross(p - self.com_pos, f)
        I_w = self.get_inertia_in_world()
        violation = np.zeros(6)
        violation[AX:AX + 3] = (I_w.dot(self.omega_dot)
                                + np.cross(self.omega, I_w.dot(self.omega))
                                - tau_sum)
        violation[LX:LX + 3] = (self.mass * self.com_acc - f_sum
                                - self.mass * np.array([0.0, 0.0, -self.g]))
        return violation

    def get_jacobian_wrt_base_lin(self, jac_pos, jac_acc):
        """Jacobian wrt base linear variables.

        Parameters
        ----------
        jac_pos : scipy.sparse.spmatrix
            (3, n) Jacobian of the center of mass position.
        jac_acc : scipy.sparse.spmatrix
            (3, n) Jacobian of the center of mass acceleration.

        Returns
        -------
        jac : scipy.sparse.csr_matrix
            (6, n) matrix.
        """
        # the torques depend on the lever arms p_i - c
        f_sum = np.sum(self.ee_forces, axis=0)
        jac_ang = sparse.csr_matrix(-outer_product_matrix(f_sum)).dot(jac_pos)
        jac_lin = self.mass * sparse.csr_matrix(jac_acc)
        return sparse.vstack([jac_ang, jac_lin], format='csr')

    def get_jacobian_wrt_base_ang(self, dR, jac_euler, jac_omega,
                                  jac_omega_dot):
        """Jacobian wrt base angular variables.

        Parameters
        ----------
        dR : numpy.ndarray
            (3, 3, 3) derivatives of ``w_R_b`` wrt each euler angle.
        jac_euler : scipy.sparse.spmatrix
            (3, n) Jacobian of the euler angles.
        jac_omega : scipy.sparse.spmatrix
            (3, n) Jacobian of the angular velocity.
        jac_omega_dot : scipy.sparse.spmatrix
            (3, n) Jacobian of the angular acceleration.

        Returns
        -------
        jac : scipy.sparse.csr_matrix
            (6, n) matrix.
        """
        I_w = self.get_inertia_in_world()
        skew_omega = outer_product_matrix(self.omega)
        d_inertia = np.zeros((3, 3))
        for i in range(3):
            dI_w = (dR[i].dot(self.inertia_b).dot(self.w_R_b.T)
                    + self.w_R_b.dot(self.inertia_b).dot(dR[i].T))
            d_inertia[:, i] = (dI_w.dot(self.omega_dot)
                               + skew_omega.dot(dI_w.dot(self.omega)))
        d_omega = skew_omega.dot(I_w) - outer_product_matrix(
            I_w.dot(self.omega))
        jac_ang = (sparse.csr_matrix(I_w).dot(jac_omega_dot)
                   + sparse.csr_matrix(d_omega).dot(jac_omega)
                   + sparse.csr_matrix(d_inertia).dot(jac_euler))
        jac_lin = sparse.csr_matrix((3, jac_ang.shape[1]))
        return sparse.vstack([jac_ang, jac_lin], format='csr')

    def get_jacobian_wrt_force(self, jac_force, ee):
        """Jacobian wrt variables moving the force of endeffector ``ee``."""
        lever = self.ee_pos[ee] - self.com_pos
        jac_force = sparse.csr_matrix(jac_force)
        jac_ang = sparse.csr_matrix(-outer_product_matrix(lever)).dot(
            jac_force)
        return sparse.vstack([jac_ang, -jac_force], format='csr')

    def get_jacobian_wrt_ee_pos(self, jac_ee_pos, ee):
        """Jacobian wrt variables moving the position of endeffector ``ee``."""
        force = self.ee_forces[ee]
        jac_ee_pos = sparse.csr_matrix(jac_ee_pos)
        jac_ang = sparse.csr_matrix(outer_product_matrix(force)).dot(
            jac_ee_pos)
        jac_lin = sparse.csr_matrix((3, jac_ee_pos.shape[1]))
        return sparse.vstack([jac_ang, jac_lin], format='csr')
