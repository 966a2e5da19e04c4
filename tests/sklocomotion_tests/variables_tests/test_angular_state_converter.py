import copy
import unittest

import numpy as np
from numpy import testing

from sklocomotion.coordinates.math import euler_zyx_to_matrix
from sklocomotion.coordinates.math import outer_product_matrix
from sklocomotion.coordinates.math import quaternion2matrix
from sklocomotion.variables import AngularStateConverter
from sklocomotion.variables import NodeSpline
from sklocomotion.variables import NodesVariablesAll
from sklocomotion.variables.angular_state_converter import \
    euler_rate_matrix
from sklocomotion.variables.angular_state_converter import \
    euler_rate_matrix_derivatives
from sklocomotion.variables.angular_state_converter import \
    euler_rate_matrix_second_derivatives


def jacobian_test_util(func, x0, decimal=5):
    # compare the analytic jacobian with central differences
    f0, jac = func(x0)
    n_dim = len(x0)

    eps = 1e-6
    jac_numerical = np.zeros(jac.shape)
    for idx in range(n_dim):
        x1 = copy.copy(x0)
        x2 = copy.copy(x0)
        x1[idx] += eps
        x2[idx] -= eps
        f1, _ = func(x1)
        f2, _ = func(x2)
        jac_numerical[:, idx] = (f1 - f2) / (2 * eps)
    testing.assert_almost_equal(jac, jac_numerical, decimal=decimal)


class TestEulerRateMatrix(unittest.TestCase):

    def test_derivatives(self):
        euler = np.array([0.4, -0.3, 1.1])
        dM = euler_rate_matrix_derivatives(euler)
        ddM = euler_rate_matrix_second_derivatives(euler)
        eps = 1e-6
        for i in range(3):
            e = np.zeros(3)
            e[i] = eps
            testing.assert_almost_equal(
                dM[i],
                (euler_rate_matrix(euler + e)
                 - euler_rate_matrix(euler - e)) / (2 * eps),
                decimal=6)
            testing.assert_almost_equal(
                ddM[i],
                (euler_rate_matrix_derivatives(euler + e)
                 - euler_rate_matrix_derivatives(euler - e)) / (2 * eps),
                decimal=6)


class TestAngularStateConverter(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        nodes = NodesVariablesAll('euler', 4, 3)
        rng = np.random.RandomState(3)
        nodes.set_variables(rng.uniform(-0.8, 0.8, nodes.get_rows()))
        cls.nodes = nodes
        cls.spline = NodeSpline(nodes, poly_durations=[0.3, 0.3, 0.4])
        cls.converter = AngularStateConverter(cls.spline)

    def test_angular_velocity(self):
        # [w]x equals dR/dt R^T
        t = 0.45
        eps = 1e-6
        rot = self.converter.get_rotation_matrix_base_to_world(t)
        rot_dot = (self.converter.get_rotation_matrix_base_to_world(t + eps)
                   - self.converter.get_rotation_matrix_base_to_world(
                       t - eps)) / (2 * eps)
        w = self.converter.get_angular_velocity_in_world(t)
        testing.assert_almost_equal(
            outer_product_matrix(w), rot_dot.dot(rot.T), decimal=5)

    def test_angular_acceleration(self):
        t = 0.45
        eps = 1e-6
        wd = self.converter.get_angular_acceleration_in_world(t)
        numerical = (self.converter.get_angular_velocity_in_world(t + eps)
                     - self.converter.get_angular_velocity_in_world(t - eps)) \
            / (2 * eps)
        testing.assert_almost_equal(wd, numerical, decimal=4)

    def test_get_state(self):
        t = 0.7
        quaternion, w, wd = AngularStateConverter.get_state(
            self.spline.get_point(t))
        testing.assert_almost_equal(
            quaternion2matrix(quaternion),
            euler_zyx_to_matrix(self.spline.get_point(t).p))
        testing.assert_almost_equal(
            quaternion2matrix(
                self.converter.get_quaternion_base_to_world(t)),
            self.converter.get_rotation_matrix_base_to_world(t))
        testing.assert_almost_equal(
            w, self.converter.get_angular_velocity_in_world(t))
        testing.assert_almost_equal(
            wd, self.converter.get_angular_acceleration_in_world(t))

    def test_jacobians(self):
        nodes = self.nodes
        converter = self.converter
        x0 = nodes.get_values()
        v = np.array([0.2, -0.1, -0.5])
        for t in (0.1, 0.45, 1.0):
            def func_w(x):
                nodes.set_variables(x)
                return (converter.get_angular_velocity_in_world(t),
                        converter.get_derivative_of_angular_velocity_wrt_coeff(t).toarray())  # NOQA

            def func_wd(x):
                nodes.set_variables(x)
                return (converter.get_angular_acceleration_in_world(t),
                        converter.get_derivative_of_angular_acceleration_wrt_coeff(t).toarray())  # NOQA

            def func_rotated(x):
                nodes.set_variables(x)
                rot = converter.get_rotation_matrix_base_to_world(t)
                return (rot.dot(v),
                        converter.get_derivative_of_rotation_matrix_wrt_coeff(
                            t, v).toarray())

            def func_inverse_rotated(x):
                nodes.set_variables(x)
                rot = converter.get_rotation_matrix_base_to_world(t)
                return (rot.T.dot(v),
                        converter.get_derivative_of_rotation_matrix_wrt_coeff(
                            t, v, inverse=True).toarray())

            jacobian_test_util(func_w, x0.copy())
            jacobian_test_util(func_wd, x0.copy(), decimal=4)
            jacobian_test_util(func_rotated, x0.copy())
            jacobian_test_util(func_inverse_rotated, x0.copy())
        nodes.set_variables(x0)
