import unittest

import numpy as np
from numpy import testing

from sklocomotion.coordinates.math import euler_zyx_to_matrix
from sklocomotion.models import KinematicModel
from sklocomotion.models import RobotModel
from sklocomotion.models import SingleRigidBodyDynamics
from sklocomotion.models import ThreeJointLegInverseKinematics
from sklocomotion.models.dynamic_model import build_inertia_tensor


class TestKinematicModel(unittest.TestCase):

    def test_getters(self):
        model = KinematicModel([[0.3, 0.2, -0.5], [0.3, -0.2, -0.5]],
                               [0.1, 0.05, 0.1])
        self.assertEqual(model.get_number_of_endeffectors(), 2)
        testing.assert_equal(model.get_maximum_deviation_from_nominal(),
                             [0.1, 0.05, 0.1])
        # returned arrays are copies
        model.get_nominal_stance_in_base()[0, 0] = 10.0
        self.assertEqual(model.nominal_stance[0, 0], 0.3)

    def test_invalid_arguments(self):
        with self.assertRaises(ValueError):
            KinematicModel([0.3, 0.2, -0.5], [0.1, 0.1, 0.1])
        with self.assertRaises(ValueError):
            KinematicModel([[0.3, 0.2, -0.5]], [0.1, 0.1])
        with self.assertRaises(ValueError):
            KinematicModel([[0.3, 0.2, -0.5]], [0.1, -0.1, 0.1])

    def test_robot_model(self):
        model = RobotModel.from_parameters(
            [[0.0, 0.0, -0.58]], [0.25, 0.15, 0.2], 20.0, np.eye(3))
        self.assertEqual(model.n_ee, 1)
        with self.assertRaises(ValueError):
            RobotModel(model.kinematic_model,
                       SingleRigidBodyDynamics(20.0, np.eye(3), 2))


class TestSingleRigidBodyDynamics(unittest.TestCase):

    def test_static_equilibrium(self):
        model = SingleRigidBodyDynamics(10.0, np.eye(3), 2)
        weight = 10.0 * model.g
        model.set_current(
            com_pos=[0.0, 0.0, 0.5], com_acc=np.zeros(3),
            w_R_b=np.eye(3), omega=np.zeros(3), omega_dot=np.zeros(3),
            ee_forces=[[0.0, 0.0, weight / 2], [0.0, 0.0, weight / 2]],
            ee_pos=[[0.2, 0.1, 0.0], [-0.2, -0.1, 0.0]])
        testing.assert_almost_equal(model.get_dynamic_violation(),
                                    np.zeros(6))

    def test_violation(self):
        inertia_b = build_inertia_tensor(0.5, 1.0, 1.5, ixz=0.1)
        model = SingleRigidBodyDynamics(10.0, inertia_b, 1, gravity=10.0)
        w_R_b = euler_zyx_to_matrix([0.1, 0.2, 0.3])
        omega = np.array([0.1, -0.2, 0.3])
        omega_dot = np.array([1.0, 0.0, -1.0])
        force = np.array([1.0, 2.0, 50.0])
        lever = np.array([0.2, 0.0, -0.5])
        model.set_current([0.0, 0.0, 0.5], [0.1, 0.0, 0.0], w_R_b, omega,
                          omega_dot, [force], [[0.2, 0.0, 0.0]])
        I_w = w_R_b.dot(inertia_b).dot(w_R_b.T)
        testing.assert_almost_equal(model.get_inertia_in_world(), I_w)
        violation = model.get_dynamic_violation()
        testing.assert_almost_equal(
            violation[:3],
            I_w.dot(omega_dot) + np.cross(omega, I_w.dot(omega))
            - np.cross(lever, force))
        testing.assert_almost_equal(
            violation[3:], [1.0 - 1.0, -2.0, -50.0 + 100.0])

    def test_invalid_arguments(self):
        with self.assertRaises(ValueError):
            SingleRigidBodyDynamics(0.0, np.eye(3), 1)
        with self.assertRaises(ValueError):
            SingleRigidBodyDynamics(1.0, np.eye(2), 1)


class TestThreeJointLegInverseKinematics(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.ik = ThreeJointLegInverseKinematics(
            [[0.3, 0.2, 0.0], [0.3, -0.2, 0.0]], 0.35, 0.33)

    def test_round_trip(self):
        for ee, pos_b in ((0, [0.35, 0.25, -0.5]), (1, [0.2, -0.3, -0.4]),
                          (0, [0.3, 0.2, -0.6])):
            angles, success = self.ik.get_joint_angles(pos_b, ee)
            self.assertTrue(success)
            testing.assert_almost_equal(
                self.ik.forward_kinematics(angles, ee), pos_b)

    def test_out_of_reach(self):
        _, success = self.ik.get_joint_angles([0.3, 0.2, -1.0], 0)
        self.assertFalse(success)

    def test_joint_limits(self):
        ik = ThreeJointLegInverseKinematics(
            [[0.0, 0.0, 0.0]], 0.3, 0.3,
            lower_limits=[-0.1, -1.0, -2.0], upper_limits=[0.1, 1.0, 0.0])
        _, success = ik.get_joint_angles([0.0, 0.0, -0.5], 0)
        self.assertTrue(success)
        _, success = ik.get_joint_angles([0.0, 0.3, -0.4], 0)
        self.assertFalse(success)
        testing.assert_equal(ik.get_lower_joint_limits(0), [-0.1, -1.0, -2.0])
        testing.assert_equal(ik.get_upper_joint_limits(0), [0.1, 1.0, 0.0])
