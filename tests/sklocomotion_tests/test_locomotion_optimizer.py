import unittest

import numpy as np
from numpy import testing

from sklocomotion import LocomotionOptimizer
from sklocomotion import Parameters
from sklocomotion.coordinates.math import euler_zyx_to_matrix
from sklocomotion.coordinates.math import matrix2quaternion
from sklocomotion.coordinates.math import quaternion2matrix
from sklocomotion.locomotion_optimizer import base_state_from_quaternion
from sklocomotion.locomotion_optimizer import initial_state_from_nominal
from sklocomotion.models import RobotModel
from sklocomotion.models import ThreeJointLegInverseKinematics
from sklocomotion.optimization import create_solver
from sklocomotion.optimization import SolverResult
from sklocomotion.parameters import CostName
from sklocomotion.state import BaseState
from sklocomotion.terrain import FlatGround
from sklocomotion.trajectory import compute_joint_trajectory
from sklocomotion.trajectory import TrajectorySampler


def make_monoped():
    return RobotModel.from_parameters(
        nominal_stance_B=[[0.0, 0.0, -0.58]],
        max_deviation=[0.25, 0.15, 0.2],
        mass=20.0,
        inertia_b=np.diag([1.2, 5.5, 6.0]))


class TestInitialStates(unittest.TestCase):

    def test_initial_state_from_nominal(self):
        base, ee_W = initial_state_from_nominal(
            [[0.3, 0.2, -0.5], [0.3, -0.2, -0.5]], z_ground=0.1)
        testing.assert_almost_equal(base.lin.p, [0.0, 0.0, 0.6])
        testing.assert_almost_equal(base.lin.v, np.zeros(3))
        testing.assert_almost_equal(ee_W, [[0.3, 0.2, 0.1],
                                           [0.3, -0.2, 0.1]])

    def test_base_state_from_quaternion(self):
        euler = np.array([0.1, -0.2, 0.3])
        rot = euler_zyx_to_matrix(euler)
        base = base_state_from_quaternion([1.0, 2.0, 3.0],
                                          matrix2quaternion(rot))
        testing.assert_almost_equal(base.ang.p, euler)
        testing.assert_almost_equal(base.lin.p, [1.0, 2.0, 3.0])

    def test_invalid_state(self):
        with self.assertRaises(ValueError):
            BaseState(lin_pos=[0.0, 0.0])


class TestLocomotionOptimizer(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        model = make_monoped()
        base, feet = initial_state_from_nominal(
            model.kinematic_model.get_nominal_stance_in_base())
        params = Parameters()
        params.ee_phase_durations = [[0.4, 0.2, 0.4]]
        params.ee_in_contact_at_start = [True]
        params.add_cost(CostName.BaseMotionCost, 1e-3)

        optimizer = LocomotionOptimizer()
        optimizer.set_initial_state(base, feet)
        optimizer.set_parameters(BaseState(lin_pos=[0.1, 0.0, 0.58]),
                                 params, model, FlatGround(height=0.3))
        cls.model = model
        cls.optimizer = optimizer
        cls.result = optimizer.solve_nlp(
            create_solver('scipy', max_iterations=5))

    def test_terrain_height_from_footholds(self):
        self.assertEqual(self.optimizer.terrain.get_height(0.0, 0.0), 0.0)

    def test_result(self):
        self.assertIsInstance(self.result, SolverResult)
        nlp = self.optimizer.nlp
        self.assertEqual(len(self.result.x),
                         nlp.get_number_of_optimization_variables())
        self.assertGreaterEqual(self.optimizer.get_iteration_count(), 1)

    def test_trajectory(self):
        trajectory = self.optimizer.get_trajectory(dt=0.1)
        self.assertEqual(len(trajectory), 11)
        testing.assert_almost_equal([s.t for s in trajectory],
                                    np.arange(11) * 0.1)
        first = trajectory[0]
        testing.assert_almost_equal(first.base_lin.p, [0.0, 0.0, 0.58])
        testing.assert_almost_equal(first.ee_motion[0].p, [0.0, 0.0, 0.0])
        self.assertEqual([s.ee_contact[0] for s in trajectory],
                         [True] * 4 + [False] * 2 + [True] * 5)
        self.assertEqual(first.ee_force.shape, (1, 3))
        testing.assert_almost_equal(
            quaternion2matrix(first.base_ang.q), np.eye(3), decimal=6)

    def test_intermediate_solutions(self):
        x_final = self.optimizer.nlp.get_variable_values()
        trajectories = self.optimizer.get_intermediate_solutions(dt=0.2)
        self.assertEqual(len(trajectories),
                         self.optimizer.get_iteration_count())
        self.assertEqual(len(trajectories[0]), 6)
        testing.assert_almost_equal(
            self.optimizer.nlp.get_variable_values(), x_final)

    def test_sampler(self):
        sampler = TrajectorySampler(self.optimizer.get_solution(), 0.3)
        times = [state.t for state in sampler]
        testing.assert_almost_equal(times, [0.0, 0.3, 0.6, 0.9])
        # iterating again restarts from the beginning
        self.assertEqual([state.t for state in sampler], times)
        self.assertEqual(len(sampler), 4)
        self.assertEqual(len(TrajectorySampler(
            self.optimizer.get_solution(), 0.25)), 5)
        with self.assertRaises(ValueError):
            TrajectorySampler(self.optimizer.get_solution(), 0.0)

    def test_joint_trajectory(self):
        ik = ThreeJointLegInverseKinematics([[0.0, 0.0, 0.0]], 0.3, 0.3)
        trajectory = self.optimizer.get_trajectory(dt=0.25)
        angles, success = compute_joint_trajectory(trajectory, ik)
        self.assertEqual(len(angles), len(trajectory))
        self.assertEqual(success.shape, (len(trajectory), 1))
        self.assertTrue(success[0, 0])

    def test_not_solved(self):
        optimizer = LocomotionOptimizer()
        with self.assertRaises(ValueError):
            optimizer.get_solution()
        with self.assertRaises(ValueError):
            optimizer.build_nlp()
        with self.assertRaises(ValueError):
            optimizer.set_parameters(BaseState(), Parameters(),
                                     self.model, FlatGround())
