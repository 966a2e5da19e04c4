import copy
import unittest

import numpy as np
from numpy import testing

from sklocomotion.variables import NodeSpline
from sklocomotion.variables import NodesVariablesAll
from sklocomotion.variables import NodesVariablesEEForce
from sklocomotion.variables import NodesVariablesEEMotion
from sklocomotion.variables import PhaseDurations
from sklocomotion.variables.node_spline import get_local_time
from sklocomotion.variables.node_spline import get_segment_id
from sklocomotion.variables.polynomial import ACC
from sklocomotion.variables.polynomial import POS
from sklocomotion.variables.polynomial import VEL


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


class TestSegmentLookup(unittest.TestCase):

    def test_get_segment_id(self):
        durations = [0.2, 0.3, 0.5]
        self.assertEqual(get_segment_id(0.0, durations), (0, 0.0))
        self.assertEqual(get_segment_id(0.1, durations), (0, 0.0))
        # a border belongs to the later segment
        self.assertEqual(get_segment_id(0.2, durations)[0], 1)
        self.assertEqual(get_segment_id(0.9, durations)[0], 2)
        self.assertEqual(get_segment_id(5.0, durations)[0], 2)

    def test_get_local_time(self):
        durations = [0.2, 0.3, 0.5]
        segment_id, t_local = get_local_time(0.3, durations)
        self.assertEqual(segment_id, 1)
        self.assertAlmostEqual(t_local, 0.1)
        # clamped to the spline
        segment_id, t_local = get_local_time(2.0, durations)
        self.assertEqual(segment_id, 2)
        self.assertAlmostEqual(t_local, 0.5)
        segment_id, t_local = get_local_time(-1.0, durations)
        self.assertEqual(segment_id, 0)
        self.assertAlmostEqual(t_local, 0.0)


class TestNodeSpline(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        nodes = NodesVariablesAll('nodes', 4, 2)
        rng = np.random.RandomState(1)
        nodes.set_variables(rng.uniform(-1.0, 1.0, nodes.get_rows()))
        cls.nodes = nodes
        cls.spline = NodeSpline(nodes, poly_durations=[0.3, 0.4, 0.5])

    def test_two_node_scenario(self):
        nodes = NodesVariablesAll('line', 2, 1)
        nodes.set_by_linear_interpolation([0.0], [1.0], 1.0)
        nodes.add_start_bound(VEL, [0], [0.0])
        nodes.add_final_bound(VEL, [0], [0.0])
        spline = NodeSpline(nodes, poly_durations=[1.0])
        start = spline.get_point(0.0)
        testing.assert_almost_equal(start.p, [0.0])
        testing.assert_almost_equal(start.v, [0.0])
        end = spline.get_point(1.0)
        testing.assert_almost_equal(end.p, [1.0])
        testing.assert_almost_equal(end.v, [0.0])
        testing.assert_almost_equal(spline.get_point(0.5).p, [0.5])

        # columns are start pos, start vel, end pos, end vel
        jac = spline.get_jacobian_wrt_nodes(0.5, POS).toarray()
        testing.assert_almost_equal(jac, [[0.5, 0.125, 0.5, -0.125]])

        nodes3 = NodesVariablesAll('three', 3, 1)
        spline3 = NodeSpline(nodes3, poly_durations=[0.5, 0.5])
        jac = spline3.get_jacobian_wrt_nodes(0.25, POS).toarray()
        # only the two nodes of the first polynomial contribute
        self.assertTrue(np.any(jac[0, :4] != 0.0))
        testing.assert_equal(jac[0, 4:], np.zeros(2))

    def test_total_time(self):
        self.assertAlmostEqual(self.spline.get_total_time(), 1.2)

    def test_continuity(self):
        # position and velocity are continuous at the borders
        eps = 1e-9
        for t in (0.3, 0.7):
            before = self.spline.get_point(t - eps)
            after = self.spline.get_point(t)
            testing.assert_almost_equal(before.p, after.p)
            testing.assert_almost_equal(before.v, after.v)

    def test_velocity_and_acceleration(self):
        eps = 1e-6
        for t in (0.1, 0.45, 1.0):
            numerical_v = (self.spline.get_point(t + eps).p
                           - self.spline.get_point(t - eps).p) / (2 * eps)
            numerical_a = (self.spline.get_point(t + eps).v
                           - self.spline.get_point(t - eps).v) / (2 * eps)
            testing.assert_almost_equal(
                self.spline.get_point(t).v, numerical_v, decimal=5)
            testing.assert_almost_equal(
                self.spline.get_point(t).a, numerical_a, decimal=4)

    def test_jacobian_wrt_nodes(self):
        nodes = self.nodes
        spline = self.spline
        x0 = nodes.get_values()
        for t in (0.0, 0.2, 0.55, 1.2):
            for deriv in (POS, VEL, ACC):
                def func(x):
                    nodes.set_variables(x)
                    return (spline.get_point(t)[deriv],
                            spline.get_jacobian_wrt_nodes(t, deriv).toarray())
                jacobian_test_util(func, x0.copy(), decimal=4)
        nodes.set_variables(x0)

    def test_fixed_durations_have_no_duration_jacobian(self):
        jac = self.spline.get_jacobian_wrt_durations(0.5, POS)
        self.assertEqual(jac.shape, (2, 0))

    def test_invalid_arguments(self):
        with self.assertRaises(ValueError):
            NodeSpline(self.nodes)
        with self.assertRaises(ValueError):
            NodeSpline(self.nodes, poly_durations=[0.5, 0.5])
        with self.assertRaises(ValueError):
            NodeSpline(self.nodes, poly_durations=[0.5, 0.0, 0.5])
        with self.assertRaises(ValueError):
            NodesVariablesAll('single', 1, 3)


class TestPhaseBasedSpline(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.timings = [0.4, 0.3, 0.5, 0.2]
        cls.durations = PhaseDurations(
            0, cls.timings, True, min_duration=0.1, max_duration=1.0,
            optimize=True)
        motion = NodesVariablesEEMotion('motion', 4, True, 2)
        motion.set_by_linear_interpolation(
            [0.0, 0.1, 0.0], [0.6, 0.3, 0.0], 1.4)
        rng = np.random.RandomState(2)
        motion.set_variables(
            motion.get_values()
            + rng.uniform(-0.1, 0.1, motion.get_rows()))
        force = NodesVariablesEEForce('force', 4, True, 3)
        force.set_by_linear_interpolation(
            [0.0, 0.0, 100.0], [0.0, 0.0, 100.0], 1.4)
        force.set_variables(
            force.get_values() + rng.uniform(-5.0, 5.0, force.get_rows()))
        cls.motion = motion
        cls.force = force
        cls.motion_spline = NodeSpline(motion, phase_durations=cls.durations)
        cls.force_spline = NodeSpline(force, phase_durations=cls.durations)

    def test_layout(self):
        # stance, swing with 2 polys, stance, swing with 2 polys
        self.assertEqual(self.motion.get_poly_count(), 6)
        # stance nodes share the position, the other nodes hold pos and vel
        self.assertEqual(self.motion.get_rows(), 3 + 6 + 3 + 6 + 6)
        self.assertEqual(
            self.motion.get_opt_index(0, POS, 2),
            self.motion.get_opt_index(1, POS, 2))
        # force is constant (zero) in swing
        self.assertEqual(self.force.get_poly_count(), 3 + 1 + 3 + 1)
        self.assertEqual(self.force.get_rows(), 5 * 6)
        testing.assert_equal(self.force.get_nodes()[3], np.zeros((2, 3)))

    def test_constant_phase(self):
        spline = self.motion_spline
        p0 = spline.get_point(0.0).p
        for t in (0.1, 0.25, 0.39):
            testing.assert_almost_equal(spline.get_point(t).p, p0)
            testing.assert_almost_equal(spline.get_point(t).v, np.zeros(3))
            self.assertTrue(spline.is_constant_phase(t))
        self.assertFalse(spline.is_constant_phase(0.5))
        # swing force is zero
        testing.assert_almost_equal(
            self.force_spline.get_point(0.55).p, np.zeros(3))

    def test_poly_durations(self):
        testing.assert_almost_equal(
            self.motion_spline.get_poly_durations(),
            [0.4, 0.15, 0.15, 0.5, 0.1, 0.1])
        self.assertAlmostEqual(self.force_spline.get_total_time(), 1.4)

    def test_jacobian_wrt_nodes(self):
        for nodes, spline in ((self.motion, self.motion_spline),
                              (self.force, self.force_spline)):
            x0 = nodes.get_values()
            for t in (0.2, 0.5, 0.9, 1.35):
                def func(x):
                    nodes.set_variables(x)
                    return (spline.get_point(t).p,
                            spline.get_jacobian_wrt_nodes(t, POS).toarray())
                jacobian_test_util(func, x0.copy(), decimal=4)
            nodes.set_variables(x0)

    def test_jacobian_wrt_durations(self):
        durations = self.durations
        x0 = durations.get_values()
        for spline in (self.motion_spline, self.force_spline):
            for t in (0.2, 0.5, 0.63, 0.9, 1.35):
                for deriv in (POS, VEL):
                    def func(x):
                        durations.set_variables(x)
                        return (spline.get_point(t)[deriv],
                                spline.get_jacobian_wrt_durations(
                                    t, deriv).toarray())
                    jacobian_test_util(func, x0.copy(), decimal=3)
            durations.set_variables(x0)
