import unittest

import numpy as np
from numpy import testing

from sklocomotion.constraints import ConvexityConstraint
from sklocomotion.costs import QuadraticPolynomialCost
from sklocomotion.optimization import create_solver
from sklocomotion.optimization import Problem
from sklocomotion.optimization import SolverResult
from sklocomotion.variables import EndeffectorLoad
from sklocomotion.variables import variable_names


def make_load_problem(vector=(0.0, 0.0)):
    load = EndeffectorLoad(2, 0.1, 0.1)
    load.set_variables([0.9, 0.1])
    problem = Problem()
    problem.add_variable_set(load)
    problem.add_constraint_set(ConvexityConstraint(load))
    problem.add_cost_set(QuadraticPolynomialCost(
        variable_names.EE_LOAD, np.eye(2), vector))
    return problem


class TestProblem(unittest.TestCase):

    def test_evaluation(self):
        problem = make_load_problem(vector=(0.2, 0.0))
        self.assertEqual(problem.get_number_of_optimization_variables(), 2)
        self.assertEqual(problem.get_number_of_constraints(), 1)
        self.assertTrue(problem.has_cost_terms())

        x = np.array([0.3, 0.3])
        self.assertAlmostEqual(problem.evaluate_cost_function(x),
                               0.18 + 0.06)
        testing.assert_almost_equal(
            problem.evaluate_cost_function_gradient(x), [0.8, 0.6])
        testing.assert_almost_equal(problem.evaluate_constraints(x), [0.6])
        testing.assert_almost_equal(
            problem.get_jacobian_of_constraints().toarray(), [[1.0, 1.0]])
        testing.assert_almost_equal(problem.get_bounds_on_constraints(),
                                    [[1.0, 1.0]])
        testing.assert_almost_equal(
            problem.get_bound_on_optimization_variables(),
            [[0.0, 1.0], [0.0, 1.0]])

    def test_iterations(self):
        problem = make_load_problem()
        problem.save_current()
        problem.set_variables([0.5, 0.5])
        problem.save_current()
        self.assertEqual(problem.get_iteration_count(), 2)
        problem.set_opt_variables(0)
        testing.assert_almost_equal(problem.get_variable_values(),
                                    [0.9, 0.1])
        problem.set_opt_variables_final()
        testing.assert_almost_equal(problem.get_variable_values(),
                                    [0.5, 0.5])
        problem.print_current()

    def test_without_constraints_and_costs(self):
        problem = Problem()
        problem.add_variable_set(EndeffectorLoad(1, 0.2, 0.1))
        self.assertEqual(problem.evaluate_cost_function(np.zeros(2)), 0.0)
        testing.assert_almost_equal(
            problem.evaluate_cost_function_gradient(np.zeros(2)), [0, 0])
        self.assertEqual(problem.get_jacobian_of_constraints().shape, (0, 2))


class TestScipySolver(unittest.TestCase):

    def test_convexity_problem(self):
        problem = make_load_problem()
        result = create_solver('scipy', max_iterations=50).solve(problem)
        self.assertIsInstance(result, SolverResult)
        self.assertTrue(result.success)
        testing.assert_almost_equal(result.x, [0.5, 0.5], decimal=4)
        testing.assert_almost_equal(problem.get_variable_values(),
                                    [0.5, 0.5], decimal=4)
        self.assertAlmostEqual(result.cost, 0.5, places=4)
        # the initial guess and every iteration are kept
        self.assertGreaterEqual(problem.get_iteration_count(), 2)
        problem.set_opt_variables(0)
        testing.assert_almost_equal(problem.get_variable_values(),
                                    [0.9, 0.1])

    def test_linear_term(self):
        problem = make_load_problem(vector=(0.2, 0.0))
        result = create_solver('scipy').solve(problem)
        self.assertTrue(result.success)
        testing.assert_almost_equal(result.x, [0.45, 0.55], decimal=4)

    def test_inequality_bounds(self):
        # total duration rows are inequalities, the optimum lies on a bound
        from sklocomotion.constraints import TotalDurationConstraint
        from sklocomotion.variables import PhaseDurations

        durations = PhaseDurations(0, [0.5, 0.5, 0.5], True,
                                   min_duration=0.2, max_duration=1.0,
                                   optimize=True)
        problem = Problem()
        problem.add_variable_set(durations)
        problem.add_constraint_set(TotalDurationConstraint(durations))
        problem.add_cost_set(QuadraticPolynomialCost(
            durations.name, np.zeros((2, 2)), [-1.0, -1.0]))
        result = create_solver('scipy').solve(problem)
        self.assertTrue(result.success)
        self.assertAlmostEqual(np.sum(result.x), 1.5 - 0.2, places=4)
        self.assertAlmostEqual(durations.get_phase_durations()[-1], 0.2,
                               places=4)

    def test_invalid_solver(self):
        with self.assertRaises(ValueError):
            create_solver('ipopt')
