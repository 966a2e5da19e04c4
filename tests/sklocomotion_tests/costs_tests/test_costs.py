import unittest

import numpy as np
from numpy import testing

from sklocomotion.costs import NodeCost
from sklocomotion.costs import QuadraticPolynomialCost
from sklocomotion.optimization import Problem
from sklocomotion.variables import NodesVariablesAll
from sklocomotion.variables import POS
from sklocomotion.variables import VEL
from sklocomotion.variables import Z


class TestQuadraticPolynomialCost(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.nodes = NodesVariablesAll('nodes', 2, 1)
        cls.problem = Problem()
        cls.problem.add_variable_set(NodesVariablesAll('other', 2, 1))
        cls.problem.add_variable_set(cls.nodes)
        cls.matrix = np.array([[1.0, 2.0, 0.0, 0.0],
                               [0.0, 1.0, 0.0, 0.0],
                               [0.0, 0.0, 3.0, 0.0],
                               [0.5, 0.0, 0.0, 1.0]])
        cls.vector = np.array([1.0, 0.0, -1.0, 2.0])
        cls.problem.add_cost_set(QuadraticPolynomialCost(
            'nodes', cls.matrix, cls.vector, weight=0.5))

    def test_cost_and_gradient(self):
        x = np.array([0.0, 0.0, 0.0, 0.0, 1.0, -2.0, 0.5, 1.5])
        y = x[4:]
        expected = 0.5 * (y.dot(self.matrix).dot(y) + self.vector.dot(y))
        self.assertAlmostEqual(self.problem.evaluate_cost_function(x),
                               expected)

        gradient = self.problem.evaluate_cost_function_gradient(x)
        eps = 1e-6
        numerical = np.zeros(len(x))
        for i in range(len(x)):
            e = np.zeros(len(x))
            e[i] = eps
            numerical[i] = (self.problem.evaluate_cost_function(x + e)
                            - self.problem.evaluate_cost_function(x - e)) \
                / (2 * eps)
        testing.assert_almost_equal(gradient, numerical, decimal=6)
        testing.assert_equal(gradient[:4], np.zeros(4))

    def test_invalid_shapes(self):
        with self.assertRaises(ValueError):
            QuadraticPolynomialCost('nodes', np.eye(3), np.zeros(2))
        with self.assertRaises(ValueError):
            QuadraticPolynomialCost('nodes', np.ones((2, 3)), np.zeros(2))
        problem = Problem()
        problem.add_variable_set(NodesVariablesAll('nodes', 2, 1))
        with self.assertRaises(ValueError):
            problem.add_cost_set(
                QuadraticPolynomialCost('nodes', np.eye(3), np.zeros(3)))


class TestNodeCost(unittest.TestCase):

    def test_cost(self):
        nodes = NodesVariablesAll('base', 3, 3)
        problem = Problem()
        problem.add_variable_set(nodes)
        problem.add_cost_set(NodeCost('base', VEL, Z, weight=2.0))
        x = np.arange(nodes.get_rows(), dtype=np.float64)
        nodes.set_variables(x)
        vz = nodes.get_nodes()[:, VEL, Z]
        self.assertAlmostEqual(problem.evaluate_cost_function(x),
                               2.0 * np.sum(vz ** 2))
        gradient = problem.evaluate_cost_function_gradient(x)
        for node_id in range(3):
            idx = nodes.get_opt_index(node_id, VEL, Z)
            self.assertAlmostEqual(gradient[idx], 4.0 * vz[node_id])
            idx = nodes.get_opt_index(node_id, POS, Z)
            self.assertEqual(gradient[idx], 0.0)
        self.assertEqual(np.count_nonzero(gradient), 3)
