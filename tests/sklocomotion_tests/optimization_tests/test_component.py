import unittest

import numpy as np
from numpy import testing
from scipy import sparse

from sklocomotion.optimization import Composite
from sklocomotion.optimization import ConstraintSet
from sklocomotion.optimization import CostTerm
from sklocomotion.optimization import VariableSet
from sklocomotion.optimization.component import count_violated_bounds
from sklocomotion.optimization.component import make_bounds


class ExVariables(VariableSet):

    def __init__(self, name, values):
        super(ExVariables, self).__init__(name, len(values))
        self.x = np.array(values, dtype=np.float64)

    def get_values(self):
        return self.x.copy()

    def set_variables(self, x):
        self.x = np.array(x, dtype=np.float64)

    def get_bounds(self):
        return make_bounds(self.get_rows(), (-1.0, 1.0))


class ExConstraint(ConstraintSet):
    """x0^2 + y1 on the variables ``x`` and ``y``."""

    def __init__(self):
        super(ExConstraint, self).__init__('ex-constraint', 1)

    def get_values(self):
        x = self.variables.get_component('x').get_values()
        y = self.variables.get_component('y').get_values()
        return np.array([x[0] ** 2 + y[1]])

    def get_bounds(self):
        return np.array([[0.0, 0.0]])

    def get_jacobian_block(self, var_set_name):
        if var_set_name == 'x':
            x = self.variables.get_component('x').get_values()
            return sparse.csr_matrix([[2.0 * x[0], 0.0]])
        if var_set_name == 'y':
            return sparse.csr_matrix([[0.0, 1.0, 0.0]])
        return None


class ExCost(CostTerm):

    def __init__(self, name, var_set_name):
        super(ExCost, self).__init__(name)
        self.var_set_name = var_set_name

    def get_cost(self):
        x = self.variables.get_component(self.var_set_name).get_values()
        return float(np.sum(x ** 2))

    def get_jacobian_block(self, var_set_name):
        if var_set_name != self.var_set_name:
            return None
        x = self.variables.get_component(self.var_set_name).get_values()
        return sparse.csr_matrix(2.0 * x.reshape(1, -1))


class TestComposite(unittest.TestCase):

    def setUp(self):
        self.variables = Composite('variables')
        self.variables.add_component(ExVariables('x', [0.5, -0.5]))
        self.variables.add_component(ExVariables('empty', []))
        self.variables.add_component(ExVariables('y', [0.1, 0.2, 0.3]))

    def test_add_component(self):
        index = self.variables.add_component(ExVariables('z', [1.0]))
        self.assertEqual(index, 3)
        with self.assertRaises(ValueError):
            self.variables.add_component(ExVariables('x', [1.0]))

    def test_get_component(self):
        self.assertIsNone(self.variables.find_component('unknown'))
        with self.assertRaises(KeyError):
            self.variables.get_component('unknown')
        self.assertEqual(self.variables.get_component('y').get_rows(), 3)
        self.assertEqual(self.variables.get_component(0).name, 'x')

    def test_values(self):
        self.assertEqual(self.variables.get_rows(), 5)
        testing.assert_almost_equal(self.variables.get_values(),
                                    [0.5, -0.5, 0.1, 0.2, 0.3])
        self.assertEqual(self.variables.get_bounds().shape, (5, 2))
        self.assertEqual(self.variables.get_row_ranges(),
                         {'x': (0, 2), 'empty': (2, 2), 'y': (2, 5)})

    def test_set_variables(self):
        self.variables.set_variables([1.0, 2.0, 3.0, 4.0, 5.0])
        testing.assert_almost_equal(
            self.variables.get_component('y').get_values(), [3.0, 4.0, 5.0])
        with self.assertRaises(ValueError):
            self.variables.set_variables([1.0, 2.0])

    def test_constraint_jacobian(self):
        constraint = ExConstraint()
        with self.assertRaises(RuntimeError):
            constraint.get_jacobian()
        constraint.link_with_variables(self.variables)
        jac = constraint.get_jacobian()
        self.assertEqual(jac.shape, (1, 5))
        testing.assert_almost_equal(jac.toarray(),
                                    [[1.0, 0.0, 0.0, 1.0, 0.0]])

        constraints = Composite('constraints')
        constraints.add_component(constraint)
        testing.assert_almost_equal(constraints.get_values(), [0.45])
        self.assertEqual(count_violated_bounds(
            constraints.get_values(), constraints.get_bounds()), 1)

    def test_cost_composite(self):
        costs = Composite('costs', is_cost=True)
        self.assertEqual(costs.get_rows(), 0)
        self.assertIsNone(costs.get_jacobian())
        for name, var_set_name in (('cost-x', 'x'), ('cost-y', 'y')):
            cost = ExCost(name, var_set_name)
            cost.link_with_variables(self.variables)
            costs.add_component(cost)
        self.assertEqual(costs.get_rows(), 1)
        testing.assert_almost_equal(costs.get_values(), [0.5 + 0.14])
        testing.assert_almost_equal(costs.get_jacobian().toarray(),
                                    [[1.0, -1.0, 0.2, 0.4, 0.6]])
