"""Nonlinear program seen by the solvers.

A :class:`Problem` collects three composites: the variable sets, the
constraints and the costs. Solvers only talk to the problem through flat
vectors, bound arrays and sparse Jacobians.
"""

from logging import getLogger

import numpy as np
from scipy import sparse

from sklocomotion.optimization.component import Composite
from sklocomotion.optimization.component import count_violated_bounds


logger = getLogger(__name__)


class Problem(object):
    """Nonlinear program assembled from variable, constraint and cost sets.

    Constraints and costs must be added after all variable sets, since they
    are linked to the variables when added.
    """

    def __init__(self):
        self.variables = Composite('variable-sets', is_cost=False)
        self.constraints = Composite('constraint-sets', is_cost=False)
        self.costs = Composite('cost-terms', is_cost=True)
        self.x_prev = []

    def add_variable_set(self, variable_set):
        return self.variables.add_component(variable_set)

    def add_constraint_set(self, constraint_set):
        constraint_set.link_with_variables(self.variables)
        return self.constraints.add_component(constraint_set)

    def add_cost_set(self, cost_set):
        cost_set.link_with_variables(self.variables)
        return self.costs.add_component(cost_set)

    def get_number_of_optimization_variables(self):
        return self.variables.get_rows()

    def get_number_of_constraints(self):
        return self.constraints.get_rows()

    def has_cost_terms(self):
        return self.costs.get_rows() > 0

    def get_bound_on_optimization_variables(self):
        return self.variables.get_bounds()

    def get_bounds_on_constraints(self):
        return self.constraints.get_bounds()

    def get_variable_values(self):
        return self.variables.get_values()

    def set_variables(self, x):
        self.variables.set_variables(x)

    def evaluate_cost_function(self, x):
        self.set_variables(x)
        if not self.has_cost_terms():
            return 0.0
        return float(self.costs.get_values()[0])

    def evaluate_cost_function_gradient(self, x):
        """Gradient of the total cost as a dense vector."""
        self.set_variables(x)
        n = self.get_number_of_optimization_variables()
        if not self.has_cost_terms():
            return np.zeros(n)
        return np.asarray(self.costs.get_jacobian().todense()).ravel()

    def evaluate_constraints(self, x):
        self.set_variables(x)
        return self.constraints.get_values()

    def get_jacobian_of_constraints(self):
        jac = self.constraints.get_jacobian()
        if jac is None:
            return sparse.csr_matrix(
                (0, self.get_number_of_optimization_variables()))
        return jac

    def save_current(self):
        """Store the current decision vector as one iteration."""
        self.x_prev.append(self.get_variable_values())

    def get_iteration_count(self):
        return len(self.x_prev)

    def set_opt_variables(self, iteration):
        """Restore the decision vector of a saved iteration."""
        self.set_variables(self.x_prev[iteration])

    def set_opt_variables_final(self):
        self.set_opt_variables(self.get_iteration_count() - 1)

    def print_current(self, tol=1e-4):
        """Log the layout of the problem and the current violations."""
        x = self.get_variable_values()
        n_var_violated = count_violated_bounds(
            x, self.get_bound_on_optimization_variables(), tol=tol)
        logger.info('variables: %d (%d out of bounds)',
                    len(x), n_var_violated)
        for var_set in self.variables.get_components():
            logger.info('  %-24s rows=%4d', var_set.name, var_set.get_rows())
        self.constraints.print_all(tol=tol)
        if self.has_cost_terms():
            for cost in self.costs.get_components():
                logger.info('  %-24s cost=%.6f',
                            cost.name, float(cost.get_values()[0]))
            logger.info('total cost: %.6f', float(self.costs.get_values()[0]))
