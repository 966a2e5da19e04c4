"""Solver independent nonlinear program.

Architecture:
- Component: rows with values, bounds and a sparse Jacobian
- Composite: ordered components seen as one block of rows
- Problem: variables, constraints and costs exchanged with a solver
- Solver: backend-specific solver implementation

Usage:
    from sklocomotion.optimization import Problem, create_solver

    problem = Problem()
    problem.add_variable_set(variables)
    problem.add_constraint_set(constraint)
    solver = create_solver('scipy')
    result = solver.solve(problem)
"""

from sklocomotion.optimization.component import BoundGreaterZero
from sklocomotion.optimization.component import BoundSmallerZero
from sklocomotion.optimization.component import BoundZero
from sklocomotion.optimization.component import Component
from sklocomotion.optimization.component import Composite
from sklocomotion.optimization.component import ConstraintSet
from sklocomotion.optimization.component import CostTerm
from sklocomotion.optimization.component import inf
from sklocomotion.optimization.component import make_bounds
from sklocomotion.optimization.component import NoBound
from sklocomotion.optimization.component import VariableSet
from sklocomotion.optimization.problem import Problem
from sklocomotion.optimization.solvers import create_solver
from sklocomotion.optimization.solvers import SolverResult


__all__ = [
    'BoundGreaterZero',
    'BoundSmallerZero',
    'BoundZero',
    'Component',
    'Composite',
    'ConstraintSet',
    'CostTerm',
    'inf',
    'make_bounds',
    'NoBound',
    'Problem',
    'SolverResult',
    'VariableSet',
    'create_solver',
]
