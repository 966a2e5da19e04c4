"""Solvers for the locomotion nonlinear program.

Available solvers:
- 'scipy': SciPy SLSQP with analytic constraint Jacobians
"""

from sklocomotion.optimization.solvers.base import BaseSolver
from sklocomotion.optimization.solvers.base import SolverResult


def create_solver(solver_type='scipy', **kwargs):
    """Create a solver.

    Parameters
    ----------
    solver_type : str
        Solver type, currently only 'scipy'.
    **kwargs
        Solver-specific options.

    Returns
    -------
    BaseSolver
        Solver instance.
    """
    if solver_type == 'scipy':
        from sklocomotion.optimization.solvers.scipy_solver import ScipySolver
        return ScipySolver(**kwargs)
    else:
        raise ValueError(f"Unknown solver type: {solver_type}")


__all__ = [
    'BaseSolver',
    'SolverResult',
    'create_solver',
]
