"""Base solver interface for the locomotion nonlinear program."""

from abc import ABC
from abc import abstractmethod

import numpy as np


class SolverResult:
    """Result of solving a :class:`sklocomotion.optimization.Problem`.

    Attributes
    ----------
    x : ndarray
        Best decision vector found.
    success : bool
        Whether the solver reported convergence.
    cost : float
        Final cost value.
    iterations : int
        Number of iterations.
    message : str
        Status message.
    info : dict
        Additional solver-specific information.
    """

    def __init__(
        self,
        x,
        success=True,
        cost=0.0,
        iterations=0,
        message='',
        info=None,
    ):
        self.x = np.asarray(x)
        self.success = success
        self.cost = cost
        self.iterations = iterations
        self.message = message
        self.info = info or {}

    def __repr__(self):
        return '<SolverResult success={} cost={:.6g} iterations={}>'.format(
            self.success, self.cost, self.iterations)


class BaseSolver(ABC):
    """Abstract base class for solvers.

    Subclasses must implement the `solve` method. Non-convergence is
    reported through :class:`SolverResult`, never raised.
    """

    def __init__(self, verbose=False):
        """Initialize solver.

        Parameters
        ----------
        verbose : bool
            Log optimization progress.
        """
        self.verbose = verbose

    @abstractmethod
    def solve(self, problem, **kwargs):
        """Solve the nonlinear program.

        The problem is left holding the best decision vector found.

        Parameters
        ----------
        problem : Problem
            Problem definition with its initial guess set.
        **kwargs
            Solver-specific options.

        Returns
        -------
        SolverResult
            Optimization result.
        """
        pass

    def _validate_initial_guess(self, x, problem):
        """Validate the initial decision vector.

        Raises
        ------
        ValueError
            If the number of variables is incorrect.
        """
        x = np.asarray(x, dtype=np.float64)
        expected_shape = (problem.get_number_of_optimization_variables(),)
        if x.shape != expected_shape:
            raise ValueError(
                f"Initial guess shape {x.shape} does not match "
                f"expected shape {expected_shape}"
            )
        return x
