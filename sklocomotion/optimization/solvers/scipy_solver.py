"""SciPy SLSQP solver for the locomotion nonlinear program."""

from logging import getLogger

import numpy as np
from scipy.optimize import minimize

from sklocomotion.optimization.solvers.base import BaseSolver
from sklocomotion.optimization.solvers.base import SolverResult


logger = getLogger(__name__)


class ScipySolver(BaseSolver):
    """SciPy SLSQP-based solver.

    Constraint rows with equal lower and upper bound become equality
    constraints, every finite bound of the other rows becomes one
    inequality. The decision vector of every iteration is saved to the
    problem, so intermediate solutions can be replayed.
    """

    def __init__(
        self,
        max_iterations=100,
        ftol=1e-6,
        verbose=False,
    ):
        """Initialize scipy solver.

        Parameters
        ----------
        max_iterations : int
            Maximum number of SLSQP iterations.
        ftol : float
            Precision goal for the objective function.
        verbose : bool
            Log optimization progress.
        """
        super().__init__(verbose=verbose)
        self.max_iterations = max_iterations
        self.ftol = ftol

    def solve(self, problem, **kwargs):
        """Solve the problem with SLSQP starting from its current values.

        Parameters
        ----------
        problem : Problem
            Problem definition.
        **kwargs
            Additional options passed to ``scipy.optimize.minimize``.

        Returns
        -------
        SolverResult
            Optimization result.
        """
        x_init = self._validate_initial_guess(
            problem.get_variable_values(), problem)
        problem.save_current()

        def objective(x):
            return (problem.evaluate_cost_function(x),
                    problem.evaluate_cost_function_gradient(x))

        constraints = []
        g_bounds = problem.get_bounds_on_constraints()
        if len(g_bounds) > 0:
            lower, upper = g_bounds[:, 0], g_bounds[:, 1]
            is_eq = lower == upper
            ineq_lower = ~is_eq & np.isfinite(lower)
            ineq_upper = ~is_eq & np.isfinite(upper)

            def all_constraints(x):
                g = problem.evaluate_constraints(x)
                jac = problem.get_jacobian_of_constraints().toarray()
                return g, jac

            g_scipy, g_jac_scipy = _scipinize(all_constraints)

            if np.any(is_eq):
                constraints.append({
                    'type': 'eq',
                    'fun': lambda x: g_scipy(x)[is_eq] - lower[is_eq],
                    'jac': lambda x: g_jac_scipy(x)[is_eq]})
            if np.any(ineq_lower) or np.any(ineq_upper):
                def ineq_fun(x):
                    g = g_scipy(x)
                    return np.hstack((g[ineq_lower] - lower[ineq_lower],
                                      upper[ineq_upper] - g[ineq_upper]))

                def ineq_jac(x):
                    jac = g_jac_scipy(x)
                    return np.vstack((jac[ineq_lower], -jac[ineq_upper]))

                constraints.append(
                    {'type': 'ineq', 'fun': ineq_fun, 'jac': ineq_jac})

        obj_scipy, obj_jac_scipy = _scipinize(objective)

        bounds = [(lb if np.isfinite(lb) else None,
                   ub if np.isfinite(ub) else None)
                  for lb, ub in problem.get_bound_on_optimization_variables()]

        def callback(xk):
            problem.set_variables(xk)
            problem.save_current()
            if self.verbose:
                logger.info('iteration %d: cost %.6f',
                            problem.get_iteration_count() - 1,
                            problem.evaluate_cost_function(xk))

        options = {
            'maxiter': self.max_iterations,
            'ftol': self.ftol,
            'disp': self.verbose,
        }
        result = minimize(
            obj_scipy, x_init,
            method='SLSQP',
            jac=obj_jac_scipy,
            bounds=bounds,
            constraints=constraints,
            options=options,
            callback=callback,
            **kwargs
        )

        problem.set_variables(result.x)
        if not result.success:
            logger.warning('SLSQP did not converge: %s', result.message)

        return SolverResult(
            x=result.x,
            success=bool(result.success),
            cost=float(result.fun),
            iterations=result.nit,
            message=result.message if hasattr(result, 'message') else '',
            info={'scipy_result': result},
        )


def _scipinize(fun):
    """Convert function returning (f, jac) to scipy format.

    Parameters
    ----------
    fun : callable
        Function returning (value, jacobian).

    Returns
    -------
    f_scipy : callable
        Function returning value.
    jac_scipy : callable
        Function returning jacobian.
    """
    cache = {}

    def compute(x):
        key = tuple(x.tolist())
        if key not in cache:
            cache[key] = fun(x)
            # Keep cache small
            if len(cache) > 100:
                oldest = next(iter(cache))
                del cache[oldest]
        return cache[key]

    def f_scipy(x):
        return compute(x)[0]

    def jac_scipy(x):
        return compute(x)[1]

    return f_scipy, jac_scipy
