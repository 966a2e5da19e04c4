"""High level interface to plan a legged motion.

Usage:
    optimizer = LocomotionOptimizer()
    optimizer.set_initial_state(initial_base, initial_ee_W)
    optimizer.set_parameters(final_base, params, model, terrain)
    result = optimizer.solve_nlp(create_solver('scipy'))
    trajectory = optimizer.get_trajectory(dt=0.02)
"""

from logging import getLogger

import numpy as np

from sklocomotion.coordinates.math import matrix2euler_zyx
from sklocomotion.coordinates.math import quaternion2matrix
from sklocomotion.nlp_factory import NlpFactory
from sklocomotion.optimization import Problem
from sklocomotion.state import BaseState
from sklocomotion.trajectory import TrajectorySampler
from sklocomotion.variables.nodes_variables import Z


logger = getLogger(__name__)


def initial_state_from_nominal(nominal_stance_B, z_ground=0.0):
    """Standing state with the feet at their nominal stance on the ground.

    Parameters
    ----------
    nominal_stance_B : numpy.ndarray
        (n_ee, 3) nominal endeffector positions in base frame.
    z_ground : float
        height of the ground.

    Returns
    -------
    base : sklocomotion.state.BaseState
        base at rest above the feet.
    ee_W : numpy.ndarray
        (n_ee, 3) endeffector positions in world.

    Examples
    --------
    >>> base, ee_W = initial_state_from_nominal([[0.2, 0.1, -0.5]])
    >>> base.lin.p
    array([0. , 0. , 0.5])
    """
    ee_W = np.array(nominal_stance_B, dtype=np.float64)
    ee_W[:, Z] = z_ground
    base = BaseState(
        lin_pos=[0.0, 0.0, z_ground - nominal_stance_B[0][Z]])
    return base, ee_W


def base_state_from_quaternion(lin_pos, quaternion, lin_vel=None):
    """Base state whose orientation is given as a [w, x, y, z] quaternion.

    The euler angles are resolved to their unique representation.
    """
    euler = matrix2euler_zyx(quaternion2matrix(quaternion))
    return BaseState(lin_pos=lin_pos, lin_vel=lin_vel, ang_pos=euler)


class LocomotionOptimizer(object):
    """Build, solve and sample the legged locomotion problem."""

    def __init__(self):
        self.initial_base = None
        self.initial_ee_W = None
        self.final_base = None
        self.params = None
        self.model = None
        self.terrain = None
        self.nlp = None
        self.factory = None

    def set_initial_state(self, base, feet):
        """Set the initial base state and endeffector positions in world."""
        self.initial_base = base
        self.initial_ee_W = np.array(feet, dtype=np.float64)

    def set_parameters(self, final_base, params, model, terrain):
        """Set the goal, the problem settings, the robot and the terrain.

        Terrains that support it are moved to the average height of the
        initial footholds.
        """
        if self.initial_ee_W is None:
            raise ValueError('set the initial state before the parameters')
        self.final_base = final_base
        self.params = params
        self.model = model
        self.terrain = terrain
        self._set_terrain_height_from_avg_foothold_height()

    def _set_terrain_height_from_avg_foothold_height(self):
        if not hasattr(self.terrain, 'set_ground_height'):
            return
        avg_height = float(np.mean(self.initial_ee_W[:, Z]))
        logger.debug('ground height set to %.4f', avg_height)
        self.terrain.set_ground_height(avg_height)

    def build_nlp(self):
        """Assemble a new problem from the current settings.

        Returns
        -------
        nlp : sklocomotion.optimization.Problem
            variables, constraints and costs in their fixed order.
        """
        if self.params is None:
            raise ValueError('set_parameters must be called first')
        self.factory = NlpFactory(
            self.params, self.terrain, self.model, self.initial_ee_W,
            self.initial_base, self.final_base)
        nlp = Problem()
        for variable_set in self.factory.get_variable_sets():
            nlp.add_variable_set(variable_set)
        for name in self.params.get_used_constraints():
            for constraint in self.factory.get_constraint(name):
                nlp.add_constraint_set(constraint)
        for name, weight in self.params.get_cost_weights():
            for cost in self.factory.get_cost(name, weight):
                nlp.add_cost_set(cost)
        logger.debug('problem with %d variables and %d constraints',
                     nlp.get_number_of_optimization_variables(),
                     nlp.get_number_of_constraints())
        return nlp

    def solve_nlp(self, solver):
        """Build the problem and solve it.

        Parameters
        ----------
        solver : sklocomotion.optimization.solvers.BaseSolver
            solver used, e.g. ``create_solver('scipy')``.

        Returns
        -------
        result : sklocomotion.optimization.SolverResult
            status of the solve, the problem keeps the best values.
        """
        self.nlp = self.build_nlp()
        result = solver.solve(self.nlp)
        self.nlp.print_current()
        return result

    def _check_solved(self):
        if self.nlp is None:
            raise ValueError('solve_nlp must be called first')

    def get_solution(self):
        """Splines of the current solution."""
        self._check_solved()
        return self.factory.spline_holder

    def set_solution(self, iteration):
        """Load the variables of one solver iteration."""
        self._check_solved()
        self.nlp.set_opt_variables(iteration)

    def get_iteration_count(self):
        self._check_solved()
        return self.nlp.get_iteration_count()

    def get_trajectory(self, dt):
        """Sampled states of the current solution."""
        return list(TrajectorySampler(self.get_solution(), dt))

    def get_intermediate_solutions(self, dt):
        """Sampled states of every iteration, the final one restored after.
        """
        self._check_solved()
        x_current = self.nlp.get_variable_values()
        trajectories = []
        for iteration in range(self.get_iteration_count()):
            self.set_solution(iteration)
            trajectories.append(self.get_trajectory(dt))
        self.nlp.set_variables(x_current)
        return trajectories
