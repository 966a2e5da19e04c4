"""Variables, constraints and costs of the legged locomotion problem.

The order in which :class:`NlpFactory` returns variable sets and terms
fixes the layout of the decision vector and of the constraint rows for the
whole solve.
"""

from logging import getLogger

import numpy as np

from sklocomotion.constraints import ConvexityConstraint
from sklocomotion.constraints import DynamicConstraint
from sklocomotion.constraints import ForceConstraint
from sklocomotion.constraints import RangeOfMotionConstraint
from sklocomotion.constraints import SwingConstraint
from sklocomotion.constraints import TerrainConstraint
from sklocomotion.constraints import TotalDurationConstraint
from sklocomotion.coordinates.math import euler_zyx_to_matrix
from sklocomotion.costs import NodeCost
from sklocomotion.costs import QuadraticPolynomialCost
from sklocomotion.parameters import ConstraintName
from sklocomotion.parameters import CostName
from sklocomotion.variables import EndeffectorLoad
from sklocomotion.variables import NodesVariablesAll
from sklocomotion.variables import NodesVariablesEEForce
from sklocomotion.variables import NodesVariablesEEMotion
from sklocomotion.variables import PhaseDurations
from sklocomotion.variables import POS
from sklocomotion.variables import SplineHolder
from sklocomotion.variables import variable_names
from sklocomotion.variables import VEL
from sklocomotion.variables import X
from sklocomotion.variables import Y
from sklocomotion.variables import Z


logger = getLogger(__name__)


class NlpFactory(object):
    """Build the variable sets and terms of one optimization problem.

    Parameters
    ----------
    params : sklocomotion.parameters.Parameters
        discretization, contact schedule, constraints and costs.
    terrain : sklocomotion.terrain.HeightMap
        terrain the robot walks on.
    model : sklocomotion.models.RobotModel
        kinematics and dynamics of the robot.
    initial_ee_W : numpy.ndarray
        (n_ee, 3) initial endeffector positions in world.
    initial_base : sklocomotion.state.BaseState
        initial base state.
    final_base : sklocomotion.state.BaseState
        desired final base state.
    """

    def __init__(self, params, terrain, model, initial_ee_W, initial_base,
                 final_base):
        self.params = params
        self.terrain = terrain
        self.model = model
        self.initial_ee_W = np.array(initial_ee_W, dtype=np.float64)
        self.initial_base = initial_base
        self.final_base = final_base

        n_ee = params.get_ee_count()
        if n_ee != model.n_ee:
            raise ValueError(
                'contact schedule for {} endeffectors, robot has {}'.format(
                    n_ee, model.n_ee))
        if self.initial_ee_W.shape != (n_ee, 3):
            raise ValueError(
                'initial endeffector positions must be of shape {}, '
                'got {}'.format((n_ee, 3), self.initial_ee_W.shape))
        self.t_total = params.get_total_time()
        self._build_variables()

    def _build_variables(self):
        params = self.params
        self.base_poly_durations = params.get_base_poly_durations()
        self.base_lin, self.base_ang = self._make_base_variables()
        self.ee_motion = self._make_endeffector_variables()
        self.ee_force = self._make_force_variables()
        self.phase_durations = self._make_contact_schedule_variables()
        self.spline_holder = SplineHolder(
            self.base_lin, self.base_ang, self.base_poly_durations,
            self.ee_motion, self.ee_force, self.phase_durations,
            params.is_optimize_time_variables())
        self.ee_load = None
        if ConstraintName.Convexity in params.get_used_constraints():
            self.ee_load = EndeffectorLoad(
                params.get_ee_count(), self.t_total, params.dt_load,
                is_in_contact=self._is_in_contact)

    def _is_in_contact(self, t, ee):
        return self.phase_durations[ee].is_contact_phase(t)

    def _make_base_variables(self):
        params = self.params
        n_nodes = len(self.base_poly_durations) + 1

        base_lin = NodesVariablesAll(
            variable_names.BASE_LIN_NODES, n_nodes, 3)
        final_pos = self.final_base.lin.p.copy()
        x, y = final_pos[X], final_pos[Y]
        final_pos[Z] = (self.terrain.get_height(x, y)
                        - self.model.kinematic_model.nominal_stance[0][Z])
        base_lin.set_by_linear_interpolation(
            self.initial_base.lin.p, final_pos, self.t_total)
        base_lin.add_start_bound(POS, [X, Y, Z], self.initial_base.lin.p)
        base_lin.add_start_bound(VEL, [X, Y, Z], self.initial_base.lin.v)
        base_lin.add_final_bound(POS, params.bounds_final_lin_pos, final_pos)
        base_lin.add_final_bound(VEL, params.bounds_final_lin_vel,
                                 self.final_base.lin.v)

        base_ang = NodesVariablesAll(
            variable_names.BASE_ANG_NODES, n_nodes, 3)
        base_ang.set_by_linear_interpolation(
            self.initial_base.ang.p, self.final_base.ang.p, self.t_total)
        base_ang.add_start_bound(POS, [X, Y, Z], self.initial_base.ang.p)
        base_ang.add_start_bound(VEL, [X, Y, Z], self.initial_base.ang.v)
        base_ang.add_final_bound(POS, params.bounds_final_ang_pos,
                                 self.final_base.ang.p)
        base_ang.add_final_bound(VEL, params.bounds_final_ang_vel,
                                 self.final_base.ang.v)
        logger.debug('base splines with %d nodes', n_nodes)
        return base_lin, base_ang

    def _make_endeffector_variables(self):
        params = self.params
        # footholds below the final base, rotated by the final heading
        yaw = self.final_base.ang.p[Z]
        w_R_b = euler_zyx_to_matrix([0.0, 0.0, yaw])
        nominal_stance = self.model.kinematic_model.get_nominal_stance_in_base()
        ee_motion = []
        for ee in range(params.get_ee_count()):
            nodes = NodesVariablesEEMotion(
                variable_names.ee_motion_nodes(ee),
                params.get_phase_count(ee),
                params.ee_in_contact_at_start[ee],
                params.ee_polynomials_per_swing_phase)
            final_ee_pos_W = self.final_base.lin.p + w_R_b.dot(
                nominal_stance[ee])
            x, y = final_ee_pos_W[X], final_ee_pos_W[Y]
            final_ee_pos_W[Z] = self.terrain.get_height(x, y)
            nodes.set_by_linear_interpolation(
                self.initial_ee_W[ee], final_ee_pos_W, self.t_total)
            nodes.add_start_bound(POS, [X, Y, Z], self.initial_ee_W[ee])
            ee_motion.append(nodes)
        return ee_motion

    def _make_force_variables(self):
        params = self.params
        dynamic_model = self.model.dynamic_model
        f_stance = np.array(
            [0.0, 0.0,
             dynamic_model.m() * dynamic_model.g / params.get_ee_count()])
        ee_force = []
        for ee in range(params.get_ee_count()):
            nodes = NodesVariablesEEForce(
                variable_names.ee_force_nodes(ee),
                params.get_phase_count(ee),
                params.ee_in_contact_at_start[ee],
                params.force_polynomials_per_stance_phase)
            nodes.set_by_linear_interpolation(
                f_stance, f_stance, self.t_total)
            ee_force.append(nodes)
        return ee_force

    def _make_contact_schedule_variables(self):
        params = self.params
        min_duration, max_duration = params.bound_phase_duration
        return [
            PhaseDurations(ee, params.ee_phase_durations[ee],
                           params.ee_in_contact_at_start[ee],
                           min_duration, max_duration,
                           optimize=params.is_optimize_time_variables())
            for ee in range(params.get_ee_count())]

    def get_variable_sets(self):
        """Variable sets in the order of the decision vector."""
        variable_sets = [self.base_lin, self.base_ang]
        variable_sets.extend(self.ee_motion)
        variable_sets.extend(self.ee_force)
        if self.params.is_optimize_time_variables():
            variable_sets.extend(self.phase_durations)
        if self.ee_load is not None:
            variable_sets.append(self.ee_load)
        return variable_sets

    def get_constraint(self, name):
        """Constraint sets of one kind, one per endeffector where needed.

        Raises
        ------
        ValueError
            if ``name`` is not a known constraint.
        """
        params = self.params
        n_ee = params.get_ee_count()
        if name == ConstraintName.Dynamic:
            return [DynamicConstraint(
                self.model.dynamic_model, self.t_total,
                params.dt_constraint_dynamic, self.spline_holder)]
        if name == ConstraintName.EndeffectorRom:
            return [RangeOfMotionConstraint(
                self.model.kinematic_model, self.t_total,
                params.dt_constraint_range_of_motion, ee, self.spline_holder)
                for ee in range(n_ee)]
        if name == ConstraintName.TotalTime:
            return [TotalDurationConstraint(self.phase_durations[ee])
                    for ee in range(n_ee)]
        if name == ConstraintName.Terrain:
            return [TerrainConstraint(self.terrain, self.ee_motion[ee])
                    for ee in range(n_ee)]
        if name == ConstraintName.Force:
            return [ForceConstraint(
                self.terrain, params.force_limit_in_normal_direction,
                self.ee_force[ee], self.ee_motion[ee])
                for ee in range(n_ee)]
        if name == ConstraintName.Swing:
            return [SwingConstraint(
                self.ee_motion[ee], params.get_average_swing_duration(ee))
                for ee in range(n_ee)]
        if name == ConstraintName.Convexity:
            if self.ee_load is None:
                raise ValueError(
                    'load variables are only built if convexity is a used '
                    'constraint')
            return [ConvexityConstraint(self.ee_load)]
        raise ValueError('unknown constraint {}'.format(name))

    def get_cost(self, name, weight):
        """Cost terms of one kind scaled by ``weight``.

        Raises
        ------
        ValueError
            if ``name`` is not a known cost.
        """
        n_ee = self.params.get_ee_count()
        if name == CostName.ForcesCost:
            return [NodeCost(variable_names.ee_force_nodes(ee), POS, Z,
                             weight)
                    for ee in range(n_ee)]
        if name == CostName.EEMotionCost:
            return [NodeCost(variable_names.ee_motion_nodes(ee), VEL, dim,
                             weight)
                    for ee in range(n_ee) for dim in (X, Y)]
        if name == CostName.BaseMotionCost:
            return [self._make_base_velocity_cost(weight)]
        raise ValueError('unknown cost {}'.format(name))

    def _make_base_velocity_cost(self, weight):
        # sum of squared velocities of all base position nodes
        n_vars = self.base_lin.get_rows()
        diagonal = np.zeros(n_vars)
        for idx in range(n_vars):
            if self.base_lin.get_node_values_info(idx)[0].deriv == VEL:
                diagonal[idx] = 1.0
        return QuadraticPolynomialCost(
            variable_names.BASE_LIN_NODES, np.diag(diagonal),
            np.zeros(n_vars), weight, name='base-motion-cost')
