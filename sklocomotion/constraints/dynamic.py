import numpy as np

from sklocomotion.constraints.time_discretization import \
    TimeDiscretizationConstraint
from sklocomotion.coordinates.math import euler_zyx_matrix_derivatives
from sklocomotion.variables.angular_state_converter import \
    AngularStateConverter
from sklocomotion.variables.polynomial import ACC
from sklocomotion.variables.polynomial import POS
from sklocomotion.variables import variable_names


class DynamicConstraint(TimeDiscretizationConstraint):
    """Base acceleration consistent with the endeffector forces.

    At every sample time the residual of the dynamic model evaluated with
    the current base motion, endeffector positions and forces is zero.

    Parameters
    ----------
    model : sklocomotion.models.SingleRigidBodyDynamics
        dynamics of the body.
    total_time : float
        duration of the motion.
    dt : float
        spacing of the sample times.
    spline_holder : sklocomotion.variables.SplineHolder
        splines built from the current variables.
    """

    def __init__(self, model, total_time, dt, spline_holder):
        super(DynamicConstraint, self).__init__(
            'dynamic', total_time, dt, 6)
        self.model = model
        self.base_linear = spline_holder.base_linear
        self.base_angular = AngularStateConverter(spline_holder.base_angular)
        self.ee_motion = spline_holder.ee_motion
        self.ee_force = spline_holder.ee_force
        self.n_ee = spline_holder.n_ee

    def _update_model(self, t):
        com = self.base_linear.get_point(t)
        ee_forces = np.array([spline.get_point(t).p
                              for spline in self.ee_force])
        ee_pos = np.array([spline.get_point(t).p
                           for spline in self.ee_motion])
        self.model.set_current(
            com.p, com.a,
            self.base_angular.get_rotation_matrix_base_to_world(t),
            self.base_angular.get_angular_velocity_in_world(t),
            self.base_angular.get_angular_acceleration_in_world(t),
            ee_forces, ee_pos)

    def update_constraint_at_instance(self, t, k, g):
        self._update_model(t)
        row = self.get_row(k, 0)
        g[row:row + 6] = self.model.get_dynamic_violation()

    def update_bounds_at_instance(self, t, k, bounds):
        row = self.get_row(k, 0)
        bounds[row:row + 6] = 0.0

    def update_jacobian_at_instance(self, t, k, var_set_name, jac):
        self._update_model(t)
        if var_set_name == variable_names.BASE_LIN_NODES:
            block = self.model.get_jacobian_wrt_base_lin(
                self.base_linear.get_jacobian_wrt_nodes(t, POS),
                self.base_linear.get_jacobian_wrt_nodes(t, ACC))
            self._set_rows(jac, k, block)
            return
        if var_set_name == variable_names.BASE_ANG_NODES:
            euler = self.base_angular.euler
            dR = euler_zyx_matrix_derivatives(euler.get_point(t).p)
            block = self.model.get_jacobian_wrt_base_ang(
                dR,
                euler.get_jacobian_wrt_nodes(t, POS),
                self.base_angular.get_derivative_of_angular_velocity_wrt_coeff(t),  # NOQA
                self.base_angular.get_derivative_of_angular_acceleration_wrt_coeff(t))  # NOQA
            self._set_rows(jac, k, block)
            return
        for ee in range(self.n_ee):
            if var_set_name == variable_names.ee_force_nodes(ee):
                block = self.model.get_jacobian_wrt_force(
                    self.ee_force[ee].get_jacobian_wrt_nodes(t, POS), ee)
            elif var_set_name == variable_names.ee_motion_nodes(ee):
                block = self.model.get_jacobian_wrt_ee_pos(
                    self.ee_motion[ee].get_jacobian_wrt_nodes(t, POS), ee)
            elif var_set_name == variable_names.ee_schedule(ee):
                block = (
                    self.model.get_jacobian_wrt_force(
                        self.ee_force[ee].get_jacobian_wrt_durations(t, POS),
                        ee)
                    + self.model.get_jacobian_wrt_ee_pos(
                        self.ee_motion[ee].get_jacobian_wrt_durations(t, POS),
                        ee))
            else:
                continue
            self._set_rows(jac, k, block)
            return
