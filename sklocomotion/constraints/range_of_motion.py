from scipy import sparse

from sklocomotion.constraints.time_discretization import \
    TimeDiscretizationConstraint
from sklocomotion.variables.angular_state_converter import \
    AngularStateConverter
from sklocomotion.variables.polynomial import POS
from sklocomotion.variables import variable_names


class RangeOfMotionConstraint(TimeDiscretizationConstraint):
    """Keep an endeffector in a box around its nominal position.

    At every sample time the endeffector position is expressed in the base
    frame and its deviation from the nominal stance is bounded by the
    maximum deviation of the kinematic model along each base axis.

    Parameters
    ----------
    model : sklocomotion.models.KinematicModel
        nominal stance and maximum deviation.
    total_time : float
        duration of the motion.
    dt : float
        spacing of the sample times.
    ee : int
        endeffector id.
    spline_holder : sklocomotion.variables.SplineHolder
        splines built from the current variables.
    """

    def __init__(self, model, total_time, dt, ee, spline_holder):
        super(RangeOfMotionConstraint, self).__init__(
            'rangeofmotion-{}'.format(ee), total_time, dt, 3)
        self.ee = ee
        self.base_linear = spline_holder.base_linear
        self.base_angular = AngularStateConverter(spline_holder.base_angular)
        self.ee_motion = spline_holder.ee_motion[ee]
        self.max_deviation_from_nominal = \
            model.get_maximum_deviation_from_nominal()
        self.nominal_ee_pos_B = model.get_nominal_stance_in_base()[ee]

    def _vector_base_to_ee_W(self, t):
        return (self.ee_motion.get_point(t).p
                - self.base_linear.get_point(t).p)

    def update_constraint_at_instance(self, t, k, g):
        b_R_w = self.base_angular.get_rotation_matrix_base_to_world(t).T
        pos_ee_B = b_R_w.dot(self._vector_base_to_ee_W(t))
        row = self.get_row(k, 0)
        g[row:row + 3] = pos_ee_B - self.nominal_ee_pos_B

    def update_bounds_at_instance(self, t, k, bounds):
        row = self.get_row(k, 0)
        bounds[row:row + 3, 0] = -self.max_deviation_from_nominal
        bounds[row:row + 3, 1] = self.max_deviation_from_nominal

    def update_jacobian_at_instance(self, t, k, var_set_name, jac):
        b_R_w = sparse.csr_matrix(
            self.base_angular.get_rotation_matrix_base_to_world(t).T)
        if var_set_name == variable_names.BASE_LIN_NODES:
            block = -b_R_w.dot(
                self.base_linear.get_jacobian_wrt_nodes(t, POS))
        elif var_set_name == variable_names.BASE_ANG_NODES:
            block = self.base_angular.get_derivative_of_rotation_matrix_wrt_coeff(  # NOQA
                t, self._vector_base_to_ee_W(t), inverse=True)
        elif var_set_name == variable_names.ee_motion_nodes(self.ee):
            block = b_R_w.dot(self.ee_motion.get_jacobian_wrt_nodes(t, POS))
        elif var_set_name == variable_names.ee_schedule(self.ee):
            block = b_R_w.dot(
                self.ee_motion.get_jacobian_wrt_durations(t, POS))
        else:
            return
        self._set_rows(jac, k, block)
