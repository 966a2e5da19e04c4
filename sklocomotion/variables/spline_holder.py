from sklocomotion.variables.node_spline import NodeSpline


class SplineHolder(object):
    """Splines linked to the optimization variables.

    The splines exist whether or not their nodes are added to the problem as
    variables.

    Parameters
    ----------
    base_lin : sklocomotion.variables.NodesVariables
        nodes of the base position.
    base_ang : sklocomotion.variables.NodesVariables
        nodes of the base euler angles.
    base_poly_durations : list[float]
        duration of each base polynomial.
    ee_motion : list[sklocomotion.variables.NodesVariablesEEMotion]
        nodes of each endeffector position.
    ee_force : list[sklocomotion.variables.NodesVariablesEEForce]
        nodes of each endeffector force.
    phase_durations : list[sklocomotion.variables.PhaseDurations]
        contact schedule of each endeffector.
    ee_durations_change : bool
        whether the phase durations are optimized.
    """

    def __init__(self, base_lin, base_ang, base_poly_durations,
                 ee_motion, ee_force, phase_durations,
                 ee_durations_change=False):
        if not (len(ee_motion) == len(ee_force) == len(phase_durations)):
            raise ValueError(
                'got {} motion, {} force and {} duration sets'.format(
                    len(ee_motion), len(ee_force), len(phase_durations)))
        self.base_linear = NodeSpline(
            base_lin, poly_durations=base_poly_durations)
        self.base_angular = NodeSpline(
            base_ang, poly_durations=base_poly_durations)
        self.ee_motion = [
            NodeSpline(nodes, phase_durations=durations)
            for nodes, durations in zip(ee_motion, phase_durations)]
        self.ee_force = [
            NodeSpline(nodes, phase_durations=durations)
            for nodes, durations in zip(ee_force, phase_durations)]
        self.phase_durations = list(phase_durations)
        self.ee_durations_change = ee_durations_change

    @property
    def n_ee(self):
        return len(self.ee_motion)

    def get_total_time(self):
        return self.base_linear.get_total_time()
