import numpy as np
from scipy import sparse

from sklocomotion.variables.nodes_variables import NOT_OPTIMIZED
from sklocomotion.variables.polynomial import CubicHermitePolynomial
from sklocomotion.variables.polynomial import POS
from sklocomotion.variables.polynomial import VEL


def get_segment_id(t, durations):
    """Index and start time of the segment owning ``t``.

    A time exactly on the border of two segments belongs to the later one.
    Times past the end belong to the last segment.

    Parameters
    ----------
    t : float
        global time.
    durations : list[float]
        consecutive segment durations.

    Returns
    -------
    segment_id : int
        index of the segment.
    t_start : float
        global time at which the segment starts.
    """
    t_start = 0.0
    n_segments = len(durations)
    for segment_id in range(n_segments - 1):
        t_end = t_start + durations[segment_id]
        if t < t_end:
            return segment_id, t_start
        t_start = t_end
    return n_segments - 1, t_start


def get_local_time(t, durations):
    """Segment index and local time of ``t``, both clamped to the spline.

    Returns
    -------
    segment_id : int
        index of the segment.
    t_local : float
        time since the start of the segment in [0, duration].
    """
    t = min(max(t, 0.0), float(np.sum(durations)))
    segment_id, t_start = get_segment_id(t, durations)
    duration = max(durations[segment_id], 0.0)
    t_local = min(max(t - t_start, 0.0), duration)
    return segment_id, t_local


class NodeSpline(object):
    """Piecewise cubic Hermite spline spanned by optimization nodes.

    Every query recomputes the polynomials from the current node values and
    durations, so the spline always reflects the latest decision vector.

    Parameters
    ----------
    nodes : sklocomotion.variables.NodesVariables
        nodes bounding the polynomials.
    poly_durations : list[float], optional
        fixed duration of each polynomial.
    phase_durations : sklocomotion.variables.PhaseDurations, optional
        phase durations from which the polynomial durations follow, in
        that case ``nodes`` must be phase based.
    """

    def __init__(self, nodes, poly_durations=None, phase_durations=None):
        if (poly_durations is None) == (phase_durations is None):
            raise ValueError(
                'give either poly_durations or phase_durations')
        self.nodes = nodes
        self.phase_durations = phase_durations
        if poly_durations is not None:
            poly_durations = [float(d) for d in poly_durations]
            if len(poly_durations) != nodes.get_poly_count():
                raise ValueError(
                    '{} durations given for {} polynomials of {}'.format(
                        len(poly_durations), nodes.get_poly_count(),
                        nodes.name))
            if min(poly_durations) <= 0.0:
                raise ValueError('polynomial durations must be positive')
        else:
            if nodes.phase_count != phase_durations.n_phases:
                raise ValueError(
                    '{} has {} phases but {} has {}'.format(
                        nodes.name, nodes.phase_count,
                        phase_durations.name, phase_durations.n_phases))
        self._poly_durations = poly_durations

    @property
    def n_dim(self):
        return self.nodes.n_dim

    def get_poly_durations(self):
        if self.phase_durations is None:
            return list(self._poly_durations)
        return self.nodes.get_poly_durations(
            self.phase_durations.get_phase_durations())

    def get_total_time(self):
        return float(np.sum(self.get_poly_durations()))

    def get_segment_id(self, t):
        return get_local_time(t, self.get_poly_durations())[0]

    def _locate(self, t):
        durations = self.get_poly_durations()
        poly_id, t_local = get_local_time(t, durations)
        start, end = self.nodes.get_boundary_nodes(poly_id)
        poly = CubicHermitePolynomial(start, end, durations[poly_id])
        return poly_id, t_local, poly

    def get_point(self, t):
        """Position, velocity and acceleration at global time ``t``.

        Returns
        -------
        state : State
            namedtuple of (n_dim,) vectors.
        """
        _, t_local, poly = self._locate(t)
        return poly.get_point(t_local)

    def is_constant_phase(self, t):
        """Whether ``t`` lies in a phase whose nodes do not change."""
        if not hasattr(self.nodes, 'is_in_constant_phase'):
            return False
        return self.nodes.is_in_constant_phase(self.get_segment_id(t))

    def get_jacobian_wrt_nodes(self, t, deriv):
        """Jacobian of one derivative at ``t`` wrt the node variables.

        Parameters
        ----------
        t : float
            global time.
        deriv : int
            ``POS``, ``VEL`` or ``ACC``.

        Returns
        -------
        jac : scipy.sparse.csr_matrix
            (n_dim, n_node_variables) matrix, row ``dim`` is the
            sensitivity of dimension ``dim``.
        """
        poly_id, t_local, poly = self._locate(t)
        weights = poly.get_node_weights(deriv, t_local)
        contributions = [(poly_id, POS, weights[0]),
                         (poly_id, VEL, weights[1]),
                         (poly_id + 1, POS, weights[2]),
                         (poly_id + 1, VEL, weights[3])]
        rows = []
        cols = []
        data = []
        for dim in range(self.n_dim):
            for node_id, node_deriv, weight in contributions:
                idx = self.nodes.get_opt_index(node_id, node_deriv, dim)
                if idx == NOT_OPTIMIZED:
                    continue
                rows.append(dim)
                cols.append(idx)
                data.append(weight)
        # duplicate entries of shared variables are summed
        return sparse.csr_matrix(
            (data, (rows, cols)), shape=(self.n_dim, self.nodes.get_rows()))

    def get_jacobian_wrt_durations(self, t, deriv):
        """Jacobian of one derivative at ``t`` wrt the phase durations.

        A previous phase shifts the polynomial along the time axis, the
        current phase stretches it. Zero with shape ``(n_dim, 0)`` if the
        durations are fixed.
        """
        if self.phase_durations is None:
            return sparse.csr_matrix((self.n_dim, 0))
        if self.phase_durations.get_rows() == 0:
            return sparse.csr_matrix((self.n_dim, 0))
        poly_id, t_local, poly = self._locate(t)
        dxdT = poly.get_derivative_wrt_duration(deriv, t_local)
        xd = poly.get_derivative(deriv + 1, t_local)
        inner = self.nodes.get_derivative_of_poly_duration_wrt_phase_duration(
            poly_id)
        n_prev = self.nodes.get_number_of_prev_polynomials_in_phase(poly_id)
        dx_dphase = inner * (dxdT - n_prev * xd)
        current_phase = self.nodes.polynomial_info[poly_id].phase
        return self.phase_durations.get_jacobian_of_pos(
            current_phase, dx_dphase, xd)

