"""Cubic Hermite polynomial between two nodes."""

import collections

import numpy as np


POS = 0
VEL = 1
ACC = 2
JERK = 3

# durations are clamped to this value while evaluating, the solver may
# explore non-positive durations
MIN_POLY_DURATION = 1e-6


State = collections.namedtuple('State', ['p', 'v', 'a'])
State.__doc__ = """Position, velocity and acceleration at one instant.

Indexing with ``POS``, ``VEL`` or ``ACC`` returns the respective vector.
"""


def _time_powers(t, deriv):
    """Derivative of order ``deriv`` of [1, t, t^2, t^3] wrt t."""
    if deriv == POS:
        return np.array([1.0, t, t * t, t * t * t])
    elif deriv == VEL:
        return np.array([0.0, 1.0, 2.0 * t, 3.0 * t * t])
    elif deriv == ACC:
        return np.array([0.0, 0.0, 2.0, 6.0 * t])
    elif deriv == JERK:
        return np.array([0.0, 0.0, 0.0, 6.0])
    raise ValueError('unsupported derivative order {}'.format(deriv))


class CubicHermitePolynomial(object):
    """Third order polynomial matching position and velocity at both ends.

    Parameters
    ----------
    start : numpy.ndarray
        (2, n_dim) array of start position and velocity.
    end : numpy.ndarray
        (2, n_dim) array of end position and velocity.
    duration : float
        duration of the polynomial.
    """

    def __init__(self, start, end, duration):
        self.start = np.asarray(start, dtype=np.float64)
        self.end = np.asarray(end, dtype=np.float64)
        self.duration = max(float(duration), MIN_POLY_DURATION)

        x0, v0 = self.start
        x1, v1 = self.end
        h = self.duration
        self.coeffs = np.array([
            x0,
            v0,
            -(3.0 * (x0 - x1) + h * (2.0 * v0 + v1)) / h ** 2,
            (2.0 * (x0 - x1) + h * (v0 + v1)) / h ** 3,
        ])

    @property
    def n_dim(self):
        return self.coeffs.shape[1]

    def get_derivative(self, deriv, t_local):
        return _time_powers(t_local, deriv).dot(self.coeffs)

    def get_point(self, t_local):
        return State(self.get_derivative(POS, t_local),
                     self.get_derivative(VEL, t_local),
                     self.get_derivative(ACC, t_local))

    def get_node_weights(self, deriv, t_local):
        """Sensitivity of one derivative wrt the boundary node values.

        The weights are identical for every dimension.

        Returns
        -------
        weights : numpy.ndarray
            derivatives wrt start position, start velocity, end position
            and end velocity, in this order.
        """
        h = self.duration
        coeff_jac = np.array([
            [1.0, 0.0, 0.0, 0.0],
            [0.0, 1.0, 0.0, 0.0],
            [-3.0 / h ** 2, -2.0 / h, 3.0 / h ** 2, -1.0 / h],
            [2.0 / h ** 3, 1.0 / h ** 2, -2.0 / h ** 3, 1.0 / h ** 2],
        ])
        return _time_powers(t_local, deriv).dot(coeff_jac)

    def get_derivative_wrt_duration(self, deriv, t_local):
        """Sensitivity of one derivative wrt the duration at fixed local time.

        Returns
        -------
        dxdT : numpy.ndarray
            (n_dim,) vector.
        """
        x0, v0 = self.start
        x1, v1 = self.end
        h = self.duration
        dcoeffs = np.array([
            np.zeros_like(x0),
            np.zeros_like(x0),
            6.0 * (x0 - x1) / h ** 3 + (2.0 * v0 + v1) / h ** 2,
            -6.0 * (x0 - x1) / h ** 4 - 2.0 * (v0 + v1) / h ** 3,
        ])
        return _time_powers(t_local, deriv).dot(dcoeffs)
