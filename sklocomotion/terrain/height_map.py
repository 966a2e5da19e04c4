"""Terrain described as a height above each horizontal position.

Besides the height, constraints need the local surface basis (normal and
two tangents) and how it changes along x and y. Subclasses only implement
the height and its first and second derivatives, the basis is derived from
them.
"""

import enum

import numpy as np


class Direction(enum.IntEnum):
    Normal = 0
    Tangent1 = 1
    Tangent2 = 2


X_ = 0
Y_ = 1


class HeightMap(object):
    """Base class of all terrains.

    Parameters
    ----------
    friction_coeff : float
        Coulomb friction coefficient of the surface.
    """

    def __init__(self, friction_coeff=0.5):
        if friction_coeff < 0.0:
            raise ValueError(
                'friction coefficient must not be negative, got {}'.format(
                    friction_coeff))
        self.friction_coeff = friction_coeff

    def get_friction_coeff(self):
        return self.friction_coeff

    def get_height(self, x, y):
        raise NotImplementedError

    def get_height_derivative_wrt_x(self, x, y):
        return 0.0

    def get_height_derivative_wrt_y(self, x, y):
        return 0.0

    def get_height_derivative_wrt_xx(self, x, y):
        return 0.0

    def get_height_derivative_wrt_xy(self, x, y):
        return 0.0

    def get_height_derivative_wrt_yy(self, x, y):
        return 0.0

    def get_derivative_of_height_wrt(self, dim, x, y):
        """Derivative of the height wrt ``X_`` or ``Y_``."""
        if dim == X_:
            return self.get_height_derivative_wrt_x(x, y)
        if dim == Y_:
            return self.get_height_derivative_wrt_y(x, y)
        raise ValueError('dim must be 0 (x) or 1 (y), got {}'.format(dim))

    def _get_basis(self, direction, x, y):
        dhx = self.get_height_derivative_wrt_x(x, y)
        dhy = self.get_height_derivative_wrt_y(x, y)
        if direction == Direction.Normal:
            return np.array([-dhx, -dhy, 1.0])
        if direction == Direction.Tangent1:
            return np.array([1.0, 0.0, dhx])
        return np.array([0.0, 1.0, dhy])

    def _get_basis_derivative(self, direction, dim, x, y):
        # second derivative of the height along (x or y, dim)
        if dim == X_:
            hx = self.get_height_derivative_wrt_xx(x, y)
            hy = self.get_height_derivative_wrt_xy(x, y)
        else:
            hx = self.get_height_derivative_wrt_xy(x, y)
            hy = self.get_height_derivative_wrt_yy(x, y)
        if direction == Direction.Normal:
            return np.array([-hx, -hy, 0.0])
        if direction == Direction.Tangent1:
            return np.array([0.0, 0.0, hx])
        return np.array([0.0, 0.0, hy])

    def get_normalized_basis(self, direction, x, y):
        """Unit normal or tangent of the surface at ``(x, y)``.

        Examples
        --------
        >>> FlatGround().get_normalized_basis(Direction.Normal, 0.0, 0.0)
        array([-0., -0.,  1.])
        """
        v = self._get_basis(direction, x, y)
        return v / np.linalg.norm(v)

    def get_derivative_of_normalized_basis_wrt(self, direction, dim, x, y):
        """Derivative of :meth:`get_normalized_basis` wrt x or y."""
        v = self._get_basis(direction, x, y)
        dv = self._get_basis_derivative(direction, dim, x, y)
        norm = np.linalg.norm(v)
        v_hat = v / norm
        return (dv - v_hat * v_hat.dot(dv)) / norm


class FlatGround(HeightMap):
    """Horizontal plane at a constant height."""

    def __init__(self, height=0.0, friction_coeff=0.5):
        super(FlatGround, self).__init__(friction_coeff)
        self.height = height

    def set_ground_height(self, height):
        self.height = height

    def get_height(self, x, y):
        return self.height


class Slope(HeightMap):
    """Flat ground rising with a constant slope along x after ``x_start``.

    Parameters
    ----------
    x_start : float
        x position where the slope begins.
    slope : float
        height gained per meter along x.
    height : float
        height of the flat part.
    friction_coeff : float
        Coulomb friction coefficient of the surface.
    """

    def __init__(self, x_start=1.0, slope=0.3, height=0.0,
                 friction_coeff=0.5):
        super(Slope, self).__init__(friction_coeff)
        self.x_start = x_start
        self.slope = slope
        self.height = height

    def set_ground_height(self, height):
        self.height = height

    def get_height(self, x, y):
        if x < self.x_start:
            return self.height
        return self.height + self.slope * (x - self.x_start)

    def get_height_derivative_wrt_x(self, x, y):
        if x < self.x_start:
            return 0.0
        return self.slope
