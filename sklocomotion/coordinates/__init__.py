# flake8: noqa

from .math import euler_zyx_matrix_derivatives
from .math import euler_zyx_to_matrix
from .math import matrix2euler_zyx
from .math import matrix2quaternion
from .math import outer_product_matrix
from .math import quaternion2matrix
from .math import rotation_matrix
from .math import rpy_angle
from .math import rpy_matrix
from .math import unique_euler_zyx
from .math import wrap_angle
