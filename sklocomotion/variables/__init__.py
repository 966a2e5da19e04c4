# flake8: noqa

from sklocomotion.variables.polynomial import ACC
from sklocomotion.variables.polynomial import CubicHermitePolynomial
from sklocomotion.variables.polynomial import JERK
from sklocomotion.variables.polynomial import POS
from sklocomotion.variables.polynomial import State
from sklocomotion.variables.polynomial import VEL
from sklocomotion.variables.nodes_variables import NodesVariables
from sklocomotion.variables.nodes_variables import NodesVariablesAll
from sklocomotion.variables.nodes_variables import NodeValueInfo
from sklocomotion.variables.nodes_variables import NOT_OPTIMIZED
from sklocomotion.variables.nodes_variables import X
from sklocomotion.variables.nodes_variables import Y
from sklocomotion.variables.nodes_variables import Z
from sklocomotion.variables.phase_nodes import NodesVariablesEEForce
from sklocomotion.variables.phase_nodes import NodesVariablesEEMotion
from sklocomotion.variables.phase_nodes import NodesVariablesPhaseBased
from sklocomotion.variables.phase_nodes import PolyInfo
from sklocomotion.variables.node_spline import NodeSpline
from sklocomotion.variables.phase_durations import PhaseDurations
from sklocomotion.variables.angular_state_converter import AngularStateConverter
from sklocomotion.variables.endeffector_load import EndeffectorLoad
from sklocomotion.variables.spline_holder import SplineHolder
from sklocomotion.variables import variable_names
