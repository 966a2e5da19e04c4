# flake8: noqa

from sklocomotion.constraints.convexity import ConvexityConstraint
from sklocomotion.constraints.dynamic import DynamicConstraint
from sklocomotion.constraints.force import ForceConstraint
from sklocomotion.constraints.range_of_motion import RangeOfMotionConstraint
from sklocomotion.constraints.swing import SwingConstraint
from sklocomotion.constraints.terrain import TerrainConstraint
from sklocomotion.constraints.time_discretization import discretize_time
from sklocomotion.constraints.time_discretization import TimeDiscretizationConstraint
from sklocomotion.constraints.total_duration import TotalDurationConstraint
