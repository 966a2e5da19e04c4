# flake8: noqa

from sklocomotion.models.dynamic_model import SingleRigidBodyDynamics
from sklocomotion.models.inverse_kinematics import InverseKinematics
from sklocomotion.models.inverse_kinematics import ThreeJointLegInverseKinematics
from sklocomotion.models.kinematic_model import KinematicModel
from sklocomotion.models.robot_model import RobotModel
