from sklocomotion.models.dynamic_model import SingleRigidBodyDynamics
from sklocomotion.models.kinematic_model import KinematicModel


class RobotModel(object):
    """Kinematic and dynamic description of a robot used by the optimizer.

    Parameters
    ----------
    kinematic_model : KinematicModel
        reachable workspace of the endeffectors.
    dynamic_model : SingleRigidBodyDynamics
        body dynamics.
    """

    def __init__(self, kinematic_model, dynamic_model):
        if kinematic_model.n_ee != dynamic_model.n_ee:
            raise ValueError(
                'kinematic model has {} endeffectors, dynamic model {}'.format(
                    kinematic_model.n_ee, dynamic_model.n_ee))
        self.kinematic_model = kinematic_model
        self.dynamic_model = dynamic_model

    @property
    def n_ee(self):
        return self.kinematic_model.n_ee

    @classmethod
    def from_parameters(cls, nominal_stance_B, max_deviation, mass,
                        inertia_b):
        """Build a model from plain numbers.

        Examples
        --------
        >>> import numpy as np
        >>> model = RobotModel.from_parameters(
        ...     [[0.0, 0.0, -0.58]], [0.25, 0.15, 0.2], 20.0, np.eye(3))
        >>> model.n_ee
        1
        """
        kinematic_model = KinematicModel(nominal_stance_B, max_deviation)
        dynamic_model = SingleRigidBodyDynamics(
            mass, inertia_b, kinematic_model.n_ee)
        return cls(kinematic_model, dynamic_model)
