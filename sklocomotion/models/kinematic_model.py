import numpy as np


class KinematicModel(object):
    """Reachable workspace of each endeffector as a box around its nominal.

    Parameters
    ----------
    nominal_stance_B : numpy.ndarray or list
        (n_ee, 3) nominal endeffector positions in base frame.
    max_deviation : numpy.ndarray or list
        (3,) maximum deviation from the nominal position along each base
        axis.

    Examples
    --------
    >>> model = KinematicModel([[0.3, 0.2, -0.5], [0.3, -0.2, -0.5]],
    ...                        [0.1, 0.1, 0.1])
    >>> model.n_ee
    2
    """

    def __init__(self, nominal_stance_B, max_deviation):
        nominal_stance_B = np.array(nominal_stance_B, dtype=np.float64)
        max_deviation = np.array(max_deviation, dtype=np.float64)
        if nominal_stance_B.ndim != 2 or nominal_stance_B.shape[1] != 3:
            raise ValueError(
                'nominal stance must be of shape (n_ee, 3), got {}'.format(
                    nominal_stance_B.shape))
        if max_deviation.shape != (3,):
            raise ValueError(
                'max deviation must be of shape (3,), got {}'.format(
                    max_deviation.shape))
        if np.any(max_deviation < 0.0):
            raise ValueError('max deviation must not be negative')
        self.nominal_stance = nominal_stance_B
        self.max_dev_from_nominal = max_deviation

    @property
    def n_ee(self):
        return len(self.nominal_stance)

    def get_number_of_endeffectors(self):
        return self.n_ee

    def get_nominal_stance_in_base(self):
        return self.nominal_stance.copy()

    def get_maximum_deviation_from_nominal(self):
        return self.max_dev_from_nominal.copy()
