import numpy as np
from scipy import sparse

from sklocomotion.optimization.component import CostTerm


class QuadraticPolynomialCost(CostTerm):
    """Quadratic form over the values of one variable set.

    The cost is calculated as

    .. math::
        w (x^T M x + v^T x)

    and its gradient ``w ((M + M^T) x + v)`` only fills the columns of that
    variable set.

    Parameters
    ----------
    var_set_name : str
        name of the variable set ``x``.
    matrix : numpy.ndarray
        (n, n) matrix ``M``.
    vector : numpy.ndarray
        (n,) vector ``v``.
    weight : float
        scale ``w`` of the cost.
    name : str, optional
        name of the cost term.
    """

    def __init__(self, var_set_name, matrix, vector, weight=1.0, name=None):
        matrix = np.array(matrix, dtype=np.float64)
        vector = np.array(vector, dtype=np.float64)
        if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
            raise ValueError(
                'matrix must be square, got {}'.format(matrix.shape))
        if vector.shape != (matrix.shape[0],):
            raise ValueError(
                'vector of shape {} does not match matrix {}'.format(
                    vector.shape, matrix.shape))
        if name is None:
            name = 'quadratic-' + var_set_name
        super(QuadraticPolynomialCost, self).__init__(name)
        self.var_set_name = var_set_name
        self.matrix = matrix
        self.vector = vector
        self.weight = weight

    def init_variable_dependent_quantities(self, variables):
        n_vars = variables.get_component(self.var_set_name).get_rows()
        if n_vars != len(self.vector):
            raise ValueError(
                '{} has {} variables, the cost expects {}'.format(
                    self.var_set_name, n_vars, len(self.vector)))

    def _get_x(self):
        return self.variables.get_component(self.var_set_name).get_values()

    def get_cost(self):
        x = self._get_x()
        return self.weight * (x.dot(self.matrix).dot(x) + self.vector.dot(x))

    def get_jacobian_block(self, var_set_name):
        if var_set_name != self.var_set_name:
            return None
        x = self._get_x()
        grad = self.weight * (
            (self.matrix + self.matrix.T).dot(x) + self.vector)
        return sparse.csr_matrix(grad.reshape(1, -1))
