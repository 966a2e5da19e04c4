import numpy as np
from scipy import sparse

from sklocomotion.optimization.component import CostTerm


class NodeCost(CostTerm):
    """Squared node values of one derivative and dimension.

    E.g. penalizes the vertical velocity of all base nodes.

    Parameters
    ----------
    nodes_name : str
        name of the nodes variable set.
    deriv : int
        ``POS`` or ``VEL``.
    dim : int
        dimension of the node values.
    weight : float
        scale of the cost.
    """

    def __init__(self, nodes_name, deriv, dim, weight=1.0):
        super(NodeCost, self).__init__(
            'node-cost-{}-{}-{}'.format(nodes_name, deriv, dim))
        self.nodes_name = nodes_name
        self.deriv = deriv
        self.dim = dim
        self.weight = weight
        self._indices = np.zeros(0, dtype=np.int64)

    def init_variable_dependent_quantities(self, variables):
        nodes = variables.get_component(self.nodes_name)
        indices = []
        for idx in range(nodes.get_rows()):
            info = nodes.get_node_values_info(idx)[0]
            if info.deriv == self.deriv and info.dim == self.dim:
                indices.append(idx)
        self._indices = np.array(indices, dtype=np.int64)

    def get_cost(self):
        x = self.variables.get_component(self.nodes_name).get_values()
        return self.weight * float(np.sum(x[self._indices] ** 2))

    def get_jacobian_block(self, var_set_name):
        if var_set_name != self.nodes_name:
            return None
        x = self.variables.get_component(self.nodes_name).get_values()
        grad = np.zeros((1, len(x)))
        grad[0, self._indices] = 2.0 * self.weight * x[self._indices]
        return sparse.csr_matrix(grad)
