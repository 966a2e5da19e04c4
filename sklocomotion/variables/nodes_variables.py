import collections
from logging import getLogger

import numpy as np

from sklocomotion.optimization.component import make_bounds
from sklocomotion.optimization.component import VariableSet
from sklocomotion.variables.polynomial import POS
from sklocomotion.variables.polynomial import VEL


logger = getLogger(__name__)

X = 0
Y = 1
Z = 2

NOT_OPTIMIZED = -1

NodeValueInfo = collections.namedtuple('NodeValueInfo', ['id', 'deriv', 'dim'])


class NodesVariables(VariableSet):
    """Position and velocity nodes bounding the polynomials of a spline.

    The node values live in a ``(n_nodes, 2, n_dim)`` array. Which of them
    are optimization variables is decided by subclasses through an index
    map: entry ``idx`` lists every node value written by variable ``idx``.
    Node values not listed are held constant.

    Parameters
    ----------
    name : str
        name of the variable set.
    n_nodes : int
        number of nodes.
    n_dim : int
        dimension of each node value.
    """

    def __init__(self, name, n_nodes, n_dim):
        super(NodesVariables, self).__init__(name, 0)
        if n_nodes < 2:
            raise ValueError(
                'a spline needs at least 2 nodes, got {}'.format(n_nodes))
        self.n_dim = n_dim
        self.nodes = np.zeros((n_nodes, 2, n_dim))
        self._index_map = []
        self._node_to_index = np.full((n_nodes, 2, n_dim), NOT_OPTIMIZED,
                                      dtype=np.int64)
        self._bounds = np.zeros((0, 2))

    def _set_index_map(self, index_map):
        self._index_map = [list(infos) for infos in index_map]
        self._node_to_index.fill(NOT_OPTIMIZED)
        for idx, infos in enumerate(self._index_map):
            for info in infos:
                self._node_to_index[info.id, info.deriv, info.dim] = idx
        self.set_rows(len(self._index_map))
        self._bounds = make_bounds(len(self._index_map))

    @property
    def n_nodes(self):
        return self.nodes.shape[0]

    def get_poly_count(self):
        return self.n_nodes - 1

    def get_opt_index(self, node_id, deriv, dim):
        """Optimization index of one node value or ``NOT_OPTIMIZED``."""
        return int(self._node_to_index[node_id, deriv, dim])

    def get_node_values_info(self, idx):
        return list(self._index_map[idx])

    def get_nodes(self):
        return self.nodes

    def get_boundary_nodes(self, poly_id):
        return self.nodes[poly_id], self.nodes[poly_id + 1]

    def get_values(self):
        x = np.zeros(self.get_rows())
        for idx, infos in enumerate(self._index_map):
            info = infos[0]
            x[idx] = self.nodes[info.id, info.deriv, info.dim]
        return x

    def set_variables(self, x):
        for idx, infos in enumerate(self._index_map):
            for info in infos:
                self.nodes[info.id, info.deriv, info.dim] = x[idx]

    def get_bounds(self):
        return self._bounds.copy()

    def set_by_linear_interpolation(self, initial_val, final_val, total_time):
        """Initialize the variables on a straight line of constant velocity.

        Parameters
        ----------
        initial_val : numpy.ndarray
            value at the first node.
        final_val : numpy.ndarray
            value at the last node.
        total_time : float
            total duration of the spline.
        """
        initial_val = np.asarray(initial_val, dtype=np.float64)
        dp = np.asarray(final_val, dtype=np.float64) - initial_val
        average_velocity = dp / total_time
        n_polys = self.get_poly_count()
        for infos in self._index_map:
            for info in infos:
                if info.deriv == POS:
                    pos = initial_val + info.id / float(n_polys) * dp
                    self.nodes[info.id, POS, info.dim] = pos[info.dim]
                elif info.deriv == VEL:
                    self.nodes[info.id, VEL, info.dim] = \
                        average_velocity[info.dim]
        # shared variables take the value of their first node
        self.set_variables(self.get_values())

    def add_bounds(self, node_id, deriv, dims, values):
        """Fix some node values to ``values`` through equal bounds.

        Values that are not optimized are set directly.
        """
        for dim in dims:
            idx = self.get_opt_index(node_id, deriv, dim)
            if idx == NOT_OPTIMIZED:
                self.nodes[node_id, deriv, dim] = values[dim]
                continue
            self._bounds[idx] = (values[dim], values[dim])
            for info in self._index_map[idx]:
                self.nodes[info.id, info.deriv, info.dim] = values[dim]

    def add_start_bound(self, deriv, dims, values):
        self.add_bounds(0, deriv, dims, values)

    def add_final_bound(self, deriv, dims, values):
        self.add_bounds(self.n_nodes - 1, deriv, dims, values)


class NodesVariablesAll(NodesVariables):
    """Nodes where every position and velocity value is optimized."""

    def __init__(self, name, n_nodes, n_dim):
        super(NodesVariablesAll, self).__init__(name, n_nodes, n_dim)
        index_map = []
        for node_id in range(n_nodes):
            for deriv in (POS, VEL):
                for dim in range(n_dim):
                    index_map.append([NodeValueInfo(node_id, deriv, dim)])
        self._set_index_map(index_map)
