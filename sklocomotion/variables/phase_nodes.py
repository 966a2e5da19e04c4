"""Nodes whose parameterization follows a sequence of contact phases.

In a constant phase a single polynomial spans the whole phase and both of
its nodes are tied to the same optimization variables, in a changing phase
several polynomials with independent intermediate nodes shape the motion.
"""

import collections

from sklocomotion.variables.nodes_variables import NodesVariables
from sklocomotion.variables.nodes_variables import NodeValueInfo
from sklocomotion.variables.polynomial import POS
from sklocomotion.variables.polynomial import VEL


PolyInfo = collections.namedtuple(
    'PolyInfo', ['phase', 'poly_in_phase', 'n_polys_in_phase', 'is_constant'])


def build_poly_infos(phase_count, first_phase_constant,
                     n_polys_in_changing_phase):
    """Describe every polynomial of an alternating phase sequence.

    Parameters
    ----------
    phase_count : int
        number of phases.
    first_phase_constant : bool
        whether the first phase is constant.
    n_polys_in_changing_phase : int
        polynomials used in each non-constant phase.

    Returns
    -------
    infos : list[PolyInfo]
        one entry per polynomial, in time order.
    """
    if phase_count < 1:
        raise ValueError(
            'phase_count must be positive, got {}'.format(phase_count))
    if n_polys_in_changing_phase < 1:
        raise ValueError(
            'n_polys_in_changing_phase must be positive, got {}'.format(
                n_polys_in_changing_phase))
    infos = []
    is_constant = first_phase_constant
    for phase in range(phase_count):
        if is_constant:
            infos.append(PolyInfo(phase, 0, 1, True))
        else:
            for poly_in_phase in range(n_polys_in_changing_phase):
                infos.append(PolyInfo(phase, poly_in_phase,
                                      n_polys_in_changing_phase, False))
        is_constant = not is_constant
    return infos


class NodesVariablesPhaseBased(NodesVariables):
    """Nodes of a spline that is constant in every other phase.

    Parameters
    ----------
    name : str
        name of the variable set.
    phase_count : int
        number of phases.
    first_phase_constant : bool
        whether the first phase is a constant phase.
    n_polys_in_changing_phase : int
        polynomials used to represent a non-constant phase.
    n_dim : int
        dimension of the node values.
    """

    def __init__(self, name, phase_count, first_phase_constant,
                 n_polys_in_changing_phase, n_dim=3):
        infos = build_poly_infos(phase_count, first_phase_constant,
                                 n_polys_in_changing_phase)
        super(NodesVariablesPhaseBased, self).__init__(
            name, len(infos) + 1, n_dim)
        self.polynomial_info = infos
        self.phase_count = phase_count
        self._set_index_map(self._build_phase_based_parameterization())

    def _build_phase_based_parameterization(self):
        raise NotImplementedError

    def get_polynomial_info(self):
        return list(self.polynomial_info)

    def is_in_constant_phase(self, poly_id):
        return self.polynomial_info[poly_id].is_constant

    def get_adjacent_poly_ids(self, node_id):
        poly_ids = []
        if node_id > 0:
            poly_ids.append(node_id - 1)
        if node_id < self.get_poly_count():
            poly_ids.append(node_id)
        return poly_ids

    def is_constant_node(self, node_id):
        """A node touching a constant polynomial is constant."""
        return any(self.is_in_constant_phase(poly_id)
                   for poly_id in self.get_adjacent_poly_ids(node_id))

    def get_phase(self, node_id):
        """Phase of the polynomial starting at ``node_id``.

        The last node belongs to the phase of the last polynomial.
        """
        poly_id = min(node_id, self.get_poly_count() - 1)
        return self.polynomial_info[poly_id].phase

    def get_number_of_prev_polynomials_in_phase(self, poly_id):
        return self.polynomial_info[poly_id].poly_in_phase

    def get_derivative_of_poly_duration_wrt_phase_duration(self, poly_id):
        return 1.0 / self.polynomial_info[poly_id].n_polys_in_phase

    def get_poly_durations(self, phase_durations):
        """Split each phase duration evenly among its polynomials."""
        return [phase_durations[info.phase] / info.n_polys_in_phase
                for info in self.polynomial_info]


class NodesVariablesEEMotion(NodesVariablesPhaseBased):
    """Endeffector positions, constant while the foot is in contact.

    Both nodes of a stance polynomial share one position variable per
    dimension and have zero velocity that is not optimized.
    """

    def __init__(self, name, phase_count, is_in_contact_at_start,
                 n_polys_in_changing_phase, n_dim=3):
        super(NodesVariablesEEMotion, self).__init__(
            name, phase_count, is_in_contact_at_start,
            n_polys_in_changing_phase, n_dim)

    def _build_phase_based_parameterization(self):
        index_map = []
        node_id = 0
        while node_id < self.n_nodes:
            if not self.is_constant_node(node_id):
                for dim in range(self.n_dim):
                    index_map.append([NodeValueInfo(node_id, POS, dim)])
                    index_map.append([NodeValueInfo(node_id, VEL, dim)])
                node_id += 1
            else:
                self.nodes[node_id, VEL] = 0.0
                self.nodes[node_id + 1, VEL] = 0.0
                for dim in range(self.n_dim):
                    index_map.append([NodeValueInfo(node_id, POS, dim),
                                      NodeValueInfo(node_id + 1, POS, dim)])
                node_id += 2
        return index_map


class NodesVariablesEEForce(NodesVariablesPhaseBased):
    """Endeffector forces, zero and not optimized while in swing."""

    def __init__(self, name, phase_count, is_in_contact_at_start,
                 n_polys_in_changing_phase, n_dim=3):
        super(NodesVariablesEEForce, self).__init__(
            name, phase_count, not is_in_contact_at_start,
            n_polys_in_changing_phase, n_dim)

    def _build_phase_based_parameterization(self):
        index_map = []
        for node_id in range(self.n_nodes):
            if self.is_constant_node(node_id):
                self.nodes[node_id] = 0.0
                continue
            for dim in range(self.n_dim):
                index_map.append([NodeValueInfo(node_id, POS, dim)])
                index_map.append([NodeValueInfo(node_id, VEL, dim)])
        return index_map
