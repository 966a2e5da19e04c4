"""Variable, constraint and cost containers exchanged with NLP solvers.

Every container implements the same contract: a number of rows, the current
values of those rows, their bounds and, for constraints and costs, the sparse
Jacobian with respect to the complete decision vector.
"""

from logging import getLogger

import numpy as np
from scipy import sparse


logger = getLogger(__name__)

inf = np.inf

NoBound = (-inf, inf)
BoundZero = (0.0, 0.0)
BoundGreaterZero = (0.0, inf)
BoundSmallerZero = (-inf, 0.0)


def make_bounds(n_rows, bound=NoBound):
    """Return a ``(n_rows, 2)`` array filled with ``bound``.

    Parameters
    ----------
    n_rows : int
        number of rows.
    bound : tuple(float, float)
        lower and upper value.

    Returns
    -------
    bounds : numpy.ndarray
        column 0 holds lower, column 1 upper bounds.
    """
    bounds = np.empty((n_rows, 2))
    bounds[:, 0] = bound[0]
    bounds[:, 1] = bound[1]
    return bounds


def count_violated_bounds(values, bounds, tol=1e-4):
    values = np.asarray(values)
    lower_violated = values < bounds[:, 0] - tol
    upper_violated = values > bounds[:, 1] + tol
    return int(np.count_nonzero(lower_violated | upper_violated))


class Component(object):
    """A named set of rows taking part in the optimization problem.

    Parameters
    ----------
    name : str
        unique name used to refer to this component.
    n_rows : int
        number of variables or constraint rows.
    """

    def __init__(self, name, n_rows):
        self.name = name
        self._n_rows = n_rows

    def get_rows(self):
        return self._n_rows

    def set_rows(self, n_rows):
        self._n_rows = n_rows

    @property
    def n_rows(self):
        return self.get_rows()

    def get_values(self):
        raise NotImplementedError

    def get_bounds(self):
        raise NotImplementedError

    def get_jacobian(self):
        raise NotImplementedError

    def set_variables(self, x):
        raise NotImplementedError

    def __repr__(self):
        return '<{} {} rows={}>'.format(
            self.__class__.__name__, self.name, self.get_rows())


class VariableSet(Component):
    """A flat, ordered block of optimization variables with bounds."""

    def get_jacobian(self):
        raise NotImplementedError(
            'variable sets have no jacobian, query constraints instead')


class ConstraintSet(Component):
    """Rows of constraint values depending on some variable sets.

    Subclasses implement :meth:`get_values`, :meth:`get_bounds` and
    :meth:`get_jacobian_block`. The full Jacobian is assembled column block
    by column block in the order of the linked variable composite.
    """

    def __init__(self, name, n_rows):
        super(ConstraintSet, self).__init__(name, n_rows)
        self._variables = None

    def link_with_variables(self, variables):
        """Connect this constraint to the composite of all variable sets."""
        self._variables = variables
        self.init_variable_dependent_quantities(variables)

    def init_variable_dependent_quantities(self, variables):
        pass

    @property
    def variables(self):
        if self._variables is None:
            raise RuntimeError(
                '{} is not linked with variables yet'.format(self.name))
        return self._variables

    def get_jacobian_block(self, var_set_name):
        """Jacobian of this constraint wrt one variable set.

        Parameters
        ----------
        var_set_name : str
            name of the variable set.

        Returns
        -------
        jac : scipy.sparse.spmatrix or None
            ``(n_rows, n_vars_in_set)`` matrix, or None if this
            constraint does not depend on the set.
        """
        raise NotImplementedError

    def get_jacobian(self):
        n_rows = self.get_rows()
        blocks = []
        for var_set in self.variables.get_components():
            n_cols = var_set.get_rows()
            if n_cols == 0:
                continue
            block = self.get_jacobian_block(var_set.name)
            if block is None:
                block = sparse.csr_matrix((n_rows, n_cols))
            elif block.shape != (n_rows, n_cols):
                raise ValueError(
                    'jacobian of {} wrt {} has shape {}, expected {}'.format(
                        self.name, var_set.name, block.shape,
                        (n_rows, n_cols)))
            blocks.append(sparse.csr_matrix(block))
        if len(blocks) == 0:
            return sparse.csr_matrix((n_rows, 0))
        return sparse.hstack(blocks, format='csr')


class CostTerm(ConstraintSet):
    """A scalar cost, i.e. an unbounded constraint with one row."""

    def __init__(self, name):
        super(CostTerm, self).__init__(name, 1)

    def get_cost(self):
        raise NotImplementedError

    def get_values(self):
        return np.array([self.get_cost()])

    def get_bounds(self):
        return make_bounds(1)


class Composite(Component):
    """Ordered collection of components seen as one.

    Variables and constraints are stacked on top of each other. If
    ``is_cost`` is True the values and gradients of all components are
    summed into a single row.

    Parameters
    ----------
    name : str
        name of the composite.
    is_cost : bool
        whether the components are cost terms.
    """

    def __init__(self, name, is_cost=False):
        super(Composite, self).__init__(name, 0)
        self.is_cost = is_cost
        self._components = []

    def add_component(self, component):
        """Append a component and return its index.

        Raises
        ------
        ValueError
            if a component of the same name was already added.
        """
        if self.find_component(component.name) is not None:
            raise ValueError(
                'component {} already exists in {}'.format(
                    component.name, self.name))
        self._components.append(component)
        logger.debug('%s: added %s', self.name, component)
        return len(self._components) - 1

    def find_component(self, name):
        """Return the component called ``name`` or None."""
        for component in self._components:
            if component.name == name:
                return component
        return None

    def get_component(self, key):
        """Return a component by index or name.

        Raises
        ------
        KeyError
            if no component of that name exists.
        """
        if isinstance(key, int):
            return self._components[key]
        component = self.find_component(key)
        if component is None:
            raise KeyError(
                'component {} does not exist in {}'.format(key, self.name))
        return component

    def get_components(self):
        return list(self._components)

    def get_rows(self):
        if self.is_cost:
            return 1 if len(self._components) > 0 else 0
        return sum(c.get_rows() for c in self._components)

    def get_values(self):
        if self.is_cost:
            if len(self._components) == 0:
                return np.zeros(0)
            return np.array([sum(float(c.get_values()[0])
                                 for c in self._components)])
        if len(self._components) == 0:
            return np.zeros(0)
        return np.hstack([np.asarray(c.get_values(), dtype=np.float64)
                          for c in self._components])

    def set_variables(self, x):
        x = np.asarray(x, dtype=np.float64)
        if len(x) != self.get_rows():
            raise ValueError(
                'expected {} variables, got {}'.format(
                    self.get_rows(), len(x)))
        row = 0
        for component in self._components:
            n_rows = component.get_rows()
            component.set_variables(x[row:row + n_rows])
            row += n_rows

    def get_bounds(self):
        if self.is_cost:
            return make_bounds(self.get_rows())
        if len(self._components) == 0:
            return np.zeros((0, 2))
        return np.vstack([c.get_bounds() for c in self._components])

    def get_jacobian(self):
        jacobians = [c.get_jacobian() for c in self._components]
        if self.is_cost:
            if len(jacobians) == 0:
                return None
            total = jacobians[0]
            for jac in jacobians[1:]:
                total = total + jac
            return sparse.csr_matrix(total)
        jacobians = [jac for jac in jacobians if jac.shape[0] > 0]
        if len(jacobians) == 0:
            return None
        return sparse.vstack(jacobians, format='csr')

    def get_row_ranges(self):
        """Row ranges ``{name: (start, stop)}`` of the stacked components."""
        ranges = {}
        row = 0
        for component in self._components:
            n_rows = component.get_rows()
            ranges[component.name] = (row, row + n_rows)
            row += n_rows
        return ranges

    def print_all(self, tol=1e-4):
        """Log rows and bound violations of every component."""
        logger.info('%s', self.name)
        for component in self._components:
            values = component.get_values()
            n_violated = count_violated_bounds(
                values, component.get_bounds(), tol=tol)
            logger.info('  %-24s rows=%4d violated=%4d',
                        component.name, component.get_rows(), n_violated)
