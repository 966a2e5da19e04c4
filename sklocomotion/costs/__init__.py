# flake8: noqa

from sklocomotion.costs.node_cost import NodeCost
from sklocomotion.costs.quadratic_cost import QuadraticPolynomialCost
