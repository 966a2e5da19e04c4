# flake8: noqa

from sklocomotion.terrain.height_map import Direction
from sklocomotion.terrain.height_map import FlatGround
from sklocomotion.terrain.height_map import HeightMap
from sklocomotion.terrain.height_map import Slope
