# flake8: noqa

from .base import Coordinates
from .base import transform_coords

from .geo import linear_pose_sequence

from .math import angle_axis_from_matrix
from .math import matrix2quaternion
from .math import normalize_vector
from .math import quaternion2matrix
from .math import rotation_matrix
from .math import rpy_angle
