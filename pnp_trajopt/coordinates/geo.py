import numpy as np

from pnp_trajopt.coordinates.math import angle_axis_from_matrix
from pnp_trajopt.coordinates.math import matrix2quaternion
from pnp_trajopt.coordinates.math import quaternion_from_axis_angle
from pnp_trajopt.coordinates.math import quaternion_multiply
from pnp_trajopt.coordinates.math import quaternion_normalize


def linear_pose_sequence(start_coords, end_coords, num_steps):
    """Return poses on a straight line between two coordinates.

    Positions advance by equal Cartesian increments. Orientations turn
    by equal angles about the fixed axis of the minimal rotation
    ``start^-1 * end``. Step ``i`` is ``delta_i * start``, the partial
    rotation composed before the start orientation. The first pose is
    the start; the last orientation equals ``end`` only when that
    rotation commutes with the start orientation.

    Parameters
    ----------
    start_coords : pnp_trajopt.coordinates.Coordinates
        pose at the first step.
    end_coords : pnp_trajopt.coordinates.Coordinates
        target pose. Its position is reached at the last step.
    num_steps : int
        number of poses including both ends. Must be at least 2.

    Returns
    -------
    positions, quaternions : tuple(numpy.ndarray, numpy.ndarray)
        positions of shape (num_steps, 3) and
        [w, x, y, z] quaternions of shape (num_steps, 4).

    Raises
    ------
    ZeroDivisionError
        If ``num_steps`` is 1.

    Examples
    --------
    >>> from pnp_trajopt.coordinates import Coordinates
    >>> from pnp_trajopt.coordinates.geo import linear_pose_sequence
    >>> pos, quat = linear_pose_sequence(
    ...     Coordinates(), Coordinates(pos=[0.2, 0, 0]), 3)
    >>> pos[1]
    array([0.1, 0. , 0. ])
    """
    scale = 1.0 / (num_steps - 1)
    start_pos = np.array(start_coords.translation, dtype=np.float64)
    xyz_delta = (end_coords.translation - start_pos) * scale

    start_quat = matrix2quaternion(start_coords.rotation)
    angle, axis = angle_axis_from_matrix(
        start_coords.rotation_between(end_coords))
    angle_delta = angle * scale

    positions = np.zeros((num_steps, 3))
    quaternions = np.zeros((num_steps, 4))
    for i in range(num_steps):
        positions[i] = start_pos + xyz_delta * i
        rotation_delta = quaternion_from_axis_angle(angle_delta * i, axis)
        quaternions[i] = quaternion_normalize(
            quaternion_multiply(rotation_delta, start_quat))
    # exact end point, free of accumulated rounding
    positions[-1] = end_coords.translation
    return positions, quaternions
