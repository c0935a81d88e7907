import math
from math import cos
from math import sin

import numpy as np


# values below this are treated as zero
_EPS = np.finfo(float).eps * 4.0
_AXIS_VECTORS = {
    'x': np.array([1, 0, 0]),
    'y': np.array([0, 1, 0]),
    'z': np.array([0, 0, 1]),
    '-x': np.array([-1, 0, 0]),
    '-y': np.array([0, -1, 0]),
    '-z': np.array([0, 0, -1]),
}


def convert_to_axis_vector(axis):
    """Return ``axis`` as a 3-vector.

    Parameters
    ----------
    axis : str or list or tuple or numpy.ndarray
        one of 'x', 'y', 'z', '-x', '-y', '-z' or a vector of length 3.

    Returns
    -------
    axis : numpy.ndarray

    Examples
    --------
    >>> from pnp_trajopt.coordinates.math import convert_to_axis_vector
    >>> convert_to_axis_vector('-y')
    array([ 0, -1,  0])
    """
    if isinstance(axis, str):
        if axis not in _AXIS_VECTORS:
            raise NotImplementedError(
                "Axis conversion for '{}' is not implemented.".format(axis))
        return _AXIS_VECTORS[axis].copy()
    if isinstance(axis, (list, tuple, np.ndarray)):
        axis = np.asarray(axis)
        if axis.shape != (3,):
            raise ValueError(
                'Axis must have shape (3,), get {}'.format(axis.shape))
        return axis
    raise ValueError('Invalid axis type {}. Must be one of: str, list, '
                     'tuple, ndarray.'.format(type(axis)))


def _check_valid_rotation(rotation):
    """Raise ValueError unless ``rotation`` is a proper 3x3 rotation."""
    rotation = np.array(rotation)
    if not np.issubdtype(rotation.dtype, np.number):
        raise ValueError('Rotation must be specified as numeric numpy array')
    if rotation.shape != (3, 3):
        raise ValueError('Rotation must be specified as a 3x3 ndarray')
    det = np.linalg.det(rotation)
    if np.abs(det - 1.0) > 1e-3:
        raise ValueError('Illegal rotation. Must have determinant == 1.0, '
                         'get {}'.format(det))
    return rotation


def _check_valid_translation(translation):
    """Raise ValueError unless ``translation`` is a numeric 3-vector."""
    if not isinstance(translation, np.ndarray) \
            or not np.issubdtype(translation.dtype, np.number):
        raise ValueError(
            'Translation must be specified as numeric numpy array')
    if translation.squeeze().shape != (3,):
        raise ValueError(
            'Translation must be specified as a 3-vector, '
            '3x1 ndarray, or 1x3 ndarray')


def normalize_vector(v, ord=2):
    """Return ``v`` scaled to unit norm.

    A zero vector is returned unchanged.

    Examples
    --------
    >>> from pnp_trajopt.coordinates.math import normalize_vector
    >>> normalize_vector([0, 3, 4])
    array([0. , 0.6, 0.8])
    """
    v = np.array(v, dtype=np.float64)
    norm = np.linalg.norm(v, ord=ord)
    if norm == 0:
        return v
    return v / norm


def rotation_matrix(theta, axis):
    """Return the matrix rotating counterclockwise by ``theta`` about ``axis``.

    Parameters
    ----------
    theta : float
        angle in radian.
    axis : str or list or numpy.ndarray
        rotation axis, normalized here.

    Returns
    -------
    rot : numpy.ndarray
        3x3 rotation matrix.
    """
    axis = normalize_vector(convert_to_axis_vector(axis))
    a = np.cos(theta / 2.0)
    b, c, d = -axis * np.sin(theta / 2.0)
    aa, bb, cc, dd = a * a, b * b, c * c, d * d
    bc, ad, ac, ab, bd, cd = b * c, a * d, a * c, a * b, b * d, c * d
    return np.array([[aa + bb - cc - dd, 2 * (bc + ad), 2 * (bd - ac)],
                     [2 * (bc - ad), aa + cc - bb - dd, 2 * (cd + ab)],
                     [2 * (bd + ac), 2 * (cd - ab), aa + dd - bb - cc]])


def rotate_matrix(matrix, theta, axis, world=None):
    """Rotate ``matrix`` in its own frame, or in the world with ``world``."""
    if world:
        return np.matmul(rotation_matrix(theta, axis), matrix)
    return np.matmul(matrix, rotation_matrix(theta, axis))


def rpy_angle(matrix):
    """Return the two yaw-pitch-roll decompositions of ``matrix``.

    Returns
    -------
    rpy : tuple(numpy.ndarray, numpy.ndarray)
        [yaw, pitch, roll] pairs, the second one with yaw turned by pi.
    """
    if np.sqrt(matrix[1, 0] ** 2 + matrix[0, 0] ** 2) < _EPS:
        yaw = 0.0
    else:
        yaw = np.arctan2(matrix[1, 0], matrix[0, 0])
    solutions = []
    for a in (yaw, yaw + np.pi):
        sa = np.sin(a)
        ca = np.cos(a)
        b = np.arctan2(-matrix[2, 0], ca * matrix[0, 0] + sa * matrix[1, 0])
        c = np.arctan2(sa * matrix[0, 2] - ca * matrix[1, 2],
                       -sa * matrix[0, 1] + ca * matrix[1, 1])
        solutions.append(np.array([a, b, c]))
    return solutions[0], solutions[1]


def rpy2quaternion(rpy):
    """Return the [w, x, y, z] quaternion of [yaw, pitch, roll] angles.

    Examples
    --------
    >>> from pnp_trajopt.coordinates.math import rpy2quaternion
    >>> rpy2quaternion([0, 0, 0])
    array([1., 0., 0., 0.])
    """
    yaw, pitch, roll = rpy
    cr, cp, cy = cos(roll / 2.), cos(pitch / 2.), cos(yaw / 2.)
    sr, sp, sy = sin(roll / 2.), sin(pitch / 2.), sin(yaw / 2.)
    return np.array([
        cr * cp * cy + sr * sp * sy,
        -cr * sp * sy + cp * cy * sr,
        cr * cy * sp + sr * cp * sy,
        cr * cp * sy - sr * cy * sp])


def matrix2quaternion(m):
    """Return the [w, x, y, z] quaternion of a 3x3 rotation matrix.

    The largest diagonal term picks the branch, which keeps the square
    root away from zero.

    Examples
    --------
    >>> import numpy
    >>> from pnp_trajopt.coordinates.math import matrix2quaternion
    >>> matrix2quaternion(numpy.eye(3))
    array([1., 0., 0., 0.])
    """
    m = np.array(m, dtype=np.float64)
    if m.shape != (3, 3):
        raise ValueError(
            'Unsupported rotation matrix shape {}. '
            'Supports rotation matrices of (3, 3).'.format(m.shape))
    tr = np.trace(m)
    if tr > 0:
        s = math.sqrt(tr + 1.0) * 2
        return np.array([0.25 * s,
                         (m[2, 1] - m[1, 2]) / s,
                         (m[0, 2] - m[2, 0]) / s,
                         (m[1, 0] - m[0, 1]) / s])
    if m[0, 0] > m[1, 1] and m[0, 0] > m[2, 2]:
        s = math.sqrt(1. + m[0, 0] - m[1, 1] - m[2, 2]) * 2
        return np.array([(m[2, 1] - m[1, 2]) / s,
                         0.25 * s,
                         (m[0, 1] + m[1, 0]) / s,
                         (m[0, 2] + m[2, 0]) / s])
    if m[1, 1] > m[2, 2]:
        s = math.sqrt(1. + m[1, 1] - m[0, 0] - m[2, 2]) * 2
        return np.array([(m[0, 2] - m[2, 0]) / s,
                         (m[0, 1] + m[1, 0]) / s,
                         0.25 * s,
                         (m[1, 2] + m[2, 1]) / s])
    s = math.sqrt(1. + m[2, 2] - m[0, 0] - m[1, 1]) * 2
    return np.array([(m[1, 0] - m[0, 1]) / s,
                     (m[0, 2] + m[2, 0]) / s,
                     (m[1, 2] + m[2, 1]) / s,
                     0.25 * s])


def quaternion2matrix(q, normalize=False):
    """Return the 3x3 rotation matrix of a [w, x, y, z] quaternion.

    Unless ``normalize`` is `True`, ``q`` must already have unit norm.
    """
    q = np.array(q, dtype=np.float64)
    if normalize:
        q = quaternion_normalize(q)
    elif not np.allclose(quaternion_norm(q), 1.0):
        raise ValueError("quaternion q's norm is not 1")
    w, x, y, z = q
    return np.array([
        [w * w + x * x - y * y - z * z,
         2 * (x * y - w * z),
         2 * (x * z + w * y)],
        [2 * (x * y + w * z),
         w * w - x * x + y * y - z * z,
         2 * (y * z - w * x)],
        [2 * (x * z - w * y),
         2 * (y * z + w * x),
         w * w - x * x - y * y + z * z]])


def quaternion_multiply(quaternion1, quaternion0):
    """Return the Hamilton product ``quaternion1 * quaternion0``.

    Examples
    --------
    >>> import numpy
    >>> q = quaternion_multiply([4, 1, -2, 3], [8, -5, 6, 7])
    >>> numpy.allclose(q, [28, -44, -14, 48])
    True
    """
    w0, x0, y0, z0 = quaternion0
    w1, x1, y1, z1 = quaternion1
    return np.array((
        -x1 * x0 - y1 * y0 - z1 * z0 + w1 * w0,
        x1 * w0 + y1 * z0 - z1 * y0 + w1 * x0,
        -x1 * z0 + y1 * w0 + z1 * x0 + w1 * y0,
        x1 * y0 - y1 * x0 + z1 * w0 + w1 * z0), dtype=np.float64)


def quaternion_norm(q):
    q = np.array(q, dtype=np.float64)
    return np.sqrt(np.dot(q, q))


def quaternion_normalize(q):
    q = np.array(q, dtype=np.float64)
    return q / quaternion_norm(q)


def quaternion_from_axis_angle(theta, axis):
    """Return the [w, x, y, z] quaternion turning ``theta`` about ``axis``.

    Examples
    --------
    >>> from pnp_trajopt.coordinates.math import quaternion_from_axis_angle
    >>> quaternion_from_axis_angle(0, [1, 0, 0])
    array([1., 0., 0., 0.])
    """
    axis = normalize_vector(axis)
    s = sin(theta / 2)
    return np.array([cos(theta / 2), axis[0] * s, axis[1] * s, axis[2] * s],
                    dtype=np.float64)


def axis_angle_from_quaternion(quat):
    """Return the rotation vector (axis * angle) of a [w, x, y, z] quaternion.

    The angle lies in [0, pi].

    Examples
    --------
    >>> from pnp_trajopt.coordinates.math import axis_angle_from_quaternion
    >>> axis_angle_from_quaternion([1, 0, 0, 0])
    array([0., 0., 0.])
    """
    quat = np.array(quat, dtype=np.float64)
    sinang = np.sum(quat[1:] ** 2)
    if sinang == 0:
        return np.zeros(3)
    if quat[0] < 0:
        quat = -quat
    sinang = np.sqrt(sinang)
    f = 2.0 * np.arctan2(sinang, quat[0]) / sinang
    return f * quat[1:]


def axis_angle_from_matrix(rotation):
    """Return the rotation vector (axis * angle) of a rotation matrix.

    Examples
    --------
    >>> import numpy
    >>> from pnp_trajopt.coordinates.math import axis_angle_from_matrix
    >>> axis_angle_from_matrix(numpy.eye(3))
    array([0., 0., 0.])
    """
    return axis_angle_from_quaternion(matrix2quaternion(rotation))


def angle_axis_from_matrix(rotation):
    """Split the rotation vector of ``rotation`` into angle and unit axis.

    For a rotation close to the identity the axis is undefined and
    [1, 0, 0] is returned with angle 0.

    Returns
    -------
    angle, axis : tuple(float, numpy.ndarray)
    """
    vec = axis_angle_from_matrix(rotation)
    angle = np.linalg.norm(vec)
    if angle < _EPS:
        return 0.0, np.array([1.0, 0.0, 0.0])
    return float(angle), vec / angle
