import copy

import numpy as np

from pnp_trajopt.coordinates.math import _check_valid_rotation
from pnp_trajopt.coordinates.math import _check_valid_translation
from pnp_trajopt.coordinates.math import matrix2quaternion
from pnp_trajopt.coordinates.math import quaternion2matrix
from pnp_trajopt.coordinates.math import rotate_matrix
from pnp_trajopt.coordinates.math import rpy2quaternion
from pnp_trajopt.coordinates.math import rpy_angle


def transform_coords(c1, c2, out=None):
    """Return the pose ``c1 * c2``.

    Parameters
    ----------
    c1 : pnp_trajopt.coordinates.Coordinates
    c2 : pnp_trajopt.coordinates.Coordinates
    out : pnp_trajopt.coordinates.Coordinates or None
        written in place and returned when given.

    Returns
    -------
    out : pnp_trajopt.coordinates.Coordinates
    """
    if out is None:
        out = Coordinates(check_validity=False)
    elif not isinstance(out, Coordinates):
        raise TypeError(
            "Input type should be pnp_trajopt.coordinates.Coordinates")
    out._translation = c1.translation + np.dot(c1.rotation, c2.translation)
    out._rotation = np.matmul(c1.rotation, c2.rotation)
    return out


class Coordinates(object):

    """Rigid transform used for link poses and Cartesian targets.

    Parameters
    ----------
    pos : list or numpy.ndarray or None
        (3,) translation [m], or a 4x4 homogeneous matrix which then also
        sets the rotation. Defaults to the origin.
    rot : list or numpy.ndarray or None
        3x3 rotation matrix, [yaw, pitch, roll] angles or a [w, x, y, z]
        quaternion. Defaults to the identity.
    name : str or None
        name of the pose, e.g. the link it belongs to.
    check_validity : bool
        if `False`, ``pos`` and ``rot`` are stored as given. Only
        internal callers holding valid arrays turn this off.
    """

    def __init__(self,
                 pos=None,
                 rot=None,
                 name=None,
                 check_validity=True):
        if check_validity:
            if isinstance(pos, (list, np.ndarray)):
                T = np.array(pos, dtype=np.float64)
                if T.shape == (4, 4):
                    pos = T[:3, 3]
                    rot = T[:3, :3]
            if rot is None:
                self._rotation = np.eye(3)
            else:
                self.rotation = rot
            if pos is None:
                self._translation = np.array([0.0, 0.0, 0.0])
            else:
                self.translation = pos
        else:
            self._rotation = np.eye(3) if rot is None else rot
            self._translation = np.array([0.0, 0.0, 0.0]) if pos is None \
                else pos
        self.name = '' if name is None else name

    @property
    def rotation(self):
        """3x3 rotation matrix."""
        return self._rotation

    @rotation.setter
    def rotation(self, rotation):
        rotation = np.array(rotation, dtype=np.float64)
        if rotation.shape == (4,):
            if np.abs(np.linalg.norm(rotation) - 1.0) > 1e-3:
                raise ValueError('Invalid quaternion. Must be '
                                 'norm 1.0, get {}'.
                                 format(np.linalg.norm(rotation)))
            rotation = quaternion2matrix(rotation, normalize=True)
        elif rotation.shape == (3,):
            rotation = quaternion2matrix(rpy2quaternion(rotation))
        _check_valid_rotation(rotation)
        self._rotation = rotation * 1.

    @property
    def translation(self):
        """(3,) translation vector [m].

        Examples
        --------
        >>> from pnp_trajopt.coordinates import Coordinates
        >>> c = Coordinates()
        >>> c.translate([0.1, 0.2, 0.3]).translation
        array([0.1, 0.2, 0.3])
        """
        return self._translation

    @translation.setter
    def translation(self, translation):
        if type(translation) in (list, tuple) and len(translation) == 3:
            translation = np.array(translation, dtype=np.float64)
        _check_valid_translation(translation)
        self._translation = translation.squeeze() * 1.

    def translate(self, vec, wrt='local'):
        """Move by ``vec`` given in this frame or, with 'world', the world.

        Returns
        -------
        self : pnp_trajopt.coordinates.Coordinates
        """
        vec = np.array(vec, dtype=np.float64)
        if wrt == 'local':
            vec = np.matmul(self.rotation, vec)
        elif wrt != 'world':
            raise ValueError('wrt {} not supported'.format(wrt))
        self._translation = self.translation + vec
        return self

    def rotate(self, theta, axis, wrt='local'):
        """Turn by ``theta`` about ``axis`` keeping the position.

        Parameters
        ----------
        theta : float
            angle in radian.
        axis : str or list or numpy.ndarray
            rotation axis.
        wrt : str
            'local' or 'world', the frame ``axis`` is given in.

        Returns
        -------
        self : pnp_trajopt.coordinates.Coordinates
        """
        if wrt not in ('local', 'world'):
            raise ValueError('wrt {} not supported'.format(wrt))
        self._rotation = rotate_matrix(self.rotation, theta, axis,
                                       world=wrt == 'world')
        return self

    def transform_vector(self, v):
        """Return the point ``v`` of this frame in world coordinates."""
        v = np.array(v, dtype=np.float64)
        return np.matmul(self.rotation, v) + self.translation

    def inverse_transformation(self):
        """Return the inverse transform as new Coordinates."""
        inverse = Coordinates(check_validity=False)
        inverse._rotation = self.rotation.T
        inverse._translation = -1.0 * np.matmul(inverse._rotation,
                                                self.translation)
        return inverse

    def T(self):
        """Return the 4x4 homogeneous transformation matrix."""
        matrix = np.eye(4, dtype=np.float64)
        matrix[:3, :3] = self.rotation
        matrix[:3, 3] = self.translation
        return matrix

    @property
    def quaternion(self):
        """Orientation as a [w, x, y, z] quaternion."""
        return matrix2quaternion(self._rotation)

    def rotation_between(self, coords):
        """Return the rotation taking this orientation to ``coords``'s.

        The result is ``R_self^T R_coords``, the relative rotation
        expressed in this frame.
        """
        return np.matmul(self.rotation.T, coords.rotation)

    def copy_worldcoords(self):
        """Return an independent copy."""
        return Coordinates(pos=np.copy(self.translation),
                           rot=np.copy(self.rotation),
                           name=copy.copy(self.name),
                           check_validity=False)

    copy = copy_worldcoords

    def __mul__(self, other_c):
        return transform_coords(self, other_c)

    def __repr__(self):
        return self.__str__()

    def __str__(self):
        pos = self.translation
        rpy = rpy_angle(self.rotation)[0]
        if self.name:
            prefix = self.__class__.__name__ + ':' + self.name
        else:
            prefix = self.__class__.__name__
        return "#<{0} {1} "\
            "{2:.3f} {3:.3f} {4:.3f} / {5:.1f} {6:.1f} {7:.1f}>".\
            format(prefix, hex(id(self)),
                   pos[0], pos[1], pos[2],
                   rpy[0], rpy[1], rpy[2])
