"""Tunable constants of the pick-and-place problem builder.

Overrides can be read from a JSON file whose path is given by the
``PNP_TRAJOPT_CONFIG`` environment variable.
"""

import json
import os


CONFIG_ENV_VAR = 'PNP_TRAJOPT_CONFIG'


class PickAndPlaceConfig(object):
    """Weights and margins used by the builder.

    Parameters
    ----------
    joint_vel_coeff : float
        coefficient of every joint velocity cost.
    pose_pos_coeffs : tuple(float, float, float)
        per-axis weight of the position part of pose constraints.
    pose_rot_coeffs : tuple(float, float, float)
        per-axis weight of the rotation part of pose constraints.
    collision_dist_pen : float
        safety margin [m] of the collision cost.
    collision_coeff : float
        coefficient of the collision cost.
    collision_gap : int
        step gap of the collision cost.
    collision_continuous : bool
        check swept volumes instead of discrete states.
    start_fixed : bool
        whether the first step is removed from the variables.
    """

    _FIELDS = (
        'joint_vel_coeff',
        'pose_pos_coeffs',
        'pose_rot_coeffs',
        'collision_dist_pen',
        'collision_coeff',
        'collision_gap',
        'collision_continuous',
        'start_fixed',
    )

    def __init__(self,
                 joint_vel_coeff=5.0,
                 pose_pos_coeffs=(10.0, 10.0, 10.0),
                 pose_rot_coeffs=(10.0, 10.0, 10.0),
                 collision_dist_pen=0.025,
                 collision_coeff=20.0,
                 collision_gap=1,
                 collision_continuous=False,
                 start_fixed=False):
        if len(pose_pos_coeffs) != 3 or len(pose_rot_coeffs) != 3:
            raise ValueError('pose coefficients must have three elements')
        if collision_gap < 1:
            raise ValueError(
                'collision_gap must be positive, get {}'.format(
                    collision_gap))
        self.joint_vel_coeff = float(joint_vel_coeff)
        self.pose_pos_coeffs = tuple(float(c) for c in pose_pos_coeffs)
        self.pose_rot_coeffs = tuple(float(c) for c in pose_rot_coeffs)
        self.collision_dist_pen = float(collision_dist_pen)
        self.collision_coeff = float(collision_coeff)
        self.collision_gap = int(collision_gap)
        self.collision_continuous = bool(collision_continuous)
        self.start_fixed = bool(start_fixed)

    @classmethod
    def from_dict(cls, d):
        unknown = sorted(set(d) - set(cls._FIELDS))
        if unknown:
            raise ValueError(
                'unknown config keys: {}'.format(', '.join(unknown)))
        return cls(**d)

    def to_dict(self):
        d = {}
        for field in self._FIELDS:
            value = getattr(self, field)
            if isinstance(value, tuple):
                value = list(value)
            d[field] = value
        return d

    def __eq__(self, other):
        if not isinstance(other, PickAndPlaceConfig):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return '{}({})'.format(
            self.__class__.__name__,
            ', '.join('{}={!r}'.format(k, v)
                      for k, v in self.to_dict().items()))


def load_config(path=None):
    """Return the config stored at ``path``.

    When ``path`` is `None` the ``PNP_TRAJOPT_CONFIG`` environment
    variable is consulted; without it the defaults are returned.
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR)
    if not path:
        return PickAndPlaceConfig()
    with open(path) as f:
        return PickAndPlaceConfig.from_dict(json.load(f))
