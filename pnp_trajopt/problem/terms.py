"""Cost and constraint term descriptors.

A term describes one weighted objective or hard requirement over the
trajectory variables at a range of time steps. Terms are plain data;
the optimizer that consumes them decides how to linearize and weigh
them.
"""

from abc import ABC
from abc import abstractmethod

import numpy as np


TT_COST = 'cost'
TT_CNT = 'constraint'
TERM_TYPES = (TT_COST, TT_CNT)

SQUARED = 'squared'
ABS = 'abs'
HINGE = 'hinge'
PENALTY_TYPES = (SQUARED, ABS, HINGE)


def _as_list(values):
    return [float(v) for v in np.asarray(values, dtype=np.float64).ravel()]


class TermInfo(ABC):
    """Abstract base class of every term descriptor.

    Parameters
    ----------
    name : str
        unique name inside a problem description, used for diagnostics.
    term_type : str
        ``TT_COST`` for a soft cost or ``TT_CNT`` for a hard constraint.
    """

    kind = None

    def __init__(self, name=None, term_type=TT_COST):
        if term_type not in TERM_TYPES:
            raise ValueError('term_type must be one of {}, get {!r}'.format(
                TERM_TYPES, term_type))
        self.name = name
        self.term_type = term_type

    @property
    def is_constraint(self):
        return self.term_type == TT_CNT

    @abstractmethod
    def timesteps(self):
        """Return the time steps this term acts on."""

    def to_dict(self):
        return {
            'type': self.kind,
            'name': self.name,
            'term_type': self.term_type,
        }

    def __repr__(self):
        steps = self.timesteps()
        if not steps:
            span = '-'
        elif len(steps) == 1:
            span = str(steps[0])
        else:
            span = '{}..{}'.format(steps[0], steps[-1])
        return '#<{} {} {} steps={}>'.format(
            self.__class__.__name__, self.name, self.term_type, span)


class JointPosTermInfo(TermInfo):
    """Joint positions pinned to ``vals`` over a step range."""

    kind = 'joint_pos'

    def __init__(self, vals=None, coeffs=None, first_step=0, last_step=None,
                 name=None, term_type=TT_CNT):
        super(JointPosTermInfo, self).__init__(name, term_type)
        self.vals = np.zeros(0) if vals is None else \
            np.array(vals, dtype=np.float64)
        if coeffs is None:
            coeffs = [1.0]
        self.coeffs = _as_list(coeffs)
        self.first_step = first_step
        self.last_step = first_step if last_step is None else last_step

    @property
    def timestep(self):
        return self.first_step

    def timesteps(self):
        return list(range(self.first_step, self.last_step + 1))

    def to_dict(self):
        d = super(JointPosTermInfo, self).to_dict()
        d.update({
            'vals': _as_list(self.vals),
            'coeffs': self.coeffs,
            'first_step': self.first_step,
            'last_step': self.last_step,
        })
        return d


class JointVelTermInfo(TermInfo):
    """Velocity smoothness of a single joint between consecutive steps."""

    kind = 'joint_vel'

    def __init__(self, joint_name, coeffs=None, first_step=0, last_step=0,
                 penalty_type=SQUARED, name=None, term_type=TT_COST):
        if name is None:
            name = '{}_vel'.format(joint_name)
        super(JointVelTermInfo, self).__init__(name, term_type)
        if penalty_type not in PENALTY_TYPES:
            raise ValueError(
                'penalty_type must be one of {}, get {!r}'.format(
                    PENALTY_TYPES, penalty_type))
        self.joint_name = joint_name
        if coeffs is None:
            coeffs = [1.0]
        self.coeffs = _as_list(coeffs)
        self.first_step = first_step
        self.last_step = last_step
        self.penalty_type = penalty_type

    def timesteps(self):
        return list(range(self.first_step, self.last_step + 1))

    def to_dict(self):
        d = super(JointVelTermInfo, self).to_dict()
        d.update({
            'joint_name': self.joint_name,
            'coeffs': self.coeffs,
            'first_step': self.first_step,
            'last_step': self.last_step,
            'penalty_type': self.penalty_type,
        })
        return d


class StaticPoseTermInfo(TermInfo):
    """Cartesian pose of ``link`` fixed at one time step.

    Parameters
    ----------
    link : str
        link whose pose is constrained.
    timestep : int
        time step of the term.
    xyz : array-like
        target position (3,).
    wxyz : array-like
        target orientation as [w, x, y, z] quaternion.
    pos_coeffs : array-like
        per-axis weight of the position error.
    rot_coeffs : array-like
        per-axis weight of the rotation error.
    """

    kind = 'pose'

    def __init__(self, link, timestep, xyz, wxyz,
                 pos_coeffs=(1.0, 1.0, 1.0), rot_coeffs=(1.0, 1.0, 1.0),
                 name=None, term_type=TT_CNT):
        if name is None:
            name = 'pose_{}'.format(timestep)
        super(StaticPoseTermInfo, self).__init__(name, term_type)
        self.link = link
        self.timestep = timestep
        self.xyz = np.array(xyz, dtype=np.float64)
        self.wxyz = np.array(wxyz, dtype=np.float64)
        self.pos_coeffs = np.array(pos_coeffs, dtype=np.float64)
        self.rot_coeffs = np.array(rot_coeffs, dtype=np.float64)

    def timesteps(self):
        return [self.timestep]

    def to_dict(self):
        d = super(StaticPoseTermInfo, self).to_dict()
        d.update({
            'link': self.link,
            'timestep': self.timestep,
            'xyz': _as_list(self.xyz),
            'wxyz': _as_list(self.wxyz),
            'pos_coeffs': _as_list(self.pos_coeffs),
            'rot_coeffs': _as_list(self.rot_coeffs),
        })
        return d


class SafetyMarginData(object):
    """Safety margin and penalty coefficient for one time step.

    A default margin and coefficient apply to every link pair; single
    pairs can be overridden with :meth:`set_pair_safety_margin`.
    """

    def __init__(self, default_safety_margin, default_safety_margin_coeff):
        self.default_safety_margin = float(default_safety_margin)
        self.default_safety_margin_coeff = float(default_safety_margin_coeff)
        self._pair_data = {}

    @staticmethod
    def _key(link_a, link_b):
        return tuple(sorted((link_a, link_b)))

    def set_pair_safety_margin(self, link_a, link_b, safety_margin, coeff):
        self._pair_data[self._key(link_a, link_b)] = (
            float(safety_margin), float(coeff))

    def pair_safety_margin(self, link_a, link_b):
        """Return ``(margin, coeff)`` for a link pair."""
        return self._pair_data.get(
            self._key(link_a, link_b),
            (self.default_safety_margin, self.default_safety_margin_coeff))

    @property
    def max_safety_margin(self):
        margins = [self.default_safety_margin]
        margins.extend(m for m, _ in self._pair_data.values())
        return max(margins)

    def to_dict(self):
        d = {
            'default_safety_margin': self.default_safety_margin,
            'default_safety_margin_coeff': self.default_safety_margin_coeff,
        }
        if self._pair_data:
            d['pairs'] = [
                {'links': list(key), 'safety_margin': m, 'coeff': c}
                for key, (m, c) in sorted(self._pair_data.items())]
        return d


def create_safety_margin_data_vector(num_elements, default_safety_margin,
                                     default_safety_margin_coeff):
    """Return ``num_elements`` independent :class:`SafetyMarginData`."""
    return [SafetyMarginData(default_safety_margin,
                             default_safety_margin_coeff)
            for _ in range(num_elements)]


class CollisionTermInfo(TermInfo):
    """Collision avoidance over an inclusive step range.

    Parameters
    ----------
    first_step, last_step : int
        inclusive range of checked time steps.
    info : list[SafetyMarginData]
        one entry per checked step.
    continuous : bool
        if `True`, the swept volume between steps is checked, otherwise
        only discrete states are.
    gap : int
        distance between the states paired in continuous checking.
    """

    kind = 'collision'

    def __init__(self, first_step=0, last_step=0, info=None,
                 continuous=False, gap=1, name='collision',
                 term_type=TT_COST):
        super(CollisionTermInfo, self).__init__(name, term_type)
        self.first_step = first_step
        self.last_step = last_step
        self.info = list(info or [])
        self.continuous = continuous
        self.gap = gap

    def timesteps(self):
        return list(range(self.first_step, self.last_step + 1))

    def to_dict(self):
        d = super(CollisionTermInfo, self).to_dict()
        d.update({
            'first_step': self.first_step,
            'last_step': self.last_step,
            'continuous': self.continuous,
            'gap': self.gap,
            'info': [data.to_dict() for data in self.info],
        })
        return d
