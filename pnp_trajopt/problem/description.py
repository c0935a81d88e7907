"""Declarative trajectory optimization problem description."""

from logging import getLogger

import numpy as np


logger = getLogger(__name__)


class DuplicateTermError(ValueError):
    """Raised when a term name is already used in a description."""


class BasicInfo(object):
    """Scalar settings of a problem.

    Attributes
    ----------
    n_steps : int
        number of time steps of the trajectory.
    manip : str
        name of the manipulator being planned for.
    start_fixed : bool
        if `True` the first time step is not an optimization variable.
    """

    def __init__(self, n_steps=0, manip=None, start_fixed=True):
        self.n_steps = n_steps
        self.manip = manip
        self.start_fixed = start_fixed

    def to_dict(self):
        return {
            'n_steps': self.n_steps,
            'manip': self.manip,
            'start_fixed': self.start_fixed,
        }


class InitInfo(object):
    """Seed of the optimization.

    ``STATIONARY`` repeats one configuration at every step,
    ``JOINT_INTERPOLATED`` moves linearly from the current configuration
    to ``end`` and ``GIVEN_TRAJ`` uses ``data`` as it is.
    """

    STATIONARY = 'stationary'
    JOINT_INTERPOLATED = 'joint_interpolated'
    GIVEN_TRAJ = 'given_traj'
    TYPES = (STATIONARY, JOINT_INTERPOLATED, GIVEN_TRAJ)

    def __init__(self, type=STATIONARY, data=None, end=None):
        if type not in self.TYPES:
            raise ValueError('init type must be one of {}, get {!r}'.format(
                self.TYPES, type))
        self.type = type
        self.data = None if data is None else np.array(data, dtype=np.float64)
        self.end = None if end is None else np.array(end, dtype=np.float64)

    def trajectory(self, n_steps):
        """Return the seed trajectory of shape (n_steps, n_dof)."""
        if self.data is None:
            raise ValueError('init info has no data')
        if self.type == self.STATIONARY:
            return np.tile(self.data.reshape(1, -1), (n_steps, 1))
        if self.type == self.JOINT_INTERPOLATED:
            if self.end is None:
                raise ValueError('joint interpolated init needs an end')
            t = np.linspace(0, 1, n_steps)[:, np.newaxis]
            return self.data + t * (self.end - self.data)
        return np.array(self.data, dtype=np.float64)

    def to_dict(self):
        d = {'type': self.type}
        if self.data is not None:
            d['data'] = self.data.tolist()
        if self.end is not None:
            d['end'] = self.end.tolist()
        return d


class ProblemDescription(object):
    """Collects the terms of one trajectory optimization problem.

    A description is created fresh for each generated problem, filled
    with cost and constraint terms in a fixed order and handed once to
    a problem constructor.

    Parameters
    ----------
    env : pnp_trajopt.environment.Environment
        environment the problem is planned in.
    """

    def __init__(self, env=None):
        self.env = env
        self.basic_info = BasicInfo()
        self.init_info = InitInfo()
        self.kin = None
        self.cost_infos = []
        self.cnt_infos = []
        self._names = set()

    @property
    def n_steps(self):
        return self.basic_info.n_steps

    def _register_name(self, term):
        if term.name is None:
            raise ValueError('term {!r} has no name'.format(term))
        if term.name in self._names:
            raise DuplicateTermError(
                'term name {!r} is already used'.format(term.name))
        self._names.add(term.name)

    def add_cost(self, term):
        self._register_name(term)
        self.cost_infos.append(term)
        logger.debug('add cost %r', term)
        return term

    def add_constraint(self, term):
        self._register_name(term)
        self.cnt_infos.append(term)
        logger.debug('add constraint %r', term)
        return term

    def add_term(self, term):
        """Append ``term`` to the list matching its term type."""
        if term.is_constraint:
            return self.add_constraint(term)
        return self.add_cost(term)

    @property
    def terms(self):
        return self.cost_infos + self.cnt_infos

    @property
    def term_names(self):
        return [term.name for term in self.terms]

    def get_term(self, name):
        for term in self.terms:
            if term.name == name:
                return term
        raise KeyError(name)

    def terms_of_kind(self, kind):
        return [term for term in self.terms if term.kind == kind]

    def to_dict(self):
        return {
            'basic_info': self.basic_info.to_dict(),
            'init_info': self.init_info.to_dict(),
            'costs': [term.to_dict() for term in self.cost_infos],
            'constraints': [term.to_dict() for term in self.cnt_infos],
        }

    def summary(self):
        """Return term counts per kind and term type."""
        counts = {}
        for term in self.terms:
            key = '{}_{}'.format(term.kind, term.term_type)
            counts[key] = counts.get(key, 0) + 1
        return {
            'n_steps': self.basic_info.n_steps,
            'manip': self.basic_info.manip,
            'n_costs': len(self.cost_infos),
            'n_constraints': len(self.cnt_infos),
            'terms': counts,
        }

    def __repr__(self):
        return '#<{} n_steps={} costs={} constraints={}>'.format(
            self.__class__.__name__, self.basic_info.n_steps,
            len(self.cost_infos), len(self.cnt_infos))
