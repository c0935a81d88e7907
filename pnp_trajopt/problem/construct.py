"""Reference problem constructor.

:func:`construct_problem` checks a
:class:`~pnp_trajopt.problem.description.ProblemDescription` against its
manipulator and returns a :class:`TrajOptProblem` holding the seed
trajectory and the validated terms. The problem can evaluate its terms
on any trajectory, which is what an external optimizer or a test needs;
it does not optimize.
"""

from logging import getLogger

import numpy as np

from pnp_trajopt.coordinates import quaternion2matrix
from pnp_trajopt.coordinates.math import axis_angle_from_matrix
from pnp_trajopt.coordinates.math import quaternion_norm
from pnp_trajopt.problem.terms import ABS
from pnp_trajopt.problem.terms import CollisionTermInfo
from pnp_trajopt.problem.terms import HINGE
from pnp_trajopt.problem.terms import JointPosTermInfo
from pnp_trajopt.problem.terms import JointVelTermInfo
from pnp_trajopt.problem.terms import StaticPoseTermInfo


logger = getLogger(__name__)


class ProblemConstructionError(ValueError):
    """Raised when a description cannot be turned into a problem."""


def _penalty(x, penalty_type):
    if penalty_type == ABS:
        return np.abs(x)
    if penalty_type == HINGE:
        return np.maximum(x, 0.0)
    return x ** 2


class TrajOptProblem(object):
    """Validated problem ready to be handed to an optimizer.

    Attributes
    ----------
    n_steps : int
        number of time steps.
    n_dof : int
        number of joints of the manipulator.
    initial_trajectory : numpy.ndarray
        seed trajectory of shape (n_steps, n_dof).
    costs : list[TermInfo]
        soft cost terms in insertion order.
    constraints : list[TermInfo]
        hard constraint terms in insertion order.
    """

    def __init__(self, description, initial_trajectory):
        self.description = description
        self.kin = description.kin
        self.env = description.env
        self.manip = description.basic_info.manip
        self.n_steps = description.basic_info.n_steps
        self.n_dof = self.kin.n_dof
        self.start_fixed = description.basic_info.start_fixed
        self.initial_trajectory = np.array(initial_trajectory,
                                           dtype=np.float64)
        self.costs = list(description.cost_infos)
        self.constraints = list(description.cnt_infos)
        self._joint_index = {
            name: i for i, name in enumerate(self.kin.joint_names)}
        self._base_transform = None
        self._state = None

    def _validate_trajectory(self, trajectory):
        trajectory = np.asarray(trajectory, dtype=np.float64)
        expected_shape = (self.n_steps, self.n_dof)
        if trajectory.shape != expected_shape:
            raise ValueError(
                'Trajectory shape {} does not match expected shape {}'.format(
                    trajectory.shape, expected_shape))
        return trajectory

    def _forward_kinematics(self, joint_values, link_name):
        if self._state is None:
            self._state = self.env.get_state() if self.env is not None \
                else None
            if self._state is not None:
                self._base_transform = self._state.transforms.get(
                    self.kin.base_link_name)
        return self.kin.calc_forward_kinematics(
            self._base_transform, joint_values, link_name, self._state)

    def evaluate_term(self, term, trajectory, collision_fn=None):
        """Return the value of one term on ``trajectory``.

        Costs evaluate to a float, constraints to their weighted error
        vector. A collision term evaluates to `None` unless
        ``collision_fn(step, joint_values) -> distance`` is given.
        """
        if isinstance(term, JointVelTermInfo):
            j = self._joint_index[term.joint_name]
            q = trajectory[term.first_step:term.last_step + 1, j]
            return float(term.coeffs[0] * np.sum(
                _penalty(np.diff(q), term.penalty_type)))
        if isinstance(term, JointPosTermInfo):
            err = trajectory[term.first_step:term.last_step + 1] - term.vals
            err = (np.asarray(term.coeffs) * err).ravel()
            if term.is_constraint:
                return err
            return float(np.sum(err ** 2))
        if isinstance(term, StaticPoseTermInfo):
            pose = self._forward_kinematics(trajectory[term.timestep],
                                            term.link)
            pos_err = pose.translation - term.xyz
            target_rot = quaternion2matrix(term.wxyz, normalize=True)
            rot_err = axis_angle_from_matrix(
                np.matmul(target_rot.T, pose.rotation))
            err = np.hstack((term.pos_coeffs * pos_err,
                             term.rot_coeffs * rot_err))
            if term.is_constraint:
                return err
            return float(np.sum(err ** 2))
        if isinstance(term, CollisionTermInfo):
            if collision_fn is None:
                return None
            total = 0.0
            for data, step in zip(term.info, term.timesteps()):
                distance = collision_fn(step, trajectory[step])
                total += data.default_safety_margin_coeff * max(
                    0.0, data.default_safety_margin - distance)
            return total
        raise TypeError('unsupported term {!r}'.format(term))

    def evaluate(self, trajectory, collision_fn=None):
        """Return a mapping from term name to its value on ``trajectory``."""
        trajectory = self._validate_trajectory(trajectory)
        values = {}
        for term in self.costs + self.constraints:
            values[term.name] = self.evaluate_term(
                term, trajectory, collision_fn=collision_fn)
        return values

    def total_cost(self, trajectory, collision_fn=None):
        trajectory = self._validate_trajectory(trajectory)
        total = 0.0
        for term in self.costs:
            value = self.evaluate_term(term, trajectory, collision_fn)
            if value is not None:
                total += value
        return total

    def constraint_violation(self, trajectory):
        """Return the largest absolute weighted constraint error."""
        trajectory = self._validate_trajectory(trajectory)
        violation = 0.0
        for term in self.constraints:
            value = self.evaluate_term(term, trajectory)
            if value is None:
                continue
            violation = max(violation, float(np.max(np.abs(value))))
        return violation

    def __repr__(self):
        return '#<{} {} n_steps={} n_dof={} costs={} constraints={}>'.format(
            self.__class__.__name__, self.manip, self.n_steps, self.n_dof,
            len(self.costs), len(self.constraints))


def _check_step_range(term, n_steps):
    steps = term.timesteps()
    if not steps:
        raise ProblemConstructionError(
            'term {} has an empty step range'.format(term.name))
    for step in (steps[0], steps[-1]):
        if not 0 <= step < n_steps:
            raise ProblemConstructionError(
                'term {} acts on step {} outside [0, {}]'.format(
                    term.name, step, n_steps - 1))


def _check_term(term, kin, n_steps):
    if isinstance(term, CollisionTermInfo):
        _check_step_range(term, n_steps)
        n_checked = term.last_step - term.first_step + 1
        if len(term.info) != n_checked:
            raise ProblemConstructionError(
                'term {} has {} safety margin entries for {} steps'.format(
                    term.name, len(term.info), n_checked))
        if term.gap < 1:
            raise ProblemConstructionError(
                'term {} has gap {}, must be positive'.format(
                    term.name, term.gap))
        return
    if isinstance(term, JointVelTermInfo):
        if term.joint_name not in kin.joint_names:
            raise ProblemConstructionError(
                'term {} refers to unknown joint {}'.format(
                    term.name, term.joint_name))
    elif isinstance(term, JointPosTermInfo):
        if len(term.vals) != kin.n_dof:
            raise ProblemConstructionError(
                'term {} has {} joint values, manipulator {} has {} '
                'joints'.format(term.name, len(term.vals), kin.name,
                                kin.n_dof))
    elif isinstance(term, StaticPoseTermInfo):
        if term.xyz.shape != (3,) or term.wxyz.shape != (4,):
            raise ProblemConstructionError(
                'term {} needs a 3-vector position and a 4-vector '
                'quaternion'.format(term.name))
        if not np.isclose(quaternion_norm(term.wxyz), 1.0, atol=1e-6):
            raise ProblemConstructionError(
                'term {} has a non unit quaternion'.format(term.name))
        if kin.link_names and term.link not in kin.link_names:
            raise ProblemConstructionError(
                'term {} refers to unknown link {}'.format(
                    term.name, term.link))
    else:
        raise ProblemConstructionError(
            'unsupported term {!r}'.format(term))
    _check_step_range(term, n_steps)


def construct_problem(description):
    """Validate ``description`` and return a :class:`TrajOptProblem`.

    Parameters
    ----------
    description : pnp_trajopt.problem.description.ProblemDescription

    Returns
    -------
    problem : TrajOptProblem

    Raises
    ------
    ProblemConstructionError
        On the first inconsistency found.
    """
    n_steps = description.basic_info.n_steps
    if n_steps < 1:
        raise ProblemConstructionError(
            'n_steps must be positive, get {}'.format(n_steps))
    kin = description.kin
    if kin is None:
        raise ProblemConstructionError('description has no kinematics')

    try:
        initial_trajectory = description.init_info.trajectory(n_steps)
    except ValueError as e:
        raise ProblemConstructionError(str(e)) from e
    if initial_trajectory.shape != (n_steps, kin.n_dof):
        raise ProblemConstructionError(
            'initial trajectory shape {} does not match ({}, {})'.format(
                initial_trajectory.shape, n_steps, kin.n_dof))

    for term in description.cost_infos + description.cnt_infos:
        _check_term(term, kin, n_steps)

    problem = TrajOptProblem(description, initial_trajectory)
    logger.debug('constructed %r', problem)
    return problem
