"""Collaborator interfaces consumed by the problem builder.

The builder never computes kinematics or collision distances on its
own. It talks to an :class:`Environment` that owns one or more
:class:`Manipulator` handles and can produce an
:class:`EnvironmentState` snapshot. Concrete adapters live in
:mod:`pnp_trajopt.kinematics`.
"""

from abc import ABC
from abc import abstractmethod

import numpy as np


class ManipulatorNotFoundError(KeyError):
    """Raised when an environment has no manipulator of a given name."""

    def __init__(self, name, available=()):
        self.name = name
        self.available = tuple(available)
        super(ManipulatorNotFoundError, self).__init__(name)

    def __str__(self):
        return 'manipulator {!r} not found (available: {})'.format(
            self.name, ', '.join(self.available) or 'none')


class EnvironmentState(object):
    """Read-only snapshot of an environment at one point in time.

    Parameters
    ----------
    transforms : dict[str, pnp_trajopt.coordinates.Coordinates]
        world transform of every known link.
    joint_values : dict[str, float]
        joint value of every known joint.
    """

    def __init__(self, transforms=None, joint_values=None):
        self.transforms = {
            name: coords.copy_worldcoords()
            for name, coords in (transforms or {}).items()}
        self.joint_values = dict(joint_values or {})

    def joint_vector(self, joint_names):
        return np.array([self.joint_values[name] for name in joint_names],
                        dtype=np.float64)

    def __repr__(self):
        return '#<{} links={} joints={}>'.format(
            self.__class__.__name__,
            len(self.transforms), len(self.joint_values))


class Manipulator(ABC):
    """Handle to a controllable kinematic chain."""

    @property
    @abstractmethod
    def name(self):
        pass

    @property
    @abstractmethod
    def joint_names(self):
        """Ordered joint names of the chain."""

    @property
    @abstractmethod
    def base_link_name(self):
        pass

    @property
    def link_names(self):
        """Names of links whose pose can be computed."""
        return []

    @property
    def n_dof(self):
        return len(self.joint_names)

    @abstractmethod
    def calc_forward_kinematics(self, base_transform, joint_values,
                                link_name, state=None):
        """Return the world pose of ``link_name``.

        Parameters
        ----------
        base_transform : pnp_trajopt.coordinates.Coordinates
            world transform of the base link.
        joint_values : array-like
            joint values in :attr:`joint_names` order.
        link_name : str
            link to evaluate.
        state : EnvironmentState or None
            snapshot the evaluation is made against.

        Returns
        -------
        pose : pnp_trajopt.coordinates.Coordinates
        """


class Environment(ABC):
    """Source of manipulators and of the current robot configuration."""

    @abstractmethod
    def get_manipulator(self, name):
        """Return the :class:`Manipulator` called ``name``.

        Raises
        ------
        ManipulatorNotFoundError
            If no manipulator of that name exists.
        """

    @abstractmethod
    def get_current_joint_values(self, manipulator_name=None):
        """Return current joint values as a new numpy array.

        With ``manipulator_name`` only that chain's joints are returned,
        otherwise every active joint of the environment.
        """

    @abstractmethod
    def get_state(self):
        """Return an :class:`EnvironmentState` snapshot."""
