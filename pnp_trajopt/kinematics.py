"""Serial-chain kinematics adapter implementing the environment interfaces.

This adapter covers what the problem builder needs from a kinematics
library: ordered joint names, the current configuration and forward
kinematics of named links.
"""

from collections import OrderedDict
from logging import getLogger

from cached_property import cached_property
import numpy as np

from pnp_trajopt.coordinates import Coordinates
from pnp_trajopt.coordinates import normalize_vector
from pnp_trajopt.coordinates import rotation_matrix
from pnp_trajopt.coordinates.math import convert_to_axis_vector
from pnp_trajopt.environment import Environment
from pnp_trajopt.environment import EnvironmentState
from pnp_trajopt.environment import Manipulator
from pnp_trajopt.environment import ManipulatorNotFoundError


logger = getLogger(__name__)

REVOLUTE = 'revolute'
PRISMATIC = 'prismatic'


class JointSpec(object):
    """One actuated joint of a serial chain.

    Parameters
    ----------
    name : str
        joint name.
    parent_link : str
        link the joint is mounted on.
    child_link : str
        link moved by the joint.
    origin : pnp_trajopt.coordinates.Coordinates or None
        pose of the joint frame in the parent link frame.
    axis : str or list or numpy.ndarray
        joint axis in the joint frame.
    joint_type : str
        'revolute' or 'prismatic'.
    """

    def __init__(self, name, parent_link, child_link, origin=None,
                 axis='z', joint_type=REVOLUTE):
        if joint_type not in (REVOLUTE, PRISMATIC):
            raise ValueError(
                'joint_type must be {!r} or {!r}, get {!r}'.format(
                    REVOLUTE, PRISMATIC, joint_type))
        self.name = name
        self.parent_link = parent_link
        self.child_link = child_link
        self.origin = origin if origin is not None else Coordinates()
        self.axis = normalize_vector(convert_to_axis_vector(axis))
        self.joint_type = joint_type

    def motion(self, value):
        """Return the joint motion for ``value`` as Coordinates."""
        if self.joint_type == REVOLUTE:
            return Coordinates(rot=rotation_matrix(value, self.axis),
                               check_validity=False)
        return Coordinates(pos=self.axis * value, check_validity=False)

    def __repr__(self):
        return '#<{} {} {}->{}>'.format(
            self.__class__.__name__, self.name,
            self.parent_link, self.child_link)


class SerialChainManipulator(Manipulator):
    """Manipulator made of a single chain of joints.

    Parameters
    ----------
    name : str
        manipulator name.
    base_link : str
        name of the link the chain starts from.
    joints : list[JointSpec]
        joints in order from the base link.
    fixed_links : dict[str, tuple(str, Coordinates)] or None
        extra links rigidly attached to a chain link, given as
        ``{name: (parent_link, offset)}``. Tool frames are added here.
    """

    def __init__(self, name, base_link, joints, fixed_links=None):
        self._name = name
        self._base_link = base_link
        self.joints = list(joints)
        if len(self.joints) == 0:
            raise ValueError('manipulator {} has no joints'.format(name))
        parent = base_link
        for joint in self.joints:
            if joint.parent_link != parent:
                raise ValueError(
                    'joint {} is mounted on {}, expected {}'.format(
                        joint.name, joint.parent_link, parent))
            parent = joint.child_link
        self.fixed_links = OrderedDict(fixed_links or {})
        chain_links = {base_link} | {j.child_link for j in self.joints}
        for link_name, (parent_link, _) in self.fixed_links.items():
            if parent_link not in chain_links:
                raise ValueError(
                    'fixed link {} is attached to unknown link {}'.format(
                        link_name, parent_link))
            chain_links.add(link_name)

    @property
    def name(self):
        return self._name

    @property
    def base_link_name(self):
        return self._base_link

    @cached_property
    def joint_names(self):
        return [joint.name for joint in self.joints]

    @cached_property
    def link_names(self):
        names = [self._base_link]
        names.extend(joint.child_link for joint in self.joints)
        names.extend(self.fixed_links.keys())
        return names

    @property
    def tip_link_name(self):
        """Last link of the chain, the default end effector."""
        if self.fixed_links:
            return next(reversed(self.fixed_links))
        return self.joints[-1].child_link

    def link_poses(self, base_transform, joint_values):
        """Return world poses of every link for ``joint_values``.

        Returns
        -------
        poses : collections.OrderedDict[str, Coordinates]
        """
        joint_values = np.asarray(joint_values, dtype=np.float64).reshape(-1)
        if len(joint_values) != self.n_dof:
            raise ValueError(
                'manipulator {} has {} joints, get {} joint values'.format(
                    self.name, self.n_dof, len(joint_values)))
        if base_transform is None:
            base_transform = Coordinates()
        poses = OrderedDict()
        poses[self._base_link] = base_transform.copy_worldcoords()
        for joint, value in zip(self.joints, joint_values):
            parent = poses[joint.parent_link]
            poses[joint.child_link] = parent * joint.origin * \
                joint.motion(value)
        for link_name, (parent_link, offset) in self.fixed_links.items():
            poses[link_name] = poses[parent_link] * offset
        return poses

    def calc_forward_kinematics(self, base_transform, joint_values,
                                link_name, state=None):
        if link_name not in self.link_names:
            raise KeyError(
                'link {!r} is not part of manipulator {}'.format(
                    link_name, self.name))
        pose = self.link_poses(base_transform, joint_values)[link_name]
        pose.name = link_name
        return pose

    def __repr__(self):
        return '#<{} {} dof={}>'.format(
            self.__class__.__name__, self.name, self.n_dof)


class KinematicEnvironment(Environment):
    """In-memory environment holding manipulators and their joint values.

    Parameters
    ----------
    manipulators : list[SerialChainManipulator] or None
        manipulators registered at their zero configuration with the
        base link at the world origin.
    """

    def __init__(self, manipulators=None):
        self._manipulators = OrderedDict()
        self._base_transforms = {}
        self._joint_values = OrderedDict()
        self.attached_objects = {}
        for manip in manipulators or []:
            self.add_manipulator(manip)

    def add_manipulator(self, manip, base_transform=None, joint_values=None):
        if manip.name in self._manipulators:
            raise ValueError(
                'manipulator {} is already registered'.format(manip.name))
        shared = [name for name in manip.joint_names
                  if name in self._joint_values]
        if shared:
            raise ValueError(
                'joints {} are already registered'.format(', '.join(shared)))
        self._manipulators[manip.name] = manip
        if base_transform is None:
            base_transform = Coordinates()
        self._base_transforms[manip.name] = base_transform.copy_worldcoords()
        if joint_values is None:
            joint_values = np.zeros(manip.n_dof)
        for joint_name in manip.joint_names:
            self._joint_values[joint_name] = 0.0
        self.set_joint_values(joint_values, manip.name)
        logger.debug('registered manipulator %s with %d joints',
                     manip.name, manip.n_dof)
        return manip

    @property
    def manipulator_names(self):
        return list(self._manipulators.keys())

    def get_manipulator(self, name):
        try:
            return self._manipulators[name]
        except KeyError:
            raise ManipulatorNotFoundError(name, self._manipulators.keys())

    def _joint_names(self, manipulator_name=None):
        if manipulator_name is None:
            return list(self._joint_values.keys())
        return self.get_manipulator(manipulator_name).joint_names

    def get_current_joint_values(self, manipulator_name=None):
        return np.array(
            [self._joint_values[name]
             for name in self._joint_names(manipulator_name)],
            dtype=np.float64)

    def set_joint_values(self, joint_values, manipulator_name=None):
        joint_names = self._joint_names(manipulator_name)
        joint_values = np.asarray(joint_values, dtype=np.float64).reshape(-1)
        if len(joint_values) != len(joint_names):
            raise ValueError(
                'expected {} joint values, get {}'.format(
                    len(joint_names), len(joint_values)))
        for name, value in zip(joint_names, joint_values):
            self._joint_values[name] = float(value)

    def get_base_transform(self, manipulator_name):
        self.get_manipulator(manipulator_name)
        return self._base_transforms[manipulator_name].copy_worldcoords()

    def get_state(self):
        transforms = {}
        for name, manip in self._manipulators.items():
            poses = manip.link_poses(self._base_transforms[name],
                                     self.get_current_joint_values(name))
            transforms.update(poses)
        for object_name, (link_name, offset) in \
                self.attached_objects.items():
            transforms[object_name] = transforms[link_name] * offset
        return EnvironmentState(transforms, self._joint_values)

    def attach_object(self, object_name, link_name, offset=None):
        """Attach ``object_name`` rigidly to ``link_name``."""
        known_links = set()
        for manip in self._manipulators.values():
            known_links.update(manip.link_names)
        if link_name not in known_links:
            raise KeyError('unknown link {!r}'.format(link_name))
        if offset is None:
            offset = Coordinates()
        self.attached_objects[object_name] = (link_name, offset)

    def detach_object(self, object_name):
        return self.attached_objects.pop(object_name)
