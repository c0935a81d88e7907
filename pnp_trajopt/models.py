import numpy as np

from pnp_trajopt.coordinates import Coordinates
from pnp_trajopt.kinematics import JointSpec
from pnp_trajopt.kinematics import KinematicEnvironment
from pnp_trajopt.kinematics import SerialChainManipulator


def make_six_dof_arm(name='manipulator'):
    """Return a 6-DoF arm with UR5-like link lengths.

    The chain runs from ``base_link`` through ``link_1`` ... ``link_6``
    to the fixed tool frame ``tool0``.
    """
    joints = [
        JointSpec('shoulder_pan_joint', 'base_link', 'link_1',
                  origin=Coordinates(pos=[0, 0, 0.089159]), axis='z'),
        JointSpec('shoulder_lift_joint', 'link_1', 'link_2',
                  origin=Coordinates(pos=[0, 0.13585, 0]), axis='y'),
        JointSpec('elbow_joint', 'link_2', 'link_3',
                  origin=Coordinates(pos=[0, -0.1197, 0.425]), axis='y'),
        JointSpec('wrist_1_joint', 'link_3', 'link_4',
                  origin=Coordinates(pos=[0, 0, 0.39225]), axis='y'),
        JointSpec('wrist_2_joint', 'link_4', 'link_5',
                  origin=Coordinates(pos=[0, 0.093, 0]), axis='z'),
        JointSpec('wrist_3_joint', 'link_5', 'link_6',
                  origin=Coordinates(pos=[0, 0, 0.09465]), axis='y'),
    ]
    tool0 = Coordinates(pos=[0, 0.0823, 0]).rotate(-np.pi / 2.0, 'x')
    return SerialChainManipulator(
        name, 'base_link', joints, fixed_links={'tool0': ('link_6', tool0)})


def make_planar_arm(n_joints=3, link_length=0.3, name='planar_arm'):
    """Return a planar arm whose joints all turn about the z axis."""
    joints = []
    parent = 'base_link'
    for i in range(n_joints):
        child = 'link_{}'.format(i + 1)
        offset = 0.0 if i == 0 else link_length
        joints.append(JointSpec('joint_{}'.format(i + 1), parent, child,
                                origin=Coordinates(pos=[offset, 0, 0]),
                                axis='z'))
        parent = child
    tip = Coordinates(pos=[link_length, 0, 0])
    return SerialChainManipulator(
        name, 'base_link', joints, fixed_links={'tool0': (parent, tip)})


MODELS = {
    'six_dof_arm': make_six_dof_arm,
    'planar_arm': make_planar_arm,
}


def make_environment(model='six_dof_arm', joint_values=None,
                     base_transform=None, name='manipulator'):
    """Return a :class:`KinematicEnvironment` holding one bundled arm."""
    try:
        factory = MODELS[model]
    except KeyError:
        raise ValueError('unknown model {!r}, choose from {}'.format(
            model, ', '.join(sorted(MODELS))))
    manip = factory(name=name)
    env = KinematicEnvironment()
    env.add_manipulator(manip, base_transform=base_transform,
                        joint_values=joint_values)
    return env
