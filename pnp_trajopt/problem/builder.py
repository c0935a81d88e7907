"""Pick-and-place problem builder.

:class:`PickAndPlaceConstructor` turns a few key poses into a
:class:`~pnp_trajopt.problem.description.ProblemDescription` and hands it
to a problem constructor. The builder itself never optimizes.
"""

from logging import getLogger

from pnp_trajopt.config import PickAndPlaceConfig
from pnp_trajopt.coordinates import Coordinates
from pnp_trajopt.coordinates import linear_pose_sequence
from pnp_trajopt.problem.construct import construct_problem
from pnp_trajopt.problem.description import InitInfo
from pnp_trajopt.problem.description import ProblemDescription
from pnp_trajopt.problem.terms import CollisionTermInfo
from pnp_trajopt.problem.terms import create_safety_margin_data_vector
from pnp_trajopt.problem.terms import JointPosTermInfo
from pnp_trajopt.problem.terms import JointVelTermInfo
from pnp_trajopt.problem.terms import SQUARED
from pnp_trajopt.problem.terms import StaticPoseTermInfo
from pnp_trajopt.problem.terms import TT_CNT
from pnp_trajopt.problem.terms import TT_COST


logger = getLogger(__name__)


class PickAndPlaceConstructor(object):
    """Build pick and place trajectory problems for one manipulator.

    Parameters
    ----------
    env : pnp_trajopt.environment.Environment
        environment providing the manipulator and its configuration.
        It is only read.
    manipulator : str
        name of the manipulator to plan for.
    ee_link : str
        link whose pose the Cartesian constraints act on.
    pick_object : str
        identifier of the manipulated object.
    tcp : pnp_trajopt.coordinates.Coordinates or None
        tool center point relative to ``ee_link``.
    construct : callable or None
        called with the finished description; its return value is
        returned by the generation methods. Defaults to
        :func:`~pnp_trajopt.problem.construct.construct_problem`.
    config : pnp_trajopt.config.PickAndPlaceConfig or None
        weights and margins. Defaults are used if `None`.

    Raises
    ------
    pnp_trajopt.environment.ManipulatorNotFoundError
        If ``manipulator`` is unknown to ``env``.
    """

    def __init__(self, env, manipulator, ee_link, pick_object, tcp=None,
                 construct=None, config=None):
        self.env = env
        self.manipulator = manipulator
        self.ee_link = ee_link
        self.pick_object = pick_object
        self.tcp = tcp if tcp is not None else Coordinates()
        self.construct = construct if construct is not None \
            else construct_problem
        self.config = config if config is not None else PickAndPlaceConfig()
        self.kin = env.get_manipulator(manipulator)

    def add_initial_joint_pos_constraint(self, pci):
        """Pin time step 0 to the environment's current joint values."""
        start_constraint = JointPosTermInfo(
            vals=self.env.get_current_joint_values(),
            first_step=0,
            last_step=0,
            name='start_pos_constraint',
            term_type=TT_CNT)
        pci.add_constraint(start_constraint)

    def add_joint_vel_cost(self, pci, coeff):
        """Add a squared velocity cost for every joint of the chain."""
        for joint_name in self.kin.joint_names:
            jv = JointVelTermInfo(
                joint_name,
                coeffs=[coeff],
                first_step=0,
                last_step=pci.basic_info.n_steps - 1,
                penalty_type=SQUARED,
                name='{}_vel'.format(joint_name),
                term_type=TT_COST)
            pci.add_cost(jv)

    def add_collision_cost(self, pci, dist_pen, coeff, first_step, last_step):
        """Add a collision cost over ``[first_step, last_step]``."""
        collision = CollisionTermInfo(
            first_step=first_step,
            last_step=last_step,
            info=create_safety_margin_data_vector(
                last_step - first_step + 1, dist_pen, coeff),
            continuous=self.config.collision_continuous,
            gap=self.config.collision_gap,
            name='collision',
            term_type=TT_COST)
        pci.add_cost(collision)

    def add_linear_motion(self, pci, start_pose, end_pose, num_steps,
                          first_time_step):
        """Constrain the end effector to a straight line between poses.

        One pose constraint is added per step, from ``first_time_step``
        to ``first_time_step + num_steps - 1``.

        Parameters
        ----------
        pci : ProblemDescription
        start_pose : pnp_trajopt.coordinates.Coordinates
        end_pose : pnp_trajopt.coordinates.Coordinates
        num_steps : int
            number of constrained steps, at least 2.
        first_time_step : int
            time step of ``start_pose``.
        """
        positions, quaternions = linear_pose_sequence(
            start_pose, end_pose, num_steps)
        logger.debug('linear motion over steps %d..%d',
                     first_time_step, first_time_step + num_steps - 1)
        for i in range(num_steps):
            timestep = i + first_time_step
            pose_constraint = StaticPoseTermInfo(
                link=self.ee_link,
                timestep=timestep,
                xyz=positions[i],
                wxyz=quaternions[i],
                pos_coeffs=self.config.pose_pos_coeffs,
                rot_coeffs=self.config.pose_rot_coeffs,
                name='pose_{}'.format(timestep),
                term_type=TT_CNT)
            pci.add_constraint(pose_constraint)

    def _new_description(self, n_steps):
        pci = ProblemDescription(self.env)
        pci.basic_info.n_steps = n_steps
        pci.basic_info.start_fixed = self.config.start_fixed
        pci.basic_info.manip = self.manipulator
        pci.kin = self.kin
        pci.init_info = InitInfo(
            InitInfo.STATIONARY,
            data=self.env.get_current_joint_values(self.kin.name))
        return pci

    def current_pose(self):
        """Return the current world pose of ``ee_link``."""
        state = self.env.get_state()
        return self.kin.calc_forward_kinematics(
            state.transforms[self.kin.base_link_name],
            self.env.get_current_joint_values(self.kin.name),
            self.ee_link,
            state)

    def build_pick_description(self, approach_pose, final_pose,
                               steps_per_phase):
        """Return the pick description without constructing it."""
        pci = self._new_description(steps_per_phase * 2)

        self.add_joint_vel_cost(pci, self.config.joint_vel_coeff)
        self.add_initial_joint_pos_constraint(pci)
        self.add_linear_motion(pci, approach_pose, final_pose,
                               steps_per_phase, steps_per_phase)
        self.add_collision_cost(pci, self.config.collision_dist_pen,
                                self.config.collision_coeff,
                                0, steps_per_phase)
        return pci

    def build_place_description(self, retreat_pose, approach_pose,
                                final_pose, steps_per_phase):
        """Return the place description without constructing it."""
        pci = self._new_description(steps_per_phase * 3)

        self.add_joint_vel_cost(pci, self.config.joint_vel_coeff)
        self.add_initial_joint_pos_constraint(pci)
        start_pose = self.current_pose()
        self.add_linear_motion(pci, start_pose, retreat_pose,
                               steps_per_phase, 0)
        self.add_linear_motion(pci, approach_pose, final_pose,
                               steps_per_phase, steps_per_phase * 2)
        self.add_collision_cost(pci, self.config.collision_dist_pen,
                                self.config.collision_coeff,
                                steps_per_phase, steps_per_phase * 2 - 1)
        return pci

    def generate_pick_problem(self, approach_pose, final_pose,
                              steps_per_phase):
        """Return the constructed problem to approach and pick an object.

        The first ``steps_per_phase`` steps move freely towards
        ``approach_pose`` while avoiding collisions, the remaining ones
        follow a straight line from ``approach_pose`` to ``final_pose``.
        """
        pci = self.build_pick_description(approach_pose, final_pose,
                                          steps_per_phase)
        logger.info('pick problem for %s (%s): %d steps, %d costs, '
                    '%d constraints', self.manipulator, self.pick_object,
                    pci.basic_info.n_steps, len(pci.cost_infos),
                    len(pci.cnt_infos))
        return self.construct(pci)

    def generate_place_problem(self, retreat_pose, approach_pose, final_pose,
                               steps_per_phase):
        """Return the constructed problem to carry and place an object.

        The trajectory retreats in a straight line from the current
        pose, moves freely while avoiding collisions and approaches
        ``final_pose`` in a straight line from ``approach_pose``.
        """
        pci = self.build_place_description(retreat_pose, approach_pose,
                                           final_pose, steps_per_phase)
        logger.info('place problem for %s (%s): %d steps, %d costs, '
                    '%d constraints', self.manipulator, self.pick_object,
                    pci.basic_info.n_steps, len(pci.cost_infos),
                    len(pci.cnt_infos))
        return self.construct(pci)
