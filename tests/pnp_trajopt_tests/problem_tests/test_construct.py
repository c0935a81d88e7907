import unittest

import numpy as np
from numpy import testing

from pnp_trajopt.coordinates import Coordinates
from pnp_trajopt.models import make_environment
from pnp_trajopt.problem import construct_problem
from pnp_trajopt.problem import InitInfo
from pnp_trajopt.problem import PickAndPlaceConstructor
from pnp_trajopt.problem import ProblemConstructionError
from pnp_trajopt.problem import ProblemDescription
from pnp_trajopt.problem import TrajOptProblem
from pnp_trajopt.problem.terms import CollisionTermInfo
from pnp_trajopt.problem.terms import create_safety_margin_data_vector
from pnp_trajopt.problem.terms import JointPosTermInfo
from pnp_trajopt.problem.terms import JointVelTermInfo
from pnp_trajopt.problem.terms import StaticPoseTermInfo


class TestConstructProblem(unittest.TestCase):

    def setUp(self):
        self.joint_values = [0.0, -1.2, 1.6, -0.4, 1.5708, 0.0]
        self.env = make_environment('six_dof_arm',
                                    joint_values=self.joint_values)
        self.builder = PickAndPlaceConstructor(
            self.env, 'manipulator', 'tool0', 'box',
            construct=lambda pci: pci)
        self.approach = Coordinates(pos=[0.4, 0.2, 0.3], rot=[0, 1, 0, 0])
        self.final = Coordinates(pos=[0.4, 0.2, 0.15], rot=[0, 1, 0, 0])

    def _pick_description(self, steps_per_phase=10):
        return self.builder.generate_pick_problem(
            self.approach, self.final, steps_per_phase)

    def _empty_description(self, n_steps=5):
        pci = ProblemDescription(self.env)
        pci.basic_info.n_steps = n_steps
        pci.basic_info.manip = 'manipulator'
        pci.kin = self.env.get_manipulator('manipulator')
        pci.init_info = InitInfo(data=self.joint_values)
        return pci

    def test_construct(self):
        problem = construct_problem(self._pick_description())
        self.assertIsInstance(problem, TrajOptProblem)
        self.assertEqual(problem.n_steps, 20)
        self.assertEqual(problem.n_dof, 6)
        self.assertFalse(problem.start_fixed)
        self.assertEqual(len(problem.costs), 7)
        self.assertEqual(len(problem.constraints), 11)
        self.assertEqual(problem.initial_trajectory.shape, (20, 6))
        for row in problem.initial_trajectory:
            testing.assert_equal(row, self.joint_values)

    def test_evaluate_initial_trajectory(self):
        problem = construct_problem(self._pick_description())
        traj = problem.initial_trajectory
        values = problem.evaluate(traj)
        for name in problem.kin.joint_names:
            self.assertEqual(values[name + '_vel'], 0.0)
        testing.assert_equal(values['start_pos_constraint'], np.zeros(6))
        self.assertIsNone(values['collision'])
        self.assertEqual(values['pose_10'].shape, (6,))
        self.assertEqual(problem.total_cost(traj), 0.0)

    def test_collision_cost(self):
        problem = construct_problem(self._pick_description())
        traj = problem.initial_trajectory
        # every checked state in contact: 11 steps * 20 * 0.025
        self.assertAlmostEqual(
            problem.total_cost(traj, collision_fn=lambda step, q: 0.0), 5.5)
        self.assertEqual(
            problem.total_cost(traj, collision_fn=lambda step, q: 1.0), 0.0)

    def test_velocity_cost(self):
        problem = construct_problem(self._pick_description())
        traj = problem.initial_trajectory.copy()
        traj[:, 0] = np.linspace(0, 1, 20)
        values = problem.evaluate(traj)
        self.assertAlmostEqual(values['shoulder_pan_joint_vel'], 5.0 / 19)
        self.assertEqual(values['elbow_joint_vel'], 0.0)

    def test_pose_error_at_current_pose(self):
        pci = self.builder.generate_place_problem(
            Coordinates(pos=[0.4, 0.2, 0.4], rot=[0, 1, 0, 0]),
            self.approach, self.final, 5)
        problem = construct_problem(pci)
        values = problem.evaluate(problem.initial_trajectory)
        testing.assert_almost_equal(values['pose_0'], np.zeros(6))
        self.assertGreater(np.abs(values['pose_4']).max(), 0.0)

    def test_constraint_violation(self):
        pci = self._empty_description()
        pci.add_constraint(JointPosTermInfo(
            vals=self.joint_values, name='start_pos_constraint'))
        problem = construct_problem(pci)
        traj = problem.initial_trajectory.copy()
        self.assertEqual(problem.constraint_violation(traj), 0.0)
        traj[0, 2] += 0.1
        self.assertAlmostEqual(problem.constraint_violation(traj), 0.1)
        # later steps are not constrained
        traj[0, 2] = self.joint_values[2]
        traj[3, 2] += 0.5
        self.assertEqual(problem.constraint_violation(traj), 0.0)

    def test_invalid_trajectory(self):
        problem = construct_problem(self._pick_description())
        with self.assertRaises(ValueError):
            problem.evaluate(np.zeros((19, 6)))

    def test_invalid_settings(self):
        pci = self._empty_description(n_steps=0)
        with self.assertRaises(ProblemConstructionError):
            construct_problem(pci)

        pci = self._empty_description()
        pci.kin = None
        with self.assertRaises(ProblemConstructionError):
            construct_problem(pci)

        pci = self._empty_description()
        pci.init_info = InitInfo(data=[0.0, 0.0])
        with self.assertRaises(ProblemConstructionError):
            construct_problem(pci)

        pci = self._empty_description()
        pci.init_info = InitInfo(InitInfo.JOINT_INTERPOLATED,
                                 data=self.joint_values)
        with self.assertRaises(ProblemConstructionError) as cm:
            construct_problem(pci)
        self.assertIsInstance(cm.exception.__cause__, ValueError)

    def test_invalid_terms(self):
        invalid_terms = [
            JointPosTermInfo(vals=self.joint_values, first_step=5,
                             name='late_pos'),
            JointPosTermInfo(vals=[0.0, 0.0], name='short_pos'),
            JointVelTermInfo('gripper_joint', last_step=4),
            JointVelTermInfo('elbow_joint', first_step=3, last_step=1),
            StaticPoseTermInfo('tool0', 2, [0, 0, 0], [2, 0, 0, 0]),
            StaticPoseTermInfo('tool0', 2, [0, 0], [1, 0, 0, 0]),
            StaticPoseTermInfo('gripper', 2, [0, 0, 0], [1, 0, 0, 0]),
            CollisionTermInfo(
                first_step=0, last_step=4,
                info=create_safety_margin_data_vector(3, 0.025, 20)),
            CollisionTermInfo(
                first_step=0, last_step=4,
                info=create_safety_margin_data_vector(5, 0.025, 20),
                gap=0),
            CollisionTermInfo(
                first_step=2, last_step=6,
                info=create_safety_margin_data_vector(5, 0.025, 20)),
        ]
        for term in invalid_terms:
            pci = self._empty_description()
            pci.add_term(term)
            with self.assertRaises(ProblemConstructionError):
                construct_problem(pci)

    def test_repr(self):
        problem = construct_problem(self._pick_description())
        self.assertIn('n_steps=20', repr(problem))
