import unittest

import numpy as np
from numpy import pi
from numpy import testing

from pnp_trajopt.coordinates import Coordinates
from pnp_trajopt.coordinates import linear_pose_sequence
from pnp_trajopt.coordinates import quaternion2matrix
from pnp_trajopt.coordinates import rotation_matrix
from pnp_trajopt.coordinates.math import quaternion_from_axis_angle
from pnp_trajopt.coordinates.math import quaternion_multiply
from pnp_trajopt.coordinates.math import quaternion_norm


class TestLinearPoseSequence(unittest.TestCase):

    def test_positions(self):
        start = Coordinates(pos=[0.1, 0.2, 0.3])
        end = Coordinates(pos=[0.4, -0.1, 0.15])
        positions, quaternions = linear_pose_sequence(start, end, 7)
        self.assertEqual(positions.shape, (7, 3))
        self.assertEqual(quaternions.shape, (7, 4))
        testing.assert_array_equal(positions[0], start.translation)
        testing.assert_array_equal(positions[-1], end.translation)
        steps = np.diff(positions, axis=0)
        for step in steps:
            testing.assert_almost_equal(step, steps[0])

    def test_orientations(self):
        rng = np.random.RandomState(0)
        for _ in range(10):
            start = Coordinates(pos=rng.uniform(-1, 1, 3),
                                rot=rng.uniform(-pi, pi, 3))
            end = Coordinates(pos=rng.uniform(-1, 1, 3),
                              rot=rng.uniform(-pi, pi, 3))
            _, quaternions = linear_pose_sequence(start, end, 5)
            for q in quaternions:
                self.assertAlmostEqual(quaternion_norm(q), 1.0)
            testing.assert_almost_equal(
                quaternion2matrix(quaternions[0]), start.rotation)
            testing.assert_almost_equal(
                quaternion2matrix(quaternions[-1]),
                np.matmul(start.rotation_between(end), start.rotation))

    def test_equal_angle_steps(self):
        start = Coordinates()
        end = Coordinates().rotate(1.0, 'z')
        _, quaternions = linear_pose_sequence(start, end, 3)
        testing.assert_almost_equal(quaternions[0], [1, 0, 0, 0])
        testing.assert_almost_equal(
            quaternions[1], quaternion_from_axis_angle(0.5, [0, 0, 1]))
        testing.assert_almost_equal(
            quaternions[2], quaternion_from_axis_angle(1.0, [0, 0, 1]))

    def test_delta_composed_before_start(self):
        start = Coordinates().rotate(pi / 2.0, 'x')
        end = start.copy_worldcoords().rotate(0.6, 'z')
        _, quaternions = linear_pose_sequence(start, end, 4)
        delta = quaternion_from_axis_angle(0.2, [0, 0, 1])
        testing.assert_almost_equal(
            quaternions[1], quaternion_multiply(delta, start.quaternion))
        testing.assert_almost_equal(
            quaternion2matrix(quaternions[1]),
            np.matmul(rotation_matrix(0.2, 'z'), start.rotation))
        # the last orientation is not end when the rotations do not commute
        testing.assert_almost_equal(
            quaternion2matrix(quaternions[-1]),
            np.matmul(rotation_matrix(0.6, 'z'), start.rotation))
        self.assertFalse(np.allclose(
            quaternion2matrix(quaternions[-1]), end.rotation))

    def test_commuting_rotation_reaches_end(self):
        start = Coordinates().rotate(0.4, 'z')
        end = Coordinates(pos=[0.1, 0, 0]).rotate(-0.5, 'z')
        _, quaternions = linear_pose_sequence(start, end, 5)
        testing.assert_almost_equal(
            quaternion2matrix(quaternions[-1]), end.rotation)

    def test_identical_poses(self):
        c = Coordinates(pos=[0.5, 0, 0.5]).rotate(0.3, 'y')
        positions, quaternions = linear_pose_sequence(c, c, 4)
        for p, q in zip(positions, quaternions):
            testing.assert_almost_equal(p, c.translation)
            testing.assert_almost_equal(quaternion2matrix(q), c.rotation)

    def test_single_step(self):
        with self.assertRaises(ZeroDivisionError):
            linear_pose_sequence(Coordinates(), Coordinates(), 1)
