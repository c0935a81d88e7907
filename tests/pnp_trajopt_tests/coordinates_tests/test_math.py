import math
import unittest

import numpy as np
from numpy import pi
from numpy import testing

from pnp_trajopt.coordinates.math import _check_valid_rotation
from pnp_trajopt.coordinates.math import angle_axis_from_matrix
from pnp_trajopt.coordinates.math import axis_angle_from_matrix
from pnp_trajopt.coordinates.math import axis_angle_from_quaternion
from pnp_trajopt.coordinates.math import convert_to_axis_vector
from pnp_trajopt.coordinates.math import matrix2quaternion
from pnp_trajopt.coordinates.math import normalize_vector
from pnp_trajopt.coordinates.math import quaternion2matrix
from pnp_trajopt.coordinates.math import quaternion_from_axis_angle
from pnp_trajopt.coordinates.math import quaternion_multiply
from pnp_trajopt.coordinates.math import quaternion_norm
from pnp_trajopt.coordinates.math import quaternion_normalize
from pnp_trajopt.coordinates.math import rotate_matrix
from pnp_trajopt.coordinates.math import rotation_matrix
from pnp_trajopt.coordinates.math import rpy2quaternion
from pnp_trajopt.coordinates.math import rpy_angle


def ypr_matrix(yaw, pitch, roll):
    rot = rotation_matrix(yaw, 'z')
    rot = rotate_matrix(rot, pitch, 'y')
    return rotate_matrix(rot, roll, 'x')


class TestMath(unittest.TestCase):

    def test__check_valid_rotation(self):
        testing.assert_equal(_check_valid_rotation(np.eye(3)), np.eye(3))
        with self.assertRaises(ValueError):
            _check_valid_rotation(2 * np.eye(3))
        with self.assertRaises(ValueError):
            _check_valid_rotation(np.eye(4))

    def test_convert_to_axis_vector(self):
        testing.assert_equal(convert_to_axis_vector('x'), [1, 0, 0])
        testing.assert_equal(convert_to_axis_vector('-z'), [0, 0, -1])
        testing.assert_equal(convert_to_axis_vector([0, 1, 0]), [0, 1, 0])
        with self.assertRaises(NotImplementedError):
            convert_to_axis_vector('w')

    def test_normalize_vector(self):
        testing.assert_almost_equal(normalize_vector([3, 0, 4]),
                                    [0.6, 0, 0.8])
        testing.assert_equal(normalize_vector([0, 0, 0]), [0, 0, 0])

    def test_rotation_matrix(self):
        testing.assert_almost_equal(
            np.matmul(rotation_matrix(pi / 2.0, 'x'), [0, 1, 0]),
            [0, 0, 1])
        testing.assert_almost_equal(
            np.matmul(rotation_matrix(pi / 2.0, [0, 0, 2]), [1, 0, 0]),
            [0, 1, 0])

    def test_rpy(self):
        rot = ypr_matrix(0.3, -0.2, 0.5)
        testing.assert_almost_equal(rpy_angle(rot)[0], [0.3, -0.2, 0.5])
        testing.assert_almost_equal(
            quaternion2matrix(rpy2quaternion([0.3, -0.2, 0.5])), rot)
        testing.assert_almost_equal(
            rotate_matrix(np.eye(3), 0.3, 'z', world=True),
            rotation_matrix(0.3, 'z'))

    def test_matrix2quaternion(self):
        testing.assert_almost_equal(matrix2quaternion(np.eye(3)),
                                    [1, 0, 0, 0])
        testing.assert_almost_equal(
            matrix2quaternion(rotation_matrix(pi, 'x')),
            [0, 1, 0, 0])

        rot = ypr_matrix(0.3, -0.2, 0.5)
        testing.assert_almost_equal(
            quaternion2matrix(matrix2quaternion(rot)), rot)

    def test_quaternion2matrix(self):
        testing.assert_almost_equal(
            quaternion2matrix([0, 1, 0, 0]),
            np.diag([1, -1, -1]))
        testing.assert_almost_equal(
            quaternion2matrix([2, 0, 0, 0], normalize=True), np.eye(3))
        with self.assertRaises(ValueError):
            quaternion2matrix([2, 0, 0, 0])

    def test_quaternion_multiply(self):
        q = quaternion_from_axis_angle(0.4, [0, 1, 0])
        testing.assert_almost_equal(
            quaternion_multiply([1, 0, 0, 0], q), q)
        testing.assert_almost_equal(
            quaternion_multiply(q, q),
            quaternion_from_axis_angle(0.8, [0, 1, 0]))
        testing.assert_almost_equal(
            quaternion_multiply(q, q * [1, -1, -1, -1]),
            [1, 0, 0, 0])

    def test_quaternion_norm(self):
        self.assertAlmostEqual(quaternion_norm([1, 1, 1, 1]), 2.0)
        testing.assert_almost_equal(
            quaternion_normalize([0, 0, 0, 2]), [0, 0, 0, 1])

    def test_quaternion_from_axis_angle(self):
        testing.assert_almost_equal(
            quaternion_from_axis_angle(0, [1, 0, 0]), [1, 0, 0, 0])
        q = quaternion_from_axis_angle(0.7, [1, 1, 0])
        testing.assert_almost_equal(
            quaternion2matrix(q), rotation_matrix(0.7, [1, 1, 0]))

    def test_angle_axis_from_matrix(self):
        angle, axis = angle_axis_from_matrix(np.eye(3))
        self.assertEqual(angle, 0.0)
        testing.assert_equal(axis, [1, 0, 0])

        angle, axis = angle_axis_from_matrix(rotation_matrix(0.5, 'z'))
        self.assertAlmostEqual(angle, 0.5)
        testing.assert_almost_equal(axis, [0, 0, 1])

        # angles beyond pi come back as the shorter opposite rotation
        angle, axis = angle_axis_from_matrix(rotation_matrix(4.0, 'z'))
        self.assertAlmostEqual(angle, 2 * math.pi - 4.0)
        testing.assert_almost_equal(axis, [0, 0, -1])

        rot = ypr_matrix(0.3, -0.2, 0.5)
        angle, axis = angle_axis_from_matrix(rot)
        self.assertTrue(0 <= angle <= pi)
        testing.assert_almost_equal(rotation_matrix(angle, axis), rot)

    def test_axis_angle_from_matrix(self):
        testing.assert_almost_equal(
            axis_angle_from_matrix(rotation_matrix(0.25, 'y')),
            [0, 0.25, 0])
        testing.assert_almost_equal(
            axis_angle_from_matrix(np.eye(3)), [0, 0, 0])

    def test_axis_angle_from_quaternion(self):
        testing.assert_equal(
            axis_angle_from_quaternion([1, 0, 0, 0]), [0, 0, 0])
        # q and -q give the same rotation vector
        q = quaternion_from_axis_angle(0.8, [0, 1, 1])
        expected = 0.8 * normalize_vector([0, 1, 1])
        testing.assert_almost_equal(axis_angle_from_quaternion(q), expected)
        testing.assert_almost_equal(axis_angle_from_quaternion(-q), expected)
