"""Tests for transform utilities"""

import math

import numpy as np
import pytest
from pyrr import quaternion

from rigkit.core import transforms


def test_translation_row_major():
    """Translation lives in row 3 and moves row-vector points"""
    m = transforms.translation(1.0, 2.0, 3.0)

    assert np.allclose(m[3, :3], [1.0, 2.0, 3.0])
    assert np.allclose(transforms.transform_points([[0.0, 0.0, 0.0]], m), [[1.0, 2.0, 3.0]])


def test_chain_applies_in_order():
    """chain([a, b]) applies a first"""
    scale = transforms.scaling(2.0, 2.0, 2.0)
    move = transforms.translation(1.0, 0.0, 0.0)

    point = transforms.transform_points([[1.0, 0.0, 0.0]], transforms.chain([scale, move]))

    assert np.allclose(point, [[3.0, 0.0, 0.0]])


def test_chain_empty_is_identity():
    assert transforms.is_identity(transforms.chain([]))


def test_inverse_or_none():
    """Singular matrices yield None"""
    m = transforms.translation(1.0, 2.0, 3.0)

    assert np.allclose(transforms.inverse_or_none(m) @ m, np.eye(4))
    assert transforms.inverse_or_none(transforms.scaling(0.0, 1.0, 1.0)) is None


def test_as_matrix_validates_shape():
    with pytest.raises(ValueError):
        transforms.as_matrix([[1.0, 0.0], [0.0, 1.0]])
    assert transforms.is_identity(transforms.as_matrix(None))


def test_zero_quaternion_falls_back_to_identity():
    """A zero-length quaternion carries no rotation"""
    assert np.allclose(transforms.normalize_quaternion([0.0, 0.0, 0.0, 0.0]), [0.0, 0.0, 0.0, 1.0])


def test_compose_decompose_round_trip():
    """decompose recovers translation, rotation and scale"""
    q = quaternion.create_from_y_rotation(math.pi / 3)
    m = transforms.compose_trs((1.0, -2.0, 0.5), q, (1.0, 2.0, 3.0))

    translation_xyz, rot3, scale = transforms.decompose(m)

    assert np.allclose(translation_xyz, [1.0, -2.0, 0.5])
    assert np.allclose(scale, [1.0, 2.0, 3.0])
    assert np.allclose(transforms.compose_trs(translation_xyz, rot3, scale), m)
    assert np.allclose(rot3 @ rot3.T, np.eye(3))
