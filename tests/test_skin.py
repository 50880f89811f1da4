"""Tests for Skin joint matrices and CPU deformation"""

import numpy as np
import pytest

from rigkit.animation import Joint, Skeleton, Skin
from rigkit.core import transforms


@pytest.fixture
def arm():
    """Shoulder at the origin with an elbow one unit down."""
    skeleton = Skeleton("arm")
    shoulder = skeleton.add_root_joint(Joint("shoulder"))
    elbow = shoulder.add_sub_joint(Joint("elbow", pose_transform=transforms.translation(0.0, -1.0, 0.0)))
    shoulder.set_vertex_weights([(0, 1.0), (1, 1.0)])
    elbow.set_vertex_weights([(1, 1.0), (2, 1.0)])
    skeleton.build_pose()
    skeleton.reset_to_pose()
    return skeleton


REST = np.array([
    [0.0, 0.0, 0.0],
    [0.0, -1.0, 0.0],
    [0.0, -2.0, 0.0],
    [5.0, 5.0, 5.0],  # not weighted by any joint
])


def test_joint_matrices_identity_at_rest(arm):
    """Rest pose yields identity joint matrices"""
    skin = Skin(arm)
    skin.update_joint_matrices()

    matrices = skin.get_joint_matrices_array()
    assert matrices.shape == (2, 4, 4)
    assert matrices.dtype == np.float32
    assert np.allclose(matrices, np.eye(4))


def test_empty_joint_matrices():
    """No palette gives an empty array"""
    skin = Skin(Skeleton())
    skin.update_joint_matrices()

    assert skin.get_joint_matrices_array().shape == (0, 4, 4)


def test_rest_pose_deformation_is_identity(arm):
    """Deforming in the rest pose returns the rest positions"""
    deformed = Skin(arm).deform_vertices(REST)

    assert np.allclose(deformed, REST)


def test_translating_root_moves_weighted_vertices(arm):
    """Every influenced vertex follows a root translation"""
    arm.get_joint("shoulder").transform = transforms.translation(2.0, 0.0, 0.0)

    deformed = Skin(arm).deform_vertices(REST)

    assert np.allclose(deformed[:3], REST[:3] + [2.0, 0.0, 0.0])
    assert np.allclose(deformed[3], REST[3])


def test_elbow_motion_blends_shared_vertex(arm):
    """A vertex weighted by both joints moves half as far"""
    elbow = arm.get_joint("elbow")
    elbow.transform = transforms.translation(1.0, -1.0, 0.0)

    deformed = Skin(arm).deform_vertices(REST)

    assert np.allclose(deformed[0], REST[0])
    assert np.allclose(deformed[1], REST[1] + [0.5, 0.0, 0.0])
    assert np.allclose(deformed[2], REST[2] + [1.0, 0.0, 0.0])


def test_weight_matrix_layout(arm):
    """Dense weight matrix columns follow the joint palette"""
    skin = Skin(arm)
    weights = skin.build_weight_matrix(3)

    assert weights.shape == (3, 2)
    assert np.allclose(weights[:, 0], [0.5, 0.5, 0.0])
    assert np.allclose(weights[:, 1], [0.0, 0.5, 0.5])


def test_weight_index_out_of_range(arm):
    """The consumer validates indices against the mesh"""
    with pytest.raises(ValueError):
        Skin(arm).build_weight_matrix(2)


def test_custom_palette_order(arm):
    """An explicit palette controls matrix order"""
    elbow = arm.get_joint("elbow")
    elbow.transform = transforms.translation(0.0, -3.0, 0.0)
    skin = Skin(arm, joints=[elbow])
    skin.update_joint_matrices()

    matrices = skin.get_joint_matrices_array()
    assert matrices.shape == (1, 4, 4)
    assert np.allclose(matrices[0][3, :3], [0.0, -2.0, 0.0])


def test_default_palette_picks_up_joints_added_later(arm):
    """A skin built before a joint is attached still deforms with it"""
    skin = Skin(arm)
    late = arm.get_joint("elbow").add_sub_joint(Joint("late"))
    late.set_vertex_weights([(3, 1.0)])
    arm.build_pose()
    late.transform = transforms.translation(5.0, 0.0, 0.0)

    deformed = skin.deform_vertices(REST)

    assert len(skin.joints) == 3
    assert skin.get_joint_matrices_array().shape == (3, 4, 4)
    assert np.allclose(deformed[3], REST[3] + [5.0, 0.0, 0.0])
    assert np.allclose(deformed[:3], REST[:3])


def test_default_palette_drops_removed_joints(arm):
    """A detached joint no longer deforms the mesh"""
    skin = Skin(arm)
    shoulder = arm.get_joint("shoulder")
    elbow = shoulder.remove_sub_joint(arm.get_joint("elbow"))
    elbow.transform = transforms.translation(10.0, 0.0, 0.0)

    deformed = skin.deform_vertices(REST)

    assert [joint.name for joint in skin.joints] == ["shoulder"]
    assert skin.build_weight_matrix(4).shape == (4, 1)
    assert np.allclose(deformed, REST)


def test_explicit_palette_is_fixed(arm):
    """An explicit palette does not follow later hierarchy changes"""
    shoulder = arm.get_joint("shoulder")
    skin = Skin(arm, joints=[shoulder])
    shoulder.add_sub_joint(Joint("extra"))

    assert [joint.name for joint in skin.joints] == ["shoulder"]
