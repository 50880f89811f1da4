"""Tests for Skeleton orchestration"""

import numpy as np
import pytest

from rigkit.animation import Joint, Skeleton, InvalidHierarchyError, JointNotFoundError
from rigkit.core import transforms


def test_skeleton_initialization():
    """Empty skeleton"""
    skeleton = Skeleton("empty")

    assert skeleton.root_joints == ()
    assert skeleton.joint_count == 0
    assert skeleton.build_pose() == 0


def test_multiple_roots_build_pose():
    """Disjoint hierarchies are baked independently"""
    skeleton = Skeleton()
    left = skeleton.add_root_joint(Joint("left", pose_transform=transforms.translation(-1.0, 0.0, 0.0)))
    right = skeleton.add_root_joint(Joint("right", pose_transform=transforms.translation(1.0, 0.0, 0.0)))
    left_hand = left.add_sub_joint(Joint("left_hand", pose_transform=transforms.translation(0.0, -1.0, 0.0)))

    assert skeleton.build_pose() == 3
    assert np.allclose(right.origin_transform, transforms.translation(-1.0, 0.0, 0.0))
    assert np.allclose(left_hand.origin_transform, transforms.translation(1.0, 1.0, 0.0))


def test_add_root_with_parent_raises():
    """Only parentless joints can become roots"""
    skeleton = Skeleton()
    parent = Joint("parent")
    child = parent.add_sub_joint(Joint("child"))

    with pytest.raises(InvalidHierarchyError):
        skeleton.add_root_joint(child)
    assert skeleton.root_joints == ()


def test_add_root_twice_raises():
    """A root belongs to one skeleton slot"""
    first = Skeleton("first")
    second = Skeleton("second")
    root = first.add_root_joint(Joint("root"))

    with pytest.raises(InvalidHierarchyError):
        first.add_root_joint(root)
    with pytest.raises(InvalidHierarchyError):
        second.add_root_joint(root)


def test_remove_root_joint():
    """Removing a root hands it back and frees it for reuse"""
    skeleton = Skeleton()
    root = skeleton.add_root_joint(Joint("root"))

    assert skeleton.remove_root_joint(root) is root
    assert skeleton.root_joints == ()

    other = Joint("other")
    other.add_sub_joint(root)
    assert root.parent is other


def test_remove_unknown_root_raises():
    """Removing a joint that is not a root fails"""
    skeleton = Skeleton()
    root = skeleton.add_root_joint(Joint("root"))
    child = root.add_sub_joint(Joint("child"))

    with pytest.raises(JointNotFoundError):
        skeleton.remove_root_joint(child)
    assert skeleton.root_joints == (root,)


def test_get_joint_and_iteration():
    """Joint lookup across every root"""
    skeleton = Skeleton()
    a = skeleton.add_root_joint(Joint("a"))
    a.add_sub_joint(Joint("a1"))
    b = skeleton.add_root_joint(Joint("b"))
    b1 = b.add_sub_joint(Joint("b1"))

    assert skeleton.get_joint("b1") is b1
    assert skeleton.get_joint("missing") is None
    assert [j.name for j in skeleton.iter_joints()] == ["a", "a1", "b", "b1"]
    assert set(skeleton.global_transforms()) == {"a", "a1", "b", "b1"}


def test_reset_to_pose():
    """Reset copies every pose into the current transform"""
    skeleton = Skeleton()
    root = skeleton.add_root_joint(Joint("root", pose_transform=transforms.translation(0.0, 1.0, 0.0)))
    root.transform = transforms.translation(5.0, 5.0, 5.0)

    skeleton.reset_to_pose()

    assert np.allclose(root.transform, root.pose_transform)


def test_new_sub_joint_needs_rebuild():
    """Attaching a joint after build_pose flags the skeleton"""
    skeleton = Skeleton()
    root = skeleton.add_root_joint(Joint("root"))
    skeleton.build_pose()
    assert not skeleton.needs_pose_rebuild

    root.add_sub_joint(Joint("late"))

    assert skeleton.needs_pose_rebuild
