"""
Skeleton

Owns the root joints of one or more joint hierarchies and bakes their
origin transforms.
"""

import logging
import weakref
from typing import Dict, Iterator, List, Optional, Tuple

import numpy as np

from ..core import transforms
from .errors import InvalidHierarchyError, JointNotFoundError
from .joint import Joint

logger = logging.getLogger(__name__)


class Skeleton:
    """
    Hierarchical skeleton structure.

    Manages the root joints and provides utilities for:
    - Baking origin transforms from the rest pose (``build_pose``)
    - Walking and searching every joint of the forest
    - Resetting animated transforms back to the rest pose
    """

    def __init__(self, name: str = "Skeleton"):
        """
        Initialize skeleton.

        Args:
            name: Skeleton name for debugging
        """
        self.name = name
        self._root_joints: List[Joint] = []

    @property
    def root_joints(self) -> Tuple[Joint, ...]:
        return tuple(self._root_joints)

    def add_root_joint(self, joint: Joint) -> Joint:
        """
        Add a joint as the root of a new hierarchy and take ownership of it.

        Raises:
            InvalidHierarchyError: If the joint has a parent or is already a root
        """
        if joint.parent is not None:
            raise InvalidHierarchyError(
                f"Joint '{joint.name}' has parent '{joint.parent.name}' and cannot become a root"
            )
        if joint.is_owned:
            raise InvalidHierarchyError(f"Joint '{joint.name}' is already a skeleton root")

        self._root_joints.append(joint)
        joint._parent_ref = None
        joint._skeleton_ref = weakref.ref(self)
        joint._mark_pose_stale()
        return joint

    def remove_root_joint(self, joint: Joint) -> Joint:
        """
        Remove a root joint and hand its ownership back to the caller.

        Raises:
            JointNotFoundError: If the joint is not a root of this skeleton
        """
        for i, root in enumerate(self._root_joints):
            if root is joint:
                del self._root_joints[i]
                joint._skeleton_ref = None
                return joint
        raise JointNotFoundError(f"Joint '{joint.name}' is not a root of skeleton '{self.name}'")

    def build_pose(self) -> int:
        """
        Bake the origin transform of every joint from the rest pose.

        Call once after assembling the skeleton and again whenever a pose
        transform changes.

        Returns:
            Number of joints visited
        """
        visited = 0
        for root in self._root_joints:
            visited += root._build_pose(transforms.identity())
        logger.debug("Built pose for skeleton '%s' (%d joints)", self.name, visited)
        return visited

    @property
    def needs_pose_rebuild(self) -> bool:
        return any(joint.pose_stale for joint in self.iter_joints())

    def iter_joints(self) -> Iterator[Joint]:
        """Yield every joint, roots in order, each hierarchy in pre-order."""
        for root in self._root_joints:
            yield from root.iter_subtree()

    @property
    def joints(self) -> List[Joint]:
        return list(self.iter_joints())

    @property
    def joint_count(self) -> int:
        return sum(1 for _ in self.iter_joints())

    def get_joint(self, name: str) -> Optional[Joint]:
        """
        Find a joint by name.

        Args:
            name: Joint name

        Returns:
            Joint if found, None otherwise
        """
        for root in self._root_joints:
            found = root.find(name)
            if found is not None:
                return found
        return None

    def reset_to_pose(self):
        """Reset all joints to the rest pose (current transform = pose transform)."""
        for joint in self.iter_joints():
            joint.reset_to_pose()

    def global_transforms(self) -> Dict[str, np.ndarray]:
        """Current global transform of every named joint."""
        return {joint.name: joint.global_transform() for joint in self.iter_joints() if joint.name}

    def __repr__(self):
        return f"Skeleton(name='{self.name}', joints={self.joint_count}, roots={len(self._root_joints)})"
