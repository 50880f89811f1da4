"""
Joint

A single node of a skeleton hierarchy with its vertex weights and the
pose/global transform protocol used for skinning.
"""

import logging
import weakref
from typing import Iterable, Iterator, List, Optional, Tuple

import numpy as np

from ..config.settings import DEBUG_SKELETON_LOGGING, DEFAULT_MAX_WEIGHT_COUNT
from ..core import transforms
from .errors import InvalidHierarchyError, JointNotFoundError
from .vertex_weight import VertexWeight, WeightLike, select_and_normalize

logger = logging.getLogger(__name__)


class Joint:
    """
    Represents a single joint (bone) in a skeleton hierarchy.

    Each joint has:
    - Current local transform (``transform``), changed every animation frame
    - Pose local transform (``pose_transform``), the rest state
    - Origin transform, the inverse global pose baked by ``Skeleton.build_pose``
    - Owned sub-joints and a weak reference to its parent
    - The vertex weights describing which mesh vertices it deforms

    Matrices are row-major (pyrr convention), so the animated position of a
    rest vertex is ``p @ origin_transform @ global_transform()``.
    """

    def __init__(self, name: str = "", transform=None, pose_transform=None):
        """
        Initialize a joint.

        Args:
            name: Joint name (used for lookup and animation channels)
            transform: Initial current local transform (identity if None)
            pose_transform: Rest local transform (identity if None)
        """
        self.name = name
        self._transform = transforms.as_matrix(transform)
        self._pose_transform = transforms.as_matrix(pose_transform)
        self._origin_transform = self._frozen(transforms.identity())
        self._pose_stale = True

        self._parent_ref: Optional[weakref.ref] = None
        self._skeleton_ref: Optional[weakref.ref] = None
        self._sub_joints: List["Joint"] = []

        self._vertex_weights: List[VertexWeight] = []

    @staticmethod
    def _frozen(matrix: np.ndarray) -> np.ndarray:
        matrix.setflags(write=False)
        return matrix

    # ------------------------------------------------------------------
    # Transforms
    # ------------------------------------------------------------------

    @property
    def transform(self) -> np.ndarray:
        """Current (animated) local transform."""
        return self._transform

    @transform.setter
    def transform(self, value):
        self._transform = transforms.as_matrix(value)

    @property
    def pose_transform(self) -> np.ndarray:
        """
        Rest local transform.

        Assign a new matrix to change it; assignment marks the pose stale so
        the owning skeleton knows ``build_pose`` has to run again.
        """
        return self._pose_transform

    @pose_transform.setter
    def pose_transform(self, value):
        self._pose_transform = transforms.as_matrix(value)
        self._mark_pose_stale()

    @property
    def origin_transform(self) -> np.ndarray:
        """Inverse global pose transform (read-only, valid after build_pose)."""
        return self._origin_transform

    @property
    def pose_stale(self) -> bool:
        """True until build_pose has run since the last pose change or loss of the parent."""
        joint = self
        while joint is not None:
            # An ancestor link whose parent was collected changed the rest chain
            if joint._parent_ref is not None and joint._parent_ref() is None:
                return True
            joint = joint.parent
        return self._pose_stale

    def _mark_pose_stale(self):
        for joint in self.iter_subtree():
            joint._pose_stale = True

    def global_transform(self, out: Optional[np.ndarray] = None) -> np.ndarray:
        """
        Compose the current transform with every ancestor's current transform.

        Walks the parent chain on every call so it always reflects the
        latest per-frame changes.

        Args:
            out: Optional 4x4 array receiving the result

        Returns:
            Global transform (``out`` if it was given)
        """
        local_to_root = []
        joint = self
        while joint is not None:
            local_to_root.append(joint._transform)
            joint = joint.parent
        matrix = transforms.chain(local_to_root)

        if out is not None:
            out[...] = matrix
            return out
        return matrix

    def skinning_transform(self) -> np.ndarray:
        """Matrix taking a rest-space vertex to its animated position."""
        return self._origin_transform @ self.global_transform()

    def reset_to_pose(self):
        """Set the current transform back to the pose transform."""
        self._transform = self._pose_transform.copy()

    def _build_pose(self, parent_pose_transform: np.ndarray) -> int:
        """
        Bake origin transforms for this joint and all sub-joints.

        Visits the subtree in pre-order; each joint's global rest transform
        is its pose transform applied before its parent's global rest
        transform. A singular global rest transform keeps the joint's
        previous origin transform.

        Args:
            parent_pose_transform: Global rest transform of the parent

        Returns:
            Number of joints visited
        """
        visited = 0
        stack: List[Tuple["Joint", np.ndarray]] = [(self, transforms.as_matrix(parent_pose_transform))]

        while stack:
            joint, parent_global = stack.pop()
            global_pose = joint._pose_transform @ parent_global

            origin = transforms.inverse_or_none(global_pose)
            if origin is None:
                logger.warning("Joint '%s' has a singular rest transform; origin transform left unchanged",
                               joint.name)
            else:
                joint._origin_transform = self._frozen(origin)
            joint._pose_stale = False
            visited += 1

            if DEBUG_SKELETON_LOGGING:
                logger.debug("Baked pose for joint '%s' (depth %d)", joint.name, joint.depth)

            for child in reversed(joint._sub_joints):
                stack.append((child, global_pose))

        return visited

    # ------------------------------------------------------------------
    # Vertex weights
    # ------------------------------------------------------------------

    def set_vertex_weights(self, weights: Iterable[WeightLike], max_count: int = DEFAULT_MAX_WEIGHT_COUNT):
        """
        Replace the vertex weights and normalize them so they sum to 1.0.

        Args:
            weights: VertexWeight objects or (index, weight) pairs
            max_count: If greater than zero, keep only the ``max_count``
                most influential weights (largest magnitude)
        """
        self._vertex_weights = select_and_normalize(weights, max_count)

    @property
    def vertex_weights(self) -> Tuple[VertexWeight, ...]:
        return tuple(self._vertex_weights)

    def vertex_weight_sum(self) -> float:
        return sum(vw.weight for vw in self._vertex_weights)

    def weight_for_vertex(self, index: int) -> float:
        """Total weight this joint stores for a vertex (0.0 if none)."""
        return sum(vw.weight for vw in self._vertex_weights if vw.index == index)

    # ------------------------------------------------------------------
    # Hierarchy
    # ------------------------------------------------------------------

    @property
    def parent(self) -> Optional["Joint"]:
        """Parent joint, or None for a root or detached joint."""
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @property
    def sub_joints(self) -> Tuple["Joint", ...]:
        return tuple(self._sub_joints)

    @property
    def is_owned(self) -> bool:
        """True if a parent joint or a skeleton root slot owns this joint."""
        return self.parent is not None or (self._skeleton_ref is not None and self._skeleton_ref() is not None)

    @property
    def root(self) -> "Joint":
        joint = self
        while joint.parent is not None:
            joint = joint.parent
        return joint

    @property
    def depth(self) -> int:
        depth = 0
        joint = self.parent
        while joint is not None:
            depth += 1
            joint = joint.parent
        return depth

    def is_ancestor_of(self, joint: "Joint") -> bool:
        ancestor = joint.parent
        while ancestor is not None:
            if ancestor is self:
                return True
            ancestor = ancestor.parent
        return False

    def add_sub_joint(self, joint: "Joint") -> "Joint":
        """
        Attach a joint as the last sub-joint and take ownership of it.

        Args:
            joint: Joint without a parent

        Returns:
            The attached joint

        Raises:
            InvalidHierarchyError: If the joint already has an owner, or is
                this joint or one of its ancestors
        """
        if joint is self:
            raise InvalidHierarchyError(f"Joint '{self.name}' cannot be its own sub-joint")
        if joint.parent is not None:
            raise InvalidHierarchyError(
                f"Joint '{joint.name}' already has parent '{joint.parent.name}'; remove it first"
            )
        if joint.is_owned:
            raise InvalidHierarchyError(f"Joint '{joint.name}' is a skeleton root; remove it first")
        if joint.is_ancestor_of(self):
            raise InvalidHierarchyError(
                f"Attaching '{joint.name}' under '{self.name}' would create a cycle"
            )

        self._sub_joints.append(joint)
        joint._parent_ref = weakref.ref(self)
        joint._mark_pose_stale()
        return joint

    def remove_sub_joint(self, joint: "Joint") -> "Joint":
        """
        Detach a direct sub-joint and hand its ownership back to the caller.

        The detached joint keeps its own subtree.

        Returns:
            The removed joint

        Raises:
            JointNotFoundError: If the joint is not a direct sub-joint
        """
        for i, child in enumerate(self._sub_joints):
            if child is joint:
                del self._sub_joints[i]
                joint._parent_ref = None
                joint._mark_pose_stale()
                return joint
        raise JointNotFoundError(f"Joint '{joint.name}' is not a sub-joint of '{self.name}'")

    def iter_subtree(self) -> Iterator["Joint"]:
        """Yield this joint and all descendants in pre-order."""
        stack = [self]
        while stack:
            joint = stack.pop()
            yield joint
            stack.extend(reversed(joint._sub_joints))

    def find(self, name: str) -> Optional["Joint"]:
        """Find the first joint in this subtree with the given name."""
        for joint in self.iter_subtree():
            if joint.name == name:
                return joint
        return None

    def __repr__(self):
        return f"Joint(name='{self.name}', children={len(self._sub_joints)}, weights={len(self._vertex_weights)})"
