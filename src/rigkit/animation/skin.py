"""
Skin

Binds skeleton joints to a mesh's vertices for skeletal deformation.
"""

from typing import List, Optional, Sequence

import numpy as np

from ..core import transforms
from .joint import Joint
from .skeleton import Skeleton


class Skin:
    """
    Skin binds a skeleton to a mesh.

    Contains:
    - Ordered palette of joints that influence the mesh
    - Joint matrices (origin transform applied before the current global
      transform), computed every frame

    The origin transforms come from ``Skeleton.build_pose``, so the skin holds
    no inverse bind matrices of its own.
    """

    def __init__(self, skeleton: Skeleton, joints: Optional[Sequence[Joint]] = None, name: str = "Skin"):
        """
        Initialize skin.

        Args:
            skeleton: Skeleton providing the joints
            joints: Joint palette order (defaults to every skeleton joint in pre-order)
            name: Skin name for debugging
        """
        self.name = name
        self.skeleton = skeleton
        self._palette: Optional[List[Joint]] = list(joints) if joints is not None else None
        self.joint_matrices: List[np.ndarray] = []

    @property
    def joints(self) -> List[Joint]:
        """
        Joint palette.

        Without an explicit palette this follows the skeleton as it is now,
        so joints attached or removed after the skin was created are picked up.
        """
        if self._palette is not None:
            return list(self._palette)
        return self.skeleton.joints

    def update_joint_matrices(self):
        """
        Compute joint matrices for the current frame.

        jointMatrix = originTransform @ globalTransform (row-major)

        This transforms vertices from the rest pose to the current animated pose.
        """
        self.joint_matrices = [joint.skinning_transform() for joint in self.joints]
        return self.joint_matrices

    def get_joint_matrices_array(self) -> np.ndarray:
        """
        Get joint matrices as a numpy array.

        Returns:
            Numpy array of shape (num_joints, 4, 4) with dtype float32
        """
        if not self.joint_matrices:
            return np.zeros((0, 4, 4), dtype='f4')
        return np.array(self.joint_matrices, dtype='f4')

    def build_weight_matrix(self, vertex_count: int) -> np.ndarray:
        """
        Gather every palette joint's vertex weights into a dense matrix.

        Args:
            vertex_count: Number of vertices in the bound mesh

        Returns:
            (vertex_count, num_joints) float64 influence matrix

        Raises:
            ValueError: If a weight references a vertex outside the mesh
        """
        return self._weight_matrix(self.joints, vertex_count)

    @staticmethod
    def _weight_matrix(palette: Sequence[Joint], vertex_count: int) -> np.ndarray:
        weights = np.zeros((vertex_count, len(palette)), dtype=np.float64)
        for column, joint in enumerate(palette):
            for vw in joint.vertex_weights:
                if vw.index >= vertex_count:
                    raise ValueError(
                        f"Joint '{joint.name}' weights vertex {vw.index}, mesh has {vertex_count} vertices"
                    )
                weights[vw.index, column] += vw.weight
        return weights

    def deform_vertices(self, rest_positions: np.ndarray) -> np.ndarray:
        """
        Linear blend skinning on the CPU.

        Each vertex is moved by every joint that weights it, and the results
        are averaged by the vertex's total influence. Vertices that no joint
        influences keep their rest position.

        Args:
            rest_positions: (N, 3) rest-pose vertex positions

        Returns:
            (N, 3) deformed positions
        """
        rest = np.asarray(rest_positions, dtype=np.float64).reshape(-1, 3)
        # Matrices and weight columns must come from the same palette snapshot
        palette = self.joints
        self.joint_matrices = [joint.skinning_transform() for joint in palette]
        weights = self._weight_matrix(palette, len(rest))

        blended = np.zeros_like(rest)
        for column, matrix in enumerate(self.joint_matrices):
            w = weights[:, column]
            if not w.any():
                continue
            blended += w[:, None] * transforms.transform_points(rest, matrix)

        total = weights.sum(axis=1)
        influenced = total != 0.0
        result = rest.copy()
        result[influenced] = blended[influenced] / total[influenced, None]
        return result

    def __repr__(self):
        return f"Skin(name='{self.name}', joints={len(self.joints)})"
