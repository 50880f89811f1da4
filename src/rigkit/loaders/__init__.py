"""
Loaders

Data-driven construction of skeletons.
"""

from .skeleton_loader import (
    JointDefinition,
    SkeletonDefinition,
    load_skeleton,
    load_skeleton_definition,
)

__all__ = [
    'JointDefinition',
    'SkeletonDefinition',
    'load_skeleton',
    'load_skeleton_definition',
]
