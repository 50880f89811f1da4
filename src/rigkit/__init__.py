"""
RigKit - Skeleton and Skinning Toolkit

Joint hierarchies with normalized vertex weights and the rest-pose /
animated transform chain used to deform meshes.
"""

# Configuration
from .config.settings import *

# Animation
from .animation import (
    SkeletonError,
    InvalidHierarchyError,
    JointNotFoundError,
    VertexWeight,
    Joint,
    Skeleton,
    Skin,
    Animation,
    AnimationChannel,
    AnimationTarget,
    InterpolationType,
    AnimationController,
)

# Loaders
from .loaders import JointDefinition, SkeletonDefinition, load_skeleton, load_skeleton_definition

__version__ = "0.1.0"
__all__ = [
    # Config (exported via *)
    # Animation
    "SkeletonError",
    "InvalidHierarchyError",
    "JointNotFoundError",
    "VertexWeight",
    "Joint",
    "Skeleton",
    "Skin",
    "Animation",
    "AnimationChannel",
    "AnimationTarget",
    "InterpolationType",
    "AnimationController",
    # Loaders
    "JointDefinition",
    "SkeletonDefinition",
    "load_skeleton",
    "load_skeleton_definition",
]
