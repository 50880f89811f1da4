"""
Animation System

Joint hierarchies, vertex weights and the pose/global transform protocol
used for skeletal skinning.
"""

from .errors import SkeletonError, InvalidHierarchyError, JointNotFoundError
from .vertex_weight import VertexWeight, select_and_normalize
from .joint import Joint
from .skeleton import Skeleton
from .skin import Skin
from .animation import Keyframe, AnimationChannel, Animation, AnimationTarget, InterpolationType
from .animation_controller import AnimationController

__all__ = [
    'SkeletonError',
    'InvalidHierarchyError',
    'JointNotFoundError',
    'VertexWeight',
    'select_and_normalize',
    'Joint',
    'Skeleton',
    'Skin',
    'Keyframe',
    'AnimationChannel',
    'Animation',
    'AnimationTarget',
    'InterpolationType',
    'AnimationController',
]
