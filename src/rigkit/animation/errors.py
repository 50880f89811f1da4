"""
Skeleton Errors

Exceptions raised by joint hierarchy operations.
"""


class SkeletonError(Exception):
    """Base class for skeleton hierarchy errors."""


class InvalidHierarchyError(SkeletonError, ValueError):
    """
    Raised when attaching a joint would give it a second owner or a cycle.

    The caller must detach the joint first; nothing is mutated.
    """


class JointNotFoundError(SkeletonError, LookupError):
    """Raised when removing a joint that is not a direct child (or root)."""
