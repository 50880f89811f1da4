"""
Transform Utilities

pyrr-backed helpers for 4x4 affine joint transforms.

All matrices follow pyrr's row-major convention: points are row vectors,
``p' = p @ M`` and translation lives in row 3. Applying ``A`` and then ``B``
is therefore ``A @ B``, so a child's world matrix is ``local @ parent_world``.
"""

from functools import reduce
from typing import Iterable, Optional, Sequence, Tuple

import numpy as np
from pyrr import matrix33, matrix44, quaternion

from ..config.settings import TRANSFORM_TOLERANCE

_EPSILON = 1e-12


def identity() -> np.ndarray:
    """Return a fresh float64 identity matrix."""
    return matrix44.create_identity(dtype=np.float64)


def as_matrix(value) -> np.ndarray:
    """
    Coerce a matrix-like value into a float64 4x4 array.

    Accepts pyrr ``Matrix44`` objects, nested lists and numpy arrays.
    ``None`` yields identity. The result is always a copy.

    Raises:
        ValueError: If the value is not 4x4
    """
    if value is None:
        return identity()
    matrix = np.array(value, dtype=np.float64)
    if matrix.shape != (4, 4):
        raise ValueError(f"Expected a 4x4 transform, got shape {matrix.shape}")
    return matrix


def translation(x: float, y: float, z: float) -> np.ndarray:
    return matrix44.create_from_translation([x, y, z], dtype=np.float64)


def scaling(sx: float, sy: float, sz: float) -> np.ndarray:
    return matrix44.create_from_scale([sx, sy, sz], dtype=np.float64)


def chain(matrices: Iterable[np.ndarray]) -> np.ndarray:
    """
    Compose transforms in application order.

    ``chain([a, b, c])`` applies ``a`` first and ``c`` last.
    """
    return reduce(matrix44.multiply, matrices, identity())


def inverse_or_none(matrix: np.ndarray) -> Optional[np.ndarray]:
    """Invert an affine transform, returning None when it is singular."""
    try:
        inverted = matrix44.inverse(matrix)
    except np.linalg.LinAlgError:
        return None
    if not np.all(np.isfinite(inverted)):
        return None
    return np.asarray(inverted, dtype=np.float64)


def is_identity(matrix: np.ndarray, tolerance: float = TRANSFORM_TOLERANCE) -> bool:
    return bool(np.allclose(matrix, np.eye(4), atol=tolerance))


# ============================================================================
# Quaternions / TRS
# ============================================================================

def identity_quaternion() -> np.ndarray:
    return quaternion.create(dtype=np.float64)


def normalize_quaternion(q: Sequence[float], fallback: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Normalize an ``[x, y, z, w]`` quaternion.

    A zero-length quaternion carries no rotation information, so the
    fallback (identity by default) is returned instead.
    """
    q = np.asarray(q, dtype=np.float64)
    if q.shape != (4,):
        raise ValueError(f"Expected a quaternion [x, y, z, w], got {q}")
    length = np.linalg.norm(q)
    if length < _EPSILON:
        return identity_quaternion() if fallback is None else np.array(fallback, dtype=np.float64)
    return q / length


def compose_trs(
    translation_xyz: Sequence[float] = (0.0, 0.0, 0.0),
    rotation=None,
    scale: Sequence[float] = (1.0, 1.0, 1.0),
) -> np.ndarray:
    """
    Build a local transform from translation, rotation and scale.

    Scale is applied first, then rotation, then translation (same order the
    glTF loader in the engine uses).

    Args:
        translation_xyz: Translation vector
        rotation: ``[x, y, z, w]`` quaternion, 3x3 rotation matrix, or None
        scale: Per-axis scale

    Returns:
        4x4 float64 transform
    """
    if rotation is None:
        rot3 = np.eye(3, dtype=np.float64)
    else:
        rotation = np.asarray(rotation, dtype=np.float64)
        if rotation.shape == (3, 3):
            rot3 = rotation
        else:
            rot3 = matrix33.create_from_quaternion(normalize_quaternion(rotation), dtype=np.float64)

    m = identity()
    m[:3, :3] = np.diag(np.asarray(scale, dtype=np.float64)) @ rot3
    m[3, :3] = np.asarray(translation_xyz, dtype=np.float64)
    return m


def decompose(matrix: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Split an affine transform into (translation, 3x3 rotation, scale).

    Shear is not recovered. Rows with zero scale keep their (zero) rotation
    rows untouched.
    """
    matrix = as_matrix(matrix)
    upper = matrix[:3, :3]
    scale = np.linalg.norm(upper, axis=1)
    rot3 = upper.copy()
    nonzero = scale > _EPSILON
    rot3[nonzero] = upper[nonzero] / scale[nonzero, None]
    return matrix[3, :3].copy(), rot3, scale


def transform_points(points: np.ndarray, matrix: np.ndarray) -> np.ndarray:
    """Transform (N, 3) points by a row-major 4x4 matrix."""
    points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    homogeneous = np.hstack([points, np.ones((len(points), 1), dtype=np.float64)])
    return (homogeneous @ matrix)[:, :3]
