"""
Skeleton Loader

Lightweight descriptors for building skeletons from data, and a JSON file
reader producing them.

Descriptor layout::

    {
        "name": "arm",
        "max_weight_count": 4,
        "roots": [
            {
                "name": "shoulder",
                "translation": [0, 0, 0],
                "rotation": [0, 0, 0, 1],
                "scale": [1, 1, 1],
                "weights": [[0, 1.0], [1, 0.5]],
                "children": [...]
            }
        ]
    }
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from ..config.settings import DEFAULT_MAX_WEIGHT_COUNT, SKELETON_CONFIG_DIR
from ..animation.joint import Joint
from ..animation.skeleton import Skeleton
from ..core import transforms

logger = logging.getLogger(__name__)


def _vector(value, fallback: Tuple[float, ...]) -> Tuple[float, ...]:
    """Utility to coerce JSON vectors into tuples of the fallback's length."""

    if value is None:
        value = fallback
    if not isinstance(value, (list, tuple)) or len(value) != len(fallback):
        raise ValueError(f"Expected {len(fallback)} components, got {value!r}")
    try:
        return tuple(float(v) for v in value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Vector components must be numbers, got {value!r}") from e


def _vertex_index(value) -> int:
    """Accept whole non-negative numbers only; 2.0 is vertex 2, 0.7 is rejected."""

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Vertex index must be an integer, got {value!r}")
    if not float(value).is_integer() or value < 0:
        raise ValueError(f"Vertex index must be a non-negative integer, got {value!r}")
    return int(value)


def _weight_entry(entry) -> Tuple[int, float]:
    if isinstance(entry, dict):
        if "index" not in entry or "weight" not in entry:
            raise ValueError(f"Weight entry needs 'index' and 'weight': {entry!r}")
        index, weight = entry["index"], entry["weight"]
    elif isinstance(entry, (list, tuple)) and len(entry) == 2:
        index, weight = entry
    else:
        raise ValueError(f"Weight entry must be an [index, weight] pair: {entry!r}")

    if isinstance(weight, bool) or not isinstance(weight, (int, float)):
        raise ValueError(f"Vertex weight must be a number, got {weight!r}")
    return _vertex_index(index), float(weight)


def _list_field(data: Dict[str, Any], key: str) -> list:
    value = data.get(key, [])
    if not isinstance(value, list):
        raise ValueError(f"'{key}' must be a list, got {value!r}")
    return value


@dataclass
class JointDefinition:
    """Data descriptor for one joint and its sub-joints."""

    name: str
    translation: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    rotation: Tuple[float, float, float, float] = (0.0, 0.0, 0.0, 1.0)
    scale: Tuple[float, float, float] = (1.0, 1.0, 1.0)
    weights: List[Tuple[int, float]] = field(default_factory=list)
    children: List["JointDefinition"] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "JointDefinition":
        """Create a joint definition from JSON data."""

        if not isinstance(data, dict):
            raise ValueError(f"Joint definition must be an object, got {data!r}")
        if "name" not in data:
            raise ValueError(f"Joint definition is missing a name: {data}")

        weights = [_weight_entry(entry) for entry in _list_field(data, "weights")]

        return cls(
            name=str(data["name"]),
            translation=_vector(data.get("translation"), (0.0, 0.0, 0.0)),
            rotation=_vector(data.get("rotation"), (0.0, 0.0, 0.0, 1.0)),
            scale=_vector(data.get("scale"), (1.0, 1.0, 1.0)),
            weights=weights,
            children=[cls.from_dict(child) for child in _list_field(data, "children")],
        )

    def pose_matrix(self):
        return transforms.compose_trs(self.translation, self.rotation, self.scale)

    def instantiate(self, max_weight_count: int = DEFAULT_MAX_WEIGHT_COUNT) -> Joint:
        """Create the joint subtree; current transforms start at the pose."""

        pose = self.pose_matrix()
        joint = Joint(self.name, transform=pose, pose_transform=pose)
        joint.set_vertex_weights(self.weights, max_weight_count)
        for child in self.children:
            joint.add_sub_joint(child.instantiate(max_weight_count))
        return joint


@dataclass
class SkeletonDefinition:
    """Data descriptor for a whole skeleton."""

    name: str = "Skeleton"
    roots: List[JointDefinition] = field(default_factory=list)
    max_weight_count: int = DEFAULT_MAX_WEIGHT_COUNT

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SkeletonDefinition":
        """
        Create a skeleton definition from JSON data.

        Raises:
            ValueError: If the data is not an object or any field is malformed
        """
        if not isinstance(data, dict):
            raise ValueError(f"Skeleton definition must be an object, got {type(data).__name__}")

        max_weight_count = data.get("max_weight_count", DEFAULT_MAX_WEIGHT_COUNT)
        if isinstance(max_weight_count, bool) or not isinstance(max_weight_count, int):
            raise ValueError(f"'max_weight_count' must be an integer, got {max_weight_count!r}")

        return cls(
            name=str(data.get("name", "Skeleton")),
            roots=[JointDefinition.from_dict(root) for root in _list_field(data, "roots")],
            max_weight_count=max_weight_count,
        )

    def instantiate(self, build_pose: bool = True) -> Skeleton:
        """
        Create a runtime skeleton from this definition.

        Args:
            build_pose: Bake origin transforms before returning

        Returns:
            Assembled skeleton
        """
        skeleton = Skeleton(self.name)
        for root in self.roots:
            skeleton.add_root_joint(root.instantiate(self.max_weight_count))
        if build_pose:
            skeleton.build_pose()
        return skeleton


def load_skeleton_definition(path: Union[str, Path], base_dir: Optional[Path] = None) -> SkeletonDefinition:
    """
    Load a skeleton definition from a JSON file.

    Relative paths that do not exist are looked up in ``base_dir``
    (``assets/config/skeletons`` by default).

    Raises:
        FileNotFoundError: If the file cannot be found
        ValueError: If the file content is malformed
    """
    path = Path(path)
    if not path.is_absolute() and not path.exists():
        path = (base_dir or SKELETON_CONFIG_DIR) / path
    if not path.exists():
        raise FileNotFoundError(f"Skeleton definition not found: {path}")

    with open(path, 'r') as f:
        data = json.load(f)

    definition = SkeletonDefinition.from_dict(data)
    logger.info("Loaded skeleton definition '%s' from %s (%d roots)", definition.name, path, len(definition.roots))
    return definition


def load_skeleton(path: Union[str, Path], base_dir: Optional[Path] = None) -> Skeleton:
    """Load a JSON skeleton definition and instantiate it with its pose built."""
    return load_skeleton_definition(path, base_dir).instantiate()
