"""
Vertex Weights

Per-joint (vertex index, weight) influence pairs and the selection /
normalization applied when a joint's weight list is assigned.
"""

import heapq
from dataclasses import dataclass, replace
from typing import Iterable, List, Tuple, Union

from ..config.settings import DEFAULT_MAX_WEIGHT_COUNT


@dataclass(frozen=True)
class VertexWeight:
    """
    How strongly a joint influences one vertex of an external mesh.

    The index is never checked against a mesh here; only the consumer that
    owns the vertex array knows its size.
    """

    index: int
    weight: float = 0.0

    def __post_init__(self):
        if int(self.index) != self.index or self.index < 0:
            raise ValueError(f"Vertex index must be a non-negative integer, got {self.index!r}")
        object.__setattr__(self, "index", int(self.index))
        object.__setattr__(self, "weight", float(self.weight))

    def __repr__(self):
        return f"VertexWeight(index={self.index}, weight={self.weight:.4f})"


WeightLike = Union[VertexWeight, Tuple[int, float]]


def coerce_vertex_weights(weights: Iterable[WeightLike]) -> List[VertexWeight]:
    """Accept VertexWeight objects or (index, weight) pairs."""
    result = []
    for entry in weights:
        if isinstance(entry, VertexWeight):
            result.append(entry)
        else:
            index, weight = entry
            result.append(VertexWeight(index, weight))
    return result


def select_and_normalize(
    weights: Iterable[WeightLike],
    max_count: int = DEFAULT_MAX_WEIGHT_COUNT,
) -> List[VertexWeight]:
    """
    Truncate a weight list to its most influential entries and normalize it.

    When ``max_count`` is positive and smaller than the input, only the
    ``max_count`` entries with the largest ``abs(weight)`` are kept. This is a
    partial selection (``heapq.nlargest``), and it is stable: among equal
    magnitudes the entry that came first in the input wins. Selected entries
    come out in descending magnitude order; without truncation the input
    order is kept.

    The retained weights are then divided by their sum. A zero sum (all-zero
    weights, empty input) leaves the values as they are.

    Args:
        weights: VertexWeight objects or (index, weight) pairs
        max_count: Maximum number of weights to keep (0 = unlimited)

    Returns:
        New list of normalized VertexWeight objects

    Raises:
        ValueError: If max_count is negative
    """
    if max_count < 0:
        raise ValueError(f"max_count must be >= 0, got {max_count}")

    retained = coerce_vertex_weights(weights)
    if 0 < max_count < len(retained):
        retained = heapq.nlargest(max_count, retained, key=lambda vw: abs(vw.weight))

    total = sum(vw.weight for vw in retained)
    if total == 0.0:
        return retained

    return [replace(vw, weight=vw.weight / total) for vw in retained]
