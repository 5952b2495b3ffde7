"""bbox2d.geometry — box record, overlap metrics, greedy NMS

Rules:
- Pure functions, no I/O, no hidden state.
- No clamping unless asked for: the raw formulas are kept so results match
  the numbers existing callers were tuned against.
- NMS never sorts. Callers sort first (see `sort_by_confidence`).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, NewType, Tuple

import numpy as np


@dataclass(frozen=True)
class Box:
    """
    Axis-aligned box plus classification metadata.

    x0, y0: top-left corner (detector input space unless transformed)
    width, height: extents, non-negative by caller contract (not validated)
    class_index: integer class id, opaque here
    confidence: score 0..1, only used for pre-sorting
    """
    x0: float
    y0: float
    width: float
    height: float
    class_index: int = 0
    confidence: float = 0.0

    @property
    def x1(self) -> float:
        return self.x0 + self.width

    @property
    def y1(self) -> float:
        return self.y0 + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    def as_xywh(self) -> Tuple[float, float, float, float]:
        return self.x0, self.y0, self.width, self.height


# Boxes already sorted by descending confidence.
SortedBoxes = NewType("SortedBoxes", tuple)


def sort_by_confidence(boxes: Iterable[Box]) -> SortedBoxes:
    """Stable sort, highest confidence first."""
    return SortedBoxes(tuple(sorted(boxes, key=lambda b: b.confidence, reverse=True)))


# ----------------------------
# Overlap metrics
# ----------------------------

def union_area(a: Box, b: Box) -> float:
    """Area of the smallest rectangle enclosing both boxes.

    This is the bounding envelope, not the geometric set union: the gap
    between two separated boxes counts towards it.
    """
    x = min(a.x0, b.x0)
    y = min(a.y0, b.y0)
    w = max(a.x1, b.x1) - x
    h = max(a.y1, b.y1) - y
    return w * h


enclosing_area = union_area


def intersection_area(a: Box, b: Box, clamp: bool = False) -> float:
    """Area of the overlap rectangle.

    Unclamped, a pair separated on one axis gives a negative value and a
    pair separated on both axes gives a positive product of two negative
    extents. `clamp=True` floors each extent at zero.
    """
    x = max(a.x0, b.x0)
    y = max(a.y0, b.y0)
    w = min(a.x1, b.x1) - x
    h = min(a.y1, b.y1) - y
    if clamp:
        w = max(0.0, w)
        h = max(0.0, h)
    return w * h


def iou(a: Box, b: Box, clamp: bool = False) -> float:
    """intersection / enclosing area. 0/0 -> nan, x/0 -> +-inf (no exception)."""
    with np.errstate(divide="ignore", invalid="ignore"):
        ratio = np.float64(intersection_area(a, b, clamp=clamp)) / np.float64(union_area(a, b))
    return float(ratio)


# ----------------------------
# Non-Maximum Suppression
# ----------------------------

def nms_sorted_indices(
    boxes: SortedBoxes,
    threshold: float = 0.45,
    clamp_intersection: bool = True,
) -> List[int]:
    """
    Greedy NMS over boxes ALREADY sorted by descending confidence.

    Each box is compared only with boxes kept so far, in input order; it is
    dropped on the first IoU strictly above `threshold`. Returned indices
    point into `boxes` and keep input order. Index 0 always survives.

    clamp_intersection=False uses the raw intersection formula, under which
    boxes disjoint on both axes can still suppress each other.
    """
    kept: List[int] = []
    for i, candidate in enumerate(boxes):
        accept = True
        for j in kept:
            # nan > threshold is False: degenerate pairs never suppress
            if iou(candidate, boxes[j], clamp=clamp_intersection) > threshold:
                accept = False
                break
        if accept:
            kept.append(i)
    return kept
