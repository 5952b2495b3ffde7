"""bbox2d.detections — raw detector outputs -> Box records

Purpose:
- Isolate output-shape handling here so model/runtime differences don't
  cascade into the geometry code.
- Normalize outputs to a common form: (boxes, scores, classes).
- Apply the score threshold once, when building boxes.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from .geometry import Box, nms_sorted_indices, sort_by_confidence

BOX_FORMATS = ("xywh", "xyxy")

_BOX_KEYS = ("boxes", "bboxes", "box")
_SCORE_KEYS = ("scores", "score")
_CLASS_KEYS = ("classes", "class_ids", "labels")
_COUNT_KEYS = ("count", "num")


def _first_key(data: Mapping[str, Any], keys: Sequence[str]) -> Any:
    # `a or b` is not usable here: numpy arrays have no truth value
    for k in keys:
        if data.get(k) is not None:
            return data[k]
    return None


def _to_scalar(x: Any) -> float:
    """Coerce numpy scalars, one-element arrays or nested lists to float."""
    return float(np.asarray(x, dtype=np.float64).reshape(-1)[0])


def normalize_outputs(outputs: Any) -> Optional[Tuple[np.ndarray, np.ndarray, np.ndarray]]:
    """
    Normalize detector outputs to:
      boxes:   (N,4)
      scores:  (N,)
      classes: (N,)

    Accepts list/tuple [boxes, scores, classes, (count)] or a dict with
    common key names. Leading batch dimensions of size 1 are peeled, e.g.
    (1,100,4) -> (100,4). Returns None when the outputs are unusable.
    """
    if outputs is None:
        return None

    count = None
    if isinstance(outputs, Mapping):
        boxes = _first_key(outputs, _BOX_KEYS)
        scores = _first_key(outputs, _SCORE_KEYS)
        classes = _first_key(outputs, _CLASS_KEYS)
        count = _first_key(outputs, _COUNT_KEYS)
        if boxes is None or scores is None or classes is None:
            return None
    elif isinstance(outputs, (list, tuple)) and len(outputs) >= 3:
        boxes, scores, classes = outputs[0], outputs[1], outputs[2]
        if len(outputs) >= 4:
            count = outputs[3]
    else:
        return None

    try:
        boxes = np.asarray(boxes, dtype=np.float64)
        scores = np.asarray(scores, dtype=np.float64)
        classes = np.asarray(classes, dtype=np.float64)
        count_n = None if count is None else max(0, int(_to_scalar(count)))
    except (TypeError, ValueError, IndexError):
        # ragged or non-numeric outputs
        return None

    while boxes.ndim > 2 and boxes.shape[0] == 1:
        boxes = boxes[0]
    while scores.ndim > 1 and scores.shape[0] == 1:
        scores = scores[0]
    while classes.ndim > 1 and classes.shape[0] == 1:
        classes = classes[0]

    # Single detection: (4,) -> (1,4)
    if boxes.ndim == 1 and boxes.size == 4:
        boxes = boxes.reshape(1, 4)
    if boxes.size == 0:
        boxes = boxes.reshape(0, 4)

    boxes = np.atleast_2d(boxes)
    scores = np.atleast_1d(scores)
    classes = np.atleast_1d(classes)

    if boxes.ndim != 2 or boxes.shape[-1] != 4:
        return None

    n = min(len(boxes), len(scores), len(classes))
    if count_n is not None:
        n = min(n, count_n)
    return boxes[:n], scores[:n], classes[:n]


def build_boxes(
    boxes: Any,
    scores: Any,
    classes: Any,
    threshold: float,
    box_format: str = "xywh",
) -> List[Box]:
    """
    Build Box records for rows scoring at least `threshold`.

    box_format: "xywh" (x0, y0, width, height) or "xyxy" (corners).
    """
    if box_format not in BOX_FORMATS:
        raise ValueError(f"unknown box_format {box_format!r} (expected one of {BOX_FORMATS})")

    out: List[Box] = []
    for b, s, c in zip(boxes, scores, classes):
        conf = float(s)
        if conf < float(threshold):
            continue
        x0, y0, a, d = (float(v) for v in b)
        if box_format == "xyxy":
            a, d = a - x0, d - y0
        out.append(Box(x0, y0, a, d, class_index=int(float(c)), confidence=conf))
    return out


def filter_by_class(boxes: Iterable[Box], class_index: int) -> List[Box]:
    return [b for b in boxes if b.class_index == int(class_index)]


def suppress(boxes: Iterable[Box], threshold: float = 0.45, clamp_intersection: bool = True) -> List[Box]:
    """Sort by confidence, run NMS, return the survivors (highest first)."""
    ordered = sort_by_confidence(boxes)
    keep = nms_sorted_indices(ordered, threshold, clamp_intersection=clamp_intersection)
    return [ordered[i] for i in keep]
