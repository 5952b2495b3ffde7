"""bbox2d.labels — class names, label text and label colors

No drawing happens here; these are the values a renderer needs per box.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from .geometry import Box

Color = Tuple[float, ...]  # RGB or RGBA, 0..1

BLACK: Color = (0.0, 0.0, 0.0, 1.0)
WHITE: Color = (1.0, 1.0, 1.0, 1.0)

# COCO 80-class labels (common for SSD / YOLO pipelines)
COCO_LABELS: List[str] = [
    "person","bicycle","car","motorcycle","airplane","bus","train","truck","boat","traffic light",
    "fire hydrant","stop sign","parking meter","bench","bird","cat","dog","horse","sheep","cow",
    "elephant","bear","zebra","giraffe","backpack","umbrella","handbag","tie","suitcase","frisbee",
    "skis","snowboard","sports ball","kite","baseball bat","baseball glove","skateboard","surfboard","tennis racket","bottle",
    "wine glass","cup","fork","knife","spoon","bowl","banana","apple","sandwich","orange",
    "broccoli","carrot","hot dog","pizza","donut","cake","chair","couch","potted plant","bed",
    "dining table","toilet","tv","laptop","mouse","remote","keyboard","cell phone","microwave","oven",
    "toaster","sink","refrigerator","book","clock","vase","scissors","teddy bear","hair drier","toothbrush",
]


@dataclass(frozen=True)
class BoxInfo:
    box: Box
    label: str = ""
    color: Color = (0.0, 0.0, 0.0, 0.0)


def load_labels(path: Optional[Path] = None) -> List[str]:
    """One label per line; blank lines skipped. No path -> COCO labels."""
    if path is None:
        return list(COCO_LABELS)
    text = Path(path).read_text(encoding="utf-8")
    return [line.strip() for line in text.splitlines() if line.strip()]


def label_for(class_index: int, labels: Sequence[str]) -> str:
    return labels[class_index] if 0 <= class_index < len(labels) else str(class_index)


def format_label(label: str, confidence: float) -> str:
    """'person: 87.5%': percentage with at most two decimals."""
    pct = f"{confidence * 100:.2f}".rstrip("0").rstrip(".")
    return f"{label}: {pct}%"


def grayscale(color: Color) -> float:
    r, g, b = color[0], color[1], color[2]
    return 0.299 * r + 0.587 * g + 0.114 * b


def label_text_color(color: Color) -> Color:
    """Black text on light box colors, white on dark ones."""
    return BLACK if grayscale(color) > 0.5 else WHITE


def build_box_infos(
    boxes: Iterable[Box],
    labels: Sequence[str],
    colors: Optional[Sequence[Color]] = None,
) -> List[BoxInfo]:
    infos: List[BoxInfo] = []
    for b in boxes:
        color: Color = (0.0, 0.0, 0.0, 0.0)
        if colors:
            color = colors[b.class_index % len(colors)]
        infos.append(BoxInfo(box=b, label=label_for(b.class_index, labels), color=color))
    return infos
