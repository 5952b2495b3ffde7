"""bbox2d.config — runtime configuration

Rules:
- Keep thresholds, sizes and logging flags here.
- Sizes are strings ("640x640") in JSON, parsed with parse_size().

The loader is forgiving:
- missing config file -> defaults
- invalid JSON -> defaults
- a field that cannot be coerced -> that field's default
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from .detections import BOX_FORMATS
from .scaling import Dims, Offset


@dataclass(frozen=True)
class AppConfig:
    """
    Notes:
    - `score_threshold` is applied once when building boxes.
    - `nms_threshold` is the IoU above which a later box is suppressed.
    - `clamp_intersection` False reproduces the raw (unclamped) overlap formula.
    - `input_size` is the detector input, `display_size` the in-scene screen,
      `output_size` the final resolution (empty = same as display).
    """
    nms_threshold: float = 0.45
    score_threshold: float = 0.5
    clamp_intersection: bool = True
    box_format: str = "xywh"

    input_size: str = "640x640"
    display_size: str = "1280x720"
    output_size: str = ""
    offset: str = "0,0"
    mirror: bool = False

    labels_path: str = ""

    print_hz: float = 5.0
    enable_csv: bool = False
    csv_path: str = "logs/detections.csv"

    @property
    def input_dims(self) -> Dims:
        return parse_size(self.input_size)

    @property
    def display_dims(self) -> Dims:
        return parse_size(self.display_size)

    @property
    def output_dims(self) -> Dims:
        return parse_size(self.output_size) if self.output_size else self.display_dims

    @property
    def offset_xy(self) -> Offset:
        return parse_offset(self.offset)


def parse_size(text: str) -> Dims:
    """'1280x720' -> Dims(1280.0, 720.0)."""
    try:
        w, h = str(text).lower().split("x")
        return Dims(float(w), float(h))
    except ValueError:
        raise ValueError(f"invalid size {text!r} (expected WxH)") from None


def parse_offset(text: str) -> Offset:
    """'12,-4' -> Offset(12.0, -4.0)."""
    try:
        x, y = str(text).split(",")
        return Offset(float(x), float(y))
    except ValueError:
        raise ValueError(f"invalid offset {text!r} (expected x,y)") from None


def _coerce_float(v: Any, default: float) -> float:
    try:
        return float(v)
    except (TypeError, ValueError):
        return default


def _coerce_bool(v: Any, default: bool) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, str):
        s = v.strip().lower()
        if s in ("1", "true", "yes", "on"):
            return True
        if s in ("0", "false", "no", "off"):
            return False
        return default
    if isinstance(v, (int, float)):
        return bool(v)
    return default


def _coerce_size(v: Any, default: str) -> str:
    """Keep `v` only if it parses as WxH with both sides positive."""
    try:
        dims = parse_size(v)
    except ValueError:
        return default
    return str(v) if all(math.isfinite(d) and d > 0 for d in dims) else default


def _coerce_offset(v: Any, default: str) -> str:
    try:
        parse_offset(v)
    except ValueError:
        return default
    return str(v)


def load_config(path: Path) -> AppConfig:
    """
    Load config JSON. Unknown keys are ignored.
    Missing file or invalid JSON -> defaults.
    """
    cfg = AppConfig()
    if not path.exists():
        return cfg

    try:
        data: Dict[str, Any] = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return cfg
    if not isinstance(data, dict):
        return cfg

    box_format = str(data.get("box_format", cfg.box_format))
    if box_format not in BOX_FORMATS:
        box_format = cfg.box_format

    output_size = str(data.get("output_size", cfg.output_size))
    if output_size:
        output_size = _coerce_size(output_size, cfg.output_size)

    return AppConfig(
        nms_threshold=_coerce_float(data.get("nms_threshold", cfg.nms_threshold), cfg.nms_threshold),
        score_threshold=_coerce_float(data.get("score_threshold", cfg.score_threshold), cfg.score_threshold),
        clamp_intersection=_coerce_bool(data.get("clamp_intersection", cfg.clamp_intersection), cfg.clamp_intersection),
        box_format=box_format,
        input_size=_coerce_size(data.get("input_size", cfg.input_size), cfg.input_size),
        display_size=_coerce_size(data.get("display_size", cfg.display_size), cfg.display_size),
        output_size=output_size,
        offset=_coerce_offset(data.get("offset", cfg.offset), cfg.offset),
        mirror=_coerce_bool(data.get("mirror", cfg.mirror), cfg.mirror),
        labels_path=str(data.get("labels_path", cfg.labels_path)),
        print_hz=_coerce_float(data.get("print_hz", cfg.print_hz), cfg.print_hz),
        enable_csv=_coerce_bool(data.get("enable_csv", cfg.enable_csv), cfg.enable_csv),
        csv_path=str(data.get("csv_path", cfg.csv_path)),
    )
