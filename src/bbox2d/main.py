#!/usr/bin/env python3
"""bbox2d.main — replay detections through threshold -> NMS -> scaling

Input is a JSON file holding one frame or a list of frames, each frame a
dict of detector outputs, e.g.:

    {"boxes": [[100, 100, 50, 50], [104, 98, 50, 52]],
     "scores": [0.91, 0.62],
     "classes": [0, 0]}

For every frame the kept boxes are printed in display coordinates and,
when enabled, appended to a CSV log.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, List, Optional

from .config import AppConfig, load_config
from .detections import build_boxes, normalize_outputs
from .geometry import Box, nms_sorted_indices, sort_by_confidence
from .labels import format_label, label_for, load_labels
from .logging_utils import CsvLogger, rate_limited_print
from .scaling import scale_box


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="bbox2d", description="Filter and rescale 2D detection boxes")
    p.add_argument("--input", required=True, help="JSON file with one frame or a list of frames")
    p.add_argument("--config", default="configs/runtime.json",
                   help="Optional runtime config JSON (defaults when missing).")
    p.add_argument("--csv", default="", help="optional CSV log path (overrides config)")
    p.add_argument("--mirror", action="store_true", help="mirror boxes horizontally")
    p.add_argument("--debug", action="store_true", help="Verbose debug output.")
    return p.parse_args(argv)


def load_frames(path: Path) -> List[Any]:
    data = json.loads(path.read_text(encoding="utf-8"))
    return data if isinstance(data, list) else [data]


def process_frame(frame: Any, cfg: AppConfig, mirror: bool) -> Optional[List[Box]]:
    """Boxes kept for one frame, in display coordinates. None if unusable."""
    norm = normalize_outputs(frame)
    if norm is None:
        return None
    boxes, scores, classes = norm

    candidates = sort_by_confidence(
        build_boxes(boxes, scores, classes, cfg.score_threshold, box_format=cfg.box_format)
    )
    keep = nms_sorted_indices(candidates, cfg.nms_threshold, clamp_intersection=cfg.clamp_intersection)

    return [
        scale_box(candidates[i], cfg.input_dims, cfg.display_dims, cfg.offset_xy, mirror, cfg.output_dims)
        for i in keep
    ]


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    cfg: AppConfig = load_config(Path(args.config))

    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Input not found: {input_path}", file=sys.stderr)
        return 2

    try:
        frames = load_frames(input_path)
    except ValueError as e:
        print(f"Invalid input JSON: {input_path} ({e})", file=sys.stderr)
        return 2

    labels = load_labels(Path(cfg.labels_path) if cfg.labels_path else None)
    mirror = args.mirror or cfg.mirror

    if args.debug:
        print(f"[debug] config: {args.config}")
        print(f"[debug] input={cfg.input_size} display={cfg.display_size} "
              f"output={cfg.output_size or cfg.display_size} mirror={mirror}")
        print(f"[debug] score>={cfg.score_threshold} nms>{cfg.nms_threshold} "
              f"clamp={cfg.clamp_intersection}")

    csv_path = args.csv or cfg.csv_path
    logger = CsvLogger(Path(csv_path), enabled=bool(args.csv) or cfg.enable_csv)
    logger.open()

    status: dict = {}
    try:
        for n, frame in enumerate(frames):
            kept = process_frame(frame, cfg, mirror)
            if kept is None:
                print(f"[frame {n}] unusable outputs, skipped", file=sys.stderr)
                continue

            for box in kept:
                label = label_for(box.class_index, labels)
                print(f"[frame {n}] {format_label(label, box.confidence)} "
                      f"box=(x0={box.x0:.1f}, y0={box.y0:.1f}, w={box.width:.1f}, h={box.height:.1f})")
                logger.log(box, label=label)

            if args.debug:
                rate_limited_print(f"[debug] frame {n}: kept {len(kept)}", cfg.print_hz, status)
    finally:
        logger.close()

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
