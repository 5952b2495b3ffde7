"""bbox2d.logging_utils — stdout + CSV helpers

Targets:
- SSH-friendly stdout logging (rate-limited)
- Optional CSV logging (timestamp, class, score, bbox)
"""

from __future__ import annotations

import csv
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from .geometry import Box

CSV_HEADER = ["ts_unix", "class_index", "label", "confidence", "x0", "y0", "width", "height"]


# ----------------------------
# Time / rate helpers
# ----------------------------

def now() -> float:
    """Monotonic timestamp in seconds (use for measuring intervals)."""
    return time.monotonic()


def hz_to_dt(hz: float, min_hz: float = 0.1) -> float:
    """Convert a frequency (Hz) into a minimum interval (seconds)."""
    try:
        hz_f = float(hz)
    except (TypeError, ValueError):
        hz_f = float(min_hz)
    hz_f = max(float(min_hz), hz_f)
    return 1.0 / hz_f


def rate_limited_print(msg: str, hz: float, state: dict) -> bool:
    """Print at most `hz` times per second. Returns True when printed.

    `state` is a mutable dict that stores timing between calls, e.g.:
        state = {}
        rate_limited_print("hello", 5.0, state)
    """
    t = now()
    min_dt = hz_to_dt(hz)
    last = float(state.get("last_t", -1e9))
    if (t - last) >= min_dt:
        print(msg, flush=True)
        state["last_t"] = t
        return True
    return False


# ----------------------------
# CSV logger
# ----------------------------

@dataclass
class CsvLogger:
    """Append-only CSV logger for kept boxes.

    Columns:
      ts_unix, class_index, label, confidence, x0, y0, width, height

    Usage:
        logger = CsvLogger(Path("logs/detections.csv"), enabled=True)
        logger.open()
        logger.log(box, label="person")
        logger.close()
    """
    path: Path
    enabled: bool = False
    _fh: Optional[Any] = None
    _writer: Optional[Any] = None

    def open(self) -> None:
        if not self.enabled:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._fh = open(self.path, "a", newline="", encoding="utf-8")
        self._writer = csv.writer(self._fh)
        if self._fh.tell() == 0:
            self._writer.writerow(CSV_HEADER)
            self._fh.flush()

    def log(self, box: Box, label: str = "") -> None:
        if not self._writer or not self._fh:
            return
        self._writer.writerow([
            f"{time.time():.6f}",
            int(box.class_index),
            label,
            f"{float(box.confidence):.4f}",
            f"{box.x0:.3f}",
            f"{box.y0:.3f}",
            f"{box.width:.3f}",
            f"{box.height:.3f}",
        ])
        self._fh.flush()

    def close(self) -> None:
        if self._fh:
            try:
                self._fh.close()
            finally:
                self._fh = None
                self._writer = None

    def __enter__(self) -> "CsvLogger":
        self.open()
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()
