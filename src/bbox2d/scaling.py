"""bbox2d.scaling — detector input space -> screen space -> display space

Pipeline (each step is its own function so the letterbox assumptions can be
checked in isolation):
  1. min_img_scale:     match the smaller side of input and screen
  2. flip_vertical:     top-down detector y -> bottom-up screen y
  3. mirror_horizontal: optional left/right flip across the screen
  4. display_scale:     screen -> output resolution (matched on height)
  5. center_offset:     center horizontally when aspect ratios differ

Zero dimensions raise ZeroDivisionError; positive sizes are the caller's job.
"""

from __future__ import annotations

from dataclasses import replace
from typing import NamedTuple, Optional

from .geometry import Box


class Dims(NamedTuple):
    width: float
    height: float


class Offset(NamedTuple):
    x: float = 0.0
    y: float = 0.0


def min_img_scale(input_dims: Dims, display_dims: Dims) -> float:
    return min(display_dims) / min(input_dims)


def flip_vertical(y0: float, input_height: float, offset_y: float = 0.0) -> float:
    """Input-space y measured from the bottom edge (before scaling)."""
    return input_height - (y0 - offset_y)


def mirror_horizontal(x0: float, width: float, display_width: float) -> float:
    return display_width - x0 - width


def display_scale(display_dims: Dims, output_dims: Dims) -> float:
    return output_dims.height / display_dims.height


def center_offset(display_dims: Dims, output_dims: Dims, scale: float) -> float:
    return (output_dims.width - display_dims.width * scale) / 2


def scale_box(
    box: Box,
    input_dims: Dims,
    display_dims: Dims,
    offset: Offset,
    mirror: bool,
    output_dims: Optional[Dims] = None,
) -> Box:
    """
    Map one box from detector input pixels to the output resolution.

    input_dims:   size of the image fed to the detector
    display_dims: size of the in-scene screen the boxes are laid over
    offset:       input-space shift applied before scaling
    mirror:       flip horizontally across the screen
    output_dims:  final resolution; defaults to display_dims (no rescale)

    Returns a new Box; class_index and confidence are carried over.
    """
    input_dims = Dims(*input_dims)
    display_dims = Dims(*display_dims)
    offset = Offset(*offset)
    output_dims = display_dims if output_dims is None else Dims(*output_dims)

    s = min_img_scale(input_dims, display_dims)
    x0 = (box.x0 + offset.x) * s
    y0 = flip_vertical(box.y0, input_dims.height, offset.y) * s
    width = box.width * s
    height = box.height * s

    if mirror:
        x0 = mirror_horizontal(x0, width, display_dims.width)

    d = display_scale(display_dims, output_dims)
    x0 = x0 * d + center_offset(display_dims, output_dims, d)

    return replace(box, x0=x0, y0=y0 * d, width=width * d, height=height * d)
