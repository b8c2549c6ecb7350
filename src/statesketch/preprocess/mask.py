"""
Ink masks for State Sketch.

A pixel is ink when the plain average of its R, G and B samples is below a
luminance threshold. The reference outline uses a stricter threshold than the
player's drawing so anti-aliased fringes of the outline stroke are not counted.
"""

import numpy as np


def luminance(canvas):
    """Per-pixel (R + G + B) / 3 as float32. Alpha, if present, is ignored."""
    rgb = canvas[..., :3].astype(np.float32)
    return rgb.sum(axis=2) / 3.0


def build_mask(canvas, luminance_threshold):
    """Binary 0/1 uint8 mask of pixels darker than luminance_threshold."""
    return (luminance(canvas) < luminance_threshold).astype(np.uint8)


def count(mask):
    """Number of set pixels in a mask."""
    return int(np.count_nonzero(mask))


def ink_ratio(mask):
    """Fraction of the canvas covered by ink."""
    return count(mask) / mask.size if mask.size else 0.0
