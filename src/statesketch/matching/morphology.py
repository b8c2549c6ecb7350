"""
Binary morphology for State Sketch.

Erosion and edge extraction turn filled ink into roughly one-pixel-wide
boundaries; the chamfer distance transform gives every pixel its approximate
distance to the nearest boundary pixel, which is what tolerance matching
reads from.

Note on thin strokes: a full 3x3 erosion removes any stroke narrower than
three pixels entirely, so edge_of() returns such a stroke unchanged. That is
expected, and it is why reference outlines must be drawn with strokes of
three pixels or more if their interior is meant to be ignored.
"""

import cv2
import numpy as np

from statesketch.tracer import get_tracer, trace

SQRT2 = float(np.sqrt(2.0))

_KERNEL_3X3 = np.ones((3, 3), dtype=np.uint8)


def erode(mask):
    """
    Single-pass 3x3 erosion.

    A pixel survives only if it and all eight neighbours are set. Pixels on
    the image border have no full neighbourhood and are always cleared.
    """
    return cv2.erode(
        mask,
        _KERNEL_3X3,
        iterations=1,
        borderType=cv2.BORDER_CONSTANT,
        borderValue=0,
    )


def edge_of(mask):
    """Boundary pixels of a mask: mask AND NOT erode(mask). Always a subset of mask."""
    eroded = erode(mask)
    return ((mask > 0) & (eroded == 0)).astype(np.uint8)


@trace(label="distance_transform")
def distance_transform(edge_mask):
    """
    Two-pass 8-connected chamfer distance to the nearest set pixel.

    Orthogonal steps cost 1 and diagonal steps cost sqrt(2). The forward pass
    runs top-to-bottom, left-to-right reading the west, north, north-west and
    north-east neighbours; the backward pass runs bottom-to-top,
    right-to-left reading east, south, south-east and south-west. Set pixels
    are 0; pixels with no set pixel anywhere stay at +inf.

    Each row is handled with numpy: the three neighbours from the previous
    row are plain element-wise minima, and the along-row chain
    d[x] = min(v[x], d[x-1] + 1) is the running minimum of v[x'] - x'
    shifted back by x, which is exactly what the sequential scan computes.
    """
    tracer = get_tracer()

    height, width = edge_mask.shape
    dist = np.where(edge_mask > 0, 0.0, np.inf)
    cols = np.arange(width, dtype=np.float64)

    # Forward pass
    for y in range(height):
        row = dist[y]
        if y > 0:
            above = dist[y - 1]
            row = np.minimum(row, above + 1.0)
            row[1:] = np.minimum(row[1:], above[:-1] + SQRT2)
            row[:-1] = np.minimum(row[:-1], above[1:] + SQRT2)
        dist[y] = np.minimum.accumulate(row - cols) + cols

    # Backward pass
    for y in range(height - 1, -1, -1):
        row = dist[y]
        if y < height - 1:
            below = dist[y + 1]
            row = np.minimum(row, below + 1.0)
            row[:-1] = np.minimum(row[:-1], below[1:] + SQRT2)
            row[1:] = np.minimum(row[1:], below[:-1] + SQRT2)
        reversed_run = np.minimum.accumulate((row + cols)[::-1])[::-1]
        dist[y] = reversed_run - cols

    tracer.event(f"Distance field: seeds={int(np.count_nonzero(edge_mask))}", level="DEBUG")

    return dist.astype(np.float32)
