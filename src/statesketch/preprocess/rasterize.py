"""
Normalizing rasterizer for State Sketch.

Renders an image onto a fixed-size white square, centered, uniformly scaled
to fit inside a margin, and optionally rotated about the canvas center. Both
the player's drawing and the reference outline go through here so they are
compared in the same frame.
"""

import cv2
import numpy as np

from statesketch.errors import InvalidImageError
from statesketch.tracer import get_tracer

WHITE = (255, 255, 255)


def fit_scale(width, height, canvas_size, margin_frac=0.05):
    """
    Uniform scale that fits a width x height image inside the canvas margin.

    Raises InvalidImageError for degenerate source dimensions.
    """
    if width < 1 or height < 1:
        raise InvalidImageError(f"Cannot rasterize a {width}x{height} image")

    inner = canvas_size * (1.0 - 2.0 * margin_frac)
    if inner <= 0:
        raise InvalidImageError(f"Margin {margin_frac} leaves no drawable area")

    return min(inner / width, inner / height)


def placement_matrix(width, height, canvas_size, rotation_deg=0.0, margin_frac=0.05):
    """
    2x3 affine matrix mapping source pixels to canvas pixels.

    Scales about the source center, moves it to the canvas center, then
    rotates by rotation_deg (counter-clockwise on screen for positive angles).
    """
    scale = fit_scale(width, height, canvas_size, margin_frac)

    canvas_center = np.array([(canvas_size - 1) / 2.0, (canvas_size - 1) / 2.0])
    source_center = np.array([(width - 1) / 2.0, (height - 1) / 2.0])

    matrix = cv2.getRotationMatrix2D(tuple(canvas_center), float(rotation_deg), scale)
    # getRotationMatrix2D pivots about canvas_center; shift the source there first
    matrix[:, 2] += matrix[:, :2] @ (canvas_center - source_center)
    return matrix


def rasterize(image, canvas_size, rotation_deg=0.0, margin_frac=0.05):
    """
    Render a RasterImage into a canvas_size x canvas_size RGB canvas.

    The background is white; uncovered corners after rotation stay white.
    Deterministic for identical inputs.
    """
    tracer = get_tracer()

    matrix = placement_matrix(image.width, image.height, canvas_size, rotation_deg, margin_frac)

    canvas = cv2.warpAffine(
        np.ascontiguousarray(image.pixels),
        matrix,
        (canvas_size, canvas_size),
        flags=cv2.INTER_LINEAR,
        borderMode=cv2.BORDER_CONSTANT,
        borderValue=WHITE,
    )

    tracer.event(
        f"Rasterized {image.width}x{image.height} -> {canvas_size}px",
        level="DEBUG",
        angle=rotation_deg,
    )

    return canvas
