"""Pytest fixtures for State Sketch tests."""

import os
import tempfile

import cv2
import numpy as np
import pytest


def blank_image(width=400, height=400):
    """White RGB canvas."""
    return np.full((height, width, 3), 255, dtype=np.uint8)


def filled_square(side=240, size=400, angle=0.0):
    """Black filled square centered on a white canvas, optionally rotated (degrees)."""
    img = blank_image(size, size)
    center = ((size - 1) / 2.0, (size - 1) / 2.0)
    box = cv2.boxPoints((center, (side, side), angle))
    cv2.fillPoly(img, [np.round(box).astype(np.int32)], (0, 0, 0))
    return img


def outlined_square(side=240, size=400, thickness=3):
    """Square drawn as a stroke only, like a player tracing the border."""
    img = blank_image(size, size)
    lo = (size - side) // 2
    hi = lo + side - 1
    cv2.rectangle(img, (lo, lo), (hi, hi), (0, 0, 0), thickness)
    return img


def to_png(rgb_img):
    """Encode an RGB array as PNG bytes, the way a canvas export arrives."""
    ok, encoded = cv2.imencode(".png", cv2.cvtColor(rgb_img, cv2.COLOR_RGB2BGR))
    assert ok
    return encoded.tobytes()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def default_config():
    """Create default judging configuration."""
    from statesketch.config import JudgeConfig
    return JudgeConfig()


@pytest.fixture
def square_image():
    """Filled 240px square on a 400px white canvas."""
    return filled_square()


@pytest.fixture
def square_png(square_image):
    return to_png(square_image)


@pytest.fixture
def blank_png():
    return to_png(blank_image())


@pytest.fixture
def outline_dir(temp_dir, square_image):
    """Outline assets: a square for Texas, Colorado and a made-up Testland."""
    path = os.path.join(temp_dir, "outlines")
    os.makedirs(path)
    for slug in ("texas", "colorado", "testland"):
        cv2.imwrite(os.path.join(path, f"{slug}.png"), cv2.cvtColor(square_image, cv2.COLOR_RGB2BGR))
    return path


@pytest.fixture
def library(outline_dir):
    from statesketch.io.outlines import OutlineLibrary
    return OutlineLibrary(outline_dir)


@pytest.fixture
def make_square():
    """Factory for filled squares: make_square(side=240, size=400, angle=0.0)."""
    return filled_square


@pytest.fixture
def make_outline():
    """Factory for stroked squares: make_outline(side=240, size=400, thickness=3)."""
    return outlined_square


@pytest.fixture
def png():
    """Encoder for RGB arrays: png(rgb) -> bytes."""
    return to_png
