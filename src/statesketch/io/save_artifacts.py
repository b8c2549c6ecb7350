"""
Debug artifact writing for State Sketch.

Saves the masks and metrics behind a score so a surprising result can be
inspected visually.
"""

import json
import os

import cv2
import numpy as np

from statesketch.tracer import get_tracer


def ensure_dir(path):
    """Create directory if it does not exist."""
    os.makedirs(path, exist_ok=True)


def get_debug_dir(out_dir, run_id, stage_name):
    """
    Get the debug directory path for a stage.

    Creates the directory if it does not exist.
    """
    debug_dir = os.path.join(out_dir, "debug", run_id, stage_name)
    ensure_dir(debug_dir)
    return debug_dir


def mask_to_image(mask):
    """Render a 0/1 mask as black ink on white, the way the drawing looked."""
    return np.where(mask > 0, 0, 255).astype(np.uint8)


def save_image(img, path, max_edge=None):
    """
    Save an image to disk.

    Optionally downscales to max_edge while preserving aspect ratio.
    RGB input is converted to BGR for OpenCV; 0/1 masks are rendered as ink.
    """
    tracer = get_tracer()

    if img.ndim == 2 and img.dtype == np.uint8 and img.size and img.max() <= 1:
        img = mask_to_image(img)

    if max_edge and max(img.shape[:2]) > max_edge:
        scale = max_edge / max(img.shape[:2])
        new_size = (int(img.shape[1] * scale), int(img.shape[0] * scale))
        img = cv2.resize(img, new_size, interpolation=cv2.INTER_AREA)

    if img.ndim == 3 and img.shape[2] == 3:
        img = cv2.cvtColor(img, cv2.COLOR_RGB2BGR)

    ensure_dir(os.path.dirname(path))
    cv2.imwrite(path, img)
    tracer.event(f"Saved image: {path}", level="DEBUG")


def save_json(data, path, indent=2):
    """
    Save a dictionary or Pydantic model to JSON.
    """
    tracer = get_tracer()

    ensure_dir(os.path.dirname(path))

    if hasattr(data, "model_dump"):
        data = data.model_dump()

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=indent, default=str)

    tracer.event(f"Saved JSON: {path}", level="DEBUG")


def create_match_overlay(user_edge, ref_edge):
    """
    Color overlay of the two edge sets on white.

    Reference edges are blue, user edges red, and pixels in both are purple.
    """
    overlay = np.full(user_edge.shape + (3,), 255, dtype=np.uint8)
    ref = ref_edge > 0
    user = user_edge > 0
    overlay[ref] = (0, 90, 255)
    overlay[user] = (230, 30, 30)
    overlay[ref & user] = (150, 0, 160)
    return overlay


class DebugArtifactWriter:
    """
    Helper class to manage debug artifact writing for a single judged drawing.

    Handles creation of debug directories and provides convenience methods
    for saving various artifact types.
    """

    def __init__(self, out_dir, run_id, enabled=True, max_edge=1024):
        self.out_dir = out_dir
        self.run_id = run_id
        self.enabled = enabled
        self.max_edge = max_edge

    def get_stage_dir(self, stage_name):
        """Get the debug directory for a stage."""
        return get_debug_dir(self.out_dir, self.run_id, stage_name)

    def save_image(self, img, stage_name, filename):
        """Save an image or mask artifact."""
        if not self.enabled:
            return
        path = os.path.join(self.get_stage_dir(stage_name), filename)
        save_image(img, path, max_edge=self.max_edge)

    def save_json(self, data, stage_name, filename):
        """Save a JSON artifact."""
        if not self.enabled:
            return
        path = os.path.join(self.get_stage_dir(stage_name), filename)
        save_json(data, path)
