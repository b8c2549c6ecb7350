"""
Edge and area matching for State Sketch.

Precision asks how much of what the player drew lies on the true border;
recall asks how much of the true border the player covered. Both are read
from distance fields within a pixel tolerance. IoU compares the filled masks.
"""

import numpy as np

from statesketch.matching.morphology import distance_transform
from statesketch.models import MatchMetrics
from statesketch.tracer import get_tracer, trace


def fraction_within(edge_mask, distance_field, tolerance_px):
    """Fraction of set pixels in edge_mask whose distance is <= tolerance_px; 0 if empty."""
    selected = edge_mask > 0
    total = int(np.count_nonzero(selected))
    if total == 0:
        return 0.0
    matched = int(np.count_nonzero(distance_field[selected] <= tolerance_px))
    return matched / total


@trace(label="match_edges")
def match_edges(user_edge, ref_edge, tolerance_px, canvas_size=None, ref_distance=None):
    """
    Precision and recall between two edge masks.

    ref_distance may be supplied when the reference field has already been
    computed; it only depends on the reference, not on the rotation trial.

    Returns (precision, recall).
    """
    tracer = get_tracer()

    if user_edge.shape != ref_edge.shape:
        raise ValueError(f"Edge masks differ in shape: {user_edge.shape} vs {ref_edge.shape}")
    if canvas_size is not None and user_edge.shape != (canvas_size, canvas_size):
        raise ValueError(f"Edge masks are {user_edge.shape}, expected {canvas_size}x{canvas_size}")

    if ref_distance is None:
        ref_distance = distance_transform(ref_edge)
    user_distance = distance_transform(user_edge)

    precision = fraction_within(user_edge, ref_distance, tolerance_px)
    recall = fraction_within(ref_edge, user_distance, tolerance_px)

    tracer.event(f"Edge match: precision={precision:.3f} recall={recall:.3f} tol={tolerance_px}")

    return precision, recall


def iou(user_fill, ref_fill):
    """Intersection-over-union of two fill masks; 0 when both are empty."""
    user = user_fill > 0
    ref = ref_fill > 0
    intersection = int(np.count_nonzero(user & ref))
    union = int(np.count_nonzero(user | ref))
    if union == 0:
        return 0.0
    return intersection / union


def match(user_edge, ref_edge, user_fill, ref_fill, tolerance_px, ref_distance=None):
    """Full geometry comparison for one rotation trial."""
    precision, recall = match_edges(user_edge, ref_edge, tolerance_px, ref_distance=ref_distance)
    return MatchMetrics(precision=precision, recall=recall, iou=iou(user_fill, ref_fill))
