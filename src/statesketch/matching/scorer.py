"""
Scoring for State Sketch.

Area overlap dominates: IoU is the robust "looks like the right state" signal,
while boundary recall alone would reward scribbling near edges without
filling the interior. Coverage only penalizes genuinely sparse sketches.
"""

import math

from statesketch.models import Candidate, ScoreResult
from statesketch.tracer import get_tracer

INSUFFICIENT_INK_CRITIQUE = (
    "We couldn't detect enough drawing. Try thicker, darker lines and trace along the edge."
)
INSUFFICIENT_EDGE_CRITIQUE = (
    "We couldn't detect enough drawing near the border. Try thicker, darker lines and trace along the edge."
)


def round_half_up(value):
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def clamp(value, low=0.0, high=1.0):
    return max(low, min(high, value))


def fill_ratio(user_fill_count, ref_fill_count):
    """User ink area relative to the reference's; unbounded above."""
    return user_fill_count / max(1, ref_fill_count)


def base_overlap(metrics, params):
    """IoU-weighted overlap with a bonus once more than half the area agrees."""
    overlap = params.iou_weight * metrics.iou + params.recall_weight * metrics.recall
    if metrics.iou > params.iou_bonus_threshold:
        overlap = min(1.0, overlap + params.iou_bonus)
    return overlap


def length_penalty(mask_ratio, params):
    """Coverage ramp, floored so any reasonable amount of ink is barely penalized."""
    raw = (mask_ratio - params.length_ramp_start) / params.length_ramp_width
    return max(params.length_penalty_floor, clamp(raw))


def final_score(metrics, params, mask_ratio):
    """0..100 integer score for one set of metrics, multiplier applied."""
    raw_score = round_half_up(100 * base_overlap(metrics, params) * length_penalty(mask_ratio, params))
    return int(clamp(round_half_up(raw_score * params.score_multiplier), 0, 100))


def build_candidate(metrics, params, user_fill_count, ref_fill_count, angle=0.0, user_edge_count=0):
    """Score one rotation trial."""
    ratio = fill_ratio(user_fill_count, ref_fill_count)
    return Candidate(
        angle=angle,
        precision=metrics.precision,
        recall=metrics.recall,
        iou=metrics.iou,
        ratio=ratio,
        score=final_score(metrics, params, ratio),
        user_edge_count=user_edge_count,
        user_fill_count=user_fill_count,
    )


def orientation_remark(angle):
    """
    Describe the rotation that best aligned the drawing.

    Positive trial angles turn the drawing counter-clockwise, so they
    compensate for a drawing that was tilted clockwise.
    """
    if angle == 0:
        return "Orientation looked good."
    direction = "clockwise" if angle > 0 else "counter-clockwise"
    return f"Your drawing was tilted about {abs(angle):g}° {direction}; we allowed for that."


def critique_for(candidate):
    return (
        f"Matched {round_half_up(100 * candidate.recall)}% of the outline, "
        f"with {round_half_up(100 * candidate.precision)}% of your strokes near the edge. "
        f"{orientation_remark(candidate.angle)}"
    )


def rejection(critique=INSUFFICIENT_EDGE_CRITIQUE, precision=0.0, recall=0.0, ratio=0.0):
    """Score-0 result for drawings with too little usable ink."""
    return ScoreResult(
        score=0,
        critique=critique,
        precision=clamp(precision),
        recall=clamp(recall),
        ratio=max(0.0, ratio),
    )


def verdict(best, params):
    """
    Turn the winning candidate into the caller's ScoreResult.

    A missing or zero-scoring winner, or one whose fill ratio falls below
    the region's minimum acceptance ratio, is rejected with score 0.
    """
    tracer = get_tracer()

    if best is None:
        tracer.event("No rotation produced a usable drawing", level="WARN")
        return rejection()

    if best.score == 0:
        tracer.event("Best candidate scored 0", level="WARN", angle=best.angle)
        return rejection(precision=best.precision, recall=best.recall, ratio=best.ratio)

    if best.ratio < params.min_accept_ratio:
        tracer.event(
            f"Fill ratio {best.ratio:.4f} below accept floor {params.min_accept_ratio}",
            level="WARN",
        )
        return rejection(precision=best.precision, recall=best.recall, ratio=best.ratio)

    return ScoreResult(
        score=best.score,
        critique=critique_for(best),
        precision=best.precision,
        recall=best.recall,
        ratio=best.ratio,
    )


def score(metrics, params, user_fill_count, ref_fill_count, angle=0.0):
    """Score a single set of metrics straight to a ScoreResult."""
    return verdict(build_candidate(metrics, params, user_fill_count, ref_fill_count, angle), params)
