"""
Judging orchestrator for State Sketch.

Runs the guard sequence, then a coarse rotation search over a fixed set of
small angles, and turns the best trial into a ScoreResult:

    quick ink check -> minimum edge check -> rotation search
        -> post-search floor -> final ratio check -> accept

Every rejection is a normal score-0 result, never an exception.
"""

import hashlib
from concurrent.futures import ThreadPoolExecutor

from statesketch.config import JudgeConfig
from statesketch.io.load_image import decode_data_url, decode_image
from statesketch.io.outlines import OutlineLibrary
from statesketch.io.save_artifacts import create_match_overlay
from statesketch.matching.matcher import match
from statesketch.matching.morphology import edge_of
from statesketch.matching.scorer import (
    INSUFFICIENT_INK_CRITIQUE, build_candidate, fill_ratio, rejection, verdict,
)
from statesketch.preprocess.mask import build_mask, count
from statesketch.preprocess.rasterize import rasterize
from statesketch.regions import resolve_params
from statesketch.tracer import get_tracer, trace


@trace(label="judge_drawing")
def judge_drawing(user_image_bytes, region_id, config=None, library=None, debug_writer=None):
    """
    Score an encoded drawing against the outline for region_id.

    Args:
        user_image_bytes: encoded raster (PNG etc.) of dark strokes on white
        region_id: region name, e.g. "New York"
        config: JudgeConfig (defaults if omitted)
        library: OutlineLibrary (built from config.assets.outline_dir if omitted)
        debug_writer: optional DebugArtifactWriter

    Returns:
        ScoreResult

    Raises DecodeError / InvalidImageError for unusable input and
    ReferenceNotFoundError when the region has no outline asset.
    """
    if config is None:
        config = JudgeConfig()
    if library is None:
        library = OutlineLibrary(config.assets.outline_dir)

    user_image = decode_image(user_image_bytes)
    reference = library.prepare(region_id, config)

    return judge_image(user_image, reference, region_id, config, debug_writer)


def judge_data_url(data_url, region_id, config=None, library=None, debug_writer=None):
    """judge_drawing for a canvas `toDataURL()` export."""
    return judge_drawing(decode_data_url(data_url), region_id, config, library, debug_writer)


@trace(label="judge_image")
def judge_image(user_image, reference, region_id, config, debug_writer=None):
    """Run the guards and rotation search on an already decoded drawing."""
    tracer = get_tracer()

    params = resolve_params(region_id, config)
    size = config.raster.canvas_size
    margin = config.raster.margin_frac

    base_canvas = rasterize(user_image, size, 0.0, margin)

    with tracer.span("quick_ink_guard", module="judge"):
        quick_ink = count(build_mask(base_canvas, config.thresholds.quick_ink))
        if quick_ink < config.min_ink_pixels:
            tracer.event(f"Rejected: {quick_ink} non-white pixels < {config.min_ink_pixels}", level="WARN")
            return rejection(INSUFFICIENT_INK_CRITIQUE)

    with tracer.span("min_edge_guard", module="judge"):
        base_fill = build_mask(base_canvas, config.thresholds.draw)
        base_edge = edge_of(base_fill)
        base_fill_count = count(base_fill)
        base_edge_count = count(base_edge)

        if debug_writer:
            debug_writer.save_image(base_canvas, "input", "01_user_canvas.png")
            debug_writer.save_image(base_fill, "input", "02_user_fill.png")
            debug_writer.save_image(reference.fill, "reference", "01_reference_fill.png")
            debug_writer.save_image(reference.edge, "reference", "02_reference_edge.png")

        if base_edge_count < params.min_user_edge_pixels:
            tracer.event(
                f"Rejected: {base_edge_count} edge pixels < {params.min_user_edge_pixels}",
                level="WARN",
            )
            return rejection(ratio=fill_ratio(base_fill_count, reference.fill_count))

    with tracer.span("rotation_search", module="judge", angles=list(config.search.angles)):
        best = search_rotations(user_image, reference, params, config)

    result = verdict(best, params)

    tracer.event(f"Verdict: score={result.score}", region=params.region_slug)

    if debug_writer and best is not None:
        best_fill = build_mask(rasterize(user_image, size, best.angle, margin), config.thresholds.draw)
        debug_writer.save_image(
            create_match_overlay(edge_of(best_fill), reference.edge),
            "search", "01_best_overlay.png",
        )
        debug_writer.save_json(
            {"params": params.model_dump(), "best": best.model_dump(), "result": result.model_dump()},
            "search", "metrics.json",
        )

    return result


def evaluate_angle(user_image, reference, params, config, angle):
    """
    One rotation trial.

    Returns a Candidate, or None when the rotated drawing has fewer edge
    pixels than the region's floor (that angle is skipped, others still run).
    """
    tracer = get_tracer()

    canvas = rasterize(user_image, config.raster.canvas_size, angle, config.raster.margin_frac)
    fill = build_mask(canvas, config.thresholds.draw)
    edge = edge_of(fill)
    edge_count = count(edge)

    if edge_count < params.min_user_edge_pixels:
        tracer.event(f"Angle {angle}: skipped, {edge_count} edge pixels", level="DEBUG")
        return None

    metrics = match(edge, reference.edge, fill, reference.fill, params.tolerance_px, ref_distance=reference.distance)
    candidate = build_candidate(metrics, params, count(fill), reference.fill_count, angle, edge_count)

    tracer.event(
        f"Angle {angle}: score={candidate.score} iou={metrics.iou:.3f} "
        f"p={metrics.precision:.3f} r={metrics.recall:.3f} ratio={candidate.ratio:.3f}"
    )

    return candidate


def search_rotations(user_image, reference, params, config):
    """
    Try every configured angle and keep the highest score.

    The IoU bonus saturates the score at 100 for several neighbouring angles
    on a good drawing, so equal scores are separated by IoU and then by edge
    agreement; candidates equal on all three go to the angle listed first.
    Returns None if every angle was skipped.
    """
    angles = list(config.search.angles)

    def run(angle):
        return evaluate_angle(user_image, reference, params, config, angle)

    if config.search.max_workers > 1 and len(angles) > 1:
        with ThreadPoolExecutor(max_workers=config.search.max_workers) as pool:
            candidates = list(pool.map(run, angles))
    else:
        candidates = [run(angle) for angle in angles]

    best = None
    for candidate in candidates:
        if candidate is None:
            continue
        if best is None or _rank(candidate) > _rank(best):
            best = candidate
    return best


def _rank(candidate):
    return (candidate.score, candidate.iou, candidate.precision + candidate.recall)


def run_id_for(user_image_bytes, region_id):
    """Deterministic debug directory name for a judged drawing."""
    h = hashlib.sha256(user_image_bytes + str(region_id).encode()).hexdigest()[:12]
    return f"judge_{h}"
