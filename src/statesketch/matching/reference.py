"""
Reference outline preparation.

Everything about the reference that does not depend on the rotation trial is
computed once: its fill mask, edge mask and the distance field that user
edge pixels are tested against.
"""

from dataclasses import dataclass

import numpy as np

from statesketch.matching.morphology import distance_transform, edge_of
from statesketch.preprocess.mask import build_mask, count
from statesketch.preprocess.rasterize import rasterize
from statesketch.tracer import get_tracer, trace


@dataclass(frozen=True)
class PreparedReference:
    """Rotation-independent masks for one region's outline."""
    region_slug: str
    fill: np.ndarray
    edge: np.ndarray
    distance: np.ndarray
    fill_count: int
    edge_count: int

    @property
    def canvas_size(self):
        return self.fill.shape[0]


@trace(label="prepare_reference")
def prepare_reference(image, config, region_slug=""):
    """Rasterize an outline unrotated and derive its fill, edge and distance field."""
    tracer = get_tracer()

    canvas = rasterize(image, config.raster.canvas_size, 0.0, config.raster.margin_frac)
    fill = build_mask(canvas, config.thresholds.outline)
    edge = edge_of(fill)
    distance = distance_transform(edge)

    fill_count = count(fill)
    edge_count = count(edge)
    if edge_count == 0:
        tracer.event(f"Reference outline {region_slug!r} has no ink at threshold "
                     f"{config.thresholds.outline}", level="WARN")
    else:
        tracer.event(f"Reference {region_slug!r}: fill={fill_count} edge={edge_count}")

    return PreparedReference(
        region_slug=region_slug,
        fill=fill,
        edge=edge,
        distance=distance,
        fill_count=fill_count,
        edge_count=edge_count,
    )
