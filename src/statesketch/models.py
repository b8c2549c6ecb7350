"""
Data models for State Sketch.

Pixel buffers are plain numpy arrays; everything that crosses the core's
boundary or carries tuning parameters is a validated, frozen Pydantic model.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np
from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class RasterImage:
    """A decoded bitmap: RGB uint8 pixels, already composited onto white. Never mutated downstream."""
    pixels: np.ndarray

    @property
    def width(self):
        return self.pixels.shape[1]

    @property
    def height(self):
        return self.pixels.shape[0]


class RegionOverride(BaseModel):
    """Per-region tuning; unset fields fall back to the global defaults."""
    tolerance_px: Optional[float] = Field(default=None, gt=0)
    length_ramp_start: Optional[float] = None
    length_ramp_width: Optional[float] = Field(default=None, gt=0)
    min_accept_ratio: Optional[float] = Field(default=None, ge=0)
    score_multiplier: Optional[float] = Field(default=None, gt=0)
    min_user_edge_pixels: Optional[int] = Field(default=None, ge=0)

    model_config = ConfigDict(extra="forbid", frozen=True)


class ScoringParams(BaseModel):
    """Effective parameters for one judging call, after overrides are applied."""
    region_slug: str
    tolerance_px: float
    length_ramp_start: float
    length_ramp_width: float
    length_penalty_floor: float
    min_accept_ratio: float
    score_multiplier: float
    min_user_edge_pixels: int
    iou_weight: float
    recall_weight: float
    iou_bonus_threshold: float
    iou_bonus: float

    model_config = ConfigDict(extra="forbid", frozen=True)


class MatchMetrics(BaseModel):
    """Geometry agreement between one user rendering and the reference."""
    precision: float = Field(ge=0.0, le=1.0)
    recall: float = Field(ge=0.0, le=1.0)
    iou: float = Field(ge=0.0, le=1.0)

    model_config = ConfigDict(extra="forbid", frozen=True)


class Candidate(BaseModel):
    """Outcome of a single rotation trial."""
    angle: float
    precision: float
    recall: float
    iou: float
    ratio: float
    score: int
    user_edge_count: int = 0
    user_fill_count: int = 0

    model_config = ConfigDict(extra="forbid", frozen=True)


class ScoreResult(BaseModel):
    """The judge's verdict, returned to the caller."""
    score: int = Field(ge=0, le=100)
    critique: str
    precision: float = Field(default=0.0, ge=0.0, le=1.0)
    recall: float = Field(default=0.0, ge=0.0, le=1.0)
    ratio: float = Field(default=0.0, ge=0.0)  # user fill count / reference fill count

    model_config = ConfigDict(extra="forbid", frozen=True)
