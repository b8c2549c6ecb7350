"""
Region identifiers and per-region scoring overrides.

Regions are addressed by slug so that display names, lowercase names and
asset file names all resolve to the same entry.
"""

import re
from types import MappingProxyType

from statesketch.models import RegionOverride, ScoringParams


US_STATES = (
    "Alabama", "Alaska", "Arizona", "Arkansas", "California",
    "Colorado", "Connecticut", "Delaware", "Florida", "Georgia",
    "Hawaii", "Idaho", "Illinois", "Indiana", "Iowa", "Kansas",
    "Kentucky", "Louisiana", "Maine", "Maryland", "Massachusetts",
    "Michigan", "Minnesota", "Mississippi", "Missouri", "Montana",
    "Nebraska", "Nevada", "New Hampshire", "New Jersey", "New Mexico",
    "New York", "North Carolina", "North Dakota", "Ohio", "Oklahoma",
    "Oregon", "Pennsylvania", "Rhode Island", "South Carolina",
    "South Dakota", "Tennessee", "Texas", "Utah", "Vermont",
    "Virginia", "Washington", "West Virginia", "Wisconsin", "Wyoming",
)


_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify_region(name):
    """
    Turn a region name into its asset slug.

    "New York" -> "new-york"
    """
    slug = _NON_ALNUM.sub("-", str(name).lower())
    return slug.strip("-")


# Rectangular states are scored unfairly by the IoU-dominant formula: a
# slightly skewed box loses a lot of overlap, so they get more slack.
_RECTANGLE_OVERRIDE = RegionOverride(
    tolerance_px=5,
    length_ramp_start=0.06,
    length_ramp_width=0.69,
    min_accept_ratio=0.005,
    score_multiplier=1.25,
    min_user_edge_pixels=100,
)

REGION_OVERRIDES = MappingProxyType({
    "colorado": _RECTANGLE_OVERRIDE,
    "wyoming": _RECTANGLE_OVERRIDE,
})


def get_override(region_id, config=None):
    """
    Return the RegionOverride for a region, or None.

    Fields from the configuration's `overrides` section take precedence over
    the built-in table, field by field.
    """
    slug = slugify_region(region_id)
    builtin = REGION_OVERRIDES.get(slug)

    configured = None
    if config is not None:
        for name, fields in config.overrides.items():
            if slugify_region(name) == slug:
                configured = fields
                break

    if configured is None:
        return builtin

    merged = builtin.model_dump(exclude_none=True) if builtin else {}
    merged.update({k: v for k, v in configured.items() if v is not None})
    return RegionOverride(**merged)


def resolve_params(region_id, config):
    """Layer the region's override on top of the global defaults."""
    override = get_override(region_id, config) or RegionOverride()
    scoring = config.scoring

    def pick(name, default):
        value = getattr(override, name)
        return default if value is None else value

    return ScoringParams(
        region_slug=slugify_region(region_id),
        tolerance_px=pick("tolerance_px", config.matching.tolerance_px),
        length_ramp_start=pick("length_ramp_start", scoring.length_ramp_start),
        length_ramp_width=pick("length_ramp_width", scoring.length_ramp_width),
        length_penalty_floor=scoring.length_penalty_floor,
        min_accept_ratio=pick("min_accept_ratio", scoring.min_accept_ratio),
        score_multiplier=pick("score_multiplier", scoring.score_multiplier),
        min_user_edge_pixels=pick("min_user_edge_pixels", config.min_ink_pixels),
        iou_weight=scoring.iou_weight,
        recall_weight=scoring.recall_weight,
        iou_bonus_threshold=scoring.iou_bonus_threshold,
        iou_bonus=scoring.iou_bonus,
    )
