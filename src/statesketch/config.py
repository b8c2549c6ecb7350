"""
Configuration management for State Sketch.

Loads YAML configuration with sensible defaults for every judging stage.
Per-region overrides declared here are layered on top of the built-in table
in statesketch.regions.
"""

import os
from dataclasses import asdict, dataclass, field
from typing import Dict, List

import yaml


@dataclass
class RasterConfig:
    """Configuration for the normalizing rasterizer."""
    canvas_size: int = 512
    margin_frac: float = 0.05  # per side, as a fraction of canvas_size


@dataclass
class ThresholdConfig:
    """Luminance thresholds (0..255); a pixel darker than the threshold is ink."""
    draw: int = 170
    outline: int = 110
    quick_ink: int = 250  # anything not nearly white


@dataclass
class MatchingConfig:
    """Configuration for edge matching."""
    tolerance_px: float = 3.0


@dataclass
class ScoringConfig:
    """Global scoring defaults. Region overrides replace individual fields."""
    iou_weight: float = 0.95
    recall_weight: float = 0.05
    iou_bonus_threshold: float = 0.5
    iou_bonus: float = 0.1
    length_ramp_start: float = 0.06
    length_ramp_width: float = 0.55
    length_penalty_floor: float = 0.9
    min_accept_ratio: float = 0.001
    score_multiplier: float = 1.0
    min_ink_floor: int = 10
    min_ink_fraction: float = 0.005  # of canvas_size


@dataclass
class SearchConfig:
    """Configuration for the rotation search."""
    angles: List[float] = field(default_factory=lambda: [-10, -6, -3, 0, 3, 6, 10])
    max_workers: int = 1


@dataclass
class AssetsConfig:
    """Where reference outline images live."""
    outline_dir: str = "outlines"


@dataclass
class TracingConfig:
    """Configuration for runtime tracing."""
    enabled: bool = False
    level: str = "INFO"
    file_path: str = None
    json_output: bool = False


@dataclass
class DebugConfig:
    """Configuration for debug artifact generation."""
    enabled: bool = False
    out_dir: str = "debug_runs"
    max_edge_scale: int = 1024


@dataclass
class JudgeConfig:
    """Complete judging configuration."""
    raster: RasterConfig = field(default_factory=RasterConfig)
    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)
    matching: MatchingConfig = field(default_factory=MatchingConfig)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    assets: AssetsConfig = field(default_factory=AssetsConfig)
    tracing: TracingConfig = field(default_factory=TracingConfig)
    debug: DebugConfig = field(default_factory=DebugConfig)
    overrides: Dict[str, dict] = field(default_factory=dict)

    @property
    def min_ink_pixels(self):
        """Default ink/edge floor shared by the quick-ink and minimum-edge guards."""
        return max(
            self.scoring.min_ink_floor,
            round(self.raster.canvas_size * self.scoring.min_ink_fraction),
        )


SECTIONS = ("raster", "thresholds", "matching", "scoring", "search", "assets", "tracing", "debug")


def load_config(config_path=None):
    """
    Load configuration from YAML file.

    Falls back to defaults for any missing values.
    """
    config = JudgeConfig()

    if config_path and os.path.exists(config_path):
        with open(config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f) or {}

        config = _merge_config(config, yaml_data)

    return config


def _merge_config(config, yaml_data):
    """Merge YAML data into config dataclass. Unknown keys are ignored."""
    for section_name in SECTIONS:
        if section_name in yaml_data:
            section = getattr(config, section_name)
            for key, value in (yaml_data[section_name] or {}).items():
                if hasattr(section, key):
                    setattr(section, key, value)

    if "overrides" in yaml_data:
        for region, fields in (yaml_data["overrides"] or {}).items():
            config.overrides[str(region)] = dict(fields or {})

    return config


def save_default_config(path):
    """Save default configuration to YAML file for reference."""
    config = JudgeConfig()

    yaml_data = {name: asdict(getattr(config, name)) for name in SECTIONS}
    yaml_data["tracing"].pop("file_path")
    yaml_data["overrides"] = {}

    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(yaml_data, f, default_flow_style=False, sort_keys=False)
