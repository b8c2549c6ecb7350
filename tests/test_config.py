"""Tests for configuration loading."""

import os

import yaml


class TestConfig:
    """Tests for load_config and save_default_config."""

    def test_defaults(self):
        from statesketch.config import load_config

        config = load_config(None)

        assert config.raster.canvas_size == 512
        assert config.raster.margin_frac == 0.05
        assert config.thresholds.draw == 170
        assert config.thresholds.outline == 110
        assert config.matching.tolerance_px == 3.0
        assert config.search.angles == [-10, -6, -3, 0, 3, 6, 10]
        assert config.min_ink_pixels == 10

    def test_missing_file_gives_defaults(self, temp_dir):
        from statesketch.config import load_config

        config = load_config(os.path.join(temp_dir, "nope.yaml"))
        assert config.thresholds.draw == 170

    def test_partial_yaml_merges(self, temp_dir):
        from statesketch.config import load_config

        path = os.path.join(temp_dir, "cfg.yaml")
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump({
                "raster": {"canvas_size": 256},
                "search": {"angles": [0, 5]},
                "matching": {"not_a_field": 1},
                "overrides": {"Utah": {"tolerance_px": 4}},
            }, f)

        config = load_config(path)

        assert config.raster.canvas_size == 256
        assert config.raster.margin_frac == 0.05
        assert config.search.angles == [0, 5]
        assert not hasattr(config.matching, "not_a_field")
        assert config.overrides == {"Utah": {"tolerance_px": 4}}

    def test_min_ink_scales_with_canvas(self):
        from statesketch.config import JudgeConfig

        config = JudgeConfig()
        config.raster.canvas_size = 4000

        assert config.min_ink_pixels == 20

    def test_save_default_round_trip(self, temp_dir):
        from statesketch.config import JudgeConfig, load_config, save_default_config

        path = os.path.join(temp_dir, "default.yaml")
        save_default_config(path)

        loaded = load_config(path)

        assert loaded == JudgeConfig()
