"""Tests for the command-line interface."""

import json
import os


class TestCli:
    """Tests for main() subcommands."""

    def test_no_command_prints_help(self, capsys):
        from statesketch.cli import main

        assert main([]) == 0
        assert "judge" in capsys.readouterr().out

    def test_init_config(self, temp_dir):
        from statesketch.cli import main
        from statesketch.config import JudgeConfig, load_config

        path = os.path.join(temp_dir, "cfg.yaml")

        assert main(["init-config", "--out", path]) == 0
        assert load_config(path) == JudgeConfig()

    def test_regions_lists_states(self, capsys):
        from statesketch.cli import main

        assert main(["regions"]) == 0

        lines = capsys.readouterr().out.strip().split("\n")
        assert len(lines) == 50
        assert any(line.startswith("New York") and "new-york" in line for line in lines)
        assert any(line.startswith("Colorado") and "(override)" in line for line in lines)
        assert not any(line.startswith("Texas") and "(override)" in line for line in lines)

    def test_judge_json(self, temp_dir, square_png, outline_dir, capsys):
        from statesketch.cli import main

        image_path = os.path.join(temp_dir, "drawing.png")
        with open(image_path, "wb") as f:
            f.write(square_png)

        code = main(["judge", "-i", image_path, "-r", "Texas", "--outlines", outline_dir, "--json"])

        assert code == 0
        result = json.loads(capsys.readouterr().out)
        assert result["score"] >= 95
        assert set(result) == {"score", "critique", "precision", "recall", "ratio"}

    def test_judge_summary_and_debug(self, temp_dir, square_png, outline_dir, capsys):
        from statesketch.cli import main

        image_path = os.path.join(temp_dir, "drawing.png")
        with open(image_path, "wb") as f:
            f.write(square_png)
        debug_dir = os.path.join(temp_dir, "dbg")

        code = main(["judge", "-i", image_path, "-r", "Texas", "--outlines", outline_dir, "--debug", debug_dir])

        assert code == 0
        assert "Texas:" in capsys.readouterr().out
        assert os.listdir(os.path.join(debug_dir, "debug"))[0].startswith("judge_")

    def test_judge_missing_outline(self, temp_dir, square_png, outline_dir, capsys):
        from statesketch.cli import main

        image_path = os.path.join(temp_dir, "drawing.png")
        with open(image_path, "wb") as f:
            f.write(square_png)

        code = main(["judge", "-i", image_path, "-r", "Ohio", "--outlines", outline_dir])

        assert code == 1
        assert "Error" in capsys.readouterr().err

    def test_judge_missing_image(self, temp_dir, outline_dir):
        from statesketch.cli import main

        code = main(["judge", "-i", os.path.join(temp_dir, "nope.png"), "-r", "Texas", "--outlines", outline_dir])

        assert code == 1
