"""Tests for the normalizing rasterizer and mask builder."""

import numpy as np
import pytest


def _ink_bbox(canvas, threshold=128):
    from statesketch.preprocess.mask import build_mask

    ys, xs = np.nonzero(build_mask(canvas, threshold))
    return xs.min(), ys.min(), xs.max(), ys.max()


class TestRasterize:
    """Tests for rasterize."""

    def test_output_shape(self, square_image):
        """Canvas is always canvas_size square RGB."""
        from statesketch.models import RasterImage
        from statesketch.preprocess.rasterize import rasterize

        canvas = rasterize(RasterImage(square_image), 512)

        assert canvas.shape == (512, 512, 3)
        assert canvas.dtype == np.uint8

    def test_blank_stays_white(self):
        """A white source produces an all-white canvas, corners included."""
        from statesketch.models import RasterImage
        from statesketch.preprocess.rasterize import rasterize

        img = RasterImage(np.full((50, 80, 3), 255, dtype=np.uint8))
        canvas = rasterize(img, 128, rotation_deg=10)

        assert canvas.min() == 255

    def test_preserves_aspect_ratio(self):
        """A 1:2 image fills the inset height and half of it in width."""
        from statesketch.models import RasterImage
        from statesketch.preprocess.rasterize import rasterize

        img = RasterImage(np.zeros((200, 100, 3), dtype=np.uint8))
        canvas = rasterize(img, 512)

        x0, y0, x1, y1 = _ink_bbox(canvas)
        height = y1 - y0 + 1
        width = x1 - x0 + 1

        assert abs(height - 512 * 0.9) <= 3
        assert abs(width - 512 * 0.45) <= 3

    def test_centered(self):
        """The scaled image is centered on the canvas."""
        from statesketch.models import RasterImage
        from statesketch.preprocess.rasterize import rasterize

        img = RasterImage(np.zeros((30, 90, 3), dtype=np.uint8))
        canvas = rasterize(img, 256)

        x0, y0, x1, y1 = _ink_bbox(canvas)
        assert abs((x0 + x1) / 2 - 127.5) <= 1
        assert abs((y0 + y1) / 2 - 127.5) <= 1

    def test_margin_respected(self):
        """Nothing is drawn inside the 5% margin."""
        from statesketch.models import RasterImage
        from statesketch.preprocess.rasterize import rasterize

        img = RasterImage(np.zeros((64, 64, 3), dtype=np.uint8))
        canvas = rasterize(img, 200)

        margin = int(200 * 0.05) - 1
        assert canvas[:margin].min() == 255
        assert canvas[-margin:].min() == 255
        assert canvas[:, :margin].min() == 255
        assert canvas[:, -margin:].min() == 255

    def test_rotation_turns_wide_into_tall(self):
        """A 90 degree rotation swaps the ink bounding box orientation."""
        from statesketch.models import RasterImage
        from statesketch.preprocess.rasterize import rasterize

        img = np.full((100, 300, 3), 255, dtype=np.uint8)
        img[40:60, 20:280] = 0
        canvas = rasterize(RasterImage(img), 256, rotation_deg=90)

        x0, y0, x1, y1 = _ink_bbox(canvas)
        assert (y1 - y0) > 3 * (x1 - x0)

    def test_deterministic(self, square_image):
        """Same inputs, same pixels."""
        from statesketch.models import RasterImage
        from statesketch.preprocess.rasterize import rasterize

        img = RasterImage(square_image)
        a = rasterize(img, 512, rotation_deg=6)
        b = rasterize(img, 512, rotation_deg=6)

        assert np.array_equal(a, b)

    def test_degenerate_image_rejected(self):
        """Zero-sized sources fail with InvalidImageError, not ZeroDivisionError."""
        from statesketch.errors import InvalidImageError
        from statesketch.models import RasterImage
        from statesketch.preprocess.rasterize import rasterize

        img = RasterImage(np.zeros((0, 10, 3), dtype=np.uint8))

        with pytest.raises(InvalidImageError):
            rasterize(img, 512)


class TestBuildMask:
    """Tests for luminance masks."""

    def test_threshold_is_strict(self):
        """Luminance equal to the threshold is not ink."""
        from statesketch.preprocess.mask import build_mask

        canvas = np.array([[[170, 170, 170], [169, 169, 169], [255, 255, 255]]], dtype=np.uint8)
        mask = build_mask(canvas, 170)

        assert mask.tolist() == [[0, 1, 0]]

    def test_luminance_is_channel_average(self):
        """Pure red averages to 85 and counts as ink at 110 but not at 80."""
        from statesketch.preprocess.mask import build_mask

        canvas = np.array([[[255, 0, 0]]], dtype=np.uint8)

        assert build_mask(canvas, 110)[0, 0] == 1
        assert build_mask(canvas, 80)[0, 0] == 0

    def test_alpha_channel_ignored(self):
        """A fourth channel does not enter the luminance."""
        from statesketch.preprocess.mask import build_mask

        canvas = np.array([[[0, 0, 0, 0]]], dtype=np.uint8)

        assert build_mask(canvas, 10)[0, 0] == 1

    def test_count_and_ratio(self):
        from statesketch.preprocess.mask import count, ink_ratio

        mask = np.zeros((10, 10), dtype=np.uint8)
        mask[2:4, 2:7] = 1

        assert count(mask) == 10
        assert ink_ratio(mask) == pytest.approx(0.1)
