"""
Reference outline assets.

Outlines live as `<outline_dir>/<slug>.png`. Prepared masks are cached per
library instance; the cache is only ever filled, never mutated, and the lock
keeps concurrent judge calls from preparing the same outline twice.
"""

import os
import threading

from statesketch.errors import ReferenceNotFoundError
from statesketch.io.load_image import load_image
from statesketch.matching.reference import prepare_reference
from statesketch.regions import slugify_region
from statesketch.tracer import get_tracer


class OutlineLibrary:
    """Resolves region identifiers to outline images and prepared references."""

    def __init__(self, outline_dir):
        self.outline_dir = outline_dir
        self._cache = {}
        self._lock = threading.Lock()

    def outline_path(self, region_id):
        return os.path.join(self.outline_dir, f"{slugify_region(region_id)}.png")

    def has_outline(self, region_id):
        return os.path.isfile(self.outline_path(region_id))

    def available_regions(self):
        """Slugs of every outline asset present in the directory."""
        if not os.path.isdir(self.outline_dir):
            return []
        return sorted(
            os.path.splitext(name)[0]
            for name in os.listdir(self.outline_dir)
            if name.lower().endswith(".png")
        )

    def load_outline(self, region_id):
        """
        Decode the outline image for a region.

        Raises ReferenceNotFoundError if no asset exists.
        """
        path = self.outline_path(region_id)
        if not os.path.isfile(path):
            raise ReferenceNotFoundError(region_id, path)
        return load_image(path)

    def prepare(self, region_id, config):
        """Prepared reference for a region, computed once per canvas setup."""
        slug = slugify_region(region_id)
        key = (slug, config.raster.canvas_size, config.raster.margin_frac, config.thresholds.outline)

        with self._lock:
            cached = self._cache.get(key)
            if cached is not None:
                get_tracer().event(f"Reference cache hit: {slug}", level="DEBUG")
                return cached

            reference = prepare_reference(self.load_outline(region_id), config, region_slug=slug)
            self._cache[key] = reference
            return reference
