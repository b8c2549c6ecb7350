"""
Exception types raised by State Sketch.

A blank or near-blank drawing is not an error: it scores 0 through the
normal result path. These exceptions cover inputs that cannot be judged at all.
"""


class StateSketchError(Exception):
    """Base class for all judging failures."""


class DecodeError(StateSketchError):
    """Input bytes could not be decoded as a raster image."""


class InvalidImageError(StateSketchError):
    """Decoded image has degenerate geometry (zero width or height)."""


class ReferenceNotFoundError(StateSketchError):
    """No reference outline asset exists for the requested region."""

    def __init__(self, region_id, path):
        super().__init__(f"No reference outline for region {region_id!r} (looked for {path})")
        self.region_id = region_id
        self.path = path
