"""State Sketch: score free-hand sketches of US states against their outlines."""

from statesketch.errors import DecodeError, InvalidImageError, ReferenceNotFoundError, StateSketchError
from statesketch.judge import judge_drawing
from statesketch.models import ScoreResult

__version__ = "0.1.0"
