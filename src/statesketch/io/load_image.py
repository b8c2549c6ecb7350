"""
Image decoding for State Sketch.

Turns encoded rasters (canvas exports, outline assets) into RGB pixel
buffers composited onto white, so transparent canvas areas read as paper
rather than ink.
"""

import base64
import binascii
import os

import cv2
import numpy as np

from statesketch.errors import DecodeError, InvalidImageError
from statesketch.models import RasterImage
from statesketch.tracer import get_tracer, trace


@trace(label="decode_image")
def decode_image(data):
    """
    Decode encoded image bytes (PNG, JPEG, BMP, ...) into a RasterImage.

    Raises DecodeError if the bytes are not an image.
    Raises InvalidImageError if the image has zero width or height.
    """
    tracer = get_tracer()

    if not data:
        raise DecodeError("Empty image data")

    buf = np.frombuffer(data, dtype=np.uint8)
    img = cv2.imdecode(buf, cv2.IMREAD_UNCHANGED)

    if img is None:
        raise DecodeError(f"Failed to decode image ({len(data)} bytes)")

    if img.ndim < 2 or img.shape[0] == 0 or img.shape[1] == 0:
        raise InvalidImageError(f"Degenerate image shape: {img.shape}")

    rgb = _to_rgb_on_white(img)

    tracer.event(f"Decoded image: {rgb.shape[1]}x{rgb.shape[0]}")

    return RasterImage(pixels=rgb)


def _to_rgb_on_white(img):
    """Normalize any OpenCV decode result to 8-bit RGB over a white background."""
    if img.dtype == np.uint16:
        img = (img // 257).astype(np.uint8)
    elif img.dtype != np.uint8:
        img = cv2.normalize(img, None, 0, 255, cv2.NORM_MINMAX).astype(np.uint8)

    if img.ndim == 2:
        return cv2.cvtColor(img, cv2.COLOR_GRAY2RGB)

    channels = img.shape[2]
    if channels == 1:
        return cv2.cvtColor(img[:, :, 0], cv2.COLOR_GRAY2RGB)
    if channels == 3:
        return cv2.cvtColor(img, cv2.COLOR_BGR2RGB)

    # BGRA: composite over white
    bgr = img[:, :, :3].astype(np.float32)
    alpha = img[:, :, 3:4].astype(np.float32) / 255.0
    composited = bgr * alpha + 255.0 * (1.0 - alpha)
    composited = np.clip(np.round(composited), 0, 255).astype(np.uint8)
    return cv2.cvtColor(composited, cv2.COLOR_BGR2RGB)


def decode_data_url(text):
    """
    Extract raw bytes from a `data:image/...;base64,` URL or bare base64 text.

    Raises DecodeError if the payload is not valid base64.
    """
    if isinstance(text, bytes):
        text = text.decode("ascii", errors="replace")

    payload = text.split(",", 1)[1] if "," in text else text

    try:
        return base64.b64decode(payload.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"Invalid base64 image payload: {e}") from e


@trace(label="load_image")
def load_image(path):
    """
    Load and decode an image file from disk.

    Raises FileNotFoundError if path does not exist.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Image not found: {path}")

    with open(path, "rb") as f:
        data = f.read()

    return decode_image(data)
