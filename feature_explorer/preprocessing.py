"""
Image source decoding for feature extraction.

Turns an image source into an RGBA uint8 pixel buffer of shape
(height, width, 4). Two kinds of source are understood:

    data:<mime>;base64,<payload>   inline bitmap from a file upload
    anything else                  static asset path, resolved against
                                   FEATURE_ASSET_ROOT when not found as-is

Remote URLs are never fetched. Any failure raises DecodeFailure so the
caller can decide how to recover.
"""

import base64
import binascii
import os
import logging

import cv2
import numpy as np

logger = logging.getLogger(__name__)

# Static asset references like "/images/samples/cat.png" are resolved
# relative to this directory.
ASSET_ROOT = os.environ.get("FEATURE_ASSET_ROOT", ".")

REMOTE_PREFIXES = ("http://", "https://", "ftp://")


class DecodeFailure(ValueError):
    """Raised when an image source cannot be rasterized."""


def normalize_image(image_np: np.ndarray) -> np.ndarray:
    """Ensure image is uint8 format."""
    if image_np.dtype != np.uint8:
        if image_np.size and image_np.max() <= 1.0:
            image_np = (image_np * 255).astype(np.uint8)
        else:
            image_np = np.clip(image_np, 0, 255).astype(np.uint8)
    return image_np


def to_rgba(image_np: np.ndarray) -> np.ndarray:
    """
    Convert an RGB, RGBA or grayscale array to RGBA uint8.

    RGB input gets an opaque alpha channel; grayscale input is
    replicated into the three color channels.

    Raises:
        DecodeFailure: If the array is not 2D or 3D with 1, 3 or 4 channels.
    """
    image_np = normalize_image(np.asarray(image_np))

    if image_np.ndim == 2:
        image_np = image_np[:, :, np.newaxis]
    if image_np.ndim != 3 or image_np.shape[2] not in (1, 3, 4):
        raise DecodeFailure(f"Unsupported pixel buffer shape {image_np.shape}")

    channels = image_np.shape[2]
    if channels == 4:
        return image_np

    h, w = image_np.shape[:2]
    rgba = np.empty((h, w, 4), dtype=np.uint8)
    rgba[:, :, :3] = image_np if channels == 3 else image_np[:, :, :1]
    rgba[:, :, 3] = 255
    return rgba


def resolve_asset_path(source: str, asset_root: str = None) -> str:
    """
    Map a static asset reference to a filesystem path.

    Existing paths are returned unchanged. Otherwise the reference is
    joined to the asset root with any leading slash removed.
    """
    if os.path.exists(source):
        return source
    return os.path.join(asset_root or ASSET_ROOT, source.lstrip("/\\"))


def decode_data_uri(source: str) -> bytes:
    """
    Extract the binary payload of a base64 data URI.

    Raises:
        DecodeFailure: If the URI is malformed or not base64-encoded.
    """
    header, sep, payload = source.partition(",")
    if not sep or not header.startswith("data:"):
        raise DecodeFailure("Malformed data URI")
    if not header.endswith(";base64"):
        raise DecodeFailure(f"Unsupported data URI encoding: {header[:40]}")

    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeFailure(f"Invalid base64 payload: {e}") from e


def decode_image_bytes(data: bytes) -> np.ndarray:
    """Decode encoded image bytes (PNG, JPEG, ...) to RGBA uint8."""
    buffer = np.frombuffer(data, dtype=np.uint8)
    if buffer.size == 0:
        raise DecodeFailure("Empty image payload")

    try:
        image = cv2.imdecode(buffer, cv2.IMREAD_COLOR)
        if image is None:
            raise DecodeFailure("Image payload could not be decoded")
        return cv2.cvtColor(image, cv2.COLOR_BGR2RGBA)
    except cv2.error as e:
        # e.g. header dimensions above CV_IO_MAX_IMAGE_PIXELS
        raise DecodeFailure(f"OpenCV rejected image payload: {e}") from e


def decode_image_source(source: str, asset_root: str = None) -> np.ndarray:
    """
    Rasterize an image source to an RGBA pixel buffer.

    Args:
        source: Data URI or static asset path.
        asset_root: Optional override for FEATURE_ASSET_ROOT.

    Returns:
        RGBA uint8 array of shape (height, width, 4).

    Raises:
        DecodeFailure: If the source is remote, missing or undecodable.
    """
    if not source:
        raise DecodeFailure("Empty image source")

    if source.startswith("data:"):
        return decode_image_bytes(decode_data_uri(source))

    if source.lower().startswith(REMOTE_PREFIXES):
        raise DecodeFailure(f"Remote image sources are not fetched: {source}")

    path = resolve_asset_path(source, asset_root)
    if not os.path.isfile(path):
        raise DecodeFailure(f"Image not found: {path}")

    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise DecodeFailure(f"Could not read {path}: {e}") from e

    logger.debug(f"Decoding {len(data)} bytes from {path}")
    return decode_image_bytes(data)
