"""
RGB color histogram extraction.

Computes a per-channel color distribution straight from pixel data.
Each channel is binned independently with OpenCV's calcHist and
normalized by the pixel count, so every B-length segment of the
result sums to 1.0:

    [0:B]     red
    [B:2B]    green
    [2B:3B]   blue

With the default 256 bins a channel value maps to its own bin; with
fewer bins value v lands in floor(v * B / 256). Alpha is ignored.
"""

import logging

import cv2
import numpy as np

from .preprocessing import DecodeFailure, decode_image_source, to_rgba

logger = logging.getLogger(__name__)

DEFAULT_BINS = 256
CHANNELS = 3


def zero_histogram(bins: int = DEFAULT_BINS) -> np.ndarray:
    return np.zeros(CHANNELS * bins, dtype=np.float64)


def extract_color_histogram(pixels: np.ndarray,
                            bins: int = DEFAULT_BINS) -> np.ndarray:
    """
    Extract a normalized RGB histogram from a pixel buffer.

    Args:
        pixels: Image array of shape (H, W, 4) RGBA. RGB and grayscale
                arrays are accepted and converted first.
        bins: Bins per channel, between 1 and 256.

    Returns:
        Float64 vector of length 3 * bins. All zeros for an image
        with no pixels.

    Raises:
        ValueError: If bins is out of range.
    """
    if not 1 <= bins <= 256:
        raise ValueError(f"bins must be between 1 and 256, got {bins}")

    pixels = np.asarray(pixels)
    if pixels.size == 0:
        return zero_histogram(bins)

    rgba = np.ascontiguousarray(to_rgba(pixels))
    num_pixels = rgba.shape[0] * rgba.shape[1]

    segments = []
    for channel in range(CHANNELS):
        hist = cv2.calcHist([rgba], [channel], None, [bins], [0, 256])
        segments.append(hist.flatten().astype(np.float64) / num_pixels)

    return np.concatenate(segments)


def color_histogram_from_source(source: str,
                                bins: int = DEFAULT_BINS,
                                asset_root: str = None) -> np.ndarray:
    """
    Decode an image source and extract its color histogram.

    Decode failures never propagate: they are logged and an all-zero
    vector of the expected length is returned instead.
    """
    try:
        pixels = decode_image_source(source, asset_root)
    except DecodeFailure as e:
        logger.error(f"Color histogram extraction failed for {source[:80]}: {e}")
        return zero_histogram(bins)

    return extract_color_histogram(pixels, bins)


def split_channels(vector: np.ndarray, bins: int = DEFAULT_BINS):
    """
    Split a concatenated histogram into its (red, green, blue) segments.

    Raises:
        ValueError: If the vector length is not 3 * bins.
    """
    vector = np.asarray(vector)
    if vector.shape != (CHANNELS * bins,):
        raise ValueError(
            f"Histogram length {vector.size} doesn't match "
            f"{CHANNELS} x {bins} bins"
        )
    return vector[:bins], vector[bins:2 * bins], vector[2 * bins:]
