"""Formatting helpers for presenting vectors and similarities."""

from typing import Dict, List, Tuple

import numpy as np

from .histograms import DEFAULT_BINS, split_channels

CHANNEL_NAMES = ("R", "G", "B")
DEFAULT_PREVIEW_LENGTH = 20


def histogram_chart_data(vector: np.ndarray,
                         bins: int = DEFAULT_BINS) -> List[Dict[str, object]]:
    """
    Rows for a per-bin bar chart of a color histogram.

    Returns:
        One dict per bin: {"name": "<bin index>", "R": .., "G": .., "B": ..}.

    Raises:
        ValueError: If the vector length is not 3 * bins.
    """
    red, green, blue = split_channels(vector, bins)
    return [
        {"name": str(i), "R": float(red[i]), "G": float(green[i]), "B": float(blue[i])}
        for i in range(bins)
    ]


def vector_preview(vector: np.ndarray,
                   length: int = DEFAULT_PREVIEW_LENGTH) -> Tuple[List[float], int]:
    """Leading values of a vector and how many values are hidden."""
    values = np.asarray(vector).ravel()
    head = [float(v) for v in values[:length]]
    return head, max(0, values.size - length)


def format_similarity(value: float) -> str:
    """Render a similarity as a percentage, e.g. 0.8734 -> '87.3%'."""
    return f"{value * 100:.1f}%"
