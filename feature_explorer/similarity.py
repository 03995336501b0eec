"""
Cosine similarity between selected images.

The similarity matrix is indexed by selection order. Its diagonal is
set to exactly 1.0 without computing anything, and each off-diagonal
pair is computed once and mirrored, so the matrix is symmetric by
construction.

A pair scores 0.0 when either image lacks a vector for the requested
feature type, or when either vector has zero norm (an all-zero color
histogram from an undecodable image, for example).
"""

import logging
from typing import Any, Dict, List, Sequence

import numpy as np

from .feature_types import validate_feature_type
from .models import SelectedImage

logger = logging.getLogger(__name__)


class DimensionMismatch(ValueError):
    """Raised when comparing vectors of different lengths."""


def cosine_similarity(vec_a: np.ndarray, vec_b: np.ndarray) -> float:
    """
    Cosine of the angle between two vectors.

    Args:
        vec_a: First vector.
        vec_b: Second vector, same length as vec_a.

    Returns:
        Similarity in [-1, 1]. 0.0 if either vector has zero norm.

    Raises:
        DimensionMismatch: If the vectors differ in length.
    """
    a = np.asarray(vec_a, dtype=np.float64).ravel()
    b = np.asarray(vec_b, dtype=np.float64).ravel()

    if a.shape != b.shape:
        raise DimensionMismatch(
            f"Vector dimension {a.size} doesn't match {b.size}"
        )

    denominator = np.linalg.norm(a) * np.linalg.norm(b)
    if denominator == 0:
        logger.debug("Zero-norm vector in cosine similarity, scoring 0.0")
        return 0.0

    return float(np.clip(np.dot(a, b) / denominator, -1.0, 1.0))


def compute_similarity_matrix(images: Sequence[SelectedImage],
                              feature_type: str) -> np.ndarray:
    """
    Full pairwise similarity matrix for one feature type.

    Args:
        images: Selected images in display order.
        feature_type: Feature type whose vectors are compared.

    Returns:
        Float64 array of shape (n, n) with n = len(images).

    Raises:
        InvalidFeatureType: If the identifier is unknown.
        DimensionMismatch: If two vectors of the type differ in length.
    """
    validate_feature_type(feature_type)
    n = len(images)
    matrix = np.zeros((n, n), dtype=np.float64)

    for i in range(n):
        matrix[i, i] = 1.0
        vec_a = images[i].vector(feature_type)
        for j in range(i + 1, n):
            vec_b = images[j].vector(feature_type)
            if vec_a is None or vec_b is None:
                continue
            matrix[i, j] = matrix[j, i] = cosine_similarity(vec_a, vec_b)

    logger.debug(f"Computed {n}x{n} {feature_type} similarity matrix")
    return matrix


def similarity_pairs(images: Sequence[SelectedImage],
                     matrix: np.ndarray) -> List[Dict[str, Any]]:
    """
    List each unordered image pair once, in selection order.

    Returns:
        List of dicts with 'first', 'second' (image ids), 'first_index',
        'second_index' and 'similarity'. Empty when the matrix doesn't
        cover the images (fewer than two selected).
    """
    n = len(images)
    if matrix.shape != (n, n):
        return []

    pairs = []
    for i in range(n):
        for j in range(i + 1, n):
            pairs.append({
                "first": images[i].id,
                "second": images[j].id,
                "first_index": i,
                "second_index": j,
                "similarity": float(matrix[i, j]),
            })
    return pairs


def rank_pairs(pairs: list) -> list:
    """
    Sort pairs by similarity (highest first), then by selection order.

    Args:
        pairs: List of dicts from similarity_pairs().

    Returns:
        Sorted list.
    """
    return sorted(
        pairs,
        key=lambda x: (-x['similarity'], x['first_index'], x['second_index'])
    )
