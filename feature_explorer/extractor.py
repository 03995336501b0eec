"""
Feature vector service.

Single asynchronous entry point for computing any feature type:
color_histogram decodes the image in a worker thread and extracts the
pixel histogram, every other type is synthesized immediately.
compute_feature_map fans out over all eight types and joins them, so
a feature map is either complete or never returned.
"""

import asyncio
import logging
from typing import Dict

import numpy as np

from .feature_types import FEATURE_DIMENSIONS, FEATURE_TYPES, validate_feature_type
from .histograms import color_histogram_from_source
from .similarity import DimensionMismatch
from .synthetic import generate_synthetic_vector

logger = logging.getLogger(__name__)


async def compute_vector(feature_type: str, image_source: str) -> np.ndarray:
    """
    Compute one feature vector for an image.

    Args:
        feature_type: Supported feature type identifier.
        image_source: Data URI or static asset path.

    Returns:
        Vector with the fixed length of the feature type.

    Raises:
        InvalidFeatureType: If the identifier is unknown.
    """
    validate_feature_type(feature_type)

    if feature_type == "color_histogram":
        return await asyncio.to_thread(color_histogram_from_source, image_source)

    return generate_synthetic_vector(feature_type)


async def compute_feature_map(image_source: str,
                              compute=compute_vector) -> Dict[str, np.ndarray]:
    """
    Compute vectors for every feature type in parallel.

    Waits for all computations before returning. If any of them raises,
    the exception propagates and no partial map is produced. Every
    vector must have the fixed length of its feature type.

    Args:
        image_source: Data URI or static asset path.
        compute: Coroutine function with compute_vector's signature.

    Returns:
        Dict mapping each identifier in FEATURE_TYPES to its vector.

    Raises:
        DimensionMismatch: If a vector has the wrong length.
    """
    vectors = await asyncio.gather(
        *(compute(feature_type, image_source) for feature_type in FEATURE_TYPES)
    )
    for feature_type, vector in zip(FEATURE_TYPES, vectors):
        expected = FEATURE_DIMENSIONS[feature_type]
        if np.size(vector) != expected:
            raise DimensionMismatch(
                f"{feature_type} vector has {np.size(vector)} values, "
                f"expected {expected}"
            )

    logger.debug(f"Computed {len(vectors)} feature vectors for {image_source[:80]}")
    return dict(zip(FEATURE_TYPES, vectors))
