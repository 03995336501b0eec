"""
Synthetic stand-in vectors for the non-histogram feature types.

No model runs here. Each vector is a fresh set of i.i.d. uniform draws
whose range loosely matches the feature family:

    resnet, vgg, mobilenet   [-1, 1)   centred activations
    sift, orb                [0, 1)    normalized keypoint descriptors
    hog                      [0, 2)    non-negative gradient magnitudes
    lbp                      [0, 1)    normalized pattern histogram

Nothing is cached: two calls for the same image yield different vectors.
"""

import os
import logging
from typing import Optional

import numpy as np

from .feature_types import FEATURE_DIMENSIONS, validate_feature_type

logger = logging.getLogger(__name__)

# Optional seed for reproducible demo sessions. Successive calls still
# draw different vectors from the shared generator.
_seed = os.environ.get("FEATURE_SYNTHETIC_SEED")
_rng = np.random.default_rng(int(_seed) if _seed else None)

VALUE_RANGES = {
    "resnet": (-1.0, 1.0),
    "vgg": (-1.0, 1.0),
    "mobilenet": (-1.0, 1.0),
    "sift": (0.0, 1.0),
    "orb": (0.0, 1.0),
    "hog": (0.0, 2.0),
    "lbp": (0.0, 1.0),
}


def generate_synthetic_vector(feature_type: str,
                              rng: Optional[np.random.Generator] = None
                              ) -> np.ndarray:
    """
    Draw a synthetic feature vector.

    Args:
        feature_type: Any supported identifier except color_histogram.
        rng: Optional generator, defaults to the module-wide one.

    Returns:
        Float64 vector of FEATURE_DIMENSIONS[feature_type] values.

    Raises:
        InvalidFeatureType: If the identifier is unknown.
        ValueError: For color_histogram, which is extracted from pixels.
    """
    validate_feature_type(feature_type)
    if feature_type not in VALUE_RANGES:
        raise ValueError(
            f"{feature_type} vectors are extracted from pixel data, "
            f"not synthesized"
        )

    low, high = VALUE_RANGES[feature_type]
    if rng is None:
        rng = _rng
    return rng.uniform(low, high, FEATURE_DIMENSIONS[feature_type])
