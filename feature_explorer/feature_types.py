"""
Feature type identifiers, vector dimensions and method catalog.

The eight supported feature types form a closed set. Each identifier
fixes the length of the vectors produced for it; every other module
reads dimensions from FEATURE_DIMENSIONS rather than hard-coding them.

Two categories are represented:
    Machine Learning   resnet, vgg, mobilenet
    Traditional        sift, hog, lbp, color_histogram, orb
"""

import logging
from dataclasses import dataclass
from typing import Dict, List

logger = logging.getLogger(__name__)

MACHINE_LEARNING = "Machine Learning"
TRADITIONAL = "Traditional"

# Selection order: also the order feature maps are populated in.
FEATURE_TYPES = (
    "resnet",
    "vgg",
    "mobilenet",
    "sift",
    "hog",
    "lbp",
    "color_histogram",
    "orb",
)

FEATURE_DIMENSIONS = {
    "resnet": 2048,
    "vgg": 4096,
    "mobilenet": 1024,
    "sift": 128,
    "hog": 3780,
    "lbp": 256,
    "color_histogram": 768,
    "orb": 256,
}


class InvalidFeatureType(ValueError):
    """Raised when an identifier outside FEATURE_TYPES is used."""


@dataclass(frozen=True)
class FeatureInfo:
    """Descriptive metadata for one feature extraction method."""

    value: str
    label: str
    category: str
    license: str
    description: str
    repository: str
    paper: str

    @property
    def dimensions(self) -> int:
        return FEATURE_DIMENSIONS[self.value]


FEATURE_CATALOG: Dict[str, FeatureInfo] = {
    "resnet": FeatureInfo(
        value="resnet",
        label="ResNet-50",
        category=MACHINE_LEARNING,
        license="Apache 2.0",
        description="Deep Residual Network with skip connections",
        repository="https://github.com/pytorch/vision",
        paper="Deep Residual Learning for Image Recognition (2015)",
    ),
    "vgg": FeatureInfo(
        value="vgg",
        label="VGG-16",
        category=MACHINE_LEARNING,
        license="MIT",
        description="Visual Geometry Group Convolutional Neural Network",
        repository="https://github.com/pytorch/vision",
        paper="Very Deep Convolutional Networks for Large-Scale Image Recognition (2014)",
    ),
    "mobilenet": FeatureInfo(
        value="mobilenet",
        label="MobileNet",
        category=MACHINE_LEARNING,
        license="Apache 2.0",
        description="Efficient CNN for mobile and embedded vision applications",
        repository="https://github.com/tensorflow/models",
        paper="MobileNets: Efficient Convolutional Neural Networks for "
              "Mobile Vision Applications (2017)",
    ),
    "sift": FeatureInfo(
        value="sift",
        label="SIFT",
        category=TRADITIONAL,
        license="BSD",
        description="Scale-Invariant Feature Transform for keypoint detection",
        repository="https://github.com/opencv/opencv",
        paper="Distinctive Image Features from Scale-Invariant Keypoints (2004)",
    ),
    "hog": FeatureInfo(
        value="hog",
        label="HOG",
        category=TRADITIONAL,
        license="BSD",
        description="Histogram of Oriented Gradients for object detection",
        repository="https://github.com/scikit-image/scikit-image",
        paper="Histograms of Oriented Gradients for Human Detection (2005)",
    ),
    "lbp": FeatureInfo(
        value="lbp",
        label="LBP",
        category=TRADITIONAL,
        license="BSD",
        description="Local Binary Patterns for texture classification",
        repository="https://github.com/scikit-image/scikit-image",
        paper="Multiresolution Gray-Scale and Rotation Invariant Texture "
              "Classification with Local Binary Patterns (2002)",
    ),
    "color_histogram": FeatureInfo(
        value="color_histogram",
        label="Color Histogram",
        category=TRADITIONAL,
        license="Public Domain",
        description="RGB color distribution histogram",
        repository="https://github.com/opencv/opencv",
        paper="Color indexing (1991)",
    ),
    "orb": FeatureInfo(
        value="orb",
        label="ORB",
        category=TRADITIONAL,
        license="BSD",
        description="Oriented FAST and Rotated BRIEF feature detector",
        repository="https://github.com/opencv/opencv",
        paper="ORB: An efficient alternative to SIFT or SURF (2011)",
    ),
}


def validate_feature_type(feature_type: str) -> str:
    """
    Check that an identifier belongs to the closed set.

    Returns:
        The identifier unchanged.

    Raises:
        InvalidFeatureType: If the identifier is not supported.
    """
    if feature_type not in FEATURE_DIMENSIONS:
        raise InvalidFeatureType(
            f"Unknown feature type {feature_type!r}; expected one of "
            f"{', '.join(FEATURE_TYPES)}"
        )
    return feature_type


def feature_dimension(feature_type: str) -> int:
    """Fixed vector length for a feature type."""
    return FEATURE_DIMENSIONS[validate_feature_type(feature_type)]


def feature_info(feature_type: str) -> FeatureInfo:
    return FEATURE_CATALOG[validate_feature_type(feature_type)]


def feature_types_by_category(category: str) -> List[FeatureInfo]:
    """Catalog entries of one category, in FEATURE_TYPES order."""
    return [FEATURE_CATALOG[t] for t in FEATURE_TYPES
            if FEATURE_CATALOG[t].category == category]
