"""Data models for images and their computed features."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Union

import numpy as np

ImageId = Union[int, str]


@dataclass(frozen=True)
class ImageReference:
    """
    An image the user can select.

    The source is either a static asset reference (a path such as
    /images/samples/cat.png) or an inline data URI produced by upload.
    """

    id: ImageId
    src: str
    alt: str
    description: str = ""


def freeze_features(features: Dict[str, np.ndarray]) -> Mapping[str, np.ndarray]:
    """Read-only view of a feature map whose vectors can't be written."""
    frozen = {}
    for feature_type, vector in features.items():
        vector = np.array(vector, dtype=np.float64)
        vector.setflags(write=False)
        frozen[feature_type] = vector
    return MappingProxyType(frozen)


@dataclass
class SelectedImage:
    """An image admitted to the selection, with one vector per feature type."""

    image: ImageReference
    features: Mapping[str, np.ndarray] = field(default_factory=dict)

    @property
    def id(self) -> ImageId:
        return self.image.id

    def vector(self, feature_type: str) -> Optional[np.ndarray]:
        return self.features.get(feature_type)
