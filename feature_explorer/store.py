"""
Selection store.

Holds the ordered set of selected images and the active feature type,
and keeps the similarity matrix in step with both. Every mutating call
ends by recomputing the matrix synchronously, so readers never see a
matrix that belongs to an earlier state.

Selecting an image computes all eight feature vectors in parallel and
admits the image only once every one of them is available. Selection
is keyed by image id: selecting an id that is already present does
nothing, and concurrent selects of the same id admit it once.
"""

import os
import logging
from typing import Callable, List, Optional

import numpy as np

from .extractor import compute_feature_map, compute_vector
from .feature_types import validate_feature_type
from .models import ImageId, ImageReference, SelectedImage, freeze_features
from .similarity import compute_similarity_matrix

logger = logging.getLogger(__name__)

DEFAULT_FEATURE_TYPE = os.environ.get("FEATURE_DEFAULT_TYPE", "resnet")

# A matrix is only computed once at least this many images are selected.
MIN_IMAGES_FOR_MATRIX = 2

Listener = Callable[["SelectionStore"], None]


def _empty_matrix() -> np.ndarray:
    return np.zeros((0, 0), dtype=np.float64)


class SelectionStore:
    """
    Process-wide selection state for the comparison UI.

    Observable state: selected_images, similarity_matrix and
    active_feature_type. Listeners registered with subscribe() are
    called after each recomputation.
    """

    def __init__(self,
                 feature_type: Optional[str] = None,
                 compute: Callable = compute_vector):
        """
        Args:
            feature_type: Initial active feature type. Defaults to
                FEATURE_DEFAULT_TYPE.
            compute: Coroutine function computing one vector, with the
                signature of extractor.compute_vector.
        """
        self._active_feature_type = validate_feature_type(
            feature_type or DEFAULT_FEATURE_TYPE
        )
        self._compute = compute
        self._images: List[SelectedImage] = []
        self._matrix = _empty_matrix()
        self._listeners: List[Listener] = []

    @property
    def selected_images(self) -> List[SelectedImage]:
        return list(self._images)

    @property
    def similarity_matrix(self) -> np.ndarray:
        return self._matrix.copy()

    @property
    def active_feature_type(self) -> str:
        return self._active_feature_type

    def __len__(self) -> int:
        return len(self._images)

    def __contains__(self, image_id: ImageId) -> bool:
        return self._index_of(image_id) is not None

    def _index_of(self, image_id: ImageId) -> Optional[int]:
        for i, selected in enumerate(self._images):
            if selected.id == image_id:
                return i
        return None

    async def select_image(self, image: ImageReference) -> bool:
        """
        Add an image to the selection.

        Computes the full feature map and the resulting similarity matrix
        first; if either raises, the exception propagates and the store
        is unchanged.

        Returns:
            True if the image was added, False if it was already selected.
        """
        if image.id in self:
            logger.debug(f"Image {image.id} already selected")
            return False

        features = await compute_feature_map(image.src, compute=self._compute)

        # Another select of the same id may have finished while this one
        # was suspended.
        if image.id in self:
            logger.debug(f"Image {image.id} was selected concurrently")
            return False

        selected = SelectedImage(image=image, features=freeze_features(features))
        self._commit(self._images + [selected], self._active_feature_type)
        logger.info(f"Selected image {image.id} ({len(self._images)} selected)")
        self._notify()
        return True

    def deselect_image(self, image_id: ImageId) -> bool:
        """
        Remove an image from the selection.

        Returns:
            True if the image was removed, False if it wasn't selected.
        """
        index = self._index_of(image_id)
        if index is None:
            return False

        self._commit(self._images[:index] + self._images[index + 1:],
                     self._active_feature_type)
        logger.info(f"Deselected image {image_id} ({len(self._images)} selected)")
        self._notify()
        return True

    def set_active_feature_type(self, feature_type: str) -> None:
        """
        Switch the feature type used for similarity.

        Raises:
            InvalidFeatureType: If the identifier is unknown.
        """
        self._commit(self._images, validate_feature_type(feature_type))
        logger.info(f"Active feature type set to {feature_type}")
        self._notify()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a callable run after every recomputation.

        A listener that raises is logged and skipped; the mutation that
        triggered it stands.

        Returns:
            A function that unregisters the listener.
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _commit(self, images: List[SelectedImage], feature_type: str) -> None:
        """Recompute the matrix for a candidate state, then adopt both."""
        if len(images) < MIN_IMAGES_FOR_MATRIX:
            matrix = _empty_matrix()
        else:
            matrix = compute_similarity_matrix(images, feature_type)

        self._images = images
        self._active_feature_type = feature_type
        self._matrix = matrix

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as e:
                logger.error(f"Selection listener {listener!r} failed: {e}")
