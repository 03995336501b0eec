"""Tests for the async feature vector service."""

import asyncio

import numpy as np
import pytest

from feature_explorer.extractor import compute_feature_map, compute_vector
from feature_explorer.feature_types import (
    FEATURE_DIMENSIONS, FEATURE_TYPES, InvalidFeatureType,
)
from feature_explorer.histograms import extract_color_histogram


class TestComputeVector:
    """Tests for single-vector dispatch."""

    @pytest.mark.parametrize("feature_type", FEATURE_TYPES)
    def test_length_matches_table(self, feature_type, red_square_uri):
        vector = asyncio.run(compute_vector(feature_type, red_square_uri))
        assert len(vector) == FEATURE_DIMENSIONS[feature_type]

    def test_color_histogram_from_pixels(self, red_square_uri, red_square_image):
        vector = asyncio.run(compute_vector("color_histogram", red_square_uri))
        np.testing.assert_allclose(vector, extract_color_histogram(red_square_image))

    def test_color_histogram_fails_soft(self):
        vector = asyncio.run(compute_vector("color_histogram", "/no/such/image.png"))
        assert vector.shape == (768,)
        assert not np.any(vector)

    def test_unknown_type_raises(self, red_square_uri):
        with pytest.raises(InvalidFeatureType):
            asyncio.run(compute_vector("surf", red_square_uri))


class TestComputeFeatureMap:
    """Tests for the all-types fan-out."""

    def test_all_types_present(self, red_square_uri):
        features = asyncio.run(compute_feature_map(red_square_uri))
        assert list(features) == list(FEATURE_TYPES)
        for feature_type, vector in features.items():
            assert len(vector) == FEATURE_DIMENSIONS[feature_type]

    def test_runs_in_parallel(self):
        active = 0
        peak = 0

        async def slow_compute(feature_type, source):
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.01)
            active -= 1
            return np.ones(FEATURE_DIMENSIONS[feature_type])

        asyncio.run(compute_feature_map("src", compute=slow_compute))
        assert peak == len(FEATURE_TYPES)

    def test_failure_propagates(self):
        async def failing_compute(feature_type, source):
            if feature_type == "hog":
                raise RuntimeError("extractor crashed")
            return np.ones(FEATURE_DIMENSIONS[feature_type])

        with pytest.raises(RuntimeError, match="crashed"):
            asyncio.run(compute_feature_map("src", compute=failing_compute))
