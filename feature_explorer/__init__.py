"""
feature_explorer: compare images by feature-vector cosine similarity.

Computes a real RGB color histogram from pixel data and synthetic
stand-in vectors for seven other feature families, then keeps a
pairwise similarity matrix in step with a mutable image selection.

Modules:
    feature_types    Identifiers, vector dimensions and method catalog
    models           Image reference and selected-image data models
    preprocessing    Image source decoding to RGBA pixel buffers
    histograms       RGB color histogram extraction
    synthetic        Synthetic vectors for the other feature types
    extractor        Async feature vector service
    similarity       Cosine similarity and similarity matrix
    store            Selection store with reactive recomputation
    gallery          Sample images and upload loading
    display          Chart, preview and percentage formatting
"""

__version__ = "1.0.0"

from .feature_types import FEATURE_DIMENSIONS, FEATURE_TYPES, InvalidFeatureType
from .models import ImageReference, SelectedImage
from .similarity import DimensionMismatch, compute_similarity_matrix, cosine_similarity
from .store import SelectionStore
