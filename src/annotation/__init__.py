"""Encrypted annotation dataset, hit testing and overlay rendering.

This package provides the core functionality for:
- Deriving the AES-256 key and decrypting the dataset file
- Point-in-polygon hit testing with disabled-region skipping
- Composing server-side SVG overlays so vertices never reach the browser
"""

from .errors import (
    AnnotationError,
    DatasetInvalidError,
    DatasetNotFoundError,
    DatasetUnreadableError,
    DecryptionError,
    KeyLengthError,
    PayloadTooShortError,
)
from .geometry import find_region_containing_point, is_point_inside_polygon
from .keys import derive_key
from .loader import load_annotation_dataset
from .models import AnnotationBoundary, AnnotationDataset, AnnotationPoint, RegionHit
from .regions import get_boundary_by_id
from .render import render_overlay_svg
from .state import DisabledRegionStore

__all__ = [
    "AnnotationBoundary",
    "AnnotationDataset",
    "AnnotationError",
    "AnnotationPoint",
    "DatasetInvalidError",
    "DatasetNotFoundError",
    "DatasetUnreadableError",
    "DecryptionError",
    "DisabledRegionStore",
    "KeyLengthError",
    "PayloadTooShortError",
    "RegionHit",
    "derive_key",
    "find_region_containing_point",
    "get_boundary_by_id",
    "is_point_inside_polygon",
    "load_annotation_dataset",
    "render_overlay_svg",
]
