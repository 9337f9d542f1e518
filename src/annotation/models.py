"""Data models for the decrypted annotation dataset."""

import math
from typing import Tuple

from pydantic import BaseModel, Field, field_validator


class AnnotationPoint(BaseModel):
    """Vertex in canvas pixel coordinates."""
    x: float
    y: float

    @field_validator("x", "y")
    @classmethod
    def _finite(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("coordinates must be finite numbers")
        return value


class AnnotationPolygon(BaseModel):
    """Implicitly closed polygon; the last vertex need not repeat the first."""
    vertices: list[AnnotationPoint] = Field(default_factory=list)


class AnnotationBoundary(BaseModel):
    """One detected region.

    Polygons with fewer than three vertices are kept so that array positions
    (and therefore region ids) stay aligned with the file, but they never
    match a point and render nothing.
    """
    polygon: AnnotationPolygon
    bbox: Tuple[float, float, float, float] = (0.0, 0.0, 0.0, 0.0)  # informational only
    score: float = Field(0.0, description="Detection confidence")
    iou: float = Field(0.0, description="Mask IoU estimate")

    @property
    def vertices(self) -> list[AnnotationPoint]:
        return self.polygon.vertices


class AnnotationDataset(BaseModel):
    """Ordered boundaries; the region id is derived from the position."""
    boundaries: list[AnnotationBoundary]


class RegionHit(BaseModel):
    """Result of a successful hit test."""
    id: str
    label: str
    boundary: AnnotationBoundary
