"""Request and response bodies for the annotation gateway."""

import math

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictFloat, field_validator


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class HitRequest(_CamelModel):
    """Pointer position in canvas coordinates plus the client's queue."""
    image_id: str = Field(alias="imageId")
    x: StrictFloat
    y: StrictFloat
    queue_ids: list[str] = Field(default_factory=list, alias="queueIds")

    @field_validator("x", "y")
    @classmethod
    def _finite(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("coordinates must be finite")
        return value


class OverlayRequest(_CamelModel):
    queue_ids: list[str] = Field(default_factory=list, alias="queueIds")
    hover_id: str | None = Field(None, alias="hoverId")
    include_outline: StrictBool = Field(False, alias="includeOutline")


class InstancesRequest(BaseModel):
    """Disable (or re-enable) a batch of regions."""
    ids: list[str]
    disabled: StrictBool


class RegionSummary(BaseModel):
    id: str
    label: str
    score: float
    iou: float


class RegionMetadata(RegionSummary):
    bbox: tuple[float, float, float, float]


class HitResponse(_CamelModel):
    ok: bool = True
    hover_id: str | None = Field(None, serialization_alias="hoverId")
    overlay_image: str = Field(serialization_alias="overlayImage")
    region: RegionSummary | None = None


class OverlayResponse(_CamelModel):
    ok: bool = True
    overlay_image: str = Field(serialization_alias="overlayImage")


class InstancesResponse(_CamelModel):
    ok: bool = True
    disabled_ids: list[str] = Field(serialization_alias="disabledIds")


class MetadataResponse(BaseModel):
    ok: bool = True
    regions: list[RegionMetadata]
