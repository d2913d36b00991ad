"""Pydantic schemas for API request/response models."""

from enum import Enum
from pydantic import BaseModel, Field


class ReasonCode(str, Enum):
    """Machine-readable rejection category."""

    IMAGE_TOO_SMALL = "image_too_small"
    ASPECT_RATIO_EXTREME = "aspect_ratio_extreme"
    LEAF_AREA_TOO_SMALL = "leaf_area_too_small"
    LEAF_FRAGMENTED = "leaf_fragmented"
    SINGLE_COLOR_DOMINANT = "single_color_dominant"
    COLOR_TOO_UNIFORM = "color_too_uniform"
    PALETTE_TOO_LIMITED = "palette_too_limited"
    TOO_MANY_HARD_EDGES = "too_many_hard_edges"
    TEXTURE_TOO_FLAT = "texture_too_flat"
    NO_LEAF_CHARACTERISTICS = "no_leaf_characteristics"
    VALIDATION_FAILED = "validation_failed"


class ImageMetrics(BaseModel):
    """Measurements the verdict was based on."""

    width: int | None = Field(default=None, description="Analyzed grid width in pixels")
    height: int | None = Field(default=None, description="Analyzed grid height in pixels")
    green_ratio: float | None = Field(default=None, ge=0.0, le=1.0)
    largest_component_ratio: float | None = Field(default=None, ge=0.0, le=1.0)
    component_count: int | None = None
    unique_bins: int | None = Field(default=None, description="Distinct 12-bit palette codes")
    top_share: float | None = Field(default=None, ge=0.0, le=1.0)
    channel_stds: list[float] | None = Field(default=None, description="R, G, B standard deviations")
    hue_std: float | None = None
    edge_density: float | None = Field(default=None, ge=0.0, le=1.0)


class ValidationResponse(BaseModel):
    """Leaf validation response."""

    valid: bool
    reason: str | None = Field(default=None, description="User-facing explanation when rejected")
    code: ReasonCode | None = None
    processing_time_ms: int
    metrics: ImageMetrics


class ErrorDetail(BaseModel):
    """Error response detail."""

    code: str
    message: str
    details: dict = Field(default_factory=dict)
    suggestions: list[str] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Error response."""

    success: bool = False
    error: ErrorDetail
