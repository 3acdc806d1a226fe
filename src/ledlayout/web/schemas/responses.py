"""Pydantic response schemas for the REST API."""

from typing import Any

from pydantic import BaseModel, Field


class LayoutResponseSchema(BaseModel):
    """Response carrying a normalized layout document."""

    layout: dict[str, Any] = Field(..., description="Normalized layout JSON document")


class IssueSchema(BaseModel):
    """A single validation issue."""

    code: str = Field(..., description="Issue code")
    severity: str = Field(..., description="error or warning")
    cabinet_ids: list[str] = Field(default_factory=list, description="Implicated cabinets")
    message: str = Field(..., description="Human-readable description")


class ValidationResultSchema(BaseModel):
    """Response for layout validation."""

    is_valid: bool = Field(..., description="Whether the layout has no errors")
    exit_code: int = Field(..., description="0 clean, 1 errors, 2 warnings only")
    errors: list[IssueSchema] = Field(default_factory=list, description="Errors")
    warnings: list[IssueSchema] = Field(default_factory=list, description="Warnings")


class BoundsSchema(BaseModel):
    """Overall layout extent."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float
    width_mm: float = Field(..., description="Extent width in millimeters")
    height_mm: float = Field(..., description="Extent height in millimeters")
    width_px: int = Field(..., description="Extent width in pixels")
    height_px: int = Field(..., description="Extent height in pixels")


class ControllerSummarySchema(BaseModel):
    """Controller model, load and limits."""

    model: str
    port_count: int
    pixel_load: int
    pixel_limit: int
    over_limit: bool
    suggested_upgrade: str | None = None


class RouteSummarySchema(BaseModel):
    """A data route with labels and pixel load."""

    id: str
    port: int
    endpoints: list[str]
    labels: list[str]
    load_px: int
    over_capacity: bool
    mapping_numbers: list[str | None] = Field(default_factory=list)


class FeedSummarySchema(BaseModel):
    """A power feed with its load."""

    id: str
    label: str
    breaker: str | None
    cabinet_ids: list[str]
    load_w: int
    limit_w: float | None
    overloaded: bool


class LayoutSummarySchema(BaseModel):
    """Response for the layout summary."""

    name: str
    mode: str
    cabinet_count: int
    bounds: BoundsSchema
    controller: ControllerSummarySchema
    routes: list[RouteSummarySchema] = Field(default_factory=list)
    feeds: list[FeedSummarySchema] = Field(default_factory=list)
    grid_labels: dict[str, str] = Field(default_factory=dict)
    error_count: int = 0
    warning_count: int = 0


class ErrorResponseSchema(BaseModel):
    """Standard error response."""

    error: str = Field(..., description="Error message")
    error_type: str = Field(..., description="Error type identifier")
    details: list[dict[str, Any]] | dict[str, Any] | None = Field(
        default=None, description="Additional error details"
    )
