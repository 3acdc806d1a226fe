"""Pydantic schemas for the REST API."""

from ledlayout.web.schemas.requests import LayoutRequest
from ledlayout.web.schemas.responses import (
    BoundsSchema,
    ControllerSummarySchema,
    ErrorResponseSchema,
    FeedSummarySchema,
    IssueSchema,
    LayoutResponseSchema,
    LayoutSummarySchema,
    RouteSummarySchema,
    ValidationResultSchema,
)

__all__ = [
    # Requests
    "LayoutRequest",
    # Responses
    "BoundsSchema",
    "ControllerSummarySchema",
    "ErrorResponseSchema",
    "FeedSummarySchema",
    "IssueSchema",
    "LayoutResponseSchema",
    "LayoutSummarySchema",
    "RouteSummarySchema",
    "ValidationResultSchema",
]
