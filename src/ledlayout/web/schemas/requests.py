"""Pydantic request schemas for the REST API."""

from typing import Any

from pydantic import BaseModel, Field


class LayoutRequest(BaseModel):
    """Request carrying a layout document."""

    layout: dict[str, Any] = Field(..., description="Layout JSON document")
