"""FastAPI REST API for LED cabinet layouts.

This module provides a REST API for normalizing, validating and
summarizing layouts and for running the automatic data and power
assignment.

Usage:
    uvicorn ledlayout.web:app --reload
"""

from ledlayout.web.app import app, create_app

__all__ = ["app", "create_app"]
