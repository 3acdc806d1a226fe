"""API routers for the REST API."""

from ledlayout.web.routers.layouts import router as layouts_router

__all__ = ["layouts_router"]
