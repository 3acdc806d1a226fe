"""Error handlers for the REST API."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ledlayout.application.document import LayoutImportError

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers with the FastAPI app."""

    @app.exception_handler(LayoutImportError)
    async def layout_import_error_handler(
        request: Request, exc: LayoutImportError
    ) -> JSONResponse:
        logger.info(f"Rejected layout document ({exc.error_type}) on {request.url.path}")
        return JSONResponse(
            status_code=422,
            content={
                "error": exc.message,
                "error_type": exc.error_type,
                "details": exc.details or None,
            },
        )
