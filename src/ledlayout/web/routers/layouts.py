"""Layout processing endpoints.

Every endpoint imports the posted document, so a malformed layout is
answered with a 422 by the ``LayoutImportError`` handler.
"""

from fastapi import APIRouter

from ledlayout.application import apply_command, layout_to_dict, summarize_layout
from ledlayout.application.commands import AutoPower, AutoRoute
from ledlayout.application.document import load_layout_from_dict
from ledlayout.domain.services import Issue, validate_layout
from ledlayout.web.schemas.requests import LayoutRequest
from ledlayout.web.schemas.responses import (
    BoundsSchema,
    ControllerSummarySchema,
    FeedSummarySchema,
    IssueSchema,
    LayoutResponseSchema,
    LayoutSummarySchema,
    RouteSummarySchema,
    ValidationResultSchema,
)

router = APIRouter(prefix="/layouts", tags=["layouts"])


def _issue_schema(issue: Issue) -> IssueSchema:
    return IssueSchema(
        code=issue.code.value,
        severity=issue.severity.value,
        cabinet_ids=list(issue.cabinet_ids),
        message=issue.message,
    )


@router.post("/normalize", response_model=LayoutResponseSchema)
async def normalize_layout(request: LayoutRequest) -> LayoutResponseSchema:
    """Import a layout and return its normalized document."""
    layout = load_layout_from_dict(request.layout)
    return LayoutResponseSchema(layout=layout_to_dict(layout))


@router.post("/validate", response_model=ValidationResultSchema)
async def validate(request: LayoutRequest) -> ValidationResultSchema:
    """Validate a layout.

    Args:
        request: Request containing the layout to validate.

    Returns:
        Validation result with errors and warnings.
    """
    report = validate_layout(load_layout_from_dict(request.layout))
    return ValidationResultSchema(
        is_valid=report.is_valid,
        exit_code=report.exit_code,
        errors=[_issue_schema(i) for i in report.errors],
        warnings=[_issue_schema(i) for i in report.warnings],
    )


@router.post("/summary", response_model=LayoutSummarySchema)
async def summary(request: LayoutRequest) -> LayoutSummarySchema:
    """Summarize extent, controller load, data routes and power feeds."""
    result = summarize_layout(load_layout_from_dict(request.layout))
    bounds = result.bounds
    return LayoutSummarySchema(
        name=result.name,
        mode=result.mode,
        cabinet_count=result.cabinet_count,
        bounds=BoundsSchema(
            min_x=bounds.min_x,
            min_y=bounds.min_y,
            max_x=bounds.max_x,
            max_y=bounds.max_y,
            width_mm=bounds.width,
            height_mm=bounds.height,
            width_px=bounds.width_px,
            height_px=bounds.height_px,
        ),
        controller=ControllerSummarySchema(
            model=result.controller.value,
            port_count=result.controller.port_count,
            pixel_load=result.pixel_load,
            pixel_limit=result.pixel_limit,
            over_limit=result.controller_over_limit,
            suggested_upgrade=result.suggested_controller.value
            if result.suggested_controller
            else None,
        ),
        routes=[
            RouteSummarySchema(
                id=r.id,
                port=r.port,
                endpoints=list(r.endpoints),
                labels=list(r.labels),
                load_px=r.load_px,
                over_capacity=r.over_capacity,
                mapping_numbers=list(r.mapping_numbers),
            )
            for r in result.routes
        ],
        feeds=[
            FeedSummarySchema(
                id=f.id,
                label=f.label,
                breaker=f.breaker,
                cabinet_ids=list(f.cabinet_ids),
                load_w=f.load_w,
                limit_w=f.limit_w,
                overloaded=f.overloaded,
            )
            for f in result.feeds
        ],
        grid_labels=result.grid_labels,
        error_count=result.error_count,
        warning_count=result.warning_count,
    )


@router.post("/auto-route", response_model=LayoutResponseSchema)
async def auto_route(request: LayoutRequest) -> LayoutResponseSchema:
    """Replace the data routes with an automatic assignment."""
    layout = apply_command(load_layout_from_dict(request.layout), AutoRoute())
    return LayoutResponseSchema(layout=layout_to_dict(layout))


@router.post("/auto-power", response_model=LayoutResponseSchema)
async def auto_power(request: LayoutRequest) -> LayoutResponseSchema:
    """Replace the power feeds with an automatic assignment."""
    layout = apply_command(load_layout_from_dict(request.layout), AutoPower())
    return LayoutResponseSchema(layout=layout_to_dict(layout))
