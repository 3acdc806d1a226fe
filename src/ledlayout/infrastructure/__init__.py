"""Infrastructure layer - text formatters and the share-link codec."""

from .formatters import (
    GridLabelFormatter,
    LayoutSummaryFormatter,
    ValidationReportFormatter,
)
from .layout_url import decode_layout_from_url_param, encode_layout_to_url_param

__all__ = [
    "GridLabelFormatter",
    "LayoutSummaryFormatter",
    "ValidationReportFormatter",
    "decode_layout_from_url_param",
    "encode_layout_to_url_param",
]
