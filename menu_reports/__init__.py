"""
Analytics report export for the restaurant menu dashboard.

The PDF path is a small layout engine built on fpdf2 drawing primitives
(charts, paginated tables, metric cards); JSON and CSV exports reshape the
same analytics payload without any layout.
"""

from .config import DEFAULT_REPORT_DIR, ENV_DATA_PATH, ENV_REPORT_DIR
from .document import RenderFailure, RenderedDocument, build_document
from .exporters import ExportArtifact, export_analytics
from .formats import EXPORT_FORMATS, UnsupportedFormat
from .models import (
    AnalyticsData,
    CategoryPerformance,
    DeviceShare,
    ExportOptions,
    HourlyViews,
    PopularItem,
    ViewsPoint,
)

__all__ = [
    "DEFAULT_REPORT_DIR",
    "ENV_DATA_PATH",
    "ENV_REPORT_DIR",
    "EXPORT_FORMATS",
    "AnalyticsData",
    "CategoryPerformance",
    "DeviceShare",
    "ExportArtifact",
    "ExportOptions",
    "HourlyViews",
    "PopularItem",
    "RenderFailure",
    "RenderedDocument",
    "UnsupportedFormat",
    "ViewsPoint",
    "build_document",
    "export_analytics",
]
