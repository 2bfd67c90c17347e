import re
from dataclasses import dataclass
from datetime import date
from typing import Dict, Tuple


@dataclass(frozen=True)
class ExportFormat:
    id: str
    label: str
    extension: str
    mime_type: str
    filename_prefix: str
    description: str
    features: Tuple[str, ...] = ()


@dataclass(frozen=True)
class OptionToggle:
    key: str
    label: str
    description: str
    pdf_only: bool = False


EXPORT_FORMATS: Dict[str, ExportFormat] = {
    "pdf": ExportFormat(
        id="pdf",
        label="PDF Report",
        extension="pdf",
        mime_type="application/pdf",
        filename_prefix="analytics-report",
        description="Professional report with charts and visualizations",
        features=("Charts & Graphs", "Formatted Tables", "Professional Layout", "Print Ready"),
    ),
    "json": ExportFormat(
        id="json",
        label="JSON Data",
        extension="json",
        mime_type="application/json",
        filename_prefix="analytics",
        description="Structured data for developers and integrations",
        features=("Raw Data", "API Compatible", "Machine Readable", "Lightweight"),
    ),
    "csv": ExportFormat(
        id="csv",
        label="CSV Spreadsheet",
        extension="csv",
        mime_type="text/csv",
        filename_prefix="analytics",
        description="Tabular data for Excel and spreadsheet applications",
        features=("Excel Compatible", "Easy Analysis", "Structured Tables", "Import Ready"),
    ),
}

OPTION_TOGGLES: Tuple[OptionToggle, ...] = (
    OptionToggle("include_charts", "Charts & Visualizations", "Include visual charts and graphs", pdf_only=True),
    OptionToggle("include_raw_data", "Raw Data Tables", "Include detailed data tables"),
    OptionToggle("include_popular_items", "Popular Items", "Top performing menu items"),
    OptionToggle("include_device_stats", "Device Statistics", "Mobile, desktop, tablet breakdown"),
    OptionToggle("include_traffic_patterns", "Traffic Patterns", "Time-based usage analytics"),
)


class UnsupportedFormat(ValueError):
    pass


def get_format(fmt: str) -> ExportFormat:
    try:
        return EXPORT_FORMATS[str(fmt).strip().lower()]
    except KeyError:
        raise UnsupportedFormat(f"Unknown export format: {fmt!r}") from None


def _slugify(value: str) -> str:
    return re.sub(r"\s+", "-", str(value or "").lower())


def filename_for(fmt: str, subject_name: str, day: date) -> str:
    export_format = get_format(fmt)
    return f"{export_format.filename_prefix}-{_slugify(subject_name)}-{day.isoformat()}.{export_format.extension}"
