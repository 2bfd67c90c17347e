import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

import pandas as pd

from .config import DEFAULT_SUBJECT_NAME
from .document import build_document
from .formats import filename_for, get_format
from .models import AnalyticsData, ExportOptions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportArtifact:
    filename: str
    content: bytes
    mime_type: str
    fmt: str
    sections: Tuple[str, ...] = ()

    @property
    def size(self) -> int:
        return len(self.content)


# ---- structured (JSON)
def build_structured_export(
    data: AnalyticsData,
    options: ExportOptions,
    subject_name: str,
    now: datetime,
) -> Dict[str, Any]:
    """Nested export object: summary always, raw slices only when their flags allow."""
    export: Dict[str, Any] = {
        "restaurant": subject_name,
        "generatedAt": now.isoformat(),
        "dateRange": options.date_range_label,
        "summary": {
            "totalMenuViews": data.views_total,
            "totalQRScans": data.scans_total,
            "viewsChange": data.views_change_pct,
            "scansChange": data.scans_change_pct,
            "totalPopularItems": len(data.popular_items),
            "totalCategories": len(data.category_performance),
        },
    }
    if options.include_raw_data:
        export["viewsTrend"] = [p.to_dict() for p in data.views_series]
        if options.include_popular_items:
            export["popularItems"] = [i.to_dict() for i in data.popular_items]
        export["categoryPerformance"] = [c.to_dict() for c in data.category_performance]
        if options.include_traffic_patterns:
            export["timeDistribution"] = [t.to_dict() for t in data.time_distribution]
        if options.include_device_stats:
            export["deviceBreakdown"] = [d.to_dict() for d in data.device_breakdown]
    return export


# ---- flat table (CSV)
@dataclass(frozen=True)
class RowGroup:
    kind: str
    title: str
    header: Tuple[str, ...]
    rows: Tuple[Tuple[Any, ...], ...]


def _summary_group(data: AnalyticsData, options: ExportOptions, subject_name: str, now: datetime) -> RowGroup:
    return RowGroup(
        kind="summary",
        title="ANALYTICS SUMMARY",
        header=(),
        rows=(
            ("Restaurant", subject_name),
            ("Generated At", now.strftime("%d/%m/%Y, %H:%M:%S")),
            ("Date Range", options.date_range_label),
            ("Total Menu Views", data.views_total),
            ("Menu Views Change", f"{data.views_change_pct:g}%"),
            ("Total QR Scans", data.scans_total),
            ("QR Scans Change", f"{data.scans_change_pct:g}%"),
        ),
    )


def _popular_group(data: AnalyticsData) -> RowGroup:
    return RowGroup(
        kind="popular_items",
        title="POPULAR ITEMS",
        header=("Rank", "Item Name", "Category", "Views", "Change %"),
        rows=tuple(
            (rank, item.name, item.category, item.views, f"{item.change_pct:g}%")
            for rank, item in enumerate(data.popular_items, start=1)
        ),
    )


def _category_group(data: AnalyticsData) -> RowGroup:
    return RowGroup(
        kind="category_performance",
        title="CATEGORY PERFORMANCE",
        header=("Category Name", "Views", "Total Items", "Average Rating"),
        rows=tuple(
            (c.name, c.views, c.item_count, c.avg_rating if c.avg_rating else "N/A")
            for c in data.category_performance
        ),
    )


def _traffic_group(data: AnalyticsData) -> RowGroup:
    return RowGroup(
        kind="traffic",
        title="TRAFFIC BY TIME OF DAY",
        header=("Hour", "Views"),
        rows=tuple((t.hour_label, t.views) for t in data.time_distribution),
    )


def _device_group(data: AnalyticsData) -> RowGroup:
    return RowGroup(
        kind="devices",
        title="DEVICE BREAKDOWN",
        header=("Device Type", "Count", "Percentage"),
        rows=tuple((d.device_name, d.count, f"{d.percentage:g}%") for d in data.device_breakdown),
    )


DATA_GROUPS: Tuple[Tuple[Callable[[ExportOptions], bool], Callable[[AnalyticsData], RowGroup]], ...] = (
    (lambda o: o.include_popular_items, _popular_group),
    (lambda o: True, _category_group),
    (lambda o: o.include_traffic_patterns, _traffic_group),
    (lambda o: o.include_device_stats, _device_group),
)


def build_row_groups(
    data: AnalyticsData,
    options: ExportOptions,
    subject_name: str,
    now: datetime,
) -> List[RowGroup]:
    groups = [_summary_group(data, options, subject_name, now)]
    groups.extend(builder(data) for enabled, builder in DATA_GROUPS if enabled(options))
    return groups


def build_flat_rows(groups: List[RowGroup]) -> List[List[str]]:
    lines: List[List[Any]] = []
    for group in groups:
        lines.append([group.title, ""])
        if group.header:
            lines.append(list(group.header))
        lines.extend(list(row) for row in group.rows)
        lines.append([""])
    return [["" if cell is None else str(cell) for cell in line] for line in lines]


def serialize_flat(rows: List[List[str]]) -> str:
    width = max((len(r) for r in rows), default=0)
    padded = [r + [""] * (width - len(r)) for r in rows]
    return pd.DataFrame(padded, dtype=str).to_csv(index=False, header=False)


# ---- dispatcher
def export_analytics(
    data: AnalyticsData,
    options: Optional[ExportOptions] = None,
    subject_name: str = DEFAULT_SUBJECT_NAME,
    fmt: str = "pdf",
    now: Optional[datetime] = None,
    pie_wedges: bool = False,
) -> ExportArtifact:
    """
    Render one export artifact. PDF goes through the document engine; JSON
    and CSV only reshape the data. Raises UnsupportedFormat for unknown
    formats and RenderFailure when the PDF cannot be drawn.
    """
    export_format = get_format(fmt)
    options = options if options is not None else ExportOptions.defaults()
    now = now or datetime.now()
    filename = filename_for(export_format.id, subject_name, now.date())
    logger.info("exporting %s analytics for %r as %s", export_format.id, subject_name, filename)

    sections: Tuple[str, ...] = ()
    if export_format.id == "pdf":
        rendered = build_document(data, options, subject_name, generated_at=now, pie_wedges=pie_wedges)
        content = rendered.content
        sections = rendered.section_ids
    elif export_format.id == "json":
        payload = build_structured_export(data, options, subject_name, now)
        content = json.dumps(payload, indent=2, ensure_ascii=False).encode("utf-8")
    else:
        groups = build_row_groups(data, options, subject_name, now)
        content = serialize_flat(build_flat_rows(groups)).encode("utf-8")

    logger.info("export %s ready (%d bytes)", filename, len(content))
    return ExportArtifact(
        filename=filename,
        content=content,
        mime_type=export_format.mime_type,
        fmt=export_format.id,
        sections=sections,
    )
