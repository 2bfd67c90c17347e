import math
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Tuple

from .config import DEFAULT_DATE_RANGE


def _int(value: Any) -> int:
    try:
        return max(0, int(value))
    except (TypeError, ValueError, OverflowError):
        return 0


def _float(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


@dataclass(frozen=True)
class ViewsPoint:
    date: str
    views: int = 0
    scans: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"date": self.date, "views": self.views, "scans": self.scans}

    @classmethod
    def from_dict(cls, row: Dict[str, Any]) -> "ViewsPoint":
        return cls(date=str(row.get("date", "")), views=_int(row.get("views")), scans=_int(row.get("scans")))


@dataclass(frozen=True)
class PopularItem:
    name: str
    category: str
    views: int = 0
    change_pct: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "views": self.views, "category": self.category, "change": self.change_pct}

    @classmethod
    def from_dict(cls, row: Dict[str, Any]) -> "PopularItem":
        return cls(
            name=str(row.get("name", "")),
            category=str(row.get("category", "")),
            views=_int(row.get("views")),
            change_pct=_float(row.get("change")),
        )


@dataclass(frozen=True)
class CategoryPerformance:
    name: str
    views: int = 0
    item_count: int = 0
    avg_rating: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        row: Dict[str, Any] = {"name": self.name, "views": self.views, "items": self.item_count}
        if self.avg_rating is not None:
            row["avgRating"] = self.avg_rating
        return row

    @classmethod
    def from_dict(cls, row: Dict[str, Any]) -> "CategoryPerformance":
        rating = row.get("avgRating")
        return cls(
            name=str(row.get("name", "")),
            views=_int(row.get("views")),
            item_count=_int(row.get("items")),
            avg_rating=None if rating is None else _float(rating),
        )


@dataclass(frozen=True)
class HourlyViews:
    hour_label: str
    views: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"hour": self.hour_label, "views": self.views}

    @classmethod
    def from_dict(cls, row: Dict[str, Any]) -> "HourlyViews":
        return cls(hour_label=str(row.get("hour", "")), views=_int(row.get("views")))


@dataclass(frozen=True)
class DeviceShare:
    device_name: str
    count: int = 0
    percentage: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {"device": self.device_name, "count": self.count, "percentage": self.percentage}

    @classmethod
    def from_dict(cls, row: Dict[str, Any]) -> "DeviceShare":
        return cls(
            device_name=str(row.get("device", "")),
            count=_int(row.get("count")),
            percentage=_float(row.get("percentage")),
        )


@dataclass(frozen=True)
class AnalyticsData:
    """
    Pre-aggregated dashboard analytics. Read-only input to every export
    format; nothing here is computed, only reshaped.
    """

    views_series: Tuple[ViewsPoint, ...] = ()
    views_total: int = 0
    views_change_pct: float = 0.0
    scans_total: int = 0
    scans_change_pct: float = 0.0
    popular_items: Tuple[PopularItem, ...] = ()
    category_performance: Tuple[CategoryPerformance, ...] = ()
    time_distribution: Tuple[HourlyViews, ...] = ()
    device_breakdown: Tuple[DeviceShare, ...] = ()

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "AnalyticsData":
        """Build from the dashboard's camelCase payload. Missing keys become empty."""
        menu_views = payload.get("menuViews") or {}
        qr_scans = payload.get("qrScans") or {}
        return cls(
            views_series=tuple(ViewsPoint.from_dict(r) for r in menu_views.get("data") or []),
            views_total=_int(menu_views.get("total")),
            views_change_pct=_float(menu_views.get("change")),
            scans_total=_int(qr_scans.get("total")),
            scans_change_pct=_float(qr_scans.get("change")),
            popular_items=tuple(PopularItem.from_dict(r) for r in payload.get("popularItems") or []),
            category_performance=tuple(
                CategoryPerformance.from_dict(r) for r in payload.get("categoryPerformance") or []
            ),
            time_distribution=tuple(HourlyViews.from_dict(r) for r in payload.get("timeDistribution") or []),
            device_breakdown=tuple(DeviceShare.from_dict(r) for r in payload.get("deviceBreakdown") or []),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "menuViews": {
                "total": self.views_total,
                "change": self.views_change_pct,
                "data": [p.to_dict() for p in self.views_series],
            },
            "qrScans": {"total": self.scans_total, "change": self.scans_change_pct},
            "popularItems": [i.to_dict() for i in self.popular_items],
            "categoryPerformance": [c.to_dict() for c in self.category_performance],
            "timeDistribution": [t.to_dict() for t in self.time_distribution],
            "deviceBreakdown": [d.to_dict() for d in self.device_breakdown],
        }


@dataclass(frozen=True)
class ExportOptions:
    """Section toggles chosen in the export panel. Each flag gates one section."""

    include_charts: bool = True
    include_raw_data: bool = True
    include_device_stats: bool = True
    include_popular_items: bool = True
    include_traffic_patterns: bool = True
    date_range_label: str = DEFAULT_DATE_RANGE

    @classmethod
    def defaults(cls) -> "ExportOptions":
        # Always a new instance so no caller can leak changes into another export.
        return cls()

    def with_changes(self, **changes: Any) -> "ExportOptions":
        return replace(self, **changes)

    def charts_enabled(self, flag: bool = True) -> bool:
        return bool(self.include_charts and flag)
