import json
import os
import random
from datetime import date, timedelta
from pathlib import Path
from typing import Optional

from .config import DEFAULT_DATA_FILENAME, ENV_DATA_PATH
from .models import (
    AnalyticsData,
    CategoryPerformance,
    DeviceShare,
    HourlyViews,
    PopularItem,
    ViewsPoint,
)


def _default_candidates(default_filename: str) -> list[Path]:
    here = Path(__file__).resolve().parent
    return [
        here / "data" / default_filename,
        here.parent / "data" / default_filename,
        here.parent / default_filename,
    ]


def resolve_data_path(default_filename: str = DEFAULT_DATA_FILENAME) -> str:
    """
    Resolve an analytics JSON path from env or common locations.
    Returns an empty string if nothing is found so callers can fall back to demo data.
    """
    env_path = os.getenv(ENV_DATA_PATH, "").strip()
    if env_path:
        return env_path

    for candidate in _default_candidates(default_filename):
        if candidate.exists():
            return str(candidate)
    return ""


def load_analytics(path: str) -> AnalyticsData:
    if not path:
        raise FileNotFoundError(f"Analytics path is empty. Set {ENV_DATA_PATH} or place {DEFAULT_DATA_FILENAME} in ./data.")
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError(f"{path}: expected a JSON object at the top level")
    return AnalyticsData.from_dict(payload)


DEMO_ITEMS = (
    ("Grilled Salmon", "Main Course", 156, 15.2),
    ("Caesar Salad", "Appetizers", 134, -2.1),
    ("Chocolate Cake", "Desserts", 128, 9.8),
    ("Margherita Pizza", "Main Course", 98, 23.4),
    ("Iced Coffee", "Beverages", 87, 5.7),
)
DEMO_CATEGORIES = (("Main Course", 8), ("Appetizers", 6), ("Desserts", 4), ("Beverages", 10))
DEMO_DEVICES = (("Mobile", 876, 68.2), ("Desktop", 245, 19.1), ("Tablet", 163, 12.7))


def _hour_baseline(hour: int) -> int:
    if 11 <= hour <= 14:
        return 20
    if 18 <= hour <= 21:
        return 25
    return 5


def demo_analytics(seed: int = 7, days: int = 30, today: Optional[date] = None) -> AnalyticsData:
    """
    Deterministic stand-in for the dashboard feed: daily views 20..119 and
    scans 10..59, a lunch/dinner shaped hourly curve and a fixed device mix.
    """
    rng = random.Random(seed)
    end = today or date.today()
    series = tuple(
        ViewsPoint(
            date=(end - timedelta(days=days - 1 - i)).isoformat(),
            views=rng.randint(20, 119),
            scans=rng.randint(10, 59),
        )
        for i in range(days)
    )
    return AnalyticsData(
        views_series=series,
        views_total=sum(p.views for p in series),
        views_change_pct=12.5,
        scans_total=sum(p.scans for p in series),
        scans_change_pct=-3.2,
        popular_items=tuple(PopularItem(n, c, v, ch) for n, c, v, ch in DEMO_ITEMS),
        category_performance=tuple(
            CategoryPerformance(name, rng.randint(50, 249), count, round(rng.uniform(3, 5), 1))
            for name, count in DEMO_CATEGORIES
        ),
        time_distribution=tuple(
            HourlyViews(f"{h}:00", rng.randint(0, 29) + _hour_baseline(h)) for h in range(24)
        ),
        device_breakdown=tuple(DeviceShare(name, count, pct) for name, count, pct in DEMO_DEVICES),
    )
