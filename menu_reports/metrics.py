from dataclasses import dataclass
from typing import List, Optional

from .models import AnalyticsData


@dataclass(frozen=True)
class MetricCard:
    label: str
    value: str
    change_pct: Optional[float] = None

    @property
    def trend(self) -> Optional[str]:
        """'up' for a non-negative change, 'down' for a negative one, None when untracked."""
        if self.change_pct is None:
            return None
        return "up" if self.change_pct >= 0 else "down"

    @property
    def change_text(self) -> str:
        if self.change_pct is None:
            return ""
        sign = "+" if self.change_pct >= 0 else ""
        return f"{sign}{self.change_pct:.1f}%"


def build_metric_cards(data: AnalyticsData) -> List[MetricCard]:
    """Summary cards for the top of the report, in grid order."""
    return [
        MetricCard("Total Menu Views", f"{data.views_total:,}", data.views_change_pct),
        MetricCard("QR Code Scans", f"{data.scans_total:,}", data.scans_change_pct),
        MetricCard("Popular Items", str(len(data.popular_items))),
        MetricCard("Categories", str(len(data.category_performance))),
    ]
