from menu_reports.charts import device_figure, items_figure, trend_figure
from menu_reports.models import AnalyticsData, PopularItem


def test_trend_figure_shows_recent_window(analytics):
    fig = trend_figure(analytics)
    assert [t.name for t in fig.data] == ["Views", "Scans"]
    assert len(fig.data[0].x) == 15
    assert fig.data[0].x[-1] == "2026-10-19"


def test_items_figure_caps_bars():
    data = AnalyticsData(popular_items=tuple(PopularItem(f"Item {i}", "Main", i, 0) for i in range(12)))
    fig = items_figure(data)
    assert len(fig.data[0].x) == 10


def test_device_figure_cycles_colors(analytics):
    fig = device_figure(analytics, colors=[(255, 0, 0), (0, 0, 255)])
    assert list(fig.data[0].marker.colors) == ["#ff0000", "#0000ff", "#ff0000"]
    assert list(fig.data[0].labels) == ["Mobile", "Desktop", "Tablet"]
