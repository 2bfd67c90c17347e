import math

import pytest

from menu_reports.chart_renderer import ChartRenderer, Rect, pie_slices
from menu_reports.config import SERIES_COLORS
from menu_reports.models import DeviceShare, PopularItem, ViewsPoint

RECT = Rect(20, 60, 160, 50)


@pytest.fixture
def charts(pdf):
    return ChartRenderer(pdf)


def _items(count, views=lambda i: 100 + i):
    return [PopularItem(f"Item {i}", "Main", views(i), 0.0) for i in range(count)]


def test_bars_keep_input_order_and_scale_to_max(charts):
    result = charts.draw_bar(_items(4, lambda i: (i + 1) * 25), RECT, "Views", lambda i: i.views, lambda i: i.name)
    xs = [bar.x for bar in result.bars]
    assert xs == sorted(xs)
    assert [bar.label for bar in result.bars] == ["Item 0", "Item 1", "Item 2", "Item 3"]
    heights = [bar.height for bar in result.bars]
    assert heights[3] == pytest.approx(RECT.height - 20)
    assert heights[0] == pytest.approx(heights[3] / 4)
    assert result.max_value == 100


def test_bars_are_capped_at_ten(charts):
    result = charts.draw_bar(_items(12), RECT, "Views", lambda i: i.views, lambda i: i.name)
    assert len(result.bars) == 10
    assert result.truncated == 2
    assert result.bar_width == pytest.approx(14)


def test_large_values_are_abbreviated(charts):
    result = charts.draw_bar(_items(2, lambda i: 1500 if i == 0 else 200), RECT, "Views", lambda i: i.views)
    assert result.bars[0].value_label == "1.5k"
    assert result.bars[1].value_label == "200"


def test_narrow_bars_drop_value_labels(charts):
    result = charts.draw_bar(_items(10), Rect(20, 60, 100, 50), "Views", lambda i: i.views, lambda i: i.name)
    assert result.bar_width == pytest.approx(8)
    assert all(bar.value_label is None for bar in result.bars)


def test_zero_values_get_no_label(charts):
    result = charts.draw_bar(_items(3, lambda i: 0), RECT, "Views", lambda i: i.views)
    assert result.max_value == 0
    assert all(bar.height == 0 for bar in result.bars)
    assert all(bar.value_label is None for bar in result.bars)


def test_empty_series_draws_only_the_frame(charts):
    assert charts.draw_bar([], RECT, "Views", lambda i: i.views).bars == ()
    assert charts.draw_line(None, RECT, "Trend", lambda p: p.views).points == ()
    assert charts.draw_pie([], RECT, "Devices", lambda d: d.count, lambda d: d.device_name).entries == ()


def test_bad_values_are_plotted_as_zero(charts):
    series = [{"views": None}, {"views": float("nan")}, {}, {"views": 40}]
    result = charts.draw_bar(series, RECT, "Views", lambda row: row["views"])
    assert [bar.value for bar in result.bars] == [0.0, 0.0, 0.0, 40.0]
    assert all(math.isfinite(bar.height) for bar in result.bars)


def test_line_labels_every_third_point_for_fifteen(charts):
    series = [ViewsPoint(f"2026-10-{d:02d}", 10 * d, d) for d in range(1, 16)]
    result = charts.draw_line(series, RECT, "Trend", lambda p: p.views, overlay_selector=lambda p: p.scans)
    labelled = [i for i, point in enumerate(result.points) if point.label is not None]
    assert labelled == [0, 3, 6, 9, 12]
    assert len(result.overlay_points) == 15
    assert result.max_value == 150


def test_line_points_run_left_to_right_and_peak_is_highest(charts):
    series = [ViewsPoint("d", v, 0) for v in (5, 50, 20)]
    result = charts.draw_line(series, RECT, "Trend", lambda p: p.views)
    xs = [p.x for p in result.points]
    assert xs == sorted(xs)
    assert min(result.points, key=lambda p: p.y).value == 50


def test_single_point_sits_in_the_middle(charts):
    result = charts.draw_line([ViewsPoint("d", 10, 0)], RECT, "Trend", lambda p: p.views)
    assert result.points[0].x == pytest.approx(RECT.x + RECT.width / 2)


def test_pie_legend_uses_given_percentages(charts):
    devices = [DeviceShare("Mobile", 876, 68.2), DeviceShare("Desktop", 245, 19.1), DeviceShare("Tablet", 163, 12.7)]
    result = charts.draw_pie(
        devices,
        RECT,
        "Devices",
        lambda d: d.count,
        lambda d: d.device_name,
        percentage_selector=lambda d: d.percentage,
    )
    assert [e.text for e in result.entries] == ["Mobile (68.2%)", "Desktop (19.1%)", "Tablet (12.7%)"]
    assert [e.color for e in result.entries] == list(SERIES_COLORS[:3])
    assert sum(sweep for _, sweep in result.slices) == pytest.approx(360)


def test_pie_legend_cycles_colors_and_names_blank_labels(charts):
    devices = [DeviceShare("" if i == 2 else f"D{i}", 10, 0) for i in range(8)]
    result = charts.draw_pie(devices, RECT, "Devices", lambda d: d.count, lambda d: d.device_name, wedges=True)
    assert len(result.entries) == 8
    assert result.entries[2].label == "Item 3"
    assert result.entries[6].color == SERIES_COLORS[0]
    assert result.entries[0].text == "D0 (12.5%)"


def test_pie_slices_handle_zero_total():
    assert pie_slices([0, 0]) == [(0.0, 0.0), (0.0, 0.0)]
    starts = [start for start, _ in pie_slices([1, 1, 2])]
    assert starts == pytest.approx([0, 90, 180])
