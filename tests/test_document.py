import pytest

from menu_reports.document import (
    CHART_SECTIONS,
    DocumentAssembler,
    RenderFailure,
    ReportPDF,
    build_document,
)
from menu_reports.exporters import export_analytics
from menu_reports.models import AnalyticsData, DeviceShare, ExportOptions, PopularItem

FULL_PLAN = (
    "cover",
    "metrics",
    "views_trend",
    "popular_items_chart",
    "category_chart",
    "device_breakdown",
    "popular_items_table",
    "category_table",
    "footer",
)


def test_full_export_renders_every_section(analytics, all_options, now):
    artifact = export_analytics(analytics, all_options, "Test Cafe", "pdf", now=now)
    assert artifact.filename == "analytics-report-test-cafe-2026-10-19.pdf"
    assert artifact.mime_type == "application/pdf"
    assert artifact.content.startswith(b"%PDF")
    assert artifact.sections == FULL_PLAN


def test_charts_off_skips_every_chart_section(analytics, now):
    options = ExportOptions(include_charts=False)
    rendered = build_document(analytics, options, "Test Cafe", now)
    assert not set(CHART_SECTIONS) & set(rendered.section_ids)
    assert rendered.section_ids == ("cover", "metrics", "popular_items_table", "category_table", "footer")


def test_flags_gate_their_sections(analytics, now):
    options = ExportOptions(include_popular_items=False, include_device_stats=False, include_raw_data=False)
    rendered = build_document(analytics, options, "Test Cafe", now)
    assert rendered.section_ids == ("cover", "metrics", "views_trend", "category_chart", "footer")


def test_many_items_cap_the_chart_but_not_the_table(analytics, all_options, now):
    items = tuple(PopularItem(f"Item {i}", "Main", 200 - i, 1.0) for i in range(12))
    data = AnalyticsData(
        views_series=analytics.views_series,
        popular_items=items,
        category_performance=analytics.category_performance,
        device_breakdown=analytics.device_breakdown,
    )
    rendered = build_document(data, all_options, "Test Cafe", now)
    chart = rendered.results["popular_items_chart"]
    assert len(chart.bars) == 10
    assert chart.truncated == 2
    assert rendered.results["popular_items_table"] == 12


def test_device_legend_lists_each_device(analytics, all_options, now):
    rendered = build_document(analytics, all_options, "Test Cafe", now)
    legend = [e.text for e in rendered.results["device_breakdown"].entries]
    assert legend == ["Mobile (68.2%)", "Desktop (19.1%)", "Tablet (12.7%)"]


def test_trend_uses_the_most_recent_points(analytics, all_options, now):
    rendered = build_document(analytics, all_options, "Test Cafe", now)
    trend = rendered.results["views_trend"]
    assert len(trend.points) == 15
    assert [p.value for p in trend.points] == [float(p.views) for p in analytics.views_series[-15:]]


def test_footer_lands_on_the_last_page(analytics, all_options, now):
    rendered = build_document(analytics, all_options, "Test Cafe", now)
    assert rendered.page_count > 1
    footer = rendered.sections[-1]
    assert footer.id == "footer"
    assert footer.page_index == rendered.page_count - 1
    page_indexes = [s.page_index for s in rendered.sections]
    assert page_indexes == sorted(page_indexes)


def test_empty_analytics_still_renders(all_options, now):
    rendered = build_document(AnalyticsData(), all_options, "Test Cafe", now)
    assert rendered.content.startswith(b"%PDF")
    assert rendered.section_ids == FULL_PLAN
    assert rendered.results["popular_items_table"] == 0


def test_unicode_subject_and_labels_render(analytics, all_options, now):
    data = AnalyticsData(
        popular_items=(PopularItem("Crème brûlée ☕", "Desserts 🍰", 42, -1.5),),
        device_breakdown=(DeviceShare("Téléphone", 10, 100.0),),
    )
    rendered = build_document(data, all_options, "Café Ünïcode ☕", now)
    assert rendered.content.startswith(b"%PDF")
    assert rendered.results["device_breakdown"].entries[0].text == "Tlphone (100%)"


def test_pie_wedges_render(analytics, all_options, now):
    rendered = build_document(analytics, all_options, "Test Cafe", now, pie_wedges=True)
    assert sum(sweep for _, sweep in rendered.results["device_breakdown"].slices) == pytest.approx(360)


def test_canvas_failure_surfaces_as_render_failure(analytics, all_options, now, monkeypatch):
    def broken_rect(self, *args, **kwargs):
        raise ValueError("canvas rejected rect")

    monkeypatch.setattr(ReportPDF, "rect", broken_rect)
    with pytest.raises(RenderFailure) as excinfo:
        build_document(analytics, all_options, "Test Cafe", now)
    assert isinstance(excinfo.value.__cause__, ValueError)


def test_assembler_is_single_use(analytics, all_options, now):
    assembler = DocumentAssembler(analytics, all_options, "Test Cafe", now)
    assembler.assemble()
    with pytest.raises(RuntimeError):
        assembler.assemble()
