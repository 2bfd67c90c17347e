from menu_reports.metrics import MetricCard, build_metric_cards
from menu_reports.models import AnalyticsData


def test_cards_follow_grid_order(analytics):
    cards = build_metric_cards(analytics)
    assert [c.label for c in cards] == ["Total Menu Views", "QR Code Scans", "Popular Items", "Categories"]
    assert cards[0].value == f"{analytics.views_total:,}"
    assert cards[2].value == "5"
    assert cards[3].value == "4"


def test_trend_direction():
    assert MetricCard("Views", "1", 12.5).trend == "up"
    assert MetricCard("Views", "1", 0.0).trend == "up"
    assert MetricCard("Scans", "1", -3.2).trend == "down"
    assert MetricCard("Items", "5").trend is None


def test_change_text():
    assert MetricCard("Views", "1", 15.24).change_text == "+15.2%"
    assert MetricCard("Scans", "1", -3.2).change_text == "-3.2%"
    assert MetricCard("Items", "5").change_text == ""


def test_cards_for_empty_data():
    cards = build_metric_cards(AnalyticsData())
    assert [c.value for c in cards] == ["0", "0", "0", "0"]
