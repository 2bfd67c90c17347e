from datetime import date, datetime

import pytest
from fpdf import FPDF

from menu_reports.data_loader import demo_analytics
from menu_reports.models import ExportOptions

FIXED_NOW = datetime(2026, 10, 19, 9, 30)


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def analytics():
    return demo_analytics(seed=7, days=30, today=date(2026, 10, 19))


@pytest.fixture
def all_options() -> ExportOptions:
    return ExportOptions.defaults()


@pytest.fixture
def pdf() -> FPDF:
    canvas = FPDF(orientation="P", unit="mm", format="A4")
    canvas.set_auto_page_break(auto=False)
    canvas.add_page()
    canvas.set_font("Helvetica", "", 10)
    return canvas
