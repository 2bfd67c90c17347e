from pathlib import Path

# Environment overrides for the export page and background jobs.
ENV_DATA_PATH = "ANALYTICS_DATA_PATH"
ENV_REPORT_DIR = "MENU_REPORT_DIR"

DEFAULT_DATA_FILENAME = "analytics.json"
DEFAULT_REPORT_DIR = Path(__file__).resolve().parent.parent / "reports"

DEFAULT_SUBJECT_NAME = "Restaurant"
DEFAULT_DATE_RANGE = "Last 30 days"
DATE_RANGE_CHOICES = ("Last 7 days", "Last 30 days", "Last 90 days")

# A4 portrait, millimetres.
PAGE_FORMAT = "A4"
PAGE_WIDTH = 210.0
PAGE_HEIGHT = 297.0
MARGIN_X = 20.0
CONTENT_TOP = 20.0
# Everything below this line is reserved for the footer summary and page number.
CONTENT_BOTTOM = PAGE_HEIGHT - 30.0
CONTENT_WIDTH = PAGE_WIDTH - 2 * MARGIN_X

# Chart geometry shared by every chart section.
CHART_WIDTH = 160.0
CHART_HEIGHT = 50.0
CHART_MARGIN = 20.0
CHART_TITLE_BAND = 15.0
CHART_LABEL_SPACE = 12.0
SECTION_BAND = 18.0
BAR_CAP = 10
BAR_LABEL_MIN_WIDTH = 12.0
BAR_NAME_MIN_WIDTH = 8.0
TREND_WINDOW = 15
LINE_LABEL_EVERY = 5

TABLE_HEADER_HEIGHT = 12.0
TABLE_ROW_HEIGHT = 8.0

PALETTE = {
    "primary": (59, 130, 246),
    "accent": (16, 185, 129),
    "warning": (245, 158, 11),
    "ink": (51, 65, 85),
    "text": (60, 60, 60),
    "muted": (107, 114, 128),
    "panel": (248, 250, 252),
    "border": (203, 213, 225),
    "rule": (226, 232, 240),
    "up": (34, 197, 94),
    "down": (239, 68, 68),
    "white": (255, 255, 255),
}

# Legend swatches cycle through these in order.
SERIES_COLORS = (
    (59, 130, 246),
    (16, 185, 129),
    (245, 158, 11),
    (239, 68, 68),
    (139, 92, 246),
    (6, 182, 212),
)

# Shared Plotly defaults for the preview charts on the export page.
PLOTLY_CONFIG = {
    "displaylogo": False,
    "modeBarButtonsToRemove": [
        "lasso2d",
        "select2d",
        "autoScale2d",
        "resetScale2d",
        "toImage",
    ],
}
