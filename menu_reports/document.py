import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from fpdf import FPDF, XPos, YPos

from .chart_renderer import ChartRenderer, Rect
from .config import (
    CHART_HEIGHT,
    CHART_LABEL_SPACE,
    CHART_TITLE_BAND,
    CHART_WIDTH,
    CONTENT_BOTTOM,
    CONTENT_TOP,
    CONTENT_WIDTH,
    MARGIN_X,
    PAGE_FORMAT,
    PALETTE,
    SECTION_BAND,
    TABLE_HEADER_HEIGHT,
    TABLE_ROW_HEIGHT,
    TREND_WINDOW,
)
from .metrics import MetricCard, build_metric_cards
from .models import AnalyticsData, ExportOptions
from .page_layout import PageLayoutManager
from .tables import Column, TableRenderer
from .text import draw_text, sanitize

logger = logging.getLogger(__name__)

COVER_HEIGHT = 125.0
METRICS_HEIGHT = 74.0
CHART_BLOCK_HEIGHT = SECTION_BAND + 2 + CHART_TITLE_BAND + CHART_HEIGHT + CHART_LABEL_SPACE
RAW_HEADING_HEIGHT = 28.0
TABLE_TITLE_HEIGHT = 10.0
TABLE_GAP = 8.0


class RenderFailure(RuntimeError):
    """The PDF canvas rejected a drawing call; no document was produced."""


@dataclass(frozen=True)
class SectionRecord:
    id: str
    title: str
    page_index: int


@dataclass(frozen=True)
class RenderedDocument:
    content: bytes
    sections: Tuple[SectionRecord, ...]
    page_count: int
    results: Dict[str, Any] = field(default_factory=dict)

    @property
    def section_ids(self) -> Tuple[str, ...]:
        return tuple(s.id for s in self.sections)


class ReportPDF(FPDF):
    def __init__(self, header_title: str, generated_label: str):
        super().__init__(orientation="P", unit="mm", format=PAGE_FORMAT)
        self.header_title = header_title
        self.generated_label = generated_label

    def header(self):
        if self.page_no() == 1:
            return
        self.set_text_color(120, 120, 120)
        self.set_font("Helvetica", "B", 8)
        draw_text(self, MARGIN_X, 11, self.header_title)
        self.set_draw_color(*PALETTE["rule"])
        self.set_line_width(0.3)
        self.line(MARGIN_X, 13, self.w - MARGIN_X, 13)
        self.set_text_color(0, 0, 0)

    def footer(self):
        self.set_y(-8)
        self.set_text_color(150, 150, 150)
        self.set_font("Helvetica", "", 7)
        w = self.w - self.l_margin - self.r_margin
        self.cell(w / 2, 4, sanitize(self.generated_label), new_x=XPos.RIGHT, new_y=YPos.TOP, align="L")
        self.cell(w / 2, 4, f"Page {self.page_no()}", new_x=XPos.RIGHT, new_y=YPos.TOP, align="R")
        self.set_text_color(0, 0, 0)


@dataclass
class SectionSpec:
    id: str
    title: str
    enabled: Callable[[ExportOptions], bool]
    renderer: Callable[["DocumentAssembler"], Any]


class DocumentAssembler:
    """
    Walks the fixed section plan for one export. Each instance owns its
    canvas and layout, so an assembler is single-use.
    """

    def __init__(
        self,
        data: AnalyticsData,
        options: ExportOptions,
        subject_name: str,
        generated_at: Optional[datetime] = None,
        pie_wedges: bool = False,
    ):
        self.data = data
        self.options = options
        self.subject_name = subject_name
        self.generated_at = generated_at or datetime.now()
        self.pie_wedges = pie_wedges
        self.pdf: Optional[ReportPDF] = None
        self.layout: Optional[PageLayoutManager] = None
        self.charts: Optional[ChartRenderer] = None
        self.tables: Optional[TableRenderer] = None
        self._raw_heading_drawn = False

    # ---- helpers
    def _centered(self, text: str, y: float) -> None:
        clean = sanitize(text)
        x = (self.pdf.w - self.pdf.get_string_width(clean)) / 2
        draw_text(self.pdf, x, y, clean)

    def _section_band(self, y: float, title: str, fill: Tuple[int, int, int], edge: Tuple[int, int, int], ink: Tuple[int, int, int]) -> None:
        pdf = self.pdf
        pdf.set_fill_color(*fill)
        pdf.rect(MARGIN_X, y, CONTENT_WIDTH, SECTION_BAND - 4, "F")
        pdf.set_draw_color(*edge)
        pdf.set_line_width(0.3)
        pdf.rect(MARGIN_X, y, CONTENT_WIDTH, SECTION_BAND - 4, "D")
        pdf.set_font("Helvetica", "B", 14)
        pdf.set_text_color(*ink)
        draw_text(pdf, MARGIN_X + 5, y + 9.5, title)

    def _chart_block(self, title: str, colors: Tuple[Tuple[int, int, int], ...]) -> Rect:
        # Charts are placed whole; a block that does not fit starts a new page.
        y = self.layout.reserve(CHART_BLOCK_HEIGHT)
        self._section_band(y, title, *colors)
        return Rect(MARGIN_X, y + SECTION_BAND + 2 + CHART_TITLE_BAND, CHART_WIDTH, CHART_HEIGHT)

    # ---- sections
    def _render_cover(self) -> None:
        pdf = self.pdf
        self.layout.reserve(COVER_HEIGHT)
        pdf.set_fill_color(*PALETTE["primary"])
        pdf.rect(0, 0, pdf.w, 60, "F")
        pdf.set_fill_color(*PALETTE["accent"])
        pdf.rect(0, 55, pdf.w, 5, "F")

        pdf.set_text_color(*PALETTE["white"])
        pdf.set_font("Helvetica", "B", 32)
        self._centered("ANALYTICS REPORT", 28)
        pdf.set_font("Helvetica", "", 14)
        self._centered("Performance & Insights Dashboard", 45)

        subject = sanitize(self.subject_name).upper()
        pdf.set_text_color(*PALETTE["text"])
        pdf.set_font("Helvetica", "B", 20)
        self._centered(subject, 80)
        underline = pdf.get_string_width(subject)
        pdf.set_draw_color(*PALETTE["primary"])
        pdf.set_line_width(0.8)
        pdf.line(pdf.w / 2 - underline / 2, 83, pdf.w / 2 + underline / 2, 83)
        pdf.set_line_width(0.3)

        pdf.set_fill_color(*PALETTE["panel"])
        pdf.rect(MARGIN_X, 100, CONTENT_WIDTH, 35, "F")
        pdf.set_draw_color(*PALETTE["rule"])
        pdf.rect(MARGIN_X, 100, CONTENT_WIDTH, 35, "D")
        pdf.set_text_color(75, 85, 99)
        pdf.set_font("Helvetica", "B", 11)
        draw_text(pdf, 25, 110, "REPORT DETAILS")
        details = [
            ("Generated:", self.generated_at.strftime("%B %d, %Y at %I:%M %p")),
            ("Period:", self.options.date_range_label),
            ("Type:", "Complete Analytics Report"),
        ]
        for offset, (label, value) in enumerate(details):
            y = 118 + offset * 8
            pdf.set_font("Helvetica", "B", 10)
            draw_text(pdf, 25, y, label)
            pdf.set_font("Helvetica", "", 10)
            draw_text(pdf, 65, y, value)

    def _draw_trend_arrow(self, card: MetricCard, x: float, y: float) -> None:
        color = PALETTE["up"] if card.trend == "up" else PALETTE["down"]
        self.pdf.set_fill_color(*color)
        if card.trend == "up":
            points = [(x, y), (x + 3, y - 3), (x + 6, y)]
        else:
            points = [(x, y - 3), (x + 3, y), (x + 6, y - 3)]
        self.pdf.polygon(points, style="F")
        self.pdf.set_text_color(*color)
        self.pdf.set_font("Helvetica", "B", 8)
        draw_text(self.pdf, x + 8, y, card.change_text)

    def _render_metrics(self) -> None:
        pdf = self.pdf
        y = self.layout.reserve(METRICS_HEIGHT)
        pdf.set_font("Helvetica", "B", 18)
        pdf.set_text_color(37, 99, 235)
        draw_text(pdf, MARGIN_X, y + 8, "KEY PERFORMANCE METRICS")
        pdf.set_draw_color(37, 99, 235)
        pdf.set_line_width(0.5)
        pdf.line(MARGIN_X, y + 10, MARGIN_X + 100, y + 10)
        pdf.set_line_width(0.3)

        grid_top = y + 16
        for index, card in enumerate(build_metric_cards(self.data)):
            card_x = MARGIN_X + (index % 2) * 90
            card_y = grid_top + (index // 2) * 27
            pdf.set_fill_color(*PALETTE["panel"])
            pdf.rect(card_x, card_y, 80, 24, "F")
            pdf.set_draw_color(*PALETTE["rule"])
            pdf.rect(card_x, card_y, 80, 24, "D")
            pdf.set_font("Helvetica", "B", 16)
            pdf.set_text_color(30, 30, 30)
            draw_text(pdf, card_x + 5, card_y + 9, card.value)
            pdf.set_font("Helvetica", "", 9)
            pdf.set_text_color(*PALETTE["muted"])
            draw_text(pdf, card_x + 5, card_y + 15, card.label)
            if card.trend:
                self._draw_trend_arrow(card, card_x + 5, card_y + 21)

    def _render_trend(self):
        rect = self._chart_block("MENU VIEWS & SCANS TREND", ((239, 246, 255), (59, 130, 246), (30, 58, 138)))
        recent = self.data.views_series[-TREND_WINDOW:]
        return self.charts.draw_line(
            recent,
            rect,
            "Daily Views & Scans",
            value_selector=lambda p: p.views,
            overlay_selector=lambda p: p.scans,
        )

    def _render_popular_chart(self):
        rect = self._chart_block("TOP PERFORMING ITEMS", ((254, 249, 195), (245, 158, 11), (146, 64, 14)))
        return self.charts.draw_bar(
            self.data.popular_items,
            rect,
            "Views by Item",
            value_selector=lambda i: i.views,
            label_selector=lambda i: i.name,
        )

    def _render_category_chart(self):
        rect = self._chart_block("CATEGORY PERFORMANCE", ((240, 253, 244), (16, 185, 129), (6, 95, 70)))
        return self.charts.draw_bar(
            self.data.category_performance,
            rect,
            "Views by Category",
            value_selector=lambda c: c.views,
            label_selector=lambda c: c.name,
        )

    def _render_devices(self):
        rect = self._chart_block("DEVICE BREAKDOWN", ((245, 243, 255), (139, 92, 246), (91, 33, 182)))
        return self.charts.draw_pie(
            self.data.device_breakdown,
            rect,
            "Usage by Device Type",
            value_selector=lambda d: d.count,
            label_selector=lambda d: d.device_name,
            percentage_selector=lambda d: d.percentage,
            wedges=self.pie_wedges,
        )

    def _raw_heading(self) -> None:
        if self._raw_heading_drawn:
            return
        pdf = self.pdf
        y = self.layout.reserve(
            RAW_HEADING_HEIGHT,
            keep_with_next=TABLE_TITLE_HEIGHT + TABLE_HEADER_HEIGHT + TABLE_ROW_HEIGHT,
        )
        pdf.set_fill_color(254, 242, 242)
        pdf.rect(MARGIN_X, y, CONTENT_WIDTH, 22, "F")
        pdf.set_draw_color(*PALETTE["down"])
        pdf.rect(MARGIN_X, y, CONTENT_WIDTH, 22, "D")
        pdf.set_font("Helvetica", "B", 16)
        pdf.set_text_color(153, 27, 27)
        draw_text(pdf, MARGIN_X + 5, y + 13, "DETAILED DATA TABLES")
        self._raw_heading_drawn = True

    def _table_title(self, title: str) -> None:
        y = self.layout.reserve(TABLE_TITLE_HEIGHT, keep_with_next=TABLE_HEADER_HEIGHT + TABLE_ROW_HEIGHT)
        self.pdf.set_font("Helvetica", "B", 12)
        self.pdf.set_text_color(*PALETTE["text"])
        draw_text(self.pdf, MARGIN_X, y + 6, title)

    def _render_popular_table(self) -> int:
        self._raw_heading()
        self._table_title("Most Popular Items")
        columns = [
            Column("Rank", 25),
            Column("Item Name", 40, limit=22),
            Column("Category", 95, limit=12),
            Column("Views", 135),
            Column("Change", 160),
        ]
        rows = []
        for rank, item in enumerate(self.data.popular_items, start=1):
            sign = "+" if item.change_pct >= 0 else ""
            rows.append([str(rank), item.name, item.category, f"{item.views:,}", f"{sign}{item.change_pct:g}%"])

        def change_color(row_index: int, col_index: int, value: Any):
            if col_index != 4:
                return None
            return PALETTE["down"] if str(value).startswith("-") else PALETTE["up"]

        before = self.tables.rows_drawn
        self.tables.draw_table(columns, rows, self.layout, cell_color=change_color)
        self.layout.reserve(TABLE_GAP)
        return self.tables.rows_drawn - before

    def _render_category_table(self) -> int:
        self._raw_heading()
        self._table_title("Category Performance")
        columns = [
            Column("Category", 25, limit=22),
            Column("Views", 85),
            Column("Items", 115),
            Column("Avg Rating", 145),
        ]
        rows = [
            [
                c.name,
                f"{c.views:,}",
                str(c.item_count),
                f"{c.avg_rating:.1f}" if c.avg_rating else "N/A",
            ]
            for c in self.data.category_performance
        ]
        before = self.tables.rows_drawn
        self.tables.draw_table(columns, rows, self.layout)
        self.layout.reserve(TABLE_GAP)
        return self.tables.rows_drawn - before

    def _render_footer(self) -> None:
        # Fixed zone below CONTENT_BOTTOM on whichever page is last.
        pdf = self.pdf
        page_h = pdf.h
        pdf.set_draw_color(*PALETTE["rule"])
        pdf.line(MARGIN_X, page_h - 25, pdf.w - MARGIN_X, page_h - 25)
        pdf.set_font("Helvetica", "", 8)
        pdf.set_text_color(*PALETTE["muted"])
        stamp = self.generated_at.strftime("%b %d, %Y")
        draw_text(pdf, MARGIN_X, page_h - 18, f"Generated by Menu Analytics Dashboard on {stamp}")
        draw_text(
            pdf,
            MARGIN_X,
            page_h - 12,
            f"Total Views: {self.data.views_total:,} | QR Scans: {self.data.scans_total:,} | "
            f"Categories: {len(self.data.category_performance)}",
        )

    # ---- driver
    def _build(self) -> RenderedDocument:
        header_title = f"{sanitize(self.subject_name)} | Analytics Report"
        pdf = ReportPDF(header_title, f"Generated {self.generated_at:%Y-%m-%d %H:%M}")
        pdf.set_margins(MARGIN_X, CONTENT_TOP, MARGIN_X)
        pdf.set_auto_page_break(auto=False)
        pdf.set_title(sanitize(f"Analytics Report - {self.subject_name}"))
        pdf.set_author("Menu Analytics")
        pdf.add_page()

        self.pdf = pdf
        self.layout = PageLayoutManager(CONTENT_TOP, CONTENT_BOTTOM, on_new_page=pdf.add_page)
        self.charts = ChartRenderer(pdf)
        self.tables = TableRenderer(pdf)

        records: List[SectionRecord] = []
        results: Dict[str, Any] = {}
        for spec in SECTION_PLAN:
            if not spec.enabled(self.options):
                continue
            result = spec.renderer(self)
            if result is not None:
                results[spec.id] = result
            records.append(SectionRecord(spec.id, spec.title, self.layout.current_page().index))

        output = pdf.output()
        content = bytes(output) if isinstance(output, (bytes, bytearray)) else output.encode("latin-1")
        return RenderedDocument(
            content=content,
            sections=tuple(records),
            page_count=self.layout.page_count,
            results=results,
        )

    def assemble(self) -> RenderedDocument:
        if self.pdf is not None:
            raise RuntimeError("DocumentAssembler instances render exactly once")
        try:
            return self._build()
        except Exception as exc:
            logger.error("analytics report render failed for %r", self.subject_name, exc_info=True)
            raise RenderFailure(f"Could not render analytics report: {exc}") from exc


SECTION_PLAN: List[SectionSpec] = [
    SectionSpec("cover", "Cover", lambda o: True, DocumentAssembler._render_cover),
    SectionSpec("metrics", "Key Performance Metrics", lambda o: True, DocumentAssembler._render_metrics),
    SectionSpec("views_trend", "Menu Views & Scans Trend", lambda o: o.charts_enabled(), DocumentAssembler._render_trend),
    SectionSpec(
        "popular_items_chart",
        "Top Performing Items",
        lambda o: o.charts_enabled(o.include_popular_items),
        DocumentAssembler._render_popular_chart,
    ),
    SectionSpec("category_chart", "Category Performance", lambda o: o.charts_enabled(), DocumentAssembler._render_category_chart),
    SectionSpec(
        "device_breakdown",
        "Device Breakdown",
        lambda o: o.charts_enabled(o.include_device_stats),
        DocumentAssembler._render_devices,
    ),
    SectionSpec(
        "popular_items_table",
        "Most Popular Items",
        lambda o: o.include_raw_data and o.include_popular_items,
        DocumentAssembler._render_popular_table,
    ),
    SectionSpec("category_table", "Category Performance Table", lambda o: o.include_raw_data, DocumentAssembler._render_category_table),
    SectionSpec("footer", "Footer", lambda o: True, DocumentAssembler._render_footer),
]

CHART_SECTIONS = ("views_trend", "popular_items_chart", "category_chart", "device_breakdown")


def build_document(
    data: AnalyticsData,
    options: ExportOptions,
    subject_name: str,
    generated_at: Optional[datetime] = None,
    pie_wedges: bool = False,
) -> RenderedDocument:
    return DocumentAssembler(data, options, subject_name, generated_at, pie_wedges=pie_wedges).assemble()
