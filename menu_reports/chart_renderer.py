import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from .config import (
    BAR_CAP,
    BAR_LABEL_MIN_WIDTH,
    BAR_NAME_MIN_WIDTH,
    CHART_MARGIN,
    LINE_LABEL_EVERY,
    PALETTE,
    SERIES_COLORS,
)
from .scaling import abbreviate, category_position, coerce_value, scale
from .text import draw_text, sanitize

RGB = Tuple[int, int, int]
Selector = Callable[[Any], Any]


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def right(self) -> float:
        return self.x + self.width


@dataclass(frozen=True)
class BarGeometry:
    label: str
    value: float
    x: float
    y: float
    width: float
    height: float
    value_label: Optional[str] = None


@dataclass(frozen=True)
class BarChartResult:
    title: str
    bars: Tuple[BarGeometry, ...] = ()
    max_value: float = 0.0
    bar_width: float = 0.0
    truncated: int = 0


@dataclass(frozen=True)
class LinePoint:
    x: float
    y: float
    value: float
    label: Optional[str] = None


@dataclass(frozen=True)
class LineChartResult:
    title: str
    points: Tuple[LinePoint, ...] = ()
    overlay_points: Tuple[LinePoint, ...] = ()
    max_value: float = 0.0


@dataclass(frozen=True)
class LegendEntry:
    label: str
    value: float
    percentage: float
    color: RGB
    text: str


@dataclass(frozen=True)
class PieChartResult:
    title: str
    entries: Tuple[LegendEntry, ...] = ()
    slices: Tuple[Tuple[float, float], ...] = ()


def _select(selector: Optional[Selector], item: Any) -> Any:
    if selector is None:
        return None
    try:
        return selector(item)
    except (AttributeError, KeyError, IndexError, TypeError, ValueError):
        return None


def _fmt_pct(value: float) -> str:
    return f"{round(value, 1):g}"


def pie_slices(values: Sequence[float]) -> List[Tuple[float, float]]:
    """(start, sweep) pairs in degrees, clockwise from 12 o'clock."""
    clean = [max(0.0, coerce_value(v)) for v in values]
    total = sum(clean)
    if total <= 0:
        return [(0.0, 0.0) for _ in clean]
    slices = []
    start = 0.0
    for v in clean:
        sweep = v / total * 360.0
        slices.append((start, sweep))
        start += sweep
    return slices


def _sector_points(cx: float, cy: float, r: float, start: float, sweep: float) -> List[Tuple[float, float]]:
    steps = max(2, int(math.ceil(sweep / 10.0)) + 1)
    points = [(cx, cy)]
    for i in range(steps):
        angle = math.radians(start + sweep * i / (steps - 1) - 90.0)
        points.append((cx + r * math.cos(angle), cy + r * math.sin(angle)))
    return points


class ChartRenderer:
    """
    Bar, line and pie/legend charts drawn straight onto an FPDF page with
    rectangles, lines, ellipses and text runs. Every method returns the
    geometry it drew so callers and tests can inspect the layout.
    """

    def __init__(self, pdf, palette: Optional[Dict[str, RGB]] = None, series_colors: Sequence[RGB] = SERIES_COLORS):
        self.pdf = pdf
        self.palette = dict(PALETTE)
        if palette:
            self.palette.update(palette)
        self.series_colors = tuple(series_colors) or SERIES_COLORS

    # ---- frame
    def _draw_frame(self, rect: Rect, title: str) -> None:
        pdf = self.pdf
        pdf.set_fill_color(*self.palette["panel"])
        pdf.rect(rect.x, rect.y - 15, rect.width, 12, "F")
        pdf.set_draw_color(*self.palette["border"])
        pdf.set_line_width(0.3)
        pdf.rect(rect.x, rect.y - 15, rect.width, 12, "D")
        pdf.set_font("Helvetica", "B", 11)
        pdf.set_text_color(*self.palette["ink"])
        draw_text(pdf, rect.x + 5, rect.y - 7, title)

        pdf.set_fill_color(*self.palette["white"])
        pdf.rect(rect.x, rect.y, rect.width, rect.height, "F")
        pdf.set_draw_color(*self.palette["border"])
        pdf.rect(rect.x, rect.y, rect.width, rect.height, "D")

    def _dot(self, x: float, y: float, r: float, color: RGB) -> None:
        self.pdf.set_fill_color(*color)
        self.pdf.ellipse(x - r, y - r, 2 * r, 2 * r, "F")

    # ---- bar
    def draw_bar(
        self,
        series: Sequence[Any],
        rect: Rect,
        title: str,
        value_selector: Selector,
        label_selector: Optional[Selector] = None,
    ) -> BarChartResult:
        self._draw_frame(rect, title)
        items = list(series or [])[:BAR_CAP]
        if not items:
            return BarChartResult(title=title)

        pdf = self.pdf
        values = [coerce_value(_select(value_selector, item)) for item in items]
        max_value = max(values)
        bar_width = (rect.width - CHART_MARGIN) / len(items)
        baseline = rect.bottom - CHART_MARGIN / 2
        bars = []
        for index, (item, value) in enumerate(zip(items, values)):
            label = sanitize(_select(label_selector, item)) if label_selector else ""
            bar_h = max(0.0, scale(value, max_value, 0, rect.height - CHART_MARGIN))
            bar_x = rect.x + CHART_MARGIN / 2 + index * bar_width
            bar_y = baseline - bar_h
            draw_w = max(0.5, bar_width - 2)

            pdf.set_fill_color(*self.palette["primary"])
            pdf.rect(bar_x, bar_y, draw_w, bar_h, "F")

            value_label = None
            if bar_width > BAR_LABEL_MIN_WIDTH and value > 0:
                value_label = abbreviate(value)
                pdf.set_font("Helvetica", "B", 7)
                label_w = pdf.get_string_width(value_label)
                label_x = bar_x + (draw_w - label_w) / 2
                if bar_h >= 8:
                    pdf.set_text_color(*self.palette["white"])
                    draw_text(pdf, label_x, bar_y + bar_h / 2 + 1.5, value_label)
                else:
                    pdf.set_text_color(*self.palette["ink"])
                    draw_text(pdf, label_x, bar_y - 1.5, value_label)

            if label and bar_width > BAR_NAME_MIN_WIDTH:
                pdf.set_font("Helvetica", "", 6)
                pdf.set_text_color(*self.palette["muted"])
                draw_text(pdf, bar_x + 1, rect.bottom + 5, label[: int(bar_width // 2)])

            bars.append(
                BarGeometry(
                    label=label,
                    value=value,
                    x=bar_x,
                    y=bar_y,
                    width=draw_w,
                    height=bar_h,
                    value_label=value_label,
                )
            )
        return BarChartResult(
            title=title,
            bars=tuple(bars),
            max_value=max_value,
            bar_width=bar_width,
            truncated=max(0, len(series) - len(items)),
        )

    # ---- line
    def _points(self, values: List[float], max_value: float, rect: Rect) -> List[Tuple[float, float]]:
        inset = CHART_MARGIN / 2
        count = len(values)
        return [
            (
                category_position(i, count, rect.x + inset, rect.right - inset),
                scale(v, max_value, rect.bottom - inset, rect.y + inset),
            )
            for i, v in enumerate(values)
        ]

    def _polyline(self, points: List[Tuple[float, float]], color: RGB, width: float) -> None:
        pdf = self.pdf
        pdf.set_draw_color(*color)
        pdf.set_line_width(width)
        for (x1, y1), (x2, y2) in zip(points, points[1:]):
            pdf.line(x1, y1, x2, y2)
        pdf.set_line_width(0.3)

    def draw_line(
        self,
        series: Sequence[Any],
        rect: Rect,
        title: str,
        value_selector: Selector,
        overlay_selector: Optional[Selector] = None,
    ) -> LineChartResult:
        self._draw_frame(rect, title)
        items = list(series or [])
        if not items:
            return LineChartResult(title=title)

        pdf = self.pdf
        values = [coerce_value(_select(value_selector, item)) for item in items]
        overlay = [coerce_value(_select(overlay_selector, item)) for item in items] if overlay_selector else []
        max_value = max(values + overlay)

        overlay_points: List[LinePoint] = []
        if overlay:
            coords = self._points(overlay, max_value, rect)
            self._polyline(coords, self.palette["accent"], 0.4)
            for (px, py), value in zip(coords, overlay):
                self._dot(px, py, 1.0, self.palette["accent"])
                overlay_points.append(LinePoint(x=px, y=py, value=value))
            self._series_key(rect)

        coords = self._points(values, max_value, rect)
        self._polyline(coords, self.palette["primary"], 0.7)
        step = math.ceil(len(coords) / LINE_LABEL_EVERY)
        points = []
        for index, ((px, py), value) in enumerate(zip(coords, values)):
            self._dot(px, py, 2.0, self.palette["white"])
            self._dot(px, py, 1.5, self.palette["primary"])
            label = None
            if index % step == 0:
                label = abbreviate(value)
                pdf.set_font("Helvetica", "", 6)
                pdf.set_text_color(*self.palette["muted"])
                draw_text(pdf, px - 3, py - 3.5, label)
            points.append(LinePoint(x=px, y=py, value=value, label=label))
        return LineChartResult(
            title=title,
            points=tuple(points),
            overlay_points=tuple(overlay_points),
            max_value=max_value,
        )

    def _series_key(self, rect: Rect) -> None:
        pdf = self.pdf
        pdf.set_font("Helvetica", "", 7)
        key_x = rect.right - 40
        for offset, (name, color) in enumerate((("Views", "primary"), ("Scans", "accent"))):
            x = key_x + offset * 20
            pdf.set_fill_color(*self.palette[color])
            pdf.rect(x, rect.y - 10, 4, 3, "F")
            pdf.set_text_color(*self.palette["muted"])
            draw_text(pdf, x + 5, rect.y - 7.5, name)

    # ---- pie
    def draw_pie(
        self,
        series: Sequence[Any],
        rect: Rect,
        title: str,
        value_selector: Selector,
        label_selector: Selector,
        percentage_selector: Optional[Selector] = None,
        wedges: bool = False,
    ) -> PieChartResult:
        """
        Circle outline plus a color-keyed legend, one `label (pct%)` row per
        entry in input order. With `wedges` the circle is also filled with
        proportional sectors.
        """
        self._draw_frame(rect, title)
        items = list(series or [])
        if not items:
            return PieChartResult(title=title)

        pdf = self.pdf
        values = [max(0.0, coerce_value(_select(value_selector, item))) for item in items]
        total = sum(values)
        cx = rect.x + rect.width / 2
        cy = rect.y + rect.height / 2
        radius = min(rect.width, rect.height) / 3

        slices = pie_slices(values)
        colors = [self.series_colors[i % len(self.series_colors)] for i in range(len(items))]
        if wedges and total > 0:
            for (start, sweep), color in zip(slices, colors):
                if sweep <= 0:
                    continue
                pdf.set_fill_color(*color)
                pdf.polygon(_sector_points(cx, cy, radius, start, sweep), style="F")

        pdf.set_draw_color(200, 200, 200)
        pdf.set_line_width(0.5)
        pdf.ellipse(cx - radius, cy - radius, 2 * radius, 2 * radius, "D")
        pdf.set_line_width(0.3)

        row_h = min(12.0, (rect.height - 10) / len(items))
        legend_y = rect.y + 5
        entries = []
        pdf.set_font("Helvetica", "", 8)
        for index, (item, value, color) in enumerate(zip(items, values, colors)):
            label = sanitize(_select(label_selector, item)) or f"Item {index + 1}"
            if percentage_selector is not None:
                pct = coerce_value(_select(percentage_selector, item))
            else:
                pct = value / total * 100 if total else 0.0
            text = f"{label} ({_fmt_pct(pct)}%)"
            pdf.set_fill_color(*color)
            pdf.rect(rect.right - 40, legend_y, 8, max(1.0, min(6.0, row_h - 1)), "F")
            pdf.set_text_color(*self.palette["muted"])
            draw_text(pdf, rect.right - 28, legend_y + 4, text)
            entries.append(LegendEntry(label=label, value=value, percentage=pct, color=color, text=text))
            legend_y += row_h
        return PieChartResult(title=title, entries=tuple(entries), slices=tuple(slices))
