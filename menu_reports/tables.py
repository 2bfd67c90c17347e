from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from .config import CONTENT_WIDTH, MARGIN_X, PALETTE, TABLE_HEADER_HEIGHT, TABLE_ROW_HEIGHT
from .page_layout import PageLayoutManager
from .text import draw_text, truncate

RGB = Tuple[int, int, int]
CellColor = Callable[[int, int, Any], Optional[RGB]]


@dataclass(frozen=True)
class Column:
    header: str
    x: float
    limit: Optional[int] = None


class TableRenderer:
    """
    Header band + fixed-height rows at fixed column offsets. Rows are never
    split; when the next row does not fit, the table continues on a new page
    under a repeated header band.
    """

    def __init__(
        self,
        pdf,
        palette: Optional[Dict[str, RGB]] = None,
        header_height: float = TABLE_HEADER_HEIGHT,
        row_height: float = TABLE_ROW_HEIGHT,
    ):
        self.pdf = pdf
        self.palette = dict(PALETTE)
        if palette:
            self.palette.update(palette)
        self.header_height = header_height
        self.row_height = row_height
        self.header_bands = 0
        self.rows_drawn = 0

    def _draw_header(self, columns: Sequence[Column], y: float) -> None:
        pdf = self.pdf
        pdf.set_fill_color(249, 250, 251)
        pdf.rect(MARGIN_X, y, CONTENT_WIDTH, self.header_height, "F")
        pdf.set_draw_color(209, 213, 219)
        pdf.set_line_width(0.3)
        pdf.rect(MARGIN_X, y, CONTENT_WIDTH, self.header_height, "D")
        pdf.set_font("Helvetica", "B", 9)
        pdf.set_text_color(75, 85, 99)
        baseline = y + self.header_height / 2 + 1.5
        for column in columns:
            draw_text(pdf, column.x, baseline, column.header)
        self.header_bands += 1

    def _draw_row(
        self,
        columns: Sequence[Column],
        row: Sequence[Any],
        row_index: int,
        y: float,
        cell_color: Optional[CellColor],
    ) -> None:
        pdf = self.pdf
        pdf.set_font("Helvetica", "", 9)
        baseline = y + self.row_height - 2.5
        for col_index, column in enumerate(columns):
            value = row[col_index] if col_index < len(row) else ""
            color = cell_color(row_index, col_index, value) if cell_color else None
            pdf.set_text_color(*(color or self.palette["text"]))
            text = truncate(value, column.limit) if column.limit else value
            draw_text(pdf, column.x, baseline, text)
        self.rows_drawn += 1

    def draw_table(
        self,
        columns: Sequence[Column],
        rows: Sequence[Sequence[Any]],
        layout: PageLayoutManager,
        cell_color: Optional[CellColor] = None,
        empty_text: str = "No data available",
    ) -> float:
        """Draw the table from the layout's cursor onward and return the y where it ends."""
        if not rows:
            y = layout.reserve(self.header_height + self.row_height)
            self._draw_header(columns, y)
            self.pdf.set_font("Helvetica", "I", 9)
            self.pdf.set_text_color(*self.palette["muted"])
            x = columns[0].x if columns else MARGIN_X
            draw_text(self.pdf, x, y + self.header_height + self.row_height - 2.5, empty_text)
            return layout.cursor_y

        for index, row in enumerate(rows):
            if index == 0 or not layout.fits(self.row_height):
                # Header and first row on a page are placed as one block.
                y = layout.reserve(self.header_height + self.row_height)
                self._draw_header(columns, y)
                row_y = y + self.header_height
            else:
                row_y = layout.reserve(self.row_height)
            self._draw_row(columns, row, index, row_y, cell_color)
        return layout.cursor_y
