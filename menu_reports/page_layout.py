import logging
from dataclasses import dataclass, replace
from typing import Callable, Optional

from .config import CONTENT_BOTTOM, CONTENT_TOP

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Page:
    index: int
    cursor_y: float
    content_top: float
    content_bottom: float

    @property
    def remaining(self) -> float:
        return self.content_bottom - self.cursor_y


class PageLayoutManager:
    """
    Forward-only vertical placement over a sequence of pages. The only state
    transition is reserve(); every other method is a read.

    `on_new_page` is called whenever a reservation spills onto a new page so
    the canvas can add the physical page before anything is drawn on it.
    """

    def __init__(
        self,
        content_top: float = CONTENT_TOP,
        content_bottom: float = CONTENT_BOTTOM,
        on_new_page: Optional[Callable[[], None]] = None,
    ):
        if content_bottom <= content_top:
            raise ValueError("content_bottom must be below content_top")
        self._page = Page(index=0, cursor_y=content_top, content_top=content_top, content_bottom=content_bottom)
        self._on_new_page = on_new_page

    def current_page(self) -> Page:
        return self._page

    @property
    def page_count(self) -> int:
        return self._page.index + 1

    @property
    def cursor_y(self) -> float:
        return self._page.cursor_y

    @property
    def remaining(self) -> float:
        return self._page.remaining

    def fits(self, height: float) -> bool:
        return self._page.cursor_y + height <= self._page.content_bottom

    def reserve(self, height: float, keep_with_next: float = 0.0) -> float:
        """
        Claim `height` of vertical space and return the top y of the block.
        `keep_with_next` is extra space that must also fit for the block to
        stay on this page (headings keep their first row); only `height` is
        consumed.
        """
        height = max(0.0, float(height))
        page = self._page
        # A block taller than a whole page goes on the current page when it is still empty.
        at_top = page.cursor_y == page.content_top
        if not self.fits(height + max(0.0, keep_with_next)) and not at_top:
            page = Page(
                index=page.index + 1,
                cursor_y=page.content_top,
                content_top=page.content_top,
                content_bottom=page.content_bottom,
            )
            logger.debug("page break before %.1fmm block -> page %d", height, page.index + 1)
            if self._on_new_page is not None:
                self._on_new_page()
        y_top = page.cursor_y
        self._page = replace(page, cursor_y=min(page.cursor_y + height, page.content_bottom))
        return y_top
