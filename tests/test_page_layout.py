import random

import pytest

from menu_reports.page_layout import PageLayoutManager


def test_reserve_returns_cursor_and_advances():
    layout = PageLayoutManager(20, 100)
    assert layout.reserve(30) == 20
    assert layout.reserve(30) == 50
    assert layout.cursor_y == 80
    assert layout.page_count == 1


def test_overflow_starts_new_page_at_content_top():
    breaks = []
    layout = PageLayoutManager(20, 100, on_new_page=lambda: breaks.append(True))
    layout.reserve(60)
    y = layout.reserve(30)
    assert y == 20
    page = layout.current_page()
    assert page.index == 1
    assert page.cursor_y == 50
    assert breaks == [True]


def test_exact_fit_stays_on_page():
    layout = PageLayoutManager(0, 100)
    layout.reserve(40)
    assert layout.reserve(60) == 40
    assert layout.page_count == 1
    assert layout.remaining == 0


def test_oversized_block_on_empty_page_is_clamped():
    layout = PageLayoutManager(20, 100)
    assert layout.reserve(500) == 20
    page = layout.current_page()
    assert page.index == 0
    assert page.cursor_y == page.content_bottom


def test_keep_with_next_breaks_early_but_consumes_only_height():
    layout = PageLayoutManager(0, 100)
    layout.reserve(80)
    assert layout.fits(10)
    y = layout.reserve(10, keep_with_next=20)
    assert y == 0
    assert layout.current_page().index == 1
    assert layout.cursor_y == 10


def test_fits_is_read_only():
    layout = PageLayoutManager(0, 100)
    layout.fits(1000)
    assert layout.cursor_y == 0
    assert layout.page_count == 1


def test_cursor_stays_within_content_area():
    rng = random.Random(3)
    layout = PageLayoutManager(15, 240)
    for _ in range(500):
        layout.reserve(rng.uniform(0, 300))
        page = layout.current_page()
        assert page.content_top <= page.cursor_y <= page.content_bottom


def test_rejects_empty_content_area():
    with pytest.raises(ValueError):
        PageLayoutManager(100, 100)
