import logging
import re
from typing import Any

logger = logging.getLogger(__name__)

_NON_PRINTABLE_ASCII = re.compile(r"[^\x20-\x7e]")
_NON_MINIMAL = re.compile(r"[^A-Za-z0-9\s\-.,()%]")


def _as_text(text: Any) -> str:
    if text is None:
        return ""
    if isinstance(text, str):
        return text
    try:
        return str(text)
    except Exception:
        return ""


def sanitize(text: Any) -> str:
    """Keep only printable 7-bit characters, which every core PDF font can encode."""
    return _NON_PRINTABLE_ASCII.sub("", _as_text(text))


def sanitize_minimal(text: Any) -> str:
    """Last-resort subset: ASCII letters, digits, whitespace and -.,()%."""
    return _NON_MINIMAL.sub("", _as_text(text))


def truncate(text: Any, limit: int) -> str:
    return sanitize(text)[: max(0, limit)]


def draw_text(pdf, x: float, y: float, text: Any) -> str:
    """
    Draw a text run at (x, y) and return what was actually drawn. If the
    canvas rejects the sanitized string, retry once with the minimal subset;
    a second failure propagates to the caller.
    """
    clean = sanitize(text)
    try:
        pdf.text(x, y, clean)
        return clean
    except Exception as exc:
        logger.debug("text run rejected (%s); retrying with minimal charset", exc)
    fallback = sanitize_minimal(clean)
    pdf.text(x, y, fallback)
    return fallback
