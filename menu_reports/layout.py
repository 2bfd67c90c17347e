from typing import Any, Dict, MutableMapping, Optional, Tuple

import streamlit as st

from .config import DATE_RANGE_CHOICES, DEFAULT_DATE_RANGE
from .formats import EXPORT_FORMATS, OPTION_TOGGLES
from .models import ExportOptions


def options_from_toggles(toggles: Dict[str, bool], date_range_label: str, fmt: str) -> ExportOptions:
    """
    Build a fresh ExportOptions from widget values. PDF-only toggles are
    forced off for other formats, matching the disabled checkboxes.
    """
    values = {}
    for toggle in OPTION_TOGGLES:
        enabled = bool(toggles.get(toggle.key, True))
        if toggle.pdf_only and fmt != "pdf":
            enabled = False
        values[toggle.key] = enabled
    return ExportOptions(date_range_label=date_range_label or DEFAULT_DATE_RANGE, **values)


def render_export_panel(default_subject: str = "") -> Tuple[str, str, ExportOptions]:
    """
    Export controls shared by the analytics page: format, subject, period
    and section toggles. Returns (format id, subject name, options).
    """
    format_ids = list(EXPORT_FORMATS)
    fmt = st.radio(
        "Export format",
        format_ids,
        format_func=lambda f: EXPORT_FORMATS[f].label,
        horizontal=True,
    )
    st.caption(EXPORT_FORMATS[fmt].description + " - " + ", ".join(EXPORT_FORMATS[fmt].features))

    subject = st.text_input("Restaurant name", value=default_subject)
    date_range = st.selectbox(
        "Date range",
        DATE_RANGE_CHOICES,
        index=DATE_RANGE_CHOICES.index(DEFAULT_DATE_RANGE),
    )

    toggles: Dict[str, bool] = {}
    for toggle in OPTION_TOGGLES:
        disabled = toggle.pdf_only and fmt != "pdf"
        label = f"{toggle.label} (PDF only)" if disabled else toggle.label
        toggles[toggle.key] = st.checkbox(
            label,
            value=not disabled,
            help=toggle.description,
            disabled=disabled,
            key=f"export_{toggle.key}",
        )

    return fmt, subject.strip(), options_from_toggles(toggles, date_range, fmt)


def store_artifact(state: MutableMapping[str, Any], export_key: Tuple, artifact: Any) -> None:
    state["export_artifact"] = artifact
    state["export_key"] = export_key


def prepared_artifact(state: MutableMapping[str, Any], export_key: Tuple) -> Optional[Any]:
    """The stored artifact when it was built from `export_key`; a stale one is dropped."""
    if state.get("export_key") != export_key:
        state.pop("export_artifact", None)
        state.pop("export_key", None)
        return None
    return state.get("export_artifact")
