import streamlit as st

from menu_reports.charts import device_figure, items_figure, trend_figure
from menu_reports.config import DEFAULT_SUBJECT_NAME, PLOTLY_CONFIG
from menu_reports.data_loader import demo_analytics, load_analytics, resolve_data_path
from menu_reports.document import RenderFailure
from menu_reports.exporters import export_analytics
from menu_reports.layout import prepared_artifact, render_export_panel, store_artifact
from menu_reports.models import AnalyticsData

st.set_page_config(page_title="Menu Analytics Export", layout="wide")


@st.cache_data(show_spinner=False)
def _load(path: str) -> AnalyticsData:
    if not path:
        return demo_analytics()
    return load_analytics(path)


data_path = resolve_data_path()
try:
    data = _load(data_path)
except (OSError, ValueError) as exc:
    st.warning(f"Could not load analytics from {data_path}: {exc}. Showing demo data.")
    data = demo_analytics()

st.title("Analytics Export")
st.caption(f"Source: {data_path or 'demo data'}")

k1, k2, k3, k4 = st.columns(4)
k1.metric("Total Menu Views", f"{data.views_total:,}", f"{data.views_change_pct:+.1f}%")
k2.metric("QR Code Scans", f"{data.scans_total:,}", f"{data.scans_change_pct:+.1f}%")
k3.metric("Popular Items", len(data.popular_items))
k4.metric("Categories", len(data.category_performance))

left, right = st.columns([3, 2])
with left:
    st.plotly_chart(trend_figure(data), use_container_width=True, config=PLOTLY_CONFIG)
    st.plotly_chart(items_figure(data), use_container_width=True, config=PLOTLY_CONFIG)
with right:
    st.plotly_chart(device_figure(data), use_container_width=True, config=PLOTLY_CONFIG)

st.subheader("Export")
fmt, subject, options = render_export_panel(DEFAULT_SUBJECT_NAME)
subject = subject or DEFAULT_SUBJECT_NAME
export_key = (fmt, subject, options)

if st.button("Prepare export", type="primary"):
    try:
        with st.spinner("Rendering export..."):
            artifact = export_analytics(data, options, subject, fmt)
    except RenderFailure as exc:
        st.error(f"Export failed: {exc}")
    else:
        store_artifact(st.session_state, export_key, artifact)

artifact = prepared_artifact(st.session_state, export_key)
if artifact is not None:
    st.download_button(
        label=f"Download {artifact.filename}",
        data=artifact.content,
        file_name=artifact.filename,
        mime=artifact.mime_type,
    )
