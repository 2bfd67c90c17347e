import plotly.graph_objects as go

from .config import BAR_CAP, SERIES_COLORS, TREND_WINDOW
from .models import AnalyticsData


def _hex(rgb) -> str:
    return "#{:02x}{:02x}{:02x}".format(*rgb)


def apply_layout(fig: go.Figure, height: int = 320, showlegend: bool = False) -> go.Figure:
    """Centralize layout tweaks so the preview reads like the exported report."""
    fig.update_layout(
        height=height,
        margin=dict(l=24, r=24, t=36, b=24),
        showlegend=showlegend,
        template="plotly_white",
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        font=dict(family="Helvetica", color="#334155"),
    )
    return fig


def trend_figure(data: AnalyticsData) -> go.Figure:
    recent = data.views_series[-TREND_WINDOW:]
    dates = [p.date for p in recent]
    fig = go.Figure()
    fig.add_trace(go.Scatter(x=dates, y=[p.views for p in recent], name="Views", mode="lines+markers", line=dict(color="#3b82f6", width=3)))
    fig.add_trace(go.Scatter(x=dates, y=[p.scans for p in recent], name="Scans", mode="lines+markers", line=dict(color="#10b981", width=2)))
    fig.update_layout(title="Daily Views & Scans")
    return apply_layout(fig, showlegend=True)


def items_figure(data: AnalyticsData) -> go.Figure:
    items = data.popular_items[:BAR_CAP]
    fig = go.Figure(go.Bar(x=[i.name for i in items], y=[i.views for i in items], text=[i.views for i in items], marker_color="#3b82f6"))
    fig.update_traces(textposition="outside", cliponaxis=False)
    fig.update_layout(title="Views by Item")
    return apply_layout(fig)


def device_figure(data: AnalyticsData, colors=None) -> go.Figure:
    palette = [_hex(c) for c in (colors or SERIES_COLORS)]
    devices = data.device_breakdown
    fig = go.Figure(
        go.Pie(
            labels=[d.device_name for d in devices],
            values=[d.count for d in devices],
            marker=dict(colors=[palette[i % len(palette)] for i in range(len(devices))]),
            sort=False,
        )
    )
    fig.update_layout(title="Usage by Device Type")
    return apply_layout(fig, showlegend=True)
