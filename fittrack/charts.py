from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

import numpy as np
import plotly.graph_objects as go

COLORS = {
    "workout": "rgba(249, 115, 22, 1)",
    "weight": "rgba(139, 92, 246, 1)",
    "water": "rgba(14, 165, 233, 1)",
    "sleep": "rgba(139, 92, 246, 1)",
}


def _empty_figure(title: str, message: str) -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title=title, template="plotly_white", xaxis_visible=False, yaxis_visible=False)
    fig.add_annotation(text=message, showarrow=False, x=0.5, y=0.5, xref="paper", yref="paper")
    return fig


def autoscale_y(values: Sequence[float], floor: Optional[float] = 0.0) -> Tuple[float, float]:
    """Padded y-range around the data; at least 2 units tall."""
    vals = np.asarray([v for v in values if v is not None], dtype=float)
    vals = vals[~np.isnan(vals)]
    if vals.size == 0:
        return 0.0, 1.0
    y_min = float(np.min(vals))
    y_max = float(np.max(vals))
    rng = y_max - y_min
    pad = 2.0 if rng <= 0.0 else max(1.0, 0.05 * rng)
    y0 = y_min - pad
    if floor is not None:
        y0 = max(floor, y0)
    y1 = y_max + pad
    if y1 - y0 < 2.0:
        mid = 0.5 * (y0 + y1)
        y0, y1 = mid - 1.0, mid + 1.0
    return y0, y1


def line_chart(
    series: List[Tuple[str, float]],
    title: str,
    y_title: str,
    color: str = "weight",
    empty_message: str = "No data recorded yet.",
    y_range: Optional[Tuple[float, float]] = None,
) -> go.Figure:
    if not series:
        return _empty_figure(title, empty_message)
    labels = [label for label, _ in series]
    values = [value for _, value in series]
    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=list(range(len(labels))),
        y=values,
        mode="lines+markers",
        name=y_title,
        line=dict(color=COLORS.get(color, color), width=2, shape="spline"),
        customdata=labels,
        hovertemplate="%{customdata}: %{y:.2f}<extra></extra>",
    ))
    fig.update_layout(
        title=title,
        yaxis_title=y_title,
        template="plotly_white",
        showlegend=False,
        xaxis=dict(tickmode="array", tickvals=list(range(len(labels))), ticktext=labels),
        yaxis=dict(range=list(y_range or autoscale_y(values))),
    )
    return fig


def bar_chart(
    series: List[Tuple[str, float]],
    title: str,
    y_title: str,
    color: str = "water",
    empty_message: str = "No data recorded yet.",
) -> go.Figure:
    if not series:
        return _empty_figure(title, empty_message)
    labels = [label for label, _ in series]
    fig = go.Figure()
    fig.add_trace(go.Bar(
        x=list(range(len(labels))),
        y=[value for _, value in series],
        marker_color=COLORS.get(color, color),
        name=y_title,
        customdata=labels,
        hovertemplate="%{customdata}: %{y}<extra></extra>",
    ))
    fig.update_layout(
        title=title,
        yaxis_title=y_title,
        template="plotly_white",
        showlegend=False,
        xaxis=dict(tickmode="array", tickvals=list(range(len(labels))), ticktext=labels),
        yaxis=dict(rangemode="tozero"),
    )
    return fig
