"""Plotly figures for the dashboard pages."""

from __future__ import annotations

import pandas as pd
import plotly.graph_objects as go

from app.rendering.choropleth import Scene, Shape
from app.rendering.colors import DEFAULT_COLORSCALE

MONTH_NAMES = [
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
]


# ---------------------------------------------------------------------------
# Choropleth
# ---------------------------------------------------------------------------


def _outline(shape: Shape) -> tuple[list[float | None], list[float | None]]:
    xs: list[float | None] = []
    ys: list[float | None] = []
    for ring in shape.placed_rings():
        if xs:
            xs.append(None)
            ys.append(None)
        xs.extend(x for x, _ in ring)
        xs.append(ring[0][0])
        ys.extend(y for _, y in ring)
        ys.append(ring[0][1])
    return xs, ys


def _anchor(shape: Shape) -> tuple[float, float] | None:
    points = [p for ring in shape.placed_rings() for p in ring]
    if not points:
        return None
    return (
        sum(x for x, _ in points) / len(points),
        sum(y for _, y in points) / len(points),
    )


def scene_figure(scene: Scene, title: str | None = None) -> go.Figure:
    """Draw every shape of *scene* as a filled outline.

    A marker per region carries the shape index in ``customdata`` so a
    point selection can be routed back to :meth:`Scene.activate`.
    """
    fig = go.Figure()
    for shape in scene.shapes:
        xs, ys = _outline(shape)
        fig.add_trace(go.Scatter(
            x=xs,
            y=ys,
            mode="lines",
            fill="toself",
            fillcolor=shape.fill,
            line=dict(color="#fff", width=1),
            hoveron="fills",
            hoverinfo="text",
            text=shape.tooltip,
            name=shape.name,
            showlegend=False,
        ))

    anchors = [(i, _anchor(s)) for i, s in enumerate(scene.shapes)]
    anchors = [(i, a) for i, a in anchors if a is not None]
    fig.add_trace(go.Scatter(
        x=[a[0] for _, a in anchors],
        y=[a[1] for _, a in anchors],
        mode="markers",
        marker=dict(
            size=10,
            opacity=0.6,
            color=[scene.shapes[i].value for i, _ in anchors],
            colorscale=DEFAULT_COLORSCALE,
            cmin=0,
            cmax=scene.max_value or 1,
            showscale=True,
            line=dict(color="#333", width=0.5),
        ),
        customdata=[i for i, _ in anchors],
        text=[scene.shapes[i].tooltip for i, _ in anchors],
        hoverinfo="text",
        showlegend=False,
    ))

    fig.update_xaxes(visible=False, range=[0, scene.width])
    fig.update_yaxes(visible=False, range=[scene.height, 0], scaleanchor="x")
    fig.update_layout(
        title=title,
        margin=dict(l=0, r=0, t=40 if title else 0, b=0),
        height=600,
        template="plotly_white",
        clickmode="event+select",
        dragmode=False,
    )
    return fig


# ---------------------------------------------------------------------------
# Secondary charts
# ---------------------------------------------------------------------------


def grouped_bar_figure(data: pd.DataFrame) -> go.Figure:
    fig = go.Figure()
    fig.add_trace(go.Bar(x=data["name"], y=data["foreigners"], name="Extranjeros", marker_color="red"))
    fig.add_trace(go.Bar(x=data["name"], y=data["mortgages"], name="Hipotecas", marker_color="green"))
    fig.update_layout(
        barmode="group",
        bargap=0.5,
        template="plotly_white",
        xaxis_tickangle=-45,
        yaxis_title="Valor normalizado",
    )
    return fig


def dual_axis_figure(
    data: pd.DataFrame,
    x: str,
    left: tuple[str, str, str],
    right: tuple[str, str, str],
    title: str,
    x_title: str = "Año",
) -> go.Figure:
    """Two line series sharing the x axis, each on its own y axis.

    ``left`` and ``right`` are ``(column, label, color)`` triples.
    """
    left_col, left_label, left_color = left
    right_col, right_label, right_color = right
    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=data[x], y=data[left_col],
        mode="lines+markers", name=left_label,
        line=dict(color=left_color, width=2),
    ))
    fig.add_trace(go.Scatter(
        x=data[x], y=data[right_col],
        mode="lines+markers", name=right_label,
        line=dict(color=right_color, width=2),
        yaxis="y2",
    ))
    fig.update_layout(
        title=title,
        xaxis=dict(title=x_title, type="category"),
        yaxis=dict(title=left_label, rangemode="tozero"),
        yaxis2=dict(title=right_label, overlaying="y", side="right", rangemode="tozero"),
        template="plotly_white",
        legend=dict(orientation="h", y=-0.2),
    )
    return fig
