"""Plotly figures for the collaboration dashboard."""

from __future__ import annotations

import networkx as nx
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from scrumboard.config import (
    BAND_COLORS, COLOR_ME, COLOR_PAIR, COLOR_POST, COLOR_PRE,
    RADAR_DIMS, RADAR_NAMES, RELATION_COLORS,
)

_TRANSPARENT = "rgba(0,0,0,0)"
_GRID = "#2a2a3a"


def _empty_figure(text: str, height: int = 300) -> go.Figure:
    fig = go.Figure()
    fig.update_layout(
        annotations=[dict(text=text, xref="paper", yref="paper",
                          x=0.5, y=0.5, showarrow=False, font_size=14)],
        xaxis=dict(visible=False), yaxis=dict(visible=False),
        height=height, paper_bgcolor=_TRANSPARENT, plot_bgcolor=_TRANSPARENT,
    )
    return fig


# ── Radar ─────────────────────────────────────────────────────────────────────

def make_radar(member: str, scores: dict) -> go.Figure:
    values = [scores.get(d, 0) for d in RADAR_DIMS]
    values_closed = values + [values[0]]
    dims_closed   = RADAR_NAMES + [RADAR_NAMES[0]]

    fig = go.Figure()
    fig.add_trace(go.Scatterpolar(
        r=values_closed,
        theta=dims_closed,
        fill="toself",
        fillcolor="rgba(67,97,238,0.18)",
        line=dict(color=COLOR_PAIR, width=2),
        name=member,
        hovertemplate="%{theta}: %{r}<extra></extra>",
    ))
    fig.update_layout(
        polar=dict(radialaxis=dict(visible=True, range=[0, 100], tickfont_size=9)),
        showlegend=False,
        margin=dict(t=30, b=20, l=30, r=30),
        height=300,
        paper_bgcolor=_TRANSPARENT,
        plot_bgcolor=_TRANSPARENT,
    )
    return fig


# ── Bottleneck ranking ────────────────────────────────────────────────────────

def make_bottleneck_bar(bn_df: pd.DataFrame, top_n: int = 15) -> go.Figure:
    if bn_df.empty:
        return _empty_figure("No one is waiting on anyone this week")
    df = bn_df.head(top_n).iloc[::-1]
    fig = go.Figure(go.Bar(
        y=df["member"], x=df["intensity"],
        orientation="h",
        marker_color=[BAND_COLORS[b] for b in df["band"]],
        customdata=df[["inbound", "outbound", "waiters"]].values,
        hovertemplate=(
            "<b>%{y}</b><br>Intensity: %{x}<br>Waiting on them: %{customdata[0]}"
            "<br>They wait on: %{customdata[1]}<br>Waiters: %{customdata[2]}<extra></extra>"
        ),
    ))
    fig.update_layout(
        xaxis=dict(title="Bottleneck intensity", range=[0, 100], gridcolor=_GRID),
        yaxis=dict(title="", tickfont_size=11),
        margin=dict(t=20, b=40, l=120, r=20),
        height=max(260, len(df) * 28),
        paper_bgcolor=_TRANSPARENT,
        plot_bgcolor=_TRANSPARENT,
    )
    return fig


# ── Domain matrix ─────────────────────────────────────────────────────────────

def make_matrix_heatmap(matrix_df: pd.DataFrame) -> go.Figure:
    if matrix_df.empty:
        return _empty_figure("No domains this week")
    fig = go.Figure(go.Heatmap(
        z=matrix_df.values,
        x=list(matrix_df.columns),
        y=list(matrix_df.index),
        colorscale="Blues",
        text=matrix_df.values,
        texttemplate="%{text}",
        hovertemplate="%{y} → %{x}: %{z}<extra></extra>",
        colorbar=dict(title="Edges", thickness=12),
    ))
    fig.update_layout(
        xaxis=dict(title="Collaborator domain", side="top"),
        yaxis=dict(title="Declaring domain", autorange="reversed"),
        margin=dict(t=60, b=20, l=80, r=20),
        height=max(300, 60 * len(matrix_df)),
        paper_bgcolor=_TRANSPARENT,
        plot_bgcolor=_TRANSPARENT,
    )
    return fig


# ── Bottleneck timeline ───────────────────────────────────────────────────────

def make_bottleneck_timeline(series_df: pd.DataFrame) -> go.Figure:
    fig = go.Figure()
    if series_df.empty:
        return fig
    fig.add_trace(go.Bar(
        x=series_df["week_label"], y=series_df["outbound"],
        name="I wait on", marker_color=COLOR_POST, opacity=0.75,
        hovertemplate="I wait on: %{y}<extra></extra>",
    ))
    fig.add_trace(go.Bar(
        x=series_df["week_label"], y=series_df["inbound"],
        name="Waiting on me", marker_color=COLOR_PRE, opacity=0.75,
        hovertemplate="Waiting on me: %{y}<extra></extra>",
    ))
    flagged = series_df[series_df["is_anomaly"]]
    if not flagged.empty:
        fig.add_trace(go.Scatter(
            x=flagged["week_label"], y=flagged["inbound"],
            name="Anomaly", mode="markers",
            marker=dict(symbol="triangle-down", size=14, color=COLOR_ME),
            hovertemplate="Anomalous week: %{y} waiting<extra></extra>",
        ))
    fig.update_layout(
        barmode="group",
        yaxis=dict(title="People", rangemode="tozero", dtick=1),
        legend=dict(
            orientation="h",
            x=1, y=1, xanchor="right", yanchor="bottom",
            bgcolor=_TRANSPARENT,
        ),
        margin=dict(t=20, b=40, l=40, r=20),
        height=260,
        paper_bgcolor=_TRANSPARENT,
        plot_bgcolor=_TRANSPARENT,
        xaxis_title="Week",
        yaxis_gridcolor=_GRID,
    )
    return fig


# ── Weekly team trend ─────────────────────────────────────────────────────────

def make_weekly_trend(trend_rows: list[dict]) -> go.Figure:
    fig = go.Figure()
    if not trend_rows:
        return fig
    df = pd.DataFrame(trend_rows)
    for col, name, color in [
        ("pair_count", "Pair", COLOR_PAIR),
        ("pre_count",  "Pre",  COLOR_PRE),
        ("post_count", "Post", COLOR_POST),
    ]:
        fig.add_trace(go.Bar(
            x=df["week_label"], y=df[col],
            name=name, marker_color=color, opacity=0.85,
            hovertemplate=f"{name}: %{{y}}<extra></extra>",
        ))
    fig.update_layout(
        barmode="stack",
        yaxis=dict(title="Declared relations"),
        xaxis_title="Week",
        legend=dict(orientation="h", y=1.05, x=0),
        margin=dict(t=40, b=40, l=40, r=20),
        height=300,
        paper_bgcolor=_TRANSPARENT,
        plot_bgcolor=_TRANSPARENT,
        yaxis_gridcolor=_GRID,
    )
    return fig


# ── Collaboration load ────────────────────────────────────────────────────────

def make_load_scatter(load_df: pd.DataFrame) -> go.Figure:
    """Waits-on vs waited-on-by per member; bubble size is total load."""
    if load_df.empty:
        return _empty_figure("No collaboration load this week")
    df = load_df.copy()
    df["size"] = df["total_load"].clip(lower=1)

    fig = px.scatter(
        df,
        x="pre_count", y="pre_inbound",
        size="size", color="domain",
        hover_name="name", text="name",
        color_discrete_sequence=px.colors.qualitative.Bold,
        size_max=28,
        labels={
            "pre_count": "Waits on", "pre_inbound": "Waited on by",
            "domain": "Domain", "size": "Total load",
        },
        height=380,
    )
    fig.update_traces(textposition="top center", textfont_size=9)
    top = int(max(df["pre_count"].max(), df["pre_inbound"].max(), 1))
    # above the diagonal: more people wait on them than they wait on
    fig.add_shape(
        type="line", x0=0, y0=0, x1=top, y1=top,
        line=dict(dash="dot", color="#666"),
    )
    fig.update_layout(
        margin=dict(t=20, b=40, l=40, r=20),
        paper_bgcolor=_TRANSPARENT,
        plot_bgcolor=_TRANSPARENT,
        xaxis=dict(gridcolor=_GRID, rangemode="tozero"),
        yaxis=dict(gridcolor=_GRID, rangemode="tozero"),
    )
    return fig


# ── Collaboration network ─────────────────────────────────────────────────────

def _weighted(G: nx.MultiDiGraph) -> nx.DiGraph:
    """Collapse parallel edges into one weighted edge per (u, v); self-loops dropped."""
    W = nx.DiGraph()
    W.add_nodes_from(G.nodes(data=True))
    for u, v, data in G.edges(data=True):
        if u == v:
            continue
        if W.has_edge(u, v):
            W[u][v]["weight"] += 1
            W[u][v]["kinds"].add(data.get("kind"))
        else:
            W.add_edge(u, v, weight=1, kinds={data.get("kind")})
    return W


def _edge_color(kinds: set) -> str:
    if "pre" in kinds:
        return RELATION_COLORS["pre"]
    if "pair" in kinds:
        return RELATION_COLORS["pair"]
    return RELATION_COLORS["post"]


def make_network_graph(
    G: nx.MultiDiGraph, focus: str | None = None, max_neighbors: int = 15
) -> go.Figure:
    if len(G.nodes) == 0:
        return _empty_figure("No graph data", height=420)

    W = _weighted(G)
    if focus is not None:
        if focus not in W:
            return _empty_figure("No graph data", height=320)
        neighbors = set(W.predecessors(focus)) | set(W.successors(focus))
        neighbors = sorted(
            neighbors,
            key=lambda n: W.degree(n, weight="weight"),
            reverse=True,
        )[:max_neighbors]
        W = W.subgraph([focus] + neighbors).copy()

    pos = nx.spring_layout(W, seed=42, k=1.5)

    edge_traces = []
    for u, v, data in W.edges(data=True):
        x0, y0 = pos[u]
        x1, y1 = pos[v]
        w = data.get("weight", 1)
        edge_traces.append(go.Scatter(
            x=[x0, x1, None], y=[y0, y1, None],
            mode="lines",
            line=dict(width=max(1, min(w * 1.5, 6)), color=_edge_color(data["kinds"])),
            hoverinfo="none",
        ))

    node_x, node_y, node_text, node_color, node_size = [], [], [], [], []
    for node, attrs in W.nodes(data=True):
        x, y = pos[node]
        node_x.append(x)
        node_y.append(y)
        deg = W.degree(node, weight="weight")
        node_text.append(f"<b>{node}</b><br>{attrs.get('domain', '')}<br>Edges: {deg}")
        node_color.append(COLOR_ME if node == focus else "#8d99ae")
        node_size.append(22 if node == focus else 10 + min(deg, 12))

    node_trace = go.Scatter(
        x=node_x, y=node_y,
        mode="markers+text",
        text=list(W.nodes()),
        textposition="top center",
        textfont_size=9,
        marker=dict(size=node_size, color=node_color,
                    line=dict(width=1, color="#fff")),
        hovertext=node_text,
        hoverinfo="text",
    )

    fig = go.Figure(data=edge_traces + [node_trace])
    fig.update_layout(
        showlegend=False,
        xaxis=dict(showgrid=False, zeroline=False, showticklabels=False),
        yaxis=dict(showgrid=False, zeroline=False, showticklabels=False),
        margin=dict(t=10, b=10, l=10, r=10),
        height=320 if focus is not None else 480,
        paper_bgcolor=_TRANSPARENT,
        plot_bgcolor=_TRANSPARENT,
    )
    return fig
