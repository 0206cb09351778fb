"""Team overview — week stats, team insights, network, load."""

from __future__ import annotations

import streamlit as st

from scrumboard.charts import make_load_scatter, make_network_graph, make_weekly_trend
from scrumboard.data import build_load_df
from scrumboard.graph import build_graph, to_networkx
from scrumboard.insights import generate_team_insights, sort_insights
from scrumboard.metrics import get_collaboration_load
from scrumboard.stats import compute_week_stats

from scrumboard.sections.personal import render_insight_list


def render_team_section(items: list[dict], trend_rows: list[dict]) -> None:
    st.markdown("---")
    st.markdown("## 👥 Team Overview")

    stats = compute_week_stats(items)
    m1, m2, m3, m4, m5 = st.columns(5)
    m1.metric("Entries",  stats["total_entries"])
    m2.metric("Projects", stats["project_count"])
    m3.metric("Modules",  stats["module_count"])
    m4.metric(
        "Avg progress",
        f"{stats['avg_progress']}%" if stats["avg_progress"] is not None else "n/a",
    )
    m5.metric("High risk", stats["risk_counts"].get(3, 0))

    graph = build_graph(items)
    if graph.skipped:
        st.warning(
            f"{len(graph.skipped)} collaborator entries were skipped for an unknown relation kind: "
            + ", ".join(f"{s['owner']} → {s['collaborator']} ({s['relation']})" for s in graph.skipped)
        )

    render_insight_list(sort_insights(generate_team_insights(items)))

    col_net, col_trend = st.columns([3, 2])
    with col_net:
        st.markdown("#### Collaboration Network")
        st.plotly_chart(
            make_network_graph(to_networkx(graph)),
            use_container_width=True,
            key="full_network",
        )
    with col_trend:
        st.markdown("#### Relations per Week")
        st.plotly_chart(
            make_weekly_trend(trend_rows),
            use_container_width=True,
            key="weekly_trend",
        )

    with st.expander("Collaboration load", expanded=False):
        load_df = build_load_df(get_collaboration_load(items))
        st.plotly_chart(make_load_scatter(load_df), use_container_width=True, key="load_scatter")
        load_df.columns = ["Member", "Domain", "Pair", "Waits on", "Post", "Waited on by", "Total"]
        load_df.index = range(1, len(load_df) + 1)
        st.dataframe(
            load_df.style.background_gradient(subset=["Total"], cmap="YlOrRd"),
            use_container_width=True,
        )
