"""Personal dashboard — radar, bottleneck timeline, insights, ego graph."""

from __future__ import annotations

import streamlit as st

from scrumboard.charts import make_bottleneck_timeline, make_network_graph, make_radar
from scrumboard.data import build_series_df
from scrumboard.graph import build_graph, to_networkx
from scrumboard.insights import generate_personal_insights, top_insights
from scrumboard.metrics import get_member_summary, radar_scores
from scrumboard.trends import detect_bottleneck_trend, member_bottleneck_series

_INSIGHT_STYLE = {
    "warning": "#f77f00",
    "info":    "#4361EE",
    "success": "#2dc653",
    "neutral": "#888",
}


def render_insight_list(insights: list[dict]) -> None:
    if not insights:
        st.caption("No insights this week.")
        return
    for ins in insights:
        detail = f"<br><small>{ins['detail']}</small>" if ins.get("detail") else ""
        st.markdown(
            f"<div style='padding:8px 14px; border-left:3px solid {_INSIGHT_STYLE.get(ins['type'], '#888')}; "
            f"background:rgba(255,255,255,0.04); border-radius:4px; margin-bottom:6px'>"
            f"{ins['icon']} {ins['message']}{detail}</div>",
            unsafe_allow_html=True,
        )


def render_personal_section(
    items: list[dict],
    member: str,
    history: list[dict],
    prev_week: dict | None,
) -> None:
    st.markdown("---")
    st.markdown(f"## 🔍 {member}")

    summary = get_member_summary(items, member)
    if summary["total_collaborations"] == 0:
        st.info("No collaboration recorded for this member this week.")

    m1, m2, m3, m4, m5 = st.columns(5)
    m1.metric("Pair",           summary["pair_count"])
    m2.metric("Waits on",       summary["pre_count"])
    m3.metric("Waited on by",   summary["pre_inbound"])
    na = not summary["owns_items"]
    m4.metric("Cross-domain",   "n/a" if na else f"{summary['cross_domain_score']}%")
    m5.metric("Cross-module",   "n/a" if na else f"{summary['cross_module_score']}%")

    series = member_bottleneck_series(history, member)
    result = detect_bottleneck_trend(series)

    col_radar, col_timeline = st.columns([1, 2])
    with col_radar:
        st.markdown("#### Collaboration Radar")
        st.plotly_chart(
            make_radar(member, radar_scores(items, member)),
            use_container_width=True,
            key="radar",
        )
    with col_timeline:
        st.markdown("#### Bottleneck Timeline")
        trend = result["trend"]
        if trend:
            st.caption(
                f"I wait on {trend['outbound_diff']:+d} · "
                f"waiting on me {trend['inbound_diff']:+d} vs previous week"
            )
        st.plotly_chart(
            make_bottleneck_timeline(build_series_df(series, result["anomalies"])),
            use_container_width=True,
            key="bottleneck_timeline",
        )
        for a in result["anomalies"]:
            st.warning(f"Unusual week {a['week_label']}: {a['inbound']} people waiting")

    col_ins, col_ego = st.columns(2)
    with col_ins:
        st.markdown("#### Insights")
        render_insight_list(top_insights(generate_personal_insights(items, member, prev_week)))
    with col_ego:
        st.markdown("#### Collaboration Network (ego view)")
        st.plotly_chart(
            make_network_graph(to_networkx(build_graph(items)), focus=member),
            use_container_width=True,
            key="ego_graph",
        )
