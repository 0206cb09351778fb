"""Sidebar controls — week, member, matrix filter."""

from __future__ import annotations

import streamlit as st

from scrumboard.config import MATRIX_FILTERS
from scrumboard.data import get_week, item_owners, week_keys


def render_sidebar(snap: dict) -> tuple[str, str | None, str, bool, int]:
    """
    Render the sidebar and return:
        week_key         – selected week
        member           – selected member (None when the week is empty)
        relation_filter  – matrix filter ("both" | "pair" | "pre")
        hide_diagonal    – suppress same-domain matrix cells
        history_weeks    – weeks of history for the personal timeline
    """
    with st.sidebar:
        st.markdown("## ⚙️ Controls")

        keys = week_keys(snap)
        week_key = st.selectbox(
            "Week", keys[::-1], index=0, key="week_select",
            format_func=lambda k: get_week(snap, k).get("week_label", k),
        )

        members = item_owners(get_week(snap, week_key)["items"])
        member = st.selectbox("Member", members, index=0, key="member_select") if members else None

        st.markdown("---")
        st.markdown("### Domain Matrix")
        relation_filter = st.radio(
            "Relations", MATRIX_FILTERS, index=0, horizontal=True,
            help="'both' counts pair + pre; post is never counted",
        )
        hide_diagonal = st.toggle("Hide same-domain cells", value=True)

        st.markdown("---")
        history_weeks = st.slider("History (weeks)", 3, 26, 8)

        st.markdown("---")
        st.info(
            f"**Workspace**: {snap.get('workspace', '')}  \n"
            f"**Generated**: {snap.get('generated_at', '')[:10]}  \n"
            f"**Weeks**: {len(keys)}"
        )

    return week_key, member, relation_filter, hide_diagonal, history_weeks
