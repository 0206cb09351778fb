"""Bottleneck map — who is waiting on whom."""

from __future__ import annotations

import streamlit as st

from scrumboard.charts import make_bottleneck_bar
from scrumboard.config import INTENSITY_BANDS
from scrumboard.data import build_bottleneck_df
from scrumboard.metrics import get_bottleneck_nodes


def render_bottleneck_section(items: list[dict]) -> None:
    st.markdown("---")
    st.markdown("## 🚧 Bottleneck Map")
    st.caption(
        "Intensity = people waiting on a member relative to the week's largest wait count. "
        "Bands: " + ", ".join(f"{band} ≥ {lower}" for lower, band in INTENSITY_BANDS) + "."
    )

    bn_df = build_bottleneck_df(get_bottleneck_nodes(items))
    attention = bn_df[bn_df["band"].isin(["critical", "warning"])]
    if len(attention):
        st.warning(f"Bottlenecks needing attention: {len(attention)}")

    st.plotly_chart(make_bottleneck_bar(bn_df), use_container_width=True, key="bottleneck_bar")

    if not bn_df.empty:
        table = bn_df.copy()
        table.columns = [
            "Member", "Domain", "Waited on by", "Waits on",
            "Intensity", "Band", "Waiters", "Blocked by",
        ]
        table.index = range(1, len(table) + 1)
        st.dataframe(
            table.style.background_gradient(subset=["Intensity"], cmap="Reds", vmin=0, vmax=100),
            use_container_width=True,
        )
