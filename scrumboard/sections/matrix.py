"""Cross-domain collaboration matrix."""

from __future__ import annotations

import streamlit as st

from scrumboard.charts import make_matrix_heatmap
from scrumboard.data import build_matrix_df
from scrumboard.metrics import get_collaboration_matrix


def render_matrix_section(items: list[dict], relation_filter: str, hide_diagonal: bool) -> None:
    st.markdown("---")
    st.markdown("## 🧭 Cross-Domain Matrix")
    st.caption("Rows declare the relation, columns are the collaborator's domain.")

    cells = get_collaboration_matrix(items, relation_filter)
    matrix_df = build_matrix_df(cells, hide_diagonal=hide_diagonal)
    st.plotly_chart(make_matrix_heatmap(matrix_df), use_container_width=True, key="matrix")
