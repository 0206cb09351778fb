"""
Scrum Collaboration Dashboard — thin orchestrator
"""

from __future__ import annotations

import streamlit as st

st.set_page_config(
    page_title="Scrum Collaboration Dashboard",
    page_icon="🤝",
    layout="wide",
    initial_sidebar_state="expanded",
)

from scrumboard.data import get_week, load_snapshot, previous_week, weeks_until
from scrumboard.trends import weekly_collaboration_trend
from scrumboard.sections.sidebar import render_sidebar
from scrumboard.sections.team import render_team_section
from scrumboard.sections.bottleneck import render_bottleneck_section
from scrumboard.sections.matrix import render_matrix_section
from scrumboard.sections.personal import render_personal_section


def main() -> None:
    snap = load_snapshot()
    if not snap.get("weeks"):
        st.error("Snapshot contains no weeks. Run `python generate_snapshot.py` again.")
        st.stop()

    week_key, member, relation_filter, hide_diagonal, history_weeks = render_sidebar(snap)

    week    = get_week(snap, week_key)
    items   = week["items"]
    history = weeks_until(snap, week_key, history_weeks)
    prev    = previous_week(snap, week_key)

    # Header
    st.title("🤝 Scrum Collaboration Dashboard")
    st.caption(
        f"{snap.get('workspace', '')} · {week.get('week_label', week_key)} · "
        f"{len(items)} entries · {len({i['name'] for i in items})} members"
    )

    # Sections
    render_team_section(items, weekly_collaboration_trend(history))
    render_bottleneck_section(items)
    render_matrix_section(items, relation_filter, hide_diagonal)
    if member:
        render_personal_section(items, member, history, prev)


if __name__ == "__main__":
    main()
