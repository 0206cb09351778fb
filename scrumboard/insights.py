"""
Natural-language collaboration insights.

Each insight is {"type", "icon", "message"} plus an optional "detail".
Generators return everything they produce in generation order; ranking and
truncation for display are done by sort_insights / top_insights.
"""

from __future__ import annotations

from typing import Optional, Union

from scrumboard import config as cfg
from scrumboard.graph import build_graph
from scrumboard.metrics import summarize_member


def _insight(kind: str, icon: str, message: str, detail: Optional[str] = None) -> dict:
    out = {"type": kind, "icon": icon, "message": message}
    if detail:
        out["detail"] = detail
    return out


def _week_items(week: Union[list, dict, None]) -> Optional[list]:
    if week is None:
        return None
    if isinstance(week, dict):
        return week.get("items") or []
    return week


def generate_personal_insights(
    items: list[dict],
    member: str,
    previous_week: Union[list, dict, None] = None,
) -> list[dict]:
    """
    Insights for one member's week. `previous_week` (an item list or a week
    dict with "items") enables the week-over-week comparisons.
    """
    graph = build_graph(items)
    summary = summarize_member(graph, member)
    insights: list[dict] = []

    # Others waiting on me
    if summary["pre_inbound"] >= cfg.INBOUND_WARNING:
        insights.append(_insight(
            "warning", "🚧",
            f"{summary['pre_inbound']} people are waiting on your work",
            "Consider raising the priority of the work others depend on.",
        ))
    if summary["pre_inbound"] == 0 and summary["total_collaborations"] > 0:
        insights.append(_insight("success", "✅", "No bottleneck: nobody is waiting on you"))

    # Breadth
    cross = summary["cross_domain_score"]
    if cross >= cfg.CROSS_DOMAIN_HIGH:
        insights.append(_insight(
            "success", "🌐",
            f"High cross-domain collaboration ({cross}%)",
            "You are working well across teams.",
        ))
    elif 0 < cross < cfg.CROSS_DOMAIN_LOW:
        insights.append(_insight(
            "neutral", "💡",
            f"Mostly same-domain collaboration ({100 - cross}%)",
            "Consider reaching out to other domains where it helps.",
        ))

    if summary["collaborators"]:
        top = summary["collaborators"][0]
        insights.append(_insight(
            "info", "👥",
            f"You collaborated most with {top['name']} ({top['count']} times)",
        ))

    # Pair activity against the team average
    pair_counts = [summarize_member(graph, name)["pair_count"] for name in graph.domains]
    avg_pair = sum(pair_counts) / max(len(pair_counts), 1)
    if summary["pair_count"] > avg_pair * cfg.PAIR_ABOVE_AVERAGE:
        insights.append(_insight(
            "success", "🤝",
            f"Pair collaboration above team average "
            f"({summary['pair_count']} vs avg {round(avg_pair)})",
        ))

    # Me waiting on others
    if summary["pre_count"] >= cfg.OUTBOUND_WARNING:
        insights.append(_insight(
            "warning", "⏳",
            f"{summary['pre_count']} items are waiting on other people",
            "Check on the progress of the work you depend on.",
        ))

    prev_items = _week_items(previous_week)
    if prev_items is not None:
        prev = summarize_member(build_graph(prev_items), member)

        inbound_diff = summary["pre_inbound"] - prev["pre_inbound"]
        if inbound_diff > 0:
            insights.append(_insight(
                "warning", "📈",
                f"Bottleneck up by {inbound_diff} since last week",
            ))
        elif inbound_diff < 0:
            insights.append(_insight(
                "success", "📉",
                f"Bottleneck down by {-inbound_diff} since last week",
            ))

        collab_diff = summary["total_collaborations"] - prev["total_collaborations"]
        if collab_diff > cfg.COLLAB_GROWTH:
            insights.append(_insight(
                "info", "📊",
                f"Collaboration up by {collab_diff} since last week",
            ))

    # Repeated waits on the same person
    waits: dict[str, int] = {}
    for e in graph.edges:
        if e.kind == "pre" and e.source == member and e.target != member:
            waits[e.target] = waits.get(e.target, 0) + 1
    for target, count in waits.items():
        if count >= cfg.REPEATED_WAIT:
            insights.append(_insight(
                "neutral", "🔄",
                f"Repeatedly waiting on {target} ({count} times)",
                "Worth reviewing this dependency pattern.",
            ))

    if summary["total_collaborations"] == 0:
        insights.append(_insight(
            "neutral", "📝",
            "No collaboration recorded this week",
            "If you worked with someone, add them to your scrum entry.",
        ))

    return insights


def generate_team_insights(items: list[dict]) -> list[dict]:
    graph = build_graph(items)
    summaries = [summarize_member(graph, name) for name in sorted(graph.nodes)]
    insights: list[dict] = []

    top_wait = max(summaries, key=lambda s: s["pre_inbound"], default=None)
    if top_wait and top_wait["pre_inbound"] >= cfg.TEAM_BOTTLENECK:
        insights.append(_insight(
            "warning", "🚨",
            f"{top_wait['name']} is the biggest bottleneck "
            f"({top_wait['pre_inbound']} people waiting)",
            "Review this member's workload.",
        ))

    declared_pairs = {name: 0 for name in graph.domains}
    for e in graph.edges:
        if e.kind == "pair":
            declared_pairs[e.source] = declared_pairs.get(e.source, 0) + 1
    top_pair = max(declared_pairs.items(), key=lambda kv: kv[1], default=None)
    if top_pair and top_pair[1] >= cfg.TEAM_ACTIVE_PAIR:
        insights.append(_insight(
            "info", "⭐",
            f"{top_pair[0]} is the most active pair collaborator ({top_pair[1]})",
        ))

    total_pre = sum(1 for e in graph.edges if e.kind == "pre")
    total_pair = sum(declared_pairs.values())
    if total_pre > total_pair * cfg.TEAM_WAIT_RATIO:
        insights.append(_insight(
            "warning", "⚠️",
            "Lots of waiting across the team",
            f"pre {total_pre} vs pair {total_pair}",
        ))

    return insights


def sort_insights(insights: list[dict]) -> list[dict]:
    """Stable sort: warning, info, success, neutral."""
    return sorted(insights, key=lambda i: cfg.INSIGHT_ORDER.get(i.get("type"), len(cfg.INSIGHT_ORDER)))


def top_insights(insights: list[dict], limit: int = cfg.INSIGHT_DISPLAY_LIMIT) -> list[dict]:
    return sort_insights(insights)[:limit]
