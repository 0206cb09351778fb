"""
Metric computation over one week of work items:
  - Bottlenecks: inbound/outbound wait counts and intensity bands
  - Matrix: domain x domain collaboration counts
  - Member summary: per-member counts and cross-domain/module scores
  - Utility: radar normalisation, collaboration load
"""

from __future__ import annotations

import math

from scrumboard.config import (
    DEFAULT_BAND,
    INTENSITY_BANDS,
    MATRIX_FILTERS,
    UNKNOWN_DOMAIN,
)
from scrumboard.graph import Graph, build_graph


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def percent(part: float, whole: float) -> int:
    """Rounded percentage 0..100; 0 when there is nothing to divide by."""
    if not whole:
        return 0
    return round_half_up(100 * part / whole)


# ── Bottlenecks ───────────────────────────────────────────────────────────────

def intensity_band(intensity: float) -> str:
    for lower, band in INTENSITY_BANDS:
        if intensity >= lower:
            return band
    return DEFAULT_BAND


def _bottlenecks(graph: Graph) -> list[dict]:
    inbound:  dict[str, int] = {}
    outbound: dict[str, int] = {}
    waiters:  dict[str, list[str]] = {}
    blocking: dict[str, list[str]] = {}

    for e in graph.edges:
        if e.kind != "pre" or e.source == e.target:
            continue
        outbound[e.source] = outbound.get(e.source, 0) + 1
        inbound[e.target]  = inbound.get(e.target, 0) + 1
        w = waiters.setdefault(e.target, [])
        if e.source not in w:
            w.append(e.source)
        b = blocking.setdefault(e.source, [])
        if e.target not in b:
            b.append(e.target)

    max_inbound = max(inbound.values(), default=0)

    nodes = []
    for name in graph.nodes:
        in_count  = inbound.get(name, 0)
        out_count = outbound.get(name, 0)
        if in_count == 0 and out_count == 0:
            continue
        intensity = percent(in_count, max_inbound)
        nodes.append({
            "name":           name,
            "domain":         graph.domains.get(name, UNKNOWN_DOMAIN),
            "inbound_count":  in_count,
            "outbound_count": out_count,
            "intensity":      intensity,
            "band":           intensity_band(intensity),
            "waiters":        list(waiters.get(name, [])),
            "blocking":       list(blocking.get(name, [])),
        })

    return sorted(
        nodes,
        key=lambda n: (-n["intensity"], -n["inbound_count"], -n["outbound_count"], n["name"]),
    )


def get_bottleneck_nodes(items: list[dict]) -> list[dict]:
    """
    Members with at least one `pre` edge on either side.

    inbound_count  – people waiting on this member (the bottleneck signal)
    outbound_count – people this member is waiting on
    intensity      – inbound relative to the week's largest inbound, 0–100
    """
    return _bottlenecks(build_graph(items))


# ── Collaboration matrix ──────────────────────────────────────────────────────

def get_collaboration_matrix(items: list[dict], relation_filter: str = "both") -> list[dict]:
    """
    Full domain x domain grid. `total_count` follows the filter; post edges
    never contribute to it. Diagonal cells are kept.
    """
    if relation_filter not in MATRIX_FILTERS:
        raise ValueError(
            f"relation_filter must be one of {MATRIX_FILTERS}, got {relation_filter!r}"
        )

    domains: list[str] = []
    for item in items:
        d = item.get("domain") or UNKNOWN_DOMAIN
        if d != UNKNOWN_DOMAIN and d not in domains:
            domains.append(d)

    cells = {
        (s, t): {"pair": 0, "pre": 0, "post": 0}
        for s in domains
        for t in domains
    }
    for e in build_graph(items).edges:
        cell = cells.get((e.domain_from, e.domain_to))
        if cell is not None:
            cell[e.kind] += 1

    counted = ("pair", "pre") if relation_filter == "both" else (relation_filter,)
    return [
        {
            "source_domain": s,
            "target_domain": t,
            "pair_count":    c["pair"],
            "pre_count":     c["pre"],
            "post_count":    c["post"],
            "total_count":   sum(c[k] for k in counted),
        }
        for (s, t), c in cells.items()
    ]


# ── Member summary ────────────────────────────────────────────────────────────

def _cross_scores(graph: Graph, member: str) -> tuple[int, int]:
    my_domain  = graph.domains.get(member)
    my_modules = graph.modules.get(member, frozenset())

    domain_total = domain_cross = 0
    module_total = module_cross = 0
    for e in graph.edges:
        if e.kind not in ("pair", "pre") or e.source == e.target:
            continue
        if e.source == member:
            other = e.target
        elif e.target == member:
            other = e.source
        else:
            continue

        domain_total += 1
        other_domain = graph.domains.get(other, UNKNOWN_DOMAIN)
        if other_domain != UNKNOWN_DOMAIN and other_domain != my_domain:
            domain_cross += 1

        other_modules = graph.modules.get(other)
        if other_modules:
            module_total += 1
            if other_modules.isdisjoint(my_modules):
                module_cross += 1

    if my_domain is None or my_domain == UNKNOWN_DOMAIN:
        domain_score = 0
    else:
        domain_score = percent(domain_cross, domain_total)
    module_score = percent(module_cross, module_total) if my_modules else 0
    return domain_score, module_score


def summarize_member(graph: Graph, member: str) -> dict:
    pair_count = pre_count = pre_inbound = post_count = 0
    tallies: dict[str, dict[str, int]] = {}

    for e in graph.edges:
        if member not in (e.source, e.target):
            continue
        self_edge = e.source == e.target
        if e.kind == "pair":
            pair_count += 1
        elif e.kind == "pre" and not self_edge:
            if e.source == member:
                pre_count += 1
            else:
                pre_inbound += 1
        elif e.kind == "post" and e.source == member:
            post_count += 1

        if e.source == member and not self_edge:
            t = tallies.setdefault(e.target, {"pair": 0, "pre": 0, "post": 0})
            t[e.kind] += 1

    collaborators = sorted(
        (
            {"name": name, "count": sum(rel.values()), "relations": rel}
            for name, rel in tallies.items()
        ),
        key=lambda c: -c["count"],
    )
    cross_domain, cross_module = _cross_scores(graph, member)

    return {
        "name":                 member,
        "domain":               graph.domains.get(member, UNKNOWN_DOMAIN),
        "owns_items":           member in graph.domains,
        "pair_count":           pair_count,
        "pre_count":            pre_count,
        "pre_inbound":          pre_inbound,
        "post_count":           post_count,
        "cross_domain_score":   cross_domain,
        "cross_module_score":   cross_module,
        "total_collaborations": pair_count + pre_count + pre_inbound,
        "collaborators":        collaborators,
    }


def get_member_summary(items: list[dict], member: str) -> dict:
    """
    Raw collaboration counts for one member plus the two breadth scores.

    pre_count / pre_inbound use the same rules as get_bottleneck_nodes, so
    they always agree with that member's outbound_count / inbound_count.
    Counts are not normalised here; that needs the whole team (see radar_scores).
    """
    return summarize_member(build_graph(items), member)


def get_all_member_summaries(items: list[dict]) -> dict[str, dict]:
    """Summaries for every item owner, sharing a single graph build."""
    graph = build_graph(items)
    return {name: summarize_member(graph, name) for name in graph.domains}


def radar_scores(items: list[dict], member: str) -> dict[str, int]:
    """
    Radar values 0–100. Counts are divided by the week's maximum across item
    owners (floor 1); the breadth scores are already percentages.
    """
    graph = build_graph(items)
    summaries = [summarize_member(graph, name) for name in graph.domains]
    me = summarize_member(graph, member)

    max_pair = max([s["pair_count"] for s in summaries] + [1])
    max_out  = max([s["pre_count"] for s in summaries] + [1])
    max_in   = max([s["pre_inbound"] for s in summaries] + [1])

    return {
        "pair":         percent(me["pair_count"], max_pair),
        "pre_out":      percent(me["pre_count"], max_out),
        "pre_in":       percent(me["pre_inbound"], max_in),
        "cross_domain": me["cross_domain_score"],
        "cross_module": me["cross_module_score"],
    }


def get_collaboration_load(items: list[dict]) -> list[dict]:
    """Per-owner load rows, heaviest first."""
    rows = []
    for name, s in get_all_member_summaries(items).items():
        rows.append({
            "name":        name,
            "domain":      s["domain"],
            "pair_count":  s["pair_count"],
            "pre_count":   s["pre_count"],
            "post_count":  s["post_count"],
            "pre_inbound": s["pre_inbound"],
            "total_load":  s["pair_count"] + s["pre_count"] + s["post_count"] + s["pre_inbound"],
        })
    return sorted(rows, key=lambda r: -r["total_load"])
