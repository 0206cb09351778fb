"""
Collaboration graph construction.

Edges are a flat, append-only tuple: one edge per (item, collaborator entry,
relation). Consumers fold over it independently; nothing is cached between
calls.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import NamedTuple

import networkx as nx

from scrumboard.config import UNKNOWN_DOMAIN
from scrumboard.relations import UnknownRelationKind, effective_relations

log = logging.getLogger(__name__)


class Edge(NamedTuple):
    source: str
    target: str
    kind: str
    domain_from: str
    domain_to: str


class Graph(NamedTuple):
    nodes: frozenset
    edges: tuple
    domains: dict     # member -> domain of first owned item
    modules: dict     # member -> frozenset of owned modules
    skipped: tuple    # collaborator entries dropped for an unknown relation


def member_domains(items: list[dict]) -> dict[str, str]:
    domains: dict[str, str] = {}
    for item in items:
        name = item.get("name")
        if name and name not in domains:
            domains[name] = item.get("domain") or UNKNOWN_DOMAIN
    return domains


def member_modules(items: list[dict]) -> dict[str, frozenset]:
    modules: dict[str, set] = defaultdict(set)
    for item in items:
        name = item.get("name")
        if not name:
            continue
        owned = modules[name]
        if item.get("module"):
            owned.add(item["module"])
    return {name: frozenset(mods) for name, mods in modules.items()}


def build_graph(items: list[dict]) -> Graph:
    """
    Materialise the directed multigraph for one week of work items.

    `pre` on A naming B yields A -> B, read as "A waits on B".
    """
    domains = member_domains(items)
    nodes: set[str] = set()
    edges: list[Edge] = []
    skipped: list[dict] = []

    for item in items:
        owner = item.get("name")
        if not owner:
            continue
        nodes.add(owner)
        item_domain = item.get("domain") or UNKNOWN_DOMAIN

        for collab in item.get("collaborators") or []:
            target = collab.get("name") if isinstance(collab, dict) else None
            if not target:
                continue
            try:
                kinds = effective_relations(collab, owner)
            except UnknownRelationKind as exc:
                log.warning(f"Skipping collaborator entry: {exc}")
                skipped.append({
                    "owner":        owner,
                    "collaborator": target,
                    "relation":     exc.relation,
                })
                continue

            nodes.add(target)
            target_domain = domains.get(target, UNKNOWN_DOMAIN)
            for kind in kinds:
                edges.append(Edge(owner, target, kind, item_domain, target_domain))

    return Graph(
        nodes=frozenset(nodes),
        edges=tuple(edges),
        domains=domains,
        modules=member_modules(items),
        skipped=tuple(skipped),
    )


def get_collaboration_edges(items: list[dict]) -> list[dict]:
    """Edges aggregated by (source, target, relation) with an occurrence count."""
    counts: dict[tuple[str, str, str], int] = {}
    for e in build_graph(items).edges:
        key = (e.source, e.target, e.kind)
        counts[key] = counts.get(key, 0) + 1
    return [
        {"source": s, "target": t, "relation": k, "count": c}
        for (s, t, k), c in counts.items()
    ]


def get_collaboration_nodes(items: list[dict]) -> list[dict]:
    """Network-graph nodes with degree and per-relation counts; self-edges are not counted."""
    graph = build_graph(items)

    degree: dict[str, int] = defaultdict(int)
    pair:   dict[str, int] = defaultdict(int)
    inbound: dict[str, int] = defaultdict(int)
    post:   dict[str, int] = defaultdict(int)
    for e in graph.edges:
        if e.source == e.target:
            continue
        degree[e.source] += 1
        degree[e.target] += 1
        if e.kind == "pair":
            pair[e.source] += 1
        elif e.kind == "pre":
            inbound[e.target] += 1
        else:
            post[e.source] += 1

    return [
        {
            "name":        name,
            "domain":      graph.domains.get(name, UNKNOWN_DOMAIN),
            "degree":      degree[name],
            "pair_count":  pair[name],
            "pre_inbound": inbound[name],
            "post_count":  post[name],
        }
        for name in sorted(graph.nodes)
    ]


def to_networkx(graph: Graph) -> nx.MultiDiGraph:
    """Export for layout and rendering; one networkx edge per Edge."""
    G = nx.MultiDiGraph()
    for name in graph.nodes:
        G.add_node(name, domain=graph.domains.get(name, UNKNOWN_DOMAIN))
    for e in graph.edges:
        G.add_edge(e.source, e.target, kind=e.kind)
    return G
