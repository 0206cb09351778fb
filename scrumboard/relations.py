"""
Relation model and the data-model boundary.

A collaborator entry names another member and one or more relation kinds:
  - pair: concurrent work, one undirected edge
  - pre:  the declaring member waits on the named collaborator
  - post: the named collaborator acts after the declaring member

Declarations are one-sided facts of the declaring item only; a `pre` on A
and a `post` on B are never reconciled.
"""

from __future__ import annotations

from typing import Optional

from scrumboard.config import RELATION_KINDS, UNKNOWN_DOMAIN


class UnknownRelationKind(ValueError):
    """A collaborator entry declares a relation outside pair/pre/post."""

    def __init__(self, relation, owner: str = "", collaborator: str = "") -> None:
        self.relation = relation
        self.owner = owner
        self.collaborator = collaborator
        super().__init__(
            f"unknown relation kind {relation!r} "
            f"({owner or '?'} -> {collaborator or '?'})"
        )


def effective_relations(collab: dict, owner: str = "") -> list[str]:
    """
    `relations` when non-empty, else the legacy single `relation`, else [].
    Raises UnknownRelationKind if any declared kind is not recognised.
    """
    relations = collab.get("relations") or []
    if isinstance(relations, str):
        relations = [relations]
    if not relations:
        single = collab.get("relation")
        relations = [single] if single else []

    for rel in relations:
        if rel not in RELATION_KINDS:
            raise UnknownRelationKind(rel, owner, collab.get("name") or "")
    return list(relations)


def _blank_to_none(value) -> Optional[str]:
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


def _progress_tasks(record: dict) -> list[dict]:
    past = record.get("past_week") or record.get("pastWeek") or {}
    tasks = record.get("past_week_tasks") or past.get("tasks") or []
    out = [
        {"title": t.get("title", ""), "progress": t.get("progress")}
        for t in tasks
        if isinstance(t, dict)
    ]
    if not out and record.get("progressPercent") is not None:
        out.append({"title": record.get("topic") or "", "progress": record["progressPercent"]})
    return out


def normalize_entry(record: dict) -> dict:
    """
    Map a snapshot entry row or a legacy scrum item onto the work-item shape
    the engine reads. Member names are kept exactly as written.
    """
    past = record.get("past_week") or record.get("pastWeek") or {}
    collaborators = record.get("collaborators")
    if not collaborators:
        collaborators = past.get("collaborators") or []

    risk_level = record.get("risk_level")
    if risk_level is None:
        risk_level = record.get("riskLevel")

    return {
        "name":          record.get("name") or "",
        "domain":        record.get("domain") or UNKNOWN_DOMAIN,
        "project":       record.get("project") or "",
        "module":        _blank_to_none(record.get("module")),
        "feature":       _blank_to_none(record.get("feature") or record.get("topic")),
        "collaborators": [dict(c) for c in collaborators if isinstance(c, dict)],
        "risk_level":    risk_level,
        "progress":      _progress_tasks(record),
    }


def normalize_entries(records: list[dict]) -> list[dict]:
    return [normalize_entry(r) for r in records if isinstance(r, dict)]
