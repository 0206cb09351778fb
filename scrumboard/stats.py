"""Week overview statistics (projects, modules, progress, risk)."""

from __future__ import annotations

import math
import numbers
from typing import Optional

from scrumboard.config import RISK_LEVELS


def is_valid_number(value, upper: Optional[float] = None) -> bool:
    """Finite, non-negative real (bools excluded), optionally capped at `upper`."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    if not math.isfinite(value) or value < 0:
        return False
    return upper is None or value <= upper


def _item_progress(item: dict) -> Optional[float]:
    values = [
        t.get("progress")
        for t in item.get("progress") or []
        if isinstance(t, dict) and is_valid_number(t.get("progress"), 100)
    ]
    if not values:
        return None
    return sum(values) / len(values)


def compute_week_stats(items: list[dict]) -> dict:
    """
    Overview of one week. Progress and risk values that are non-finite,
    negative or out of range are left out rather than poisoning the averages.
    """
    projects: set[str] = set()
    modules:  set[str] = set()
    features: set[str] = set()
    domain_counts: dict[str, int] = {}
    risk_counts = {level: 0 for level in RISK_LEVELS}
    progress: list[float] = []

    for item in items:
        if item.get("project"):
            projects.add(item["project"])
        if item.get("module"):
            modules.add(item["module"])
        if item.get("feature"):
            features.add(item["feature"])
        if item.get("domain"):
            domain_counts[item["domain"]] = domain_counts.get(item["domain"], 0) + 1

        level = item.get("risk_level")
        if is_valid_number(level) and level in risk_counts:
            risk_counts[int(level)] += 1

        p = _item_progress(item)
        if p is not None:
            progress.append(p)

    return {
        "project_count":       len(projects),
        "module_count":        len(modules),
        "feature_count":       len(features),
        "avg_progress":        round(sum(progress) / len(progress)) if progress else None,
        "domain_distribution": domain_counts,
        "risk_counts":         risk_counts,
        "total_entries":       len(items),
    }
