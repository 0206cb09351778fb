"""Cross-week analysis: per-member bottleneck series, trend and anomaly weeks."""

from __future__ import annotations

import numpy as np

from scrumboard.config import ANOMALY_MIN_WEEKS, ANOMALY_SIGMA
from scrumboard.graph import build_graph
from scrumboard.metrics import summarize_member
from scrumboard.stats import is_valid_number


def member_bottleneck_series(weeks: list[dict], member: str) -> list[dict]:
    """
    weeks: time-ordered [{"week_label": str, "items": [...]}, ...]
    Returns one {week_label, inbound, outbound} point per week.
    """
    series = []
    for week in weeks:
        s = summarize_member(build_graph(week.get("items") or []), member)
        series.append({
            "week_label": week.get("week_label", ""),
            "inbound":    s["pre_inbound"],
            "outbound":   s["pre_count"],
        })
    return series


def detect_bottleneck_trend(weekly_series: list[dict]) -> dict:
    """
    trend     – last week minus the week before, None with fewer than 2 weeks
    anomalies – weeks whose inbound exceeds mean + 1.5 * population stddev
                (needs at least 3 weeks; a flat series never has anomalies)

    Points with a non-finite or negative inbound/outbound are dropped first.
    """
    series = [
        p for p in weekly_series
        if is_valid_number(p.get("inbound")) and is_valid_number(p.get("outbound"))
    ]

    trend = None
    if len(series) >= 2:
        last, prev = series[-1], series[-2]
        trend = {
            "outbound_diff": last["outbound"] - prev["outbound"],
            "inbound_diff":  last["inbound"] - prev["inbound"],
        }

    anomalies = []
    if len(series) >= ANOMALY_MIN_WEEKS:
        inbound = np.array([p["inbound"] for p in series], dtype=float)
        threshold = inbound.mean() + ANOMALY_SIGMA * inbound.std()
        anomalies = [
            {"week_label": p["week_label"], "inbound": p["inbound"]}
            for p in series
            if p["inbound"] > threshold
        ]

    return {"trend": trend, "anomalies": anomalies}


def weekly_collaboration_trend(weeks: list[dict]) -> list[dict]:
    """Team-wide relation totals per week, in input order."""
    out = []
    for week in weeks:
        counts = {"pair": 0, "pre": 0, "post": 0}
        for e in build_graph(week.get("items") or []).edges:
            counts[e.kind] += 1
        out.append({
            "week_label":           week.get("week_label", ""),
            "pair_count":           counts["pair"],
            "pre_count":            counts["pre"],
            "post_count":           counts["post"],
            "total_collaborations": sum(counts.values()),
        })
    return out
