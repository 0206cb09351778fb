"""Snapshot loading and DataFrame helpers."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import pandas as pd
import streamlit as st


@st.cache_data(ttl=300)
def load_snapshot(path: str = "scrum_snapshot.json") -> dict:
    p = Path(path)
    if not p.exists():
        st.error(f"'{path}' not found. Run `python generate_snapshot.py` first.")
        st.stop()
    with p.open() as f:
        return json.load(f)


def week_keys(snap: dict) -> list[str]:
    return [w["key"] for w in snap.get("weeks", [])]


def get_week(snap: dict, key: str) -> Optional[dict]:
    for w in snap.get("weeks", []):
        if w["key"] == key:
            return w
    return None


def previous_week(snap: dict, key: str) -> Optional[dict]:
    weeks = snap.get("weeks", [])
    for i, w in enumerate(weeks):
        if w["key"] == key:
            return weeks[i - 1] if i > 0 else None
    return None


def weeks_until(snap: dict, key: str, count: int) -> list[dict]:
    """The `count` weeks ending at `key`, oldest first."""
    weeks = snap.get("weeks", [])
    keys = [w["key"] for w in weeks]
    if key not in keys:
        return []
    end = keys.index(key) + 1
    return weeks[max(0, end - count):end]


def item_owners(items: list[dict]) -> list[str]:
    return sorted({i["name"] for i in items if i.get("name")})


def build_bottleneck_df(nodes: list[dict]) -> pd.DataFrame:
    rows = []
    for n in nodes:
        rows.append({
            "member":    n["name"],
            "domain":    n["domain"],
            "inbound":   n["inbound_count"],
            "outbound":  n["outbound_count"],
            "intensity": n["intensity"],
            "band":      n["band"],
            "waiters":   ", ".join(n["waiters"]),
            "blocking":  ", ".join(n["blocking"]),
        })
    columns = ["member", "domain", "inbound", "outbound", "intensity", "band", "waiters", "blocking"]
    return pd.DataFrame(rows, columns=columns)


def build_matrix_df(cells: list[dict], hide_diagonal: bool = False) -> pd.DataFrame:
    """Pivot matrix cells into a source x target grid, keeping domain order."""
    if not cells:
        return pd.DataFrame()
    order = list(dict.fromkeys(c["source_domain"] for c in cells))
    df = pd.DataFrame(cells).pivot(
        index="source_domain", columns="target_domain", values="total_count"
    )
    df = df.reindex(index=order, columns=order).fillna(0).astype(int)
    if hide_diagonal:
        df = df.astype(float)
        for d in order:
            df.loc[d, d] = float("nan")
    return df


def build_series_df(series: list[dict], anomalies: list[dict]) -> pd.DataFrame:
    df = pd.DataFrame(series, columns=["week_label", "inbound", "outbound"])
    flagged = {a["week_label"] for a in anomalies}
    df["is_anomaly"] = df["week_label"].isin(flagged)
    return df


def build_load_df(rows: list[dict]) -> pd.DataFrame:
    columns = ["name", "domain", "pair_count", "pre_count", "post_count", "pre_inbound", "total_load"]
    return pd.DataFrame(rows, columns=columns)
