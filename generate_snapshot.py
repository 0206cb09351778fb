#!/usr/bin/env python3
"""
generate_snapshot.py

Pulls the most recent weekly scrum snapshots (with their entries) for one
workspace from the Supabase REST API, caches them locally (cache/
directory, 1-hour TTL), normalises every entry into a work item and runs
the collaboration analytics for each week.

Output: scrum_snapshot.json

Usage:
    export SUPABASE_URL=https://<project>.supabase.co
    export SUPABASE_KEY=<service or anon key>
    export WORKSPACE_ID=<uuid>
    python generate_snapshot.py

    # or, from an exported JSON array of snapshot rows:
    SNAPSHOT_EXPORT=snapshots.json python generate_snapshot.py
"""

import os
import json
import time
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import requests
import pandas as pd

from scrumboard.graph import build_graph
from scrumboard.insights import generate_team_insights
from scrumboard.metrics import get_bottleneck_nodes, get_collaboration_matrix
from scrumboard.relations import normalize_entries
from scrumboard.stats import compute_week_stats

# ── Config ───────────────────────────────────────────────────────────────────
WEEKS_BACK    = int(os.environ.get("SCRUM_WEEKS", "26"))
PAGE_SIZE     = 20
CACHE_DIR     = Path("cache")
CACHE_TTL     = 3600            # 1 hour
OUTPUT_FILE   = "scrum_snapshot.json"
REST_PATH     = "/rest/v1/snapshots"
SELECT        = "*,entries:snapshot_entries(*)"
REQUEST_DELAY = 0.2             # seconds between paginated requests

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s: %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Supabase REST client
# ─────────────────────────────────────────────────────────────────────────────

def get_settings() -> tuple[str, str, str]:
    url = os.environ.get("SUPABASE_URL", "").strip().rstrip("/")
    key = os.environ.get("SUPABASE_KEY", "").strip()
    workspace = os.environ.get("WORKSPACE_ID", "").strip()
    missing = [
        name for name, value in
        (("SUPABASE_URL", url), ("SUPABASE_KEY", key), ("WORKSPACE_ID", workspace))
        if not value
    ]
    if missing:
        raise EnvironmentError(
            f"{', '.join(missing)} must be set. "
            "Alternatively point SNAPSHOT_EXPORT at a JSON export of the snapshots table."
        )
    return url, key, workspace


def rest_get(url: str, key: str, params: dict) -> list[dict]:
    """GET a PostgREST resource and return its JSON rows."""
    resp = requests.get(
        url,
        params=params,
        headers={
            "apikey": key,
            "Authorization": f"Bearer {key}",
            "Accept": "application/json",
        },
        timeout=60,
    )
    resp.raise_for_status()
    data = resp.json()
    if isinstance(data, dict) and "message" in data:
        raise RuntimeError(f"Supabase error: {data['message']}")
    return data


# ─────────────────────────────────────────────────────────────────────────────
# Cache helpers
# ─────────────────────────────────────────────────────────────────────────────

def cache_path(key: str) -> Path:
    CACHE_DIR.mkdir(exist_ok=True)
    return CACHE_DIR / f"{key}.json"


def cache_load(key: str) -> Optional[list | dict]:
    p = cache_path(key)
    if not p.exists():
        return None
    age = time.time() - p.stat().st_mtime
    if age > CACHE_TTL:
        log.info(f"Cache expired for '{key}' (age={age/3600:.1f}h)")
        return None
    with p.open() as f:
        return json.load(f)


def cache_save(key: str, data) -> None:
    with cache_path(key).open("w") as f:
        json.dump(data, f)


# ─────────────────────────────────────────────────────────────────────────────
# Data fetching
# ─────────────────────────────────────────────────────────────────────────────

def fetch_snapshots(url: str, key: str, workspace: str) -> list[dict]:
    """Fetch the latest WEEKS_BACK snapshots with entries, newest first."""
    cache_key = f"snapshots_{workspace}"
    cached = cache_load(cache_key)
    if cached is not None:
        log.info(f"Loaded {len(cached)} snapshots from cache")
        return cached

    endpoint = url + REST_PATH
    snapshots: list[dict] = []
    offset = 0
    page = 0

    while len(snapshots) < WEEKS_BACK:
        page += 1
        limit = min(PAGE_SIZE, WEEKS_BACK - len(snapshots))
        log.info(f"  Fetching snapshot page {page} (collected {len(snapshots)} so far)…")
        try:
            rows = rest_get(endpoint, key, {
                "select":       SELECT,
                "workspace_id": f"eq.{workspace}",
                "order":        "week_start_date.desc",
                "limit":        limit,
                "offset":       offset,
            })
        except requests.HTTPError as exc:
            log.error(f"HTTP error on page {page}: {exc}")
            break

        snapshots.extend(rows)
        if len(rows) < limit:
            break
        offset += limit
        time.sleep(REQUEST_DELAY)

    cache_save(cache_key, snapshots)
    return snapshots


def load_export(path: str) -> list[dict]:
    with Path(path).open() as f:
        data = json.load(f)
    return data if isinstance(data, list) else data.get("snapshots", [])


# ─────────────────────────────────────────────────────────────────────────────
# Assembly
# ─────────────────────────────────────────────────────────────────────────────

def week_key(snapshot: dict) -> str:
    year = snapshot.get("year")
    week = snapshot.get("week")
    if year and week:
        return f"{year}-{week}"
    return snapshot.get("week_start_date") or snapshot.get("id", "")


def build_week(snapshot: dict) -> dict:
    """One week of normalised items plus its precomputed analytics."""
    items = normalize_entries(snapshot.get("entries") or [])
    graph = build_graph(items)
    key = week_key(snapshot)
    return {
        "key":             key,
        "year":            snapshot.get("year"),
        "week":            snapshot.get("week"),
        "week_label":      key.replace("-", " "),
        "week_start_date": snapshot.get("week_start_date"),
        "items":           items,
        "skipped":         list(graph.skipped),
        "bottlenecks":     get_bottleneck_nodes(items),
        "matrix":          get_collaboration_matrix(items, "both"),
        "stats":           compute_week_stats(items),
        "team_insights":   generate_team_insights(items),
    }


def build_weeks(snapshots: list[dict]) -> list[dict]:
    """Weeks in ascending week order, as every multi-week consumer expects."""
    ordered = sorted(
        snapshots,
        key=lambda s: (s.get("week_start_date") or "", week_key(s)),
    )
    return [build_week(s) for s in ordered]


# ─────────────────────────────────────────────────────────────────────────────
# Main
# ─────────────────────────────────────────────────────────────────────────────

def main() -> None:
    export = os.environ.get("SNAPSHOT_EXPORT", "").strip()
    if export:
        log.info(f"Reading snapshots from export {export}…")
        snapshots = load_export(export)
        workspace = Path(export).stem
    else:
        url, key, workspace = get_settings()
        log.info(f"Pulling last {WEEKS_BACK} weekly snapshots for workspace {workspace}…")
        snapshots = fetch_snapshots(url, key, workspace)

    if not snapshots:
        log.error("No snapshots fetched. Check your Supabase settings and network access.")
        return

    log.info("Building weekly analytics…")
    weeks = build_weeks(snapshots)

    skipped = sum(len(w["skipped"]) for w in weeks)
    if skipped:
        log.warning(f"{skipped} collaborator entries skipped for unknown relation kinds")

    snapshot = {
        "generated_at":   datetime.now(timezone.utc).isoformat(),
        "workspace":      workspace,
        "weeks_analyzed": len(weeks),
        "weeks":          weeks,
    }

    # ── Save output ──────────────────────────────────────────────────────────
    output_path = Path(OUTPUT_FILE)
    with output_path.open("w") as f:
        json.dump(snapshot, f, indent=2, ensure_ascii=False, default=str)

    log.info(f"✓ Saved {output_path} ({output_path.stat().st_size / 1024:.1f} KB)")
    log.info(f"  Weeks analysed: {len(weeks)}")
    log.info(f"  Entries:        {sum(len(w['items']) for w in weeks)}")

    # ── Quick summary table ──────────────────────────────────────────────────
    latest = weeks[-1]
    if latest["bottlenecks"]:
        df = pd.DataFrame(latest["bottlenecks"])[
            ["name", "domain", "inbound_count", "outbound_count", "intensity", "band"]
        ]
        print(f"\n── Bottlenecks {latest['week_label']} ─────────────────────────────────────────")
        print(df.to_string(index=False))


if __name__ == "__main__":
    main()
