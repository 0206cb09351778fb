"""Tests for the snapshot pipeline (generate_snapshot.py)."""

from __future__ import annotations

import json
from unittest.mock import MagicMock, patch

import pytest
import requests

import generate_snapshot as gs


def _row(year: int, week: int, start: str, entries: list[dict]) -> dict:
    return {"id": f"{year}-{week}", "year": year, "week": week, "week_start_date": start, "entries": entries}


def _response(payload, status: int = 200) -> MagicMock:
    resp = MagicMock()
    resp.json.return_value = payload
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status} error")
    return resp


@pytest.fixture
def isolated_cache(tmp_path, monkeypatch):
    monkeypatch.setattr(gs, "CACHE_DIR", tmp_path / "cache")
    monkeypatch.setattr(gs, "REQUEST_DELAY", 0)
    return tmp_path / "cache"


class TestSettings:
    def test_missing_env_raises(self, monkeypatch) -> None:
        for var in ("SUPABASE_URL", "SUPABASE_KEY", "WORKSPACE_ID"):
            monkeypatch.delenv(var, raising=False)
        monkeypatch.setenv("SUPABASE_URL", "https://x.supabase.co")
        with pytest.raises(EnvironmentError, match="SUPABASE_KEY, WORKSPACE_ID"):
            gs.get_settings()

    def test_trailing_slash_is_stripped(self, monkeypatch) -> None:
        monkeypatch.setenv("SUPABASE_URL", "https://x.supabase.co/")
        monkeypatch.setenv("SUPABASE_KEY", "k")
        monkeypatch.setenv("WORKSPACE_ID", "ws")
        assert gs.get_settings() == ("https://x.supabase.co", "k", "ws")


class TestFetch:
    def test_rest_get_sends_key_headers(self) -> None:
        with patch("generate_snapshot.requests.get", return_value=_response([{"id": 1}])) as get:
            assert gs.rest_get("https://x/rest/v1/snapshots", "secret", {"limit": 1}) == [{"id": 1}]
        headers = get.call_args.kwargs["headers"]
        assert headers["apikey"] == "secret"
        assert headers["Authorization"] == "Bearer secret"

    def test_rest_get_raises_on_error_payload(self) -> None:
        with patch("generate_snapshot.requests.get", return_value=_response({"message": "bad filter"})):
            with pytest.raises(RuntimeError, match="bad filter"):
                gs.rest_get("https://x", "k", {})

    def test_pagination_stops_on_short_page(self, isolated_cache, monkeypatch) -> None:
        monkeypatch.setattr(gs, "WEEKS_BACK", 30)
        pages = [_response([{"id": i} for i in range(20)]), _response([{"id": 99}])]
        with patch("generate_snapshot.requests.get", side_effect=pages) as get:
            rows = gs.fetch_snapshots("https://x", "k", "ws")
        assert len(rows) == 21
        assert get.call_count == 2
        assert get.call_args_list[1].kwargs["params"]["offset"] == 20
        assert get.call_args_list[1].kwargs["params"]["limit"] == 10

    def test_http_error_keeps_what_was_fetched(self, isolated_cache, monkeypatch) -> None:
        monkeypatch.setattr(gs, "WEEKS_BACK", 40)
        pages = [_response([{"id": i} for i in range(20)]), _response(None, status=500)]
        with patch("generate_snapshot.requests.get", side_effect=pages):
            rows = gs.fetch_snapshots("https://x", "k", "ws")
        assert len(rows) == 20

    def test_second_fetch_hits_cache(self, isolated_cache) -> None:
        with patch("generate_snapshot.requests.get", return_value=_response([{"id": 1}])) as get:
            gs.fetch_snapshots("https://x", "k", "ws")
            gs.fetch_snapshots("https://x", "k", "ws")
        assert get.call_count == 1
        assert (isolated_cache / "snapshots_ws.json").exists()


class TestAssembly:
    def test_week_key(self) -> None:
        assert gs.week_key({"year": 2024, "week": 7}) == "2024-7"
        assert gs.week_key({"week_start_date": "2024-02-12"}) == "2024-02-12"

    def test_build_week(self) -> None:
        entries = [
            {"name": "A", "domain": "FE", "collaborators": [{"name": "B", "relation": "pre"}]},
            {"name": "B", "domain": "BE", "collaborators": [{"name": "A", "relation": "blocks"}]},
        ]
        week = gs.build_week(_row(2024, 7, "2024-02-12", entries))
        assert week["key"] == "2024-7"
        assert week["bottlenecks"][0]["name"] == "B"
        assert week["skipped"] == [{"owner": "B", "collaborator": "A", "relation": "blocks"}]
        assert week["stats"]["total_entries"] == 2
        assert len(week["matrix"]) == 4

    def test_weeks_are_ascending(self) -> None:
        rows = [
            _row(2024, 9, "2024-02-26", []),
            _row(2024, 7, "2024-02-12", []),
            _row(2024, 8, "2024-02-19", []),
        ]
        assert [w["week"] for w in gs.build_weeks(rows)] == [7, 8, 9]

    def test_load_export_accepts_wrapped_rows(self, tmp_path) -> None:
        path = tmp_path / "export.json"
        path.write_text(json.dumps({"snapshots": [_row(2024, 1, "2024-01-01", [])]}))
        assert len(gs.load_export(str(path))) == 1


def test_main_writes_snapshot_from_export(tmp_path, monkeypatch) -> None:
    export = tmp_path / "team.json"
    export.write_text(json.dumps([
        _row(2024, 1, "2024-01-01", [
            {"name": "A", "domain": "FE", "collaborators": [{"name": "B", "relation": "pre"}]},
            {"name": "B", "domain": "BE"},
        ]),
    ]))
    monkeypatch.setenv("SNAPSHOT_EXPORT", str(export))
    monkeypatch.chdir(tmp_path)

    gs.main()

    out = json.loads((tmp_path / "scrum_snapshot.json").read_text())
    assert out["workspace"] == "team"
    assert out["weeks_analyzed"] == 1
    assert out["weeks"][0]["bottlenecks"][0]["name"] == "B"
