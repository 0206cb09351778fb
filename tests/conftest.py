"""Shared fixtures: a small team week and a multi-week history."""

from __future__ import annotations

import pytest

from tests._factory import make_item


@pytest.fixture
def team_items() -> list[dict]:
    """
    Edges produced (in order):
      Alice -> Bob   pre   FE -> BE
      Alice -> Carol pair  FE -> FE
      Bob   -> Dave  pre   BE -> unknown (Dave owns no item)
      Carol -> Bob   pair  FE -> BE
      Carol -> Bob   pre   FE -> BE
      Alice -> Bob   pre   FE -> BE
    """
    return [
        make_item("Alice", "FE", [
            {"name": "Bob", "relation": "pre"},
            {"name": "Carol", "relation": "pair"},
        ], module="login"),
        make_item("Bob", "BE", [{"name": "Dave", "relation": "pre"}], module="api"),
        make_item("Carol", "FE", [
            {"name": "Bob", "relation": "post", "relations": ["pair", "pre"]},
        ], module="login"),
        make_item("Alice", "FE", [{"name": "Bob", "relation": "pre"}], module="search", project="Search"),
    ]


@pytest.fixture
def weeks() -> list[dict]:
    """Five weeks where Bob's inbound waits spike in the last one."""
    out = []
    for i, waiters in enumerate([1, 1, 1, 1, 10], start=1):
        items = [make_item("Bob", "BE")]
        for w in range(waiters):
            items.append(make_item(f"M{w}", "FE", [{"name": "Bob", "relation": "pre"}]))
        out.append({"week_label": f"W{i:02d}", "items": items})
    return out
