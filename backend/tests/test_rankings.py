"""Tests for top performers and dashboard leaders.

Coverage:
* Minimum-matches threshold and clean-sheet/save ordering.
* Deterministic tie-break on record id.
* Roster scoping, ``limit`` handling and empty results.
"""

from __future__ import annotations

from typing import Any

import pytest

from app.core.errors import ValidationError
from app.services.rankings import season_leaders, top_performers


@pytest.fixture
def season_2024(roster: dict[str, Any], make_goalkeeper, make_record) -> dict[str, Any]:
    gk_c = make_goalkeeper(roster["team"], "Cris", "Luna")
    return {
        "A": make_record(roster["gk_a"], "2024", matches_played=10, clean_sheets=7),
        "B": make_record(roster["gk_b"], "2024", matches_played=6, clean_sheets=5),
        "C": make_record(gk_c, "2024", matches_played=4, clean_sheets=4),
    }


def test_threshold_and_clean_sheet_order(db, roster: dict[str, Any], season_2024) -> None:
    """B (83.33%) beats A (70%); C is under five matches and drops out."""
    rows = top_performers(db, roster["owner"].id, "2024", 10)

    assert [r["id"] for r in rows] == [season_2024["B"].id, season_2024["A"].id]
    assert rows[0]["clean_sheet_percentage"] == 83.33
    assert rows[1]["clean_sheet_percentage"] == 70.0


def test_custom_threshold(db, roster: dict[str, Any], season_2024) -> None:
    rows = top_performers(db, roster["owner"].id, "2024", 10, min_matches=3)
    assert rows[0]["id"] == season_2024["C"].id


def test_limit_truncates(db, roster: dict[str, Any], season_2024) -> None:
    rows = top_performers(db, roster["owner"].id, "2024", 1)
    assert [r["id"] for r in rows] == [season_2024["B"].id]


@pytest.mark.parametrize("limit", [0, -3])
def test_limit_must_be_positive(db, roster: dict[str, Any], limit: int) -> None:
    with pytest.raises(ValidationError):
        top_performers(db, roster["owner"].id, "2024", limit)


def test_save_percentage_breaks_ties_then_id(db, roster: dict[str, Any], make_goalkeeper, make_record) -> None:
    team = roster["team"]
    low = make_record(make_goalkeeper(team, "Low", "Saves"), "2025", matches_played=10, clean_sheets=5, saves=10, goals_conceded=10)
    first = make_record(make_goalkeeper(team, "Twin", "One"), "2025", matches_played=10, clean_sheets=5, saves=30, goals_conceded=10)
    second = make_record(make_goalkeeper(team, "Twin", "Two"), "2025", matches_played=10, clean_sheets=5, saves=30, goals_conceded=10)

    rows = top_performers(db, roster["owner"].id, "2025", 10)
    assert [r["id"] for r in rows] == [first.id, second.id, low.id]


def test_other_coaches_are_not_ranked(db, roster: dict[str, Any], season_2024, make_record) -> None:
    make_record(roster["gk_other"], "2024", matches_played=10, clean_sheets=10)
    ids = {r["id"] for r in top_performers(db, roster["owner"].id, "2024", 10)}
    assert ids == {season_2024["A"].id, season_2024["B"].id}


def test_nobody_qualifies_returns_empty_list(db, roster: dict[str, Any], make_record) -> None:
    make_record(roster["gk_a"], "2024", matches_played=2, clean_sheets=2)
    assert top_performers(db, roster["owner"].id, "2024", 10) == []


def test_leaders_default_to_latest_season(db, roster: dict[str, Any], make_record) -> None:
    make_record(roster["gk_a"], "2023-2024", matches_played=20, clean_sheets=20)
    latest = make_record(roster["gk_b"], "2024-2025", matches_played=8, clean_sheets=2)

    rows = season_leaders(db, roster["owner"].id)
    assert [r["id"] for r in rows] == [latest.id]


def test_leaders_use_the_shared_threshold(db, roster: dict[str, Any], make_record) -> None:
    make_record(roster["gk_a"], "2024", matches_played=3, clean_sheets=3)
    assert season_leaders(db, roster["owner"].id, season="2024") == []


def test_leaders_without_any_season(db, roster: dict[str, Any]) -> None:
    assert season_leaders(db, roster["owner"].id) == []
