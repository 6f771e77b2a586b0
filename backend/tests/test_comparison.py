"""Tests for the side-by-side goalkeeper comparison."""

from __future__ import annotations

from typing import Any

import pytest

from app.core.errors import ValidationError
from app.services.comparison import compare_goalkeepers, normalize_goalkeeper_ids


def test_rows_ordered_by_matches_played(db, roster: dict[str, Any], make_record) -> None:
    a = make_record(roster["gk_a"], "2024", matches_played=6, clean_sheets=3, saves=20, goals_conceded=5)
    b = make_record(roster["gk_b"], "2024", matches_played=12, clean_sheets=4, saves=40, goals_conceded=10)

    rows = compare_goalkeepers(db, roster["owner"].id, [roster["gk_a"].id, roster["gk_b"].id], "2024")

    assert [r["id"] for r in rows] == [b.id, a.id]
    assert rows[0]["goalkeeper_name"] == "Bea Gil"
    assert rows[0]["save_percentage"] == 80.0
    assert rows[1]["clean_sheet_percentage"] == 50.0


def test_goalkeepers_without_season_record_are_omitted(
    db, roster: dict[str, Any], make_goalkeeper, make_record
) -> None:
    extra = make_goalkeeper(roster["team"], "Eva", "Sanz")
    make_record(roster["gk_a"], "2024", matches_played=5)
    make_record(roster["gk_b"], "2023", matches_played=5)

    rows = compare_goalkeepers(db, roster["owner"].id, [roster["gk_a"].id, roster["gk_b"].id, extra.id], "2024")
    assert [r["goalkeeper_id"] for r in rows] == [roster["gk_a"].id]


def test_foreign_goalkeepers_are_omitted(db, roster: dict[str, Any], make_record) -> None:
    make_record(roster["gk_a"], "2024", matches_played=5)
    make_record(roster["gk_other"], "2024", matches_played=9)

    rows = compare_goalkeepers(db, roster["owner"].id, [roster["gk_a"].id, roster["gk_other"].id], "2024")
    assert [r["goalkeeper_id"] for r in rows] == [roster["gk_a"].id]


@pytest.mark.parametrize("ids", [[], [1], [1, 1], [1, 2, 3, 4, 5, 6], [1, -2]])
def test_id_set_validation(ids: list[int]) -> None:
    with pytest.raises(ValidationError):
        normalize_goalkeeper_ids(ids)


def test_duplicate_ids_are_collapsed() -> None:
    assert normalize_goalkeeper_ids([3, 7, 3]) == [3, 7]


def test_season_required(db, roster: dict[str, Any]) -> None:
    with pytest.raises(ValidationError):
        compare_goalkeepers(db, roster["owner"].id, [1, 2], " ")
