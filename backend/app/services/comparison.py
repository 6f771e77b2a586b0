from __future__ import annotations

from typing import Any, Iterable

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import ValidationError
from app.crud.crud_statistics import roster_statistics_query, statistics_row, store_guard
from app.models.statistics import GoalkeeperStatistics
from app.services.metrics import DERIVED_FIELDS

MIN_COMPARE_GOALKEEPERS = 2

COMPARISON_FIELDS = (
    "goalkeeper_id",
    "goalkeeper_name",
    "team_name",
    "season",
    "matches_played",
    "goals_conceded",
    "clean_sheets",
    "saves",
) + DERIVED_FIELDS


def normalize_goalkeeper_ids(goalkeeper_ids: Iterable[int]) -> list[int]:
    ids: list[int] = []
    for raw in goalkeeper_ids:
        gid = int(raw)
        if gid <= 0:
            raise ValidationError("goalkeeper ids must be positive integers")
        if gid not in ids:
            ids.append(gid)

    if len(ids) < MIN_COMPARE_GOALKEEPERS:
        raise ValidationError(f"At least {MIN_COMPARE_GOALKEEPERS} goalkeepers are required to compare")
    if len(ids) > settings.COMPARE_MAX_GOALKEEPERS:
        raise ValidationError(f"At most {settings.COMPARE_MAX_GOALKEEPERS} goalkeepers can be compared")
    return ids


def compare_goalkeepers(
    db: Session,
    coach_id: int,
    goalkeeper_ids: Iterable[int],
    season: str,
) -> list[dict[str, Any]]:
    """Side-by-side season rows for an explicit set of goalkeepers.

    Goalkeepers without a record for ``season``, or outside the coach's
    roster, are left out silently, so the result can be shorter than the
    requested set.
    """
    ids = normalize_goalkeeper_ids(goalkeeper_ids)
    if not (season or "").strip():
        raise ValidationError("season is required")

    with store_guard(db, "compare"):
        records = (
            roster_statistics_query(db, coach_id)
            .filter(
                GoalkeeperStatistics.goalkeeper_id.in_(ids),
                GoalkeeperStatistics.season == season.strip(),
            )
            .order_by(GoalkeeperStatistics.matches_played.desc(), GoalkeeperStatistics.id.asc())
            .all()
        )

    out = []
    for r in records:
        row = statistics_row(r)
        out.append({"id": row["id"], **{f: row[f] for f in COMPARISON_FIELDS}})
    return out
