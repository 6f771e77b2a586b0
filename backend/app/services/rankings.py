from __future__ import annotations

import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import ValidationError
from app.crud.crud_statistics import list_seasons, roster_statistics_query, statistics_row, store_guard
from app.models.statistics import GoalkeeperStatistics

logger = logging.getLogger(__name__)


def _ranking_key(row: dict[str, Any]):
    # best clean-sheet rate first, save rate breaks ties, record id keeps it stable
    return (-row["clean_sheet_percentage"], -row["save_percentage"], row["id"])


def top_performers(
    db: Session,
    coach_id: int,
    season: str,
    limit: int,
    min_matches: Optional[int] = None,
) -> list[dict[str, Any]]:
    """Best goalkeepers of a season within the coach's roster.

    Only records with at least ``min_matches`` matches played qualify
    (``settings.RANKING_MIN_MATCHES`` when omitted). An empty list means
    nobody met the threshold.
    """
    if limit is None or limit < 1:
        raise ValidationError("limit must be a positive integer")
    threshold = settings.RANKING_MIN_MATCHES if min_matches is None else min_matches

    with store_guard(db, "rank"):
        records = (
            roster_statistics_query(db, coach_id)
            .filter(
                GoalkeeperStatistics.season == season,
                GoalkeeperStatistics.matches_played >= threshold,
            )
            .all()
        )

    rows = sorted((statistics_row(r) for r in records), key=_ranking_key)
    return rows[:limit]


def season_leaders(
    db: Session,
    coach_id: int,
    season: Optional[str] = None,
    limit: Optional[int] = None,
) -> list[dict[str, Any]]:
    """Dashboard view: the top of the coach's latest season.

    Uses the same qualification threshold as :func:`top_performers`.
    """
    if not season:
        seasons = list_seasons(db, coach_id=coach_id)
        if not seasons:
            return []
        season = seasons[0]

    return top_performers(db, coach_id, season, limit or settings.LEADERS_LIMIT)
