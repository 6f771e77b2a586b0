from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Iterator, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Query, Session

from app.core.errors import NotFoundError, StoreError, ValidationError
from app.models.goalkeepers import Goalkeeper
from app.models.statistics import COUNTER_FIELDS, GoalkeeperStatistics
from app.models.teams import Team
from app.services.metrics import round2, with_metrics

logger = logging.getLogger(__name__)


@contextmanager
def store_guard(db: Session, action: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Statistics store failure during %s", action)
        raise StoreError(f"Could not {action} statistics") from exc


def _clean_counters(counters: Optional[dict[str, Any]]) -> dict[str, int]:
    out: dict[str, int] = {}
    for name, value in (counters or {}).items():
        if name not in COUNTER_FIELDS or value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(f"{name} must be an integer")
        if value < 0:
            raise ValidationError(f"{name} cannot be negative")
        out[name] = value
    return out


def _clean_season(season: Optional[str]) -> str:
    label = (season or "").strip()
    if not label:
        raise ValidationError("season is required")
    return label


def _check_pairs(row: dict[str, int]) -> None:
    if row["clean_sheets"] > row["matches_played"]:
        raise ValidationError("clean_sheets cannot exceed matches_played")
    if row["penalties_saved"] > row["penalties_faced"]:
        raise ValidationError("penalties_saved cannot exceed penalties_faced")


def _merged_counters(existing: Optional[GoalkeeperStatistics], values: dict[str, int]) -> dict[str, int]:
    if existing is None:
        base = {name: 0 for name in COUNTER_FIELDS}
    else:
        base = {name: int(getattr(existing, name) or 0) for name in COUNTER_FIELDS}
    base.update(values)
    return base


def _find(db: Session, goalkeeper_id: int, season: str) -> Optional[GoalkeeperStatistics]:
    return (
        db.query(GoalkeeperStatistics)
        .filter(
            GoalkeeperStatistics.goalkeeper_id == goalkeeper_id,
            GoalkeeperStatistics.season == season,
        )
        .one_or_none()
    )


def _apply(db: Session, row: GoalkeeperStatistics, changes: dict[str, Any]) -> GoalkeeperStatistics:
    for name, value in changes.items():
        setattr(row, name, value)
    # refreshed even when nothing changed
    row.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(row)
    return row


def roster_statistics_query(db: Session, coach_id: int) -> Query:
    """Statistics rows reachable through the coach -> team -> goalkeeper chain."""
    return (
        db.query(GoalkeeperStatistics)
        .join(Goalkeeper, Goalkeeper.id == GoalkeeperStatistics.goalkeeper_id)
        .join(Team, Team.id == Goalkeeper.team_id)
        .filter(Team.coach_id == coach_id)
    )


def statistics_row(record: GoalkeeperStatistics) -> dict[str, Any]:
    gk = record.goalkeeper
    team = gk.team if gk else None

    row: dict[str, Any] = {
        "id": record.id,
        "goalkeeper_id": record.goalkeeper_id,
        "goalkeeper_name": gk.full_name if gk else None,
        "team_id": team.id if team else None,
        "team_name": team.name if team else None,
        "season": record.season,
    }
    for name in COUNTER_FIELDS:
        row[name] = int(getattr(record, name) or 0)
    row["created_at"] = record.created_at
    row["updated_at"] = record.updated_at
    return with_metrics(row)


def statistics_exists(db: Session, goalkeeper_id: int, season: str) -> bool:
    with store_guard(db, "check"):
        return _find(db, goalkeeper_id, season.strip()) is not None


def create_statistics(
    db: Session,
    goalkeeper_id: Optional[int],
    season: Optional[str],
    counters: Optional[dict[str, Any]] = None,
) -> tuple[GoalkeeperStatistics, bool]:
    """Insert the season row for a goalkeeper, or merge into the existing one.

    Returns ``(record, created)``. Counters that are not supplied default to
    zero on insert and are left untouched on merge. The resulting row must
    keep ``clean_sheets <= matches_played`` and
    ``penalties_saved <= penalties_faced``. The unique constraint on
    (goalkeeper_id, season) settles concurrent creates: the loser of the race
    falls back to a merge.
    """
    if not goalkeeper_id:
        raise ValidationError("goalkeeper_id is required")
    label = _clean_season(season)
    values = _clean_counters(counters)

    with store_guard(db, "create"):
        existing = _find(db, goalkeeper_id, label)
        if existing is not None:
            _check_pairs(_merged_counters(existing, values))
            logger.info("Merging statistics into record %s (goalkeeper=%s season=%s)", existing.id, goalkeeper_id, label)
            return _apply(db, existing, values), False

        fresh = _merged_counters(None, values)
        _check_pairs(fresh)
        row = GoalkeeperStatistics(goalkeeper_id=goalkeeper_id, season=label, **fresh)
        db.add(row)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            existing = _find(db, goalkeeper_id, label)
            if existing is None:
                raise
            _check_pairs(_merged_counters(existing, values))
            logger.info("Concurrent create for goalkeeper=%s season=%s, merging", goalkeeper_id, label)
            return _apply(db, existing, values), False

        db.refresh(row)
        logger.info("Created statistics record %s (goalkeeper=%s season=%s)", row.id, goalkeeper_id, label)
        return row, True


def get_statistics(db: Session, record_id: int) -> GoalkeeperStatistics:
    with store_guard(db, "load"):
        row = db.query(GoalkeeperStatistics).filter(GoalkeeperStatistics.id == record_id).one_or_none()
    if row is None:
        raise NotFoundError("Statistics not found")
    return row


def list_by_goalkeeper(db: Session, goalkeeper_id: int) -> list[GoalkeeperStatistics]:
    with store_guard(db, "list"):
        return (
            db.query(GoalkeeperStatistics)
            .filter(GoalkeeperStatistics.goalkeeper_id == goalkeeper_id)
            .order_by(GoalkeeperStatistics.season.desc(), GoalkeeperStatistics.id.asc())
            .all()
        )


def list_by_season(db: Session, coach_id: int, season: str) -> list[GoalkeeperStatistics]:
    with store_guard(db, "list"):
        return (
            roster_statistics_query(db, coach_id)
            .filter(GoalkeeperStatistics.season == season)
            .order_by(
                GoalkeeperStatistics.matches_played.desc(),
                Goalkeeper.first_name.asc(),
                Goalkeeper.last_name.asc(),
                GoalkeeperStatistics.id.asc(),
            )
            .all()
        )


def list_by_team(db: Session, team_id: int, season: Optional[str] = None) -> list[GoalkeeperStatistics]:
    with store_guard(db, "list"):
        q = (
            db.query(GoalkeeperStatistics)
            .join(Goalkeeper, Goalkeeper.id == GoalkeeperStatistics.goalkeeper_id)
            .filter(Goalkeeper.team_id == team_id)
        )
        if season:
            q = q.filter(GoalkeeperStatistics.season == season)
        return q.order_by(
            GoalkeeperStatistics.season.desc(),
            Goalkeeper.first_name.asc(),
            Goalkeeper.last_name.asc(),
            GoalkeeperStatistics.id.asc(),
        ).all()


def update_statistics(db: Session, record_id: int, changes: dict[str, Any]) -> GoalkeeperStatistics:
    """Merge the supplied fields into a record; omitted fields stay as they are."""
    row = get_statistics(db, record_id)

    values: dict[str, Any] = _clean_counters(changes)
    if changes.get("season") is not None:
        label = _clean_season(changes["season"])
        if label != row.season:
            with store_guard(db, "check"):
                clash = _find(db, row.goalkeeper_id, label)
            if clash is not None:
                raise ValidationError(f"Statistics already exist for this goalkeeper in season {label}")
        values["season"] = label

    with store_guard(db, "update"):
        try:
            row = _apply(db, row, values)
        except IntegrityError:
            db.rollback()
            raise ValidationError("Statistics already exist for this goalkeeper in that season")

    logger.info("Updated statistics record %s (%s)", record_id, ", ".join(sorted(values)) or "no fields")
    return row


def delete_statistics(db: Session, record_id: int) -> bool:
    with store_guard(db, "delete"):
        deleted = (
            db.query(GoalkeeperStatistics)
            .filter(GoalkeeperStatistics.id == record_id)
            .delete(synchronize_session=False)
        )
        db.commit()

    if deleted:
        logger.info("Deleted statistics record %s", record_id)
    return bool(deleted)


def list_seasons(db: Session, coach_id: Optional[int] = None) -> list[str]:
    with store_guard(db, "list"):
        if coach_id is None:
            q = db.query(GoalkeeperStatistics.season)
        else:
            q = (
                db.query(GoalkeeperStatistics.season)
                .join(Goalkeeper, Goalkeeper.id == GoalkeeperStatistics.goalkeeper_id)
                .join(Team, Team.id == Goalkeeper.team_id)
                .filter(Team.coach_id == coach_id)
            )
        rows = q.distinct().order_by(GoalkeeperStatistics.season.desc()).all()
    return [season for (season,) in rows]


def season_summary(db: Session, coach_id: int, season: str) -> dict[str, Any]:
    rows = list_by_season(db, coach_id, season)

    total_matches = sum(r.matches_played for r in rows)
    gpm = [r.goals_conceded / r.matches_played if r.matches_played > 0 else 0.0 for r in rows]
    csp = [r.clean_sheets / r.matches_played * 100 if r.matches_played > 0 else 0.0 for r in rows]

    return {
        "season": season,
        "total_goalkeepers": len({r.goalkeeper_id for r in rows}),
        "total_matches": total_matches,
        "total_goals": sum(r.goals_conceded for r in rows),
        "total_clean_sheets": sum(r.clean_sheets for r in rows),
        "total_saves": sum(r.saves for r in rows),
        "avg_goals_per_match": round2(sum(gpm) / len(gpm)) if gpm else 0.0,
        "avg_clean_sheet_percentage": round2(sum(csp) / len(csp)) if csp else 0.0,
    }
