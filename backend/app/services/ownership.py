"""Tenant isolation for statistics records.

A coach may touch a statistics row only when the chain
``coach -> team -> goalkeeper -> record`` holds. Nothing here is cached;
every request runs the join again.
"""

from __future__ import annotations

import enum
import logging

from sqlalchemy.orm import Session

from app.core.errors import ForbiddenError, NotFoundError
from app.crud.crud_statistics import store_guard
from app.models.goalkeepers import Goalkeeper
from app.models.statistics import GoalkeeperStatistics
from app.models.teams import Team

logger = logging.getLogger(__name__)


class AccessDecision(str, enum.Enum):
    AUTHORIZED = "authorized"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"


def check_record_access(db: Session, coach_id: int, record_id: int) -> AccessDecision:
    """Decide whether ``coach_id`` owns statistics record ``record_id``.

    The ownership join runs first. Only when it finds nothing do we look the
    record up without the coach filter, to tell "not yours" (403) apart from
    "does not exist" (404). Orphaned records (goalkeeper without a team)
    count as not yours.
    """
    with store_guard(db, "authorize"):
        owned = (
            db.query(GoalkeeperStatistics.id)
            .join(Goalkeeper, Goalkeeper.id == GoalkeeperStatistics.goalkeeper_id)
            .join(Team, Team.id == Goalkeeper.team_id)
            .filter(GoalkeeperStatistics.id == record_id, Team.coach_id == coach_id)
            .first()
        )
        if owned is not None:
            return AccessDecision.AUTHORIZED

        exists = db.query(GoalkeeperStatistics.id).filter(GoalkeeperStatistics.id == record_id).first()
    if exists is None:
        return AccessDecision.NOT_FOUND
    return AccessDecision.FORBIDDEN


def require_record_access(db: Session, coach_id: int, record_id: int) -> None:
    decision = check_record_access(db, coach_id, record_id)
    if decision is AccessDecision.NOT_FOUND:
        raise NotFoundError("Statistics not found")
    if decision is AccessDecision.FORBIDDEN:
        logger.warning("Coach %s denied access to statistics record %s", coach_id, record_id)
        raise ForbiddenError("You do not have access to these statistics")


def owns_goalkeeper(db: Session, coach_id: int, goalkeeper_id: int) -> bool:
    with store_guard(db, "authorize"):
        row = (
            db.query(Goalkeeper.id)
            .join(Team, Team.id == Goalkeeper.team_id)
            .filter(Goalkeeper.id == goalkeeper_id, Team.coach_id == coach_id)
            .first()
        )
    return row is not None


def require_goalkeeper_access(db: Session, coach_id: int, goalkeeper_id: int) -> None:
    # unknown goalkeepers are reported the same way as foreign ones
    if not owns_goalkeeper(db, coach_id, goalkeeper_id):
        logger.warning("Coach %s denied access to goalkeeper %s", coach_id, goalkeeper_id)
        raise ForbiddenError("You do not have access to this goalkeeper")


def owns_team(db: Session, coach_id: int, team_id: int) -> bool:
    with store_guard(db, "authorize"):
        row = db.query(Team.id).filter(Team.id == team_id, Team.coach_id == coach_id).first()
    return row is not None


def require_team_access(db: Session, coach_id: int, team_id: int) -> None:
    if not owns_team(db, coach_id, team_id):
        logger.warning("Coach %s denied access to team %s", coach_id, team_id)
        raise ForbiddenError("You do not have access to this team")
