from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import ValidationError
from app.core.security import get_current_coach
from app.crud.crud_statistics import (
    create_statistics,
    delete_statistics,
    get_statistics,
    list_by_goalkeeper,
    list_by_season,
    list_by_team,
    list_seasons,
    season_summary,
    statistics_exists,
    statistics_row,
    update_statistics,
)
from app.db.session import get_db
from app.models.coach import Coach
from app.schemas.statistics import (
    ComparisonRowOut,
    ExistsOut,
    SeasonSummaryOut,
    StatisticsCreate,
    StatisticsOut,
    StatisticsUpdate,
)
from app.services.comparison import compare_goalkeepers
from app.services.ownership import require_goalkeeper_access, require_record_access, require_team_access
from app.services.rankings import season_leaders, top_performers

router = APIRouter(prefix="/api/v1", tags=["statistics"])


def _parse_ids(raw: str) -> list[int]:
    ids = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            ids.append(int(part))
        except ValueError:
            raise ValidationError(f"Invalid goalkeeper id: {part}")
    return ids


@router.post("/statistics", response_model=StatisticsOut, status_code=201)
def create_record(
    payload: StatisticsCreate,
    response: Response,
    coach: Coach = Depends(get_current_coach),
    db: Session = Depends(get_db),
):
    # ownership is checked before anything is written
    require_goalkeeper_access(db, coach.id, payload.goalkeeper_id)

    counters = payload.model_dump(exclude={"goalkeeper_id", "season"}, exclude_unset=True)
    record, created = create_statistics(db, payload.goalkeeper_id, payload.season, counters)
    if not created:
        response.status_code = 200
    return statistics_row(record)


@router.get("/statistics", response_model=list[StatisticsOut])
def statistics_by_season(
    season: str = Query(..., min_length=1),
    coach: Coach = Depends(get_current_coach),
    db: Session = Depends(get_db),
):
    return [statistics_row(r) for r in list_by_season(db, coach.id, season.strip())]


@router.get("/statistics/seasons", response_model=list[str])
def available_seasons(coach: Coach = Depends(get_current_coach), db: Session = Depends(get_db)):
    return list_seasons(db, coach_id=coach.id)


@router.get("/statistics/compare", response_model=list[ComparisonRowOut])
def compare(
    goalkeeper_ids: str = Query(..., description="Comma separated ids, e.g. 3,7"),
    season: str = Query(..., min_length=1),
    coach: Coach = Depends(get_current_coach),
    db: Session = Depends(get_db),
):
    return compare_goalkeepers(db, coach.id, _parse_ids(goalkeeper_ids), season)


@router.get("/statistics/top-performers", response_model=list[StatisticsOut])
def top_performers_for_season(
    season: str = Query(..., min_length=1),
    limit: int = Query(default=settings.TOP_PERFORMERS_DEFAULT_LIMIT, ge=1, le=100),
    coach: Coach = Depends(get_current_coach),
    db: Session = Depends(get_db),
):
    return top_performers(db, coach.id, season.strip(), limit)


@router.get("/statistics/leaders", response_model=list[StatisticsOut])
def dashboard_leaders(
    season: Optional[str] = Query(default=None),
    limit: int = Query(default=settings.LEADERS_LIMIT, ge=1, le=50),
    coach: Coach = Depends(get_current_coach),
    db: Session = Depends(get_db),
):
    return season_leaders(db, coach.id, season=(season or "").strip() or None, limit=limit)


@router.get("/statistics/summary", response_model=SeasonSummaryOut)
def summary_for_season(
    season: str = Query(..., min_length=1),
    coach: Coach = Depends(get_current_coach),
    db: Session = Depends(get_db),
):
    return season_summary(db, coach.id, season.strip())


@router.get("/statistics/exists", response_model=ExistsOut)
def record_exists(
    goalkeeper_id: int = Query(..., gt=0),
    season: str = Query(..., min_length=1),
    coach: Coach = Depends(get_current_coach),
    db: Session = Depends(get_db),
):
    require_goalkeeper_access(db, coach.id, goalkeeper_id)
    return ExistsOut(
        goalkeeper_id=goalkeeper_id,
        season=season.strip(),
        exists=statistics_exists(db, goalkeeper_id, season),
    )


@router.get("/statistics/{record_id}", response_model=StatisticsOut)
def read_record(record_id: int, coach: Coach = Depends(get_current_coach), db: Session = Depends(get_db)):
    require_record_access(db, coach.id, record_id)
    return statistics_row(get_statistics(db, record_id))


@router.put("/statistics/{record_id}", response_model=StatisticsOut)
@router.patch("/statistics/{record_id}", response_model=StatisticsOut)
def update_record(
    record_id: int,
    payload: StatisticsUpdate,
    coach: Coach = Depends(get_current_coach),
    db: Session = Depends(get_db),
):
    require_record_access(db, coach.id, record_id)
    record = update_statistics(db, record_id, payload.model_dump(exclude_unset=True))
    return statistics_row(record)


@router.delete("/statistics/{record_id}")
def delete_record(record_id: int, coach: Coach = Depends(get_current_coach), db: Session = Depends(get_db)):
    require_record_access(db, coach.id, record_id)
    delete_statistics(db, record_id)
    return {"ok": True}


@router.get("/goalkeepers/{goalkeeper_id}/statistics", response_model=list[StatisticsOut])
def statistics_by_goalkeeper(
    goalkeeper_id: int,
    coach: Coach = Depends(get_current_coach),
    db: Session = Depends(get_db),
):
    require_goalkeeper_access(db, coach.id, goalkeeper_id)
    return [statistics_row(r) for r in list_by_goalkeeper(db, goalkeeper_id)]


@router.get("/teams/{team_id}/statistics", response_model=list[StatisticsOut])
def statistics_by_team(
    team_id: int,
    season: Optional[str] = Query(default=None),
    coach: Coach = Depends(get_current_coach),
    db: Session = Depends(get_db),
):
    require_team_access(db, coach.id, team_id)
    return [statistics_row(r) for r in list_by_team(db, team_id, (season or "").strip() or None)]
