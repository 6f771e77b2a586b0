"""Common pytest fixtures for the statistics service tests.

Every test runs against a fresh in-memory SQLite database shared through a
``StaticPool``, so the API client and the test body see the same rows.

Fixtures:
    - ``db``: SQLAlchemy session bound to the in-memory engine.
    - ``client``: FastAPI ``TestClient`` with ``get_db`` overridden.
    - ``make_coach``, ``make_team``, ``make_goalkeeper``, ``make_record``:
      minimal roster/statistics builders.
    - ``auth_headers``: bearer header for a given coach.
"""

from __future__ import annotations

from typing import Any, Callable, Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.security import create_access_token, hash_password
from app.crud.crud_statistics import create_statistics
from app.db.init_db import init_db
from app.db.session import get_db
from app.main import app
from app.models.coach import Coach
from app.models.goalkeepers import Goalkeeper
from app.models.statistics import GoalkeeperStatistics
from app.models.teams import Team


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def db(engine) -> Iterator[Session]:
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db: Session) -> Iterator[TestClient]:
    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_coach(db: Session) -> Callable[..., Coach]:
    counter = {"n": 0}

    def _make(name: str = "Coach", email: str | None = None) -> Coach:
        counter["n"] += 1
        coach = Coach(
            email=email or f"coach{counter['n']}@example.com",
            password_hash=hash_password("secret123"),
            name=name,
        )
        db.add(coach)
        db.commit()
        db.refresh(coach)
        return coach

    return _make


@pytest.fixture
def make_team(db: Session) -> Callable[..., Team]:
    def _make(coach: Coach, name: str = "First Team") -> Team:
        team = Team(coach_id=coach.id, name=name)
        db.add(team)
        db.commit()
        db.refresh(team)
        return team

    return _make


@pytest.fixture
def make_goalkeeper(db: Session) -> Callable[..., Goalkeeper]:
    def _make(team: Team | None, first_name: str = "Ana", last_name: str = "Keeper") -> Goalkeeper:
        gk = Goalkeeper(team_id=team.id if team else None, first_name=first_name, last_name=last_name)
        db.add(gk)
        db.commit()
        db.refresh(gk)
        return gk

    return _make


@pytest.fixture
def make_record(db: Session) -> Callable[..., GoalkeeperStatistics]:
    def _make(goalkeeper: Goalkeeper, season: str = "2024", **counters: Any) -> GoalkeeperStatistics:
        record, _ = create_statistics(db, goalkeeper.id, season, counters)
        return record

    return _make


@pytest.fixture
def auth_headers() -> Callable[[Coach], dict[str, str]]:
    def _headers(coach: Coach) -> dict[str, str]:
        token = create_access_token({"sub": str(coach.id)})
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def roster(make_coach, make_team, make_goalkeeper) -> dict[str, Any]:
    """Two coaches, one team each; the owner has two goalkeepers."""
    owner = make_coach("Owner")
    other = make_coach("Other")
    team = make_team(owner, "Owner FC")
    other_team = make_team(other, "Other FC")
    return {
        "owner": owner,
        "other": other,
        "team": team,
        "other_team": other_team,
        "gk_a": make_goalkeeper(team, "Alba", "Ruiz"),
        "gk_b": make_goalkeeper(team, "Bea", "Gil"),
        "gk_other": make_goalkeeper(other_team, "Olga", "Mora"),
    }
