from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator, model_validator

# "2024" or "2024-2025"
SEASON_PATTERN = r"^\d{4}(-\d{4})?$"


def _sent(data, name):
    return name in data.model_fields_set and getattr(data, name) is not None


# only pairs the client sent in full; merges are checked against the stored row
def _check_pairs(data):
    if _sent(data, "clean_sheets") and _sent(data, "matches_played"):
        if data.clean_sheets > data.matches_played:
            raise ValueError("clean_sheets cannot exceed matches_played")
    if _sent(data, "penalties_saved") and _sent(data, "penalties_faced"):
        if data.penalties_saved > data.penalties_faced:
            raise ValueError("penalties_saved cannot exceed penalties_faced")
    return data


class StatisticsCreate(BaseModel):
    goalkeeper_id: int = Field(gt=0)
    season: str = Field(min_length=1, max_length=16, pattern=SEASON_PATTERN)

    matches_played: int = Field(default=0, ge=0)
    minutes_played: int = Field(default=0, ge=0)
    goals_conceded: int = Field(default=0, ge=0)
    clean_sheets: int = Field(default=0, ge=0)
    saves: int = Field(default=0, ge=0)
    penalties_saved: int = Field(default=0, ge=0)
    penalties_faced: int = Field(default=0, ge=0)
    yellow_cards: int = Field(default=0, ge=0)
    red_cards: int = Field(default=0, ge=0)

    @field_validator("season", mode="before")
    @classmethod
    def _strip_season(cls, v):
        return v.strip() if isinstance(v, str) else v

    @model_validator(mode="after")
    def _pairs(self):
        return _check_pairs(self)


class StatisticsUpdate(BaseModel):
    season: str | None = Field(default=None, min_length=1, max_length=16, pattern=SEASON_PATTERN)

    matches_played: int | None = Field(default=None, ge=0)
    minutes_played: int | None = Field(default=None, ge=0)
    goals_conceded: int | None = Field(default=None, ge=0)
    clean_sheets: int | None = Field(default=None, ge=0)
    saves: int | None = Field(default=None, ge=0)
    penalties_saved: int | None = Field(default=None, ge=0)
    penalties_faced: int | None = Field(default=None, ge=0)
    yellow_cards: int | None = Field(default=None, ge=0)
    red_cards: int | None = Field(default=None, ge=0)

    @field_validator("season", mode="before")
    @classmethod
    def _strip_season(cls, v):
        return v.strip() if isinstance(v, str) else v

    @model_validator(mode="after")
    def _pairs(self):
        return _check_pairs(self)


class StatisticsOut(BaseModel):
    id: int
    goalkeeper_id: int
    goalkeeper_name: str | None = None
    team_id: int | None = None
    team_name: str | None = None
    season: str

    matches_played: int
    minutes_played: int
    goals_conceded: int
    clean_sheets: int
    saves: int
    penalties_saved: int
    penalties_faced: int
    yellow_cards: int
    red_cards: int

    goals_per_match: float
    clean_sheet_percentage: float
    save_percentage: float
    penalty_save_percentage: float

    created_at: datetime
    updated_at: datetime


class ComparisonRowOut(BaseModel):
    id: int
    goalkeeper_id: int
    goalkeeper_name: str | None = None
    team_name: str | None = None
    season: str

    matches_played: int
    goals_conceded: int
    clean_sheets: int
    saves: int

    goals_per_match: float
    clean_sheet_percentage: float
    save_percentage: float
    penalty_save_percentage: float


class SeasonSummaryOut(BaseModel):
    season: str
    total_goalkeepers: int
    total_matches: int
    total_goals: int
    total_clean_sheets: int
    total_saves: int
    avg_goals_per_match: float
    avg_clean_sheet_percentage: float


class ExistsOut(BaseModel):
    goalkeeper_id: int
    season: str
    exists: bool
