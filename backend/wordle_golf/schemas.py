from datetime import date
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ORMBaseModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


TournamentType = Literal["regular", "birthday"]
TournamentStatus = Literal["upcoming", "active", "completed"]
TournamentListFilter = Literal["active", "upcoming", "past"]


class PlayerCreate(BaseModel):
    display_name: str = Field(min_length=1, max_length=100)
    avatar_url: str | None = Field(default=None, max_length=512)
    handicap: float = Field(default=0.0, ge=0)


class PlayerRead(ORMBaseModel):
    id: str
    display_name: str
    avatar_url: str | None = None
    handicap: float
    games_played: int


class ScoreCreate(BaseModel):
    player_id: str = Field(min_length=1, max_length=36)
    puzzle_date: date
    raw_score: int = Field(ge=1, le=7)


class ScoreRead(ORMBaseModel):
    id: int
    player_id: str
    puzzle_date: date
    raw_score: int


class TournamentCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    tournament_type: TournamentType = "regular"
    start_date: date
    end_date: date
    birthday_player_id: str | None = None
    birthday_advantage: float | None = Field(default=None, ge=0)
    is_active: bool = True


class TournamentUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=120)
    start_date: date | None = None
    end_date: date | None = None
    birthday_player_id: str | None = None
    birthday_advantage: float | None = Field(default=None, ge=0)
    is_active: bool | None = None


class TournamentRead(BaseModel):
    id: str
    name: str
    tournament_type: TournamentType
    start_date: date
    end_date: date

    birthday_player_id: str | None = None
    birthday_player_name: str | None = None
    birthday_advantage: float

    is_active: bool
    status: TournamentStatus
    current_day: int | None = None
    is_cut_day: bool = False


class TournamentStandingRow(BaseModel):
    position: int
    position_label: str

    player_id: str
    display_name: str
    avatar_url: str | None = None

    total_score: float
    qualifying_score: float
    weekend_score: float
    advantage_applied: float
    is_birthday_person: bool
    rounds_played: int


class TournamentLeaderboard(BaseModel):
    tournament: TournamentRead
    standings: list[TournamentStandingRow] = Field(default_factory=list)


class MonthlyStandingRow(BaseModel):
    position: int
    position_label: str

    player_id: str
    display_name: str
    avatar_url: str | None = None
    handicap: float

    total_score: int
    games_played: int


class MonthlyLeaderboard(BaseModel):
    year: int
    month: int
    standings: list[MonthlyStandingRow] = Field(default_factory=list)
