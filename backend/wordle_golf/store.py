"""Read-only sources the leaderboard engine pulls from.

The aggregators depend on the ``ScoreStore`` and ``TournamentRegistry``
protocols only. The SQLAlchemy implementations below read a whole date
window in one statement (scores joined to their players) so a standings set
never mixes data from before and after a concurrent submission.
"""

import logging
from collections.abc import Collection
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Literal, Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from . import models
from .exceptions import NotFound, TransientError
from .scoring import ZERO, to_points

logger = logging.getLogger(__name__)

TournamentType = Literal["regular", "birthday"]


@dataclass(frozen=True)
class PlayerProfile:
    id: str
    display_name: str
    avatar_url: str | None = None
    handicap: float = 0.0


@dataclass(frozen=True)
class ScoreRecord:
    player: PlayerProfile
    puzzle_date: date
    raw_score: int

    @property
    def player_id(self) -> str:
        return self.player.id


@dataclass(frozen=True)
class TournamentDefinition:
    id: str
    name: str
    tournament_type: TournamentType
    start_date: date
    end_date: date
    birthday_player_id: str | None = None
    birthday_advantage: Decimal = ZERO
    birthday_player_name: str | None = None
    is_active: bool = True

    @property
    def is_birthday(self) -> bool:
        return self.tournament_type == "birthday"


class ScoreStore(Protocol):
    def list_scores(
        self,
        start_date: date,
        end_date: date,
        player_ids: Collection[str] | None = None,
    ) -> list[ScoreRecord]:
        ...


class TournamentRegistry(Protocol):
    def get(self, tournament_id: str) -> TournamentDefinition:
        ...


def player_to_profile(player: models.Player) -> PlayerProfile:
    return PlayerProfile(
        id=player.id,
        display_name=player.display_name,
        avatar_url=player.avatar_url,
        handicap=player.handicap or 0.0,
    )


def tournament_to_definition(tournament: models.Tournament) -> TournamentDefinition:
    return TournamentDefinition(
        id=tournament.id,
        name=tournament.name,
        tournament_type=tournament.tournament_type,
        start_date=tournament.start_date,
        end_date=tournament.end_date,
        birthday_player_id=tournament.birthday_player_id,
        birthday_advantage=to_points(tournament.birthday_advantage),
        birthday_player_name=tournament.birthday_player.display_name if tournament.birthday_player else None,
        is_active=tournament.is_active,
    )


class SqlScoreStore:
    def __init__(self, db: Session) -> None:
        self.db = db

    def list_scores(
        self,
        start_date: date,
        end_date: date,
        player_ids: Collection[str] | None = None,
    ) -> list[ScoreRecord]:
        statement = (
            select(models.Score.puzzle_date, models.Score.raw_score, models.Player)
            .join(models.Player, models.Score.player_id == models.Player.id)
            .where(models.Score.puzzle_date >= start_date)
            .where(models.Score.puzzle_date <= end_date)
            .order_by(models.Score.player_id, models.Score.puzzle_date)
        )
        if player_ids is not None:
            statement = statement.where(models.Score.player_id.in_(list(player_ids)))

        try:
            rows = self.db.execute(statement).all()
        except SQLAlchemyError as exc:
            logger.error("Score read for %s..%s failed: %s", start_date, end_date, exc)
            raise TransientError("Could not read scores; try again.") from exc

        profiles: dict[str, PlayerProfile] = {}
        records: list[ScoreRecord] = []
        for puzzle_date, raw_score, player in rows:
            profile = profiles.get(player.id)
            if profile is None:
                profile = profiles[player.id] = player_to_profile(player)
            records.append(ScoreRecord(player=profile, puzzle_date=puzzle_date, raw_score=raw_score))

        logger.debug("Read %d scores for %s..%s", len(records), start_date, end_date)
        return records


class SqlTournamentRegistry:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get(self, tournament_id: str) -> TournamentDefinition:
        statement = (
            select(models.Tournament)
            .options(selectinload(models.Tournament.birthday_player))
            .where(models.Tournament.id == tournament_id)
        )
        try:
            tournament = self.db.execute(statement).scalars().first()
        except SQLAlchemyError as exc:
            logger.error("Tournament lookup for %s failed: %s", tournament_id, exc)
            raise TransientError("Could not read tournament; try again.") from exc

        if tournament is None:
            raise NotFound("Tournament not found.")

        return tournament_to_definition(tournament)
