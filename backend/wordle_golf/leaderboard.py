import logging
from dataclasses import dataclass
from decimal import Decimal

from .ranking import rank
from .scoring import ZERO, adjusted_contribution, is_qualifying_day, to_points
from .store import PlayerProfile, ScoreRecord, ScoreStore, TournamentDefinition, TournamentRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TournamentStanding:
    player_id: str
    display_name: str
    avatar_url: str | None
    qualifying_score: Decimal
    weekend_score: Decimal
    total_score: Decimal
    advantage_applied: Decimal
    is_birthday_person: bool
    rounds_played: int
    position: int
    position_label: str


@dataclass
class _PlayerRound:
    player: PlayerProfile
    is_birthday_person: bool
    qualifying_score: Decimal = ZERO
    weekend_score: Decimal = ZERO
    qualifying_days: int = 0
    rounds_played: int = 0

    @property
    def total_score(self) -> Decimal:
        return self.qualifying_score + self.weekend_score


class LeaderboardAggregator:
    """Builds ranked standings for one tournament week."""

    def __init__(self, scores: ScoreStore, tournaments: TournamentRegistry) -> None:
        self.scores = scores
        self.tournaments = tournaments

    def compute_tournament_standings(self, tournament_id: str) -> list[TournamentStanding]:
        _, standings = self.compute_tournament_leaderboard(tournament_id)
        return standings

    def compute_tournament_leaderboard(
        self,
        tournament_id: str,
    ) -> tuple[TournamentDefinition, list[TournamentStanding]]:
        """Return the tournament as read together with its standings."""
        tournament = self.tournaments.get(tournament_id)
        records = self.scores.list_scores(tournament.start_date, tournament.end_date)
        rounds = self._tally(tournament, records)

        ranked = rank(
            rounds.values(),
            score_of=lambda entry: entry.total_score,
            tie_label_of=lambda entry: entry.player.display_name,
        )
        standings = [
            TournamentStanding(
                player_id=item.row.player.id,
                display_name=item.row.player.display_name,
                avatar_url=item.row.player.avatar_url,
                qualifying_score=item.row.qualifying_score,
                weekend_score=item.row.weekend_score,
                total_score=item.row.total_score,
                advantage_applied=self._advantage_applied(tournament, item.row),
                is_birthday_person=item.row.is_birthday_person,
                rounds_played=item.row.rounds_played,
                position=item.position,
                position_label=item.position_label,
            )
            for item in ranked
        ]

        logger.info(
            "Tournament %s (%s..%s): %d players ranked",
            tournament.id,
            tournament.start_date,
            tournament.end_date,
            len(standings),
        )
        return tournament, standings

    @staticmethod
    def _is_birthday_person(tournament: TournamentDefinition, player_id: str) -> bool:
        return tournament.is_birthday and player_id == tournament.birthday_player_id

    def _tally(
        self,
        tournament: TournamentDefinition,
        records: list[ScoreRecord],
    ) -> dict[str, _PlayerRound]:
        rounds: dict[str, _PlayerRound] = {}
        for record in records:
            # Scores outside the window never count.
            if not tournament.start_date <= record.puzzle_date <= tournament.end_date:
                continue

            entry = rounds.get(record.player_id)
            if entry is None:
                entry = rounds[record.player_id] = _PlayerRound(
                    player=record.player,
                    is_birthday_person=self._is_birthday_person(tournament, record.player_id),
                )

            entry.rounds_played += 1
            if is_qualifying_day(record.puzzle_date):
                entry.qualifying_days += 1
                if entry.is_birthday_person:
                    entry.qualifying_score += adjusted_contribution(record.raw_score, tournament.birthday_advantage)
                else:
                    entry.qualifying_score += to_points(record.raw_score)
            else:
                entry.weekend_score += to_points(record.raw_score)

        return rounds

    @staticmethod
    def _advantage_applied(tournament: TournamentDefinition, entry: _PlayerRound) -> Decimal:
        if not entry.is_birthday_person:
            return ZERO
        return to_points(tournament.birthday_advantage) * entry.qualifying_days
