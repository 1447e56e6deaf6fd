import logging
from dataclasses import dataclass

from .ranking import rank
from .scoring import month_bounds
from .store import PlayerProfile, ScoreStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MonthlyStanding:
    player_id: str
    display_name: str
    avatar_url: str | None
    handicap: float
    total_score: int
    games_played: int
    position: int
    position_label: str


@dataclass
class _MonthTotal:
    player: PlayerProfile
    total_score: int = 0
    games_played: int = 0


class MonthlyAggregator:
    """Sums every raw score in a calendar month, regardless of tournaments."""

    def __init__(self, scores: ScoreStore) -> None:
        self.scores = scores

    def compute_monthly_standings(self, year: int, month: int) -> list[MonthlyStanding]:
        first_day, last_day = month_bounds(year, month)
        records = self.scores.list_scores(first_day, last_day)

        totals: dict[str, _MonthTotal] = {}
        for record in records:
            if not first_day <= record.puzzle_date <= last_day:
                continue
            entry = totals.setdefault(record.player_id, _MonthTotal(player=record.player))
            entry.total_score += record.raw_score
            entry.games_played += 1

        ranked = rank(
            totals.values(),
            score_of=lambda entry: entry.total_score,
            tie_label_of=lambda entry: entry.player.display_name,
        )

        logger.info("Monthly leaderboard %04d-%02d: %d players ranked", year, month, len(ranked))
        return [
            MonthlyStanding(
                player_id=item.row.player.id,
                display_name=item.row.player.display_name,
                avatar_url=item.row.player.avatar_url,
                handicap=item.row.player.handicap,
                total_score=item.row.total_score,
                games_played=item.row.games_played,
                position=item.position,
                position_label=item.position_label,
            )
            for item in ranked
        ]
