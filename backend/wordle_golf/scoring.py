"""Rules shared by the tournament and monthly leaderboards.

A tournament week is split into a qualifying round (Monday to Thursday) and a
weekend round (Friday to Sunday). A birthday tournament knocks a fixed
advantage off each of the birthday player's qualifying-day scores, never
below zero. Advantages and the sums they feed are kept as ``Decimal`` with two
places so equal totals compare equal.
"""

import calendar
from datetime import MAXYEAR, MINYEAR, date
from decimal import ROUND_HALF_UP, Decimal
from typing import Literal

from .exceptions import InvalidArgument

TournamentStatus = Literal["upcoming", "active", "completed"]

QUALIFYING_WEEKDAYS = frozenset({0, 1, 2, 3})
CUT_WEEKDAY = 3

# Friday is a rest day in the tournament-day numbering.
TOURNAMENT_DAY_BY_WEEKDAY = {0: 1, 1: 2, 2: 3, 3: 4, 5: 5, 6: 6}

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")
DEFAULT_BIRTHDAY_ADVANTAGE = Decimal("2.00")

HANDICAP_MIN_GAMES = 3
HANDICAP_MULTIPLIER = 0.96
HANDICAP_RECENT_GAMES = 20

# (minimum games played, number of best scores averaged)
HANDICAP_SCORES_USED: list[tuple[int, int]] = [
    (20, 8),
    (15, 6),
    (10, 4),
    (6, 3),
    (HANDICAP_MIN_GAMES, 2),
]


def is_qualifying_day(day: date) -> bool:
    return day.weekday() in QUALIFYING_WEEKDAYS


def to_points(value: Decimal | float | int | str | None) -> Decimal:
    """Normalise a score or advantage to a two-place ``Decimal``."""
    if value is None:
        return ZERO
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def adjusted_contribution(raw_score: int, advantage: Decimal) -> Decimal:
    return max(ZERO, to_points(raw_score) - to_points(advantage))


def validate_year_month(year: int, month: int) -> None:
    if not MINYEAR <= year <= MAXYEAR:
        raise InvalidArgument(f"Year must be between {MINYEAR} and {MAXYEAR}.")
    if not 1 <= month <= 12:
        raise InvalidArgument("Month must be between 1 and 12.")


def month_bounds(year: int, month: int) -> tuple[date, date]:
    validate_year_month(year, month)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def tournament_status(start_date: date, end_date: date, today: date) -> TournamentStatus:
    if today < start_date:
        return "upcoming"
    if today > end_date:
        return "completed"
    return "active"


def tournament_day(day: date) -> int | None:
    """Playing-day number: Monday to Thursday are 1-4, Saturday 5, Sunday 6.

    Friday has no number and returns ``None``.
    """
    return TOURNAMENT_DAY_BY_WEEKDAY.get(day.weekday())


def is_cut_day(day: date) -> bool:
    return day.weekday() == CUT_WEEKDAY


def calculate_handicap(raw_scores: list[int]) -> float:
    games_played = len(raw_scores)
    if games_played < HANDICAP_MIN_GAMES:
        return 0.0

    scores_used = next(used for minimum, used in HANDICAP_SCORES_USED if games_played >= minimum)
    best_scores = sorted(raw_scores)[:scores_used]
    average = sum(best_scores) / len(best_scores)

    return max(0.0, round(average * HANDICAP_MULTIPLIER, 1))
