from collections.abc import Callable, Iterable
from dataclasses import dataclass
from decimal import Decimal
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Ranked(Generic[T]):
    position: int
    position_label: str
    row: T


def rank(
    standings: Iterable[T],
    score_of: Callable[[T], Decimal | int],
    tie_label_of: Callable[[T], str],
) -> list[Ranked[T]]:
    """Order rows best-first (lowest score) and label their positions.

    Equal scores fall back to ``tie_label_of`` (the display name), compared
    ordinally. A row whose score matches the row directly above it is
    labelled ``T<position>`` with its own position, so totals of
    ``[12, 12, 15]`` come out as ``1, T2, 3``.
    """
    ordered = sorted(standings, key=lambda row: (score_of(row), tie_label_of(row)))

    ranked: list[Ranked[T]] = []
    previous_score: Decimal | int | None = None
    for position, row in enumerate(ordered, start=1):
        score = score_of(row)
        label = f"T{position}" if previous_score is not None and score == previous_score else str(position)
        ranked.append(Ranked(position=position, position_label=label, row=row))
        previous_score = score

    return ranked
