from __future__ import annotations

import argparse
import random
from datetime import date, timedelta

from wordle_golf import models
from wordle_golf.database import Base, SessionLocal, engine
from wordle_golf.scoring import DEFAULT_BIRTHDAY_ADVANTAGE, calculate_handicap

FAMILY = [
    {"display_name": "Jake", "avatar_url": "/golf/jake-avatar.jpg", "skill": 3},
    {"display_name": "Grandma Rose", "avatar_url": None, "skill": 3},
    {"display_name": "Uncle Pete", "avatar_url": None, "skill": 4},
    {"display_name": "Maya", "avatar_url": None, "skill": 4},
    {"display_name": "Leo", "avatar_url": None, "skill": 5},
]

# Relative weights for raw scores 1..7 around a player's usual result.
SCORE_SPREAD = [(-2, 1), (-1, 3), (0, 5), (1, 3), (2, 1)]


def reset_database() -> None:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)


def week_start(day: date) -> date:
    return day - timedelta(days=day.weekday())


def draw_raw_score(rng: random.Random, skill: int) -> int:
    offsets, weights = zip(*SCORE_SPREAD)
    offset = rng.choices(offsets, weights=weights, k=1)[0]
    return min(7, max(1, skill + offset))


def seed(*, weeks: int = 2, rng_seed: int = 2024, today: date | None = None) -> None:
    reset_database()
    today = today or date.today()
    rng = random.Random(rng_seed)

    db = SessionLocal()
    try:
        players: list[models.Player] = []
        for member in FAMILY:
            player = models.Player(display_name=member["display_name"], avatar_url=member["avatar_url"])
            db.add(player)
            players.append(player)
        db.flush()

        first_day = week_start(today) - timedelta(weeks=weeks - 1)
        history: dict[str, list[int]] = {player.id: [] for player in players}
        day = first_day
        while day <= today:
            for player, member in zip(players, FAMILY):
                # Not everyone plays every day.
                if rng.random() < 0.15:
                    continue
                raw_score = draw_raw_score(rng, member["skill"])
                db.add(models.Score(player_id=player.id, puzzle_date=day, raw_score=raw_score))
                history[player.id].append(raw_score)
            day += timedelta(days=1)

        for player in players:
            recent = history[player.id][-20:]
            player.handicap = calculate_handicap(recent)
            player.games_played = len(recent)

        current_week = week_start(today)
        db.add(
            models.Tournament(
                name="Weekly Open",
                tournament_type="regular",
                start_date=current_week,
                end_date=current_week + timedelta(days=6),
                birthday_advantage=0.0,
            )
        )
        if weeks > 1:
            birthday_week = current_week - timedelta(weeks=1)
            db.add(
                models.Tournament(
                    name=f"{players[0].display_name}'s Birthday Tournament",
                    tournament_type="birthday",
                    start_date=birthday_week,
                    end_date=birthday_week + timedelta(days=6),
                    birthday_player_id=players[0].id,
                    birthday_advantage=DEFAULT_BIRTHDAY_ADVANTAGE,
                )
            )

        db.commit()
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed a demo family with scores and tournaments.")
    parser.add_argument(
        "--weeks",
        type=int,
        default=2,
        help="Number of weeks of score history to generate, ending this week.",
    )
    parser.add_argument(
        "--rng-seed",
        type=int,
        default=2024,
        help="Seed for the score generator so runs are reproducible.",
    )
    args = parser.parse_args()

    seed(weeks=max(1, args.weeks), rng_seed=args.rng_seed)
    print(f"Seed completed ({len(FAMILY)} players, {max(1, args.weeks)} weeks)")
