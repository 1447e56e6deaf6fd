from datetime import date, timedelta
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from wordle_golf import models
from wordle_golf.exceptions import InvalidArgument, NotFound, TransientError
from wordle_golf.leaderboard import LeaderboardAggregator
from wordle_golf.monthly import MonthlyAggregator
from wordle_golf.store import (
    PlayerProfile,
    ScoreRecord,
    SqlScoreStore,
    SqlTournamentRegistry,
    TournamentDefinition,
)

WEEK_START = date(2024, 6, 10)  # Monday

ALICE = PlayerProfile(id="p1", display_name="Alice", avatar_url="/a.png", handicap=3.2)
BEN = PlayerProfile(id="p2", display_name="Ben")
CARA = PlayerProfile(id="p3", display_name="Cara")


class FakeScoreStore:
    def __init__(self, records):
        self.records = records
        self.calls = []

    def list_scores(self, start_date, end_date, player_ids=None):
        self.calls.append((start_date, end_date))
        return [
            record
            for record in self.records
            if start_date <= record.puzzle_date <= end_date
            and (player_ids is None or record.player_id in player_ids)
        ]


class FailingScoreStore:
    def list_scores(self, start_date, end_date, player_ids=None):
        raise TransientError("store unavailable")


class FakeRegistry:
    def __init__(self, *tournaments):
        self.tournaments = {tournament.id: tournament for tournament in tournaments}

    def get(self, tournament_id):
        try:
            return self.tournaments[tournament_id]
        except KeyError as exc:
            raise NotFound("Tournament not found.") from exc


def week_scores(player, raw_scores, start=WEEK_START):
    return [
        ScoreRecord(player=player, puzzle_date=start + timedelta(days=offset), raw_score=raw_score)
        for offset, raw_score in enumerate(raw_scores)
        if raw_score is not None
    ]


def birthday_tournament(advantage=Decimal("2.00")):
    return TournamentDefinition(
        id="bday",
        name="Alice's Birthday Tournament",
        tournament_type="birthday",
        start_date=WEEK_START,
        end_date=WEEK_START + timedelta(days=6),
        birthday_player_id=ALICE.id,
        birthday_advantage=advantage,
    )


def regular_tournament():
    return TournamentDefinition(
        id="open",
        name="Weekly Open",
        tournament_type="regular",
        start_date=WEEK_START,
        end_date=WEEK_START + timedelta(days=6),
    )


def test_birthday_player_gets_advantage_on_qualifying_days_only():
    store = FakeScoreStore(week_scores(ALICE, [4, 3, 5, 4, 3, 4, 2]))
    aggregator = LeaderboardAggregator(store, FakeRegistry(birthday_tournament()))

    [standing] = aggregator.compute_tournament_standings("bday")

    assert standing.qualifying_score == 8
    assert standing.weekend_score == 9
    assert standing.total_score == 17
    assert standing.advantage_applied == 8
    assert standing.is_birthday_person is True
    assert standing.rounds_played == 7
    assert standing.position_label == "1"
    assert store.calls == [(WEEK_START, WEEK_START + timedelta(days=6))]


def test_adjusted_contribution_clamps_at_zero():
    store = FakeScoreStore(week_scores(ALICE, [1, 2, 3, None, 7]))
    aggregator = LeaderboardAggregator(store, FakeRegistry(birthday_tournament(advantage=Decimal("2.5"))))

    [standing] = aggregator.compute_tournament_standings("bday")

    # max(0, 1 - 2.5) + max(0, 2 - 2.5) + max(0, 3 - 2.5)
    assert standing.qualifying_score == Decimal("0.50")
    assert standing.weekend_score == 7
    assert standing.advantage_applied == Decimal("7.50")


def qualifying_dates(weeks, start=WEEK_START):
    return [start + timedelta(weeks=week, days=day) for week in range(weeks) for day in range(4)]


def test_fractional_advantage_totals_tie_exactly():
    amy = PlayerProfile(id="amy", display_name="Amy")
    zoe = PlayerProfile(id="zoe", display_name="Zoe")
    days = qualifying_dates(3)[:10]
    records = [ScoreRecord(player=zoe, puzzle_date=day, raw_score=3) for day in days]
    records += [ScoreRecord(player=amy, puzzle_date=day, raw_score=3) for day in days[:9]]
    records.append(ScoreRecord(player=amy, puzzle_date=days[9], raw_score=2))
    tournament = TournamentDefinition(
        id="long-bday",
        name="Zoe's Birthday Tournament",
        tournament_type="birthday",
        start_date=WEEK_START,
        end_date=WEEK_START + timedelta(days=20),
        birthday_player_id=zoe.id,
        birthday_advantage=Decimal("0.1"),
    )
    aggregator = LeaderboardAggregator(FakeScoreStore(records), FakeRegistry(tournament))

    standings = aggregator.compute_tournament_standings("long-bday")

    assert [standing.display_name for standing in standings] == ["Amy", "Zoe"]
    assert [standing.position_label for standing in standings] == ["1", "T2"]
    assert standings[0].total_score == standings[1].total_score == Decimal("29")
    assert standings[1].advantage_applied == Decimal("1.00")


def test_fractional_advantage_total_is_exact():
    store = FakeScoreStore(week_scores(ALICE, [4, 4, 4]))
    aggregator = LeaderboardAggregator(store, FakeRegistry(birthday_tournament(advantage=Decimal("0.7"))))

    [standing] = aggregator.compute_tournament_standings("bday")

    assert standing.total_score == Decimal("9.90")
    assert str(standing.total_score) == "9.90"
    assert standing.advantage_applied == Decimal("2.10")


def test_regular_tournament_never_applies_advantage():
    records = week_scores(ALICE, [4, 3, 5, 4, 3, 4, 2]) + week_scores(BEN, [3, 3, 3, 3])
    aggregator = LeaderboardAggregator(FakeScoreStore(records), FakeRegistry(regular_tournament()))

    standings = aggregator.compute_tournament_standings("open")

    assert [standing.display_name for standing in standings] == ["Ben", "Alice"]
    for standing in standings:
        assert standing.advantage_applied == 0
        assert standing.is_birthday_person is False
        assert standing.total_score == standing.qualifying_score + standing.weekend_score


def test_other_players_are_not_adjusted_in_birthday_tournament():
    records = week_scores(ALICE, [4, 4, 4, 4]) + week_scores(BEN, [4, 4, 4, 4])
    aggregator = LeaderboardAggregator(FakeScoreStore(records), FakeRegistry(birthday_tournament()))

    by_id = {standing.player_id: standing for standing in aggregator.compute_tournament_standings("bday")}

    assert by_id["p1"].qualifying_score == 8
    assert by_id["p2"].qualifying_score == 16
    assert by_id["p2"].advantage_applied == 0


def test_players_outside_window_are_absent_and_ties_labelled():
    records = (
        week_scores(ALICE, [3, 3, 3, 3])
        + week_scores(BEN, [4, 2, 3, 3])
        + week_scores(CARA, [5, 5, 5], start=WEEK_START - timedelta(days=7))
    )
    aggregator = LeaderboardAggregator(FakeScoreStore(records), FakeRegistry(regular_tournament()))

    standings = aggregator.compute_tournament_standings("open")

    assert [standing.player_id for standing in standings] == ["p1", "p2"]
    assert [standing.position_label for standing in standings] == ["1", "T2"]
    assert [standing.position for standing in standings] == [1, 2]


def test_weekend_only_player_is_ranked():
    records = week_scores(BEN, [None, None, None, None, 2, 2, 2])
    aggregator = LeaderboardAggregator(FakeScoreStore(records), FakeRegistry(regular_tournament()))

    [standing] = aggregator.compute_tournament_standings("open")

    assert standing.qualifying_score == 0
    assert standing.weekend_score == 6


def test_empty_tournament_returns_empty_list():
    aggregator = LeaderboardAggregator(FakeScoreStore([]), FakeRegistry(regular_tournament()))

    assert aggregator.compute_tournament_standings("open") == []


def test_unknown_tournament_raises_not_found():
    aggregator = LeaderboardAggregator(FakeScoreStore([]), FakeRegistry(regular_tournament()))

    with pytest.raises(NotFound):
        aggregator.compute_tournament_standings("nonexistent-id")


def test_store_failure_propagates_without_partial_result():
    aggregator = LeaderboardAggregator(FailingScoreStore(), FakeRegistry(regular_tournament()))

    with pytest.raises(TransientError):
        aggregator.compute_tournament_standings("open")


def test_monthly_totals_within_calendar_month():
    june = [
        ScoreRecord(player=ALICE, puzzle_date=date(2024, 6, day), raw_score=5)
        for day in range(1, 10)
    ]
    outside = [
        ScoreRecord(player=ALICE, puzzle_date=date(2024, 5, 31), raw_score=7),
        ScoreRecord(player=ALICE, puzzle_date=date(2024, 7, 1), raw_score=7),
        ScoreRecord(player=BEN, puzzle_date=date(2024, 5, 20), raw_score=1),
    ]
    store = FakeScoreStore(june + outside)

    [standing] = MonthlyAggregator(store).compute_monthly_standings(2024, 6)

    assert standing.player_id == "p1"
    assert standing.total_score == 45
    assert standing.games_played == 9
    assert standing.handicap == 3.2
    assert standing.position_label == "1"
    assert store.calls == [(date(2024, 6, 1), date(2024, 6, 30))]


def test_monthly_rejects_invalid_month_before_reading():
    store = FakeScoreStore([])

    with pytest.raises(InvalidArgument):
        MonthlyAggregator(store).compute_monthly_standings(2024, 13)
    assert store.calls == []


def seed_sql_week(session_factory):
    with session_factory() as db:
        alice = models.Player(display_name="Alice")
        ben = models.Player(display_name="Ben")
        db.add_all([alice, ben])
        db.flush()

        for offset, raw_score in enumerate([4, 3, 5, 4, 3, 4, 2]):
            db.add(models.Score(player_id=alice.id, puzzle_date=WEEK_START + timedelta(days=offset), raw_score=raw_score))
        for offset, raw_score in enumerate([2, 2, 2]):
            db.add(models.Score(player_id=ben.id, puzzle_date=WEEK_START + timedelta(days=offset), raw_score=raw_score))
        db.add(models.Score(player_id=ben.id, puzzle_date=WEEK_START + timedelta(days=7), raw_score=7))

        tournament = models.Tournament(
            name="Alice's Birthday Tournament",
            tournament_type="birthday",
            start_date=WEEK_START,
            end_date=WEEK_START + timedelta(days=6),
            birthday_player_id=alice.id,
            birthday_advantage=Decimal("2.00"),
        )
        db.add(tournament)
        db.commit()

        return alice.id, ben.id, tournament.id


def test_sql_store_reads_window_in_one_batch(session_factory):
    alice_id, ben_id, tournament_id = seed_sql_week(session_factory)

    with session_factory() as db:
        records = SqlScoreStore(db).list_scores(WEEK_START, WEEK_START + timedelta(days=6))
        only_ben = SqlScoreStore(db).list_scores(WEEK_START, WEEK_START + timedelta(days=7), player_ids=[ben_id])

        standings = LeaderboardAggregator(SqlScoreStore(db), SqlTournamentRegistry(db)).compute_tournament_standings(
            tournament_id
        )

    assert len(records) == 10
    assert {record.player_id for record in records} == {alice_id, ben_id}
    assert [record.raw_score for record in only_ben] == [2, 2, 2, 7]

    assert [standing.display_name for standing in standings] == ["Ben", "Alice"]
    assert standings[1].total_score == 17
    assert standings[1].advantage_applied == 8


def test_sql_registry_raises_not_found(session_factory):
    with session_factory() as db:
        with pytest.raises(NotFound):
            SqlTournamentRegistry(db).get("nonexistent-id")


def test_sql_store_wraps_database_errors(session_factory, monkeypatch):
    with session_factory() as db:
        def broken_execute(*args, **kwargs):
            raise OperationalError("SELECT", {}, Exception("database is locked"))

        monkeypatch.setattr(db, "execute", broken_execute)

        with pytest.raises(TransientError):
            SqlScoreStore(db).list_scores(WEEK_START, WEEK_START + timedelta(days=6))


def test_leaderboard_returns_tournament_definition_with_standings(session_factory):
    alice_id, _, tournament_id = seed_sql_week(session_factory)

    with session_factory() as db:
        aggregator = LeaderboardAggregator(SqlScoreStore(db), SqlTournamentRegistry(db))
        tournament, standings = aggregator.compute_tournament_leaderboard(tournament_id)

    assert tournament.id == tournament_id
    assert tournament.birthday_player_id == alice_id
    assert tournament.birthday_player_name == "Alice"
    assert tournament.birthday_advantage == Decimal("2.00")
    assert len(standings) == 2
