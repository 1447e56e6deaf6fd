import logging
from datetime import date

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from . import models, schemas, serializers
from .exceptions import NotFound
from .leaderboard import LeaderboardAggregator
from .monthly import MonthlyAggregator
from .scoring import DEFAULT_BIRTHDAY_ADVANTAGE, HANDICAP_RECENT_GAMES, ZERO, calculate_handicap, to_points
from .store import SqlScoreStore, SqlTournamentRegistry

logger = logging.getLogger(__name__)


def _normalize_text(value: str) -> str:
    return " ".join(value.split())


def get_players(db: Session) -> list[models.Player]:
    return db.query(models.Player).order_by(models.Player.display_name.asc(), models.Player.id.asc()).all()


def get_player_or_raise(db: Session, player_id: str) -> models.Player:
    player = db.get(models.Player, player_id)
    if not player:
        raise NotFound("Player not found.")

    return player


def create_player(db: Session, payload: schemas.PlayerCreate) -> models.Player:
    display_name = _normalize_text(payload.display_name)
    if not display_name:
        raise ValueError("Display name cannot be empty.")

    player = models.Player(
        display_name=display_name,
        avatar_url=(payload.avatar_url or "").strip() or None,
        handicap=payload.handicap,
    )
    db.add(player)
    db.commit()
    db.refresh(player)

    logger.info("Created player %s (%s)", player.id, player.display_name)
    return player


def refresh_handicap(db: Session, player_id: str) -> models.Player:
    player = get_player_or_raise(db, player_id)

    recent = (
        db.query(models.Score.raw_score)
        .filter(models.Score.player_id == player_id)
        .order_by(models.Score.puzzle_date.desc())
        .limit(HANDICAP_RECENT_GAMES)
        .all()
    )
    raw_scores = [raw_score for (raw_score,) in recent]

    player.handicap = calculate_handicap(raw_scores)
    player.games_played = len(raw_scores)
    db.commit()
    db.refresh(player)

    logger.debug("Handicap for %s is now %.1f over %d games", player.id, player.handicap, player.games_played)
    return player


def list_scores(
    db: Session,
    player_id: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
) -> list[models.Score]:
    query = db.query(models.Score)
    if player_id:
        query = query.filter(models.Score.player_id == player_id)
    if start_date:
        query = query.filter(models.Score.puzzle_date >= start_date)
    if end_date:
        query = query.filter(models.Score.puzzle_date <= end_date)

    return query.order_by(models.Score.puzzle_date.asc(), models.Score.player_id.asc()).all()


def create_score(db: Session, payload: schemas.ScoreCreate) -> models.Score:
    player = get_player_or_raise(db, payload.player_id)

    existing = (
        db.query(models.Score.id)
        .filter(models.Score.player_id == player.id, models.Score.puzzle_date == payload.puzzle_date)
        .first()
    )
    if existing:
        raise ValueError("Score already submitted for this date.")

    score = models.Score(player_id=player.id, puzzle_date=payload.puzzle_date, raw_score=payload.raw_score)
    db.add(score)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ValueError("Score already submitted for this date.") from exc
    db.refresh(score)

    logger.info("Recorded score %d for %s on %s", score.raw_score, player.id, score.puzzle_date)
    refresh_handicap(db, player.id)
    return score


def _tournament_query(db: Session):
    return db.query(models.Tournament).options(selectinload(models.Tournament.birthday_player))


def get_tournaments(
    db: Session,
    status: schemas.TournamentListFilter | None = None,
    today: date | None = None,
) -> list[models.Tournament]:
    today = today or date.today()
    query = _tournament_query(db)

    if status == "active":
        query = query.filter(
            models.Tournament.start_date <= today,
            models.Tournament.end_date >= today,
            models.Tournament.is_active.is_(True),
        ).order_by(models.Tournament.start_date.asc())
    elif status == "upcoming":
        query = query.filter(models.Tournament.start_date > today).order_by(models.Tournament.start_date.asc())
    elif status == "past":
        query = query.filter(models.Tournament.end_date < today).order_by(models.Tournament.end_date.desc())
    else:
        query = query.order_by(models.Tournament.start_date.desc())

    return query.all()


def get_tournament_or_raise(db: Session, tournament_id: str) -> models.Tournament:
    tournament = _tournament_query(db).filter(models.Tournament.id == tournament_id).first()
    if not tournament:
        raise NotFound("Tournament not found.")

    return tournament


def _validate_tournament(
    db: Session,
    tournament_type: str,
    start_date: date,
    end_date: date,
    birthday_player_id: str | None,
) -> None:
    if end_date < start_date:
        raise ValueError("Tournament cannot end before it starts.")

    if tournament_type == "birthday":
        if not birthday_player_id:
            raise ValueError("Birthday tournaments need a birthday player.")
        get_player_or_raise(db, birthday_player_id)
    elif birthday_player_id:
        raise ValueError("Only birthday tournaments can have a birthday player.")


def create_tournament(db: Session, payload: schemas.TournamentCreate) -> models.Tournament:
    name = _normalize_text(payload.name)
    if not name:
        raise ValueError("Tournament name cannot be empty.")

    _validate_tournament(
        db,
        tournament_type=payload.tournament_type,
        start_date=payload.start_date,
        end_date=payload.end_date,
        birthday_player_id=payload.birthday_player_id,
    )

    if payload.tournament_type == "birthday":
        advantage = DEFAULT_BIRTHDAY_ADVANTAGE if payload.birthday_advantage is None else to_points(payload.birthday_advantage)
    else:
        advantage = ZERO

    tournament = models.Tournament(
        name=name,
        tournament_type=payload.tournament_type,
        start_date=payload.start_date,
        end_date=payload.end_date,
        birthday_player_id=payload.birthday_player_id,
        birthday_advantage=advantage,
        is_active=payload.is_active,
    )
    db.add(tournament)
    db.commit()

    logger.info(
        "Created %s tournament %s for %s..%s",
        tournament.tournament_type,
        tournament.id,
        tournament.start_date,
        tournament.end_date,
    )
    return get_tournament_or_raise(db, tournament.id)


def update_tournament(db: Session, tournament_id: str, payload: schemas.TournamentUpdate) -> models.Tournament:
    tournament = get_tournament_or_raise(db, tournament_id)
    changes = payload.model_dump(exclude_unset=True)

    if "name" in changes:
        name = _normalize_text(changes["name"] or "")
        if not name:
            raise ValueError("Tournament name cannot be empty.")
        changes["name"] = name

    if tournament.tournament_type != "birthday" and changes.get("birthday_advantage"):
        raise ValueError("Only birthday tournaments can have a birthday advantage.")
    if changes.get("birthday_advantage") is not None:
        changes["birthday_advantage"] = to_points(changes["birthday_advantage"])

    _validate_tournament(
        db,
        tournament_type=tournament.tournament_type,
        start_date=changes.get("start_date") or tournament.start_date,
        end_date=changes.get("end_date") or tournament.end_date,
        birthday_player_id=changes.get("birthday_player_id", tournament.birthday_player_id),
    )

    for field_name, value in changes.items():
        if value is None and field_name != "birthday_player_id":
            continue
        setattr(tournament, field_name, value)

    db.commit()
    db.expire(tournament)
    return get_tournament_or_raise(db, tournament.id)


def delete_tournament(db: Session, tournament_id: str) -> None:
    tournament = get_tournament_or_raise(db, tournament_id)
    db.delete(tournament)
    db.commit()
    logger.info("Deleted tournament %s", tournament_id)


def build_tournament_leaderboard(
    db: Session,
    tournament_id: str,
    today: date | None = None,
) -> schemas.TournamentLeaderboard:
    aggregator = LeaderboardAggregator(SqlScoreStore(db), SqlTournamentRegistry(db))
    tournament, standings = aggregator.compute_tournament_leaderboard(tournament_id)
    return schemas.TournamentLeaderboard(
        tournament=serializers.definition_to_read(tournament, today=today),
        standings=[serializers.tournament_standing_to_row(standing) for standing in standings],
    )


def build_monthly_leaderboard(db: Session, year: int, month: int) -> schemas.MonthlyLeaderboard:
    standings = MonthlyAggregator(SqlScoreStore(db)).compute_monthly_standings(year, month)

    return schemas.MonthlyLeaderboard(
        year=year,
        month=month,
        standings=[serializers.monthly_standing_to_row(standing) for standing in standings],
    )
