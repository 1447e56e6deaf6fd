from datetime import date

from . import models, schemas
from .leaderboard import TournamentStanding
from .monthly import MonthlyStanding
from .scoring import is_cut_day, tournament_day, tournament_status
from .store import TournamentDefinition, tournament_to_definition


def definition_to_read(tournament: TournamentDefinition, today: date | None = None) -> schemas.TournamentRead:
    today = today or date.today()
    status = tournament_status(tournament.start_date, tournament.end_date, today)
    is_playing = status == "active"

    return schemas.TournamentRead(
        id=tournament.id,
        name=tournament.name,
        tournament_type=tournament.tournament_type,
        start_date=tournament.start_date,
        end_date=tournament.end_date,
        birthday_player_id=tournament.birthday_player_id,
        birthday_player_name=tournament.birthday_player_name,
        birthday_advantage=float(tournament.birthday_advantage),
        is_active=tournament.is_active,
        status=status,
        current_day=tournament_day(today) if is_playing else None,
        is_cut_day=is_playing and is_cut_day(today),
    )


def tournament_to_read(tournament: models.Tournament, today: date | None = None) -> schemas.TournamentRead:
    return definition_to_read(tournament_to_definition(tournament), today=today)


def tournament_standing_to_row(standing: TournamentStanding) -> schemas.TournamentStandingRow:
    return schemas.TournamentStandingRow(
        position=standing.position,
        position_label=standing.position_label,
        player_id=standing.player_id,
        display_name=standing.display_name,
        avatar_url=standing.avatar_url,
        total_score=float(standing.total_score),
        qualifying_score=float(standing.qualifying_score),
        weekend_score=float(standing.weekend_score),
        advantage_applied=float(standing.advantage_applied),
        is_birthday_person=standing.is_birthday_person,
        rounds_played=standing.rounds_played,
    )


def monthly_standing_to_row(standing: MonthlyStanding) -> schemas.MonthlyStandingRow:
    return schemas.MonthlyStandingRow(
        position=standing.position,
        position_label=standing.position_label,
        player_id=standing.player_id,
        display_name=standing.display_name,
        avatar_url=standing.avatar_url,
        handicap=standing.handicap,
        total_score=standing.total_score,
        games_played=standing.games_played,
    )
