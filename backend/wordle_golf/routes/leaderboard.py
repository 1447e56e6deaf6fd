from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from .. import crud, schemas
from ..database import get_db
from ..exceptions import TransientError

router = APIRouter(tags=["leaderboard"])


@router.get("/tournaments/{tournament_id}", response_model=schemas.TournamentLeaderboard)
def tournament_leaderboard(tournament_id: str, db: Session = Depends(get_db)) -> schemas.TournamentLeaderboard:
    try:
        return crud.build_tournament_leaderboard(db, tournament_id)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except TransientError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc


@router.get("/monthly", response_model=schemas.MonthlyLeaderboard)
def monthly_leaderboard(
    year: int | None = Query(default=None),
    month: int | None = Query(default=None),
    db: Session = Depends(get_db),
) -> schemas.MonthlyLeaderboard:
    today = date.today()
    try:
        return crud.build_monthly_leaderboard(
            db,
            year=today.year if year is None else year,
            month=today.month if month is None else month,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except TransientError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
