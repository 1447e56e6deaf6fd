from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from .. import crud, schemas
from ..database import get_db

router = APIRouter(tags=["scores"])


@router.get("/", response_model=list[schemas.ScoreRead])
def list_scores(
    player_id: str | None = Query(default=None, min_length=1, max_length=36),
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    db: Session = Depends(get_db),
) -> list[schemas.ScoreRead]:
    return crud.list_scores(db, player_id=player_id, start_date=start_date, end_date=end_date)


@router.post("/", response_model=schemas.ScoreRead, status_code=status.HTTP_201_CREATED)
def submit_score(payload: schemas.ScoreCreate, db: Session = Depends(get_db)) -> schemas.ScoreRead:
    try:
        return crud.create_score(db, payload)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
