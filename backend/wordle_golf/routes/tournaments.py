from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from .. import crud, schemas, serializers
from ..database import get_db

router = APIRouter(tags=["tournaments"])


@router.get("/", response_model=list[schemas.TournamentRead])
def list_tournaments(
    status_filter: schemas.TournamentListFilter | None = Query(default=None, alias="status"),
    db: Session = Depends(get_db),
) -> list[schemas.TournamentRead]:
    tournaments = crud.get_tournaments(db, status=status_filter)
    return [serializers.tournament_to_read(tournament) for tournament in tournaments]


@router.post("/", response_model=schemas.TournamentRead, status_code=status.HTTP_201_CREATED)
def create_tournament(
    payload: schemas.TournamentCreate,
    db: Session = Depends(get_db),
) -> schemas.TournamentRead:
    try:
        tournament = crud.create_tournament(db, payload)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    return serializers.tournament_to_read(tournament)


@router.get("/{tournament_id}", response_model=schemas.TournamentRead)
def get_tournament(tournament_id: str, db: Session = Depends(get_db)) -> schemas.TournamentRead:
    try:
        tournament = crud.get_tournament_or_raise(db, tournament_id)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    return serializers.tournament_to_read(tournament)


@router.patch("/{tournament_id}", response_model=schemas.TournamentRead)
def update_tournament(
    tournament_id: str,
    payload: schemas.TournamentUpdate,
    db: Session = Depends(get_db),
) -> schemas.TournamentRead:
    try:
        tournament = crud.update_tournament(db, tournament_id, payload)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    return serializers.tournament_to_read(tournament)


@router.delete("/{tournament_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_tournament(tournament_id: str, db: Session = Depends(get_db)) -> Response:
    try:
        crud.delete_tournament(db, tournament_id)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    return Response(status_code=status.HTTP_204_NO_CONTENT)
