import uuid
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    Float,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class Player(Base):
    __tablename__ = "players"

    id = Column(String(36), primary_key=True, default=_new_id)
    display_name = Column(String(100), nullable=False, index=True)
    avatar_url = Column(String(512), nullable=True)

    # Display-only; never used in ranking math.
    handicap = Column(Float, default=0.0, nullable=False)
    games_played = Column(Integer, default=0, nullable=False)

    scores = relationship("Score", back_populates="player", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("handicap >= 0", name="ck_player_handicap_nonnegative"),
    )


class Score(Base):
    __tablename__ = "scores"

    id = Column(Integer, primary_key=True, index=True)
    player_id = Column(String(36), ForeignKey("players.id", ondelete="CASCADE"), nullable=False, index=True)
    puzzle_date = Column(Date, nullable=False, index=True)
    raw_score = Column(Integer, nullable=False)

    player = relationship("Player", back_populates="scores")

    __table_args__ = (
        UniqueConstraint("player_id", "puzzle_date", name="uq_score_player_date"),
        CheckConstraint("raw_score >= 1 and raw_score <= 7", name="ck_score_raw_score_range"),
    )


class Tournament(Base):
    __tablename__ = "tournaments"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(120), nullable=False)
    tournament_type = Column(String(16), default="regular", nullable=False, index=True)

    start_date = Column(Date, nullable=False, index=True)
    end_date = Column(Date, nullable=False, index=True)

    birthday_player_id = Column(String(36), ForeignKey("players.id", ondelete="SET NULL"), nullable=True)
    birthday_advantage = Column(Numeric(5, 2, asdecimal=True), default=Decimal("0.00"), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    birthday_player = relationship("Player")

    __table_args__ = (
        CheckConstraint("tournament_type in ('regular', 'birthday')", name="ck_tournament_type_valid"),
        CheckConstraint("end_date >= start_date", name="ck_tournament_window_ordered"),
        CheckConstraint("birthday_advantage >= 0", name="ck_tournament_advantage_nonnegative"),
    )
