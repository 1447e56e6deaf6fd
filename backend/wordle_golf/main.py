import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import sessionmaker

from .config import Settings, settings
from .database import Base, SessionLocal, engine
from .models import Player
from .routes import leaderboard, players, scores, tournaments

logger = logging.getLogger(__name__)


def configure_logging(level_name: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def seed_if_empty(config: Settings, session_factory: sessionmaker = SessionLocal) -> bool:
    """Load the demo family into an empty database. Returns True if it seeded."""
    if not config.auto_seed_on_empty:
        return False

    with session_factory() as db:
        if db.query(Player.id).first() is not None:
            return False

    from seed import seed

    logger.info("Database is empty; seeding demo family")
    seed()
    return True


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    Base.metadata.create_all(bind=engine)
    seed_if_empty(settings)
    yield


configure_logging(settings.log_level)

app = FastAPI(
    title="Wordle Golf Leaderboard API",
    version="1.0.0",
    description=(
        "Family Wordle scores played as golf: weekly tournaments with a "
        "qualifying round, a weekend round and birthday advantages, plus "
        "monthly standings."
    ),
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


app.include_router(players.router, prefix="/players")
app.include_router(scores.router, prefix="/scores")
app.include_router(tournaments.router, prefix="/tournaments")
app.include_router(leaderboard.router, prefix="/leaderboard")
