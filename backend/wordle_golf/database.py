from collections.abc import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from .config import settings

SQLITE_BUSY_TIMEOUT_SECONDS = 30


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str, **kwargs: object) -> Engine:
    """Create an engine; SQLite connections get foreign keys switched on.

    SQLite sessions are handed across FastAPI's worker threads, so the
    same-thread check is off unless the caller asks otherwise.
    """
    is_sqlite = url.startswith("sqlite")
    if is_sqlite:
        connect_args = dict(kwargs.pop("connect_args", None) or {})
        connect_args.setdefault("check_same_thread", False)
        kwargs["connect_args"] = connect_args

    built = create_engine(url, **kwargs)
    if is_sqlite:
        event.listen(built, "connect", _enable_sqlite_foreign_keys)
    return built


def build_session_factory(bind: Engine) -> sessionmaker:
    return sessionmaker(bind=bind, autoflush=False, expire_on_commit=False)


engine = build_engine(
    settings.database_url,
    **({"connect_args": {"timeout": SQLITE_BUSY_TIMEOUT_SECONDS}} if settings.is_sqlite else {}),
)
SessionLocal = build_session_factory(engine)
Base = declarative_base()


def get_db() -> Iterator[Session]:
    with SessionLocal() as db:
        yield db
