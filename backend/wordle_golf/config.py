"""Runtime settings read from the process environment."""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parents[1]
DEFAULT_DB_PATH = BASE_DIR / "wordle_golf.db"
DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000"

TRUTHY = frozenset({"1", "true", "yes", "on"})

# Driver-less URL schemes rewritten to the psycopg 3 dialect.
URL_SCHEME_ALIASES = {
    "postgres://": "postgresql+psycopg://",
    "postgresql://": "postgresql+psycopg://",
}


def env_flag(environ: Mapping[str, str], name: str, default: bool = False) -> bool:
    raw = environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in TRUTHY


def parse_origins(raw: str) -> list[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def normalize_database_url(raw_url: str | None) -> str:
    if not raw_url:
        return f"sqlite:///{DEFAULT_DB_PATH}"

    for scheme, replacement in URL_SCHEME_ALIASES.items():
        if raw_url.startswith(scheme):
            return replacement + raw_url[len(scheme):]

    return raw_url


@dataclass(frozen=True)
class Settings:
    database_url: str
    cors_origins: list[str] = field(default_factory=list)
    auto_seed_on_empty: bool = False
    log_level: str = "INFO"

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        environ = os.environ if environ is None else environ
        return cls(
            database_url=normalize_database_url(environ.get("DATABASE_URL")),
            cors_origins=parse_origins(environ.get("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)),
            auto_seed_on_empty=env_flag(environ, "AUTO_SEED_ON_EMPTY"),
            log_level=environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO",
        )


settings = Settings.from_env()
