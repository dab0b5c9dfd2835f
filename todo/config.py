"""Settings loaded from environment variables (+ optional .env file).

One Settings object for the whole app; nothing is read at import time
except the .env file itself.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TODO"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None or v.strip() == "" else v


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    log_dir: Path

    # ---- Local data ----
    data_dir: Path
    database_url: str
    session_file: Path

    # ---- Collections ----
    tasks_collection: str
    legacy_collection: str

    @staticmethod
    def from_env(*, dotenv: bool = True) -> "Settings":
        if dotenv:
            load_dotenv(override=False)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/todo"))
        database_url = _env(_k("DATABASE_URL"), f"sqlite+aiosqlite:///{data_dir / 'todo.db'}")

        return Settings(
            app_name=_env(_k("APP_NAME"), "todo"),
            log_level=_env(_k("LOG_LEVEL"), "WARNING").upper(),
            log_dir=_env_path(_k("LOG_DIR"), data_dir / "logs"),
            data_dir=data_dir,
            database_url=database_url,
            session_file=_env_path(_k("SESSION_FILE"), data_dir / "session.json"),
            tasks_collection=_env(_k("COLLECTION"), "Tareas"),
            legacy_collection=_env(_k("LEGACY_COLLECTION"), "tasks"),
        )
