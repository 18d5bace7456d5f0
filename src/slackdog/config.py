# src/slackdog/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time (tokens are checked when the connector starts).
- The plain env names used by earlier deployments (SLACK_BOT_TOKEN, REDIS_URL, PORT, ...)
  keep working as fallbacks for the prefixed ones.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "SLACKDOG"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


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
    data_dir: Path

    # ---- Slack ----
    slack_bot_token: str
    slack_signing_secret: str
    slack_app_token: str
    socket_mode: bool
    port: int
    slack_host: str

    # ---- Task store ----
    store_backend: str
    redis_url: str
    sqlite_path: Path
    tasks_key: str
    preview_chars: int

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "slackdog")
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/slackdog"))

        slack_bot_token = (_first_env(_k("SLACK_BOT_TOKEN"), "SLACK_BOT_TOKEN", default="") or "").strip()
        slack_signing_secret = (
            _first_env(_k("SLACK_SIGNING_SECRET"), "SLACK_SIGNING_SECRET", default="") or ""
        ).strip()
        slack_app_token = (
            _first_env(_k("SLACK_APP_TOKEN"), "SLACK_APP_TOKEN", "APP_TOKEN", default="") or ""
        ).strip()

        # Socket Mode is the default whenever an app-level token is available.
        socket_mode = _env_bool(_k("SOCKET_MODE"), bool(slack_app_token))
        port = _env_int(_k("PORT"), _env_int("PORT", 3000))
        slack_host = _env(_k("SLACK_HOST"), "slack.com").strip() or "slack.com"

        store_backend = _env(_k("STORE_BACKEND"), "redis").strip().lower() or "redis"
        redis_url = (
            _first_env(_k("REDIS_URL"), "REDIS_URL", default="redis://localhost:6379") or ""
        ).strip()
        sqlite_path = _env_path(_k("SQLITE_PATH"), data_dir / "tasks.sqlite3")
        tasks_key = _env(_k("TASKS_KEY"), "pendingTasks").strip() or "pendingTasks"
        preview_chars = max(1, _env_int(_k("PREVIEW_CHARS"), 50))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            slack_bot_token=slack_bot_token,
            slack_signing_secret=slack_signing_secret,
            slack_app_token=slack_app_token,
            socket_mode=socket_mode,
            port=port,
            slack_host=slack_host,
            store_backend=store_backend,
            redis_url=redis_url,
            sqlite_path=sqlite_path,
            tasks_key=tasks_key,
            preview_chars=preview_chars,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
