# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from slackdog.cli.bootstrap import create_initial_state
from slackdog.core.state import AppState
from slackdog.tasks.hash_store import SqliteHashStore
from slackdog.tasks.task_store import PendingTaskStore

from .fakes import FakeChatClient


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and core modules.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="slackdog-test",
        data_dir=tmp_path,
        store_backend="sqlite",
        sqlite_path=tmp_path / "tasks.sqlite3",
        redis_url="redis://localhost:6379",
        tasks_key="pendingTasks",
        slack_host="slack.com",
        preview_chars=50,
    )


@pytest.fixture()
def hash_store(settings: SimpleNamespace) -> SqliteHashStore:
    return SqliteHashStore(settings.sqlite_path)


@pytest.fixture()
def task_store(hash_store: SqliteHashStore) -> PendingTaskStore:
    return PendingTaskStore(hash_store)


@pytest.fixture()
def chat() -> FakeChatClient:
    return FakeChatClient(domain="acme")


@pytest.fixture()
def state(settings: SimpleNamespace, chat: FakeChatClient, hash_store: SqliteHashStore) -> AppState:
    """
    AppState wired with a fake Slack client.

    NOTE: the hash store is a real SQLite store because its behaviour
    (overwrite, no-op delete, listing) is part of what we want to test.
    """
    return create_initial_state(chat=chat, settings=settings, hash_store=hash_store)
