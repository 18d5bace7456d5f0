# src/slackdog/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the hash store, Slack client, scheduler and controller into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..connectors.notifier import NotificationDispatcher
from ..core.lifecycle import TaskLifecycleController
from ..core.ports import ChatClient, HashStore
from ..core.state import AppState
from ..core.workspace import WorkspaceDomain
from ..tasks.hash_store import create_hash_store
from ..tasks.task_scheduler import ReminderScheduler
from ..tasks.task_store import PendingTaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    if getattr(settings, "store_backend", "redis") == "sqlite":
        settings.sqlite_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(
    *,
    chat: ChatClient,
    settings=None,
    hash_store: HashStore | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings and the hash store injectable makes the app easier to test.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    if hash_store is None:
        hash_store = create_hash_store(settings)

    link_host = getattr(settings, "slack_host", "slack.com")

    task_store = PendingTaskStore(hash_store, key=getattr(settings, "tasks_key", "pendingTasks"))
    domain = WorkspaceDomain(chat)
    notifier = NotificationDispatcher(chat)
    scheduler = ReminderScheduler(task_store, notifier, domain, link_host=link_host)
    controller = TaskLifecycleController(
        task_store,
        notifier,
        scheduler,
        domain,
        chat,
        preview_chars=int(getattr(settings, "preview_chars", 50)),
        link_host=link_host,
    )

    logger.info(
        "State ready (store=%s key=%s)",
        getattr(settings, "store_backend", "redis"),
        task_store.key,
    )
    return AppState(
        settings=settings,
        chat=chat,
        task_store=task_store,
        domain=domain,
        notifier=notifier,
        scheduler=scheduler,
        controller=controller,
    )
