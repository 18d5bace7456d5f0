# src/slackdog/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..tasks.task_scheduler import ReminderScheduler
from ..tasks.task_store import PendingTaskStore
from .lifecycle import TaskLifecycleController
from .ports import ChatClient, Notifier
from .workspace import WorkspaceDomain


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: object

    chat: ChatClient
    task_store: PendingTaskStore
    domain: WorkspaceDomain
    notifier: Notifier
    scheduler: ReminderScheduler
    controller: TaskLifecycleController
