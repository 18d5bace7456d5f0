# src/slackdog/tasks/task_scheduler.py

from __future__ import annotations

"""
Reminder scheduler.

One asyncio task per reminder:
- sleeps for the requested delay,
- re-reads the pending task (a completed thread gets no reminder),
- DMs the requester with the task preview and a link to the thread.

Timers live only in this process; a restart drops every armed reminder.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

from ..core.ports import Notifier, TaskRepo
from ..core.workspace import WorkspaceDomain
from .task_models import Reminder, thread_link

logger = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[None]]


def render_reminder_text(text: str, link: str) -> str:
    return f":alarm_clock: Reminder: this thread is still pending.\n{text}... <{link}|Thread>"


class ReminderScheduler:
    def __init__(
        self,
        task_store: TaskRepo,
        notifier: Notifier,
        domain: WorkspaceDomain,
        *,
        link_host: str = "slack.com",
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self._store = task_store
        self._notifier = notifier
        self._domain = domain
        self._link_host = link_host
        self._sleep = sleep
        self._timers: set[asyncio.Task[None]] = set()

    @property
    def pending_count(self) -> int:
        return len(self._timers)

    def schedule(self, user_id: str, thread_id: str, delay_ms: int) -> Reminder:
        """Arm a one-shot reminder. Must be called from inside the running event loop."""
        delay_s = max(0, int(delay_ms)) / 1000.0
        reminder = Reminder(thread_id=thread_id, user_id=user_id, fire_at=time.time() + delay_s)

        timer = asyncio.create_task(self._run(reminder, delay_s), name=f"reminder:{thread_id}:{user_id}")
        self._timers.add(timer)
        timer.add_done_callback(self._timers.discard)

        logger.info("Reminder armed thread=%s user=%s in %.0fs", thread_id, user_id, delay_s)
        return reminder

    async def _run(self, reminder: Reminder, delay_s: float) -> None:
        await self._sleep(delay_s)
        try:
            await self.fire(reminder)
        except Exception:
            logger.exception("Reminder failed thread=%s user=%s", reminder.thread_id, reminder.user_id)

    async def fire(self, reminder: Reminder) -> bool:
        """Deliver a reminder if its thread is still pending. Returns True if a DM was sent."""
        task = await self._store.get(reminder.thread_id)
        if task is None:
            logger.info("Reminder skipped: thread %s is no longer pending", reminder.thread_id)
            return False

        domain = await self._domain.get_or_fetch()
        link = thread_link(domain, task.channel, reminder.thread_id, host=self._link_host)
        sent = await self._notifier.send_direct(reminder.user_id, render_reminder_text(task.text, link))
        if sent:
            logger.info("Reminder delivered thread=%s user=%s", reminder.thread_id, reminder.user_id)
        return sent

    async def wait_all(self) -> None:
        """Wait until every armed reminder has fired (or been cancelled)."""
        while self._timers:
            await asyncio.gather(*list(self._timers), return_exceptions=True)

    def shutdown(self) -> None:
        """Abandon all armed reminders."""
        n = len(self._timers)
        for timer in list(self._timers):
            timer.cancel()
        if n:
            logger.info("Reminder scheduler stopped; %d reminder(s) dropped", n)
