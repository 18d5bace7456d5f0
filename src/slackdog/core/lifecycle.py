# src/slackdog/core/lifecycle.py

from __future__ import annotations

"""
Task lifecycle controller.

Per thread the state is either absent or pending:
- @pending      absent/pending -> pending (overwrite)
- @completed    pending/absent -> absent  (delete is a no-op when absent)
- @list_pending and topic changes only read.

Within one command the store write happens before the confirmation reply.
Nothing raised here reaches the transport: every handler logs and returns.
"""

import logging
from collections.abc import Mapping
from typing import Any

from ..errors import StoreError, TransportError
from ..tasks.task_models import NO_PARENT_TEXT, PendingTask, thread_link, truncate_preview
from ..tasks.task_scheduler import ReminderScheduler
from .commands import (
    Command,
    ListPending,
    MarkCompleted,
    MarkPending,
    ScheduleReminder,
    parse_commands,
)
from .mentions import extract_user_ids
from .ports import ChatClient, Notifier, TaskRepo
from .workspace import WorkspaceDomain

logger = logging.getLogger(__name__)

TOPIC_SUBTYPE = "channel_topic"

PENDING_CONFIRMATION = (
    "Thread marked as pending! "
    'Want a nudge later? Reply here with "remind me in 2 hours" (minutes, hours or days).'
)
COMPLETED_CONFIRMATION = "Thread marked as completed!"
NO_PENDING_REPLY = "No pending threads at the moment."
STORE_FAILURE_REPLY = "Sorry, I couldn't reach the task store. Please try again in a moment."

TOPIC_INSTRUCTIONS = """
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Hello! Please review the pending tasks for today. To work on a task:
- Browse the relevant thread.
- Avoid long chit-chat.
- Continue the discussion under the thread (don't reply to the bot directly).
- Mark the task as completed by commenting "@completed" under the respective thread.
"""


def guidance_text(trigger: str) -> str:
    return f"Please use {trigger} within a thread."


class TaskLifecycleController:
    def __init__(
        self,
        task_store: TaskRepo,
        notifier: Notifier,
        scheduler: ReminderScheduler,
        domain: WorkspaceDomain,
        chat: ChatClient,
        *,
        preview_chars: int = 50,
        link_host: str = "slack.com",
    ) -> None:
        self._store = task_store
        self._notifier = notifier
        self._scheduler = scheduler
        self._domain = domain
        self._chat = chat
        self._preview_chars = preview_chars
        self._link_host = link_host

    # ---- entry points ----

    async def handle_event(self, event: Mapping[str, Any]) -> None:
        """Route a raw Slack message event (plain message or topic change)."""
        if event.get("subtype") == TOPIC_SUBTYPE:
            await self.handle_topic_change(event)
        else:
            await self.handle_message(event)

    async def handle_message(self, event: Mapping[str, Any]) -> None:
        text = event.get("text") or ""
        channel = str(event.get("channel") or "")
        try:
            commands = parse_commands(
                text,
                ts=event.get("ts"),
                thread_ts=event.get("thread_ts"),
                channel=channel,
                user=event.get("user"),
            )
        except Exception:
            logger.exception("Could not parse message channel=%s ts=%s", channel, event.get("ts"))
            return
        if not commands:
            return

        logger.info(
            "Message channel=%s ts=%s commands=%s",
            channel,
            event.get("ts"),
            [type(c).__name__ for c in commands],
        )

        for command in commands:
            try:
                await self.apply(command)
            except StoreError as e:
                logger.error("Task store failure on %s: %s", type(command).__name__, e)
                await self._notifier.reply(channel, STORE_FAILURE_REPLY, thread_ts=_reply_thread(command))
            except Exception:
                logger.exception("Command %s failed", type(command).__name__)

    async def handle_topic_change(self, event: Mapping[str, Any]) -> None:
        try:
            await self._broadcast_topic(event)
        except Exception:
            logger.exception("Error processing topic change channel=%s", event.get("channel"))

    # ---- commands ----

    async def apply(self, command: Command) -> None:
        if isinstance(command, MarkPending):
            await self.mark_pending(command)
        elif isinstance(command, ScheduleReminder):
            await self.schedule_reminder(command)
        elif isinstance(command, MarkCompleted):
            await self.mark_completed(command)
        elif isinstance(command, ListPending):
            await self.list_pending(command)
        else:
            raise TypeError(f"Unsupported command: {command!r}")

    async def mark_pending(self, command: MarkPending) -> None:
        thread_id = command.thread_id
        if thread_id is None:
            await self._notifier.reply(command.channel, guidance_text("@pending"))
            return

        preview = await self._fetch_preview(command.channel, thread_id)
        task = PendingTask(
            thread_id=thread_id,
            channel=command.channel,
            text=preview,
            comment=command.comment,
        )
        await self._store.put(thread_id, task)
        logger.info("Thread %s marked as pending.", thread_id)

        await self._notifier.reply(command.channel, PENDING_CONFIRMATION, thread_ts=thread_id)

    async def mark_completed(self, command: MarkCompleted) -> None:
        thread_id = command.thread_id
        if thread_id is None:
            await self._notifier.reply(command.channel, guidance_text("@completed"))
            return

        # Completing a thread that was never pending is not an error.
        await self._store.delete(thread_id)
        logger.info("Thread %s marked as completed.", thread_id)

        await self._notifier.reply(command.channel, COMPLETED_CONFIRMATION, thread_ts=thread_id)

    async def schedule_reminder(self, command: ScheduleReminder) -> None:
        thread_id = command.thread_id
        if thread_id is None:
            await self._notifier.reply(command.channel, guidance_text('"remind me in ..."'))
            return
        if not command.user_id:
            logger.warning(
                "Reminder request without a sender channel=%s thread=%s; skipped", command.channel, thread_id
            )
            return

        # Confirm only once the timer is armed.
        self._scheduler.schedule(command.user_id, thread_id, command.delay_ms)
        await self._notifier.reply(
            command.channel,
            f"Got it! I'll remind you about this thread in {command.describe()}.",
            thread_ts=thread_id,
        )

    async def list_pending(self, command: ListPending) -> None:
        tasks = await self._store.list_all()
        if not tasks:
            await self._notifier.reply(command.channel, NO_PENDING_REPLY, thread_ts=command.thread_ts)
            return

        lines = await self.format_task_lines(tasks, marker=":sparkles: ")
        await self._notifier.reply(
            command.channel,
            "Here are the pending threads:\n" + "\n".join(lines),
            thread_ts=command.thread_ts,
        )

    # ---- topic broadcast ----

    async def _broadcast_topic(self, event: Mapping[str, Any]) -> None:
        topic = event.get("topic") or ""
        user_ids = extract_user_ids(topic)
        logger.info("Topic changed channel=%s mentions=%d", event.get("channel"), len(user_ids))
        if not user_ids:
            return

        tasks = await self._store.list_all()
        if not tasks:
            logger.info("Topic changed but there are no pending tasks; nothing to send")
            return

        lines = await self.format_task_lines(tasks)
        message = TOPIC_INSTRUCTIONS + "\nHere are the pending tasks:\n" + "\n".join(lines)

        sent = 0
        for user_id in user_ids:
            if await self._notifier.send_direct(user_id, message):
                sent += 1
        logger.info("Pending digest sent to %d/%d mentioned user(s)", sent, len(user_ids))

    # ---- helpers ----

    async def format_task_lines(self, tasks: list[PendingTask], *, marker: str = "") -> list[str]:
        domain = await self._domain.get_or_fetch()
        lines: list[str] = []
        for i, task in enumerate(tasks, start=1):
            link = thread_link(domain, task.channel, task.thread_id, host=self._link_host)
            lines.append(f"{i}. {marker}{task.text}... <{link}|Thread>")
        return lines

    async def _fetch_preview(self, channel: str, thread_id: str) -> str:
        try:
            text = await self._chat.fetch_thread_root_text(channel=channel, ts=thread_id)
        except TransportError as e:
            logger.warning("Could not fetch root message channel=%s thread=%s: %s", channel, thread_id, e)
            text = None
        return truncate_preview(text or NO_PARENT_TEXT, self._preview_chars)


def _reply_thread(command: Command) -> str | None:
    if isinstance(command, ListPending):
        return command.thread_ts
    return command.thread_id
