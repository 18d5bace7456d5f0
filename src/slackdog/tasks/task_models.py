# src/slackdog/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

NO_PARENT_TEXT = "No parent message found."


class TaskStatus(StrEnum):
    """
    Pending-task status.

    Only "pending" exists: completing a task deletes its record.
    """

    PENDING = "pending"

    @classmethod
    def from_db(cls, raw: str | None) -> TaskStatus:
        if not raw:
            return cls.PENDING
        try:
            return cls(raw)
        except ValueError:
            return cls.PENDING


@dataclass(slots=True)
class PendingTask:
    thread_id: str
    channel: str
    text: str
    comment: str
    status: TaskStatus = TaskStatus.PENDING

    def to_record(self) -> dict[str, Any]:
        # thread_id is the hash field, not part of the value.
        return {
            "status": self.status.value,
            "channel": self.channel,
            "text": self.text,
            "comment": self.comment,
        }

    @classmethod
    def from_record(cls, thread_id: str, data: dict[str, Any]) -> PendingTask:
        channel = data.get("channel")
        if not isinstance(channel, str) or not channel:
            raise ValueError("record has no channel")
        return cls(
            thread_id=thread_id,
            channel=channel,
            text=str(data.get("text") or ""),
            comment=str(data.get("comment") or ""),
            status=TaskStatus.from_db(data.get("status")),
        )


@dataclass(slots=True, frozen=True)
class Reminder:
    """In-memory only; lost when the process restarts."""

    thread_id: str
    user_id: str
    fire_at: float


def truncate_preview(text: str | None, limit: int = 50) -> str:
    return (text or NO_PARENT_TEXT)[: max(0, int(limit))]


def thread_link(domain: str, channel: str, thread_id: str, *, host: str = "slack.com") -> str:
    """
    Permalink to a thread root, e.g.
    https://acme.slack.com/archives/C123/p1700000000123456
    """
    return f"https://{domain}.{host}/archives/{channel}/p{thread_id.replace('.', '', 1)}"
