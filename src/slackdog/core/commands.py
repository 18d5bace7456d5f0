# src/slackdog/core/commands.py

from __future__ import annotations

"""
Free-text command grammar.

A message is scanned for every trigger independently; one message may carry
several commands ("@pending remind me in 2 hours"). Commands are returned in a
fixed order so a task is created before a reminder for it is armed.
"""

import re
from dataclasses import dataclass
from enum import StrEnum

PENDING_TOKEN = "@pending"
COMPLETED_TOKEN = "@completed"
LIST_PENDING_TOKEN = "@list_pending"

REMIND_RE = re.compile(r"remind me in\s+(\d+)\s+(minute|hour|day)s?\b", re.IGNORECASE)

# Longer amounts are treated as a malformed phrase (999999 days is ~2700 years).
MAX_AMOUNT_DIGITS = 6


class ReminderUnit(StrEnum):
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"

    @property
    def millis(self) -> int:
        return _UNIT_MS[self]


_UNIT_MS: dict[ReminderUnit, int] = {
    ReminderUnit.MINUTE: 60_000,
    ReminderUnit.HOUR: 3_600_000,
    ReminderUnit.DAY: 86_400_000,
}


@dataclass(slots=True, frozen=True)
class MarkPending:
    thread_id: str | None
    channel: str
    comment: str


@dataclass(slots=True, frozen=True)
class ScheduleReminder:
    thread_id: str | None
    channel: str
    user_id: str | None
    amount: int
    unit: ReminderUnit

    @property
    def delay_ms(self) -> int:
        return self.amount * self.unit.millis

    def describe(self) -> str:
        plural = "" if self.amount == 1 else "s"
        return f"{self.amount} {self.unit.value}{plural}"


@dataclass(slots=True, frozen=True)
class MarkCompleted:
    thread_id: str | None
    channel: str


@dataclass(slots=True, frozen=True)
class ListPending:
    channel: str
    thread_ts: str | None = None


Command = MarkPending | ScheduleReminder | MarkCompleted | ListPending


def thread_anchor(ts: str | None, thread_ts: str | None) -> str | None:
    """Root timestamp of the thread a message belongs to (its own ts at top level)."""
    return (thread_ts or ts or "").strip() or None


def parse_reminder(text: str) -> tuple[int, ReminderUnit] | None:
    m = REMIND_RE.search(text or "")
    if not m:
        return None
    digits = m.group(1)
    if len(digits) > MAX_AMOUNT_DIGITS:
        return None
    return int(digits), ReminderUnit(m.group(2).lower())


def parse_commands(
    text: str | None,
    *,
    ts: str | None = None,
    thread_ts: str | None = None,
    channel: str = "",
    user: str | None = None,
) -> list[Command]:
    if not text:
        return []

    anchor = thread_anchor(ts, thread_ts)
    commands: list[Command] = []

    # "@list_pending" contains "_pending", never "@pending", so the two don't collide.
    if PENDING_TOKEN in text:
        commands.append(MarkPending(thread_id=anchor, channel=channel, comment=text))

    reminder = parse_reminder(text)
    if reminder is not None:
        amount, unit = reminder
        commands.append(
            ScheduleReminder(thread_id=anchor, channel=channel, user_id=user, amount=amount, unit=unit)
        )

    if COMPLETED_TOKEN in text:
        commands.append(MarkCompleted(thread_id=anchor, channel=channel))

    if LIST_PENDING_TOKEN in text:
        commands.append(ListPending(channel=channel, thread_ts=thread_ts))

    return commands
