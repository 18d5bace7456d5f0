# tests/test_commands.py

from __future__ import annotations

import pytest

from slackdog.core.commands import (
    ListPending,
    MarkCompleted,
    MarkPending,
    ReminderUnit,
    ScheduleReminder,
    parse_commands,
    thread_anchor,
)


def test_pending_inside_thread_uses_thread_root() -> None:
    cmds = parse_commands("@pending", ts="2.000002", thread_ts="1.000001", channel="C1")
    assert cmds == [MarkPending(thread_id="1.000001", channel="C1", comment="@pending")]


def test_pending_at_top_level_uses_own_ts() -> None:
    (cmd,) = parse_commands("please look @pending", ts="5.5", channel="C1")
    assert isinstance(cmd, MarkPending)
    assert cmd.thread_id == "5.5"
    assert cmd.comment == "please look @pending"


def test_missing_anchor_is_reported_as_none() -> None:
    assert thread_anchor(None, None) is None
    (cmd,) = parse_commands("@completed", channel="C1")
    assert cmd == MarkCompleted(thread_id=None, channel="C1")


@pytest.mark.parametrize(
    ("text", "amount", "unit", "delay_ms"),
    [
        ("remind me in 2 hours", 2, ReminderUnit.HOUR, 7_200_000),
        ("remind me in 1 day", 1, ReminderUnit.DAY, 86_400_000),
        ("Remind Me In 15 MINUTES please", 15, ReminderUnit.MINUTE, 900_000),
        ("remind me in 0 minutes", 0, ReminderUnit.MINUTE, 0),
    ],
)
def test_reminder_phrases(text: str, amount: int, unit: ReminderUnit, delay_ms: int) -> None:
    (cmd,) = parse_commands(text, ts="1.1", channel="C1", user="U1")
    assert isinstance(cmd, ScheduleReminder)
    assert (cmd.amount, cmd.unit, cmd.delay_ms) == (amount, unit, delay_ms)
    assert cmd.user_id == "U1"
    assert cmd.thread_id == "1.1"


@pytest.mark.parametrize(
    "text",
    [
        "remind me in a bit",
        "remind me in 3 weeks",
        "remind me in 2 hourly",
        "remind me in -1 hours",
        "remind me later",
    ],
)
def test_malformed_reminders_are_ignored(text: str) -> None:
    assert parse_commands(text, ts="1.1", channel="C1", user="U1") == []


def test_reminder_describe_pluralizes() -> None:
    (one,) = parse_commands("remind me in 1 hour", ts="1.1", channel="C1", user="U1")
    (many,) = parse_commands("remind me in 3 days", ts="1.1", channel="C1", user="U1")
    assert one.describe() == "1 hour"
    assert many.describe() == "3 days"


def test_multiple_commands_in_one_message_keep_fixed_order() -> None:
    text = "@list_pending @completed remind me in 1 hour @pending"
    cmds = parse_commands(text, ts="9.9", thread_ts="1.1", channel="C1", user="U1")
    assert [type(c) for c in cmds] == [MarkPending, ScheduleReminder, MarkCompleted, ListPending]


def test_list_pending_does_not_trigger_mark_pending() -> None:
    cmds = parse_commands("@list_pending", ts="9.9", channel="C1")
    assert cmds == [ListPending(channel="C1", thread_ts=None)]


def test_plain_text_has_no_commands() -> None:
    assert parse_commands("hello there", ts="1.1", channel="C1") == []
    assert parse_commands("", ts="1.1", channel="C1") == []
    assert parse_commands(None, ts="1.1", channel="C1") == []


def test_oversized_reminder_amount_is_ignored_but_other_commands_survive() -> None:
    huge = "9" * 5000
    assert parse_commands(f"remind me in {huge} hours", ts="1.1", channel="C1", user="U1") == []

    cmds = parse_commands(f"@pending remind me in {huge} hours", ts="1.1", channel="C1", user="U1")
    assert [type(c) for c in cmds] == [MarkPending]


def test_reminder_amount_digit_limit() -> None:
    (cmd,) = parse_commands("remind me in 999999 days", ts="1.1", channel="C1", user="U1")
    assert cmd.amount == 999_999
    assert parse_commands("remind me in 1000000 days", ts="1.1", channel="C1", user="U1") == []
