# tests/test_task_scheduler.py

from __future__ import annotations

import asyncio

import pytest

from slackdog.connectors.notifier import NotificationDispatcher
from slackdog.core.workspace import WorkspaceDomain
from slackdog.tasks.task_models import PendingTask, Reminder
from slackdog.tasks.task_scheduler import ReminderScheduler
from slackdog.tasks.task_store import PendingTaskStore

from .fakes import FakeChatClient, FakeHashStore, GatedSleep


def _scheduler(chat: FakeChatClient, store: PendingTaskStore, sleep=None) -> ReminderScheduler:
    kwargs = {"sleep": sleep} if sleep is not None else {}
    return ReminderScheduler(store, NotificationDispatcher(chat), WorkspaceDomain(chat), **kwargs)


async def _pending(store: PendingTaskStore, thread_id: str = "1700000000.000100") -> PendingTask:
    task = PendingTask(thread_id=thread_id, channel="C42", text="Deploy checklist", comment="@pending")
    await store.put(thread_id, task)
    return task


@pytest.mark.asyncio
async def test_reminder_fires_dm_with_text_and_link() -> None:
    chat = FakeChatClient(domain="acme")
    store = PendingTaskStore(FakeHashStore())
    await _pending(store)
    sleep = GatedSleep()
    scheduler = _scheduler(chat, store, sleep)

    reminder = scheduler.schedule("U7", "1700000000.000100", 7_200_000)
    assert isinstance(reminder, Reminder)
    assert scheduler.pending_count == 1

    await asyncio.sleep(0)
    assert sleep.delays == [7200.0]
    assert chat.dms() == []

    sleep.release()
    await scheduler.wait_all()

    (dm,) = chat.dms()
    assert dm.channel == "D-U7"
    assert "Deploy checklist" in dm.text
    assert "https://acme.slack.com/archives/C42/p1700000000000100" in dm.text
    assert scheduler.pending_count == 0


@pytest.mark.asyncio
async def test_completed_before_fire_sends_nothing() -> None:
    chat = FakeChatClient()
    store = PendingTaskStore(FakeHashStore())
    await _pending(store, "1.1")
    sleep = GatedSleep()
    scheduler = _scheduler(chat, store, sleep)

    scheduler.schedule("U7", "1.1", 60_000)
    await store.delete("1.1")
    sleep.release()
    await scheduler.wait_all()

    assert chat.dms() == []
    assert chat.opened == []


@pytest.mark.asyncio
async def test_multiple_reminders_on_same_thread_fire_independently() -> None:
    chat = FakeChatClient()
    store = PendingTaskStore(FakeHashStore())
    await _pending(store, "1.1")
    scheduler = _scheduler(chat, store)

    scheduler.schedule("U1", "1.1", 0)
    scheduler.schedule("U2", "1.1", 0)
    await scheduler.wait_all()

    assert sorted(p.channel for p in chat.dms()) == ["D-U1", "D-U2"]
    assert chat.domain_calls >= 1


@pytest.mark.asyncio
async def test_failed_dm_does_not_raise() -> None:
    chat = FakeChatClient(failing_users={"U404"})
    store = PendingTaskStore(FakeHashStore())
    await _pending(store, "1.1")
    scheduler = _scheduler(chat, store)

    assert await scheduler.fire(Reminder(thread_id="1.1", user_id="U404", fire_at=0.0)) is False
    assert chat.dms() == []


@pytest.mark.asyncio
async def test_store_error_at_fire_time_is_logged_not_raised(caplog) -> None:
    chat = FakeChatClient()
    hash_store = FakeHashStore()
    store = PendingTaskStore(hash_store)
    await _pending(store, "1.1")
    hash_store.fail = True
    scheduler = _scheduler(chat, store)

    scheduler.schedule("U1", "1.1", 0)
    await scheduler.wait_all()

    assert chat.dms() == []
    assert "Reminder failed" in caplog.text


@pytest.mark.asyncio
async def test_shutdown_cancels_armed_reminders() -> None:
    chat = FakeChatClient()
    store = PendingTaskStore(FakeHashStore())
    await _pending(store, "1.1")
    sleep = GatedSleep()
    scheduler = _scheduler(chat, store, sleep)

    scheduler.schedule("U1", "1.1", 86_400_000)
    scheduler.schedule("U2", "1.1", 86_400_000)
    await asyncio.sleep(0)

    scheduler.shutdown()
    await scheduler.wait_all()

    assert scheduler.pending_count == 0
    assert chat.dms() == []


@pytest.mark.asyncio
async def test_negative_delay_is_clamped() -> None:
    chat = FakeChatClient()
    store = PendingTaskStore(FakeHashStore())
    sleep = GatedSleep()
    scheduler = _scheduler(chat, store, sleep)

    scheduler.schedule("U1", "1.1", -5)
    await asyncio.sleep(0)
    assert sleep.delays == [0.0]

    sleep.release()
    await scheduler.wait_all()
