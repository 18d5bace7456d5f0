# src/slackdog/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps Slack / Redis swappable and makes testing easier.
"""

from typing import Any, Awaitable, Protocol


class HashStore(Protocol):
    """
    Field-map (hash) store, Redis-style.

    Each call is a single remote operation; implementations raise StoreError on failure.
    """

    def hset(self, key: str, field: str, value: str) -> Awaitable[None]: ...
    def hget(self, key: str, field: str) -> Awaitable[str | None]: ...
    def hdel(self, key: str, field: str) -> Awaitable[None]: ...
    def hgetall(self, key: str) -> Awaitable[dict[str, str]]: ...
    def close(self) -> Awaitable[None]: ...


class ChatClient(Protocol):
    """
    Slack Web API surface the core needs.

    Implementations raise TransportError on any failure.
    """

    def post_message(
            self,
            *,
            channel: str,
            text: str,
            thread_ts: str | None = None,
    ) -> Awaitable[None]: ...

    def open_direct_channel(self, user_id: str) -> Awaitable[str]: ...

    def fetch_thread_root_text(self, *, channel: str, ts: str) -> Awaitable[str | None]: ...

    def fetch_team_domain(self) -> Awaitable[str]: ...


class TaskRepo(Protocol):
    def put(self, thread_id: str, task: Any) -> Awaitable[None]: ...
    def get(self, thread_id: str) -> Awaitable[Any | None]: ...
    def delete(self, thread_id: str) -> Awaitable[None]: ...
    def list_all(self) -> Awaitable[list[Any]]: ...


class Notifier(Protocol):
    """Outbound messages; never raises, returns False when delivery failed."""

    def send_direct(self, user_id: str, text: str) -> Awaitable[bool]: ...

    def reply(self, channel: str, text: str, thread_ts: str | None = None) -> Awaitable[bool]: ...
