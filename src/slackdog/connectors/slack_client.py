# src/slackdog/connectors/slack_client.py

from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp
from slack_sdk.errors import SlackApiError, SlackClientError
from slack_sdk.web.async_client import AsyncWebClient

from ..errors import TransportError

logger = logging.getLogger(__name__)


def _api_error(method: str, e: Exception) -> TransportError:
    if isinstance(e, SlackApiError):
        err = e.response.get("error") if e.response is not None else None
        return TransportError(method, str(err or e))
    return TransportError(method, repr(e))


class SlackChatClient:
    """
    ChatClient port over slack_sdk's AsyncWebClient.

    Every Slack failure (API error, network error, unexpected payload) is
    re-raised as TransportError so callers only deal with one exception type.
    """

    def __init__(self, client: AsyncWebClient) -> None:
        self._client = client

    async def _call(self, method: str, coro) -> Any:
        try:
            return await coro
        except (SlackApiError, SlackClientError, aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.debug("Slack %s failed: %r", method, e)
            raise _api_error(method, e) from e

    async def post_message(self, *, channel: str, text: str, thread_ts: str | None = None) -> None:
        kwargs: dict[str, Any] = {"channel": channel, "text": text}
        if thread_ts:
            kwargs["thread_ts"] = thread_ts
        await self._call("chat.postMessage", self._client.chat_postMessage(**kwargs))

    async def open_direct_channel(self, user_id: str) -> str:
        resp = await self._call("conversations.open", self._client.conversations_open(users=user_id))
        channel_id = ((resp.get("channel") or {}).get("id") or "").strip()
        if not channel_id:
            raise TransportError("conversations.open", f"no channel id for user {user_id}")
        return channel_id

    async def fetch_thread_root_text(self, *, channel: str, ts: str) -> str | None:
        resp = await self._call(
            "conversations.replies",
            self._client.conversations_replies(channel=channel, ts=ts, limit=1),
        )
        messages = resp.get("messages") or []
        if not messages:
            return None
        return messages[0].get("text") or None

    async def fetch_team_domain(self) -> str:
        resp = await self._call("team.info", self._client.team_info())
        domain = ((resp.get("team") or {}).get("domain") or "").strip()
        if not domain:
            raise TransportError("team.info", "response has no team domain")
        return domain
