# src/slackdog/connectors/notifier.py

from __future__ import annotations

import logging

from ..core.ports import ChatClient

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """
    Outbound messages for the core.

    Failures are logged and reported as False, never raised, so a broadcast to
    many users keeps going after one of them fails.
    """

    def __init__(self, chat: ChatClient) -> None:
        self._chat = chat

    async def send_direct(self, user_id: str, text: str) -> bool:
        try:
            channel = await self._chat.open_direct_channel(user_id)
            await self._chat.post_message(channel=channel, text=text)
        except Exception as e:
            logger.error("Failed to send DM to %s: %s", user_id, e)
            return False
        logger.debug("DM sent to %s", user_id)
        return True

    async def reply(self, channel: str, text: str, thread_ts: str | None = None) -> bool:
        try:
            await self._chat.post_message(channel=channel, text=text, thread_ts=thread_ts)
        except Exception as e:
            logger.error("Failed to post to channel=%s thread=%s: %s", channel, thread_ts, e)
            return False
        return True
