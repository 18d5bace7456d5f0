# src/slackdog/core/workspace.py

from __future__ import annotations

import logging

from .ports import ChatClient

logger = logging.getLogger(__name__)


class WorkspaceDomain:
    """
    Lazily fetched Slack team domain ("acme" in acme.slack.com).

    Fetched once per process and never invalidated. Two handlers racing on the
    first access may both call team.info; they store the same value.
    """

    def __init__(self, chat: ChatClient, *, domain: str | None = None) -> None:
        self._chat = chat
        self._domain = domain

    @property
    def cached(self) -> str | None:
        return self._domain

    async def get_or_fetch(self) -> str:
        if self._domain is None:
            domain = await self._chat.fetch_team_domain()
            if self._domain is None:
                logger.info("Workspace domain resolved: %s", domain)
            self._domain = domain
        return self._domain
