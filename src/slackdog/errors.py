# src/slackdog/errors.py

from __future__ import annotations


class SlackDogError(Exception):
    """Base class for errors raised by slackdog adapters."""


class StoreError(SlackDogError):
    """The key-value store could not be reached or rejected the operation."""


class TransportError(SlackDogError):
    """A Slack Web API call failed (network, permission, rate limit, bad response)."""

    def __init__(self, method: str, message: str) -> None:
        super().__init__(f"{method}: {message}")
        self.method = method
