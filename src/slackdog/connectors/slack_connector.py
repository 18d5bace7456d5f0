# src/slackdog/connectors/slack_connector.py

from __future__ import annotations

"""
Slack connector (Bolt for Python, asyncio flavour).

Slack delivers events -> one "message" listener -> lifecycle controller.
Bolt runs every event in its own task, so handlers may overlap.
"""

import asyncio
import contextlib
import logging
from typing import Any

from aiohttp import web
from slack_bolt.adapter.socket_mode.async_handler import AsyncSocketModeHandler
from slack_bolt.app.async_app import AsyncApp

from ..core.state import AppState

logger = logging.getLogger(__name__)

# Edits, deletions and bot posts never carry commands for us.
IGNORED_SUBTYPES = frozenset({"message_changed", "message_deleted", "bot_message", "channel_join"})


def create_slack_app(settings) -> AsyncApp:
    token = (getattr(settings, "slack_bot_token", "") or "").strip()
    if not token:
        raise RuntimeError("Slack is not configured: set SLACKDOG_SLACK_BOT_TOKEN (or SLACK_BOT_TOKEN)")

    signing_secret = (getattr(settings, "slack_signing_secret", "") or "").strip() or None
    if signing_secret is None and not getattr(settings, "socket_mode", False):
        raise RuntimeError("HTTP mode needs a signing secret: set SLACKDOG_SLACK_SIGNING_SECRET")
    return AsyncApp(token=token, signing_secret=signing_secret)


def should_handle(event: dict[str, Any]) -> bool:
    if event.get("bot_id"):
        return False
    return event.get("subtype") not in IGNORED_SUBTYPES


def register_handlers(app: AsyncApp, state: AppState) -> None:
    controller = state.controller

    async def message_callback(event: dict[str, Any]) -> None:
        if not should_handle(event):
            return
        logger.debug("Slack event: %r", event)
        try:
            await controller.handle_event(event)
        except Exception:
            logger.exception("Error processing message event ts=%s", event.get("ts"))

    app.event("message")(message_callback)
    logger.info("Slack message handler registered")


async def run_slack(app: AsyncApp, settings, stop_event: asyncio.Event) -> None:
    """
    Serve events until stop_event is set.

    Socket Mode when an app-level token is configured, otherwise the Bolt HTTP
    endpoint (/slack/events) on settings.port.
    """
    port = int(getattr(settings, "port", 3000))

    if getattr(settings, "socket_mode", False):
        app_token = (getattr(settings, "slack_app_token", "") or "").strip()
        if not app_token:
            raise RuntimeError("Socket Mode needs an app-level token: set SLACKDOG_SLACK_APP_TOKEN")

        handler = AsyncSocketModeHandler(app, app_token)
        await handler.connect_async()
        logger.info("SlackDog just woke up (socket mode)")
        try:
            await stop_event.wait()
        finally:
            with contextlib.suppress(Exception):
                await handler.close_async()
        return

    runner = web.AppRunner(app.web_app(path="/slack/events", port=port))
    await runner.setup()
    site = web.TCPSite(runner, port=port)
    await site.start()
    logger.info("SlackDog just woke up %s", port)
    try:
        await stop_event.wait()
    finally:
        with contextlib.suppress(Exception):
            await runner.cleanup()
