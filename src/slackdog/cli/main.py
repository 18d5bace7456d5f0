# src/slackdog/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState around the Slack Web client, then serves
Slack events until SIGINT/SIGTERM.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.slack_client import SlackChatClient
from ..connectors.slack_connector import create_slack_app, register_handlers, run_slack
from ..core.state import AppState
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


async def _shutdown(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        state.scheduler.shutdown()
    except Exception:
        logger.exception("Failed to stop reminder scheduler.")

    try:
        await state.task_store.close()
    except Exception:
        logger.debug("Task store close failed.", exc_info=True)


async def _amain(settings) -> None:
    app = create_slack_app(settings)
    state = create_initial_state(chat=SlackChatClient(app.client), settings=settings)
    register_handlers(app, state)

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()

    def _handle_signal(signum: int) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        stop_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        # add_signal_handler is not available on every platform (e.g. Windows).
        with contextlib.suppress(NotImplementedError, RuntimeError):
            loop.add_signal_handler(sig, _handle_signal, sig)

    try:
        await run_slack(app, settings, stop_event)
    finally:
        await _shutdown(state)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    app_name = getattr(settings, "app_name", "slackdog")
    log_dir = getattr(settings, "data_dir", ".local/slackdog")
    log_file = setup_logging(log_dir=log_dir, app_name=app_name, console_level=console_level)

    logging.getLogger("slack_bolt").setLevel(max(console_level, logging.INFO))
    logging.getLogger("slack_sdk").setLevel(logging.WARNING)
    logging.getLogger("aiohttp").setLevel(logging.WARNING)

    logger.info("Starting %s (log file %s)...", app_name, log_file)

    try:
        asyncio.run(_amain(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted.")
    except Exception:
        logger.exception("Failed to start Slack app")
        raise SystemExit(1)

    logger.info("Bye.")


if __name__ == "__main__":
    main()
