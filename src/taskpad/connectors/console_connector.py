# src/taskpad/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from ..api.client import friendly_api_error_message
from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


class ConsoleNotifier:
    """Notifier port for the console: toasts become timestamped lines."""

    def success(self, text: str) -> None:
        _print_ts(f"[OK] {text}")

    def error(self, text: str) -> None:
        _print_ts(f"[ERROR] {text}")


async def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Use /new to create a task, /help for commands, /exit to quit.\n")

    while True:
        try:
            # input() blocks; run it off the loop so deferred actions keep firing.
            user_input = (await asyncio.to_thread(input, ">>> ")).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        if not user_input.startswith("/"):
            _print_ts("Commands start with '/'. Use /help.")
            continue

        try:
            reply = await command_registry.handle(state, user_input, emit=_print_ts)
        except Exception as e:
            logger.exception("Command failed: %s", user_input)
            _print_ts(f"[ERROR] {friendly_api_error_message(e)} See the log for details.")
            continue

        if reply:
            print(reply, flush=True)
