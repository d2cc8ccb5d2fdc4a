"""Command poller -- long-polls Telegram and dispatches chat commands.

Each command runs in its own task with a timeout, so a slow RPC endpoint
on /arbitrum cannot hold up the next update or the scheduled jobs.
"""

import asyncio

from gasbot.commands.handlers import CommandHandler, parse_command
from gasbot.exceptions import GasBotError, NotificationError
from gasbot.logging import get_logger
from gasbot.notify.telegram import TelegramClient

logger = get_logger(__name__)

_ERROR_REPLY = "⚠️ Could not fetch gas data right now. Please try again later."


class CommandPoller:
    """Receives updates via getUpdates and routes commands to handlers.

    Args:
        telegram: Telegram transport.
        commands: Static command table (token -> handler).
        poll_timeout: Long-poll duration in seconds.
        handler_timeout: Seconds before a command handler is abandoned.
        retry_delay: Pause after a failed getUpdates call.
    """

    def __init__(
        self,
        telegram: TelegramClient,
        commands: dict[str, CommandHandler],
        poll_timeout: int = 30,
        handler_timeout: float = 30.0,
        retry_delay: float = 5.0,
    ) -> None:
        self._telegram = telegram
        self._commands = commands
        self._poll_timeout = poll_timeout
        self._handler_timeout = handler_timeout
        self._retry_delay = retry_delay
        self._offset: int | None = None
        self._running = False
        self._task: asyncio.Task | None = None  # type: ignore[type-arg]
        self._handlers: set[asyncio.Task] = set()  # type: ignore[type-arg]

    async def start(self) -> None:
        """Begin polling for commands in the background."""
        if self._running:
            logger.warning("command_poller_already_running")
            return
        self._running = True
        self._task = asyncio.create_task(self._poll_loop(), name="command-poller")
        logger.info("command_poller_started", commands=sorted(self._commands))

    async def stop(self) -> None:
        """Stop polling and cancel in-flight command handlers."""
        self._running = False
        tasks = list(self._handlers)
        if self._task is not None:
            tasks.append(self._task)
        for task in tasks:
            task.cancel()
        for task in tasks:
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._task = None
        logger.info("command_poller_stopped")

    async def _poll_loop(self) -> None:
        while self._running:
            try:
                await self.poll_once()
            except asyncio.CancelledError:
                raise
            except NotificationError as e:
                logger.warning("command_poll_error", error=str(e))
                await asyncio.sleep(self._retry_delay)
            except Exception:
                logger.error("command_poll_unexpected_error", exc_info=True)
                await asyncio.sleep(self._retry_delay)

    async def poll_once(self) -> int:
        """Fetch one batch of updates and dispatch them. Returns commands dispatched."""
        updates = await self._telegram.get_updates(
            offset=self._offset, timeout=self._poll_timeout
        )
        dispatched = 0
        for update in updates:
            update_id = update.get("update_id")
            if isinstance(update_id, int):
                self._offset = update_id + 1
            if self.dispatch(update) is not None:
                dispatched += 1
        return dispatched

    def dispatch(self, update: dict) -> asyncio.Task | None:  # type: ignore[type-arg]
        """Spawn the handler for a command update; ignore anything else."""
        message = update.get("message") or {}
        command = parse_command(message.get("text"))
        if command is None:
            return None
        handler = self._commands.get(command)
        if handler is None:
            logger.debug("unknown_command_ignored", command=command)
            return None
        chat_id = (message.get("chat") or {}).get("id")
        if chat_id is None:
            return None

        task = asyncio.create_task(self._run_handler(command, handler, chat_id))
        self._handlers.add(task)
        task.add_done_callback(self._handlers.discard)
        return task

    async def _run_handler(
        self, command: str, handler: CommandHandler, chat_id: int | str
    ) -> None:
        logger.info("command_received", command=command, chat_id=str(chat_id))
        try:
            await asyncio.wait_for(handler(chat_id), timeout=self._handler_timeout)
        except asyncio.TimeoutError:
            logger.warning("command_timeout", command=command)
            await self._reply_error(chat_id)
        except GasBotError as e:
            logger.warning("command_failed", command=command, error=str(e))
            await self._reply_error(chat_id)
        except Exception:
            logger.error("command_handler_error", command=command, exc_info=True)
            await self._reply_error(chat_id)

    async def _reply_error(self, chat_id: int | str) -> None:
        try:
            await self._telegram.send_message(chat_id, _ERROR_REPLY)
        except NotificationError as e:
            logger.error("command_error_reply_failed", chat_id=str(chat_id), error=str(e))
