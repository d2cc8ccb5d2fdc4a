"""Telegram Bot API client and fixed-destination notifier.

TelegramClient is the raw transport (sendMessage, sendPhoto, getUpdates).
Notifier binds it to the configured chat and never raises: delivery
failures are logged and reported as False, so a flaky Telegram API can
never affect history bookkeeping.
"""

import httpx

from gasbot.exceptions import NotificationError
from gasbot.logging import get_logger

logger = get_logger(__name__)


class TelegramClient:
    """Minimal async Telegram Bot API client.

    Args:
        bot_token: Bot API token.
        api_url: Bot API root (overridable for local Bot API servers).
        timeout: Timeout for send calls in seconds.
        client: Optional pre-built httpx.AsyncClient.
    """

    def __init__(
        self,
        bot_token: str,
        api_url: str = "https://api.telegram.org",
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = f"{api_url.rstrip('/')}/bot{bot_token}"
        self._timeout = timeout
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def _call(self, method: str, payload: dict, timeout: float | None = None) -> object:
        """POST a Bot API method and return its "result" field.

        Raises:
            NotificationError: On transport errors or an ok=false reply.
        """
        try:
            response = await self._client.post(
                f"{self._base_url}/{method}",
                json=payload,
                timeout=timeout if timeout is not None else self._timeout,
            )
            body = response.json()
        except httpx.HTTPError as e:
            # str(e) can embed the request URL, which carries the token
            raise NotificationError(f"Telegram {method} failed: {type(e).__name__}") from e
        except ValueError as e:
            raise NotificationError(f"Telegram {method} returned non-JSON body") from e

        if not isinstance(body, dict) or not body.get("ok"):
            description = body.get("description") if isinstance(body, dict) else body
            raise NotificationError(f"Telegram {method} rejected: {description}")
        return body.get("result")

    async def send_message(self, chat_id: str | int, text: str) -> None:
        await self._call("sendMessage", {"chat_id": chat_id, "text": text})

    async def send_photo(self, chat_id: str | int, photo_url: str, caption: str) -> None:
        await self._call(
            "sendPhoto",
            {"chat_id": chat_id, "photo": photo_url, "caption": caption},
        )

    async def get_updates(self, offset: int | None = None, timeout: int = 30) -> list[dict]:
        """Long-poll for new updates.

        Args:
            offset: Identifier of the first update to return (last seen + 1).
            timeout: Server-side long-poll duration in seconds.
        """
        payload: dict = {"timeout": timeout, "allowed_updates": ["message"]}
        if offset is not None:
            payload["offset"] = offset
        # Client timeout must outlast the server-side long poll
        result = await self._call("getUpdates", payload, timeout=timeout + self._timeout)
        return result if isinstance(result, list) else []

    async def close(self) -> None:
        await self._client.aclose()


class Notifier:
    """Delivers messages to the fixed destination chat.

    Fire-and-forget from the caller's perspective: failures are logged,
    not retried, and never raised.

    Args:
        client: Telegram transport.
        chat_id: Destination chat identifier.
    """

    def __init__(self, client: TelegramClient, chat_id: str | int) -> None:
        self._client = client
        self._chat_id = chat_id

    async def notify(self, text: str) -> bool:
        """Send a text message. Returns True if delivered."""
        try:
            await self._client.send_message(self._chat_id, text)
        except NotificationError as e:
            logger.error("notification_failed", chat_id=str(self._chat_id), error=str(e))
            return False
        logger.info("notification_sent", chat_id=str(self._chat_id))
        return True
