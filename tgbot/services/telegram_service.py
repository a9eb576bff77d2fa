"""
Telegram Bot API client.

Every operation goes through one primitive, ``TelegramBotClient.call``: it
POSTs the JSON-encoded parameters to ``<api>/bot<token><method>``, decodes the
response envelope and returns the raw ``result`` payload. The typed methods
(get_me, send_message, answer_callback_query, get_updates) build their
parameters, call it, and decode the result into models.
"""

from typing import Any, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_json

from tgbot.core.logging import get_logger, log_exception
from tgbot.services.telegram_models import (
    Message,
    ResponseParameters,
    TelegramBotConfig,
    TelegramModel,
    TelegramResponse,
    Update,
    User,
)

logger = get_logger(__name__)

M = TypeVar("M", bound=BaseModel)

DEFAULT_TIMEOUT = httpx.Timeout(30.0)

_UPDATES_ADAPTER = TypeAdapter(List[Update])


# ============================================================================
# ERRORS
# ============================================================================


class TelegramBotError(Exception):
    """Base class for all errors raised by the bot client"""

    def __init__(self, message: str, method: Optional[str] = None):
        super().__init__(message)
        self.method = method


class TelegramRequestError(TelegramBotError):
    """Raised when a request cannot be built, e.g. unserializable parameters"""

    pass


class TelegramTransportError(TelegramBotError):
    """Raised when the HTTP request fails before a response is received"""

    pass


class TelegramResponseError(TelegramBotError):
    """Raised when the response is not a valid envelope or its result has an unexpected shape"""

    def __init__(
        self,
        message: str,
        method: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message, method=method)
        self.status_code = status_code


class TelegramAPIError(TelegramBotError):
    """
    Raised when the API answers with ``ok: false``.

    Attributes:
        error_code: Numeric error code from the envelope (HTTP status if absent)
        description: Human-readable description from the envelope
        parameters: Optional migrate/retry hints from the envelope
    """

    def __init__(
        self,
        error_code: int,
        description: str,
        method: Optional[str] = None,
        parameters: Optional[ResponseParameters] = None,
    ):
        super().__init__(f"error: {error_code} {description}", method=method)
        self.error_code = error_code
        self.description = description
        self.parameters = parameters


# ============================================================================
# CLIENT
# ============================================================================


class TelegramBotClient:
    """
    Client for the Telegram Bot API.

    Holds the immutable bot configuration and an httpx.AsyncClient. An HTTP
    client passed in by the caller is shared, not owned: ``aclose`` leaves it
    open.

    Example:
        async with TelegramBotClient(TelegramBotConfig(token=token)) as bot:
            me = await bot.get_me()
            sent = await bot.send_message(Message(chat_id=12345, text="Hello!"))
            print(sent.message_id)
    """

    def __init__(
        self,
        bot_config: TelegramBotConfig,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[httpx.Timeout] = None,
    ):
        self.config = bot_config
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout or DEFAULT_TIMEOUT)
        logger.info(f"TelegramBotClient initialized for {bot_config.api}")

    @classmethod
    def from_config(cls, config, http_client: Optional[httpx.AsyncClient] = None) -> "TelegramBotClient":
        """Create a client from an application configuration object"""
        timeout = httpx.Timeout(
            config.telegram_read_timeout, connect=config.telegram_connect_timeout
        )
        return cls(
            TelegramBotConfig.from_config(config),
            http_client=http_client,
            timeout=timeout,
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this client created it."""
        if self._owns_client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "TelegramBotClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    def _redact(self, text: str) -> str:
        return text.replace(self.config.token, "***")

    # ------------------------------------------------------------------------
    # Generic call
    # ------------------------------------------------------------------------

    async def call(self, method: str, params: Any = None) -> Any:
        """
        Call a Bot API method and return its raw result payload.

        Args:
            method: Method path, e.g. "/getMe"
            params: Parameters to send: None, a mapping or a pydantic model.
                Model fields that are None are left out.

        Returns:
            The decoded JSON ``result`` of the response envelope

        Raises:
            TelegramRequestError: Parameters cannot be encoded or the URL is invalid
            TelegramTransportError: The request failed at the HTTP level
            TelegramResponseError: The body is not a valid response envelope
            TelegramAPIError: The API answered with ``ok: false``
        """
        try:
            if isinstance(params, TelegramModel):
                params = params.to_payload()
            elif isinstance(params, BaseModel):
                params = params.model_dump(mode="json", by_alias=True, exclude_none=True)
            payload = to_json(params, by_alias=True, exclude_none=True)
        except PydanticSerializationError as e:
            raise TelegramRequestError(
                f"Cannot encode parameters for {method}: {e}", method=method
            ) from e

        logger.debug(f"Calling Bot API method {method}")

        try:
            response = await self._client.post(
                self.config.method_url(method),
                content=payload,
                headers={"content-type": "application/json"},
            )
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
            raise TelegramRequestError(
                f"Invalid URL for {method}: {self._redact(str(e))}", method=method
            ) from e
        except httpx.HTTPError as e:
            logger.warning(
                f"Transport error calling {method}: {type(e).__name__} - {self._redact(str(e))}"
            )
            raise TelegramTransportError(
                f"Request to {method} failed: {type(e).__name__}: {self._redact(str(e))}",
                method=method,
            ) from e

        try:
            envelope = TelegramResponse.model_validate_json(response.content)
        except ValidationError as e:
            log_exception(
                logger, e, f"Malformed response from {method} (HTTP {response.status_code})"
            )
            raise TelegramResponseError(
                f"Malformed response from {method} (HTTP {response.status_code})",
                method=method,
                status_code=response.status_code,
            ) from e

        if not envelope.ok:
            error_code = (
                envelope.error_code
                if envelope.error_code is not None
                else response.status_code
            )
            description = envelope.description or ""
            logger.warning(f"Bot API error on {method}: {error_code} {description}")
            raise TelegramAPIError(
                error_code,
                description,
                method=method,
                parameters=envelope.parameters,
            )

        return envelope.result

    def _decode(self, model: Type[M], data: Any, method: str) -> M:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            log_exception(logger, e, f"Unexpected result from {method}")
            raise TelegramResponseError(
                f"Unexpected result from {method}: {e.error_count()} validation error(s)",
                method=method,
            ) from e

    # ------------------------------------------------------------------------
    # Typed methods
    # ------------------------------------------------------------------------

    async def get_me(self) -> User:
        """
        Return basic information about the bot.
        https://core.telegram.org/bots/api#getme
        """
        result = await self.call("/getMe")
        return self._decode(User, result, "/getMe")

    async def send_message(self, message: Message) -> Message:
        """
        Send a text message to the chat set in ``message.chat_id``.
        https://core.telegram.org/bots/api#sendmessage

        The API echoes the sent message. Every field present in the echo is
        written back onto ``message``, so server-assigned fields such as
        ``message_id`` and ``date`` become available on the caller's object.
        Fields absent from the echo keep their values.

        Returns:
            Message: the same ``message`` object, updated
        """
        result = await self.call("/sendMessage", message)
        echoed = self._decode(Message, result, "/sendMessage")

        for field_name in echoed.model_fields_set:
            setattr(message, field_name, getattr(echoed, field_name))

        logger.info(
            f"Message sent to chat {message.chat_id}, message_id: {message.message_id}"
        )
        return message

    async def answer_callback_query(
        self, callback_query_id: str, text: Optional[str] = None
    ) -> None:
        """
        Answer a callback query sent from an inline keyboard.
        https://core.telegram.org/bots/api#answercallbackquery
        """
        params = {"callback_query_id": callback_query_id}
        if text is not None:
            params["text"] = text
        await self.call("/answerCallbackQuery", params)

    async def get_updates(
        self,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
        timeout: Optional[int] = None,
        allowed_updates: Optional[List[str]] = None,
    ) -> List[Update]:
        """
        Fetch pending updates once.
        https://core.telegram.org/bots/api#getupdates

        Only the arguments that are given are sent. Tracking the offset across
        calls is up to the caller. With a long-polling ``timeout`` the HTTP
        read timeout of the client must be larger than it.
        """
        params = {
            "offset": offset,
            "limit": limit,
            "timeout": timeout,
            "allowed_updates": allowed_updates,
        }
        params = {key: value for key, value in params.items() if value is not None}

        result = await self.call("/getUpdates", params or None)
        try:
            updates = _UPDATES_ADAPTER.validate_python(result)
        except ValidationError as e:
            log_exception(logger, e, "Unexpected result from /getUpdates")
            raise TelegramResponseError(
                f"Unexpected result from /getUpdates: {e.error_count()} validation error(s)",
                method="/getUpdates",
            ) from e

        logger.debug(f"Received {len(updates)} update(s)")
        return updates
