"""
Data models for the Telegram Bot API.

These models mirror the JSON objects exchanged with the Bot API. Optional
fields default to None and are dropped when a request is serialized, so a
field that was never set is never sent as false or 0.
"""

from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


DEFAULT_API_URL = "https://api.telegram.org"

# Filled in by the server in sendMessage echoes, never sent
MESSAGE_SERVER_FIELDS = {"message_id", "from_user", "chat", "date"}


class TelegramBotConfig(BaseModel):
    """
    Immutable connection settings of a bot client.

    Attributes:
        api: Base URL of the Bot API server
        token: Bot token from BotFather
    """

    model_config = ConfigDict(frozen=True)

    api: str = Field(DEFAULT_API_URL, description="Bot API base URL")
    token: str = Field(..., min_length=1, repr=False, description="Bot token from BotFather")

    def method_url(self, method: str) -> str:
        """Build the endpoint URL of a method path such as ``/getMe``."""
        if not method.startswith("/"):
            method = "/" + method
        return f"{self.api.rstrip('/')}/bot{self.token}{method}"

    @classmethod
    def from_config(cls, config) -> "TelegramBotConfig":
        """Create TelegramBotConfig from an application configuration object"""
        return cls(api=config.telegram_api_base_url, token=config.telegram_bot_token)


class TelegramModel(BaseModel):
    """Base class for Bot API objects. Unknown fields sent by the API are ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_payload(self) -> dict:
        """Serialize to a request payload, leaving out unset optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# Response envelope

class ResponseParameters(TelegramModel):
    """Extra information the API attaches to some failed requests"""
    migrate_to_chat_id: Optional[int] = Field(None, description="The group has been migrated to this supergroup")
    retry_after: Optional[int] = Field(None, description="Seconds left before the request can be repeated")


class TelegramResponse(TelegramModel):
    """Envelope wrapping every Bot API response"""
    ok: bool = Field(..., strict=True, description="True if the request was successful")
    error_code: Optional[int] = Field(None, description="Error code when ok is False")
    description: Optional[str] = Field(None, description="Human-readable description of the result")
    result: Any = Field(None, description="Method-specific result payload")
    parameters: Optional[ResponseParameters] = Field(None, description="Why a failed request can be retried")


# Bot API objects

class User(TelegramModel):
    """Represents a Telegram user or bot"""
    id: int = Field(..., description="Unique identifier for this user or bot")
    is_bot: bool = Field(False, description="True if this user is a bot")
    first_name: str = Field(..., description="User's or bot's first name")
    last_name: Optional[str] = Field(None, description="User's or bot's last name")
    username: Optional[str] = Field(None, description="User's or bot's username")
    language_code: Optional[str] = Field(None, description="IETF language tag of the user's language")
    is_premium: Optional[bool] = Field(None, description="True if this user is a Telegram Premium user")
    added_to_attachment_menu: Optional[bool] = Field(None, description="True if this user added the bot to the attachment menu")

    # Returned only in getMe
    can_join_groups: Optional[bool] = Field(None, description="True if the bot can be invited to groups")
    can_read_all_group_messages: Optional[bool] = Field(None, description="True if privacy mode is disabled for the bot")
    supports_inline_queries: Optional[bool] = Field(None, description="True if the bot supports inline queries")


class Chat(TelegramModel):
    """Represents a Telegram chat"""
    id: int = Field(..., description="Unique identifier for this chat")
    type: str = Field(..., description="Type of chat: private, group, supergroup, channel")
    title: Optional[str] = Field(None, description="Title for supergroups, channels, group chats")
    username: Optional[str] = Field(None, description="Username for private chats, supergroups, channels")
    first_name: Optional[str] = Field(None, description="First name of the other party in private chat")
    last_name: Optional[str] = Field(None, description="Last name of the other party in private chat")


class MessageEntity(TelegramModel):
    """A special entity in a text message, e.g. a hashtag, URL or bold span"""
    type: str = Field(..., description="Type of the entity, e.g. bold, url, text_link, mention")
    offset: int = Field(..., description="Offset in UTF-16 code units to the start of the entity")
    length: int = Field(..., description="Length of the entity in UTF-16 code units")
    url: Optional[str] = Field(None, description="For text_link only, URL opened on tap")
    user: Optional[User] = Field(None, description="For text_mention only, the mentioned user")
    language: Optional[str] = Field(None, description="For pre only, the programming language of the entity text")


class Message(TelegramModel):
    """
    A text message.

    The same model serves as the sendMessage request and as its echoed
    result: the request fields come first, the fields only the server
    assigns follow.
    """
    chat_id: Optional[Union[int, str]] = Field(None, description="Target chat id or @channelusername")
    message_thread_id: Optional[int] = Field(None, description="Target forum topic")
    text: Optional[str] = Field(None, description="Text of the message")
    parse_mode: Optional[str] = Field(None, description="Markdown, MarkdownV2 or HTML")
    entities: Optional[List[MessageEntity]] = Field(None, description="Special entities in the text, in order")
    disable_web_page_preview: Optional[bool] = Field(None, description="Disables link previews")
    disable_notification: Optional[bool] = Field(None, description="Sends the message silently")
    protect_content: Optional[bool] = Field(None, description="Protects the message from forwarding and saving")
    reply_to_message_id: Optional[int] = Field(None, description="Id of the original message if this is a reply")
    allow_sending_without_reply: Optional[bool] = Field(None, description="Send even if the replied-to message is missing")

    # Server-assigned
    message_id: Optional[int] = Field(None, description="Unique message identifier inside the chat")
    from_user: Optional[User] = Field(None, alias="from", description="Sender of the message")
    chat: Optional[Chat] = Field(None, description="Conversation the message belongs to")
    date: Optional[int] = Field(None, description="Date the message was sent in Unix time")

    def to_payload(self) -> dict:
        """Serialize the sendMessage parameters only, never the server-assigned fields."""
        return self.model_dump(
            mode="json", by_alias=True, exclude_none=True, exclude=MESSAGE_SERVER_FIELDS
        )


class CallbackQuery(TelegramModel):
    """An incoming callback query from an inline keyboard button"""
    id: str = Field(..., description="Unique identifier for this query")
    from_user: User = Field(..., alias="from", description="Sender")
    message: Optional[Message] = Field(None, description="Message with the button that originated the query")
    data: Optional[str] = Field(None, description="Data associated with the callback button")


class Update(TelegramModel):
    """
    An incoming update.

    At most one of the optional fields is present in any given update. This
    is how the API behaves, it is not validated here.
    """
    update_id: int = Field(..., description="Unique identifier for this update")
    message: Optional[Message] = Field(None, description="New incoming message")
    edited_message: Optional[Message] = Field(None, description="New version of an edited message")
    channel_post: Optional[Message] = Field(None, description="New incoming channel post")
    edited_channel_post: Optional[Message] = Field(None, description="New version of an edited channel post")
    callback_query: Optional[CallbackQuery] = Field(None, description="New incoming callback query")

    @property
    def effective_message(self) -> Optional[Message]:
        """The message-like payload of this update, whichever field carries it"""
        for candidate in (
            self.message,
            self.edited_message,
            self.channel_post,
            self.edited_channel_post,
        ):
            if candidate is not None:
                return candidate
        return None
