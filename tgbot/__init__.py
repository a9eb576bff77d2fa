"""
Minimal client for the Telegram Bot API.

    from tgbot import Message, TelegramBotClient, TelegramBotConfig

    async with TelegramBotClient(TelegramBotConfig(token=token)) as bot:
        await bot.send_message(Message(chat_id=12345, text="Hello!"))
"""

from tgbot.services.telegram_models import (
    CallbackQuery,
    Chat,
    Message,
    MessageEntity,
    ResponseParameters,
    TelegramBotConfig,
    TelegramResponse,
    Update,
    User,
)
from tgbot.services.telegram_service import (
    TelegramAPIError,
    TelegramBotClient,
    TelegramBotError,
    TelegramRequestError,
    TelegramResponseError,
    TelegramTransportError,
)

__all__ = [
    'CallbackQuery',
    'Chat',
    'Message',
    'MessageEntity',
    'ResponseParameters',
    'TelegramBotConfig',
    'TelegramResponse',
    'Update',
    'User',
    'TelegramAPIError',
    'TelegramBotClient',
    'TelegramBotError',
    'TelegramRequestError',
    'TelegramResponseError',
    'TelegramTransportError',
]
