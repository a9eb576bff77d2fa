# tests/conftest.py
import json
import logging
import sys
from pathlib import Path

import httpx
import pytest

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from tgbot.core.logging import ContextFilter
from tgbot.services.telegram_models import TelegramBotConfig
from tgbot.services.telegram_service import TelegramBotClient

TEST_TOKEN = "123456789:ABCdefGHIjklMNOpqrsTUVwxyz"


@pytest.fixture
def bot_config():
    """Bot configuration pointing at the public API with a fake token."""
    return TelegramBotConfig(token=TEST_TOKEN)


@pytest.fixture
def make_client(bot_config):
    """
    Factory building a TelegramBotClient over an httpx.MockTransport.

    The handler receives each httpx.Request and returns an httpx.Response
    (or raises an httpx error to simulate transport failures). Every request
    is also appended to the returned list so tests can inspect bodies.
    """

    def factory(handler):
        requests = []

        def recording_handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return handler(request)

        http_client = httpx.AsyncClient(transport=httpx.MockTransport(recording_handler))
        return TelegramBotClient(bot_config, http_client=http_client), requests

    return factory


@pytest.fixture
def reply_with():
    """Build a handler that always answers with the given JSON envelope."""

    def factory(envelope, status_code=200):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status_code, json=envelope)

        return handler

    return factory


@pytest.fixture
def echo_handler():
    """Handler that echoes the request body back as the envelope result."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"ok": True, "result": json.loads(request.content)})

    return handler


@pytest.fixture
def restore_root_logger():
    """Restore root and third-party logger state after logging setup tests."""
    root = logging.getLogger()
    saved_level = root.level
    saved_third_party = {
        name: logging.getLogger(name).level for name in ("httpx", "httpcore")
    }
    yield root
    # Only handlers installed by setup_logging carry a ContextFilter
    for handler in root.handlers[:]:
        if any(isinstance(f, ContextFilter) for f in handler.filters):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(saved_level)
    for name, level in saved_third_party.items():
        logging.getLogger(name).setLevel(level)


@pytest.fixture
def mock_bot_user():
    """
    getMe result for a bot, as returned by the Bot API.
    """
    return {
        "id": 987654321,
        "is_bot": True,
        "first_name": "Test Bot",
        "username": "test_bot",
        "can_join_groups": True,
        "can_read_all_group_messages": False,
        "supports_inline_queries": False
    }


@pytest.fixture
def mock_sent_message():
    """
    sendMessage result: the message as stored by Telegram, with the
    server-assigned identifier, sender, chat and date.
    """
    return {
        "message_id": 42,
        "from": {
            "id": 987654321,
            "is_bot": True,
            "first_name": "Test Bot",
            "username": "test_bot"
        },
        "chat": {
            "id": 123,
            "first_name": "Test",
            "last_name": "User",
            "username": "testuser",
            "type": "private"
        },
        "date": 1234567890,
        "text": "hi"
    }


@pytest.fixture
def mock_telegram_updates():
    """
    getUpdates result carrying one update of each message-like kind plus a
    callback query.
    """
    chat = {"id": 123, "type": "private", "first_name": "Test"}
    sender = {"id": 123, "is_bot": False, "first_name": "Test"}
    return [
        {
            "update_id": 1001,
            "message": {
                "message_id": 1, "from": sender, "chat": chat,
                "date": 1234567890, "text": "Hello, bot!"
            }
        },
        {
            "update_id": 1002,
            "edited_message": {
                "message_id": 1, "from": sender, "chat": chat,
                "date": 1234567890, "text": "Hello again, bot!"
            }
        },
        {
            "update_id": 1003,
            "channel_post": {
                "message_id": 7,
                "chat": {"id": -100123, "type": "channel", "title": "News"},
                "date": 1234567891, "text": "Announcement"
            }
        },
        {
            "update_id": 1004,
            "callback_query": {
                "id": "cbq1", "from": sender, "data": "confirm"
            }
        }
    ]
