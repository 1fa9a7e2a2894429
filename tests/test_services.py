"""Tests for notifications, configuration and service wiring."""
import pytest
from aiogram.exceptions import TelegramBadRequest
from aiogram.methods import SendMessage

from content_scheduler.core.config import Config
from content_scheduler.core.exceptions import ConfigError
from content_scheduler.core.init import init_services
from content_scheduler.scheduler.prospection_job import JOB_ID
from content_scheduler.services.notifier import NotificationLevel, TelegramNotifier, LogNotifier
from content_scheduler.store import InMemoryScheduleStore


class FakeBot:
    """Bot stand-in whose delivery fails for some chats."""

    def __init__(self, failing=()):
        self.failing = set(failing)
        self.sent = []

    async def send_message(self, chat_id, text):
        if chat_id in self.failing:
            raise TelegramBadRequest(method=SendMessage(chat_id=chat_id, text=text), message="chat not found")
        self.sent.append((chat_id, text))


class TestTelegramNotifier:
    @pytest.mark.asyncio
    async def test_sends_to_every_admin(self):
        bot = FakeBot()
        notifier = TelegramNotifier("token", [1, 2], bot=bot)

        await notifier.notify(NotificationLevel.SUCCESS, "Публикация отправлена")

        assert bot.sent == [(1, "✅ Публикация отправлена"), (2, "✅ Публикация отправлена")]

    @pytest.mark.asyncio
    async def test_delivery_failure_does_not_raise(self):
        bot = FakeBot(failing={1})
        notifier = TelegramNotifier("token", [1, 2], bot=bot)

        await notifier.notify(NotificationLevel.ERROR, "Ошибка")

        assert [chat for chat, _ in bot.sent] == [2]


def make_settings(**overrides):
    settings = Config()
    settings.SUPABASE_URL = ""
    settings.SUPABASE_KEY = ""
    settings.PUBLISH_WEBHOOK_URL = "http://hooks.local/publish"
    settings.PROSPECTION_WEBHOOK_URL = "http://hooks.local/prospection"
    settings.BOT_TOKEN = ""
    settings.ADMIN_IDS = []
    settings.PROSPECTION_DAILY_ENABLED = True
    for key, value in overrides.items():
        setattr(settings, key, value)
    return settings


class TestConfig:
    def test_valid(self):
        make_settings().validate()

    @pytest.mark.parametrize("overrides", [
        {"PUBLISH_WEBHOOK_URL": ""},
        {"PROSPECTION_WEBHOOK_URL": ""},
        {"SUPABASE_URL": "https://x.supabase.co"},
        {"RECONCILE_INTERVAL_SECONDS": 0},
        {"BOT_TOKEN": "123:abc"},
    ])
    def test_invalid(self, overrides):
        with pytest.raises(ConfigError):
            make_settings(**overrides).validate()

    def test_use_supabase(self):
        assert make_settings(SUPABASE_URL="https://x.supabase.co", SUPABASE_KEY="k").use_supabase
        assert not make_settings().use_supabase


class TestInitServices:
    def test_in_memory_wiring(self):
        services = init_services(make_settings())

        assert isinstance(services.publication_scheduler.store, InMemoryScheduleStore)
        assert isinstance(services.notifier, LogNotifier)
        assert [job["id"] for job in services.task_scheduler.get_jobs()] == [JOB_ID]

    def test_daily_job_disabled(self):
        services = init_services(make_settings(PROSPECTION_DAILY_ENABLED=False))

        assert services.task_scheduler.get_jobs() == []

    def test_invalid_config_raises(self):
        with pytest.raises(ConfigError):
            init_services(make_settings(PUBLISH_WEBHOOK_URL=""))
