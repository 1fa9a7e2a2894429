"""
Конфигурация приложения
"""

import os
from pathlib import Path
from dotenv import load_dotenv

from content_scheduler.core.exceptions import ConfigError

# Явно указываем путь к .env
BASE_DIR = Path(__file__).resolve().parent.parent.parent
dotenv_path = BASE_DIR / '.env'

load_dotenv(dotenv_path=dotenv_path)


class Config:
    """Основная конфигурация"""

    # Supabase (если не задан - используются хранилища в памяти)
    SUPABASE_URL = os.getenv("SUPABASE_URL", "")
    SUPABASE_KEY = os.getenv("SUPABASE_KEY", "")
    CALENDAR_TABLE = os.getenv("CALENDAR_TABLE", "editorial_calendar")
    PROSPECT_TABLE = os.getenv("PROSPECT_TABLE", "search_request")

    # Webhooks
    PUBLISH_WEBHOOK_URL = os.getenv("PUBLISH_WEBHOOK_URL", "")
    PROSPECTION_WEBHOOK_URL = os.getenv("PROSPECTION_WEBHOOK_URL", "")
    WEBHOOK_TIMEOUT = int(os.getenv("WEBHOOK_TIMEOUT", "30"))

    # Scheduling
    TIMEZONE = os.getenv("TIMEZONE", "Europe/Paris")
    RECONCILE_INTERVAL_SECONDS = int(os.getenv("RECONCILE_INTERVAL_SECONDS", "60"))
    BULK_DELAY_SECONDS = float(os.getenv("BULK_DELAY_SECONDS", "1.0"))

    # Ежедневная проверка профилей
    PROSPECTION_DAILY_ENABLED = os.getenv("PROSPECTION_DAILY_ENABLED", "true").lower() == "true"
    PROSPECTION_DAILY_TIME = os.getenv("PROSPECTION_DAILY_TIME", "08:00")

    # Telegram уведомления (опционально)
    BOT_TOKEN = os.getenv("BOT_TOKEN", "")
    ADMIN_IDS = list(map(int, os.getenv("ADMIN_IDS", "").split(","))) if os.getenv("ADMIN_IDS") else []

    # API
    API_HOST = os.getenv("API_HOST", "127.0.0.1")
    API_PORT = int(os.getenv("API_PORT", "8000"))

    @property
    def use_supabase(self) -> bool:
        return bool(self.SUPABASE_URL and self.SUPABASE_KEY)

    def validate(self):
        """Проверка обязательных параметров"""
        if bool(self.SUPABASE_URL) != bool(self.SUPABASE_KEY):
            raise ConfigError("❌ SUPABASE_URL и SUPABASE_KEY задаются вместе")
        if not self.PUBLISH_WEBHOOK_URL:
            raise ConfigError("❌ PUBLISH_WEBHOOK_URL не задан в .env")
        if not self.PROSPECTION_WEBHOOK_URL:
            raise ConfigError("❌ PROSPECTION_WEBHOOK_URL не задан в .env")
        if self.RECONCILE_INTERVAL_SECONDS <= 0:
            raise ConfigError("❌ RECONCILE_INTERVAL_SECONDS должен быть > 0")
        if self.BOT_TOKEN and not self.ADMIN_IDS:
            raise ConfigError("❌ BOT_TOKEN задан, но ADMIN_IDS пуст - некому слать уведомления")


config = Config()

__all__ = ["config", "Config"]
