"""
Уведомления пользователю о результатах публикаций и рассылок
"""

from enum import Enum
from typing import List, Optional
from aiogram import Bot
from aiogram.exceptions import TelegramAPIError

from content_scheduler.core.logger import logger


class NotificationLevel(str, Enum):
    """Уровень уведомления"""
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


LEVEL_ICONS = {
    NotificationLevel.INFO: "ℹ️",
    NotificationLevel.SUCCESS: "✅",
    NotificationLevel.WARNING: "⚠️",
    NotificationLevel.ERROR: "❌",
}


class Notifier:
    """Базовый канал уведомлений"""

    async def notify(self, level: NotificationLevel, message: str) -> None:
        raise NotImplementedError

    async def close(self) -> None:
        pass


class LogNotifier(Notifier):
    """Уведомления только в лог"""

    async def notify(self, level: NotificationLevel, message: str) -> None:
        if level == NotificationLevel.ERROR:
            logger.error(f"🔔 {message}")
        elif level == NotificationLevel.WARNING:
            logger.warning(f"🔔 {message}")
        else:
            logger.info(f"🔔 {message}")


class TelegramNotifier(Notifier):
    """
    Уведомления администраторам в Telegram

    Ошибки доставки логируются и не пробрасываются: уведомление
    никогда не должно ломать публикацию.
    """

    def __init__(self, bot_token: str, admin_ids: List[int], bot: Optional[Bot] = None):
        """
        Args:
            bot_token: Токен Telegram бота
            admin_ids: Кому отправлять уведомления
            bot: Готовый экземпляр Bot (опционально)
        """
        self.bot = bot or Bot(token=bot_token)
        self.admin_ids = admin_ids
        logger.info(f"🤖 TelegramNotifier инициализирован ({len(admin_ids)} получателей)")

    async def notify(self, level: NotificationLevel, message: str) -> None:
        text = f"{LEVEL_ICONS.get(level, '')} {message}".strip()

        for admin_id in self.admin_ids:
            try:
                await self.bot.send_message(chat_id=admin_id, text=text)
            except TelegramAPIError as e:
                logger.error(f"❌ Не удалось отправить уведомление {admin_id}: {e}")

    async def close(self) -> None:
        await self.bot.session.close()


__all__ = ["NotificationLevel", "Notifier", "LogNotifier", "TelegramNotifier"]
