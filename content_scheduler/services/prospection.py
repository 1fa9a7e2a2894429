"""
Действия проспекции LinkedIn: подключение и отправка сообщений
"""

from typing import List, Optional

from content_scheduler.core.exceptions import ValidationError
from content_scheduler.core.logger import logger
from content_scheduler.models import ProspectRecord, ProspectState
from content_scheduler.services.notifier import Notifier, NotificationLevel
from content_scheduler.services.webhooks import ProspectionWebhookClient
from content_scheduler.scheduler.bulk import BulkResult, run_sequential, notify_summary
from content_scheduler.store.base import ProspectStore

# Профили в этих состояниях уже не подключаем
CONNECTION_EXCLUDED_STATES = (ProspectState.PUBLISHED, ProspectState.CONNECTED, ProspectState.REFUSED)


def eligible_for_connection(prospects: List[ProspectRecord]) -> List[ProspectRecord]:
    """Профили для массового подключения"""
    return [
        p for p in prospects
        if p.profile_link and not any(p.state_is(state) for state in CONNECTION_EXCLUDED_STATES)
    ]


def eligible_for_publish(prospects: List[ProspectRecord]) -> List[ProspectRecord]:
    """Подключённые профили с готовым сообщением"""
    return [
        p for p in prospects
        if p.state_is(ProspectState.CONNECTED) and p.profile_link and p.message
    ]


def _describe(prospect: ProspectRecord) -> str:
    return f"{prospect.name or prospect.id} ({prospect.profile_link})"


class ProspectionService:
    """
    Подключение к профилям и отправка им сообщений через webhook.

    Массовые операции идут строго последовательно с паузой между вызовами.
    """

    def __init__(
        self,
        store: ProspectStore,
        webhook: ProspectionWebhookClient,
        notifier: Notifier,
        delay_between: float = 1.0
    ):
        self.store = store
        self.webhook = webhook
        self.notifier = notifier
        self.delay_between = delay_between

    async def _connect(self, prospect: ProspectRecord) -> str:
        new_state = await self.webhook.connect(prospect.profile_link)
        await self.store.update_state(prospect.id, new_state)
        logger.info(f"✅ Подключение {prospect.name}: {new_state}")
        return new_state

    async def _publish(self, prospect: ProspectRecord) -> None:
        await self.webhook.publish_message(prospect.profile_link, prospect.message)
        await self.store.update_state(prospect.id, ProspectState.PUBLISHED)
        logger.info(f"✅ Сообщение отправлено: {prospect.name}")

    async def connect(self, prospect: ProspectRecord) -> str:
        """
        Запрос на подключение к одному профилю

        Returns:
            Новое состояние профиля (ответ webhook)

        Raises:
            ValidationError: нет ссылки или профиль отклонён
            DispatchFailedError, StoreWriteError: ошибка webhook или базы
        """
        if not prospect.profile_link:
            raise ValidationError("Нет ссылки на профиль LinkedIn")
        if prospect.state_is(ProspectState.REFUSED):
            raise ValidationError("Профиль отклонён, подключение невозможно")

        new_state = await self._connect(prospect)
        await self.notifier.notify(NotificationLevel.SUCCESS, f"Состояние обновлено: {new_state}")
        return new_state

    async def publish(self, prospect: ProspectRecord) -> None:
        """
        Отправка сообщения одному профилю

        Raises:
            ValidationError: уже отправлено, профиль отклонён, нет ссылки или сообщения
        """
        if prospect.state_is(ProspectState.PUBLISHED):
            raise ValidationError("Сообщение уже отправлено")
        if prospect.state_is(ProspectState.REFUSED):
            raise ValidationError("Профиль отклонён, отправка невозможна")
        if not prospect.profile_link:
            raise ValidationError("Нет ссылки на профиль LinkedIn")
        if not prospect.message:
            raise ValidationError("Нет текста сообщения")

        await self._publish(prospect)
        await self.notifier.notify(NotificationLevel.SUCCESS, "Сообщение успешно отправлено")

    async def bulk_connect(self, sector: Optional[str] = None) -> BulkResult:
        """Массовое подключение ко всем подходящим профилям (опционально одного сектора)"""
        prospects = eligible_for_connection(await self.store.list_prospects(sector))
        return await self._run_bulk(prospects, self._connect, "Массовое подключение", sector)

    async def bulk_publish(self, sector: Optional[str] = None) -> BulkResult:
        """Массовая отправка сообщений подключённым профилям"""
        prospects = eligible_for_publish(await self.store.list_prospects(sector))
        return await self._run_bulk(prospects, self._publish, "Массовая отправка", sector)

    async def _run_bulk(self, prospects, operation, action: str, sector: Optional[str]) -> BulkResult:
        scope = f"сектор {sector}" if sector else None

        if not prospects:
            logger.info(f"📭 {action}: нет подходящих профилей")
            await self.notifier.notify(NotificationLevel.ERROR, f"{action}: нет подходящих профилей")
            return BulkResult()

        logger.info(f"🚀 {action}: {len(prospects)} профилей")
        result = await run_sequential(
            prospects,
            operation,
            delay_between=self.delay_between,
            describe=_describe
        )
        await notify_summary(self.notifier, result, action, scope)
        return result

    async def verify_pending(self) -> BulkResult:
        """
        Проверка профилей, ожидающих принятия запроса

        Каждый профиль «en attente d'acceptation» со ссылкой отправляется
        в webhook с action «connexion verification». Ответ только логируется,
        итог отправляется одним уведомлением.
        """
        logger.info("📋 Получение профилей, ожидающих принятия...")
        prospects = await self.store.list_by_state(ProspectState.PENDING_ACCEPTANCE)

        if not prospects:
            logger.info("ℹ️ Нет профилей, ожидающих принятия")
            return BulkResult()

        logger.info(f"📊 Найдено {len(prospects)} профилей, ожидающих принятия")

        async def verify(prospect: ProspectRecord):
            response = await self.webhook.verify_connection(prospect.profile_link)
            logger.info(f"✅ Профиль {prospect.name} отправлен на проверку. Ответ: {response}")

        result = await run_sequential(
            prospects,
            verify,
            delay_between=self.delay_between,
            describe=_describe
        )
        await notify_summary(self.notifier, result, "Проверка профилей")
        return result


__all__ = [
    "ProspectionService",
    "eligible_for_connection",
    "eligible_for_publish",
    "CONNECTION_EXCLUDED_STATES"
]
