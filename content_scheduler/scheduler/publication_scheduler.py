"""
Сервис отложенных публикаций календаря
"""

from datetime import datetime
from typing import Dict, List, Optional

from content_scheduler.core.clock import Clock, publication_time
from content_scheduler.core.exceptions import ValidationError
from content_scheduler.core.logger import logger
from content_scheduler.models import CalendarRecord, PublicationPayload, PublicationStatus
from content_scheduler.services.notifier import Notifier, NotificationLevel
from content_scheduler.services.webhooks import PublishWebhookClient
from content_scheduler.scheduler.dispatcher import DispatchExecutor
from content_scheduler.scheduler.reconciler import ReconciliationLoop
from content_scheduler.scheduler.timers import Timer, TimerEntry, TimerRegistry
from content_scheduler.store.base import ScheduleStore


class PublicationScheduler:
    """
    Планировщик публикаций календаря

    Собирает вместе TimerRegistry, DispatchExecutor и ReconciliationLoop.
    Действия пользователя (создание, изменение, отмена записи) вызывают
    schedule_publication / cancel_publication / sync_record.
    """

    def __init__(
        self,
        store: ScheduleStore,
        webhook: PublishWebhookClient,
        notifier: Notifier,
        clock: Clock,
        timer: Timer,
        timezone: str = "Europe/Paris",
        reconcile_interval: float = 60
    ):
        """
        Args:
            store: Календарь публикаций (источник истины)
            webhook: Webhook публикации
            notifier: Канал уведомлений
            clock: Источник времени
            timer: Реализация таймеров
            timezone: Часовой пояс для времени публикации 09:00
            reconcile_interval: Интервал сверки с базой в секундах
        """
        self.store = store
        self.notifier = notifier
        self.clock = clock
        self.timezone = timezone

        self.executor = DispatchExecutor(store=store, webhook=webhook, notifier=notifier)
        self.registry = TimerRegistry(timer=timer, clock=clock, handler=self.executor.execute)
        self.reconciler = ReconciliationLoop(
            store=store,
            registry=self.registry,
            timer=timer,
            notifier=notifier,
            timezone=timezone,
            interval=reconcile_interval
        )
        self.is_running = False
        logger.info("📅 Планировщик публикаций инициализирован")

    async def start(self):
        """Загрузка запланированных публикаций и запуск сверки"""
        if self.is_running:
            logger.warning("⚠️ Планировщик публикаций уже запущен")
            return

        self.is_running = True
        logger.info("🔄 Загрузка запланированных публикаций...")
        await self.reconciler.start()
        logger.info(f"✅ Планировщик публикаций запущен ({self.registry.count()} в очереди)")

    async def stop(self):
        """Отмена всех таймеров и остановка сверки"""
        if not self.is_running:
            return

        self.reconciler.stop()
        cancelled = self.registry.cancel_all()
        self.is_running = False
        logger.info(f"🛑 Планировщик публикаций остановлен (отменено таймеров: {cancelled})")

    async def schedule_publication(self, record: CalendarRecord) -> TimerEntry:
        """
        Запланировать публикацию записи на дату @ 09:00

        Raises:
            ValidationError: у записи нет даты
            PastScheduleError: время публикации уже прошло
        """
        if record.target_date is None:
            raise ValidationError(f"У записи {record.id} нет даты публикации")

        target_time = publication_time(record.target_date, self.timezone)
        return await self.arm(record.id, target_time, record.to_payload())

    async def arm(self, task_id: str, target_time: datetime, payload: PublicationPayload) -> TimerEntry:
        """Взвести таймер и уведомить пользователя"""
        entry = self.registry.arm(task_id, target_time, payload)
        await self.notifier.notify(
            NotificationLevel.INFO,
            f"Публикация \"{payload.title}\" запланирована на {target_time.strftime('%d.%m.%Y %H:%M')}"
        )
        return entry

    async def cancel_publication(self, task_id: str) -> bool:
        """Отменить запланированную публикацию (без ошибки, если её нет)"""
        entry = self.registry.get(task_id)
        if not self.registry.cancel(task_id):
            return False

        await self.notifier.notify(
            NotificationLevel.INFO,
            f"Запланированная публикация \"{entry.payload.title}\" отменена"
        )
        return True

    async def sync_record(self, record: CalendarRecord, previous_status: Optional[str] = None) -> bool:
        """
        Привести таймер в соответствие с изменённой записью

        - запись ушла из «Planifiée» → таймер отменяется
        - запись в «Planifiée» с датой → таймер взводится заново
          (смена даты перетаскиванием в календаре тоже сюда)

        Returns:
            True если после синхронизации запись отслеживается
        """
        if not record.is_scheduled:
            if previous_status == PublicationStatus.SCHEDULED or self.registry.contains(record.id):
                await self.cancel_publication(record.id)
            return False

        if record.target_date is None:
            await self.cancel_publication(record.id)
            return False

        await self.schedule_publication(record)
        return True

    async def reconcile_now(self) -> Dict[str, int]:
        """Внеочередная сверка с базой"""
        return await self.reconciler.tick()

    def scheduled_ids(self) -> List[str]:
        return self.registry.list_ids()

    def scheduled_count(self) -> int:
        return self.registry.count()


__all__ = ["PublicationScheduler"]
