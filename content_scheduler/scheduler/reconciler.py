"""
Периодическая сверка таймеров с календарём в базе

Единственный механизм восстановления после перезапуска процесса и для
публикаций, запланированных из другого процесса или вкладки.
"""

from typing import Dict, Optional

from content_scheduler.core.clock import publication_time
from content_scheduler.core.exceptions import PastScheduleError
from content_scheduler.core.logger import logger
from content_scheduler.services.notifier import Notifier, NotificationLevel
from content_scheduler.scheduler.timers import Timer, TimerRegistry
from content_scheduler.store.base import ScheduleStore


class ReconciliationLoop:
    """
    Раз в interval секунд находит записи «Planifiée», которых нет в
    TimerRegistry, и взводит для них таймеры. Уже отслеживаемые записи
    не трогает.
    """

    def __init__(
        self,
        store: ScheduleStore,
        registry: TimerRegistry,
        timer: Timer,
        notifier: Notifier,
        timezone: str,
        interval: float = 60
    ):
        self.store = store
        self.registry = registry
        self.timer = timer
        self.notifier = notifier
        self.timezone = timezone
        self.interval = interval
        self.is_running = False
        self._token: Optional[str] = None
        self.tick_count = 0

    async def start(self):
        """Первичная загрузка и запуск периодической сверки"""
        if self.is_running:
            return

        self.is_running = True
        logger.info(f"🔄 Сверка запущена (каждые {self.interval} с)")

        await self._run_tick()

    def stop(self):
        """Остановка сверки"""
        self.is_running = False
        if self._token is not None:
            self.timer.cancel(self._token)
            self._token = None
        logger.info("🛑 Сверка остановлена")

    async def _run_tick(self):
        self._token = None
        try:
            await self.tick()
        finally:
            if self.is_running:
                self._token = self.timer.schedule(self.interval, self._run_tick)

    async def tick(self) -> Dict[str, int]:
        """
        Один проход сверки

        Returns:
            {"fetched": N, "armed": N, "skipped": N, "errors": N}
        """
        self.tick_count += 1
        stats = {"fetched": 0, "armed": 0, "skipped": 0, "errors": 0}

        try:
            records = await self.store.list_scheduled()
        except Exception as e:
            # Повторим на следующем тике
            logger.error(f"❌ Ошибка загрузки запланированных публикаций: {e}")
            stats["errors"] = 1
            return stats

        stats["fetched"] = len(records)

        for record in records:
            if self.registry.contains(record.id):
                stats["skipped"] += 1
                continue

            if record.target_date is None:
                stats["skipped"] += 1
                continue

            try:
                self.registry.arm(
                    record.id,
                    publication_time(record.target_date, self.timezone),
                    record.to_payload()
                )
            except PastScheduleError:
                logger.debug(f"Публикация {record.title} на прошедшую дату, пропуск")
                stats["skipped"] += 1
                continue
            except Exception as e:
                logger.error(f"❌ Не удалось запланировать {record.id}: {e}")
                stats["errors"] += 1
                continue

            stats["armed"] += 1
            await self.notifier.notify(
                NotificationLevel.INFO,
                f"Публикация \"{record.title}\" запланирована на {record.target_date.strftime('%d.%m.%Y')} 09:00"
            )

        if stats["armed"]:
            logger.info(f"📊 Сверка: найдено {stats['fetched']}, запланировано {stats['armed']}")

        return stats


__all__ = ["ReconciliationLoop"]
