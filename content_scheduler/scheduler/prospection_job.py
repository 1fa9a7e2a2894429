"""
Ежедневная проверка профилей, ожидающих принятия запроса
"""

from datetime import datetime
from typing import Optional

from content_scheduler.core.logger import logger
from content_scheduler.scheduler.bulk import BulkResult
from content_scheduler.scheduler.task_scheduler import TaskScheduler
from content_scheduler.services.prospection import ProspectionService

JOB_ID = "daily_prospection_check"


class ProspectionDailyJob:
    """
    Раз в день (по умолчанию 08:00) отправляет профили «en attente
    d'acceptation» на проверку подключения. Можно запустить вручную.
    """

    def __init__(
        self,
        task_scheduler: TaskScheduler,
        prospection: ProspectionService,
        run_time: str = "08:00"
    ):
        self.task_scheduler = task_scheduler
        self.prospection = prospection
        self.run_time = run_time
        self._running = False
        self.last_result: Optional[BulkResult] = None

    def install(self):
        """Добавить ежедневную задачу в планировщик"""
        hour, minute = map(int, self.run_time.split(":"))
        self.task_scheduler.add_daily_job(self.run, hour=hour, minute=minute, job_id=JOB_ID)
        logger.info(f"📅 Проверка профилей: ежедневно в {self.run_time}")

    async def run(self) -> Optional[BulkResult]:
        """Запуск проверки (пропускается, если предыдущая ещё идёт)"""
        if self._running:
            logger.warning("⚠️ Проверка профилей уже выполняется, пропуск")
            return None

        logger.info(f"🚀 Ежедневная проверка профилей: {datetime.now().strftime('%d.%m.%Y %H:%M')}")
        self._running = True

        try:
            self.last_result = await self.prospection.verify_pending()
            return self.last_result
        except Exception as e:
            logger.error(f"❌ Ошибка ежедневной проверки профилей: {e}", exc_info=True)
            return None
        finally:
            self._running = False
            logger.info(f"⏰ Следующий запуск: {self.next_run_time()}")

    async def execute_now(self) -> Optional[BulkResult]:
        """Ручной запуск проверки"""
        logger.info("🚀 Ручной запуск проверки профилей...")
        return await self.run()

    def next_run_time(self) -> Optional[datetime]:
        return self.task_scheduler.next_run_time(JOB_ID)

    def is_running(self) -> bool:
        return self._running


__all__ = ["ProspectionDailyJob", "JOB_ID"]
