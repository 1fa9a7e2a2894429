"""
Обёртка над APScheduler для разовых и ежедневных задач
"""

from datetime import datetime
from typing import Optional, Callable, List, Sequence
from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.date import DateTrigger

from content_scheduler.core.logger import logger


class TaskScheduler:
    """
    Планировщик задач на базе AsyncIOScheduler
    """

    def __init__(self, timezone: str = "Europe/Paris"):
        """
        Args:
            timezone: Часовой пояс для cron-задач
        """
        self.timezone = timezone
        self.scheduler = AsyncIOScheduler(timezone=timezone)
        self.is_running = False
        logger.info("📅 Планировщик инициализирован")

    def start(self):
        """Запуск планировщика"""
        if not self.is_running:
            self.scheduler.start()
            self.is_running = True
            logger.info("✅ Планировщик запущен")

    def stop(self):
        """Остановка планировщика"""
        if self.is_running:
            self.scheduler.shutdown(wait=False)
            self.is_running = False
            logger.info("🛑 Планировщик остановлен")

    def add_daily_job(
        self,
        func: Callable,
        hour: int,
        minute: int = 0,
        job_id: Optional[str] = None
    ):
        """
        Добавить ежедневную задачу

        Args:
            func: Функция для выполнения
            hour: Час выполнения (0-23)
            minute: Минута выполнения (0-59)
            job_id: ID задачи (опционально)
        """
        trigger = CronTrigger(
            hour=hour,
            minute=minute,
            timezone=self.timezone
        )

        self.scheduler.add_job(
            func,
            trigger=trigger,
            id=job_id,
            replace_existing=True,
            coalesce=True,
            max_instances=1
        )

        logger.info(f"⏰ Добавлена ежедневная задача: {hour:02d}:{minute:02d}")

    def add_date_job(
        self,
        func: Callable,
        run_date: datetime,
        args: Sequence = (),
        job_id: Optional[str] = None
    ):
        """
        Добавить разовую задачу на конкретный момент

        Args:
            func: Функция для выполнения
            run_date: Время выполнения (datetime с tzinfo)
            args: Аргументы для func
            job_id: ID задачи (опционально)
        """
        # misfire_grace_time=None: опоздавшая задача всё равно выполняется
        return self.scheduler.add_job(
            func,
            trigger=DateTrigger(run_date=run_date),
            args=list(args),
            id=job_id,
            replace_existing=True,
            misfire_grace_time=None
        )

    def remove_job(self, job_id: str) -> bool:
        """
        Удалить задачу

        Args:
            job_id: ID задачи

        Returns:
            True если задача удалена
        """
        try:
            self.scheduler.remove_job(job_id)
            return True
        except JobLookupError:
            # Задача уже выполнилась или не существовала
            return False

    def next_run_time(self, job_id: str) -> Optional[datetime]:
        """Время следующего запуска задачи"""
        job = self.scheduler.get_job(job_id)
        if job is None:
            return None
        # У задач до старта планировщика next_run_time ещё не вычислен
        if hasattr(job, "next_run_time"):
            return job.next_run_time
        return job.trigger.get_next_fire_time(None, datetime.now(job.trigger.timezone))

    def get_jobs(self) -> List[dict]:
        """
        Получить список всех задач

        Returns:
            Список задач
        """
        jobs = []

        for job in self.scheduler.get_jobs():
            jobs.append({
                'id': job.id,
                'name': job.name,
                'next_run': getattr(job, 'next_run_time', None),
                'trigger': str(job.trigger)
            })

        return jobs


__all__ = ["TaskScheduler"]
