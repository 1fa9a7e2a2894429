"""Shared initialization logic for the scheduler process and the API"""
from dataclasses import dataclass
from typing import List, Optional

from content_scheduler.core.clock import SystemClock
from content_scheduler.core.config import config, Config
from content_scheduler.core.logger import logger
from content_scheduler.services.notifier import Notifier, LogNotifier, TelegramNotifier
from content_scheduler.services.prospection import ProspectionService
from content_scheduler.services.webhooks import PublishWebhookClient, ProspectionWebhookClient
from content_scheduler.scheduler.prospection_job import ProspectionDailyJob
from content_scheduler.scheduler.publication_scheduler import PublicationScheduler
from content_scheduler.scheduler.task_scheduler import TaskScheduler
from content_scheduler.scheduler.timers import ApschedulerTimer
from content_scheduler.store import (
    InMemoryProspectStore,
    InMemoryScheduleStore,
    SupabaseClient,
    SupabaseProspectStore,
    SupabaseScheduleStore,
)


@dataclass
class Services:
    """Running service instances"""
    task_scheduler: TaskScheduler
    publication_scheduler: PublicationScheduler
    prospection: ProspectionService
    daily_job: ProspectionDailyJob
    notifier: Notifier
    closeables: List

    async def start(self):
        self.task_scheduler.start()
        await self.publication_scheduler.start()

    async def stop(self):
        await self.publication_scheduler.stop()
        self.task_scheduler.stop()
        for resource in self.closeables:
            await resource.close()
        await self.notifier.close()


def init_services(settings: Optional[Config] = None) -> Services:
    """
    Initialize all core services (nothing is started yet)

    Returns:
        Services container
    """
    settings = settings or config
    logger.info("🔧 Инициализация сервисов...")

    settings.validate()
    logger.info("✅ Конфигурация проверена")

    clock = SystemClock(settings.TIMEZONE)
    task_scheduler = TaskScheduler(timezone=settings.TIMEZONE)
    closeables = []

    # Stores
    if settings.use_supabase:
        supabase = SupabaseClient(settings.SUPABASE_URL, settings.SUPABASE_KEY, timeout=settings.WEBHOOK_TIMEOUT)
        schedule_store = SupabaseScheduleStore(supabase, table=settings.CALENDAR_TABLE)
        prospect_store = SupabaseProspectStore(supabase, table=settings.PROSPECT_TABLE)
        closeables.append(supabase)
        logger.info("✅ Хранилище: Supabase")
    else:
        schedule_store = InMemoryScheduleStore()
        prospect_store = InMemoryProspectStore()
        logger.warning("⚠️ SUPABASE_URL не задан - используются хранилища в памяти")

    # Notifications
    if settings.BOT_TOKEN:
        notifier = TelegramNotifier(settings.BOT_TOKEN, settings.ADMIN_IDS)
    else:
        notifier = LogNotifier()
    logger.info(f"✅ Уведомления: {type(notifier).__name__}")

    # Webhooks
    publish_webhook = PublishWebhookClient(settings.PUBLISH_WEBHOOK_URL, timeout=settings.WEBHOOK_TIMEOUT)
    prospection_webhook = ProspectionWebhookClient(settings.PROSPECTION_WEBHOOK_URL, timeout=settings.WEBHOOK_TIMEOUT)
    closeables.extend([publish_webhook, prospection_webhook])

    publication_scheduler = PublicationScheduler(
        store=schedule_store,
        webhook=publish_webhook,
        notifier=notifier,
        clock=clock,
        timer=ApschedulerTimer(task_scheduler, clock),
        timezone=settings.TIMEZONE,
        reconcile_interval=settings.RECONCILE_INTERVAL_SECONDS
    )

    prospection = ProspectionService(
        store=prospect_store,
        webhook=prospection_webhook,
        notifier=notifier,
        delay_between=settings.BULK_DELAY_SECONDS
    )

    daily_job = ProspectionDailyJob(task_scheduler, prospection, run_time=settings.PROSPECTION_DAILY_TIME)
    if settings.PROSPECTION_DAILY_ENABLED:
        daily_job.install()

    return Services(
        task_scheduler=task_scheduler,
        publication_scheduler=publication_scheduler,
        prospection=prospection,
        daily_job=daily_job,
        notifier=notifier,
        closeables=closeables
    )


__all__ = ["Services", "init_services"]
