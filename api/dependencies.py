"""Dependency injection setup for FastAPI"""
from typing import Optional
from content_scheduler.scheduler.prospection_job import ProspectionDailyJob
from content_scheduler.scheduler.publication_scheduler import PublicationScheduler
from content_scheduler.services.prospection import ProspectionService

# Global instances (initialized at startup)
_publication_scheduler: Optional[PublicationScheduler] = None
_prospection: Optional[ProspectionService] = None
_daily_job: Optional[ProspectionDailyJob] = None


def init_dependencies(
    publication_scheduler: PublicationScheduler,
    prospection: ProspectionService,
    daily_job: ProspectionDailyJob
):
    """Initialize global dependencies (called from the app lifespan)"""
    global _publication_scheduler, _prospection, _daily_job
    _publication_scheduler = publication_scheduler
    _prospection = prospection
    _daily_job = daily_job


def get_publication_scheduler() -> PublicationScheduler:
    """Get publication scheduler instance"""
    if _publication_scheduler is None:
        raise RuntimeError("Publication scheduler not initialized")
    return _publication_scheduler


def get_prospection() -> ProspectionService:
    """Get prospection service instance"""
    if _prospection is None:
        raise RuntimeError("Prospection service not initialized")
    return _prospection


def get_daily_job() -> ProspectionDailyJob:
    """Get daily prospection job instance"""
    if _daily_job is None:
        raise RuntimeError("Daily prospection job not initialized")
    return _daily_job
