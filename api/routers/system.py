"""System health and monitoring endpoints"""
from fastapi import APIRouter, Depends
from typing import Dict
from datetime import datetime

from api.dependencies import get_publication_scheduler
from content_scheduler import __version__
from content_scheduler.scheduler.publication_scheduler import PublicationScheduler

router = APIRouter(prefix="/api/v1/system", tags=["system"])


@router.get("/health")
async def health_check(scheduler: PublicationScheduler = Depends(get_publication_scheduler)) -> Dict:
    """Health check endpoint"""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "version": __version__,
        "scheduler": {
            "running": scheduler.is_running,
            "scheduled": scheduler.scheduled_count(),
            "reconcile_ticks": scheduler.reconciler.tick_count
        }
    }
