"""Prospection (outreach) endpoints"""
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional

from api.schemas.response import SuccessResponse, BulkResultResponse, DailyJobResponse
from api.dependencies import get_prospection, get_daily_job
from content_scheduler.core.exceptions import ValidationError, ContentSchedulerError
from content_scheduler.models import ProspectRecord
from content_scheduler.scheduler.prospection_job import ProspectionDailyJob
from content_scheduler.services.prospection import ProspectionService

router = APIRouter(prefix="/api/v1/prospection", tags=["prospection"])


async def _get_prospect(prospect_id: str, service: ProspectionService) -> ProspectRecord:
    prospect = await service.store.get_prospect(prospect_id)
    if prospect is None:
        raise HTTPException(status_code=404, detail="Prospect not found")
    return prospect


@router.post("/bulk/connect", response_model=BulkResultResponse)
async def bulk_connect(
    sector: Optional[str] = Query(None, description="Only prospects of this sector"),
    service: ProspectionService = Depends(get_prospection)
):
    """Send connection requests to every eligible prospect, one by one"""
    result = await service.bulk_connect(sector)
    return BulkResultResponse.from_result(result)


@router.post("/bulk/publish", response_model=BulkResultResponse)
async def bulk_publish(
    sector: Optional[str] = Query(None, description="Only prospects of this sector"),
    service: ProspectionService = Depends(get_prospection)
):
    """Send the prepared message to every connected prospect, one by one"""
    result = await service.bulk_publish(sector)
    return BulkResultResponse.from_result(result)


@router.get("/daily", response_model=DailyJobResponse)
async def daily_status(job: ProspectionDailyJob = Depends(get_daily_job)):
    """Next run of the daily pending-acceptance check"""
    last = job.last_result
    return DailyJobResponse(
        next_run=job.next_run_time(),
        running=job.is_running(),
        last_result=BulkResultResponse.from_result(last) if last else None
    )


@router.post("/daily", response_model=SuccessResponse)
async def daily_run_now(job: ProspectionDailyJob = Depends(get_daily_job)):
    """Run the daily pending-acceptance check now"""
    if job.is_running():
        raise HTTPException(status_code=409, detail="Check already running")

    result = await job.execute_now()
    return SuccessResponse(
        message="Pending profiles checked",
        data=result.to_dict() if result else None
    )


@router.post("/{prospect_id}/connect", response_model=SuccessResponse)
async def connect(prospect_id: str, service: ProspectionService = Depends(get_prospection)):
    """Send a connection request to one prospect"""
    prospect = await _get_prospect(prospect_id, service)

    try:
        new_state = await service.connect(prospect)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ContentSchedulerError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return SuccessResponse(message="State updated", data={"state": new_state})


@router.post("/{prospect_id}/publish", response_model=SuccessResponse)
async def publish(prospect_id: str, service: ProspectionService = Depends(get_prospection)):
    """Send the prepared message to one prospect"""
    prospect = await _get_prospect(prospect_id, service)

    try:
        await service.publish(prospect)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ContentSchedulerError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return SuccessResponse(message="Message sent")
