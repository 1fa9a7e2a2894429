"""Scheduled publication endpoints"""
from fastapi import APIRouter, Depends, HTTPException
from typing import Dict

from api.schemas.schedule import ScheduleCreate, RecordChange, ScheduleResponse, ScheduleList
from api.schemas.response import SuccessResponse
from api.dependencies import get_publication_scheduler
from content_scheduler.core.exceptions import PastScheduleError, ValidationError
from content_scheduler.scheduler.publication_scheduler import PublicationScheduler

router = APIRouter(prefix="/api/v1/schedules", tags=["schedules"])


@router.post("", response_model=ScheduleResponse, status_code=201)
async def arm_schedule(
    data: ScheduleCreate,
    scheduler: PublicationScheduler = Depends(get_publication_scheduler)
):
    """Arm (or re-arm) a publication for its date at 09:00"""
    try:
        entry = await scheduler.schedule_publication(data.to_record())
    except PastScheduleError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return ScheduleResponse.from_entry(entry)


@router.get("", response_model=ScheduleList)
async def list_schedules(scheduler: PublicationScheduler = Depends(get_publication_scheduler)):
    """Publications armed in this process"""
    return ScheduleList(count=scheduler.scheduled_count(), ids=scheduler.scheduled_ids())


@router.post("/reconcile")
async def reconcile(scheduler: PublicationScheduler = Depends(get_publication_scheduler)) -> Dict[str, int]:
    """Run one reconciliation pass immediately"""
    return await scheduler.reconcile_now()


@router.put("/{record_id}", response_model=SuccessResponse)
async def sync_record(
    record_id: str,
    change: RecordChange,
    scheduler: PublicationScheduler = Depends(get_publication_scheduler)
):
    """Apply a calendar record edit (status or date change) to its timer"""
    if change.record.id != record_id:
        raise HTTPException(status_code=400, detail="Record ID mismatch")

    try:
        tracked = await scheduler.sync_record(change.record, change.previous_status)
    except (PastScheduleError, ValidationError) as e:
        raise HTTPException(status_code=400, detail=str(e))

    return SuccessResponse(
        message="Publication scheduled" if tracked else "Publication not scheduled",
        data={"tracked": tracked}
    )


@router.delete("/{record_id}", response_model=SuccessResponse)
async def cancel_schedule(
    record_id: str,
    scheduler: PublicationScheduler = Depends(get_publication_scheduler)
):
    """Cancel a scheduled publication"""
    if not await scheduler.cancel_publication(record_id):
        raise HTTPException(status_code=404, detail="Publication not scheduled")

    return SuccessResponse(message="Scheduled publication cancelled")
