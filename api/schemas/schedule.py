"""Schedule-related Pydantic schemas"""
from datetime import date, datetime
from pydantic import BaseModel, Field
from typing import List, Optional

from content_scheduler.models import CalendarRecord, ImageRef, PublicationStatus, DEFAULT_TITLE
from content_scheduler.scheduler.timers import TimerEntry


class ScheduleCreate(BaseModel):
    """Schema for arming a calendar entry"""
    id: str = Field(..., description="Calendar record ID")
    title: str = Field(DEFAULT_TITLE, description="Publication title")
    target_date: date = Field(..., description="Publication date (published at 09:00)")
    platforms: List[str] = Field(default_factory=list)
    description: str = ""
    images: List[ImageRef] = Field(default_factory=list)
    extra_info: Optional[str] = None

    def to_record(self) -> CalendarRecord:
        return CalendarRecord(
            id=self.id,
            title=self.title,
            status=PublicationStatus.SCHEDULED,
            target_date=self.target_date,
            platforms=self.platforms,
            description=self.description,
            images=self.images,
            extra_info=self.extra_info
        )


class RecordChange(BaseModel):
    """Calendar record after an edit, with its previous status"""
    record: CalendarRecord
    previous_status: Optional[str] = None


class ScheduleResponse(BaseModel):
    """Armed timer"""
    id: str
    title: str
    target_time: datetime

    @classmethod
    def from_entry(cls, entry: TimerEntry) -> "ScheduleResponse":
        return cls(id=entry.task_id, title=entry.payload.title, target_time=entry.target_time)


class ScheduleList(BaseModel):
    """Armed timers"""
    count: int
    ids: List[str]
