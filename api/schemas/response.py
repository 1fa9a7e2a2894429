"""Generic response schemas"""
from datetime import datetime
from pydantic import BaseModel, Field
from typing import Any, Optional

from content_scheduler.scheduler.bulk import BulkResult


class SuccessResponse(BaseModel):
    """Schema for success responses"""
    message: str = Field(..., description="Success message")
    data: Optional[Any] = Field(None, description="Additional data")


class BulkResultResponse(BaseModel):
    """Counts of a sequential bulk run"""
    success_count: int = Field(..., description="Items processed successfully")
    failure_count: int = Field(..., description="Items that failed")
    total: int = Field(..., description="Items in the batch")

    @classmethod
    def from_result(cls, result: BulkResult) -> "BulkResultResponse":
        return cls(**result.to_dict())


class DailyJobResponse(BaseModel):
    """Daily prospection job state"""
    next_run: Optional[datetime] = None
    running: bool = False
    last_result: Optional[BulkResultResponse] = None
