"""API schemas"""
from .schedule import ScheduleCreate, RecordChange, ScheduleResponse, ScheduleList
from .response import SuccessResponse, BulkResultResponse, DailyJobResponse

__all__ = [
    "ScheduleCreate",
    "RecordChange",
    "ScheduleResponse",
    "ScheduleList",
    "SuccessResponse",
    "BulkResultResponse",
    "DailyJobResponse",
]
