from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict

from shiftplan.schemas.scheduled_shifts import ScheduledShiftOut


class ScheduleCreate(BaseModel):
    start_date: date
    end_date: date


class ScheduleUpdate(BaseModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class ScheduleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    schedule_id: int
    restaurant_id: int
    start_date: date
    end_date: date
    published_at: Optional[datetime] = None
    status: Literal["draft", "published"]
    created_at: datetime
    updated_at: datetime


class WeekOut(BaseModel):
    schedule: ScheduleOut
    created_count: int
    shifts: list[ScheduledShiftOut]


class AutoPopulateOut(BaseModel):
    created_count: int
    created_ids: list[int]


class DispatchFailureOut(BaseModel):
    employee_id: int
    employee_name: str
    email: str
    error: str


class DispatchReportOut(BaseModel):
    total_recipients: int
    successful: int
    failed: int
    failures: list[DispatchFailureOut] = []


class PublishOut(BaseModel):
    schedule: ScheduleOut
    notifications: DispatchReportOut
    warnings: list[str] = []
