from datetime import date, datetime, time
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ShiftCreateRequest(BaseModel):
    role_id: int
    shift_date: date
    start_time: time
    end_time: time
    shift_template_id: Optional[int] = None
    employee_id: Optional[int] = None
    notes: str = ""


class ShiftUpdateRequest(BaseModel):
    role_id: Optional[int] = None
    shift_date: Optional[date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    notes: Optional[str] = None


class AssignEmployeeRequest(BaseModel):
    employee_id: Optional[int] = Field(default=None, description="null unassigns the shift")


class ScheduledShiftOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    scheduled_shift_id: int
    schedule_id: int
    shift_template_id: Optional[int] = None
    role_id: int
    employee_id: Optional[int] = None
    shift_date: date
    start_time: time
    end_time: time
    notes: str
    employee_name: Optional[str] = None
    role_name: str
    role_color: str
    created_at: datetime
    updated_at: datetime


class AssignmentOut(BaseModel):
    shift: ScheduledShiftOut
    warnings: list[str] = []
