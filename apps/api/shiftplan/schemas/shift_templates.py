from pydantic import BaseModel, Field
from datetime import datetime, time
from typing import Optional


class ShiftTemplateCreate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=255)
    day_of_week: int = Field(ge=0, le=6)  # 0=Sun ... 6=Sat
    start_time: time
    end_time: time
    role_ids: list[int] = Field(default_factory=list)


class ShiftTemplateUpdate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=255)
    day_of_week: Optional[int] = Field(default=None, ge=0, le=6)
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    # None = leave role set as is; [] = clear it
    role_ids: Optional[list[int]] = None


class ShiftTemplateOut(BaseModel):
    shift_template_id: int
    restaurant_id: int
    name: Optional[str] = None
    day_of_week: int
    start_time: time
    end_time: time
    role_ids: list[int] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
