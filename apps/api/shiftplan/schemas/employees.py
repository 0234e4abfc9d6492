from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from typing import Optional

class EmployeeCreate(BaseModel):
    full_name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    role_ids: list[int] = Field(default_factory=list)

class EmployeeUpdate(BaseModel):
    full_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None

class EmployeeRoleAssign(BaseModel):
    role_ids: list[int] = Field(default_factory=list)

class EmployeeOut(BaseModel):
    employee_id: int
    restaurant_id: int
    full_name: str
    email: str
    role_ids: list[int] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
