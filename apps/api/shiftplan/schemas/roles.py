from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"


class RoleCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    color: str = Field(default="#6B7280", pattern=HEX_COLOR)


class RoleUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    color: Optional[str] = Field(default=None, pattern=HEX_COLOR)


class RoleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    role_id: int
    restaurant_id: int
    name: str
    color: str
    created_at: datetime
    updated_at: datetime
