from pydantic import Field
from datetime import datetime
from typing import Literal, Optional

from .common import ApiModel

Role = Literal["admin", "technician", "viewer"]
EMAIL_REGEX = r"^\S+@\S+\.\S+$"

class UserBase(ApiModel):
    name: str = Field(..., min_length=2, max_length=100)
    email: str = Field(..., pattern=EMAIL_REGEX)
    role: Role = "viewer"
    is_active: bool = True

class UserCreate(UserBase):
    password: str = Field(..., min_length=6)

class UserUpdate(ApiModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    email: Optional[str] = Field(None, pattern=EMAIL_REGEX)
    password: Optional[str] = Field(None, min_length=6)
    role: Optional[Role] = None
    is_active: Optional[bool] = None

class UserResponse(UserBase):
    id: str
    created_at: datetime
    updated_at: Optional[datetime] = None

class UserSummary(ApiModel):
    id: str
    name: str
    email: str
    role: str
