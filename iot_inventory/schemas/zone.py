from pydantic import Field
from typing import Optional
from datetime import datetime

from .common import ApiModel

class ZoneBase(ApiModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    is_active: bool = True

class ZoneCreate(ZoneBase):
    pass

class ZoneUpdate(ApiModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    is_active: Optional[bool] = None

class ZoneResponse(ZoneBase):
    id: str
    created_at: datetime
    updated_at: Optional[datetime] = None

class ZoneSummary(ApiModel):
    id: str
    name: str
    description: Optional[str] = None
