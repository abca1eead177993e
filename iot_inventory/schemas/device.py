from pydantic import Field
from typing import List, Literal, Optional
from datetime import datetime

from .common import ApiModel, ID_PATTERN
from .user import UserSummary
from .zone import ZoneSummary
from .sensor import SensorSummary

DeviceStatus = Literal["active", "maintenance", "offline"]

class DeviceCreate(ApiModel):
    serial_number: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1)
    status: DeviceStatus = "active"
    installed_at: Optional[datetime] = None
    owner_id: str = Field(..., pattern=ID_PATTERN)
    zone_id: str = Field(..., pattern=ID_PATTERN)
    sensors: List[str] = Field(default_factory=list)

class DeviceUpdate(ApiModel):
    serial_number: Optional[str] = Field(None, min_length=1)
    model: Optional[str] = Field(None, min_length=1)
    status: Optional[DeviceStatus] = None
    installed_at: Optional[datetime] = None
    owner_id: Optional[str] = Field(None, pattern=ID_PATTERN)
    zone_id: Optional[str] = Field(None, pattern=ID_PATTERN)
    sensors: Optional[List[str]] = None

class DeviceResponse(ApiModel):
    id: str
    serial_number: str
    model: str
    status: str
    installed_at: Optional[datetime] = None
    owner: Optional[UserSummary] = None
    zone: Optional[ZoneSummary] = None
    sensors: List[SensorSummary] = []
    created_at: datetime
    updated_at: Optional[datetime] = None
