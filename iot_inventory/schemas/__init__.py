from .common import ApiModel, DeleteResponse
from .user import UserCreate, UserUpdate, UserResponse, UserSummary
from .zone import ZoneCreate, ZoneUpdate, ZoneResponse, ZoneSummary
from .device import DeviceCreate, DeviceUpdate, DeviceResponse
from .sensor import (
    SensorCreate, SensorUpdate, SensorResponse, SensorSummary,
    ReadingSensorSummary, ReadingCreate, ReadingUpdate, ReadingResponse, ReadingStats,
)

__all__ = [
    "ApiModel",
    "DeleteResponse",
    "UserCreate",
    "UserUpdate",
    "UserResponse",
    "UserSummary",
    "ZoneCreate",
    "ZoneUpdate",
    "ZoneResponse",
    "ZoneSummary",
    "DeviceCreate",
    "DeviceUpdate",
    "DeviceResponse",
    "SensorCreate",
    "SensorUpdate",
    "SensorResponse",
    "SensorSummary",
    "ReadingSensorSummary",
    "ReadingCreate",
    "ReadingUpdate",
    "ReadingResponse",
    "ReadingStats"
]
