from pydantic import Field
from datetime import datetime
from typing import Literal, Optional

from .common import ApiModel, ID_PATTERN

SensorType = Literal["temperature", "humidity", "co2", "noise"]

class SensorBase(ApiModel):
    type: SensorType
    unit: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    is_active: bool = True

class SensorCreate(SensorBase):
    pass

class SensorUpdate(ApiModel):
    type: Optional[SensorType] = None
    unit: Optional[str] = Field(None, min_length=1)
    model: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = Field(None, min_length=1)
    is_active: Optional[bool] = None

class SensorResponse(SensorBase):
    id: str
    created_at: datetime
    updated_at: Optional[datetime] = None

class SensorSummary(ApiModel):
    id: str
    type: str
    model: str

class ReadingSensorSummary(SensorSummary):
    unit: str

class ReadingCreate(ApiModel):
    sensor_id: str = Field(..., pattern=ID_PATTERN)
    value: float = Field(..., allow_inf_nan=False)
    time: Optional[datetime] = None

class ReadingUpdate(ApiModel):
    value: Optional[float] = Field(None, allow_inf_nan=False)
    time: Optional[datetime] = None

class ReadingResponse(ApiModel):
    id: str
    sensor_id: str
    sensor: Optional[ReadingSensorSummary] = None
    value: float
    time: datetime
    created_at: datetime
    updated_at: Optional[datetime] = None

class ReadingStats(ApiModel):
    sensor_id: str
    count: int
    min: Optional[float] = None
    max: Optional[float] = None
    avg: Optional[float] = None
    first: Optional[datetime] = None
    last: Optional[datetime] = None
