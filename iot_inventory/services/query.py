"""
Reading query builder.

Turns request-level filters (sensor, inclusive date range, limit, order)
into criteria and ordering the Entity Store understands.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from iot_inventory.errors import ValidationFailure
from iot_inventory.models import Reading
from iot_inventory.services.store import ensure_id

ORDERS = ("asc", "desc")

def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)

@dataclass
class ReadingQuery:
    sensor_id: Optional[str] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    limit: int = 100
    offset: int = 0
    order: str = "desc"

    @classmethod
    def for_listing(
        cls,
        max_limit: int,
        sensor_id: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        order: Optional[str] = None,
        default_limit: int = 100,
    ) -> "ReadingQuery":
        query = cls(
            sensor_id=ensure_id(sensor_id, "sensorId") if sensor_id is not None else None,
            start=to_naive_utc(start),
            end=to_naive_utc(end),
            limit=min(limit or default_limit, max_limit),
            offset=offset or 0,
            order=order or "desc",
        )
        query.validate()
        return query

    @classmethod
    def for_sensor(
        cls,
        sensor_id: str,
        max_limit: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: Optional[int] = None,
        order: Optional[str] = None,
        default_limit: int = 50,
    ) -> "ReadingQuery":
        return cls.for_listing(
            max_limit,
            sensor_id=sensor_id,
            start=start,
            end=end,
            limit=limit,
            order=order,
            default_limit=default_limit,
        )

    def validate(self):
        errors = {}
        if self.order not in ORDERS:
            errors["order"] = "order must be 'asc' or 'desc'"
        if self.limit < 1:
            errors["limit"] = "limit must be a positive integer"
        if self.offset < 0:
            errors["offset"] = "offset cannot be negative"
        if self.start and self.end and self.start > self.end:
            errors["startDate"] = "startDate must not be after endDate"
        if errors:
            raise ValidationFailure(errors)

    def criteria(self) -> List:
        clauses = []
        if self.sensor_id is not None:
            clauses.append(Reading.sensor_id == self.sensor_id)
        if self.start is not None:
            clauses.append(Reading.time >= self.start)
        if self.end is not None:
            clauses.append(Reading.time <= self.end)
        return clauses

    def order_by(self) -> List:
        if self.order == "asc":
            return [Reading.time.asc(), Reading.created_at.asc()]
        return [Reading.time.desc(), Reading.created_at.desc()]
