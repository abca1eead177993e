"""
Reading service.

Readings are append-mostly: a reading can be corrected (value, time) but
never moved to another sensor. Listings go through ``ReadingQuery``.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional
import logging

from pydantic import ValidationError
from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from iot_inventory.database import Settings
from iot_inventory.errors import ImmutableField, NotFound, ValidationFailure
from iot_inventory.models import Reading
from iot_inventory.schemas.sensor import ReadingCreate, ReadingResponse, ReadingStats, ReadingUpdate
from iot_inventory.services.guard import IntegrityGuard
from iot_inventory.services.query import ReadingQuery, to_naive_utc
from iot_inventory.services.store import EntityStore, ensure_id

logger = logging.getLogger(__name__)

IMMUTABLE_FIELDS = {"sensorId": "sensorId", "sensor_id": "sensorId"}

EXPAND = (selectinload(Reading.sensor),)

class ReadingService:
    def __init__(
        self,
        readings: EntityStore,
        sensors: EntityStore,
        guard: IntegrityGuard,
        settings: Settings,
    ):
        self.readings = readings
        self.sensors = sensors
        self.guard = guard
        self.settings = settings

    def create(self, db: Session, payload: ReadingCreate) -> ReadingResponse:
        sensor = self.guard.check_reading_sensor(db, payload.sensor_id)
        fields = {"sensor_id": sensor.id, "value": payload.value}
        if payload.time is not None:
            fields["time"] = to_naive_utc(payload.time)
        reading = self.readings.insert(db, fields)
        logger.info(f"Reading created: {reading.id} sensor={sensor.id} value={reading.value}")
        return ReadingResponse.model_validate(reading)

    def get_all(
        self,
        db: Session,
        sensor_id: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        order: Optional[str] = None,
    ) -> List[ReadingResponse]:
        query = ReadingQuery.for_listing(
            self.settings.readings_max_limit,
            sensor_id=sensor_id,
            start=start,
            end=end,
            limit=limit,
            offset=offset,
            order=order,
            default_limit=self.settings.readings_default_limit,
        )
        return self._run(db, query)

    def get_by_sensor_id(
        self,
        db: Session,
        sensor_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: Optional[int] = None,
        order: Optional[str] = None,
    ) -> List[ReadingResponse]:
        self._require_sensor(db, sensor_id)
        query = ReadingQuery.for_sensor(
            sensor_id,
            self.settings.readings_max_limit,
            start=start,
            end=end,
            limit=limit,
            order=order,
            default_limit=self.settings.readings_sensor_default_limit,
        )
        return self._run(db, query)

    def get_stats_by_sensor(
        self,
        db: Session,
        sensor_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> ReadingStats:
        sensor = self._require_sensor(db, sensor_id)
        query = ReadingQuery.for_sensor(
            sensor.id, self.settings.readings_max_limit, start=start, end=end
        )
        count, min_value, max_value, avg_value, first, last = self.readings.aggregate(
            db,
            [
                func.count(Reading.id),
                func.min(Reading.value),
                func.max(Reading.value),
                func.avg(Reading.value),
                func.min(Reading.time),
                func.max(Reading.time),
            ],
            query.criteria(),
        )
        return ReadingStats(
            sensor_id=sensor.id,
            count=count,
            min=min_value,
            max=max_value,
            avg=float(avg_value) if avg_value is not None else None,
            first=first,
            last=last,
        )

    def get_by_id(self, db: Session, reading_id: str) -> ReadingResponse:
        reading = self.readings.find_by_id(db, reading_id, options=EXPAND)
        if reading is None:
            raise NotFound("Reading", reading_id)
        return ReadingResponse.model_validate(reading)

    def update(self, db: Session, reading_id: str, changes: Dict[str, Any]) -> ReadingResponse:
        """Apply a partial update from a raw request body.

        The sensor reference is checked before anything else so that a body
        touching it is refused no matter what else it carries.
        """
        for key, field in IMMUTABLE_FIELDS.items():
            if key in changes:
                logger.warning(f"Reading {reading_id}: attempt to change {field} refused")
                raise ImmutableField(field)
        try:
            payload = ReadingUpdate.model_validate(changes)
        except ValidationError as exc:
            raise ValidationFailure.from_pydantic(exc) from exc

        fields = payload.model_dump(exclude_unset=True)
        if fields.get("time") is not None:
            fields["time"] = to_naive_utc(fields["time"])
        reading = self.readings.update_by_id(db, reading_id, fields)
        if reading is None:
            raise NotFound("Reading", reading_id)
        logger.info(f"Reading updated: {reading.id} fields={sorted(fields)}")
        return ReadingResponse.model_validate(reading)

    def delete(self, db: Session, reading_id: str) -> Dict[str, Any]:
        reading = self.readings.find_by_id(db, reading_id)
        if reading is None:
            raise NotFound("Reading", reading_id)
        summary = {"id": reading.id, "sensorId": reading.sensor_id, "time": reading.time.isoformat()}
        self.readings.delete_by_id(db, reading.id)
        logger.info(f"Reading deleted: {reading.id}")
        return summary

    def _run(self, db: Session, query: ReadingQuery) -> List[ReadingResponse]:
        readings = self.readings.find_many(
            db,
            query.criteria(),
            order_by=query.order_by(),
            limit=query.limit,
            offset=query.offset,
            options=EXPAND,
        )
        return [ReadingResponse.model_validate(r) for r in readings]

    def _require_sensor(self, db: Session, sensor_id: str):
        sensor = self.sensors.find_by_id(db, ensure_id(sensor_id, "sensorId"))
        if sensor is None:
            raise NotFound("Sensor", sensor_id)
        return sensor
