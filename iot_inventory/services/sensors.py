from typing import Any, Dict, List
import logging

from sqlalchemy.orm import Session

from iot_inventory.errors import NotFound, ValidationFailure
from iot_inventory.models import Sensor, SENSOR_TYPES
from iot_inventory.schemas.sensor import SensorCreate, SensorResponse, SensorUpdate
from iot_inventory.services.guard import IntegrityGuard
from iot_inventory.services.store import EntityStore

logger = logging.getLogger(__name__)

class SensorService:
    def __init__(self, sensors: EntityStore, guard: IntegrityGuard):
        self.sensors = sensors
        self.guard = guard

    def create(self, db: Session, payload: SensorCreate) -> SensorResponse:
        sensor = self.sensors.insert(db, payload.model_dump())
        logger.info(f"Sensor created: {sensor.id} ({sensor.type})")
        return SensorResponse.model_validate(sensor)

    def get_all(self, db: Session) -> List[SensorResponse]:
        sensors = self.sensors.find_many(db, order_by=[Sensor.created_at.asc()])
        return [SensorResponse.model_validate(s) for s in sensors]

    def get_by_id(self, db: Session, sensor_id: str) -> SensorResponse:
        sensor = self.sensors.find_by_id(db, sensor_id)
        if sensor is None:
            raise NotFound("Sensor", sensor_id)
        return SensorResponse.model_validate(sensor)

    def get_by_type(self, db: Session, sensor_type: str) -> List[SensorResponse]:
        """Active sensors of one type."""
        if sensor_type not in SENSOR_TYPES:
            raise ValidationFailure({"type": f"'{sensor_type}' is not a valid sensor type"})
        sensors = self.sensors.find_many(
            db,
            [Sensor.type == sensor_type, Sensor.is_active.is_(True)],
            order_by=[Sensor.created_at.asc()],
        )
        return [SensorResponse.model_validate(s) for s in sensors]

    def get_active_sensors(self, db: Session) -> List[SensorResponse]:
        sensors = self.sensors.find_many(
            db, [Sensor.is_active.is_(True)], order_by=[Sensor.created_at.asc()]
        )
        return [SensorResponse.model_validate(s) for s in sensors]

    def update(self, db: Session, sensor_id: str, payload: SensorUpdate) -> SensorResponse:
        fields = payload.model_dump(exclude_unset=True)
        sensor = self.sensors.update_by_id(db, sensor_id, fields)
        if sensor is None:
            raise NotFound("Sensor", sensor_id)
        logger.info(f"Sensor updated: {sensor.id} fields={sorted(fields)}")
        return SensorResponse.model_validate(sensor)

    def delete(self, db: Session, sensor_id: str) -> Dict[str, Any]:
        sensor = self.sensors.find_by_id(db, sensor_id)
        if sensor is None:
            raise NotFound("Sensor", sensor_id)
        self.guard.check_sensor_delete(db, sensor.id)
        summary = {"id": sensor.id, "type": sensor.type, "model": sensor.model}
        # detaches it from any device through the association table
        self.sensors.delete_by_id(db, sensor.id)
        logger.info(f"Sensor deleted: {sensor.id}")
        return summary
