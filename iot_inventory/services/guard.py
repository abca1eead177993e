"""
Referential integrity checks.

Every check runs before the store mutation it protects, so a failed check
never leaves partial state behind. Counting dependents and then deleting is
not atomic: a dependent created between the two steps is not detected.
"""
from typing import Iterable, List, Optional
import logging

from sqlalchemy.orm import Session

from iot_inventory.errors import DependentsExist, ReferenceNotFound, SensorInactive
from iot_inventory.models import Device, Reading, Sensor
from iot_inventory.services.store import EntityStore, ensure_id

logger = logging.getLogger(__name__)

class IntegrityGuard:
    def __init__(
        self,
        users: EntityStore,
        zones: EntityStore,
        devices: EntityStore,
        sensors: EntityStore,
        readings: EntityStore,
    ):
        self.users = users
        self.zones = zones
        self.devices = devices
        self.sensors = sensors
        self.readings = readings

    # ---------- writes ----------

    def check_device_refs(
        self,
        db: Session,
        owner_id: Optional[str] = None,
        zone_id: Optional[str] = None,
        sensor_ids: Optional[Iterable[str]] = None,
    ) -> List[Sensor]:
        """Resolve the references a device write carries.

        Only the references supplied are checked. Returns the resolved
        sensors so the caller can attach them without a second lookup.
        """
        if owner_id is not None:
            owner_id = ensure_id(owner_id, "ownerId")
            if self.users.find_by_id(db, owner_id) is None:
                logger.warning(f"Device write rejected: owner {owner_id} does not exist")
                raise ReferenceNotFound("owner", owner_id)

        if zone_id is not None:
            zone_id = ensure_id(zone_id, "zoneId")
            if self.zones.find_by_id(db, zone_id) is None:
                logger.warning(f"Device write rejected: zone {zone_id} does not exist")
                raise ReferenceNotFound("zone", zone_id)

        resolved: List[Sensor] = []
        for sensor_id in sensor_ids or ():
            sensor_id = ensure_id(sensor_id, "sensors")
            sensor = self.sensors.find_by_id(db, sensor_id)
            if sensor is None:
                logger.warning(f"Device write rejected: sensor {sensor_id} does not exist")
                raise ReferenceNotFound("sensor", sensor_id)
            if sensor not in resolved:
                resolved.append(sensor)
        return resolved

    def check_reading_sensor(self, db: Session, sensor_id: str) -> Sensor:
        sensor_id = ensure_id(sensor_id, "sensorId")
        sensor = self.sensors.find_by_id(db, sensor_id)
        if sensor is None:
            logger.warning(f"Reading rejected: sensor {sensor_id} does not exist")
            raise ReferenceNotFound("sensor", sensor_id)
        if not sensor.is_active:
            logger.warning(f"Reading rejected: sensor {sensor_id} is inactive")
            raise SensorInactive(sensor_id)
        return sensor

    # ---------- deletes ----------

    def check_user_delete(self, db: Session, user_id: str):
        count = self.devices.count(db, [Device.owner_id == user_id])
        self._reject_if_dependents("user", user_id, "devices", count)

    def check_zone_delete(self, db: Session, zone_id: str):
        count = self.devices.count(db, [Device.zone_id == zone_id])
        self._reject_if_dependents("zone", zone_id, "devices", count)

    def check_sensor_delete(self, db: Session, sensor_id: str):
        count = self.readings.count(db, [Reading.sensor_id == sensor_id])
        self._reject_if_dependents("sensor", sensor_id, "readings", count)

    def check_device_delete(self, db: Session, device: Device):
        self._reject_if_dependents("device", device.id, "sensors", len(device.sensors))

    def _reject_if_dependents(self, entity: str, entity_id: str, kind: str, count: int):
        if count > 0:
            logger.warning(f"Delete of {entity} {entity_id} blocked by {count} {kind}")
            raise DependentsExist(kind, count)
