"""
Device service.

Devices are the only entity with outgoing references (owner, zone and
attached sensors). The integrity guard resolves them before any write, and
every read expands them into summaries instead of bare ids.
"""
from typing import Any, Dict, List
import logging

from sqlalchemy.orm import Session, selectinload

from iot_inventory.errors import NotFound, ValidationFailure
from iot_inventory.models import Device, DEVICE_STATUSES
from iot_inventory.schemas.device import DeviceCreate, DeviceResponse, DeviceUpdate
from iot_inventory.services.guard import IntegrityGuard
from iot_inventory.services.query import to_naive_utc
from iot_inventory.services.store import EntityStore, ensure_id

logger = logging.getLogger(__name__)

EXPAND = (
    selectinload(Device.owner),
    selectinload(Device.zone),
    selectinload(Device.sensors),
)

class DeviceService:
    def __init__(self, devices: EntityStore, guard: IntegrityGuard):
        self.devices = devices
        self.guard = guard

    def create(self, db: Session, payload: DeviceCreate) -> DeviceResponse:
        fields = payload.model_dump()
        sensor_ids = fields.pop("sensors")
        fields["sensors"] = self.guard.check_device_refs(
            db, owner_id=fields["owner_id"], zone_id=fields["zone_id"], sensor_ids=sensor_ids
        )
        fields["owner_id"] = fields["owner_id"].lower()
        fields["zone_id"] = fields["zone_id"].lower()
        if fields["installed_at"] is None:
            fields.pop("installed_at")
        else:
            fields["installed_at"] = to_naive_utc(fields["installed_at"])

        device = self.devices.insert(db, fields)
        logger.info(f"Device created: {device.id} ({device.serial_number})")
        return self.get_by_id(db, device.id)

    def get_all(self, db: Session) -> List[DeviceResponse]:
        devices = self.devices.find_many(db, order_by=[Device.created_at.asc()], options=EXPAND)
        return [DeviceResponse.model_validate(d) for d in devices]

    def get_by_id(self, db: Session, device_id: str) -> DeviceResponse:
        return DeviceResponse.model_validate(self._get(db, device_id))

    def get_by_status(self, db: Session, status: str) -> List[DeviceResponse]:
        if status not in DEVICE_STATUSES:
            raise ValidationFailure({"status": f"'{status}' is not a valid status"})
        devices = self.devices.find_many(
            db, [Device.status == status], order_by=[Device.created_at.asc()], options=EXPAND
        )
        return [DeviceResponse.model_validate(d) for d in devices]

    def get_by_zone(self, db: Session, zone_id: str) -> List[DeviceResponse]:
        zone_id = ensure_id(zone_id, "zoneId")
        devices = self.devices.find_many(
            db, [Device.zone_id == zone_id], order_by=[Device.created_at.asc()], options=EXPAND
        )
        return [DeviceResponse.model_validate(d) for d in devices]

    def update(self, db: Session, device_id: str, payload: DeviceUpdate) -> DeviceResponse:
        device = self._get(db, device_id)
        fields = payload.model_dump(exclude_unset=True)

        if "sensors" in fields and fields["sensors"] is None:
            raise ValidationFailure({"sensors": "sensors cannot be null"})
        resolved = self.guard.check_device_refs(
            db,
            owner_id=fields.get("owner_id"),
            zone_id=fields.get("zone_id"),
            sensor_ids=fields.get("sensors"),
        )
        if "sensors" in fields:
            fields["sensors"] = resolved
        for key in ("owner_id", "zone_id"):
            if fields.get(key) is not None:
                fields[key] = fields[key].lower()
        if fields.get("installed_at") is not None:
            fields["installed_at"] = to_naive_utc(fields["installed_at"])

        self.devices.update_by_id(db, device.id, fields)
        logger.info(f"Device updated: {device.id} fields={sorted(fields)}")
        return self.get_by_id(db, device.id)

    def delete(self, db: Session, device_id: str) -> Dict[str, Any]:
        device = self._get(db, device_id)
        self.guard.check_device_delete(db, device)
        summary = {"id": device.id, "serialNumber": device.serial_number, "model": device.model}
        self.devices.delete_by_id(db, device.id)
        logger.info(f"Device deleted: {device.id} ({summary['serialNumber']})")
        return summary

    def _get(self, db: Session, device_id: str) -> Device:
        device = self.devices.find_by_id(db, device_id, options=EXPAND)
        if device is None:
            raise NotFound("Device", device_id)
        return device
