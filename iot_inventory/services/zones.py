from typing import Any, Dict, List
import logging

from sqlalchemy.orm import Session

from iot_inventory.errors import NotFound
from iot_inventory.models import Zone
from iot_inventory.schemas.zone import ZoneCreate, ZoneResponse, ZoneUpdate
from iot_inventory.services.guard import IntegrityGuard
from iot_inventory.services.store import EntityStore

logger = logging.getLogger(__name__)

class ZoneService:
    def __init__(self, zones: EntityStore, guard: IntegrityGuard):
        self.zones = zones
        self.guard = guard

    def create(self, db: Session, payload: ZoneCreate) -> ZoneResponse:
        zone = self.zones.insert(db, payload.model_dump())
        logger.info(f"Zone created: {zone.id} ({zone.name})")
        return ZoneResponse.model_validate(zone)

    def get_all(self, db: Session) -> List[ZoneResponse]:
        zones = self.zones.find_many(db, order_by=[Zone.created_at.asc()])
        return [ZoneResponse.model_validate(z) for z in zones]

    def get_active_zones(self, db: Session) -> List[ZoneResponse]:
        zones = self.zones.find_many(db, [Zone.is_active.is_(True)], order_by=[Zone.name.asc()])
        return [ZoneResponse.model_validate(z) for z in zones]

    def get_by_id(self, db: Session, zone_id: str) -> ZoneResponse:
        zone = self.zones.find_by_id(db, zone_id)
        if zone is None:
            raise NotFound("Zone", zone_id)
        return ZoneResponse.model_validate(zone)

    def update(self, db: Session, zone_id: str, payload: ZoneUpdate) -> ZoneResponse:
        fields = payload.model_dump(exclude_unset=True)
        zone = self.zones.update_by_id(db, zone_id, fields)
        if zone is None:
            raise NotFound("Zone", zone_id)
        logger.info(f"Zone updated: {zone.id} fields={sorted(fields)}")
        return ZoneResponse.model_validate(zone)

    def delete(self, db: Session, zone_id: str) -> Dict[str, Any]:
        zone = self.zones.find_by_id(db, zone_id)
        if zone is None:
            raise NotFound("Zone", zone_id)
        self.guard.check_zone_delete(db, zone.id)
        summary = {"id": zone.id, "name": zone.name, "description": zone.description}
        self.zones.delete_by_id(db, zone.id)
        logger.info(f"Zone deleted: {zone.id} ({zone.name})")
        return summary
