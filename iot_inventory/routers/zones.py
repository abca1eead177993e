from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from iot_inventory.dependencies import get_db, get_services
from iot_inventory.schemas.common import DeleteResponse
from iot_inventory.schemas.zone import ZoneCreate, ZoneResponse, ZoneUpdate
from iot_inventory.services import Services

router = APIRouter(prefix="/zones", tags=["zones"])

@router.get("", response_model=List[ZoneResponse])
def get_zones(db: Session = Depends(get_db), services: Services = Depends(get_services)):
    """Get all zones"""
    return services.zones.get_all(db)

@router.get("/active", response_model=List[ZoneResponse])
def get_active_zones(db: Session = Depends(get_db), services: Services = Depends(get_services)):
    """Get zones flagged as active"""
    return services.zones.get_active_zones(db)

@router.get("/{zone_id}", response_model=ZoneResponse)
def get_zone(zone_id: str, db: Session = Depends(get_db), services: Services = Depends(get_services)):
    """Get zone by ID"""
    return services.zones.get_by_id(db, zone_id)

@router.post("", response_model=ZoneResponse, status_code=201)
def create_zone(zone: ZoneCreate, db: Session = Depends(get_db), services: Services = Depends(get_services)):
    """Create new zone"""
    return services.zones.create(db, zone)

@router.patch("/{zone_id}", response_model=ZoneResponse)
def update_zone(
    zone_id: str,
    changes: ZoneUpdate,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
):
    """Partially update a zone"""
    return services.zones.update(db, zone_id, changes)

@router.delete("/{zone_id}", response_model=DeleteResponse)
def delete_zone(zone_id: str, db: Session = Depends(get_db), services: Services = Depends(get_services)):
    """Delete a zone with no devices assigned"""
    deleted = services.zones.delete(db, zone_id)
    return {"message": "Zone deleted", "deleted": deleted}
