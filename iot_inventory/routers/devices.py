from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from iot_inventory.dependencies import get_db, get_services
from iot_inventory.schemas.common import DeleteResponse
from iot_inventory.schemas.device import DeviceCreate, DeviceResponse, DeviceUpdate
from iot_inventory.services import Services

router = APIRouter(prefix="/devices", tags=["devices"])

@router.get("", response_model=List[DeviceResponse])
def list_devices(db: Session = Depends(get_db), services: Services = Depends(get_services)):
    """Get all devices with owner, zone and sensors expanded"""
    return services.devices.get_all(db)

@router.get("/status/{status}", response_model=List[DeviceResponse])
def list_devices_by_status(status: str, db: Session = Depends(get_db), services: Services = Depends(get_services)):
    """Get devices in one status (active, maintenance, offline)"""
    return services.devices.get_by_status(db, status)

@router.get("/zone/{zone_id}", response_model=List[DeviceResponse])
def list_devices_by_zone(zone_id: str, db: Session = Depends(get_db), services: Services = Depends(get_services)):
    """Get devices installed in a zone"""
    return services.devices.get_by_zone(db, zone_id)

@router.get("/{device_id}", response_model=DeviceResponse)
def get_device(device_id: str, db: Session = Depends(get_db), services: Services = Depends(get_services)):
    """Get device by ID"""
    return services.devices.get_by_id(db, device_id)

@router.post("", response_model=DeviceResponse, status_code=201)
def create_device(device: DeviceCreate, db: Session = Depends(get_db), services: Services = Depends(get_services)):
    """Register a device; owner, zone and sensors must exist"""
    return services.devices.create(db, device)

@router.patch("/{device_id}", response_model=DeviceResponse)
def update_device(
    device_id: str,
    changes: DeviceUpdate,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
):
    """Partially update a device"""
    return services.devices.update(db, device_id, changes)

@router.delete("/{device_id}", response_model=DeleteResponse)
def delete_device(device_id: str, db: Session = Depends(get_db), services: Services = Depends(get_services)):
    """Delete a device that has no sensors attached"""
    deleted = services.devices.delete(db, device_id)
    return {"message": "Device deleted", "deleted": deleted}
