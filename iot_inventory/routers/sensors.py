from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from iot_inventory.dependencies import get_db, get_services
from iot_inventory.schemas.common import DeleteResponse
from iot_inventory.schemas.sensor import SensorCreate, SensorResponse, SensorUpdate
from iot_inventory.services import Services

router = APIRouter(prefix="/sensors", tags=["sensors"])

@router.get("", response_model=List[SensorResponse])
def list_sensors(db: Session = Depends(get_db), services: Services = Depends(get_services)):
    """Get all sensors"""
    return services.sensors.get_all(db)

@router.get("/active", response_model=List[SensorResponse])
def list_active_sensors(db: Session = Depends(get_db), services: Services = Depends(get_services)):
    """Get sensors flagged as active"""
    return services.sensors.get_active_sensors(db)

@router.get("/type/{sensor_type}", response_model=List[SensorResponse])
def list_sensors_by_type(sensor_type: str, db: Session = Depends(get_db), services: Services = Depends(get_services)):
    """Get active sensors of one type (temperature, humidity, co2, noise)"""
    return services.sensors.get_by_type(db, sensor_type)

@router.get("/{sensor_id}", response_model=SensorResponse)
def get_sensor(sensor_id: str, db: Session = Depends(get_db), services: Services = Depends(get_services)):
    """Get sensor by ID"""
    return services.sensors.get_by_id(db, sensor_id)

@router.post("", response_model=SensorResponse, status_code=201)
def create_sensor(sensor: SensorCreate, db: Session = Depends(get_db), services: Services = Depends(get_services)):
    """Create new sensor"""
    return services.sensors.create(db, sensor)

@router.patch("/{sensor_id}", response_model=SensorResponse)
def update_sensor(
    sensor_id: str,
    changes: SensorUpdate,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
):
    """Partially update a sensor, e.g. toggle isActive"""
    return services.sensors.update(db, sensor_id, changes)

@router.delete("/{sensor_id}", response_model=DeleteResponse)
def delete_sensor(sensor_id: str, db: Session = Depends(get_db), services: Services = Depends(get_services)):
    """Delete a sensor that has no readings"""
    deleted = services.sensors.delete(db, sensor_id)
    return {"message": "Sensor deleted", "deleted": deleted}
