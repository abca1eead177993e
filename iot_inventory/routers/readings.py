from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from iot_inventory.dependencies import get_db, get_services
from iot_inventory.schemas.common import DeleteResponse
from iot_inventory.schemas.sensor import ReadingCreate, ReadingResponse, ReadingStats
from iot_inventory.services import Services

router = APIRouter(prefix="/readings", tags=["readings"])

Order = Literal["asc", "desc"]

@router.get("", response_model=List[ReadingResponse])
def list_readings(
    sensor_id: Optional[str] = Query(None, alias="sensorId"),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    limit: Optional[int] = Query(None, ge=1),
    offset: Optional[int] = Query(None, ge=0),
    order: Order = "desc",
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
):
    """List readings, most recent first unless order=asc"""
    return services.readings.get_all(
        db,
        sensor_id=sensor_id,
        start=start_date,
        end=end_date,
        limit=limit,
        offset=offset,
        order=order,
    )

@router.get("/sensor/{sensor_id}", response_model=List[ReadingResponse])
def list_sensor_readings(
    sensor_id: str,
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    limit: Optional[int] = Query(None, ge=1),
    order: Order = "desc",
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
):
    """Readings of one sensor (default limit 50)"""
    return services.readings.get_by_sensor_id(
        db, sensor_id, start=start_date, end=end_date, limit=limit, order=order
    )

@router.get("/sensor/{sensor_id}/stats", response_model=ReadingStats)
def sensor_reading_stats(
    sensor_id: str,
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
):
    """Count, min, max and average of a sensor's readings"""
    return services.readings.get_stats_by_sensor(db, sensor_id, start=start_date, end=end_date)

@router.get("/{reading_id}", response_model=ReadingResponse)
def get_reading(reading_id: str, db: Session = Depends(get_db), services: Services = Depends(get_services)):
    """Get reading by ID"""
    return services.readings.get_by_id(db, reading_id)

@router.post("", response_model=ReadingResponse, status_code=201)
def create_reading(reading: ReadingCreate, db: Session = Depends(get_db), services: Services = Depends(get_services)):
    """Record a reading for an existing, active sensor"""
    return services.readings.create(db, reading)

@router.patch("/{reading_id}", response_model=ReadingResponse)
def update_reading(
    reading_id: str,
    changes: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
):
    """Correct a reading's value or time; sensorId cannot change"""
    return services.readings.update(db, reading_id, changes)

@router.delete("/{reading_id}", response_model=DeleteResponse)
def delete_reading(reading_id: str, db: Session = Depends(get_db), services: Services = Depends(get_services)):
    """Delete a reading"""
    deleted = services.readings.delete(db, reading_id)
    return {"message": "Reading deleted", "deleted": deleted}
