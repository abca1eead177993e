from sqlalchemy import Column, String, Boolean, DateTime, Float, ForeignKey, Index
from sqlalchemy.orm import relationship, validates
from iot_inventory.database import Base, new_id, utcnow
from iot_inventory.errors import ValidationFailure

SENSOR_TYPES = ("temperature", "humidity", "co2", "noise")

class Sensor(Base):
    __tablename__ = "sensors"

    id = Column(String(32), primary_key=True, default=new_id)
    type = Column(String, nullable=False)  # "temperature", "humidity", "co2", "noise"
    unit = Column(String, nullable=False)  # "°C", "%", "ppm", "dB"
    model = Column(String, nullable=False)
    location = Column(String, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    readings = relationship("Reading", back_populates="sensor")
    devices = relationship("Device", secondary="device_sensors", back_populates="sensors")

    @validates("type")
    def _validate_type(self, key, value):
        if value not in SENSOR_TYPES:
            raise ValidationFailure({"type": f"'{value}' is not a valid sensor type"})
        return value

    @validates("unit", "model", "location")
    def _validate_required(self, key, value):
        value = (value or "").strip()
        if not value:
            raise ValidationFailure({key: f"{key} is required"})
        return value

class Reading(Base):
    __tablename__ = "readings"
    __table_args__ = (Index("ix_readings_sensor_time", "sensor_id", "time"),)

    id = Column(String(32), primary_key=True, default=new_id)
    sensor_id = Column(String(32), ForeignKey("sensors.id"), nullable=False)
    value = Column(Float, nullable=False)
    time = Column(DateTime, nullable=False, default=utcnow)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    sensor = relationship("Sensor", back_populates="readings")
