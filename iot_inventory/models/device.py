from sqlalchemy import Column, String, DateTime, ForeignKey, Table
from sqlalchemy.orm import relationship, validates
from iot_inventory.database import Base, new_id, utcnow
from iot_inventory.errors import ValidationFailure

DEVICE_STATUSES = ("active", "maintenance", "offline")

device_sensors = Table(
    "device_sensors",
    Base.metadata,
    Column("device_id", String(32), ForeignKey("devices.id"), primary_key=True),
    Column("sensor_id", String(32), ForeignKey("sensors.id"), primary_key=True),
)

class Device(Base):
    __tablename__ = "devices"

    id = Column(String(32), primary_key=True, default=new_id)
    serial_number = Column(String, unique=True, index=True, nullable=False)
    model = Column(String, nullable=False)
    status = Column(String, nullable=False, default="active")  # "active", "maintenance", "offline"
    installed_at = Column(DateTime, default=utcnow)
    owner_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    zone_id = Column(String(32), ForeignKey("zones.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    owner = relationship("User", back_populates="devices")
    zone = relationship("Zone", back_populates="devices")
    sensors = relationship("Sensor", secondary=device_sensors, back_populates="devices")

    @validates("serial_number", "model")
    def _validate_required(self, key, value):
        value = (value or "").strip()
        if not value:
            field = "serialNumber" if key == "serial_number" else key
            raise ValidationFailure({field: f"{field} is required"})
        return value

    @validates("status")
    def _validate_status(self, key, value):
        if value not in DEVICE_STATUSES:
            raise ValidationFailure({"status": f"'{value}' is not a valid status"})
        return value
