from sqlalchemy import Column, String, Boolean, DateTime
from sqlalchemy.orm import relationship, validates
from iot_inventory.database import Base, new_id, utcnow
from iot_inventory.errors import ValidationFailure

class Zone(Base):
    __tablename__ = "zones"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String, unique=True, index=True, nullable=False)  # "Laboratorio A", "Azotea"
    description = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    devices = relationship("Device", back_populates="zone")

    @validates("name")
    def _validate_name(self, key, value):
        value = (value or "").strip()
        if not value:
            raise ValidationFailure({"name": "Name is required"})
        return value

    @validates("description")
    def _validate_description(self, key, value):
        return value.strip() if value is not None else None
