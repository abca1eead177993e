import re

from sqlalchemy import Column, String, Boolean, DateTime
from sqlalchemy.orm import relationship, validates
from iot_inventory.database import Base, new_id, utcnow
from iot_inventory.errors import ValidationFailure

USER_ROLES = ("admin", "technician", "viewer")
EMAIL_PATTERN = re.compile(r"^\S+@\S+\.\S+$")

class User(Base):
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String(100), nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)  # always lowercase
    password = Column(String, nullable=False)  # passlib hash, never plaintext
    role = Column(String, nullable=False, default="viewer")
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    devices = relationship("Device", back_populates="owner")

    @validates("name")
    def _validate_name(self, key, value):
        value = (value or "").strip()
        if not 2 <= len(value) <= 100:
            raise ValidationFailure({"name": "Name must be between 2 and 100 characters"})
        return value

    @validates("email")
    def _validate_email(self, key, value):
        value = (value or "").strip().lower()
        if not EMAIL_PATTERN.match(value):
            raise ValidationFailure({"email": "Please provide a valid email"})
        return value

    @validates("role")
    def _validate_role(self, key, value):
        if value not in USER_ROLES:
            raise ValidationFailure({"role": f"'{value}' is not a valid role"})
        return value
