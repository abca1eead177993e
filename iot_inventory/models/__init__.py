from iot_inventory.database import Base
from .user import User, USER_ROLES
from .zone import Zone
from .device import Device, device_sensors, DEVICE_STATUSES
from .sensor import Sensor, Reading, SENSOR_TYPES

__all__ = [
    "Base",
    "User",
    "Zone",
    "Device",
    "device_sensors",
    "Sensor",
    "Reading",
    "USER_ROLES",
    "DEVICE_STATUSES",
    "SENSOR_TYPES"
]
