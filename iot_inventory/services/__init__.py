"""
Service wiring.

``build_services`` is called once when the app is created; route handlers
receive the result through ``dependencies.get_services``.
"""
from dataclasses import dataclass

from iot_inventory.database import Settings
from iot_inventory.models import Device, Reading, Sensor, User, Zone
from .store import EntityStore, ensure_id
from .guard import IntegrityGuard
from .query import ReadingQuery
from .users import UserService
from .zones import ZoneService
from .devices import DeviceService
from .sensors import SensorService
from .readings import ReadingService

@dataclass
class Services:
    users: UserService
    zones: ZoneService
    devices: DeviceService
    sensors: SensorService
    readings: ReadingService

def build_services(settings: Settings) -> Services:
    users = EntityStore(User, "user", unique_fields={"email": "email"})
    zones = EntityStore(Zone, "zone", unique_fields={"name": "name"})
    devices = EntityStore(Device, "device", unique_fields={"serial_number": "serialNumber"})
    sensors = EntityStore(Sensor, "sensor")
    readings = EntityStore(Reading, "reading")

    guard = IntegrityGuard(users, zones, devices, sensors, readings)

    return Services(
        users=UserService(users, guard),
        zones=ZoneService(zones, guard),
        devices=DeviceService(devices, guard),
        sensors=SensorService(sensors, guard),
        readings=ReadingService(readings, sensors, guard, settings),
    )

__all__ = [
    "Services",
    "build_services",
    "EntityStore",
    "IntegrityGuard",
    "ReadingQuery",
    "ensure_id",
    "UserService",
    "ZoneService",
    "DeviceService",
    "SensorService",
    "ReadingService"
]
