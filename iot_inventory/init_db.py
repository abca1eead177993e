"""
Database initialization script
Creates the tables and, when the inventory is empty, a small demo data set
"""
from datetime import timedelta
import logging

from iot_inventory.database import SessionLocal, engine, settings, utcnow
from iot_inventory.models import Base, User
from iot_inventory.schemas import DeviceCreate, ReadingCreate, SensorCreate, UserCreate, ZoneCreate

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"

def seed_database(session_factory, services):
    """Populate an empty inventory through the services so every guard applies"""
    db = session_factory()
    try:
        if db.query(User).count() > 0:
            logger.info("Database already initialized")
            return False

        admin = services.users.create(db, UserCreate(
            name="Admin User", email="admin@smartcity.com", password=DEMO_PASSWORD, role="admin"
        ))
        technician = services.users.create(db, UserCreate(
            name="John Technician", email="tech@smartcity.com", password=DEMO_PASSWORD, role="technician"
        ))
        services.users.create(db, UserCreate(
            name="Jane Viewer", email="viewer@smartcity.com", password=DEMO_PASSWORD, role="viewer"
        ))

        lab = services.zones.create(db, ZoneCreate(
            name="Laboratorio Principal", description="Main lab, ground floor"
        ))
        rooftop = services.zones.create(db, ZoneCreate(
            name="Azotea", description="Rooftop weather station"
        ))

        temperature = services.sensors.create(db, SensorCreate(
            type="temperature", unit="°C", model="DHT22", location="Lab bench 1"
        ))
        humidity = services.sensors.create(db, SensorCreate(
            type="humidity", unit="%", model="DHT22", location="Lab bench 1"
        ))
        co2 = services.sensors.create(db, SensorCreate(
            type="co2", unit="ppm", model="MH-Z19", location="Rooftop mast"
        ))
        services.sensors.create(db, SensorCreate(
            type="noise", unit="dB", model="KY-037", location="Rooftop mast", is_active=False
        ))

        services.devices.create(db, DeviceCreate(
            serial_number="SN-LAB-0001",
            model="ESP32-DevKitC",
            owner_id=admin.id,
            zone_id=lab.id,
            sensors=[temperature.id, humidity.id],
        ))
        services.devices.create(db, DeviceCreate(
            serial_number="SN-ROOF-0001",
            model="Raspberry Pi 4",
            status="maintenance",
            owner_id=technician.id,
            zone_id=rooftop.id,
            sensors=[co2.id],
        ))

        now = utcnow()
        for minutes_ago, temp, hum, ppm in [(30, 21.4, 45.0, 410.0), (20, 21.9, 44.2, 415.5), (10, 22.3, 43.8, 421.0)]:
            at = now - timedelta(minutes=minutes_ago)
            services.readings.create(db, ReadingCreate(sensor_id=temperature.id, value=temp, time=at))
            services.readings.create(db, ReadingCreate(sensor_id=humidity.id, value=hum, time=at))
            services.readings.create(db, ReadingCreate(sensor_id=co2.id, value=ppm, time=at))

        logger.info("Database initialized successfully!")
        logger.info(f"Created zones: {lab.name}, {rooftop.name}")
        return True
    except Exception:
        db.rollback()
        logger.exception("Error initializing database")
        raise
    finally:
        db.close()

if __name__ == "__main__":
    from iot_inventory.services import build_services

    logging.basicConfig(level=settings.log_level.upper())
    Base.metadata.create_all(bind=engine)
    seed_database(SessionLocal, build_services(settings))
