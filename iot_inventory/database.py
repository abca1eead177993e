from datetime import datetime, timezone
from typing import List
import os
import uuid

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./iot_inventory.db")
    api_prefix: str = os.getenv("API_PREFIX", "/api/v1")
    mount_unprefixed: bool = os.getenv("MOUNT_UNPREFIXED", "true").lower() == "true"
    cors_origins: str = os.getenv("CORS_ORIGINS", "*")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    readings_default_limit: int = int(os.getenv("READINGS_DEFAULT_LIMIT", "100"))
    readings_sensor_default_limit: int = int(os.getenv("READINGS_SENSOR_DEFAULT_LIMIT", "50"))
    readings_max_limit: int = int(os.getenv("READINGS_MAX_LIMIT", "1000"))

    seed_demo_data: bool = os.getenv("SEED_DEMO_DATA", "false").lower() == "true"
    debug: bool = os.getenv("DEBUG", "false").lower() == "true"

    @property
    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

settings = Settings()

def make_engine(database_url: str) -> Engine:
    return create_engine(
        database_url,
        connect_args={"check_same_thread": False} if "sqlite" in database_url else {}
    )

engine = make_engine(settings.database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

def new_id() -> str:
    return uuid.uuid4().hex

def utcnow() -> datetime:
    """Naive UTC timestamp, the form every DateTime column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
