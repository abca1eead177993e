import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from starlette.exceptions import HTTPException as StarletteHTTPException

from iot_inventory import __version__
from iot_inventory.database import engine as default_engine, settings
from iot_inventory.errors import InventoryError, ValidationFailure
from iot_inventory.init_db import seed_database
from iot_inventory.models import Base
from iot_inventory.routers import health_router, resource_routers
from iot_inventory.services import build_services

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("iot_inventory")
request_logger = logging.getLogger("iot_inventory.requests")

COLLECTIONS = ("users", "zones", "devices", "sensors", "readings")


def create_app(engine: Optional[Engine] = None) -> FastAPI:
    engine = engine or default_engine
    session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    # Startup: tables + optional demo data (both idempotent)
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        Base.metadata.create_all(bind=engine)
        if settings.seed_demo_data:
            seed_database(session_factory, app.state.services)
        logger.info(f"IoT Inventory API ready (prefix={settings.api_prefix or '/'})")
        yield
        engine.dispose()
        logger.info("IoT Inventory API shutdown complete")

    app = FastAPI(
        title="IoT Inventory API",
        description="Inventory of users, zones, devices, sensors and their readings",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.session_factory = session_factory
    app.state.services = build_services(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=False,
        allow_methods=["GET", "POST", "PATCH", "DELETE"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        request_logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f} ms)"
        )
        return response

    @app.exception_handler(InventoryError)
    async def inventory_error_handler(request: Request, exc: InventoryError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        error = HTTPStatus(exc.status_code).phrase
        if exc.status_code == 404:
            content = {
                "error": error,
                "message": f"Cannot {request.method} {request.url.path}",
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }
        else:
            content = {"error": error, "message": str(exc.detail)}
        return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = {}
        for error in exc.errors():
            # drop the "body"/"query"/"path" prefix
            loc = [str(part) for part in error["loc"][1:]] or [str(error["loc"][0])]
            errors[".".join(loc)] = error["msg"]
        return JSONResponse(
            status_code=400,
            content={"error": "ValidationFailure", "message": "Validation failed", "errors": errors},
        )

    @app.exception_handler(ValidationError)
    async def pydantic_validation_handler(request: Request, exc: ValidationError):
        failure = ValidationFailure.from_pydantic(exc)
        return JSONResponse(status_code=failure.status_code, content=failure.to_dict())

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=500,
            content={"error": "Internal Server Error", "message": "Something went wrong"},
        )

    # Mount routers
    app.include_router(health_router)                                   # /health
    for router in resource_routers:
        app.include_router(router, prefix=settings.api_prefix)          # /api/v1/<collection>
        if settings.mount_unprefixed and settings.api_prefix:
            app.include_router(router, include_in_schema=False)         # /<collection>

    @app.get("/")
    async def root():
        prefix = settings.api_prefix
        return {
            "name": "IoT Inventory API",
            "version": __version__,
            "endpoints": {name: f"{prefix}/{name}" for name in COLLECTIONS},
            "documentation": "/docs",
        }

    return app


app = create_app()
