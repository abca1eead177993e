"""
Domain errors raised by the store, the integrity guard and the services.

Every error knows its HTTP status so the exception handlers in ``main`` can
translate it without inspecting messages.
"""
from typing import Any, Dict, Optional


class InventoryError(Exception):
    status_code = 500
    message = "Something went wrong"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        self.message = message or self.message

    def details(self) -> Dict[str, Any]:
        return {}

    def to_dict(self) -> Dict[str, Any]:
        payload = {"error": type(self).__name__, "message": self.message}
        payload.update(self.details())
        return payload


class ValidationFailure(InventoryError):
    status_code = 400
    message = "Validation failed"

    def __init__(self, errors: Dict[str, str], message: Optional[str] = None):
        super().__init__(message)
        self.errors = errors

    def details(self) -> Dict[str, Any]:
        return {"errors": self.errors}

    @classmethod
    def from_pydantic(cls, exc) -> "ValidationFailure":
        """Flatten a pydantic ``ValidationError`` into a field -> message map."""
        errors = {}
        for error in exc.errors():
            field = ".".join(str(part) for part in error["loc"]) or "body"
            errors[field] = error["msg"]
        return cls(errors)


class MalformedId(InventoryError):
    status_code = 400

    def __init__(self, value: Any, field: str = "id"):
        super().__init__(f"'{value}' is not a valid identifier")
        self.value = value
        self.field = field

    def details(self) -> Dict[str, Any]:
        return {"field": self.field}


class DuplicateKeyFailure(InventoryError):
    status_code = 409

    def __init__(self, field: str):
        super().__init__(f"A record with this {field} already exists")
        self.field = field

    def details(self) -> Dict[str, Any]:
        return {"field": self.field}


class ReferenceNotFound(InventoryError):
    status_code = 400

    def __init__(self, kind: str, ref_id: str):
        super().__init__(f"Referenced {kind} '{ref_id}' does not exist")
        self.kind = kind
        self.ref_id = ref_id

    def details(self) -> Dict[str, Any]:
        return {"kind": self.kind, "id": self.ref_id}


class SensorInactive(InventoryError):
    status_code = 409

    def __init__(self, sensor_id: str):
        super().__init__(f"Sensor '{sensor_id}' is inactive and cannot record readings")
        self.sensor_id = sensor_id

    def details(self) -> Dict[str, Any]:
        return {"sensorId": self.sensor_id}


class DependentsExist(InventoryError):
    status_code = 409

    def __init__(self, kind: str, count: int):
        super().__init__(f"Cannot delete: {count} dependent {kind} still reference this record")
        self.kind = kind
        self.count = count

    def details(self) -> Dict[str, Any]:
        return {"kind": self.kind, "count": self.count}


class NotFound(InventoryError):
    status_code = 404

    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} not found")
        self.entity = entity
        self.entity_id = entity_id

    def details(self) -> Dict[str, Any]:
        return {"id": self.entity_id}


class ImmutableField(InventoryError):
    status_code = 422

    def __init__(self, field: str):
        super().__init__(f"Field '{field}' cannot be changed after creation")
        self.field = field

    def details(self) -> Dict[str, Any]:
        return {"field": self.field}
