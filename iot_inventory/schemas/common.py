from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from typing import Any, Dict

ID_PATTERN = r"^[0-9a-fA-F]{32}$"

class ApiModel(BaseModel):
    """Base for every request/response body: camelCase on the wire."""

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True

class DeleteResponse(BaseModel):
    message: str
    deleted: Dict[str, Any]
