"""
Generic persistence over one SQLAlchemy model.

Each write commits on its own, so every operation is atomic for a single
row and nothing spans entities. Field validators on the models raise
``ValidationFailure`` while attributes are assigned; unique index
violations come back from the database as ``IntegrityError`` and are
reported as ``DuplicateKeyFailure`` naming the API field.
"""
from typing import Any, Dict, Iterable, List, Optional, Sequence
import logging
import re

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from pydantic.alias_generators import to_camel

from iot_inventory.errors import DuplicateKeyFailure, MalformedId, ValidationFailure

logger = logging.getLogger(__name__)

ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")

def ensure_id(value: Any, field: str = "id") -> str:
    """Return ``value`` as a canonical id or raise ``MalformedId``."""
    if not isinstance(value, str) or not ID_PATTERN.match(value.lower()):
        raise MalformedId(value, field)
    return value.lower()

class EntityStore:
    def __init__(self, model, entity_name: str, unique_fields: Optional[Dict[str, str]] = None):
        self.model = model
        self.entity_name = entity_name
        # column name -> API field name
        self.unique_fields = unique_fields or {}

    def insert(self, db: Session, fields: Dict[str, Any]):
        self._reject_nulls(fields)
        record = self.model(**fields)
        db.add(record)
        self._commit(db)
        db.refresh(record)
        return record

    def find_by_id(self, db: Session, record_id: str, options: Sequence = ()):
        record_id = ensure_id(record_id)
        stmt = select(self.model).where(self.model.id == record_id).options(*options)
        return db.execute(stmt).scalars().first()

    def find_one(self, db: Session, criteria: Iterable = (), options: Sequence = ()):
        stmt = select(self.model).where(*criteria).options(*options)
        return db.execute(stmt).scalars().first()

    def find_many(
        self,
        db: Session,
        criteria: Iterable = (),
        order_by: Sequence = (),
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        options: Sequence = (),
    ) -> List[Any]:
        stmt = select(self.model).where(*criteria).options(*options)
        if order_by:
            stmt = stmt.order_by(*order_by)
        if limit is not None:
            stmt = stmt.limit(limit)
        if offset:
            stmt = stmt.offset(offset)
        return list(db.execute(stmt).scalars().all())

    def count(self, db: Session, criteria: Iterable = ()) -> int:
        stmt = select(func.count()).select_from(self.model).where(*criteria)
        return db.execute(stmt).scalar_one()

    def aggregate(self, db: Session, columns: Sequence, criteria: Iterable = ()):
        stmt = select(*columns).select_from(self.model).where(*criteria)
        return db.execute(stmt).one()

    def update_by_id(self, db: Session, record_id: str, fields: Dict[str, Any]):
        record = self.find_by_id(db, record_id)
        if record is None:
            return None
        if not fields:
            return record
        self._reject_nulls(fields)
        try:
            for key, value in fields.items():
                setattr(record, key, value)
        except ValidationFailure:
            db.rollback()
            raise
        self._commit(db)
        db.refresh(record)
        return record

    def delete_by_id(self, db: Session, record_id: str):
        record = self.find_by_id(db, record_id)
        if record is None:
            return None
        db.delete(record)
        self._commit(db)
        return record

    def _reject_nulls(self, fields: Dict[str, Any]):
        columns = self.model.__table__.columns
        errors = {
            to_camel(key): f"{to_camel(key)} cannot be null"
            for key, value in fields.items()
            if value is None and key in columns and not columns[key].nullable
        }
        if errors:
            raise ValidationFailure(errors)

    def _commit(self, db: Session):
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            message = str(exc.orig)
            if "unique" in message.lower() or "duplicate" in message.lower():
                field = self._duplicate_field(message)
                logger.warning(f"Duplicate {self.entity_name} rejected on {field}")
                raise DuplicateKeyFailure(field) from exc
            logger.warning(f"Integrity error on {self.entity_name}: {message}")
            raise ValidationFailure({"record": "A required field is missing or invalid"}) from exc

    def _duplicate_field(self, message: str) -> str:
        for column, field in self.unique_fields.items():
            if f".{column}" in message or f"({column})" in message or column in message:
                return field
        return next(iter(self.unique_fields.values()), "id")
