"""
User service: CRUD over users with password hashing.

Every value handed back is a ``UserResponse``, which has no password field,
so a hash can never leak through a listing or a fetch.
"""
from typing import Any, Dict, List
import logging

from sqlalchemy.orm import Session

from iot_inventory.errors import NotFound
from iot_inventory.models import User
from iot_inventory.schemas.user import UserCreate, UserResponse, UserUpdate
from iot_inventory.security import hash_password
from iot_inventory.services.guard import IntegrityGuard
from iot_inventory.services.store import EntityStore

logger = logging.getLogger(__name__)

class UserService:
    def __init__(self, users: EntityStore, guard: IntegrityGuard):
        self.users = users
        self.guard = guard

    def create(self, db: Session, payload: UserCreate) -> UserResponse:
        fields = payload.model_dump()
        fields["password"] = hash_password(fields["password"])
        user = self.users.insert(db, fields)
        logger.info(f"User created: {user.id} ({user.role})")
        return UserResponse.model_validate(user)

    def get_all(self, db: Session) -> List[UserResponse]:
        users = self.users.find_many(db, order_by=[User.created_at.asc()])
        return [UserResponse.model_validate(u) for u in users]

    def get_by_id(self, db: Session, user_id: str) -> UserResponse:
        return UserResponse.model_validate(self._get(db, user_id))

    def find_by_email(self, db: Session, email: str) -> UserResponse:
        user = self.users.find_one(db, [User.email == email.strip().lower()])
        if user is None:
            raise NotFound("User", email)
        return UserResponse.model_validate(user)

    def update(self, db: Session, user_id: str, payload: UserUpdate) -> UserResponse:
        fields = payload.model_dump(exclude_unset=True)
        if fields.get("password") is not None:
            fields["password"] = hash_password(fields["password"])
        user = self.users.update_by_id(db, user_id, fields)
        if user is None:
            raise NotFound("User", user_id)
        logger.info(f"User updated: {user.id} fields={sorted(fields)}")
        return UserResponse.model_validate(user)

    def delete(self, db: Session, user_id: str) -> Dict[str, Any]:
        user = self._get(db, user_id)
        self.guard.check_user_delete(db, user.id)
        summary = {"id": user.id, "email": user.email, "name": user.name}
        self.users.delete_by_id(db, user.id)
        logger.info(f"User deleted: {user.id}")
        return summary

    def _get(self, db: Session, user_id: str) -> User:
        user = self.users.find_by_id(db, user_id)
        if user is None:
            raise NotFound("User", user_id)
        return user
