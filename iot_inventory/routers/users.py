from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from iot_inventory.dependencies import get_db, get_services
from iot_inventory.schemas.common import DeleteResponse
from iot_inventory.schemas.user import UserCreate, UserResponse, UserUpdate
from iot_inventory.services import Services

router = APIRouter(prefix="/users", tags=["users"])

@router.get("", response_model=List[UserResponse])
def list_users(db: Session = Depends(get_db), services: Services = Depends(get_services)):
    """Get all users (never includes passwords)"""
    return services.users.get_all(db)

@router.get("/email/{email}", response_model=UserResponse)
def get_user_by_email(email: str, db: Session = Depends(get_db), services: Services = Depends(get_services)):
    """Find a user by email, case-insensitive"""
    return services.users.find_by_email(db, email)

@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: str, db: Session = Depends(get_db), services: Services = Depends(get_services)):
    """Get user by ID"""
    return services.users.get_by_id(db, user_id)

@router.post("", response_model=UserResponse, status_code=201)
def create_user(user: UserCreate, db: Session = Depends(get_db), services: Services = Depends(get_services)):
    """Create new user; the password is hashed before it is stored"""
    return services.users.create(db, user)

@router.patch("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: str,
    changes: UserUpdate,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
):
    """Partially update a user"""
    return services.users.update(db, user_id, changes)

@router.delete("/{user_id}", response_model=DeleteResponse)
def delete_user(user_id: str, db: Session = Depends(get_db), services: Services = Depends(get_services)):
    """Delete a user that owns no devices"""
    deleted = services.users.delete(db, user_id)
    return {"message": "User deleted", "deleted": deleted}
