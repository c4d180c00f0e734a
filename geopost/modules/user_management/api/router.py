from typing import Any, List
import logging
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from geopost.db.session import get_db
from geopost.deps import get_current_user
from geopost.modules.user_management.models.user import User
from geopost.modules.user_management.schemas.user import User as UserSchema
from geopost.modules.user_management.services.user import get_users, get_user_by_username, UserNotFoundError

router = APIRouter()
logger = logging.getLogger("geopost")

@router.get("/me", response_model=UserSchema)
def read_user_me(
    current_user: User = Depends(get_current_user),
) -> Any:
    """Get current user"""
    return current_user

@router.get("", response_model=List[UserSchema])
def read_users(
    db: Session = Depends(get_db),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    current_user: User = Depends(get_current_user),
) -> Any:
    return get_users(db, skip=skip, limit=limit)

@router.get("/{username}", response_model=UserSchema)
def read_user_by_username(
    username: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    """Get a specific user by username"""
    user = get_user_by_username(db, username=username)
    if not user:
        logger.warning(f"User lookup failed for username: {username}")
        raise UserNotFoundError(username)
    return user
