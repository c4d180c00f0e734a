from typing import Any, List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from geopost.db.session import get_db
from geopost.deps import get_current_user
from geopost.modules.user_management.models.user import User
from geopost.modules.user_management.services.user import resolve_username
from geopost.modules.posts.services.post import is_author, get_visible_post
from geopost.modules.locations.models.location import USER_LOCATION, POST_LOCATION
from geopost.modules.locations.schemas.location import Location as LocationSchema, LocationCreate, LocationUpdate
from geopost.modules.locations.services.location import (
    register_location, list_locations, list_locations_at, update_location
)

router = APIRouter()

# User locations
@router.get("/users", response_model=List[LocationSchema])
def read_user_locations(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    return list_locations(db, USER_LOCATION, viewer_id=current_user.id)

@router.post("/users", response_model=LocationSchema, status_code=status.HTTP_201_CREATED)
def register_my_location(
    *,
    db: Session = Depends(get_db),
    location_in: LocationCreate,
    current_user: User = Depends(get_current_user),
) -> Any:
    return register_location(
        db, USER_LOCATION, current_user.id, current_user.id, location_in.latitude, location_in.longitude
    )

@router.patch("/users", response_model=LocationSchema)
def update_my_location(
    *,
    db: Session = Depends(get_db),
    update: LocationUpdate,
    current_user: User = Depends(get_current_user),
) -> Any:
    return update_location(db, USER_LOCATION, current_user.id, update.latitude, update.longitude)

@router.get("/users/filter/{latitude}/{longitude}", response_model=List[LocationSchema])
def read_users_at(
    latitude: str,
    longitude: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    return list_locations_at(db, USER_LOCATION, latitude, longitude, viewer_id=current_user.id)

@router.get("/users/{username}", response_model=List[LocationSchema])
def read_user_location(
    username: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    user_id = resolve_username(db, username)
    return list_locations(db, USER_LOCATION, target_id=user_id, viewer_id=current_user.id)

# Post locations
@router.get("/posts", response_model=List[LocationSchema])
def read_post_locations(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    return list_locations(db, POST_LOCATION, viewer_id=current_user.id)

@router.get("/posts/filter/{latitude}/{longitude}", response_model=List[LocationSchema])
def read_posts_at(
    latitude: str,
    longitude: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    return list_locations_at(db, POST_LOCATION, latitude, longitude, viewer_id=current_user.id)

@router.get("/posts/{post_id}", response_model=List[LocationSchema])
def read_post_location(
    post_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    get_visible_post(db, current_user.id, post_id)
    return list_locations(db, POST_LOCATION, target_id=post_id, viewer_id=current_user.id)

@router.patch("/posts/{post_id}", response_model=LocationSchema)
def update_post_location(
    *,
    db: Session = Depends(get_db),
    post_id: str,
    update: LocationUpdate,
    current_user: User = Depends(get_current_user),
) -> Any:
    is_author(db, current_user.id, post_id)
    return update_location(db, POST_LOCATION, post_id, update.latitude, update.longitude)
