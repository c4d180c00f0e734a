from typing import List, Optional
import uuid
import logging
from operator import attrgetter
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from geopost.core.errors import BadValuesError, NotAllowedError, NotFoundError
from geopost.modules.locations.models.location import Location
from geopost.modules.visibility.services.gate import visible_to_viewer

logger = logging.getLogger(__name__)


class LocationNotFoundError(NotFoundError):
    def __init__(self, kind: str, target_id: str):
        super().__init__(f"No location registered for {kind} {target_id}!")

class LocationAlreadyExistsError(NotAllowedError):
    def __init__(self, kind: str, target_id: str):
        super().__init__(f"Location for {kind} {target_id} already exists!")


def get_location(db: Session, kind: str, target_id: str) -> Optional[Location]:
    return db.query(Location).filter(Location.kind == kind, Location.target_id == target_id).first()

def new_location(kind: str, target_id: str, owner_id: str, latitude: Optional[str], longitude: Optional[str]) -> Location:
    """Validate coordinates and build an unsaved Location row"""
    if not latitude or not longitude:
        raise BadValuesError("Latitude and longitude must be given!")
    return Location(
        id=str(uuid.uuid4()),
        kind=kind,
        target_id=target_id,
        owner_id=owner_id,
        latitude=latitude,
        longitude=longitude,
    )

def register_location(db: Session, kind: str, target_id: str, owner_id: str, latitude: str, longitude: str) -> Location:
    location = new_location(kind, target_id, owner_id, latitude, longitude)
    if get_location(db, kind, target_id):
        raise LocationAlreadyExistsError(kind, target_id)
    db.add(location)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise LocationAlreadyExistsError(kind, target_id)
    db.refresh(location)
    logger.info(f"Registered {kind} {target_id} at ({latitude}, {longitude})")
    return location

@visible_to_viewer(author_of=attrgetter("owner_id"))
def list_locations(db: Session, kind: str, target_id: Optional[str] = None) -> List[Location]:
    """Locations of one kind, most recently updated first"""
    query = db.query(Location).filter(Location.kind == kind)
    if target_id is not None:
        query = query.filter(Location.target_id == target_id)
    return query.order_by(Location.updated_at.desc()).all()

@visible_to_viewer(author_of=attrgetter("owner_id"))
def list_locations_at(db: Session, kind: str, latitude: str, longitude: str) -> List[Location]:
    return (
        db.query(Location)
        .filter(Location.kind == kind, Location.latitude == latitude, Location.longitude == longitude)
        .order_by(Location.updated_at.desc())
        .all()
    )

def update_location(db: Session, kind: str, target_id: str, latitude: Optional[str] = None, longitude: Optional[str] = None) -> Location:
    if not latitude and not longitude:
        raise BadValuesError("Latitude or longitude must be given!")
    location = get_location(db, kind, target_id)
    if not location:
        raise LocationNotFoundError(kind, target_id)
    if latitude:
        location.latitude = latitude
    if longitude:
        location.longitude = longitude
    db.commit()
    db.refresh(location)
    return location

def delete_location(db: Session, kind: str, target_id: str) -> int:
    """Remove a target's location if it has one; the caller commits"""
    return db.query(Location).filter(
        Location.kind == kind,
        Location.target_id == target_id
    ).delete(synchronize_session=False)
