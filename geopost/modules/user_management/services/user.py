"""
Identity directory: resolves between opaque user ids and usernames.

The rest of the service only ever stores user ids; usernames appear at the
HTTP edge and are translated here.
"""
from typing import Dict, Iterable, List, Optional
import uuid
import logging
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from geopost.core.errors import BadValuesError, NotAllowedError, NotFoundError
from geopost.modules.user_management.models.user import User

logger = logging.getLogger(__name__)


class UserNotFoundError(NotFoundError):
    def __init__(self, who: str):
        super().__init__(f"User {who} does not exist!")
        self.who = who


def get_user(db: Session, user_id: str) -> Optional[User]:
    """Get user by ID"""
    return db.query(User).filter(User.id == user_id).first()

def get_user_by_username(db: Session, username: str) -> Optional[User]:
    """Get user by username"""
    return db.query(User).filter(User.username == username).first()

def get_users(db: Session, skip: int = 0, limit: int = 100) -> List[User]:
    """Get list of users"""
    return db.query(User).order_by(User.username).offset(skip).limit(limit).all()

def resolve_username(db: Session, username: str) -> str:
    """Return the id of ``username`` or raise UserNotFoundError"""
    user = get_user_by_username(db, username)
    if not user:
        raise UserNotFoundError(username)
    return user.id

def username_of(db: Session, user_id: str) -> str:
    user = get_user(db, user_id)
    if not user:
        raise UserNotFoundError(user_id)
    return user.username

def ids_to_usernames(db: Session, user_ids: Iterable[str]) -> List[str]:
    """Map ids to usernames, keeping the input order"""
    user_ids = list(user_ids)
    if not user_ids:
        return []
    rows = db.query(User.id, User.username).filter(User.id.in_(set(user_ids))).all()
    names: Dict[str, str] = {row.id: row.username for row in rows}
    missing = [user_id for user_id in user_ids if user_id not in names]
    if missing:
        raise UserNotFoundError(missing[0])
    return [names[user_id] for user_id in user_ids]

def create_user(db: Session, username: str, display_name: Optional[str] = None) -> User:
    """Register a username in the directory"""
    username = (username or "").strip()
    if not username:
        raise BadValuesError("Username must be non-empty!")
    if get_user_by_username(db, username):
        raise NotAllowedError(f"Username {username} already in use!")

    user = User(id=str(uuid.uuid4()), username=username, display_name=display_name)
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise NotAllowedError(f"Username {username} already in use!")
    db.refresh(user)
    logger.info(f"Registered user {username} ({user.id})")
    return user
