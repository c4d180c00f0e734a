"""
Group registry: groups, their membership rows, and the single-owner rule.

Every mutation locks the group row first and then checks and writes inside
one transaction, so concurrent transfers and removals on the same group run
one after the other. The owner always holds a membership row.
"""
from typing import Any, Dict, List, Optional
import uuid
import logging
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from geopost.core.config import settings
from geopost.core.errors import BadValuesError, NotAllowedError, NotFoundError
from geopost.modules.groups.models.group import Group, GroupMembership

logger = logging.getLogger(__name__)


class GroupNotFoundError(NotFoundError):
    def __init__(self, group_id: str):
        super().__init__(f"Group {group_id} does not exist!")
        self.group_id = group_id

class GroupMemberNotFoundError(NotFoundError):
    def __init__(self, name: str):
        super().__init__(f"User was not found in group {name}!")
        self.name = name

class NotInGroupError(NotAllowedError):
    def __init__(self, name: str):
        super().__init__(f"User is not in group {name}!")
        self.name = name

class AlreadyInGroupError(NotAllowedError):
    def __init__(self, name: str):
        super().__init__(f"User is already in group {name}!")
        self.name = name

class OwnerCannotLeaveError(NotAllowedError):
    def __init__(self, name: str):
        super().__init__(f"Owner must transfer ownership of {name} before leaving!")
        self.name = name


def _validate_name(name: Optional[str]) -> str:
    name = (name or "").strip()
    if not name:
        raise BadValuesError("Group name must be non-empty!")
    if len(name) > settings.GROUP_NAME_MAX_LENGTH:
        raise BadValuesError(f"Group name must be at most {settings.GROUP_NAME_MAX_LENGTH} characters!")
    return name

def get_group(db: Session, group_id: str) -> Optional[Group]:
    """Get group by ID"""
    return db.query(Group).filter(Group.id == group_id).first()

def _lock_group(db: Session, group_id: str) -> Group:
    """Load the group row FOR UPDATE; the lock lasts until commit or rollback"""
    group = db.query(Group).filter(Group.id == group_id).with_for_update().first()
    if not group:
        raise GroupNotFoundError(group_id)
    return group

def _membership(db: Session, group_id: str, user_id: str) -> Optional[GroupMembership]:
    return db.query(GroupMembership).filter(
        GroupMembership.group_id == group_id,
        GroupMembership.user_id == user_id
    ).first()

def get_member_ids(db: Session, group_id: str) -> List[str]:
    """Member ids in the order they joined"""
    rows = (
        db.query(GroupMembership.user_id)
        .filter(GroupMembership.group_id == group_id)
        .order_by(GroupMembership.joined_at, GroupMembership.user_id)
        .all()
    )
    return [row.user_id for row in rows]

def create_group(db: Session, creator_id: str, name: str) -> Group:
    """Create a group owned by ``creator_id``, who becomes its first member"""
    name = _validate_name(name)
    group = Group(id=str(uuid.uuid4()), name=name, owner_id=creator_id)
    db.add(group)
    db.add(GroupMembership(group_id=group.id, user_id=creator_id))
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(group)
    logger.info(f"Group {name} ({group.id}) created by {creator_id}")
    return group

def get_group_info(db: Session, group_id: str) -> Dict[str, Any]:
    group = get_group(db, group_id)
    if not group:
        raise GroupNotFoundError(group_id)
    return {
        "id": group.id,
        "name": group.name,
        "owner_id": group.owner_id,
        "members": get_member_ids(db, group.id),
    }

def get_groups_of_user(db: Session, user_id: str) -> List[Group]:
    """Groups the user belongs to, owned or not"""
    return (
        db.query(Group)
        .join(GroupMembership, GroupMembership.group_id == Group.id)
        .filter(GroupMembership.user_id == user_id)
        .order_by(Group.created_at, Group.id)
        .all()
    )

def is_member(db: Session, group_id: str, user_id: str) -> Group:
    """Authorization guard: return the group if ``user_id`` belongs to it"""
    group = get_group(db, group_id)
    if not group:
        raise GroupNotFoundError(group_id)
    if not _membership(db, group_id, user_id):
        raise NotInGroupError(group.name)
    return group

def add_member(db: Session, group_id: str, user_id: str) -> Group:
    try:
        group = _lock_group(db, group_id)
        if _membership(db, group_id, user_id):
            raise AlreadyInGroupError(group.name)
        db.add(GroupMembership(group_id=group_id, user_id=user_id))
        db.commit()
    except IntegrityError:
        # Concurrent add of the same user committed first
        db.rollback()
        raise AlreadyInGroupError(group.name)
    except Exception:
        db.rollback()
        raise
    logger.info(f"User {user_id} added to group {group_id}")
    return group

def remove_member(db: Session, group_id: str, user_id: str) -> Group:
    try:
        group = _lock_group(db, group_id)
        if user_id == group.owner_id:
            raise OwnerCannotLeaveError(group.name)
        deleted = db.query(GroupMembership).filter(
            GroupMembership.group_id == group_id,
            GroupMembership.user_id == user_id
        ).delete(synchronize_session=False)
        if not deleted:
            raise GroupMemberNotFoundError(group.name)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info(f"User {user_id} removed from group {group_id}")
    return group

def update_group_name(db: Session, group_id: str, name: str) -> Group:
    """Rename a group; callers check membership with is_member first"""
    name = _validate_name(name)
    try:
        group = _lock_group(db, group_id)
        group.name = name
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(group)
    return group

def transfer_ownership(db: Session, group_id: str, current_owner_id: str, new_owner_id: str) -> Group:
    """Hand the group to another member; the old owner stays on as a member"""
    try:
        group = _lock_group(db, group_id)
        if group.owner_id != current_owner_id:
            raise NotAllowedError(f"Only the owner of {group.name} can transfer it!")
        if new_owner_id == current_owner_id:
            raise NotAllowedError("Cannot transfer ownership to yourself!")
        if not _membership(db, group_id, new_owner_id):
            raise NotInGroupError(group.name)
        group.owner_id = new_owner_id
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(group)
    logger.info(f"Ownership of group {group_id} transferred: {current_owner_id} -> {new_owner_id}")
    return group

def delete_group(db: Session, group_id: str, caller_id: str) -> str:
    """Delete a group and all its membership rows; only its owner may do this"""
    is_member(db, group_id, caller_id)
    try:
        group = _lock_group(db, group_id)
        if group.owner_id != caller_id:
            raise NotAllowedError(f"Only the owner of {group.name} can delete it!")
        name = group.name
        db.query(GroupMembership).filter(
            GroupMembership.group_id == group_id
        ).delete(synchronize_session=False)
        db.delete(group)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info(f"Group {name} ({group_id}) deleted by {caller_id}")
    return name
