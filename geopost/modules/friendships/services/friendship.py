from typing import List, Optional, Set
import uuid
import logging
from sqlalchemy.orm import Session
from sqlalchemy import and_, or_
from sqlalchemy.exc import IntegrityError

from geopost.core.errors import BadValuesError, NotAllowedError, NotFoundError
from geopost.modules.friendships.models.friendship import Friendship, FriendshipRequest, ordered_pair
from geopost.modules.user_management.models.user import User

logger = logging.getLogger(__name__)


class FriendRequestNotFoundError(NotFoundError):
    def __init__(self, sender_id: str, receiver_id: str):
        super().__init__(f"Friend request from {sender_id} to {receiver_id} does not exist!")
        self.sender_id = sender_id
        self.receiver_id = receiver_id

class FriendNotFoundError(NotFoundError):
    def __init__(self, user_id: str, friend_id: str):
        super().__init__(f"User {user_id} and {friend_id} are not friends!")

class AlreadyFriendsError(NotAllowedError):
    def __init__(self, user_id: str, other_id: str):
        super().__init__(f"User {user_id} and {other_id} are already friends!")

class FriendRequestAlreadyExistsError(NotAllowedError):
    def __init__(self, sender_id: str, receiver_id: str):
        super().__init__(f"Friend request between {sender_id} and {receiver_id} already exists!")


# Request operations
def _pair_filter(user_id: str, other_id: str):
    low, high = ordered_pair(user_id, other_id)
    return and_(FriendshipRequest.pair_low == low, FriendshipRequest.pair_high == high)

def get_friend_request(db: Session, sender_id: str, receiver_id: str) -> Optional[FriendshipRequest]:
    """Get pending request by sender and receiver IDs"""
    return db.query(FriendshipRequest).filter(
        FriendshipRequest.sender_id == sender_id,
        FriendshipRequest.receiver_id == receiver_id
    ).first()

def get_pending_between(db: Session, user_id: str, other_id: str) -> Optional[FriendshipRequest]:
    """Get the pending request between two users in either direction"""
    return db.query(FriendshipRequest).filter(_pair_filter(user_id, other_id)).first()

def get_received_requests(db: Session, user_id: str) -> List[FriendshipRequest]:
    """Pending requests addressed to a user, oldest first"""
    return (
        db.query(FriendshipRequest)
        .filter(FriendshipRequest.receiver_id == user_id)
        .order_by(FriendshipRequest.created_at)
        .all()
    )

def get_sent_requests(db: Session, user_id: str) -> List[FriendshipRequest]:
    """Pending requests sent by a user, oldest first"""
    return (
        db.query(FriendshipRequest)
        .filter(FriendshipRequest.sender_id == user_id)
        .order_by(FriendshipRequest.created_at)
        .all()
    )

def send_request(db: Session, sender_id: str, receiver_id: str) -> FriendshipRequest:
    """Create a pending request from sender to receiver"""
    if sender_id == receiver_id:
        raise BadValuesError("Cannot send friend request to yourself!")
    if are_friends(db, sender_id, receiver_id):
        raise AlreadyFriendsError(sender_id, receiver_id)

    existing_request = get_pending_between(db, sender_id, receiver_id)
    if existing_request:
        if existing_request.sender_id == sender_id:
            raise NotAllowedError("Friend request already sent!")
        raise NotAllowedError("This user has already sent you a friend request!")

    low, high = ordered_pair(sender_id, receiver_id)
    friend_request = FriendshipRequest(
        id=str(uuid.uuid4()),
        sender_id=sender_id,
        receiver_id=receiver_id,
        pair_low=low,
        pair_high=high,
    )
    db.add(friend_request)
    try:
        db.commit()
    except IntegrityError:
        # Lost the race against a concurrent request for the same pair
        db.rollback()
        raise FriendRequestAlreadyExistsError(sender_id, receiver_id)
    db.refresh(friend_request)
    logger.info(f"Friend request sent: {sender_id} -> {receiver_id}")
    return friend_request

def _pop_request(db: Session, sender_id: str, receiver_id: str) -> None:
    """Delete the pending (sender, receiver) row or raise; does not commit"""
    deleted = db.query(FriendshipRequest).filter(
        FriendshipRequest.sender_id == sender_id,
        FriendshipRequest.receiver_id == receiver_id
    ).delete(synchronize_session=False)
    if not deleted:
        raise FriendRequestNotFoundError(sender_id, receiver_id)

def remove_request(db: Session, sender_id: str, receiver_id: str) -> None:
    """Cancel a pending request; the caller is always the sender"""
    try:
        _pop_request(db, sender_id, receiver_id)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info(f"Friend request cancelled: {sender_id} -> {receiver_id}")

def reject_request(db: Session, sender_id: str, receiver_id: str) -> None:
    """Reject a pending request; the caller is always the receiver"""
    try:
        _pop_request(db, sender_id, receiver_id)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info(f"Friend request rejected: {sender_id} -> {receiver_id}")

def accept_request(db: Session, sender_id: str, receiver_id: str) -> Friendship:
    """Resolve a pending request into a friendship in one transaction"""
    low, high = ordered_pair(sender_id, receiver_id)
    friendship = Friendship(user_low=low, user_high=high)
    try:
        _pop_request(db, sender_id, receiver_id)
        db.add(friendship)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise AlreadyFriendsError(sender_id, receiver_id)
    except Exception:
        db.rollback()
        raise
    db.refresh(friendship)
    logger.info(f"Friend request accepted: {sender_id} <-> {receiver_id}")
    return friendship

# Friendship operations
def get_friendship(db: Session, user_id: str, friend_id: str) -> Optional[Friendship]:
    """Get the friendship between two users, whichever way round they are given"""
    low, high = ordered_pair(user_id, friend_id)
    return db.query(Friendship).filter(
        Friendship.user_low == low,
        Friendship.user_high == high
    ).first()

def are_friends(db: Session, user_id: str, friend_id: str) -> bool:
    """Check if two users are friends"""
    if user_id == friend_id:
        return False
    return get_friendship(db, user_id, friend_id) is not None

def remove_friend(db: Session, user_id: str, friend_id: str) -> None:
    """Remove the friendship between two users"""
    low, high = ordered_pair(user_id, friend_id)
    try:
        deleted = db.query(Friendship).filter(
            Friendship.user_low == low,
            Friendship.user_high == high
        ).delete(synchronize_session=False)
        if not deleted:
            raise FriendNotFoundError(user_id, friend_id)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info(f"Friendship removed: {user_id} <-> {friend_id}")

def get_friend_ids(db: Session, user_id: str) -> Set[str]:
    """Ids of all of a user's friends"""
    rows = db.query(Friendship).filter(
        or_(
            Friendship.user_low == user_id,
            Friendship.user_high == user_id
        )
    ).all()
    return {row.other(user_id) for row in rows}

def get_friends(db: Session, user_id: str) -> List[User]:
    """Get a user's friends (as User objects), ordered by username"""
    friend_ids = get_friend_ids(db, user_id)
    if not friend_ids:
        return []
    return db.query(User).filter(User.id.in_(friend_ids)).order_by(User.username).all()

def get_friendship_status(db: Session, user_id: str, other_id: str) -> dict:
    """Describe how ``other_id`` relates to ``user_id``"""
    if user_id == other_id:
        return {"status": "self", "request_id": None}
    if are_friends(db, user_id, other_id):
        return {"status": "friends", "request_id": None}

    pending = get_pending_between(db, user_id, other_id)
    if pending and pending.sender_id == user_id:
        return {"status": "request_sent", "request_id": pending.id}
    if pending:
        return {"status": "request_received", "request_id": pending.id}

    return {"status": "not_friends", "request_id": None}
