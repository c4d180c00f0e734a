from typing import Any, Dict, List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from geopost.db.session import get_db
from geopost.deps import get_current_user
from geopost.modules.user_management.models.user import User
from geopost.modules.user_management.schemas.user import User as UserSchema
from geopost.modules.user_management.services.user import resolve_username, ids_to_usernames
from geopost.modules.friendships.models.friendship import FriendshipRequest
from geopost.modules.friendships.schemas.friendship import (
    FriendshipRequest as FriendshipRequestSchema,
    FriendshipStatus,
)
from geopost.modules.friendships.services.friendship import (
    get_received_requests,
    get_sent_requests,
    send_request,
    remove_request,
    reject_request,
    accept_request,
    get_friends,
    remove_friend,
    get_friendship_status,
)

router = APIRouter()

def _describe_requests(db: Session, requests: List[FriendshipRequest]) -> List[FriendshipRequestSchema]:
    """Attach sender and receiver usernames to request rows"""
    senders = ids_to_usernames(db, [r.sender_id for r in requests])
    receivers = ids_to_usernames(db, [r.receiver_id for r in requests])
    return [
        FriendshipRequestSchema(
            id=r.id,
            sender_id=r.sender_id,
            receiver_id=r.receiver_id,
            created_at=r.created_at,
            sender=sender,
            receiver=receiver,
        )
        for r, sender, receiver in zip(requests, senders, receivers)
    ]

@router.get("", response_model=List[UserSchema])
def get_my_friends(
    *,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    return get_friends(db, current_user.id)

@router.get("/requests", response_model=List[FriendshipRequestSchema])
def get_my_received_friend_requests(
    *,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    return _describe_requests(db, get_received_requests(db, current_user.id))

@router.get("/requests/sent", response_model=List[FriendshipRequestSchema])
def get_my_sent_friend_requests(
    *,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    return _describe_requests(db, get_sent_requests(db, current_user.id))

@router.post("/requests/{username}", response_model=FriendshipRequestSchema, status_code=status.HTTP_201_CREATED)
def send_friend_request(
    *,
    db: Session = Depends(get_db),
    username: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    receiver_id = resolve_username(db, username)
    friend_request = send_request(db, current_user.id, receiver_id)
    return _describe_requests(db, [friend_request])[0]

@router.delete("/requests/{username}", response_model=Dict[str, str])
def cancel_friend_request(
    *,
    db: Session = Depends(get_db),
    username: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    receiver_id = resolve_username(db, username)
    remove_request(db, current_user.id, receiver_id)
    return {"message": f"Friend request to {username} cancelled"}

@router.put("/accept/{username}", response_model=Dict[str, str])
def accept_friend_request(
    *,
    db: Session = Depends(get_db),
    username: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    sender_id = resolve_username(db, username)
    accept_request(db, sender_id, current_user.id)
    return {"message": f"You are now friends with {username}"}

@router.put("/reject/{username}", response_model=Dict[str, str])
def reject_friend_request(
    *,
    db: Session = Depends(get_db),
    username: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    sender_id = resolve_username(db, username)
    reject_request(db, sender_id, current_user.id)
    return {"message": f"Friend request from {username} rejected"}

@router.get("/status/{username}", response_model=FriendshipStatus)
def check_friendship_status(
    *,
    db: Session = Depends(get_db),
    username: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    other_id = resolve_username(db, username)
    return get_friendship_status(db, current_user.id, other_id)

@router.delete("/{username}", response_model=Dict[str, str])
def unfriend(
    *,
    db: Session = Depends(get_db),
    username: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    friend_id = resolve_username(db, username)
    remove_friend(db, current_user.id, friend_id)
    return {"message": "Friend removed successfully"}
