from typing import Tuple

from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.sql import func

from geopost.db.session import Base


def ordered_pair(user_id: str, other_id: str) -> Tuple[str, str]:
    """Order-independent key for a pair of users"""
    return (user_id, other_id) if user_id < other_id else (other_id, user_id)


# One row per friendship; (a, b) and (b, a) share the same key
class Friendship(Base):
    __tablename__ = "friendships"

    user_low = Column(String, ForeignKey("users.id"), primary_key=True)
    user_high = Column(String, ForeignKey("users.id"), primary_key=True)
    created_at = Column(DateTime, default=func.now())

    __table_args__ = (
        CheckConstraint("user_low != user_high", name="no_self_friendship"),
    )

    def other(self, user_id: str) -> str:
        return self.user_high if user_id == self.user_low else self.user_low


# Pending friend request; resolved requests are deleted
class FriendshipRequest(Base):
    __tablename__ = "friendship_requests"

    id = Column(String, primary_key=True, index=True)
    sender_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    receiver_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    pair_low = Column(String, nullable=False)
    pair_high = Column(String, nullable=False)
    created_at = Column(DateTime, default=func.now())

    __table_args__ = (
        # At most one pending request per unordered pair, crossed requests included
        UniqueConstraint("pair_low", "pair_high", name="one_pending_request_per_pair"),
        CheckConstraint("sender_id != receiver_id", name="no_self_request"),
    )
