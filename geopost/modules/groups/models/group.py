from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.sql import func

from geopost.db.session import Base

class Group(Base):
    __tablename__ = "groups"

    id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)
    owner_id = Column(String, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())


# One row per (group, member), the owner included
class GroupMembership(Base):
    __tablename__ = "group_memberships"

    group_id = Column(String, ForeignKey("groups.id"), primary_key=True)
    user_id = Column(String, ForeignKey("users.id"), primary_key=True, index=True)
    joined_at = Column(DateTime, default=func.now())
