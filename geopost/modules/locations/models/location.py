from sqlalchemy import Column, String, DateTime, UniqueConstraint
from sqlalchemy.sql import func

from geopost.db.session import Base

USER_LOCATION = "user"
POST_LOCATION = "post"

class Location(Base):
    __tablename__ = "locations"

    id = Column(String, primary_key=True, index=True)
    kind = Column(String, nullable=False)  # user, post
    target_id = Column(String, nullable=False)
    # The user whose relationships decide who sees this location
    owner_id = Column(String, nullable=False, index=True)
    latitude = Column(String, nullable=False)
    longitude = Column(String, nullable=False)
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("kind", "target_id", name="one_location_per_target"),
    )
