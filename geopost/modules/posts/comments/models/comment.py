from sqlalchemy import Column, String, DateTime, Text, ForeignKey
from sqlalchemy.sql import func

from geopost.db.session import Base

class Comment(Base):
    __tablename__ = "comments"

    id = Column(String, primary_key=True, index=True)
    content = Column(Text, nullable=False)
    author_id = Column(String, ForeignKey("users.id"), index=True)
    post_id = Column(String, ForeignKey("posts.id"), index=True)
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())
