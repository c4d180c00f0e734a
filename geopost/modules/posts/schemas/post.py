from typing import Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict

class PostBase(BaseModel):
    content: str

class PostCreate(PostBase):
    latitude: Optional[str] = None
    longitude: Optional[str] = None

class PostUpdate(BaseModel):
    content: Optional[str] = None

class Post(PostBase):
    """Post model returned to client"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    author_id: str
    created_at: datetime
    updated_at: datetime
