from typing import Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict

class UserBase(BaseModel):
    username: str
    display_name: Optional[str] = None

class UserCreate(UserBase):
    pass

class User(UserBase):
    """User model returned to client"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: datetime
