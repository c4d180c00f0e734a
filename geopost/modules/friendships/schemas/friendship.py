from typing import Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict

class FriendshipRequestBase(BaseModel):
    sender_id: str
    receiver_id: str

class FriendshipRequestInDBBase(FriendshipRequestBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: datetime

class FriendshipRequest(FriendshipRequestInDBBase):
    """Friend request model returned to client"""
    sender: Optional[str] = None
    receiver: Optional[str] = None

class FriendshipStatus(BaseModel):
    status: str
    request_id: Optional[str] = None
