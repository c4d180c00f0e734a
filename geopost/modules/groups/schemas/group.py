from typing import List
from datetime import datetime
from pydantic import BaseModel, ConfigDict

class GroupCreate(BaseModel):
    name: str

class GroupUpdate(BaseModel):
    name: str

class MemberRef(BaseModel):
    """A user named by username, used to add members and pick a new owner"""
    username: str

class Group(BaseModel):
    """Group model returned to client"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    owner_id: str
    created_at: datetime

class GroupInfo(BaseModel):
    id: str
    name: str
    owner_id: str
    owner: str
    members: List[str]
