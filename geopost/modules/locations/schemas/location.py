from typing import Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict

class LocationBase(BaseModel):
    latitude: str
    longitude: str

class LocationCreate(LocationBase):
    pass

class LocationUpdate(BaseModel):
    # Only coordinates may change, never the target
    model_config = ConfigDict(extra="forbid")

    latitude: Optional[str] = None
    longitude: Optional[str] = None

class Location(LocationBase):
    """Location model returned to client"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    kind: str
    target_id: str
    owner_id: str
    updated_at: datetime
