from datetime import datetime
from pydantic import BaseModel, ConfigDict

class TagCreate(BaseModel):
    item_id: str
    name: str

class Tag(TagCreate):
    """Tag model returned to client"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    author_id: str
    created_at: datetime
