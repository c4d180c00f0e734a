from datetime import datetime
from pydantic import BaseModel, ConfigDict

class CommentBase(BaseModel):
    content: str

class CommentCreate(CommentBase):
    pass

class CommentUpdate(CommentBase):
    pass

class Comment(CommentBase):
    """Comment model returned to client"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    author_id: str
    post_id: str
    created_at: datetime
    updated_at: datetime
