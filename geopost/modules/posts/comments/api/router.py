from typing import Any, List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
import logging

from geopost.db.session import get_db
from geopost.deps import get_current_user
from geopost.modules.user_management.models.user import User
from geopost.modules.posts.services.post import get_visible_post
from geopost.modules.posts.comments.schemas.comment import (
    Comment as CommentSchema, CommentCreate, CommentUpdate
)
from geopost.modules.posts.comments.services.comment import (
    list_comments, create_comment, is_author, update_comment, delete_comment
)

router = APIRouter()
logger = logging.getLogger("geopost")

@router.get("", response_model=List[CommentSchema])
def read_comments(
    *,
    db: Session = Depends(get_db),
    post_id: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    """Comments on a post that the current user may see"""
    get_visible_post(db, current_user.id, post_id)
    return list_comments(db, post_id=post_id, viewer_id=current_user.id)

@router.post("", response_model=CommentSchema, status_code=status.HTTP_201_CREATED)
def create_new_comment(
    *,
    db: Session = Depends(get_db),
    post_id: str,
    comment_in: CommentCreate,
    current_user: User = Depends(get_current_user),
) -> Any:
    get_visible_post(db, current_user.id, post_id)
    return create_comment(db, post_id, current_user.id, comment_in.content)

@router.patch("/{comment_id}", response_model=CommentSchema)
def update_existing_comment(
    *,
    db: Session = Depends(get_db),
    post_id: str,
    comment_id: str,
    comment_in: CommentUpdate,
    current_user: User = Depends(get_current_user),
) -> Any:
    comment = is_author(db, current_user.id, comment_id, post_id=post_id)
    return update_comment(db, comment, comment_in.content)

@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_existing_comment(
    *,
    db: Session = Depends(get_db),
    post_id: str,
    comment_id: str,
    current_user: User = Depends(get_current_user),
) -> None:
    comment = is_author(db, current_user.id, comment_id, post_id=post_id)
    delete_comment(db, comment)
    logger.info(f"Comment {comment_id} on post {post_id} deleted by {current_user.username}")
