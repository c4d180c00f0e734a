from typing import Any, List, Optional
import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from geopost.db.session import get_db
from geopost.deps import get_current_user
from geopost.core.config import settings
from geopost.modules.user_management.models.user import User
from geopost.modules.user_management.services.user import resolve_username
from geopost.modules.posts.schemas.post import Post as PostSchema, PostCreate, PostUpdate
from geopost.modules.posts.services.post import (
    get_visible_post, list_posts, create_post, is_author, update_post, delete_post
)

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("", response_model=List[PostSchema])
def read_posts(
    db: Session = Depends(get_db),
    author: Optional[str] = Query(None, description="Only posts by this username"),
    skip: int = Query(0, ge=0),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=200),
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Retrieve posts written by the current user or their friends.
    """
    author_id = resolve_username(db, author) if author else None
    return list_posts(db, author_id=author_id, skip=skip, limit=limit, viewer_id=current_user.id)

@router.post("", response_model=PostSchema, status_code=status.HTTP_201_CREATED)
def create_new_post(
    *,
    db: Session = Depends(get_db),
    post_in: PostCreate,
    current_user: User = Depends(get_current_user),
) -> Any:
    return create_post(db, current_user.id, post_in.content, post_in.latitude, post_in.longitude)

@router.get("/{post_id}", response_model=PostSchema)
def read_post(
    *,
    db: Session = Depends(get_db),
    post_id: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    return get_visible_post(db, current_user.id, post_id)

@router.patch("/{post_id}", response_model=PostSchema)
def update_existing_post(
    *,
    db: Session = Depends(get_db),
    post_id: str,
    post_in: PostUpdate,
    current_user: User = Depends(get_current_user),
) -> Any:
    post = is_author(db, current_user.id, post_id)
    return update_post(db, post, post_in.content)

@router.delete("/{post_id}", response_model=PostSchema)
def delete_existing_post(
    *,
    db: Session = Depends(get_db),
    post_id: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    post = is_author(db, current_user.id, post_id)
    # Snapshot before the row disappears
    deleted = PostSchema.model_validate(post)
    delete_post(db, post)
    logger.info(f"Post {post_id} deleted by {current_user.username}")
    return deleted
