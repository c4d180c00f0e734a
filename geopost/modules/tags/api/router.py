from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from geopost.db.session import get_db
from geopost.deps import get_current_user
from geopost.modules.user_management.models.user import User
from geopost.modules.user_management.services.user import resolve_username
from geopost.modules.posts.services.post import get_visible_post
from geopost.modules.tags.schemas.tag import Tag as TagSchema, TagCreate
from geopost.modules.tags.services.tag import add_tag, list_tags, is_author, delete_tag

router = APIRouter()

@router.post("", response_model=TagSchema, status_code=status.HTTP_201_CREATED)
def tag_item(
    *,
    db: Session = Depends(get_db),
    tag_in: TagCreate,
    current_user: User = Depends(get_current_user),
) -> Any:
    get_visible_post(db, current_user.id, tag_in.item_id)
    return add_tag(db, current_user.id, tag_in.item_id, tag_in.name)

@router.get("", response_model=List[TagSchema])
def read_my_tags(
    db: Session = Depends(get_db),
    item: Optional[str] = Query(None, description="Only tags on this item"),
    current_user: User = Depends(get_current_user),
) -> Any:
    return list_tags(db, author_id=current_user.id, item_id=item, viewer_id=current_user.id)

@router.get("/{username}/{name}", response_model=List[TagSchema])
def read_items_under_tag(
    username: str,
    name: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    author_id = resolve_username(db, username)
    return list_tags(db, author_id=author_id, name=name, viewer_id=current_user.id)

@router.delete("/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_item_tag(
    tag_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> None:
    tag = is_author(db, current_user.id, tag_id)
    delete_tag(db, tag)
