from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from geopost.core.config import settings
from geopost.db.session import get_db
from geopost.deps import get_current_user
from geopost.modules.user_management.models.user import User
from geopost.modules.user_management.services.user import resolve_username, ids_to_usernames
from geopost.modules.posts.schemas.post import Post as PostSchema
from geopost.modules.posts.services.post import list_group_posts
from geopost.modules.groups.schemas.group import Group as GroupSchema, GroupCreate, GroupUpdate, GroupInfo, MemberRef
from geopost.modules.groups.services.group import (
    create_group,
    delete_group,
    get_group_info,
    get_groups_of_user,
    is_member,
    update_group_name,
    add_member,
    remove_member,
    transfer_ownership,
)

router = APIRouter()

def _info_response(db: Session, group_id: str) -> GroupInfo:
    """Group info with members named by username"""
    info = get_group_info(db, group_id)
    owner, *members = ids_to_usernames(db, [info["owner_id"], *info["members"]])
    return GroupInfo(id=info["id"], name=info["name"], owner_id=info["owner_id"], owner=owner, members=members)

@router.post("", response_model=GroupSchema, status_code=status.HTTP_201_CREATED)
def create_new_group(
    *,
    db: Session = Depends(get_db),
    group_in: GroupCreate,
    current_user: User = Depends(get_current_user),
) -> Any:
    return create_group(db, current_user.id, group_in.name)

@router.get("", response_model=List[GroupSchema])
def read_my_groups(
    *,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    return get_groups_of_user(db, current_user.id)

@router.get("/{group_id}", response_model=GroupInfo)
def read_group_info(
    *,
    db: Session = Depends(get_db),
    group_id: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    is_member(db, group_id, current_user.id)
    return _info_response(db, group_id)

@router.patch("/{group_id}", response_model=GroupInfo)
def rename_group(
    *,
    db: Session = Depends(get_db),
    group_id: str,
    group_in: GroupUpdate,
    current_user: User = Depends(get_current_user),
) -> Any:
    is_member(db, group_id, current_user.id)
    update_group_name(db, group_id, group_in.name)
    return _info_response(db, group_id)

@router.delete("/{group_id}", response_model=Dict[str, str])
def delete_existing_group(
    *,
    db: Session = Depends(get_db),
    group_id: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    name = delete_group(db, group_id, current_user.id)
    return {"message": f"Group {name} was successfully deleted!"}

@router.put("/{group_id}/owner", response_model=GroupInfo)
def transfer_group_ownership(
    *,
    db: Session = Depends(get_db),
    group_id: str,
    new_owner: MemberRef,
    current_user: User = Depends(get_current_user),
) -> Any:
    new_owner_id = resolve_username(db, new_owner.username)
    transfer_ownership(db, group_id, current_user.id, new_owner_id)
    return _info_response(db, group_id)

@router.post("/{group_id}/members", response_model=GroupInfo)
def add_group_member(
    *,
    db: Session = Depends(get_db),
    group_id: str,
    member: MemberRef,
    current_user: User = Depends(get_current_user),
) -> Any:
    member_id = resolve_username(db, member.username)
    is_member(db, group_id, current_user.id)
    add_member(db, group_id, member_id)
    return _info_response(db, group_id)

@router.delete("/{group_id}/members/{username}", response_model=GroupInfo)
def remove_group_member(
    *,
    db: Session = Depends(get_db),
    group_id: str,
    username: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    member_id = resolve_username(db, username)
    is_member(db, group_id, current_user.id)
    remove_member(db, group_id, member_id)
    return _info_response(db, group_id)

@router.get("/{group_id}/posts", response_model=List[PostSchema])
def read_group_posts(
    group_id: str,
    db: Session = Depends(get_db),
    skip: int = Query(0, ge=0),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=200),
    current_user: User = Depends(get_current_user),
) -> Any:
    """Posts by the group's members, readable by members only"""
    return list_group_posts(db, group_id, current_user.id, skip=skip, limit=limit)
