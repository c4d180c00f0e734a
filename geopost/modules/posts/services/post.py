from typing import List, Optional
import uuid
import logging
from sqlalchemy.orm import Session

from geopost.core.errors import BadValuesError, NotAllowedError, NotFoundError
from geopost.modules.posts.models.post import Post
from geopost.modules.posts.comments.models.comment import Comment
from geopost.modules.locations.models.location import POST_LOCATION
from geopost.modules.locations.services.location import new_location, delete_location
from geopost.modules.groups.services.group import is_member
from geopost.modules.tags.services.tag import delete_item_tags
from geopost.modules.visibility.services.gate import filter_group, included, visible_to_viewer

logger = logging.getLogger(__name__)


class PostNotFoundError(NotFoundError):
    def __init__(self, post_id: str):
        super().__init__(f"Post {post_id} does not exist!")
        self.post_id = post_id


def get_post(db: Session, post_id: str) -> Optional[Post]:
    """Get post by ID"""
    return db.query(Post).filter(Post.id == post_id).first()

def get_post_or_404(db: Session, post_id: str) -> Post:
    post = get_post(db, post_id)
    if not post:
        raise PostNotFoundError(post_id)
    return post

def get_visible_post(db: Session, viewer_id: str, post_id: str) -> Post:
    """The post if the viewer may see it; hidden posts look absent"""
    post = get_post(db, post_id)
    if not post or not included(db, viewer_id, post.author_id):
        raise PostNotFoundError(post_id)
    return post

@visible_to_viewer()
def list_posts(db: Session, author_id: Optional[str] = None, skip: int = 0, limit: Optional[int] = None) -> List[Post]:
    """Posts newest first, optionally by one author"""
    query = db.query(Post)
    if author_id is not None:
        query = query.filter(Post.author_id == author_id)
    query = query.order_by(Post.created_at.desc(), Post.id).offset(skip)
    if limit is not None:
        query = query.limit(limit)
    return query.all()

def list_group_posts(db: Session, group_id: str, viewer_id: str, skip: int = 0, limit: Optional[int] = None) -> List[Post]:
    """Posts written by members of a group; only members may read them"""
    is_member(db, group_id, viewer_id)
    return filter_group(db, group_id, list_posts.__wrapped__(db, skip=skip, limit=limit))

def create_post(db: Session, author_id: str, content: str, latitude: Optional[str] = None, longitude: Optional[str] = None) -> Post:
    """Create new post, pinned to a location when coordinates are given"""
    if not content or not content.strip():
        raise BadValuesError("Post content must be non-empty!")

    post = Post(id=str(uuid.uuid4()), author_id=author_id, content=content)
    location = None
    if latitude or longitude:
        location = new_location(POST_LOCATION, post.id, author_id, latitude, longitude)
    db.add(post)
    if location is not None:
        db.add(location)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(post)
    logger.info(f"Created post {post.id} for author ID: {author_id}")
    return post

def is_author(db: Session, user_id: str, post_id: str) -> Post:
    post = get_post_or_404(db, post_id)
    if post.author_id != user_id:
        raise NotAllowedError(f"{user_id} is not the author of post {post_id}!")
    return post

def update_post(db: Session, post: Post, content: Optional[str]) -> Post:
    if content is not None:
        if not content.strip():
            raise BadValuesError("Post content must be non-empty!")
        post.content = content
    db.commit()
    db.refresh(post)
    return post

def delete_post(db: Session, post: Post) -> Post:
    """
    Delete post along with its comments, tags and location
    """
    logger.info(f"Deleting post with ID: {post.id}")
    try:
        db.query(Comment).filter(Comment.post_id == post.id).delete(synchronize_session=False)
        delete_item_tags(db, post.id)
        delete_location(db, POST_LOCATION, post.id)
        db.delete(post)
        db.commit()
    except Exception:
        db.rollback()
        raise
    return post
