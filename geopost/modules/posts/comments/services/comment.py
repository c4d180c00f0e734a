from typing import List, Optional
import uuid
import logging
from sqlalchemy.orm import Session

from geopost.core.errors import BadValuesError, NotAllowedError, NotFoundError
from geopost.modules.posts.comments.models.comment import Comment
from geopost.modules.visibility.services.gate import visible_to_viewer

logger = logging.getLogger(__name__)


class CommentNotFoundError(NotFoundError):
    def __init__(self, comment_id: str):
        super().__init__(f"Comment {comment_id} does not exist!")


def get_comment(db: Session, comment_id: str) -> Optional[Comment]:
    """Get comment by ID"""
    return db.query(Comment).filter(Comment.id == comment_id).first()

@visible_to_viewer()
def list_comments(db: Session, post_id: Optional[str] = None, author_id: Optional[str] = None) -> List[Comment]:
    """Comments oldest first, filtered by post and/or author"""
    query = db.query(Comment)
    if post_id is not None:
        query = query.filter(Comment.post_id == post_id)
    if author_id is not None:
        query = query.filter(Comment.author_id == author_id)
    return query.order_by(Comment.created_at.asc()).all()

def _validate_content(content: str) -> str:
    if not content or not content.strip():
        raise BadValuesError("Comment must be non-empty!")
    return content

def create_comment(db: Session, post_id: str, author_id: str, content: str) -> Comment:
    """Create a new comment"""
    comment = Comment(
        id=str(uuid.uuid4()),
        author_id=author_id,
        post_id=post_id,
        content=_validate_content(content),
    )
    db.add(comment)
    db.commit()
    db.refresh(comment)
    logger.info(f"Created comment {comment.id} on post {post_id}")
    return comment

def is_author(db: Session, user_id: str, comment_id: str, post_id: Optional[str] = None) -> Comment:
    """Return the comment if ``user_id`` wrote it (and it sits under ``post_id``)"""
    comment = get_comment(db, comment_id)
    if not comment or (post_id is not None and comment.post_id != post_id):
        raise CommentNotFoundError(comment_id)
    if comment.author_id != user_id:
        raise NotAllowedError(f"{user_id} is not the author of comment {comment_id}!")
    return comment

def update_comment(db: Session, comment: Comment, content: str) -> Comment:
    """Update comment"""
    comment.content = _validate_content(content)
    db.commit()
    db.refresh(comment)
    return comment

def delete_comment(db: Session, comment: Comment) -> Comment:
    """Delete comment"""
    logger.info(f"Deleting comment with ID: {comment.id}")
    db.delete(comment)
    db.commit()
    return comment
