from typing import List, Optional
import uuid
import logging
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from geopost.core.errors import BadValuesError, NotAllowedError, NotFoundError
from geopost.modules.tags.models.tag import Tag
from geopost.modules.visibility.services.gate import visible_to_viewer

logger = logging.getLogger(__name__)


class TagNotFoundError(NotFoundError):
    def __init__(self, tag: str):
        super().__init__(f"The tag {tag} does not exist!")
        self.tag = tag

class TagAlreadyExistsError(NotAllowedError):
    def __init__(self, name: str):
        super().__init__(f"Item already has tag {name}!")


def get_tag(db: Session, tag_id: str) -> Optional[Tag]:
    return db.query(Tag).filter(Tag.id == tag_id).first()

def add_tag(db: Session, author_id: str, item_id: str, name: str) -> Tag:
    name = (name or "").strip()
    if not item_id:
        raise BadValuesError("Item must be non-empty!")
    if not name:
        raise BadValuesError("Tag name must be non-empty!")
    if db.query(Tag).filter(Tag.author_id == author_id, Tag.item_id == item_id, Tag.name == name).first():
        raise TagAlreadyExistsError(name)

    tag = Tag(id=str(uuid.uuid4()), author_id=author_id, item_id=item_id, name=name)
    db.add(tag)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise TagAlreadyExistsError(name)
    db.refresh(tag)
    logger.info(f"Tagged item {item_id} with {name} for author ID: {author_id}")
    return tag

@visible_to_viewer()
def list_tags(db: Session, author_id: Optional[str] = None, item_id: Optional[str] = None, name: Optional[str] = None) -> List[Tag]:
    """Tags matching every given filter, newest first"""
    query = db.query(Tag)
    if author_id is not None:
        query = query.filter(Tag.author_id == author_id)
    if item_id is not None:
        query = query.filter(Tag.item_id == item_id)
    if name is not None:
        query = query.filter(Tag.name == name)
    return query.order_by(Tag.created_at.desc()).all()

def is_author(db: Session, user_id: str, tag_id: str) -> Tag:
    tag = get_tag(db, tag_id)
    if not tag:
        raise TagNotFoundError(tag_id)
    if tag.author_id != user_id:
        raise NotAllowedError(f"{user_id} is not the author of tag {tag.name}!")
    return tag

def delete_tag(db: Session, tag: Tag) -> Tag:
    logger.info(f"Deleting tag {tag.name} from item {tag.item_id}")
    db.delete(tag)
    db.commit()
    return tag

def delete_item_tags(db: Session, item_id: str) -> int:
    """Drop every tag on an item; the caller commits"""
    return db.query(Tag).filter(Tag.item_id == item_id).delete(synchronize_session=False)
