"""
Visibility gate for content listings.

An item is visible to a viewer when the viewer wrote it or is friends with
its author. Group-scoped listings use group membership instead of
friendship. Filtering never reorders items and never writes.

Listings opt in through the ``visible_to_viewer`` decorator, so every content
source filters the same way.
"""
from typing import Any, Callable, Iterable, List, Set, TypeVar
from operator import attrgetter
import functools
import logging
from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from geopost.modules.friendships.models.friendship import Friendship
from geopost.modules.friendships.services.friendship import are_friends
from geopost.modules.groups.services.group import get_member_ids

logger = logging.getLogger(__name__)

T = TypeVar("T")
author_id_of = attrgetter("author_id")


def included(db: Session, viewer_id: str, author_id: str) -> bool:
    """Single-item predicate: the viewer's own item or a friend's item"""
    return viewer_id == author_id or are_friends(db, viewer_id, author_id)

def _friends_among(db: Session, viewer_id: str, author_ids: Set[str]) -> Set[str]:
    """Which of ``author_ids`` are friends with the viewer, in one query"""
    author_ids = author_ids - {viewer_id}
    if not author_ids:
        return set()
    rows = db.query(Friendship).filter(
        or_(
            and_(Friendship.user_low == viewer_id, Friendship.user_high.in_(author_ids)),
            and_(Friendship.user_high == viewer_id, Friendship.user_low.in_(author_ids)),
        )
    ).all()
    return {row.other(viewer_id) for row in rows}

def filter_all(db: Session, viewer_id: str, items: Iterable[T], author_of: Callable[[T], str] = author_id_of) -> List[T]:
    """Keep the items ``viewer_id`` may see, in their original order"""
    items = list(items)
    authors = {author_of(item) for item in items}
    allowed = _friends_among(db, viewer_id, authors) | {viewer_id}
    visible = [item for item in items if author_of(item) in allowed]
    logger.debug(f"Visibility for {viewer_id}: kept {len(visible)} of {len(items)}")
    return visible

def filter_group(db: Session, group_id: str, items: Iterable[T], author_of: Callable[[T], str] = author_id_of) -> List[T]:
    """Keep the items written by members of ``group_id``, in their original order"""
    members = set(get_member_ids(db, group_id))
    return [item for item in items if author_of(item) in members]

def visible_to_viewer(author_of: Callable[[Any], str] = author_id_of):
    """
    Wrap a listing function ``f(db, ...) -> items`` so that callers must pass
    ``viewer_id=`` and only get back what that viewer may see. The raw listing
    stays reachable as ``f.__wrapped__``.
    """
    def decorator(listing: Callable[..., List[T]]) -> Callable[..., List[T]]:
        @functools.wraps(listing)
        def wrapper(db: Session, *args, viewer_id: str, **kwargs) -> List[T]:
            items = listing(db, *args, **kwargs)
            return filter_all(db, viewer_id, items, author_of=author_of)
        return wrapper
    return decorator
