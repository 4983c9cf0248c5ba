from __future__ import annotations

from smartmark.errors import AuthorizationError, BookmarkNotFound, ValidationError
from smartmark.extensions import db
from smartmark.models import Bookmark, User
from smartmark.services.auth import get_user
from smartmark.services.live_state import EVENT_DELETE, EVENT_INSERT, EVENT_UPDATE
from smartmark.services.realtime import log_change
from smartmark.services.validation import validate_title, validate_url

DUPLICATE_URL_MESSAGE = "This URL is already bookmarked"


def _require_user() -> User:
    user = get_user()
    if not user:
        raise AuthorizationError()
    return user


def _owned_bookmark(user_id: int, bookmark_id: int) -> Bookmark:
    bookmark = Bookmark.query.filter_by(id=bookmark_id, user_id=user_id).first()
    if not bookmark:
        raise BookmarkNotFound()
    return bookmark


def select_bookmarks(user_id: int) -> list[Bookmark]:
    return (
        Bookmark.query.filter_by(user_id=user_id)
        .order_by(Bookmark.created_at.desc(), Bookmark.id.desc())
        .all()
    )


def get_bookmarks() -> list[Bookmark]:
    user = _require_user()
    return select_bookmarks(user.id)


def create_bookmark(title: str, url: str) -> Bookmark:
    user = _require_user()
    validate_title(title)
    validate_url(url)

    url = url.strip()
    existing = Bookmark.query.filter_by(user_id=user.id, url=url).first()
    if existing:
        raise ValidationError(DUPLICATE_URL_MESSAGE)

    bookmark = Bookmark(user_id=user.id, title=title.strip(), url=url)
    db.session.add(bookmark)
    db.session.flush()
    log_change(user.id, EVENT_INSERT, bookmark.id, new=bookmark.as_dict())
    db.session.commit()
    return bookmark


def update_bookmark(bookmark_id: int, title: str, url: str) -> Bookmark:
    user = _require_user()
    validate_title(title)
    validate_url(url)

    bookmark = _owned_bookmark(user.id, bookmark_id)
    url = url.strip()
    clash = (
        Bookmark.query.filter_by(user_id=user.id, url=url)
        .filter(Bookmark.id != bookmark.id)
        .first()
    )
    if clash:
        raise ValidationError(DUPLICATE_URL_MESSAGE)

    old = bookmark.as_dict()
    bookmark.title = title.strip()
    bookmark.url = url
    log_change(user.id, EVENT_UPDATE, bookmark.id, new=bookmark.as_dict(), old=old)
    db.session.commit()
    return bookmark


def delete_bookmark(bookmark_id: int) -> None:
    user = _require_user()

    bookmark = _owned_bookmark(user.id, bookmark_id)
    log_change(user.id, EVENT_DELETE, bookmark.id, old=bookmark.as_dict())
    db.session.delete(bookmark)
    db.session.commit()
