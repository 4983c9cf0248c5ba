from __future__ import annotations

import json
import logging
import time
from datetime import datetime, timezone

from smartmark.extensions import db
from smartmark.models import BookmarkChange
from smartmark.services.live_state import (
    EVENT_DELETE,
    EVENT_INSERT,
    EVENT_UPDATE,
    LiveBookmarkList,
)

logger = logging.getLogger(__name__)

EVENT_TYPES = {EVENT_INSERT, EVENT_UPDATE, EVENT_DELETE}


def log_change(
    user_id: int,
    event_type: str,
    bookmark_id: int,
    new: dict | None = None,
    old: dict | None = None,
) -> BookmarkChange:
    if event_type not in EVENT_TYPES:
        raise ValueError(f"unknown change type: {event_type}")
    change = BookmarkChange(
        user_id=user_id,
        event_type=event_type,
        bookmark_id=bookmark_id,
        new=new,
        old=old,
    )
    db.session.add(change)
    return change


def serialize_change(change: BookmarkChange) -> dict:
    created_at = change.created_at
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return {
        "cursor": change.id,
        "eventType": change.event_type,
        "new": change.new or {},
        "old": change.old or {},
        "created_at": created_at.isoformat(),
    }


def latest_cursor(user_id: int) -> int:
    row = (
        BookmarkChange.query.filter_by(user_id=user_id)
        .order_by(BookmarkChange.id.desc())
        .first()
    )
    return row.id if row else 0


def changes_since(user_id: int, since: int, limit: int) -> list[BookmarkChange]:
    return (
        BookmarkChange.query.filter_by(user_id=user_id)
        .filter(BookmarkChange.id > since)
        .order_by(BookmarkChange.id.asc())
        .limit(limit)
        .all()
    )


def prune_changes(older_than: datetime) -> int:
    removed = BookmarkChange.query.filter(
        BookmarkChange.created_at < older_than
    ).delete(synchronize_session=False)
    db.session.commit()
    return removed


def format_sse(event: str, data: dict, event_id: int | None = None) -> str:
    lines = []
    if event_id is not None:
        lines.append(f"id: {event_id}")
    lines.append(f"event: {event}")
    lines.append(f"data: {json.dumps(data, separators=(',', ':'))}")
    return "\n".join(lines) + "\n\n"


def stream_changes(
    user_id: int,
    snapshot: list[dict],
    since: int,
    *,
    poll_interval: float,
    timeout: float,
    heartbeat: float,
    page_limit: int = 200,
):
    """Yield SSE frames: a snapshot of the list, then one frame per change.

    Each frame carries the list as reconciled for this subscriber. Replaying
    changes older than the snapshot converges to the same list, so callers
    may pass any cursor at or before the snapshot.
    """
    state = LiveBookmarkList(snapshot)
    cursor = since
    yield format_sse(
        "snapshot", {"cursor": cursor, "bookmarks": state.as_list()}, cursor
    )

    started = time.monotonic()
    last_beat = started
    while True:
        changes = changes_since(user_id, cursor, page_limit)
        frames = []
        for change in changes:
            payload = serialize_change(change)
            cursor = change.id
            payload["bookmarks"] = state.apply(payload)
            frames.append(format_sse(change.event_type.lower(), payload, cursor))
        # End the read transaction so the next poll sees new commits.
        db.session.rollback()
        yield from frames

        now = time.monotonic()
        if now - started >= timeout:
            logger.debug("change stream for user %s closed at %s", user_id, cursor)
            return
        if len(changes) == page_limit:
            continue
        if now - last_beat >= heartbeat:
            last_beat = now
            yield ": keep-alive\n\n"
        time.sleep(poll_interval)
