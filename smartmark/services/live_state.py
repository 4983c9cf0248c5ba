"""Reconciles a held bookmark list against events from the change feed.

Events use the shape produced by ``realtime.serialize_change``: an
``eventType`` of ``INSERT``, ``UPDATE`` or ``DELETE`` plus the ``new`` and/or
``old`` row. Events are applied in arrival order and the last one wins.
"""

from __future__ import annotations

EVENT_INSERT = "INSERT"
EVENT_UPDATE = "UPDATE"
EVENT_DELETE = "DELETE"


def _row_id(row: dict | None):
    if not row:
        return None
    return row.get("id")


def apply_change(bookmarks: list[dict], change: dict) -> list[dict]:
    event_type = (change.get("eventType") or "").upper()

    if event_type == EVENT_INSERT:
        row = change.get("new")
        row_id = _row_id(row)
        if row_id is None:
            return list(bookmarks)
        if any(item.get("id") == row_id for item in bookmarks):
            return [row if item.get("id") == row_id else item for item in bookmarks]
        return [row, *bookmarks]

    if event_type == EVENT_UPDATE:
        row = change.get("new")
        row_id = _row_id(row)
        return [row if item.get("id") == row_id else item for item in bookmarks]

    if event_type == EVENT_DELETE:
        row_id = _row_id(change.get("old"))
        return [item for item in bookmarks if item.get("id") != row_id]

    return list(bookmarks)


class LiveBookmarkList:
    """Bookmark list held by one subscriber, newest first."""

    def __init__(self, bookmarks: list[dict] | None = None):
        self._bookmarks = list(bookmarks or [])

    def apply(self, change: dict) -> list[dict]:
        self._bookmarks = apply_change(self._bookmarks, change)
        return self.as_list()

    def as_list(self) -> list[dict]:
        return list(self._bookmarks)

    def __len__(self) -> int:
        return len(self._bookmarks)
