"""Action boundary for bookmark mutations.

Every failure is caught here and reported as an ``ActionResult``. Errors
derived from ``SmartMarkError`` carry a message meant for the user; anything
else is logged and replaced by a generic message.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Mapping

from smartmark.errors import SmartMarkError
from smartmark.extensions import db
from smartmark.services import bookmarks as bookmark_service

logger = logging.getLogger(__name__)


@dataclass
class ActionResult:
    success: bool
    error: str | None = None
    bookmark: dict | None = None
    exception: Exception | None = None

    def as_dict(self) -> dict:
        return {
            "success": self.success,
            "error": self.error,
            "bookmark": self.bookmark,
        }


def _run(operation: Callable, fallback_message: str) -> ActionResult:
    try:
        bookmark = operation()
    except SmartMarkError as exc:
        db.session.rollback()
        return ActionResult(success=False, error=exc.message, exception=exc)
    except Exception as exc:
        db.session.rollback()
        logger.exception(fallback_message)
        return ActionResult(success=False, error=fallback_message, exception=exc)
    return ActionResult(
        success=True, bookmark=bookmark.as_dict() if bookmark is not None else None
    )


def add_bookmark_action(form: Mapping) -> ActionResult:
    return _run(
        lambda: bookmark_service.create_bookmark(form.get("title"), form.get("url")),
        "Failed to add bookmark",
    )


def update_bookmark_action(bookmark_id: int, form: Mapping) -> ActionResult:
    return _run(
        lambda: bookmark_service.update_bookmark(
            bookmark_id, form.get("title"), form.get("url")
        ),
        "Failed to update bookmark",
    )


def delete_bookmark_action(bookmark_id: int) -> ActionResult:
    return _run(
        lambda: bookmark_service.delete_bookmark(bookmark_id),
        "Failed to delete bookmark",
    )
