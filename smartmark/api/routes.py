from __future__ import annotations

from flask import Response, current_app, g, jsonify, request, stream_with_context

from smartmark.api import api_bp
from smartmark.errors import AuthorizationError, BookmarkNotFound, ValidationError
from smartmark.services.actions import (
    ActionResult,
    add_bookmark_action,
    delete_bookmark_action,
    update_bookmark_action,
)
from smartmark.services.bookmarks import select_bookmarks
from smartmark.services.realtime import (
    changes_since,
    latest_cursor,
    serialize_change,
    stream_changes,
)
from smartmark.services.security import api_auth_required

_ERROR_STATUS = (
    (ValidationError, 400),
    (AuthorizationError, 401),
    (BookmarkNotFound, 404),
)


def _action_response(result: ActionResult, success_status: int = 200):
    if result.success:
        return jsonify(result.as_dict()), success_status
    for error_type, status_code in _ERROR_STATUS:
        if isinstance(result.exception, error_type):
            return jsonify(result.as_dict()), status_code
    return jsonify(result.as_dict()), 500


def _request_form() -> dict:
    payload = request.get_json(silent=True)
    if isinstance(payload, dict):
        return payload
    return request.form.to_dict()


@api_bp.route("/health")
def health():
    return jsonify({"status": "ok", "service": "SmartMark"})


@api_bp.route("/bookmarks", methods=["GET"])
@api_auth_required
def bookmarks_list_api():
    items = select_bookmarks(g.api_user.id)
    return jsonify({"items": [item.as_dict() for item in items]})


@api_bp.route("/bookmarks", methods=["POST"])
@api_auth_required
def bookmarks_create_api():
    return _action_response(add_bookmark_action(_request_form()), 201)


@api_bp.route("/bookmarks/<int:bookmark_id>", methods=["PATCH"])
@api_auth_required
def bookmarks_update_api(bookmark_id: int):
    return _action_response(update_bookmark_action(bookmark_id, _request_form()))


@api_bp.route("/bookmarks/<int:bookmark_id>", methods=["DELETE"])
@api_auth_required
def bookmarks_delete_api(bookmark_id: int):
    return _action_response(delete_bookmark_action(bookmark_id))


@api_bp.route("/changes", methods=["GET"])
@api_auth_required
def changes_pull():
    user = g.api_user
    max_limit = current_app.config["CHANGES_PAGE_LIMIT"]
    since = request.args.get("since", default=0, type=int)
    limit = request.args.get("limit", default=max_limit, type=int)
    limit = max(1, min(limit, max_limit))
    events = changes_since(user.id, since, limit)
    cursor = events[-1].id if events else since
    return jsonify(
        {
            "events": [serialize_change(event) for event in events],
            "cursor": cursor,
            "has_more": len(events) == limit,
        }
    )


@api_bp.route("/changes/stream", methods=["GET"])
@api_auth_required
def changes_stream():
    user = g.api_user
    config = current_app.config
    since = request.headers.get("Last-Event-ID", type=int)
    if since is None:
        since = request.args.get("since", type=int)
    if since is None:
        since = latest_cursor(user.id)
    snapshot = [item.as_dict() for item in select_bookmarks(user.id)]

    stream = stream_changes(
        user.id,
        snapshot,
        since,
        poll_interval=config["REALTIME_POLL_INTERVAL"],
        timeout=config["REALTIME_STREAM_TIMEOUT"],
        heartbeat=config["REALTIME_HEARTBEAT_SECONDS"],
        page_limit=config["CHANGES_PAGE_LIMIT"],
    )
    return Response(
        stream_with_context(stream),
        mimetype="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
