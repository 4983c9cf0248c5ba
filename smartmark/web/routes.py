from __future__ import annotations

from urllib.parse import urlsplit

from flask import flash, redirect, render_template, request, url_for
from flask_login import current_user, login_required

from smartmark.services.actions import (
    ActionResult,
    add_bookmark_action,
    delete_bookmark_action,
    update_bookmark_action,
)
from smartmark.services.auth import get_user
from smartmark.services.bookmarks import get_bookmarks
from smartmark.web import web_bp

PROTECTED_PREFIX = "/dashboard"
LOGIN_PATH = "/login"


@web_bp.before_app_request
def route_gate():
    path = request.path
    if path.startswith(PROTECTED_PREFIX) and not get_user():
        return redirect(url_for("auth.login"))
    if path == LOGIN_PATH and get_user():
        return redirect(url_for("web.dashboard"))


@web_bp.app_template_filter("hostname")
def hostname_filter(url: str) -> str:
    try:
        return urlsplit(url).hostname or ""
    except ValueError:
        return ""


def _view_mode() -> str | None:
    return "table" if request.args.get("view") == "table" else None


def _flash_result(result: ActionResult, success_message: str) -> None:
    if result.success:
        flash(success_message, "success")
    else:
        flash(result.error, "error")


@web_bp.route("/")
def index():
    return redirect(url_for("auth.login"))


@web_bp.route("/dashboard")
@login_required
def dashboard():
    items = [bookmark.as_dict() for bookmark in get_bookmarks()]
    editing_id = request.args.get("edit", type=int)
    editing = next((item for item in items if item["id"] == editing_id), None)
    return render_template(
        "dashboard.html",
        user=current_user,
        items=items,
        editing=editing,
        view=_view_mode(),
        view_mode=_view_mode() or "card",
    )


@web_bp.route("/dashboard/bookmarks", methods=["POST"])
@login_required
def bookmarks_add():
    result = add_bookmark_action(request.form)
    _flash_result(result, "Bookmark added successfully!")
    return redirect(url_for("web.dashboard"))


@web_bp.route("/dashboard/bookmarks/<int:bookmark_id>/edit", methods=["POST"])
@login_required
def bookmarks_edit(bookmark_id: int):
    result = update_bookmark_action(bookmark_id, request.form)
    _flash_result(result, "Bookmark updated successfully!")
    if not result.success:
        return redirect(url_for("web.dashboard", edit=bookmark_id, view=_view_mode()))
    return redirect(url_for("web.dashboard", view=_view_mode()))


@web_bp.route("/dashboard/bookmarks/<int:bookmark_id>/delete", methods=["POST"])
@login_required
def bookmarks_delete(bookmark_id: int):
    result = delete_bookmark_action(bookmark_id)
    _flash_result(result, "Bookmark deleted.")
    return redirect(url_for("web.dashboard"))
