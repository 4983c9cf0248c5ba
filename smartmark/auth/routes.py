from flask import current_app, flash, redirect, render_template, request, url_for

from smartmark.auth import auth_bp
from smartmark.errors import AuthenticationError
from smartmark.services.auth import (
    build_authorize_url,
    exchange_code_for_session,
    get_user,
    sign_out,
    verify_state,
)


def _callback_url() -> str:
    return url_for("auth.callback", _external=True)


@auth_bp.route("/login")
def login():
    if get_user():
        return redirect(url_for("web.dashboard"))
    return render_template(
        "login.html", provider_label=current_app.config["OAUTH_PROVIDER_LABEL"]
    )


@auth_bp.route("/auth/authorize")
def authorize():
    return redirect(build_authorize_url(_callback_url()))


@auth_bp.route("/auth/callback")
def callback():
    error = request.args.get("error")
    if error:
        flash(f"Sign-in was cancelled ({error}).", "error")
        return redirect(url_for("auth.login"))

    code = request.args.get("code")
    if code:
        if not verify_state(request.args.get("state")):
            flash("Sign-in expired. Please try again.", "error")
            return redirect(url_for("auth.login"))
        try:
            exchange_code_for_session(code, _callback_url())
        except AuthenticationError as exc:
            flash(exc.message, "error")
            return redirect(url_for("auth.login"))

    return redirect(url_for("web.dashboard"))


@auth_bp.route("/auth/signout", methods=["POST"])
def signout():
    sign_out()
    return redirect(url_for("auth.login"))
