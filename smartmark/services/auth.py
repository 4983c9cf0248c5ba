from __future__ import annotations

import logging
import secrets
from urllib.parse import urlencode

import httpx
from flask import current_app, session
from flask_login import current_user, login_user, logout_user
from itsdangerous import BadData, URLSafeTimedSerializer

from smartmark.errors import AuthenticationError
from smartmark.extensions import db
from smartmark.models import User, utcnow

logger = logging.getLogger(__name__)

STATE_SESSION_KEY = "oauth_state_nonce"


def _serializer() -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(
        secret_key=current_app.config["SECRET_KEY"], salt="oauth-state"
    )


def get_user() -> User | None:
    if current_user.is_authenticated:
        return current_user
    return None


def build_authorize_url(redirect_uri: str) -> str:
    config = current_app.config
    nonce = secrets.token_urlsafe(16)
    session[STATE_SESSION_KEY] = nonce
    params = {
        "response_type": "code",
        "client_id": config["OAUTH_CLIENT_ID"],
        "redirect_uri": redirect_uri,
        "scope": config["OAUTH_SCOPES"],
        "state": _serializer().dumps({"nonce": nonce}),
    }
    return f"{config['OAUTH_AUTHORIZE_URL']}?{urlencode(params)}"


def verify_state(state: str | None) -> bool:
    expected = session.pop(STATE_SESSION_KEY, None)
    if not state or not expected:
        return False
    try:
        payload = _serializer().loads(
            state, max_age=current_app.config["OAUTH_STATE_MAX_AGE"]
        )
    except BadData:
        return False
    return secrets.compare_digest(str(payload.get("nonce", "")), expected)


def _fetch_token(code: str, redirect_uri: str) -> dict:
    config = current_app.config
    response = httpx.post(
        config["OAUTH_TOKEN_URL"],
        data={
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": redirect_uri,
            "client_id": config["OAUTH_CLIENT_ID"],
            "client_secret": config["OAUTH_CLIENT_SECRET"],
        },
        headers={"Accept": "application/json"},
        timeout=config["OAUTH_HTTP_TIMEOUT"],
    )
    response.raise_for_status()
    return response.json()


def _fetch_userinfo(access_token: str) -> dict:
    config = current_app.config
    response = httpx.get(
        config["OAUTH_USERINFO_URL"],
        headers={"Authorization": f"Bearer {access_token}"},
        timeout=config["OAUTH_HTTP_TIMEOUT"],
    )
    response.raise_for_status()
    return response.json()


def _upsert_user(provider: str, profile: dict) -> User:
    subject = str(profile.get("sub") or profile.get("id") or "").strip()
    if not subject:
        raise AuthenticationError("Identity provider did not return a user id")

    user = User.query.filter_by(provider=provider, provider_subject=subject).first()
    if not user:
        user = User(provider=provider, provider_subject=subject)
        db.session.add(user)
    user.email = profile.get("email") or user.email
    user.display_name = profile.get("name") or user.display_name
    user.avatar_url = profile.get("picture") or user.avatar_url
    user.last_sign_in_at = utcnow()
    db.session.commit()
    return user


def exchange_code_for_session(code: str, redirect_uri: str) -> User:
    provider = current_app.config["OAUTH_PROVIDER"]
    try:
        token = _fetch_token(code, redirect_uri)
        access_token = token.get("access_token")
        if not access_token:
            raise AuthenticationError("Identity provider did not return a token")
        profile = _fetch_userinfo(access_token)
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("OAuth code exchange with %s failed: %s", provider, exc)
        raise AuthenticationError("Could not complete sign-in") from exc

    user = _upsert_user(provider, profile)
    login_user(user, remember=True)
    logger.info("user %s signed in via %s", user.id, provider)
    return user


def sign_out() -> None:
    if current_user.is_authenticated:
        logger.info("user %s signed out", current_user.id)
    logout_user()
