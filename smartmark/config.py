import os
from pathlib import Path


BASE_DIR = Path(__file__).resolve().parent.parent


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "default-secret-key")
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", f"sqlite:///{BASE_DIR / 'smartmark.db'}"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    OAUTH_PROVIDER = os.environ.get("OAUTH_PROVIDER", "google")
    OAUTH_PROVIDER_LABEL = os.environ.get("OAUTH_PROVIDER_LABEL", "Google")
    OAUTH_CLIENT_ID = os.environ.get("OAUTH_CLIENT_ID", "")
    OAUTH_CLIENT_SECRET = os.environ.get("OAUTH_CLIENT_SECRET", "")
    OAUTH_AUTHORIZE_URL = os.environ.get(
        "OAUTH_AUTHORIZE_URL", "https://accounts.google.com/o/oauth2/v2/auth"
    )
    OAUTH_TOKEN_URL = os.environ.get(
        "OAUTH_TOKEN_URL", "https://oauth2.googleapis.com/token"
    )
    OAUTH_USERINFO_URL = os.environ.get(
        "OAUTH_USERINFO_URL", "https://openidconnect.googleapis.com/v1/userinfo"
    )
    OAUTH_SCOPES = os.environ.get("OAUTH_SCOPES", "openid email profile")
    OAUTH_HTTP_TIMEOUT = float(os.environ.get("OAUTH_HTTP_TIMEOUT", "10"))
    OAUTH_STATE_MAX_AGE = int(os.environ.get("OAUTH_STATE_MAX_AGE", "600"))

    REALTIME_POLL_INTERVAL = float(os.environ.get("REALTIME_POLL_INTERVAL", "1"))
    REALTIME_STREAM_TIMEOUT = float(os.environ.get("REALTIME_STREAM_TIMEOUT", "300"))
    REALTIME_HEARTBEAT_SECONDS = float(
        os.environ.get("REALTIME_HEARTBEAT_SECONDS", "30")
    )
    CHANGES_PAGE_LIMIT = int(os.environ.get("CHANGES_PAGE_LIMIT", "200"))

    SCHEDULER_ENABLED = os.environ.get("SCHEDULER_ENABLED", "1") == "1"
    CHANGE_RETENTION_HOURS = int(os.environ.get("CHANGE_RETENTION_HOURS", "24"))
    CHANGE_PRUNE_INTERVAL_MINUTES = int(
        os.environ.get("CHANGE_PRUNE_INTERVAL_MINUTES", "60")
    )


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret-key"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SCHEDULER_ENABLED = False
    OAUTH_CLIENT_ID = "test-client"
    OAUTH_CLIENT_SECRET = "test-secret"
    REALTIME_POLL_INTERVAL = 0
    REALTIME_STREAM_TIMEOUT = 0
