from __future__ import annotations

import re
from urllib.parse import urlsplit

from smartmark.errors import ValidationError

TITLE_MAX_LENGTH = 200

_SCHEME_RE = re.compile(r"^https?://")
_URL_RE = re.compile(r"^https?://([a-zA-Z0-9-]+\.)+[a-zA-Z]{2,}(/.*)?$")


def _text_length(value: str) -> int:
    # Browsers count UTF-16 code units, so astral characters count twice.
    return len(value.encode("utf-16-le")) // 2


def validate_url(url) -> None:
    if not isinstance(url, str) or not url.strip():
        raise ValidationError("URL is required")

    trimmed = url.strip()
    if not _SCHEME_RE.match(trimmed):
        raise ValidationError("URL must start with http:// or https://")

    if not _URL_RE.match(trimmed):
        raise ValidationError("Please enter a valid URL (e.g., https://example.com)")

    try:
        parsed = urlsplit(trimmed)
    except ValueError:
        raise ValidationError("Invalid URL format") from None
    if not parsed.scheme or not parsed.hostname:
        raise ValidationError("Invalid URL format")


def validate_title(title) -> None:
    if not isinstance(title, str) or not title.strip():
        raise ValidationError("Title is required")

    if _text_length(title.strip()) > TITLE_MAX_LENGTH:
        raise ValidationError(
            f"Title must be less than {TITLE_MAX_LENGTH} characters"
        )
