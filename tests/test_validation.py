import pytest

from smartmark.errors import ValidationError
from smartmark.services.validation import validate_title, validate_url


@pytest.mark.parametrize(
    "url",
    [
        "https://example.com",
        "http://example.com/path?q=1",
        "  https://sub.example.co.uk/  ",
    ],
)
def test_accepts_http_and_https_urls(url):
    validate_url(url)


def test_rejects_url_without_scheme():
    with pytest.raises(ValidationError) as exc:
        validate_url("example.com")
    assert exc.value.message == "URL must start with http:// or https://"


def test_rejects_non_http_scheme():
    with pytest.raises(ValidationError) as exc:
        validate_url("ftp://example.com")
    assert exc.value.message == "URL must start with http:// or https://"


def test_rejects_blank_url():
    with pytest.raises(ValidationError) as exc:
        validate_url("   ")
    assert exc.value.message == "URL is required"


def test_rejects_host_without_tld():
    with pytest.raises(ValidationError) as exc:
        validate_url("https://localhost")
    assert exc.value.message == "Please enter a valid URL (e.g., https://example.com)"


def test_title_at_limit_is_accepted():
    validate_title("x" * 200)


def test_rejects_title_over_limit():
    with pytest.raises(ValidationError) as exc:
        validate_title("x" * 201)
    assert exc.value.message == "Title must be less than 200 characters"


@pytest.mark.parametrize("title", ["", "   ", None])
def test_rejects_empty_title(title):
    with pytest.raises(ValidationError) as exc:
        validate_title(title)
    assert exc.value.message == "Title is required"


@pytest.mark.parametrize("value", [123, ["https://example.com"], {"a": 1}])
def test_non_string_values_are_rejected(value):
    with pytest.raises(ValidationError) as exc:
        validate_url(value)
    assert exc.value.message == "URL is required"
    with pytest.raises(ValidationError) as exc:
        validate_title(value)
    assert exc.value.message == "Title is required"


def test_title_length_counts_utf16_code_units():
    validate_title("\U0001F600" * 100)
    with pytest.raises(ValidationError) as exc:
        validate_title("\U0001F600" * 150)
    assert exc.value.message == "Title must be less than 200 characters"
