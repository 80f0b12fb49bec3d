"""Unit tests for URL validation."""

import pytest

from core.validation import validate_public_url


@pytest.mark.parametrize(
    "url",
    [
        "https://example.com",
        "http://example.com/path?q=1",
        "https://8.8.8.8/dns",
    ],
)
def test_accepts_public_urls(url: str):
    assert validate_public_url(url) == url


def test_strips_whitespace():
    assert validate_public_url("  https://example.com  ") == "https://example.com"


@pytest.mark.parametrize(
    "url",
    [
        "javascript:alert(1)",
        " JavaScript:alert(1)",
        "data:text/html;base64,PHNjcmlwdD4=",
        "ftp://example.com",
        "https://",
        "http://localhost",
        "http://app.localhost:3000",
        "http://0.0.0.0",
        "http://127.0.0.1:8080",
        "http://192.168.1.10",
        "http://169.254.169.254/latest/meta-data",
        "http://[::1]/",
    ],
)
def test_rejects_unsafe_urls(url: str):
    with pytest.raises(ValueError):
        validate_public_url(url)
