"""Tests for UrlValidator."""

import pytest

from apidocs2md.errors import InvalidUrlError
from apidocs2md.security import INVALID_URL_MESSAGE, UrlValidator


class TestUrlValidator:
    """Tests for URL validation."""

    @pytest.mark.parametrize(
        "url",
        [
            "https://docs.stripe.com/api",
            "http://example.com/docs/index.html",
            "https://api.example.com:8443/reference?v=2#auth",
        ],
    )
    def test_accepts_http_and_https(self, url):
        """Test that public http(s) URLs pass."""
        assert UrlValidator().is_valid(url)

    @pytest.mark.parametrize(
        "url",
        [
            "ftp://example.com/docs",
            "file:///etc/passwd",
            "javascript:alert(1)",
            "not a url",
            "https://",
            "",
        ],
    )
    def test_rejects_other_input(self, url):
        """Test that anything but an absolute http(s) URL is rejected."""
        result = UrlValidator().validate(url)

        assert not result.is_valid
        assert result.rejection_reason == INVALID_URL_MESSAGE

    @pytest.mark.parametrize(
        "url",
        [
            "http://localhost:8000/docs",
            "http://127.0.0.1/docs",
            "http://10.0.0.5/docs",
            "http://192.168.1.1/",
            "http://169.254.169.254/latest/meta-data",
            "https://wiki.corp.internal/api",
        ],
    )
    def test_rejects_private_hosts(self, url):
        """Test that internal addresses are blocked by default."""
        assert not UrlValidator().is_valid(url)

    def test_private_hosts_allowed_when_enabled(self):
        """Test the allow_private_hosts switch."""
        validator = UrlValidator(allow_private_hosts=True)

        assert validator.is_valid("http://localhost:8000/docs")
        assert validator.is_valid("http://10.0.0.5/docs")
        assert not validator.is_valid("ftp://localhost/docs")

    def test_check_raises(self):
        """Test that check raises InvalidUrlError with the reason."""
        with pytest.raises(InvalidUrlError, match="valid HTTP or HTTPS URL"):
            UrlValidator().check("mailto:docs@example.com")

    def test_check_returns_stripped_url(self):
        """Test that surrounding whitespace is removed."""
        assert UrlValidator().check("  https://example.com/docs \n") == "https://example.com/docs"
