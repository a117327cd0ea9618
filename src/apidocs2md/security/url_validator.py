"""Validation of user-supplied documentation URLs."""

from __future__ import annotations

import ipaddress
import logging
from dataclasses import dataclass
from urllib.parse import urlparse

from ..errors import InvalidUrlError

INVALID_URL_MESSAGE = "Please enter a valid HTTP or HTTPS URL"


@dataclass
class UrlValidationResult:
    """Result of URL validation."""

    is_valid: bool
    rejection_reason: str | None = None

    @staticmethod
    def valid() -> UrlValidationResult:
        return UrlValidationResult(is_valid=True)

    @staticmethod
    def invalid(reason: str) -> UrlValidationResult:
        return UrlValidationResult(is_valid=False, rejection_reason=reason)


class UrlValidator:
    """
    Checks that a URL can be fetched as a documentation page.

    Only absolute http/https URLs with a host are accepted. Localhost,
    internal domain suffixes and private/loopback IP literals are rejected
    unless ``allow_private_hosts`` is set.

    Example:
        validator = UrlValidator()
        result = validator.validate("ftp://example.com/docs")
        if not result.is_valid:
            print(result.rejection_reason)
    """

    ALLOWED_SCHEMES = frozenset({"http", "https"})
    INTERNAL_SUFFIXES = (".internal", ".local", ".localhost", ".localdomain")
    LOCALHOST_NAMES = frozenset({"localhost", "localhost.localdomain"})

    def __init__(self, allow_private_hosts: bool = False, logger: logging.Logger | None = None):
        self.allow_private_hosts = allow_private_hosts
        self.logger = logger or logging.getLogger(__name__)

    def validate(self, url: str) -> UrlValidationResult:
        """
        Validate a URL.

        Args:
            url: The URL to validate

        Returns:
            UrlValidationResult with is_valid and optional rejection_reason
        """
        try:
            parsed = urlparse(url.strip())
            hostname = (parsed.hostname or "").lower()
        except ValueError:
            return UrlValidationResult.invalid(INVALID_URL_MESSAGE)

        if parsed.scheme not in self.ALLOWED_SCHEMES or not hostname:
            return UrlValidationResult.invalid(INVALID_URL_MESSAGE)

        if self.allow_private_hosts:
            return UrlValidationResult.valid()

        if hostname in self.LOCALHOST_NAMES:
            return UrlValidationResult.invalid("Localhost URLs not allowed")

        for suffix in self.INTERNAL_SUFFIXES:
            if hostname.endswith(suffix):
                return UrlValidationResult.invalid(f"Internal domain suffix '{suffix}' not allowed")

        return self._check_ip_address(hostname) or UrlValidationResult.valid()

    def _check_ip_address(self, hostname: str) -> UrlValidationResult | None:
        """Return a rejection if ``hostname`` is a non-public IP literal."""
        try:
            ip = ipaddress.ip_address(hostname)
        except ValueError:
            # Domain name, not an IP literal
            return None

        if ip.is_loopback:
            return UrlValidationResult.invalid(f"Loopback IP address '{hostname}' not allowed")
        if ip.is_private:
            return UrlValidationResult.invalid(f"Private IP address '{hostname}' not allowed")
        if ip.is_link_local:
            return UrlValidationResult.invalid(f"Link-local IP address '{hostname}' not allowed")
        if ip.is_reserved:
            return UrlValidationResult.invalid(f"Reserved IP address '{hostname}' not allowed")
        return None

    def is_valid(self, url: str) -> bool:
        return self.validate(url).is_valid

    def check(self, url: str) -> str:
        """
        Validate a URL, raising on rejection.

        Returns:
            The URL with surrounding whitespace removed

        Raises:
            InvalidUrlError: If the URL is rejected
        """
        result = self.validate(url)
        if not result.is_valid:
            self.logger.warning(f"Rejected URL {url!r}: {result.rejection_reason}")
            raise InvalidUrlError(result.rejection_reason or INVALID_URL_MESSAGE)
        return url.strip()
