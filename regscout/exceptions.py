"""
Custom exception hierarchy for regscout.

All exceptions inherit from :class:`RegScoutError` and carry optional
structured metadata via the ``details`` attribute for diagnostics and
logging. Probe-level failures are converted into degraded results at the
prober boundary; only cycle-level errors travel up to the registry
service.
"""

from __future__ import annotations

from typing import Any, Mapping, MutableMapping, Optional


class RegScoutError(Exception):
    """Base exception for all regscout errors.

    Args:
        message: Human-readable error message.
        details: Optional structured metadata describing the error.
    """

    __slots__ = ("message", "details")

    def __init__(
        self,
        message: str,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.message: str = message
        self.details: MutableMapping[str, Any] = dict(details) if details else {}
        super().__init__(message)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        formatted = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({formatted})"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, details={dict(self.details)!r})"
        )


def _add_if(details: MutableMapping[str, Any], key: str, value: Any) -> None:
    """Add a key to ``details`` only if ``value`` is not ``None``."""
    if value is not None:
        details[key] = value


def _truncate(text: str, max_length: int = 200) -> str:
    """Truncate long text for safe logging or error reporting."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


class NetworkError(RegScoutError):
    """Raised when HTTP or network operations fail.

    Args:
        message: Error description.
        url: URL being accessed.
        status_code: HTTP status code, if available.
        response_body: Raw response body, truncated for safety.
    """

    __slots__ = ("url", "status_code", "response_body")

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "url", url)
        _add_if(details, "status_code", status_code)

        if response_body is not None:
            details["response"] = _truncate(response_body)

        super().__init__(message, details)

        self.url = url
        self.status_code = status_code
        self.response_body = response_body


class ResourceNotFoundError(NetworkError):
    """Raised when an upstream answers 404."""


class SourceControlError(NetworkError):
    """Raised for malformed or unusable GitHub API responses.

    Args:
        message: Error description.
        repository: ``owner/repo`` being probed.
        **kwargs: Additional arguments forwarded to ``NetworkError``.
    """

    __slots__ = ("repository",)

    def __init__(
        self,
        message: str,
        *,
        repository: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)

        self.repository = repository
        if repository is not None:
            self.details["repository"] = repository


class InvalidRangeError(RegScoutError):
    """Raised when an npm range expression cannot be parsed.

    Args:
        message: Error description.
        range_expression: The offending range.
    """

    __slots__ = ("range_expression",)

    def __init__(self, message: str, *, range_expression: Optional[str] = None) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "range", range_expression)
        super().__init__(message, details)
        self.range_expression = range_expression


class ConfigError(RegScoutError):
    """Raised when configuration is missing, unreadable, or invalid.

    Args:
        message: Error description.
        config_path: Path of the configuration file involved.
        option: Name of the offending option.
    """

    __slots__ = ("config_path", "option")

    def __init__(
        self,
        message: str,
        *,
        config_path: Optional[str] = None,
        option: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", config_path)
        _add_if(details, "option", option)
        super().__init__(message, details)
        self.config_path = config_path
        self.option = option


class MissingCredentialError(ConfigError):
    """Raised when no GitHub token is configured."""

    def __init__(self, message: str = "GitHub token not configured on server") -> None:
        super().__init__(message, option="github_token")


class AggregationTimeoutError(RegScoutError):
    """Raised when a registry aggregation cycle exceeds its time budget.

    Args:
        timeout: Budget in seconds that was exceeded.
    """

    __slots__ = ("timeout",)

    def __init__(self, timeout: float) -> None:
        super().__init__("Registry parsing timeout", {"timeout": timeout})
        self.timeout = timeout
