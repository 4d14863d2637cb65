"""Exception hierarchy for registry operations."""

from __future__ import annotations


class RexError(Exception):
    """Base class for every error raised by this package."""

    _prefix = "Error"

    def __init__(self, message: str, source: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.source = source
        if source is not None:
            self.__cause__ = source

    def __str__(self) -> str:
        return f"{self._prefix}: {self.message}"


class NetworkError(RexError):
    """Connection, timeout or DNS failure."""

    _prefix = "Network error"


class AuthenticationError(RexError):
    """Authentication failure (401, 403, token problems)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    def __str__(self) -> str:
        return f"Authentication error (status: {self.status_code}): {self.message}"


class NotFoundError(RexError):
    """A requested resource does not exist (404)."""

    def __init__(self, resource_type: str, name: str) -> None:
        super().__init__(f"{resource_type} not found: {name}")
        self.resource_type = resource_type
        self.name = name

    def __str__(self) -> str:
        return f"{self.resource_type} not found: {self.name}"


class RateLimitError(RexError):
    """The registry refused the request because of rate limiting (429)."""

    _prefix = "Rate limit"

    def __init__(self, message: str, retry_after: int | None = None) -> None:
        super().__init__(message)
        self.retry_after = retry_after


class ServerError(RexError):
    """The registry reported a server-side failure (5xx)."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code

    def __str__(self) -> str:
        return f"Server error (status: {self.status_code}): {self.message}"


class ValidationError(RexError):
    """Invalid input or content, such as a malformed manifest or digest mismatch."""

    _prefix = "Validation error"


class ConfigError(RexError):
    """Invalid or unreadable configuration or local storage."""

    _prefix = "Configuration error"

    def __init__(
        self,
        message: str,
        path: str | None = None,
        source: BaseException | None = None,
    ) -> None:
        super().__init__(message, source)
        self.path = path