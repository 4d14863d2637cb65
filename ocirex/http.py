"""HTTP helpers shared by the registry client."""

from __future__ import annotations

from dataclasses import dataclass, replace

import httpx

from .errors import (
    AuthenticationError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    RexError,
    ServerError,
    ValidationError,
)

MANIFEST_ACCEPT = ", ".join(
    [
        "application/vnd.oci.image.manifest.v1+json",
        "application/vnd.oci.image.index.v1+json",
        "application/vnd.docker.distribution.manifest.v2+json",
        "application/vnd.docker.distribution.manifest.list.v2+json",
    ]
)

_SERVER_ERRORS = {500, 502, 503, 504}


@dataclass(frozen=True)
class RegistryVersion:
    """Version information reported by a registry."""

    api_version: str | None = None


@dataclass(frozen=True)
class ClientConfig:
    """HTTP client settings."""

    timeout_seconds: int = 30
    max_idle_per_host: int = 10

    def with_timeout(self, seconds: int) -> ClientConfig:
        """Return a copy with a different request timeout."""
        return replace(self, timeout_seconds=seconds)

    def with_max_idle_per_host(self, maximum: int) -> ClientConfig:
        """Return a copy with a different idle connection limit."""
        return replace(self, max_idle_per_host=maximum)


def normalize_url(url: str) -> str:
    """Add a default http scheme and strip trailing slashes."""
    url = url.strip()
    if not url:
        raise ValidationError("Registry URL cannot be empty")
    if not url.startswith(("http://", "https://")):
        url = f"http://{url}"
    return url.rstrip("/")


def extract_next_link(link_header: str | None) -> str | None:
    """Return the path of the rel="next" entry in a Link header, if any."""
    if not link_header:
        return None
    for part in link_header.split(","):
        part = part.strip()
        if 'rel="next"' not in part and "rel='next'" not in part:
            continue
        start = part.find("<")
        end = part.find(">")
        if start != -1 and end > start:
            return part[start + 1 : end]
    return None


def _response_url(response: httpx.Response) -> str:
    try:
        return str(response.url)
    except RuntimeError:
        return ""


def _response_body(response: httpx.Response) -> str:
    try:
        response.read()
        return response.text
    except (httpx.HTTPError, httpx.StreamError, UnicodeDecodeError):
        return "(unable to read response body)"


def check_response(response: httpx.Response) -> httpx.Response:
    """Return a successful response; raise the matching error otherwise."""
    if response.is_success:
        return response

    status = response.status_code
    url = _response_url(response)
    body = _response_body(response)

    if status == 401:
        raise AuthenticationError(f"Authentication required for {url}: {body}", 401)
    if status == 403:
        raise AuthenticationError(f"Access forbidden for {url}: {body}", 403)
    if status == 404:
        raise NotFoundError("endpoint", url)
    if status == 429:
        raise RateLimitError(f"Rate limit exceeded for {url}", None)
    if status in _SERVER_ERRORS:
        raise ServerError(f"Server error from {url}: {body}", status)
    raise NetworkError(f"HTTP {status} from {url}: {body}")


def translate_transport_error(error: httpx.HTTPError, registry_url: str) -> RexError:
    """Describe a transport failure as a NetworkError."""
    if isinstance(error, httpx.TimeoutException):
        return NetworkError(f"Request to {registry_url} timed out after 30 seconds")
    if isinstance(error, httpx.ConnectError):
        return NetworkError(f"Failed to connect to registry at {registry_url}", error)
    if isinstance(error, httpx.RequestError):
        return NetworkError(f"Failed to send request to {registry_url}", error)
    return NetworkError(f"Network error communicating with {registry_url}", error)