"""Registry credentials and WWW-Authenticate challenge parsing."""

from __future__ import annotations

import base64
from abc import ABC, abstractmethod
from dataclasses import dataclass

from .errors import ValidationError


class Credentials(ABC):
    """Credentials used to authenticate against a registry."""

    @abstractmethod
    def header_value(self) -> str | None:
        """Return the Authorization header value, or None when none is sent."""


@dataclass(frozen=True)
class AnonymousCredentials(Credentials):
    """No authentication."""

    def header_value(self) -> str | None:
        return None


@dataclass(frozen=True)
class BasicCredentials(Credentials):
    """HTTP Basic authentication."""

    username: str
    password: str

    def header_value(self) -> str | None:
        raw = f"{self.username}:{self.password}".encode("utf-8")
        return "Basic " + base64.b64encode(raw).decode("ascii")


@dataclass(frozen=True)
class BearerCredentials(Credentials):
    """Bearer token authentication."""

    token: str

    def header_value(self) -> str | None:
        return f"Bearer {self.token}"


@dataclass(frozen=True)
class AuthChallenge:
    """Information parsed from a WWW-Authenticate header."""

    scheme: str
    realm: str
    service: str | None = None
    scope: str | None = None

    @classmethod
    def parse(cls, header: str) -> AuthChallenge:
        """Parse a WWW-Authenticate header value."""
        scheme, sep, params = header.strip().partition(" ")
        if not sep:
            raise ValidationError("Invalid WWW-Authenticate header format")

        values: dict[str, str] = {}
        for param in params.split(","):
            key, eq, value = param.strip().partition("=")
            if not eq:
                continue
            key = key.strip()
            if key in ("realm", "service", "scope"):
                values[key] = value.strip().strip('"')

        if "realm" not in values:
            raise ValidationError(
                "WWW-Authenticate header missing required 'realm' parameter"
            )

        return cls(
            scheme=scheme,
            realm=values["realm"],
            service=values.get("service"),
            scope=values.get("scope"),
        )