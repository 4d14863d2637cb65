"""Content digest parsing and validation."""

from __future__ import annotations

import re
from dataclasses import dataclass

from .errors import ValidationError

_ALGORITHM = re.compile(r"[a-z0-9]+(?:[.+_-][a-z0-9]+)*")
_ENCODED = re.compile(r"[a-zA-Z0-9=_-]+")
_HEX_LENGTHS = {"sha256": 64, "sha384": 96, "sha512": 128}
_LOWER_HEX = re.compile(r"[a-f0-9]+")


@dataclass(frozen=True)
class Digest:
    """A content digest such as ``sha256:<hex>``."""

    algorithm: str
    hex: str

    @classmethod
    def parse(cls, text: str) -> Digest:
        """Parse and validate a digest string."""
        try:
            algorithm, encoded = _split(text)
        except ValueError as exc:
            raise ValidationError(f"Invalid digest format: {exc}", exc) from exc
        return cls(algorithm, encoded)

    def __str__(self) -> str:
        return f"{self.algorithm}:{self.hex}"


def _split(text: str) -> tuple[str, str]:
    algorithm, sep, encoded = text.partition(":")
    if not sep:
        raise ValueError(f"digest {text!r} is missing an algorithm separator")
    if not _ALGORITHM.fullmatch(algorithm):
        raise ValueError(f"invalid digest algorithm {algorithm!r}")
    if not _ENCODED.fullmatch(encoded):
        raise ValueError(f"invalid digest value {encoded!r}")
    expected = _HEX_LENGTHS.get(algorithm)
    if expected is not None and (
        len(encoded) != expected or not _LOWER_HEX.fullmatch(encoded)
    ):
        raise ValueError(
            f"{algorithm} digest must be {expected} lowercase hex characters"
        )
    return algorithm, encoded