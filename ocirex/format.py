"""Human-readable formatting of sizes and timestamps."""

from __future__ import annotations

from datetime import datetime, timezone

import humanize

_BINARY_UNITS = ("B", "KiB", "MiB", "GiB", "TiB", "PiB", "EiB")
_DECIMAL_UNITS = ("B", "kB", "MB", "GB", "TB", "PB", "EB")


def _format(size_bytes: int, base: int, units: tuple[str, ...]) -> str:
    if size_bytes < 0:
        raise ValueError("size must not be negative")
    value = float(size_bytes)
    unit = units[0]
    for unit in units:
        if value < base or unit == units[-1]:
            break
        value /= base
    if unit == units[0]:
        return f"{size_bytes} {unit}"
    if value == int(value):
        return f"{int(value)} {unit}"
    return f"{value:.2f} {unit}"


def format_size(size_bytes: int) -> str:
    """Format a byte count using binary units (KiB, MiB, ...)."""
    return _format(size_bytes, 1024, _BINARY_UNITS)


def format_size_decimal(size_bytes: int) -> str:
    """Format a byte count using decimal units (kB, MB, ...)."""
    return _format(size_bytes, 1000, _DECIMAL_UNITS)


def format_timestamp(timestamp: datetime) -> str:
    """Describe a timestamp relative to now, e.g. ``a day ago``."""
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return humanize.naturaltime(datetime.now(timezone.utc) - timestamp)