"""Two-tier cache: an in-memory LRU in front of files on disk."""

from __future__ import annotations

import json
import os
import time
from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from .config import CacheTtl
from .errors import ConfigError, ValidationError


class CacheType(Enum):
    """Kind of cached data; selects the TTL that applies."""

    CATALOG = "catalog"
    TAGS = "tags"
    MANIFEST = "manifest"
    CONFIG = "config"


@dataclass
class PruneStats:
    """Result of pruning the disk cache."""

    removed_files: int = 0
    reclaimed_space: int = 0


def _decode_entry(raw: bytes) -> dict[str, Any]:
    entry = json.loads(raw.decode("utf-8"))
    if not isinstance(entry, dict) or not {"data", "cached_at", "ttl"} <= entry.keys():
        raise ValueError("cache entry is missing required fields")
    return entry


def _expired(entry: dict[str, Any]) -> bool:
    elapsed = max(0.0, time.time() - float(entry["cached_at"]))
    return elapsed > float(entry["ttl"])


class Cache:
    """Caches JSON-serializable values in memory and under a directory."""

    def __init__(
        self, disk_path: str | Path, ttl_config: CacheTtl, memory_capacity: int
    ) -> None:
        if memory_capacity < 1:
            raise ValueError("memory_capacity must be at least 1")
        self.disk_path = Path(disk_path)
        self.ttl_config = ttl_config
        self.memory_capacity = memory_capacity
        self._memory: OrderedDict[str, bytes] = OrderedDict()

    def get(self, key: str) -> Any | None:
        """Return the cached value for ``key``, or None if absent or expired."""
        raw = self._memory.get(key)
        if raw is not None:
            entry = self._decode(raw, "Failed to deserialize L1 cache entry")
            if not _expired(entry):
                self._memory.move_to_end(key)
                return entry["data"]
            del self._memory[key]

        path = self._key_to_path(key)
        if not path.exists():
            return None
        try:
            raw = path.read_bytes()
        except OSError as exc:
            raise ConfigError("Failed to read L2 cache file", str(path), exc) from exc

        entry = self._decode(raw, "Failed to deserialize L2 cache entry")
        if _expired(entry):
            try:
                path.unlink()
            except OSError:
                pass
            return None

        self._remember(key, raw)
        return entry["data"]

    def set(self, key: str, data: Any, cache_type: CacheType) -> None:
        """Store ``data`` under ``key`` with the TTL for ``cache_type``."""
        entry = {
            "data": data,
            "cached_at": time.time(),
            "ttl": getattr(self.ttl_config, cache_type.value),
        }
        try:
            raw = json.dumps(entry).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise ValidationError("Failed to serialize cache data", exc) from exc

        path = self._key_to_path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ConfigError(
                "Failed to create cache directory", str(path.parent), exc
            ) from exc
        try:
            path.write_bytes(raw)
        except OSError as exc:
            raise ConfigError("Failed to write L2 cache file", str(path), exc) from exc

        self._remember(key, raw)

    def prune(self) -> PruneStats:
        """Remove expired files from the disk cache."""
        stats = PruneStats()
        if not self.disk_path.exists():
            return stats
        for directory, _dirs, files in os.walk(self.disk_path):
            for name in files:
                path = Path(directory) / name
                try:
                    entry = _decode_entry(path.read_bytes())
                    expired = _expired(entry)
                except (OSError, ValueError, TypeError):
                    continue
                if not expired:
                    continue
                try:
                    stats.reclaimed_space += path.stat().st_size
                except OSError:
                    pass
                try:
                    path.unlink()
                except OSError:
                    continue
                stats.removed_files += 1
        return stats

    def _remember(self, key: str, raw: bytes) -> None:
        self._memory[key] = raw
        self._memory.move_to_end(key)
        while len(self._memory) > self.memory_capacity:
            self._memory.popitem(last=False)

    @staticmethod
    def _decode(raw: bytes, message: str) -> dict[str, Any]:
        try:
            return _decode_entry(raw)
        except (ValueError, UnicodeDecodeError) as exc:
            raise ValidationError(message, exc) from exc

    def _key_to_path(self, key: str) -> Path:
        if ".." in key or key.startswith("/"):
            raise ValidationError("Invalid cache key format")
        return self.disk_path / key