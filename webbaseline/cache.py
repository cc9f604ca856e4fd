"""In-process caches for catalog data and detection results."""

from __future__ import annotations

from collections.abc import Callable, Hashable, Sequence
import time
from typing import Generic, TypeVar

from .model import DetectedFeature

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class TTLCache(Generic[K, V]):
    """Keyed store whose entries expire ``ttl_seconds`` after being set."""

    def __init__(
        self,
        ttl_seconds: float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[K, tuple[float, V]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def _is_fresh(self, stored_at: float) -> bool:
        return self._clock() - stored_at < self.ttl_seconds

    def get(self, key: K) -> V | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        stored_at, value = entry
        if not self._is_fresh(stored_at):
            del self._entries[key]
            return None
        return value

    def set(self, key: K, value: V) -> None:
        self._entries[key] = (self._clock(), value)

    def clear(self) -> None:
        self._entries.clear()

    def expire(self) -> int:
        """Drop stale entries and return how many were removed."""
        stale = [key for key, (stored_at, _) in self._entries.items() if not self._is_fresh(stored_at)]
        for key in stale:
            del self._entries[key]
        return len(stale)


class DetectionCache:
    """Single-slot memo of the most recent detection for one document.

    Every stored result carries the sequence number of the call that
    produced it; a result from an older call never replaces a newer one.
    """

    def __init__(self) -> None:
        self._key: tuple[str, str] | None = None
        self._features: tuple[DetectedFeature, ...] = ()
        self._sequence = -1

    @property
    def features(self) -> list[DetectedFeature]:
        return list(self._features)

    @property
    def sequence(self) -> int:
        return self._sequence

    def get(self, source_text: str, language: str) -> list[DetectedFeature] | None:
        if self._key != (source_text, language):
            return None
        return list(self._features)

    def store(
        self,
        source_text: str,
        language: str,
        features: Sequence[DetectedFeature],
        *,
        sequence: int,
    ) -> bool:
        if sequence < self._sequence:
            return False
        self._key = (source_text, language)
        self._features = tuple(features)
        self._sequence = sequence
        return True

    def clear(self) -> None:
        # Sequence is kept: results older than the last stored one stay rejected.
        self._key = None
        self._features = ()
