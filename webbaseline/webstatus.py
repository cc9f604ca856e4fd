"""Web platform status catalog client.

The client fetches the whole feature catalog once, keeps it for a fixed time
and answers every lookup from that copy. Failures never escape: a catalog
that cannot be loaded is reported as an empty list and is not cached, so the
next call tries again.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
import logging
import time

from .cache import TTLCache
from .constants import (
    CATALOG_TTL_SECONDS,
    DEFAULT_TIMEOUT_SECONDS,
    FEATURES_URL,
    MOBILE_IMPLEMENTATION_MARKERS,
    NOT_SUPPORTED_MARKER,
    TRACKED_BROWSERS,
)
from .exceptions import BaselineError
from .http import fetch_feature_catalog
from .model import FeatureMetadataRecord, FeatureStatus, StatusSummary
from .parse_catalog import parse_catalog

LOGGER = logging.getLogger(__name__)

_CATALOG_KEY = "catalog"

_STATUS_BY_TIER: dict[str, FeatureStatus] = {
    "widely": "widely_available",
    "newly": "newly_available",
    "limited": "limited_availability",
}


def classify(record: FeatureMetadataRecord | None) -> FeatureStatus:
    """Map a record's Baseline tier onto a feature status."""
    if record is None or record.baseline is None:
        return "unknown"
    return _STATUS_BY_TIER.get(record.baseline.status or "", "unknown")


def _tracked_browser(implementation_key: str) -> str | None:
    key = implementation_key.lower()
    if any(marker in key for marker in MOBILE_IMPLEMENTATION_MARKERS):
        return None
    for browser in TRACKED_BROWSERS:
        if browser in key:
            return browser
    return None


def extract_browser_support(record: FeatureMetadataRecord) -> dict[str, str]:
    """Summarize desktop browser support as ``{browser: version-or-marker}``.

    Browsers with partial or unknown status are left out; a missing key means
    there is no data, not that the feature is unsupported.
    """
    support: dict[str, str] = {}
    for key, implementation in record.browser_implementations.items():
        browser = _tracked_browser(key)
        if browser is None:
            continue
        if implementation.status == "available" and implementation.version:
            support[browser] = implementation.version
        elif implementation.status == "unavailable":
            support[browser] = NOT_SUPPORTED_MARKER
    return support


def baseline_date(record: FeatureMetadataRecord) -> str | None:
    """Return when the feature reached its tier, preferring the high date."""
    if record.baseline is None:
        return None
    return record.baseline.high_date or record.baseline.low_date


class WebStatusClient:
    """Cached access to the web platform status feature catalog."""

    def __init__(
        self,
        url: str = FEATURES_URL,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        ttl_seconds: float = CATALOG_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._catalog: TTLCache[str, list[FeatureMetadataRecord]] = TTLCache(
            ttl_seconds, clock=clock
        )
        self._by_id: TTLCache[str, FeatureMetadataRecord] = TTLCache(ttl_seconds, clock=clock)
        self._by_lookup: TTLCache[str, FeatureMetadataRecord] = TTLCache(ttl_seconds, clock=clock)
        self._inflight: asyncio.Future[list[FeatureMetadataRecord]] | None = None

    def invalidate(self) -> None:
        """Forget the cached catalog and every memoized lookup."""
        self._catalog.clear()
        self._by_id.clear()
        self._by_lookup.clear()

    def _catalog_is_fresh(self) -> bool:
        # Memoized lookups are only valid as long as the catalog they came from.
        return self._catalog.get(_CATALOG_KEY) is not None

    async def _load_catalog(self) -> list[FeatureMetadataRecord]:
        try:
            payload = await fetch_feature_catalog(self.url, timeout=self.timeout)
            records = parse_catalog(payload, self.url)
        except BaselineError as exc:
            LOGGER.warning("Feature catalog unavailable: %s", exc)
            return []
        except Exception as exc:
            LOGGER.warning("Feature catalog unavailable: %s: %s", exc.__class__.__name__, exc)
            return []

        self._catalog.set(_CATALOG_KEY, records)
        self._by_id.clear()
        self._by_lookup.clear()
        for record in records:
            self._by_id.set(record.feature_id, record)
        LOGGER.debug("Cached %d features from %s", len(records), self.url)
        return records

    async def fetch_all_features(self) -> list[FeatureMetadataRecord]:
        """Return the full catalog, fetching it only when the cached copy is stale.

        An empty list means no data is available. Concurrent callers share a
        single in-flight request.
        """
        cached = self._catalog.get(_CATALOG_KEY)
        if cached is not None:
            LOGGER.debug("Returning %d cached features", len(cached))
            return list(cached)

        task = self._inflight
        if task is None or task.done():
            task = asyncio.ensure_future(self._load_catalog())
            self._inflight = task
        try:
            return list(await asyncio.shield(task))
        finally:
            if self._inflight is task and task.done():
                self._inflight = None

    async def search_feature_by_name(self, name: str) -> FeatureMetadataRecord | None:
        """Find a feature by exact name, then by substring of name or id."""
        needle = name.strip().lower() if isinstance(name, str) else ""
        if not needle:
            return None

        if self._catalog_is_fresh():
            memoized = self._by_lookup.get(needle)
            if memoized is not None:
                return memoized

        features = await self.fetch_all_features()
        found = next((record for record in features if record.name.lower() == needle), None)
        if found is None:
            found = next(
                (
                    record
                    for record in features
                    if needle in record.name.lower() or needle in record.feature_id.lower()
                ),
                None,
            )

        LOGGER.debug("Lookup %r -> %s", name, found.feature_id if found else "not found")
        if found is not None:
            self._by_lookup.set(needle, found)
        return found

    async def get_feature(self, feature_id: str) -> FeatureMetadataRecord | None:
        """Return the record with exactly this feature id, if the catalog has one."""
        if self._catalog_is_fresh():
            record = self._by_id.get(feature_id)
            if record is not None:
                return record
        features = await self.fetch_all_features()
        return next((item for item in features if item.feature_id == feature_id), None)

    async def feature_stats(self) -> StatusSummary:
        """Count catalog features by Baseline status."""
        features = await self.fetch_all_features()
        counts: dict[str, int] = {
            "widely_available": 0,
            "newly_available": 0,
            "limited_availability": 0,
            "unknown": 0,
        }
        for record in features:
            counts[classify(record)] += 1
        return StatusSummary(total=len(features), **counts)
