"""Feature detection engine.

Detection is lexical: every rule of the language's catalog runs over every
line of the source, each match becomes one ``DetectedFeature`` and is
enriched with catalog metadata when the status service knows the feature.
Constructs spanning several lines are not recognized.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
import logging

from .cache import DetectionCache
from .constants import POSITION_TOLERANCE
from .model import DetectedFeature, FeatureMetadataRecord, FeatureType, PatternRule
from .patterns import DEFAULT_CATALOG, LanguageFamily, language_family
from .position import resolve
from .util.text import split_lines
from .webstatus import WebStatusClient, baseline_date, classify, extract_browser_support

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Match:
    rule: PatternRule
    line_index: int
    offset: int


def scan(lines: Sequence[str], rules: Sequence[PatternRule]) -> list[_Match]:
    """Find every rule match, ordered by rule, then line, then offset.

    A (lookup id, line, offset) position is reported once even when several
    rules hit it.
    """
    matches: list[_Match] = []
    seen: set[tuple[str, int, int]] = set()
    for rule in rules:
        for line_index, line in enumerate(lines):
            for match in rule.pattern.finditer(line):
                key = (rule.lookup_id, line_index, match.start())
                if key in seen:
                    continue
                seen.add(key)
                matches.append(_Match(rule, line_index, match.start()))
    return matches


def _fallback_feature(match: _Match, feature_type: FeatureType) -> DetectedFeature:
    return DetectedFeature(
        name=match.rule.fallback_name,
        type=feature_type,
        line=match.line_index + 1,
        column=match.offset,
        status="unknown",
        description=match.rule.fallback_name,
    )


def _enriched_feature(
    match: _Match,
    feature_type: FeatureType,
    record: FeatureMetadataRecord,
) -> DetectedFeature:
    return DetectedFeature(
        name=record.name,
        type=feature_type,
        line=match.line_index + 1,
        column=match.offset,
        status=classify(record),
        description=record.description or match.rule.fallback_name,
        feature_id=record.feature_id,
        browser_support=extract_browser_support(record),
        baseline_date=baseline_date(record),
        spec=record.spec,
        caniuse=record.caniuse,
    )


class FeatureDetector:
    """Detects web platform features in CSS and JavaScript sources."""

    def __init__(
        self,
        client: WebStatusClient | None = None,
        *,
        catalog: Mapping[LanguageFamily, Sequence[PatternRule]] | None = None,
        cache: DetectionCache | None = None,
        tolerance: int = POSITION_TOLERANCE,
    ) -> None:
        self.client = client if client is not None else WebStatusClient()
        self.catalog = catalog if catalog is not None else DEFAULT_CATALOG
        self.cache = cache if cache is not None else DetectionCache()
        self.tolerance = tolerance
        self._sequence = 0

    async def _lookup(self, lookup_id: str) -> FeatureMetadataRecord | None:
        try:
            return await self.client.search_feature_by_name(lookup_id)
        except Exception as exc:
            LOGGER.warning("Lookup for %s failed: %s", lookup_id, exc)
            return None

    async def detect(self, source_text: str | None, language: str | None) -> list[DetectedFeature]:
        """Detect features in ``source_text``; unsupported languages yield nothing."""
        family = language_family(language)
        if family is None:
            return []
        lines = split_lines(source_text)
        if not lines:
            return []

        matches = scan(lines, self.catalog.get(family, ()))
        if not matches:
            return []

        # One lookup per id, however many times the id matched.
        lookup_ids = list(dict.fromkeys(match.rule.lookup_id for match in matches))
        records = await asyncio.gather(*(self._lookup(lookup_id) for lookup_id in lookup_ids))
        by_id = dict(zip(lookup_ids, records))

        features: list[DetectedFeature] = []
        for match in matches:
            record = by_id.get(match.rule.lookup_id)
            if record is None:
                features.append(_fallback_feature(match, family))
            else:
                features.append(_enriched_feature(match, family, record))
        LOGGER.debug("Detected %d %s features", len(features), family)
        return features

    async def detect_with_cache(
        self, source_text: str | None, language: str | None
    ) -> list[DetectedFeature]:
        """Like ``detect`` but reuse the last result while text and language are unchanged."""
        text = source_text if isinstance(source_text, str) else ""
        lang = language if isinstance(language, str) else ""
        cached = self.cache.get(text, lang)
        if cached is not None:
            return cached

        self._sequence += 1
        sequence = self._sequence
        features = await self.detect(text, lang)
        if not self.cache.store(text, lang, features, sequence=sequence):
            LOGGER.debug("Dropped stale detection result #%d", sequence)
        return features

    def cached_features(self) -> list[DetectedFeature]:
        return self.cache.features

    def clear_cache(self) -> None:
        self.cache.clear()

    async def find_feature_at_position(
        self,
        source_text: str | None,
        line: int,
        column: int,
        language: str | None,
    ) -> DetectedFeature | None:
        """Detect (through the cache) and return the feature nearest a position."""
        features = await self.detect_with_cache(source_text, language)
        return resolve(features, line, column, tolerance=self.tolerance)

    def find_feature_at_position_cached(self, line: int, column: int) -> DetectedFeature | None:
        """Resolve a position against the last cached detection, without I/O."""
        return resolve(self.cache.features, line, column, tolerance=self.tolerance)
