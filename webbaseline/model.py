"""Data models for feature metadata, detections and reports."""

from __future__ import annotations

from dataclasses import dataclass, field
import re
from typing import Literal

FeatureStatus = Literal["widely_available", "newly_available", "limited_availability", "unknown"]
FeatureType = Literal["css", "javascript"]
BaselineTier = Literal["widely", "newly", "limited"]
Severity = Literal["error", "warning", "info"]


@dataclass(frozen=True)
class BaselineInfo:
    status: BaselineTier | None
    low_date: str | None = None
    high_date: str | None = None


@dataclass(frozen=True)
class BrowserImplementation:
    status: str
    version: str | None = None
    date: str | None = None


@dataclass(frozen=True)
class FeatureMetadataRecord:
    """One feature entry from the web platform status catalog."""

    feature_id: str
    name: str
    description: str | None = None
    spec: str | None = None
    caniuse: str | None = None
    mdn_url: str | None = None
    baseline: BaselineInfo | None = None
    browser_implementations: dict[str, BrowserImplementation] = field(default_factory=dict)


@dataclass(frozen=True)
class PatternRule:
    """A detection rule: what to look for, what to look up, what to call it."""

    pattern: re.Pattern[str]
    lookup_id: str
    fallback_name: str


@dataclass(frozen=True)
class DetectedFeature:
    """One occurrence of a recognized platform feature in source text.

    ``line`` is 1-based and ``column`` is the 0-based offset of the match
    within that line.
    """

    name: str
    type: FeatureType
    line: int
    column: int
    status: FeatureStatus
    description: str
    feature_id: str | None = None
    browser_support: dict[str, str] | None = None
    baseline_date: str | None = None
    spec: str | None = None
    caniuse: str | None = None


@dataclass(frozen=True)
class StatusSummary:
    widely_available: int = 0
    newly_available: int = 0
    limited_availability: int = 0
    unknown: int = 0
    total: int = 0


@dataclass(frozen=True)
class Recommendation:
    feature: str
    suggestion: str
    severity: Severity
    alternatives: tuple[str, ...] = ()
    polyfill: str | None = None


@dataclass(frozen=True)
class CompatibilityReport:
    score: int
    total: int
    by_status: dict[FeatureStatus, list[DetectedFeature]]
    recommendations: list[Recommendation]
    stats: StatusSummary
