"""Summaries, compatibility score and recommendations for detected features."""

from __future__ import annotations

from collections.abc import Sequence
import math

from .constants import SEVERITY_ORDER, STATUS_WEIGHTS
from .model import (
    CompatibilityReport,
    DetectedFeature,
    FeatureStatus,
    Recommendation,
    StatusSummary,
)

_STATUSES: tuple[FeatureStatus, ...] = (
    "widely_available",
    "newly_available",
    "limited_availability",
    "unknown",
)


def summarize(features: Sequence[DetectedFeature]) -> StatusSummary:
    counts = dict.fromkeys(_STATUSES, 0)
    for feature in features:
        if feature.status in counts:
            counts[feature.status] += 1
    return StatusSummary(total=len(features), **counts)


def group_by_status(features: Sequence[DetectedFeature]) -> dict[FeatureStatus, list[DetectedFeature]]:
    grouped: dict[FeatureStatus, list[DetectedFeature]] = {status: [] for status in _STATUSES}
    for feature in features:
        grouped.setdefault(feature.status, []).append(feature)
    return grouped


def score(features: Sequence[DetectedFeature]) -> int:
    """Weighted mean of status weights as an integer in ``0..100``.

    No features means nothing can break, so the score is 100.
    """
    if not features:
        return 100

    total = sum(STATUS_WEIGHTS.get(feature.status, STATUS_WEIGHTS["unknown"]) for feature in features)
    mean = total / len(features)
    if not math.isfinite(mean):
        return 100
    # Half-up rounding; round() would send 62.5 to 62.
    return max(0, min(100, math.floor(mean + 0.5)))


def _limited_recommendation(feature: DetectedFeature) -> Recommendation:
    name = feature.name
    lowered = name.lower()
    if "urlpattern" in lowered:
        return Recommendation(
            feature=name,
            suggestion=(
                "Consider using a polyfill like 'urlpattern-polyfill' "
                "or use traditional URL parsing with RegExp"
            ),
            severity="error",
            alternatives=("url-pattern library", "path-to-regexp"),
            polyfill="urlpattern-polyfill",
        )
    if "view transition" in lowered:
        return Recommendation(
            feature=name,
            suggestion=(
                "View Transitions have limited support. "
                "Provide fallback animations using CSS transitions"
            ),
            severity="error",
            alternatives=("CSS transitions", "FLIP technique", "Framer Motion"),
        )
    if "anchor positioning" in lowered:
        return Recommendation(
            feature=name,
            suggestion=(
                "CSS Anchor Positioning is experimental. "
                "Use JavaScript positioning libraries instead"
            ),
            severity="error",
            alternatives=("Floating UI", "Popper.js", "Tether"),
        )
    if "object.groupby" in lowered:
        return Recommendation(
            feature=name,
            suggestion=(
                "Object.groupBy() has limited support. "
                "Use Array.reduce() or lodash.groupBy as alternatives"
            ),
            severity="warning",
            alternatives=("Array.reduce()", "lodash.groupBy"),
            polyfill="core-js",
        )
    return Recommendation(
        feature=name,
        suggestion=(
            f"{name} has limited browser support. "
            "Consider using polyfills or progressive enhancement"
        ),
        severity="error",
    )


def recommend(features: Sequence[DetectedFeature]) -> list[Recommendation]:
    """Build one recommendation per underlying feature, most severe first."""
    recommendations: list[Recommendation] = []
    seen: set[str] = set()

    for feature in features:
        key = feature.feature_id or feature.name
        if key in seen:
            continue
        seen.add(key)

        if feature.status == "limited_availability":
            recommendations.append(_limited_recommendation(feature))
        elif feature.status == "newly_available":
            recommendations.append(
                Recommendation(
                    feature=feature.name,
                    suggestion=(
                        f"{feature.name} is newly available. Test thoroughly across "
                        "target browsers before deploying to production"
                    ),
                    severity="warning",
                )
            )

    has_limited = any(feature.status == "limited_availability" for feature in features)
    if has_limited and not any(item.severity == "error" for item in recommendations):
        recommendations.append(
            Recommendation(
                feature="Limited Features Detected",
                suggestion=(
                    "Consider adding polyfills or using progressive enhancement "
                    "for better browser support"
                ),
                severity="warning",
            )
        )

    return sorted(recommendations, key=lambda item: SEVERITY_ORDER[item.severity])


def build_report(features: Sequence[DetectedFeature]) -> CompatibilityReport:
    return CompatibilityReport(
        score=score(features),
        total=len(features),
        by_status=group_by_status(features),
        recommendations=recommend(features),
        stats=summarize(features),
    )
