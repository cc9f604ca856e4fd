"""Constants used across pywebbaseline."""

from __future__ import annotations

from typing import Final

WEBSTATUS_BASE_URL: Final[str] = "https://api.webstatus.dev"
FEATURES_URL: Final[str] = f"{WEBSTATUS_BASE_URL}/v1/features"
CANIUSE_URL_TEMPLATE: Final[str] = "https://caniuse.com/{feature}"

DEFAULT_TIMEOUT_SECONDS: Final[float] = 10.0
CATALOG_TTL_SECONDS: Final[float] = 30 * 60.0

# Columns either side of a feature span that still count as "near" it.
POSITION_TOLERANCE: Final[int] = 10

TRACKED_BROWSERS: Final[tuple[str, ...]] = ("chrome", "firefox", "safari", "edge")
MOBILE_IMPLEMENTATION_MARKERS: Final[tuple[str, ...]] = ("android", "ios", "mobile")
NOT_SUPPORTED_MARKER: Final[str] = "❌"

BROWSER_LABELS: Final[dict[str, str]] = {
    "chrome": "Chrome",
    "firefox": "Firefox",
    "safari": "Safari",
    "edge": "Edge",
}

STATUS_WEIGHTS: Final[dict[str, int]] = {
    "widely_available": 100,
    "newly_available": 75,
    "limited_availability": 30,
    "unknown": 50,
}

STATUS_ICON_MAP: Final[dict[str, str]] = {
    "widely_available": "✅",
    "newly_available": "⚠️",
    "limited_availability": "❌",
    "unknown": "❓",
}

STATUS_LABEL_MAP: Final[dict[str, str]] = {
    "widely_available": "Widely Available",
    "newly_available": "Newly Available",
    "limited_availability": "Limited Availability",
    "unknown": "Unknown",
}

STATUS_HINT_MAP: Final[dict[str, str]] = {
    "widely_available": "Safe to use in production",
    "newly_available": "Recently became Baseline",
    "limited_availability": "Use with caution",
    "unknown": "Status not determined",
}

STATUS_STYLE_MAP: Final[dict[str, str]] = {
    "widely_available": "green",
    "newly_available": "yellow",
    "limited_availability": "red",
    "unknown": "bright_black",
}

SEVERITY_ORDER: Final[dict[str, int]] = {"error": 0, "warning": 1, "info": 2}

DEBUG_ENV_VAR: Final[str] = "PYWEBBASELINE_DEBUG"

LANGUAGE_BY_SUFFIX: Final[dict[str, str]] = {
    ".css": "css",
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".jsx": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
}
