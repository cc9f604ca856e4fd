"""Detection rule catalog for CSS and JavaScript sources.

Each rule is matched against one line at a time. Rule order only affects the
order of results, never whether something is detected.
"""

from __future__ import annotations

import re
from typing import Final, Literal

from .model import PatternRule

LanguageFamily = Literal["css", "javascript"]


def _css(pattern: str, lookup_id: str, fallback_name: str) -> PatternRule:
    return PatternRule(re.compile(pattern, re.IGNORECASE), lookup_id, fallback_name)


def _js(pattern: str, lookup_id: str, fallback_name: str) -> PatternRule:
    return PatternRule(re.compile(pattern), lookup_id, fallback_name)


CSS_RULES: Final[tuple[PatternRule, ...]] = (
    _css(r"container-type\s*:", "container-queries", "CSS Container Queries (container-type)"),
    _css(r"@container\s+", "container-queries", "CSS Container Queries (@container)"),
    _css(r"content-visibility\s*:", "content-visibility", "content-visibility"),
    _css(r"clamp\s*\(", "css-math-functions", "clamp()"),
    _css(r":has\s*\(", "css-has", ":has() selector"),
    _css(r"background-clip\s*:\s*text", "background-clip-text", "background-clip: text"),
    _css(r"@layer\s+", "cascade-layers", "CSS Cascade Layers (@layer)"),
    _css(r"aspect-ratio\s*:", "aspect-ratio", "aspect-ratio"),
    _css(r":is\s*\(", "css-is", ":is() selector"),
    _css(r":where\s*\(", "css-where", ":where() selector"),
    _css(r"gap\s*:", "flexbox-gap", "Flexbox gap"),
    _css(r"@supports\s+", "css-supports", "@supports"),
    _css(r"grid-template-columns\s*:", "css-grid", "CSS Grid"),
    _css(r"display\s*:\s*flex", "flexbox", "Flexbox"),
    _css(r"display\s*:\s*grid", "css-grid", "CSS Grid Layout"),
    _css(r"@property\s+", "css-at-property", "@property"),
    _css(r"view-transition", "view-transitions", "View Transitions"),
    _css(r"anchor-name\s*:", "css-anchor-positioning", "CSS Anchor Positioning"),
    _css(r"color-mix\s*\(", "color-mix", "color-mix()"),
)

JS_RULES: Final[tuple[PatternRule, ...]] = (
    _js(r"new\s+URLPattern\s*\(", "urlpattern", "URLPattern API"),
    _js(r"\?\.\s*", "optional-chaining", "Optional Chaining (?.)"),
    _js(r"\?\?", "nullish-coalescing", "Nullish Coalescing (??)"),
    _js(r"^(?!.*function).*await\s+", "top-level-await", "Top-level await"),
    _js(r"\bstructuredClone\s*\(", "structuredclone", "structuredClone()"),
    _js(r"Array\.prototype\.at\s*\(|\.at\s*\(", "array-at", "Array.prototype.at()"),
    _js(r"Object\.hasOwn\s*\(", "object-hasown", "Object.hasOwn()"),
    _js(r"Promise\.allSettled\s*\(", "promise-allsettled", "Promise.allSettled()"),
    _js(r"\bimport\.meta\b", "import-meta", "import.meta"),
    _js(r"BigInt\s*\(", "bigint", "BigInt"),
    _js(r"Promise\s*\(", "promises", "Promise"),
    _js(r"async\s+", "async-functions", "Async Functions"),
    _js(r"Object\.groupBy\s*\(", "object-group-by", "Object.groupBy()"),
    _js(r"Array\.fromAsync\s*\(", "array-from-async", "Array.fromAsync()"),
    _js(r"Promise\.withResolvers\s*\(", "promise-withresolvers", "Promise.withResolvers()"),
)

DEFAULT_CATALOG: Final[dict[LanguageFamily, tuple[PatternRule, ...]]] = {
    "css": CSS_RULES,
    "javascript": JS_RULES,
}

_LANGUAGE_FAMILIES: Final[dict[str, LanguageFamily]] = {
    "css": "css",
    "javascript": "javascript",
    "typescript": "javascript",
}


def language_family(language: str | None) -> LanguageFamily | None:
    """Map an editor language id to the rule family that scans it.

    Ids are matched exactly; ``"CSS"`` is not ``"css"``.
    """
    if not isinstance(language, str):
        return None
    return _LANGUAGE_FAMILIES.get(language)


def rules_for(language: str | None) -> tuple[PatternRule, ...]:
    """Return the rules for a language, or no rules when it is unsupported."""
    family = language_family(language)
    if family is None:
        return ()
    return DEFAULT_CATALOG[family]
