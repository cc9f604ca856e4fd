from __future__ import annotations

import re

import pytest

from webbaseline.model import PatternRule
from webbaseline.patterns import CSS_RULES, JS_RULES, language_family, rules_for


def _hits(rules: tuple[PatternRule, ...], line: str) -> list[tuple[str, int]]:
    return [
        (rule.lookup_id, match.start()) for rule in rules for match in rule.pattern.finditer(line)
    ]


def test_rules_are_plain_data() -> None:
    for rule in CSS_RULES + JS_RULES:
        assert isinstance(rule.pattern, re.Pattern)
        assert rule.lookup_id
        assert rule.fallback_name


def test_css_rules_ignore_case_and_js_rules_do_not() -> None:
    assert all(rule.pattern.flags & re.IGNORECASE for rule in CSS_RULES)
    assert not any(rule.pattern.flags & re.IGNORECASE for rule in JS_RULES)
    assert ("flexbox", 0) in _hits(CSS_RULES, "DISPLAY: FLEX;")
    assert ("bigint", 0) not in _hits(JS_RULES, "bigint(10)")


def test_rule_matches_every_occurrence_on_a_line() -> None:
    assert _hits(JS_RULES, "a ?? b ?? c").count(("nullish-coalescing", 2)) == 1
    assert ("nullish-coalescing", 7) in _hits(JS_RULES, "a ?? b ?? c")


def test_one_line_can_match_several_rules() -> None:
    hits = _hits(CSS_RULES, ".card:has(img) { display: grid; gap: 1rem; }")
    lookup_ids = {lookup_id for lookup_id, _ in hits}

    assert {"css-has", "css-grid", "flexbox-gap"} <= lookup_ids


def test_top_level_await_skips_function_lines() -> None:
    assert ("top-level-await", 0) in _hits(JS_RULES, "const data = await load();")
    assert not any(
        lookup_id == "top-level-await"
        for lookup_id, _ in _hits(JS_RULES, "async function f() { await g(); }")
    )


@pytest.mark.parametrize(
    ("language", "family"),
    [
        ("css", "css"),
        ("CSS", None),
        ("javascript", "javascript"),
        ("typescript", "javascript"),
        (" TypeScript ", None),
        ("css ", None),
        ("python", None),
        ("", None),
        (None, None),
    ],
)
def test_language_family(language: str | None, family: str | None) -> None:
    assert language_family(language) == family


def test_rules_for() -> None:
    assert rules_for("css") is CSS_RULES
    assert rules_for("typescript") is JS_RULES
    assert rules_for("html") == ()
