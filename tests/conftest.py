from __future__ import annotations

from typing import Any

import pytest


def _entry(
    feature_id: str,
    name: str,
    *,
    status: str | None = "widely",
    description: str | None = None,
    low_date: str | None = None,
    high_date: str | None = None,
    implementations: dict[str, dict[str, str]] | None = None,
    spec: object = None,
    caniuse: object = None,
) -> dict[str, Any]:
    entry: dict[str, Any] = {"feature_id": feature_id, "name": name}
    if description is not None:
        entry["description"] = description
    if status is not None or low_date or high_date:
        entry["baseline"] = {"status": status, "low_date": low_date, "high_date": high_date}
    if implementations is not None:
        entry["browser_implementations"] = implementations
    if spec is not None:
        entry["spec"] = spec
    if caniuse is not None:
        entry["caniuse"] = caniuse
    return entry


@pytest.fixture
def catalog_payload() -> dict[str, Any]:
    return {
        "data": [
            _entry(
                "grid",
                "Grid",
                description="CSS grid is a two-dimensional layout system.",
                low_date="2017-10-17",
                high_date="2020-04-17",
                implementations={
                    "chrome": {"status": "available", "version": "57"},
                    "chrome_android": {"status": "available", "version": "57"},
                    "edge": {"status": "available", "version": "16"},
                    "firefox": {"status": "available", "version": "52"},
                    "safari": {"status": "available", "version": "10.1"},
                    "safari_ios": {"status": "available", "version": "10.3"},
                },
                spec="https://drafts.csswg.org/css-grid-2/",
                caniuse="css-grid",
            ),
            _entry(
                "optional-chaining",
                "Optional chaining",
                description="The ?. operator accesses a property only if the object is not null.",
                low_date="2020-07-28",
                high_date="2023-01-28",
            ),
            _entry(
                "nullish-coalescing",
                "Nullish coalescing",
                status="newly",
                low_date="2020-09-01",
            ),
            _entry(
                "urlpattern",
                "URLPattern",
                status="limited",
                description="Match URLs against patterns.",
                implementations={
                    "chrome": {"status": "available", "version": "95"},
                    "firefox": {"status": "unavailable"},
                    "safari": {"status": "partial", "version": "18"},
                },
            ),
            _entry("view-transitions", "View transitions", status="limited"),
        ]
    }
