"""Catalog payload parser for the web platform status API."""

from __future__ import annotations

from typing import Any, cast

from .constants import FEATURES_URL
from .exceptions import ContentError
from .model import BaselineInfo, BaselineTier, BrowserImplementation, FeatureMetadataRecord
from .util.text import normalize_whitespace

_BASELINE_TIERS: tuple[BaselineTier, ...] = ("widely", "newly", "limited")


def _optional_str(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped or None


def _first_nested(value: object, list_key: str, item_key: str) -> str | None:
    """Read ``value`` as a string, or as ``{list_key: [{item_key: ...}, ...]}``."""
    if isinstance(value, str):
        return _optional_str(value)
    if not isinstance(value, dict):
        return None
    items = value.get(list_key)
    if not isinstance(items, list):
        return None
    for item in items:
        if isinstance(item, dict):
            found = _optional_str(item.get(item_key))
            if found:
                return found
    return None


def _parse_baseline(value: object) -> BaselineInfo | None:
    if not isinstance(value, dict):
        return None
    raw_status = value.get("status")
    status = raw_status if raw_status in _BASELINE_TIERS else None
    return BaselineInfo(
        status=cast("BaselineTier | None", status),
        low_date=_optional_str(value.get("low_date")),
        high_date=_optional_str(value.get("high_date")),
    )


def _parse_implementations(value: object) -> dict[str, BrowserImplementation]:
    if not isinstance(value, dict):
        return {}
    output: dict[str, BrowserImplementation] = {}
    for key, entry in value.items():
        if not isinstance(key, str) or not isinstance(entry, dict):
            continue
        status = _optional_str(entry.get("status"))
        if status is None:
            continue
        output[key] = BrowserImplementation(
            status=status,
            version=_optional_str(entry.get("version")),
            date=_optional_str(entry.get("date")),
        )
    return output


def parse_feature_record(entry: object) -> FeatureMetadataRecord | None:
    """Validate one catalog entry; entries without an id and name are dropped."""
    if not isinstance(entry, dict):
        return None
    feature_id = _optional_str(entry.get("feature_id"))
    name = entry.get("name")
    if feature_id is None or not isinstance(name, str) or not name.strip():
        return None

    description = _optional_str(entry.get("description"))
    return FeatureMetadataRecord(
        feature_id=feature_id,
        name=normalize_whitespace(name),
        description=normalize_whitespace(description) if description else None,
        spec=_first_nested(entry.get("spec"), "links", "link"),
        caniuse=_first_nested(entry.get("caniuse"), "items", "id"),
        mdn_url=_optional_str(entry.get("mdn_url")),
        baseline=_parse_baseline(entry.get("baseline")),
        browser_implementations=_parse_implementations(entry.get("browser_implementations")),
    )


def parse_catalog(payload: Any, url: str = FEATURES_URL) -> list[FeatureMetadataRecord]:
    """Turn a ``{"data": [...]}`` payload into records, keeping catalog order."""
    if not isinstance(payload, dict):
        raise ContentError(url, reason="unexpected")

    entries = payload.get("data")
    if not isinstance(entries, list):
        return []

    records: list[FeatureMetadataRecord] = []
    for entry in entries:
        record = parse_feature_record(entry)
        if record is not None:
            records.append(record)
    return records
