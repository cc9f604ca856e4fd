"""Map an editor position back to the detected feature under it."""

from __future__ import annotations

from collections.abc import Sequence

from .constants import POSITION_TOLERANCE
from .model import DetectedFeature


def resolve(
    features: Sequence[DetectedFeature],
    line: int,
    column: int,
    *,
    tolerance: int = POSITION_TOLERANCE,
) -> DetectedFeature | None:
    """Return the feature on ``line`` closest to ``column``.

    A lone feature on the line wins regardless of column. With several, a
    feature whose ``[column, column + len(name))`` span holds the position
    wins outright, then the nearest span edge within ``tolerance``. When
    nothing is near, the first feature on the line is returned.
    """
    on_line = [feature for feature in features if feature.line == line]
    if not on_line:
        return None
    if len(on_line) == 1:
        return on_line[0]

    best: DetectedFeature | None = None
    best_distance: int | None = None
    for feature in on_line:
        start = feature.column
        end = start + len(feature.name)
        if start <= column < end:
            return feature

        distance = min(abs(column - start), abs(column - end))
        if distance > tolerance:
            continue
        if best_distance is None or distance < best_distance:
            best = feature
            best_distance = distance

    return best if best is not None else on_line[0]
