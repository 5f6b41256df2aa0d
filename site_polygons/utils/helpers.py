"""Shared helper functions used across the models and activities.

Centralises timestamp and scalar coercion that the feature record,
the presentation layer and the bbox query all need.
"""

from __future__ import annotations

import math
from datetime import UTC, datetime

from site_polygons.core.exceptions import FeatureRecordError, InvalidCoordinateError


def parse_epoch(value: object, *, field_name: str = "epoch_id") -> datetime:
    """Parse an epoch timestamp into a timezone-aware UTC ``datetime``.

    Accepts a ``datetime`` or an ISO 8601 string (a trailing ``Z`` is
    understood). Naive values are taken to be UTC.

    Raises:
        FeatureRecordError: If the value is missing or unparseable.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = f"{text[:-1]}+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            msg = f"{field_name} is not an ISO 8601 timestamp: {value!r}"
            raise FeatureRecordError(msg) from exc
    else:
        msg = f"{field_name} is required, got {value!r}"
        raise FeatureRecordError(msg)

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def format_epoch(value: datetime) -> str:
    """Format an epoch as an ISO 8601 UTC string with a ``Z`` suffix."""
    return value.astimezone(UTC).isoformat().replace("+00:00", "Z")


def parse_finite_float(value: object, name: str) -> float:
    """Coerce a query parameter to a finite float.

    Raises:
        InvalidCoordinateError: If the value is not numeric or is NaN/Infinity.
    """
    if isinstance(value, bool):
        msg = f"{name} must be a number, got {value!r}"
        raise InvalidCoordinateError(msg)
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        msg = f"{name} must be a number, got {value!r}"
        raise InvalidCoordinateError(msg) from exc
    if not math.isfinite(number):
        msg = f"{name} must be finite, got {value!r}"
        raise InvalidCoordinateError(msg)
    return number


def round_area(area_m2: float) -> float:
    """Round an area to centimetre-squared precision for presentation."""
    return round(area_m2, 2)
