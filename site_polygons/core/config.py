"""Engine configuration loaded from environment variables.

All configuration values have sensible defaults. The orchestration layer
calls ``EngineConfig.from_env()`` once at startup and passes the result
to the operations that accept a ``config`` keyword.

Fail-fast validation:
    ``from_env()`` raises ``ConfigValidationError`` if any value is out
    of its valid range, so bad configuration is caught at startup rather
    than on the first request.
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass

from site_polygons.core.constants import (
    DEFAULT_MAX_VERTICES,
    DEFAULT_STORAGE_CRS,
    RING_CLOSURE_TOLERANCE,
)
from site_polygons.core.exceptions import SitePolygonError

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


class ConfigValidationError(SitePolygonError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
        message: Human-readable description of the valid range.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Immutable geometry engine configuration.

    Attributes:
        storage_crs: CRS in which a feature's stored area is computed.
            Must resolve to a geographic CRS; ``create_feature`` rejects
            a projected one with ``ConfigValidationError``.
        max_vertices: Upper bound on total vertices per polygon.
        ring_closure_tolerance: Per-component tolerance when deciding
            whether a ring's last point equals its first.
        enforce_geographic_bounds: Reject longitudes/latitudes outside
            WGS 84 bounds when validating geographic coordinates.
    """

    storage_crs: str = DEFAULT_STORAGE_CRS
    max_vertices: int = DEFAULT_MAX_VERTICES
    ring_closure_tolerance: float = RING_CLOSURE_TOLERANCE
    enforce_geographic_bounds: bool = True

    @classmethod
    def from_env(cls) -> EngineConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If a value is out of range or a
                boolean flag is not recognised.
            ValueError: If a numeric environment variable cannot be
                parsed (e.g. ``SITE_MAX_VERTICES=abc``).
        """
        config = cls(
            storage_crs=os.getenv("SITE_STORAGE_CRS", DEFAULT_STORAGE_CRS),
            max_vertices=int(os.getenv("SITE_MAX_VERTICES", str(DEFAULT_MAX_VERTICES))),
            ring_closure_tolerance=float(
                os.getenv("SITE_RING_CLOSURE_TOLERANCE", str(RING_CLOSURE_TOLERANCE))
            ),
            enforce_geographic_bounds=_parse_bool(
                "SITE_ENFORCE_GEOGRAPHIC_BOUNDS",
                os.getenv("SITE_ENFORCE_GEOGRAPHIC_BOUNDS", "true"),
            ),
        )
        _validate(config)
        return config


def _parse_bool(key: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigValidationError(key, raw, "must be a boolean (true/false)")


def _validate(config: EngineConfig) -> None:
    """Validate configuration ranges.  Raises ``ConfigValidationError``."""
    if not config.storage_crs:
        raise ConfigValidationError(
            "SITE_STORAGE_CRS",
            config.storage_crs,
            "must not be empty",
        )

    if config.max_vertices < 4:
        raise ConfigValidationError(
            "SITE_MAX_VERTICES",
            config.max_vertices,
            "must be >= 4 (a closed triangle)",
        )

    tolerance = config.ring_closure_tolerance
    if not math.isfinite(tolerance) or tolerance < 0:
        raise ConfigValidationError(
            "SITE_RING_CLOSURE_TOLERANCE",
            tolerance,
            "must be a finite value >= 0",
        )
