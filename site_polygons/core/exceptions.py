"""Unified exception taxonomy for the geometry engine.

Every domain exception inherits from ``SitePolygonError`` and carries
structured context fields so the orchestration layer can translate a
failure into a user-facing response without inspecting message text.

Taxonomy categories
-------------------
- ``ValidationError``: bad geometry, coordinates or CRS input, never retryable.
- ``PermanentError``: unrecoverable engine failures, not retryable.
- ``ContractError``: record shape drift at the feature-store boundary.

Every exception exposes ``to_error_dict()`` for a stable structured
error payload suitable for API responses and logging.
"""

from __future__ import annotations


class SitePolygonError(Exception):
    """Base exception for all geometry-engine errors.

    Attributes:
        message: Human-readable error description.
        stage: Engine stage where the error occurred
            (e.g. ``"validate"``, ``"reproject"``).
        code: Machine-readable error code (e.g. ``"RING_UNCLOSED"``).
        retryable: Whether the caller may retry the operation.
        correlation_id: Request correlation identifier.
    """

    #: Default stage for subclasses (override via class attribute or kwarg).
    default_stage: str = ""
    #: Default code for subclasses (override via class attribute or kwarg).
    default_code: str = ""

    def __init__(
        self,
        message: str = "",
        *,
        stage: str = "",
        code: str = "",
        retryable: bool = False,
        correlation_id: str = "",
    ) -> None:
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        self.retryable = retryable
        self.correlation_id = correlation_id
        super().__init__(message)

    @property
    def category(self) -> str:
        """Return the error category based on concrete class.

        Engine failures are deterministic, so anything that is not a
        validation or contract error is ``"permanent"``.
        """
        if isinstance(self, ContractError):
            return "contract"
        if isinstance(self, ValidationError):
            return "validation"
        return "permanent"

    def to_error_dict(self) -> dict[str, object]:
        """Return a structured error payload with stable keys."""
        return {
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
            "retryable": self.retryable,
            "correlation_id": self.correlation_id,
        }


# ---------------------------------------------------------------------------
# Category base classes
# ---------------------------------------------------------------------------


class ValidationError(SitePolygonError):
    """Input or domain-model validation failure. Never retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class PermanentError(SitePolygonError):
    """Unrecoverable engine failure. Not retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class ContractError(SitePolygonError):
    """Record shape drift at the feature-store boundary. Never retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Geometry validation
# ---------------------------------------------------------------------------


class GeometryValidationError(ValidationError):
    """Raised when a submitted geometry is not a well-formed polygon."""

    default_stage = "validate"
    default_code = "GEOMETRY_INVALID"


class InvalidGeometryTypeError(GeometryValidationError):
    """Raised when the declared geometry type is not ``"Polygon"``."""

    default_code = "GEOMETRY_TYPE_INVALID"


class UnclosedRingError(GeometryValidationError):
    """Raised when a ring cannot form a closed boundary of at least 4 points."""

    default_code = "RING_UNCLOSED"


class InvalidCoordinateError(GeometryValidationError):
    """Raised for malformed, non-finite or out-of-bounds coordinates."""

    default_code = "COORDINATE_INVALID"


class GeometryTooLargeError(GeometryValidationError):
    """Raised when a polygon exceeds the configured vertex limit."""

    default_code = "GEOMETRY_TOO_LARGE"


class ZeroAreaPolygonError(GeometryValidationError):
    """Raised when the outer ring encloses no area (e.g. collinear points)."""

    default_code = "GEOMETRY_ZERO_AREA"


# ---------------------------------------------------------------------------
# Coordinate reference systems
# ---------------------------------------------------------------------------


class CRSError(ValidationError):
    """Raised when a CRS identifier or CRS pairing cannot be honoured."""

    default_stage = "crs"
    default_code = "CRS_INVALID"


class UnknownCRSError(CRSError):
    """Raised when a CRS identifier is not present in the registry."""

    default_code = "CRS_UNKNOWN"


class UnsupportedTransformPairError(CRSError):
    """Raised when no direct transform is registered between two CRS."""

    default_stage = "reproject"
    default_code = "CRS_TRANSFORM_UNSUPPORTED"


class CRSMismatchError(CRSError):
    """Raised when two geometries that must share a CRS do not."""

    default_stage = "spatial_query"
    default_code = "CRS_MISMATCH"


class RegistryFrozenError(PermanentError):
    """Raised when a frozen CRS registry is asked to change."""

    default_stage = "crs"
    default_code = "CRS_REGISTRY_FROZEN"


# ---------------------------------------------------------------------------
# Feature-store boundary
# ---------------------------------------------------------------------------


class FeatureRecordError(ContractError):
    """Raised when a feature record is missing required fields."""

    default_stage = "feature_record"
    default_code = "FEATURE_RECORD_INVALID"


class QueryValidationError(ValidationError):
    """Raised when feature query parameters are missing or inconsistent."""

    default_stage = "query"
    default_code = "QUERY_INVALID"
