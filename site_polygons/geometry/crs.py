"""CRS definitions and the transform registry.

A ``CRSRegistry`` maps CRS identifiers (``"EPSG:4326"``) to immutable
``CRSDefinition`` records and maps ``(from_crs, to_crs)`` pairs to pure
coordinate transform functions. Registries are populated at startup and
then frozen; a frozen registry is read-only and safe to share across
threads without locking.

``default_registry()`` builds the process-wide registry on first use
(geographic WGS 84 and spherical Mercator, both directions) and returns
the same frozen instance thereafter.

Transforms are direct only: there is no chaining through an intermediate
CRS, so a pair without a registered function is unsupported even if both
halves of a two-step route exist.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass

from site_polygons.core.constants import (
    EARTH_RADIUS_M,
    MAX_LATITUDE,
    UNITS_DEGREES,
    UNITS_METRES,
    WEB_MERCATOR,
    WEB_MERCATOR_MAX_LATITUDE,
    WGS84,
)
from site_polygons.core.exceptions import (
    InvalidCoordinateError,
    RegistryFrozenError,
    UnknownCRSError,
    UnsupportedTransformPairError,
)

logger = logging.getLogger("site_polygons.geometry.crs")

TransformFunc = Callable[[float, float], tuple[float, float]]
"""A pure function mapping one ``(x, y)`` position to another CRS."""


@dataclass(frozen=True, slots=True)
class CRSDefinition:
    """Projection parameters for one coordinate reference system.

    Attributes:
        identifier: Registry key, e.g. ``"EPSG:3857"``.
        name: Human-readable name.
        units: ``"degrees"`` for geographic CRS, ``"metres"`` for projected.
        datum: Geodetic datum name.
        radius_m: Sphere radius used for spherical area and Mercator maths.
        proj: Definition handed to pyproj (authority code or PROJ string).
            Defaults to ``identifier``.
        max_latitude: Largest absolute latitude this CRS can represent.
            Geographic positions beyond it have no image in the CRS.
    """

    identifier: str
    name: str
    units: str
    datum: str = "WGS84"
    radius_m: float = EARTH_RADIUS_M
    proj: str = ""
    max_latitude: float = MAX_LATITUDE

    def __post_init__(self) -> None:
        if self.units not in (UNITS_DEGREES, UNITS_METRES):
            msg = f"CRS units must be '{UNITS_DEGREES}' or '{UNITS_METRES}', got {self.units!r}"
            raise ValueError(msg)
        if self.radius_m <= 0:
            msg = f"CRS radius must be > 0 metres, got {self.radius_m}"
            raise ValueError(msg)
        if not 0 < self.max_latitude <= MAX_LATITUDE:
            msg = f"CRS max_latitude must be in (0, {MAX_LATITUDE}], got {self.max_latitude}"
            raise ValueError(msg)

    @property
    def is_geographic(self) -> bool:
        return self.units == UNITS_DEGREES

    @property
    def proj_definition(self) -> str:
        return self.proj or self.identifier


WGS84_DEFINITION = CRSDefinition(
    identifier=WGS84,
    name="WGS 84",
    units=UNITS_DEGREES,
)

WEB_MERCATOR_DEFINITION = CRSDefinition(
    identifier=WEB_MERCATOR,
    name="WGS 84 / Pseudo-Mercator",
    units=UNITS_METRES,
    max_latitude=WEB_MERCATOR_MAX_LATITUDE,
)


class CRSRegistry:
    """Lookup table of CRS definitions and direct ``(from, to)`` transforms."""

    def __init__(self) -> None:
        self._definitions: dict[str, CRSDefinition] = {}
        self._transforms: dict[tuple[str, str], TransformFunc] = {}
        self._frozen = False

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._definitions

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def identifiers(self) -> tuple[str, ...]:
        return tuple(sorted(self._definitions))

    @property
    def transform_pairs(self) -> tuple[tuple[str, str], ...]:
        return tuple(sorted(self._transforms))

    def register(self, definition: CRSDefinition) -> CRSRegistry:
        """Add a CRS definition.

        Raises:
            RegistryFrozenError: If the registry has been frozen.
            ValueError: If the identifier is already registered.
        """
        self._check_mutable()
        if definition.identifier in self._definitions:
            msg = f"CRS {definition.identifier} is already registered"
            raise ValueError(msg)
        self._definitions[definition.identifier] = definition
        return self

    def register_transform(self, from_crs: str, to_crs: str, func: TransformFunc) -> CRSRegistry:
        """Register a pure coordinate transform for one direction of a pair.

        Both identifiers must already be registered.

        Raises:
            RegistryFrozenError: If the registry has been frozen.
            UnknownCRSError: If either identifier is not registered.
        """
        self._check_mutable()
        self.get(from_crs)
        self.get(to_crs)
        self._transforms[(from_crs, to_crs)] = func
        return self

    def register_pyproj_pair(self, crs_a: str, crs_b: str) -> CRSRegistry:
        """Register pyproj-backed transforms in both directions between two CRS."""
        definition_a = self.get(crs_a)
        definition_b = self.get(crs_b)
        self.register_transform(crs_a, crs_b, pyproj_transform(definition_a, definition_b))
        self.register_transform(crs_b, crs_a, pyproj_transform(definition_b, definition_a))
        return self

    def freeze(self) -> CRSRegistry:
        """Make the registry read-only. Returns ``self`` for chaining."""
        self._frozen = True
        return self

    def get(self, identifier: str) -> CRSDefinition:
        """Look up a CRS definition.

        Raises:
            UnknownCRSError: If the identifier is not registered.
        """
        try:
            return self._definitions[identifier]
        except KeyError:
            msg = f"Unknown CRS {identifier!r}; registered: {', '.join(self.identifiers)}"
            raise UnknownCRSError(msg) from None

    def transform_for(self, from_crs: str, to_crs: str) -> TransformFunc:
        """Return the direct transform registered for ``(from_crs, to_crs)``.

        Raises:
            UnknownCRSError: If either identifier is not registered.
            UnsupportedTransformPairError: If no direct transform exists.
        """
        self.get(from_crs)
        self.get(to_crs)
        try:
            return self._transforms[(from_crs, to_crs)]
        except KeyError:
            msg = f"No transform registered from {from_crs} to {to_crs}"
            raise UnsupportedTransformPairError(msg) from None

    def _check_mutable(self) -> None:
        if self._frozen:
            msg = "CRS registry is frozen; register CRS definitions before startup completes"
            raise RegistryFrozenError(msg)


def pyproj_transform(source: CRSDefinition, target: CRSDefinition) -> TransformFunc:
    """Build a pure ``(x, y) -> (x, y)`` function from a pyproj Transformer.

    ``always_xy`` keeps ``(longitude, latitude)`` order for geographic CRS.

    When the source is geographic, latitudes beyond ``target.max_latitude``
    raise ``InvalidCoordinateError`` before PROJ is consulted; some PROJ
    builds clamp such input to a finite but meaningless coordinate.
    """
    from pyproj import Transformer

    transformer = Transformer.from_crs(
        source.proj_definition, target.proj_definition, always_xy=True
    )
    latitude_limit = target.max_latitude if source.is_geographic else None

    def _transform(x: float, y: float) -> tuple[float, float]:
        if latitude_limit is not None and abs(y) > latitude_limit:
            msg = (
                f"Latitude {y} is outside the domain of {target.identifier} "
                f"(|latitude| <= {latitude_limit})"
            )
            raise InvalidCoordinateError(msg)
        tx, ty = transformer.transform(x, y)
        return (float(tx), float(ty))

    return _transform


# ---------------------------------------------------------------------------
# Process-wide registry (initialise once, then frozen)
# ---------------------------------------------------------------------------

_default_registry: CRSRegistry | None = None
_default_lock = threading.Lock()


def build_default_registry() -> CRSRegistry:
    """Build and freeze a registry with WGS 84 and spherical Mercator."""
    registry = CRSRegistry()
    registry.register(WGS84_DEFINITION)
    registry.register(WEB_MERCATOR_DEFINITION)
    registry.register_pyproj_pair(WGS84, WEB_MERCATOR)
    return registry.freeze()


def default_registry() -> CRSRegistry:
    """Return the process-wide frozen registry, building it on first call."""
    global _default_registry  # noqa: PLW0603
    if _default_registry is None:
        with _default_lock:
            if _default_registry is None:
                _default_registry = build_default_registry()
                logger.info(
                    "CRS registry initialised | crs=%s | transforms=%d",
                    ",".join(_default_registry.identifiers),
                    len(_default_registry.transform_pairs),
                )
    return _default_registry
