"""Geometry validator and normaliser.

Checks a raw GeoJSON-style geometry before any numeric work and returns
a normalised ``Polygon``:

- declared type must be ``"Polygon"``
- every coordinate is a pair of finite numbers (altitude is dropped)
- geographic coordinates stay within WGS 84 bounds (when a CRS is given)
- rings are closed; a ring whose closing point is missing is auto-closed
- every ring has at least 4 points and 3 distinct points
- the outer ring encloses a non-zero area
- the total vertex count is bounded

The function is pure: the input mapping is never modified.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from typing import TYPE_CHECKING

from site_polygons.core.config import EngineConfig
from site_polygons.core.constants import (
    GEOMETRY_TYPE_POLYGON,
    MAX_LATITUDE,
    MAX_LONGITUDE,
    MIN_DISTINCT_POINTS,
    MIN_LATITUDE,
    MIN_LONGITUDE,
    MIN_RING_POINTS,
)
from site_polygons.core.exceptions import (
    GeometryTooLargeError,
    InvalidCoordinateError,
    InvalidGeometryTypeError,
    UnclosedRingError,
    ZeroAreaPolygonError,
)
from site_polygons.geometry.crs import default_registry
from site_polygons.models.geometry import Coordinate, Polygon, Ring

if TYPE_CHECKING:
    from site_polygons.geometry.crs import CRSRegistry

logger = logging.getLogger("site_polygons.geometry.validation")


def validate(
    geometry: object,
    *,
    crs: str | None = None,
    config: EngineConfig | None = None,
    registry: CRSRegistry | None = None,
) -> Polygon:
    """Validate and normalise a raw polygon geometry.

    Args:
        geometry: Mapping of the form ``{"type": "Polygon", "coordinates": [...]}``.
        crs: CRS the coordinates are expressed in. When it is geographic
            (and ``config.enforce_geographic_bounds`` is set), longitude
            and latitude bounds are enforced.
        config: Engine configuration (vertex limit, closure tolerance).
        registry: CRS registry used to resolve ``crs``.

    Returns:
        A new ``Polygon`` whose rings are all closed exactly.

    Raises:
        InvalidGeometryTypeError: If the geometry is not a ``Polygon`` mapping.
        InvalidCoordinateError: If a coordinate is malformed, non-finite
            or out of geographic bounds.
        UnclosedRingError: If a ring has fewer than 4 points after
            closure or fewer than 3 distinct points.
        GeometryTooLargeError: If the vertex limit is exceeded.
        ZeroAreaPolygonError: If the outer ring encloses no area.
        UnknownCRSError: If ``crs`` is not registered.
    """
    config = config or EngineConfig()

    if not isinstance(geometry, Mapping):
        msg = f"Geometry must be a mapping with a 'type' key, got {type(geometry).__name__}"
        raise InvalidGeometryTypeError(msg)

    geometry_type = geometry.get("type")
    if geometry_type != GEOMETRY_TYPE_POLYGON:
        msg = f"Geometry type must be '{GEOMETRY_TYPE_POLYGON}', got {geometry_type!r}"
        raise InvalidGeometryTypeError(msg)

    raw_rings = geometry.get("coordinates")
    if not isinstance(raw_rings, list | tuple):
        msg = f"Polygon coordinates must be a list of rings, got {type(raw_rings).__name__}"
        raise InvalidCoordinateError(msg)
    if not raw_rings:
        msg = "Polygon has no rings; an outer boundary is required"
        raise UnclosedRingError(msg)

    # Bound the cost before touching individual coordinates
    raw_vertex_count = sum(len(r) for r in raw_rings if isinstance(r, list | tuple))
    _check_vertex_limit(raw_vertex_count, config.max_vertices)

    check_bounds = False
    if crs is not None:
        definition = (registry or default_registry()).get(crs)
        check_bounds = definition.is_geographic and config.enforce_geographic_bounds

    rings: list[Ring] = []
    for ring_index, raw_ring in enumerate(raw_rings):
        coords = coords_to_tuples(raw_ring, ring_index)
        if check_bounds:
            validate_geographic_bounds(coords, ring_index)
        rings.append(close_ring(coords, ring_index, tolerance=config.ring_closure_tolerance))

    polygon = Polygon(rings=tuple(rings))
    _check_vertex_limit(polygon.vertex_count, config.max_vertices)
    _check_exterior_area(polygon.exterior)
    return polygon


# ---------------------------------------------------------------------------
# Coordinate normalisation
# ---------------------------------------------------------------------------


def coords_to_tuples(raw_ring: object, ring_index: int = 0) -> list[Coordinate]:
    """Convert a GeoJSON-style ring to finite ``(x, y)`` tuples.

    Drops altitude (third element) if present.

    Raises:
        InvalidCoordinateError: If the ring or any coordinate is malformed
            or non-finite.
    """
    if not isinstance(raw_ring, list | tuple):
        msg = f"Ring {ring_index} must be a list of coordinates, got {type(raw_ring).__name__}"
        raise InvalidCoordinateError(msg)

    coords: list[Coordinate] = []
    for idx, c in enumerate(raw_ring):
        if not isinstance(c, list | tuple):
            msg = (
                f"Malformed coordinate at ring {ring_index} index {idx}: "
                f"expected list/tuple, got {type(c).__name__}"
            )
            raise InvalidCoordinateError(msg)
        if len(c) < 2:
            msg = (
                f"Malformed coordinate at ring {ring_index} index {idx}: "
                f"expected at least 2 elements, got {len(c)}"
            )
            raise InvalidCoordinateError(msg)
        try:
            x = float(c[0])
            y = float(c[1])
        except (TypeError, ValueError) as exc:
            msg = (
                f"Malformed coordinate at ring {ring_index} index {idx}: "
                f"cannot convert to float (x={c[0]!r}, y={c[1]!r})"
            )
            raise InvalidCoordinateError(msg) from exc
        if not (math.isfinite(x) and math.isfinite(y)):
            msg = f"Non-finite coordinate ({x}, {y}) at ring {ring_index} index {idx}"
            raise InvalidCoordinateError(msg)
        coords.append((x, y))
    return coords


def validate_geographic_bounds(coords: list[Coordinate], ring_index: int = 0) -> None:
    """Validate that all ``(lon, lat)`` coordinates are within WGS 84 bounds.

    Raises:
        InvalidCoordinateError: If any coordinate is out of bounds.
    """
    for lon, lat in coords:
        if not (MIN_LONGITUDE <= lon <= MAX_LONGITUDE):
            msg = (
                f"Longitude {lon} out of WGS 84 range [{MIN_LONGITUDE}, {MAX_LONGITUDE}] "
                f"in ring {ring_index}"
            )
            raise InvalidCoordinateError(msg)
        if not (MIN_LATITUDE <= lat <= MAX_LATITUDE):
            msg = (
                f"Latitude {lat} out of WGS 84 range [{MIN_LATITUDE}, {MAX_LATITUDE}] "
                f"in ring {ring_index}"
            )
            raise InvalidCoordinateError(msg)


# ---------------------------------------------------------------------------
# Ring closure
# ---------------------------------------------------------------------------


def close_ring(coords: list[Coordinate], ring_index: int = 0, *, tolerance: float) -> Ring:
    """Return the ring closed exactly on its first point.

    A last point within ``tolerance`` of the first is snapped onto it;
    otherwise the first point is appended.

    Raises:
        UnclosedRingError: If the closed ring has fewer than 4 points or
            fewer than 3 distinct points.
    """
    if not coords:
        msg = f"Ring {ring_index} is empty"
        raise UnclosedRingError(msg)

    first = coords[0]
    if len(coords) > 1 and _points_equal(first, coords[-1], tolerance):
        closed = [*coords[:-1], first]
    else:
        if len(coords) > 1:
            logger.warning(
                "Auto-closing unclosed ring %d | first=%s | last=%s",
                ring_index,
                first,
                coords[-1],
            )
        closed = [*coords, first]

    if len(closed) < MIN_RING_POINTS:
        msg = (
            f"Ring {ring_index} has {len(closed)} point(s) after closure, "
            f"need at least {MIN_RING_POINTS} (triangle + closing point)"
        )
        raise UnclosedRingError(msg)

    if len(set(closed)) < MIN_DISTINCT_POINTS:
        msg = f"Ring {ring_index} has fewer than {MIN_DISTINCT_POINTS} distinct points"
        raise UnclosedRingError(msg)

    return tuple(closed)


def _points_equal(a: Coordinate, b: Coordinate, tolerance: float) -> bool:
    return abs(a[0] - b[0]) <= tolerance and abs(a[1] - b[1]) <= tolerance


def _check_vertex_limit(count: int, max_vertices: int) -> None:
    if count > max_vertices:
        msg = f"Polygon has {count} vertices, limit is {max_vertices}"
        raise GeometryTooLargeError(msg)


def _check_exterior_area(exterior: Ring) -> None:
    from shapely.geometry import Polygon as ShapelyPolygon

    if ShapelyPolygon(exterior).area == 0:
        msg = f"Outer ring encloses zero area ({len(set(exterior))} distinct points)"
        raise ZeroAreaPolygonError(msg)
