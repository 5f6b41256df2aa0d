"""Area calculator.

Computes a polygon's surface area in square metres:

- Geographic CRS (degrees): area on the sphere of the CRS radius, using
  ``pyproj.Geod`` with zero flattening. Geodesic polygon area on a sphere
  is the spherical excess of the ring.
- Projected metric CRS: planar shoelace area via shapely.

Each ring contributes ``|signed area|`` so input winding order does not
matter; hole areas are subtracted from the outer ring's area.

Self-intersection is not detected: a bow-tie ring is measured
arithmetically like any other ring.

``0.0`` is the "area unavailable" sentinel. Numerical failures (fewer
than 3 distinct outer points, a non-finite result, a library error) are
logged and reported as ``0.0`` rather than raised.
"""

from __future__ import annotations

import functools
import logging
import math
from typing import TYPE_CHECKING

from pyproj.exceptions import GeodError
from shapely.errors import ShapelyError

from site_polygons.core.constants import MIN_DISTINCT_POINTS
from site_polygons.geometry.crs import default_registry

if TYPE_CHECKING:
    from pyproj import Geod

    from site_polygons.geometry.crs import CRSRegistry
    from site_polygons.models.geometry import Polygon, Ring

logger = logging.getLogger("site_polygons.geometry.area")

AREA_UNAVAILABLE = 0.0


def area(polygon: Polygon, crs: str, *, registry: CRSRegistry | None = None) -> float:
    """Compute the area of ``polygon`` in square metres.

    Args:
        polygon: Validated polygon expressed in ``crs``.
        crs: Registered CRS identifier.
        registry: CRS registry (defaults to the process-wide one).

    Returns:
        Non-negative area in m². ``0.0`` if the area is unavailable.

    Raises:
        UnknownCRSError: If ``crs`` is not registered.
    """
    definition = (registry or default_registry()).get(crs)

    if len(set(polygon.exterior)) < MIN_DISTINCT_POINTS:
        logger.warning(
            "Area unavailable | crs=%s | reason=outer ring has fewer than %d distinct points",
            crs,
            MIN_DISTINCT_POINTS,
        )
        return AREA_UNAVAILABLE

    try:
        if definition.is_geographic:
            total = spherical_area(polygon, radius_m=definition.radius_m)
        else:
            total = planar_area(polygon)
    except (ArithmeticError, ValueError, GeodError, ShapelyError) as exc:
        logger.warning("Area unavailable | crs=%s | reason=%s", crs, exc)
        return AREA_UNAVAILABLE

    if not math.isfinite(total):
        logger.warning("Area unavailable | crs=%s | reason=non-finite result %r", crs, total)
        return AREA_UNAVAILABLE

    return max(total, 0.0)


def spherical_area(polygon: Polygon, *, radius_m: float) -> float:
    """Area in m² of a ``(lon, lat)`` polygon on a sphere of ``radius_m``."""
    geod = _sphere(radius_m)
    total = _ring_area_spherical(geod, polygon.exterior)
    for hole in polygon.holes:
        total -= _ring_area_spherical(geod, hole)
    return total


def planar_area(polygon: Polygon) -> float:
    """Shoelace area in square CRS units of an ``(x, y)`` polygon."""
    total = _ring_area_planar(polygon.exterior)
    for hole in polygon.holes:
        total -= _ring_area_planar(hole)
    return total


# ---------------------------------------------------------------------------
# Per-ring helpers
# ---------------------------------------------------------------------------


@functools.lru_cache(maxsize=8)
def _sphere(radius_m: float) -> Geod:
    from pyproj import Geod

    return Geod(a=radius_m, b=radius_m)


def _ring_area_spherical(geod: Geod, ring: Ring) -> float:
    if len(set(ring)) < MIN_DISTINCT_POINTS:
        return 0.0
    lons = [c[0] for c in ring]
    lats = [c[1] for c in ring]
    # Geod.polygon_area_perimeter returns (signed_area_m2, perimeter_m)
    ring_area, _perimeter = geod.polygon_area_perimeter(lons, lats)
    return abs(ring_area)


def _ring_area_planar(ring: Ring) -> float:
    if len(set(ring)) < MIN_DISTINCT_POINTS:
        return 0.0
    from shapely.geometry import Polygon as ShapelyPolygon

    return abs(ShapelyPolygon(ring).area)
