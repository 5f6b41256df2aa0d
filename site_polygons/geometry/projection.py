"""Projection engine.

Reprojects polygon coordinates between registered CRS. The transform for
a ``(from_crs, to_crs)`` pair is looked up in the CRS registry and applied
uniformly to every position by a depth-aware recursive map, so a single
position, a ring, a polygon and a multi-polygon coordinate array all keep
their exact nesting (same ring count, same point count per ring).
"""

from __future__ import annotations

import logging
import math
from numbers import Real
from typing import TYPE_CHECKING

from site_polygons.core.exceptions import InvalidCoordinateError
from site_polygons.geometry.crs import default_registry
from site_polygons.models.geometry import Polygon

if TYPE_CHECKING:
    from site_polygons.geometry.crs import CRSRegistry, TransformFunc

logger = logging.getLogger("site_polygons.geometry.projection")


def reproject(
    polygon: Polygon,
    from_crs: str,
    to_crs: str,
    *,
    registry: CRSRegistry | None = None,
) -> Polygon:
    """Reproject a polygon from ``from_crs`` to ``to_crs``.

    When both identifiers are equal the input is returned unchanged, so
    identity reprojection is bit-exact.

    Raises:
        UnknownCRSError: If either identifier is not registered.
        UnsupportedTransformPairError: If no direct transform is registered.
        InvalidCoordinateError: If a coordinate lies outside the target
            CRS domain (e.g. a pole projected to Mercator) or its image
            is not finite.
    """
    if from_crs == to_crs:
        return polygon

    func = (registry or default_registry()).transform_for(from_crs, to_crs)
    rings = transform_coordinates(polygon.rings, func)
    logger.debug(
        "Reprojected polygon | from=%s | to=%s | rings=%d | vertices=%d",
        from_crs,
        to_crs,
        len(rings),
        polygon.vertex_count,
    )
    return Polygon(rings=rings)


def reproject_coordinates(
    coordinates: object,
    from_crs: str,
    to_crs: str,
    *,
    registry: CRSRegistry | None = None,
) -> object:
    """Reproject a raw GeoJSON coordinate array of any nesting depth.

    Identity pairs return the input unchanged; otherwise nested lists are
    returned as nested tuples with the same shape.
    """
    if from_crs == to_crs:
        return coordinates
    func = (registry or default_registry()).transform_for(from_crs, to_crs)
    return transform_coordinates(coordinates, func)


def transform_coordinates(coordinates: object, func: TransformFunc) -> tuple:
    """Apply ``func`` to every position in a nested coordinate array.

    A position is a sequence whose first two items are numbers; any
    deeper level is mapped recursively. Altitude is dropped.

    Raises:
        InvalidCoordinateError: If the array is malformed or a transformed
            position is not finite.
    """
    if not isinstance(coordinates, list | tuple):
        msg = f"Coordinates must be nested lists, got {type(coordinates).__name__}"
        raise InvalidCoordinateError(msg)

    if _is_position(coordinates):
        x, y = func(float(coordinates[0]), float(coordinates[1]))
        if not (math.isfinite(x) and math.isfinite(y)):
            msg = (
                f"Coordinate ({coordinates[0]}, {coordinates[1]}) has no finite "
                f"image in the target CRS"
            )
            raise InvalidCoordinateError(msg)
        return (x, y)

    return tuple(transform_coordinates(item, func) for item in coordinates)


def _is_position(value: list | tuple) -> bool:
    return (
        len(value) >= 2
        and isinstance(value[0], Real)
        and isinstance(value[1], Real)
        and not isinstance(value[0], bool)
    )
