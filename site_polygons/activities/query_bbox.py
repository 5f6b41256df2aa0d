"""Bounding-box lookup activity.

Returns the tenant's features that lie fully within a query rectangle
given as four numbers. Features stored in another CRS are reprojected
into the query CRS before the containment test.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from site_polygons.core.constants import WGS84
from site_polygons.core.exceptions import QueryValidationError
from site_polygons.geometry.crs import default_registry
from site_polygons.geometry.projection import reproject
from site_polygons.geometry.spatial_query import within_bounding_box
from site_polygons.models.geometry import BoundingBox
from site_polygons.utils.helpers import parse_finite_float

if TYPE_CHECKING:
    from collections.abc import Iterable

    from site_polygons.geometry.crs import CRSRegistry
    from site_polygons.models.feature import Feature

logger = logging.getLogger("site_polygons.activities.query_bbox")


def build_query_bbox(
    min_lon: object,
    min_lat: object,
    max_lon: object,
    max_lat: object,
) -> BoundingBox:
    """Parse four query values into a ``BoundingBox``.

    Raises:
        InvalidCoordinateError: If a value is not a finite number.
        QueryValidationError: If a minimum exceeds its maximum.
    """
    values = (
        parse_finite_float(min_lon, "min_lon"),
        parse_finite_float(min_lat, "min_lat"),
        parse_finite_float(max_lon, "max_lon"),
        parse_finite_float(max_lat, "max_lat"),
    )
    try:
        return BoundingBox(*values)
    except ValueError as exc:
        raise QueryValidationError(str(exc)) from exc


def features_within_bbox(
    features: Iterable[Feature],
    *,
    tenant_id: str,
    min_lon: object,
    min_lat: object,
    max_lon: object,
    max_lat: object,
    crs: str = WGS84,
    registry: CRSRegistry | None = None,
) -> list[Feature]:
    """Return the tenant's features fully contained in the query box.

    Args:
        features: Candidate records from the feature store.
        tenant_id: Only this tenant's features are considered.
        min_lon, min_lat, max_lon, max_lat: Query rectangle in ``crs``.
        crs: CRS of the query rectangle.
        registry: CRS registry.

    Raises:
        QueryValidationError: If ``tenant_id`` is missing or the box is inverted.
        InvalidCoordinateError: If a bound is not a finite number.
        CRSError: If ``crs`` is unknown or a stored CRS cannot be
            reprojected to it.
    """
    if not tenant_id:
        msg = "tenant_id is required"
        raise QueryValidationError(msg)

    registry = registry or default_registry()
    registry.get(crs)
    bbox = build_query_bbox(min_lon, min_lat, max_lon, max_lat)

    matches: list[Feature] = []
    for feature in features:
        if feature.tenant_id != tenant_id:
            continue
        polygon = reproject(feature.polygon, feature.crs, crs, registry=registry)
        if within_bounding_box(polygon, bbox, crs, registry=registry):
            matches.append(feature)

    logger.info(
        "Bounding-box query | tenant=%s | bbox=[%.6f, %.6f, %.6f, %.6f] | crs=%s | matches=%d",
        tenant_id,
        *bbox.to_tuple(),
        crs,
        len(matches),
    )
    return matches
