"""Feature presentation activity.

Selects a tenant's features inside an epoch window and renders them as a
GeoJSON ``FeatureCollection`` in the CRS the presentation layer asked for.

When the requested CRS is projected, ``area_m2`` is recomputed from the
reprojected coordinates (planar area in that CRS); for a geographic CRS
the stored area is reported. ``original_area_m2`` always carries the
stored value so the two can be compared.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from site_polygons.core.constants import WGS84
from site_polygons.core.exceptions import FeatureRecordError, QueryValidationError
from site_polygons.geometry.area import area
from site_polygons.geometry.crs import default_registry
from site_polygons.geometry.projection import reproject
from site_polygons.utils.helpers import format_epoch, parse_epoch, round_area

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime

    from site_polygons.geometry.crs import CRSRegistry
    from site_polygons.models.feature import Feature

logger = logging.getLogger("site_polygons.activities.present_features")


def select_features(
    features: Iterable[Feature],
    *,
    tenant_id: str,
    epoch_start: datetime | str,
    epoch_end: datetime | str,
) -> list[Feature]:
    """Return the tenant's features with ``epoch_start <= epoch_id <= epoch_end``.

    Results are ordered newest epoch first.

    Raises:
        QueryValidationError: If a parameter is missing, unparseable, or
            the window is inverted.
    """
    if not tenant_id:
        msg = "tenant_id is required"
        raise QueryValidationError(msg)
    try:
        start = parse_epoch(epoch_start, field_name="epoch_start")
        end = parse_epoch(epoch_end, field_name="epoch_end")
    except FeatureRecordError as exc:
        raise QueryValidationError(exc.message) from exc
    if start > end:
        msg = f"epoch_start {format_epoch(start)} is after epoch_end {format_epoch(end)}"
        raise QueryValidationError(msg)

    selected = [f for f in features if f.tenant_id == tenant_id and start <= f.epoch_id <= end]
    selected.sort(key=lambda f: f.epoch_id, reverse=True)
    return selected


def present_feature(
    feature: Feature,
    *,
    crs: str = WGS84,
    registry: CRSRegistry | None = None,
) -> dict[str, object]:
    """Render one feature as a GeoJSON ``Feature`` dict in ``crs``.

    Raises:
        UnknownCRSError: If ``crs`` is not registered.
        UnsupportedTransformPairError: If the stored CRS cannot be
            reprojected to ``crs``.
    """
    registry = registry or default_registry()
    target = registry.get(crs)

    polygon = reproject(feature.polygon, feature.crs, crs, registry=registry)
    area_m2 = feature.area_m2
    if not target.is_geographic:
        area_m2 = area(polygon, crs, registry=registry)

    return {
        "type": "Feature",
        "properties": {
            "tenant_id": feature.tenant_id,
            "feature_name": feature.feature_name,
            "owner": feature.owner,
            "epoch_id": format_epoch(feature.epoch_id),
            "area_m2": round_area(area_m2),
            "original_area_m2": round_area(feature.area_m2),
            "crs": crs,
        },
        "geometry": polygon.to_geojson(),
    }


def present_features(
    features: Iterable[Feature],
    *,
    tenant_id: str,
    epoch_start: datetime | str,
    epoch_end: datetime | str,
    crs: str = WGS84,
    registry: CRSRegistry | None = None,
) -> dict[str, object]:
    """Build a GeoJSON ``FeatureCollection`` for a tenant and epoch window.

    Raises:
        QueryValidationError: If the query parameters are invalid.
        CRSError: If ``crs`` is unknown or unreachable from a stored CRS.
    """
    registry = registry or default_registry()
    registry.get(crs)

    selected = select_features(
        features,
        tenant_id=tenant_id,
        epoch_start=epoch_start,
        epoch_end=epoch_end,
    )
    collection = {
        "type": "FeatureCollection",
        "features": [present_feature(f, crs=crs, registry=registry) for f in selected],
    }

    logger.info(
        "Features presented | tenant=%s | window=%s..%s | crs=%s | count=%d",
        tenant_id,
        epoch_start,
        epoch_end,
        crs,
        len(selected),
    )
    return collection
