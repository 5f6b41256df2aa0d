"""Feature creation activity.

Turns a client-submitted feature payload into an immutable ``Feature``
record ready for the feature store:

1. require ``tenant_id`` and ``epoch_id``
2. validate and normalise the geometry in its declared CRS
3. reproject to the storage CRS (geographic degrees) when needed
4. compute the area there, once, so stored areas are comparable

The stored coordinates stay in the declared CRS; only the area is
normalised.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from site_polygons.core.config import ConfigValidationError, EngineConfig
from site_polygons.core.exceptions import FeatureRecordError
from site_polygons.geometry.area import AREA_UNAVAILABLE, area
from site_polygons.geometry.crs import default_registry
from site_polygons.geometry.projection import reproject
from site_polygons.geometry.validation import validate
from site_polygons.models.feature import Feature
from site_polygons.utils.helpers import format_epoch, parse_epoch

if TYPE_CHECKING:
    from collections.abc import Mapping

    from site_polygons.geometry.crs import CRSRegistry

logger = logging.getLogger("site_polygons.activities.create_feature")


def create_feature(
    payload: Mapping[str, object],
    *,
    config: EngineConfig | None = None,
    registry: CRSRegistry | None = None,
) -> Feature:
    """Validate a submitted feature and compute its stored area.

    Args:
        payload: Mapping with ``tenant_id``, ``epoch_id``, ``geometry`` and
            optionally ``feature_name``, ``owner`` and ``crs`` (defaults
            to the storage CRS).
        config: Engine configuration.
        registry: CRS registry.

    Returns:
        A new ``Feature`` with ``area_m2`` computed in the storage CRS.

    Raises:
        FeatureRecordError: If ``tenant_id`` or ``epoch_id`` is missing.
        GeometryValidationError: If the geometry is invalid (any subclass).
        CRSError: If the declared CRS is unknown or cannot be
            reprojected to the storage CRS.
        ConfigValidationError: If the configured storage CRS is not
            geographic.
    """
    config = config or EngineConfig()
    registry = registry or default_registry()
    if not registry.get(config.storage_crs).is_geographic:
        raise ConfigValidationError(
            "SITE_STORAGE_CRS",
            config.storage_crs,
            "must be a geographic (degrees) CRS so stored areas are comparable",
        )

    tenant_id = payload.get("tenant_id")
    if not isinstance(tenant_id, str) or not tenant_id.strip():
        msg = f"tenant_id is required, got {tenant_id!r}"
        raise FeatureRecordError(msg)
    epoch_id = parse_epoch(payload.get("epoch_id"))

    crs = str(payload.get("crs") or config.storage_crs)
    feature_name = str(payload.get("feature_name") or "")

    polygon = validate(payload.get("geometry"), crs=crs, config=config, registry=registry)
    storage_polygon = reproject(polygon, crs, config.storage_crs, registry=registry)
    area_m2 = area(storage_polygon, config.storage_crs, registry=registry)

    if area_m2 == AREA_UNAVAILABLE:
        logger.warning(
            "Area unavailable for feature | tenant=%s | name=%s",
            tenant_id,
            feature_name,
        )

    feature = Feature(
        tenant_id=tenant_id,
        epoch_id=epoch_id,
        polygon=polygon,
        feature_name=feature_name,
        owner=str(payload.get("owner") or ""),
        area_m2=area_m2,
        crs=crs,
    )

    logger.info(
        "Feature created | tenant=%s | epoch=%s | name=%s | area=%.2f m2 | "
        "crs=%s | rings=%d | vertices=%d",
        tenant_id,
        format_epoch(epoch_id),
        feature_name,
        area_m2,
        crs,
        len(polygon.rings),
        polygon.vertex_count,
    )
    return feature
