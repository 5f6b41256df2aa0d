"""Data model for a tenant-scoped site feature.

A Feature is one polygon captured for a tenant in a given epoch, together
with its display metadata and its area precomputed at creation time.
``to_dict`` / ``from_dict`` use exactly the record shape the feature
store persists.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from site_polygons.core.constants import DEFAULT_STORAGE_CRS, GEOMETRY_TYPE_POLYGON
from site_polygons.core.exceptions import FeatureRecordError
from site_polygons.models.geometry import Polygon
from site_polygons.utils.helpers import format_epoch, parse_epoch

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(frozen=True, slots=True)
class Feature:
    """A single polygon feature owned by a tenant.

    Features are never mutated in place; an update is a new record.

    Attributes:
        tenant_id: Owning tenant identifier.
        epoch_id: Epoch timestamp. Normalised to timezone-aware UTC on
            construction; a naive value is taken to be UTC.
        feature_name: Display name (e.g. ``"Central Park"``).
        owner: Display owner (e.g. ``"City of New York"``).
        polygon: Geometry, expressed in ``crs``.
        area_m2: Area in square metres computed in the storage CRS.
            ``0.0`` means the area was unavailable.
        crs: CRS of the stored coordinates.
    """

    tenant_id: str
    epoch_id: datetime
    polygon: Polygon
    feature_name: str = ""
    owner: str = ""
    area_m2: float = 0.0
    crs: str = DEFAULT_STORAGE_CRS

    def __post_init__(self) -> None:
        # Epoch windows compare records against each other, so hold every epoch in UTC
        object.__setattr__(self, "epoch_id", parse_epoch(self.epoch_id))

    def to_dict(self) -> dict[str, object]:
        """Serialise to the persisted record shape."""
        return {
            "tenant_id": self.tenant_id,
            "epoch_id": format_epoch(self.epoch_id),
            "feature_name": self.feature_name,
            "owner": self.owner,
            "geometry": self.polygon.to_geojson(),
            "area_m2": self.area_m2,
            "crs": self.crs,
        }

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> Feature:
        """Deserialise a record supplied by the feature store.

        Stored geometry is trusted and is not re-validated.

        Raises:
            FeatureRecordError: If required fields are missing or have
                unexpected types.
        """
        tenant_id = data.get("tenant_id")
        if not isinstance(tenant_id, str) or not tenant_id:
            msg = f"tenant_id must be a non-empty string, got {tenant_id!r}"
            raise FeatureRecordError(msg)

        geometry = data.get("geometry")
        if not isinstance(geometry, dict):
            msg = f"geometry must be a dict, got {type(geometry).__name__}"
            raise FeatureRecordError(msg)
        if geometry.get("type") != GEOMETRY_TYPE_POLYGON:
            msg = f"geometry type must be 'Polygon', got {geometry.get('type')!r}"
            raise FeatureRecordError(msg)
        coordinates = geometry.get("coordinates")
        if not isinstance(coordinates, list) or not coordinates:
            msg = "geometry coordinates must be a non-empty list of rings"
            raise FeatureRecordError(msg)

        try:
            polygon = Polygon.from_rings(coordinates)
            area_m2 = float(data.get("area_m2", 0.0))  # type: ignore[arg-type]
        except (TypeError, ValueError, IndexError) as exc:
            msg = f"Malformed feature record for tenant '{tenant_id}': {exc}"
            raise FeatureRecordError(msg) from exc

        return cls(
            tenant_id=tenant_id,
            epoch_id=parse_epoch(data.get("epoch_id")),
            polygon=polygon,
            feature_name=str(data.get("feature_name") or ""),
            owner=str(data.get("owner") or ""),
            area_m2=area_m2,
            crs=str(data.get("crs") or DEFAULT_STORAGE_CRS),
        )
