"""Sample feature payloads for demos and local development.

Three rectangular parks across two tenants and two epochs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from site_polygons.activities.create_feature import create_feature

if TYPE_CHECKING:
    from site_polygons.core.config import EngineConfig
    from site_polygons.geometry.crs import CRSRegistry
    from site_polygons.models.feature import Feature

SAMPLE_FEATURE_PAYLOADS: tuple[dict[str, object], ...] = (
    {
        "tenant_id": "tenant_1",
        "epoch_id": "2024-01-01T10:00:00Z",
        "feature_name": "Central Park",
        "owner": "City of New York",
        "geometry": {
            "type": "Polygon",
            "coordinates": [
                [
                    [-73.9819, 40.7681],
                    [-73.9493, 40.7681],
                    [-73.9493, 40.8006],
                    [-73.9819, 40.8006],
                    [-73.9819, 40.7681],
                ]
            ],
        },
    },
    {
        "tenant_id": "tenant_1",
        "epoch_id": "2024-02-01T10:00:00Z",
        "feature_name": "Battery Park",
        "owner": "NYC Parks Department",
        "geometry": {
            "type": "Polygon",
            "coordinates": [
                [
                    [-74.0166, 40.7030],
                    [-74.0110, 40.7030],
                    [-74.0110, 40.7075],
                    [-74.0166, 40.7075],
                    [-74.0166, 40.7030],
                ]
            ],
        },
    },
    {
        "tenant_id": "tenant_2",
        "epoch_id": "2024-01-01T10:00:00Z",
        "feature_name": "Golden Gate Park",
        "owner": "City of San Francisco",
        "geometry": {
            "type": "Polygon",
            "coordinates": [
                [
                    [-122.5117, 37.7683],
                    [-122.4558, 37.7683],
                    [-122.4558, 37.7702],
                    [-122.5117, 37.7702],
                    [-122.5117, 37.7683],
                ]
            ],
        },
    },
)


def seed_features(
    *,
    config: EngineConfig | None = None,
    registry: CRSRegistry | None = None,
) -> list[Feature]:
    """Create ``Feature`` records for every sample payload."""
    return [
        create_feature(payload, config=config, registry=registry)
        for payload in SAMPLE_FEATURE_PAYLOADS
    ]
