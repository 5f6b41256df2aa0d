"""Shared pytest fixtures for the Site Polygons test suite."""

from __future__ import annotations

import pytest

from site_polygons.geometry.crs import CRSRegistry, build_default_registry
from site_polygons.models.geometry import Polygon

# ---------------------------------------------------------------------------
# Reference rings
# ---------------------------------------------------------------------------

# Unit square in a planar metric CRS: area 1.0 m2
UNIT_SQUARE = [[0, 0], [0, 1], [1, 1], [1, 0], [0, 0]]

# Central Park seed rectangle (lon, lat)
CENTRAL_PARK = [
    [-73.9819, 40.7681],
    [-73.9493, 40.7681],
    [-73.9493, 40.8006],
    [-73.9819, 40.8006],
    [-73.9819, 40.7681],
]

# Bundaberg orchard with an interior exclusion zone (lon, lat)
BUNDABERG_EXTERIOR = [
    [152.3480, -24.8700],
    [152.3480, -24.8610],
    [152.3600, -24.8610],
    [152.3600, -24.8700],
    [152.3480, -24.8700],
]
BUNDABERG_HOLE = [
    [152.3520, -24.8670],
    [152.3520, -24.8645],
    [152.3555, -24.8645],
    [152.3555, -24.8670],
    [152.3520, -24.8670],
]


# ---------------------------------------------------------------------------
# Registry fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def registry() -> CRSRegistry:
    """A freshly built, frozen registry with EPSG:4326 and EPSG:3857."""
    return build_default_registry()


# ---------------------------------------------------------------------------
# Geometry fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def unit_square() -> Polygon:
    return Polygon.from_rings([UNIT_SQUARE])


@pytest.fixture()
def central_park() -> Polygon:
    return Polygon.from_rings([CENTRAL_PARK])


@pytest.fixture()
def bundaberg_with_hole() -> Polygon:
    return Polygon.from_rings([BUNDABERG_EXTERIOR, BUNDABERG_HOLE])


@pytest.fixture()
def central_park_payload() -> dict[str, object]:
    """A submitted feature payload for the Central Park rectangle."""
    return {
        "tenant_id": "tenant_1",
        "epoch_id": "2024-01-01T10:00:00Z",
        "feature_name": "Central Park",
        "owner": "City of New York",
        "geometry": {"type": "Polygon", "coordinates": [CENTRAL_PARK]},
        "crs": "EPSG:4326",
    }
