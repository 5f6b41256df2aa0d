"""Geometry computation engine.

Pure, stateless operations over immutable polygon values:

- **validation**: well-formedness, ring closure, coordinate checks
- **projection**: CRS reprojection through registered ``(from, to)`` transforms
- **area**: spherical area for geographic CRS, shoelace area for metric CRS
- **spatial_query**: bounding-box containment

The CRS registry (``crs``) is the only process-wide state; it is built
once and frozen, so every operation is safe to call concurrently.
"""

from __future__ import annotations

from site_polygons.geometry.area import AREA_UNAVAILABLE, area, planar_area, spherical_area
from site_polygons.geometry.crs import (
    WEB_MERCATOR_DEFINITION,
    WGS84_DEFINITION,
    CRSDefinition,
    CRSRegistry,
    build_default_registry,
    default_registry,
    pyproj_transform,
)
from site_polygons.geometry.projection import (
    reproject,
    reproject_coordinates,
    transform_coordinates,
)
from site_polygons.geometry.spatial_query import within_bounding_box
from site_polygons.geometry.validation import (
    close_ring,
    coords_to_tuples,
    validate,
    validate_geographic_bounds,
)

__all__ = [
    "AREA_UNAVAILABLE",
    "WEB_MERCATOR_DEFINITION",
    "WGS84_DEFINITION",
    "CRSDefinition",
    "CRSRegistry",
    "area",
    "build_default_registry",
    "close_ring",
    "coords_to_tuples",
    "default_registry",
    "planar_area",
    "pyproj_transform",
    "reproject",
    "reproject_coordinates",
    "spherical_area",
    "transform_coordinates",
    "validate",
    "validate_geographic_bounds",
    "within_bounding_box",
]
