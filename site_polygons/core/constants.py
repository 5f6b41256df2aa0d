"""Constants shared across the geometry engine.

Centralises CRS identifiers, coordinate bounds and numeric limits that
the validator, projection engine and area calculator all depend on.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# CRS identifiers
# ---------------------------------------------------------------------------

WGS84: str = "EPSG:4326"
"""Geographic WGS 84, coordinates in ``[longitude, latitude]`` degrees."""

WEB_MERCATOR: str = "EPSG:3857"
"""Spherical Mercator, coordinates in ``[x, y]`` metres."""

DEFAULT_STORAGE_CRS: str = WGS84
"""CRS in which stored areas are computed for consistency across records."""

EARTH_RADIUS_M: float = 6_378_137.0
"""Sphere radius shared by the geographic area formula and spherical Mercator."""

WEB_MERCATOR_MAX_LATITUDE: float = 85.0511287798066
"""Latitude at which spherical Mercator's square world extent ends (atan(sinh(pi)))."""

UNITS_DEGREES: str = "degrees"
UNITS_METRES: str = "metres"

# ---------------------------------------------------------------------------
# Geographic bounds
# ---------------------------------------------------------------------------

MIN_LONGITUDE = -180.0
MAX_LONGITUDE = 180.0
MIN_LATITUDE = -90.0
MAX_LATITUDE = 90.0

# ---------------------------------------------------------------------------
# Geometry limits
# ---------------------------------------------------------------------------

GEOMETRY_TYPE_POLYGON = "Polygon"

# Minimum points for a closed ring (3 distinct + closing = 4)
MIN_RING_POINTS = 4

# Minimum distinct points for a ring to enclose any area
MIN_DISTINCT_POINTS = 3

RING_CLOSURE_TOLERANCE = 1e-9

DEFAULT_MAX_VERTICES = 100_000
