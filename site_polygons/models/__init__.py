"""Data models.

Defines the value types used throughout the engine:
- Polygon, BoundingBox: immutable geometry values
- Feature: tenant-scoped polygon record at the feature-store boundary
"""

from site_polygons.models.feature import Feature
from site_polygons.models.geometry import BoundingBox, Coordinate, Polygon, Ring

__all__ = [
    "BoundingBox",
    "Coordinate",
    "Feature",
    "Polygon",
    "Ring",
]
