"""Geometry value types shared by every engine component.

A ``Polygon`` is an ordered tuple of closed rings (first ring is the outer
boundary, the remainder are holes). A ``BoundingBox`` is an axis-aligned
rectangle in the same CRS as the geometry it is compared against.

All types are frozen: engine operations never mutate their inputs and
always return new values.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from site_polygons.core.constants import GEOMETRY_TYPE_POLYGON

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

Coordinate = tuple[float, float]
Ring = tuple[Coordinate, ...]


@dataclass(frozen=True, slots=True)
class Polygon:
    """A validated polygon.

    Coordinate order is always ``(longitude, latitude)`` for geographic
    CRS and ``(x, y)`` for projected CRS.

    Attributes:
        rings: Outer ring followed by zero or more hole rings.
    """

    rings: tuple[Ring, ...]

    @property
    def exterior(self) -> Ring:
        """The outer boundary ring."""
        return self.rings[0]

    @property
    def holes(self) -> tuple[Ring, ...]:
        """Interior rings (holes)."""
        return self.rings[1:]

    @property
    def vertex_count(self) -> int:
        """Total number of points across all rings, closing points included."""
        return sum(len(ring) for ring in self.rings)

    @property
    def has_holes(self) -> bool:
        return len(self.rings) > 1

    def iter_coords(self) -> Iterator[Coordinate]:
        """Yield every coordinate of every ring, in ring order."""
        for ring in self.rings:
            yield from ring

    def to_geojson(self) -> dict[str, object]:
        """Serialise to a GeoJSON ``Polygon`` geometry dict."""
        return {
            "type": GEOMETRY_TYPE_POLYGON,
            "coordinates": [[list(c) for c in ring] for ring in self.rings],
        }

    @classmethod
    def from_rings(cls, rings: Sequence[Sequence[Sequence[float]]]) -> Polygon:
        """Build a polygon from nested coordinate sequences without validation.

        Use ``site_polygons.geometry.validate`` for untrusted input.
        """
        return cls(
            rings=tuple(tuple((float(c[0]), float(c[1])) for c in ring) for ring in rings)
        )


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """An axis-aligned rectangle ``(min_x, min_y, max_x, max_y)``.

    For geographic CRS ``x`` is longitude and ``y`` is latitude.
    """

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    def __post_init__(self) -> None:
        if self.min_x > self.max_x or self.min_y > self.max_y:
            msg = (
                f"Bounding box minimum ({self.min_x}, {self.min_y}) exceeds "
                f"maximum ({self.max_x}, {self.max_y})"
            )
            raise ValueError(msg)

    @classmethod
    def from_corners(cls, min_corner: Sequence[float], max_corner: Sequence[float]) -> BoundingBox:
        """Build a box from its ``(min_x, min_y)`` and ``(max_x, max_y)`` corners."""
        return cls(
            min_x=float(min_corner[0]),
            min_y=float(min_corner[1]),
            max_x=float(max_corner[0]),
            max_y=float(max_corner[1]),
        )

    @classmethod
    def from_ring(cls, ring: Sequence[Sequence[float]]) -> BoundingBox:
        """Build the box that tightly encloses a ring of coordinates.

        Accepts the 5-point rectangle form ``[[x0, y0], [x1, y0], ...]``.

        Raises:
            ValueError: If the ring is empty.
        """
        if not ring:
            msg = "Cannot derive a bounding box from an empty ring"
            raise ValueError(msg)
        xs = [float(c[0]) for c in ring]
        ys = [float(c[1]) for c in ring]
        return cls(min_x=min(xs), min_y=min(ys), max_x=max(xs), max_y=max(ys))

    @classmethod
    def of_polygon(cls, polygon: Polygon) -> BoundingBox:
        """The tight bounding box of a polygon's outer ring."""
        return cls.from_ring(polygon.exterior)

    @property
    def corners(self) -> tuple[Coordinate, Coordinate]:
        return ((self.min_x, self.min_y), (self.max_x, self.max_y))

    def to_tuple(self) -> tuple[float, float, float, float]:
        return (self.min_x, self.min_y, self.max_x, self.max_y)

    def to_polygon(self) -> Polygon:
        """The box as a 5-point closed rectangular polygon.

        Vertices run counter-clockwise from ``(min_x, min_y)``.
        """
        ring: Ring = (
            (self.min_x, self.min_y),
            (self.max_x, self.min_y),
            (self.max_x, self.max_y),
            (self.min_x, self.max_y),
            (self.min_x, self.min_y),
        )
        return Polygon(rings=(ring,))

    def contains_point(self, x: float, y: float) -> bool:
        """Inclusive point-in-rectangle test (boundary counts as inside)."""
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y

    def expand(self, margin: float) -> BoundingBox:
        """Return a new box grown by ``margin`` on every side."""
        return BoundingBox(
            min_x=self.min_x - margin,
            min_y=self.min_y - margin,
            max_x=self.max_x + margin,
            max_y=self.max_y + margin,
        )
