"""Unit tests for the geometry validator and normaliser.

Covers:
- Geometry type checks
- Ring closure: exact, within tolerance, auto-close, too few points
- Zero-area (collinear) outer rings
- Malformed and non-finite coordinates
- WGS 84 bounds for geographic CRS
- Vertex limit
- Purity (input never mutated)
"""

from __future__ import annotations

import copy
import logging

import pytest

from site_polygons.core.config import EngineConfig
from site_polygons.core.exceptions import (
    GeometryTooLargeError,
    GeometryValidationError,
    InvalidCoordinateError,
    InvalidGeometryTypeError,
    UnclosedRingError,
    UnknownCRSError,
    ZeroAreaPolygonError,
)
from site_polygons.geometry.crs import CRSRegistry
from site_polygons.geometry.validation import close_ring, coords_to_tuples, validate
from site_polygons.models.geometry import Polygon

UNIT_SQUARE = [[0, 0], [0, 1], [1, 1], [1, 0], [0, 0]]
UNCLOSED_SQUARE = [[0, 0], [0, 1], [1, 1], [1, 0]]


def _polygon(*rings: list[list[float]]) -> dict[str, object]:
    return {"type": "Polygon", "coordinates": list(rings)}


class TestGeometryType:
    """Only Polygon geometries are accepted."""

    def test_polygon_accepted(self) -> None:
        polygon = validate(_polygon(UNIT_SQUARE))
        assert isinstance(polygon, Polygon)
        assert len(polygon.rings) == 1

    @pytest.mark.parametrize("geometry_type", ["Point", "MultiPolygon", "polygon", None])
    def test_other_types_rejected(self, geometry_type: object) -> None:
        with pytest.raises(InvalidGeometryTypeError, match="Polygon"):
            validate({"type": geometry_type, "coordinates": [UNIT_SQUARE]})

    def test_non_mapping_rejected(self) -> None:
        with pytest.raises(InvalidGeometryTypeError):
            validate([UNIT_SQUARE])

    def test_missing_geometry_rejected(self) -> None:
        with pytest.raises(InvalidGeometryTypeError):
            validate(None)


class TestRingClosure:
    """Closure rules: closed rings pass, missing closing point is appended."""

    def test_closed_ring_unchanged(self) -> None:
        polygon = validate(_polygon(UNIT_SQUARE))
        assert polygon.exterior == ((0.0, 0.0), (0.0, 1.0), (1.0, 1.0), (1.0, 0.0), (0.0, 0.0))

    def test_unclosed_ring_auto_closed(self) -> None:
        """A 4-point ring with no closing point becomes a 5-point ring."""
        polygon = validate(_polygon(UNCLOSED_SQUARE))
        assert len(polygon.exterior) == 5
        assert polygon.exterior[0] == polygon.exterior[-1]

    def test_auto_close_logs_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="site_polygons.geometry.validation"):
            validate(_polygon(UNCLOSED_SQUARE))
        assert "Auto-closing" in caplog.text

    def test_near_closed_ring_snapped(self) -> None:
        """A last point within tolerance is snapped onto the first point."""
        ring = [[0, 0], [0, 1], [1, 1], [1, 0], [1e-12, -1e-12]]
        polygon = validate(_polygon(ring))
        assert len(polygon.exterior) == 5
        assert polygon.exterior[-1] == (0.0, 0.0)

    def test_point_beyond_tolerance_is_not_snapped(self) -> None:
        ring = [[0, 0], [0, 1], [1, 1], [1, 0], [1e-6, 0]]
        polygon = validate(_polygon(ring))
        assert len(polygon.exterior) == 6
        assert polygon.exterior[-2] == (1e-6, 0.0)

    def test_triangle_without_closure_accepted(self) -> None:
        polygon = validate(_polygon([[0, 0], [0, 1], [1, 1]]))
        assert len(polygon.exterior) == 4

    def test_two_points_rejected(self) -> None:
        with pytest.raises(UnclosedRingError, match="at least 4"):
            validate(_polygon([[0, 0], [0, 1]]))

    def test_closed_three_point_ring_rejected(self) -> None:
        with pytest.raises(UnclosedRingError):
            validate(_polygon([[0, 0], [0, 1], [0, 0]]))

    def test_repeated_points_rejected(self) -> None:
        """Four points but only two distinct cannot enclose an area."""
        with pytest.raises(UnclosedRingError, match="distinct"):
            validate(_polygon([[0, 0], [1, 1], [1, 1], [0, 0]]))

    def test_collinear_outer_ring_rejected(self) -> None:
        """Three distinct points on one line close a ring but enclose nothing."""
        with pytest.raises(ZeroAreaPolygonError) as exc_info:
            validate(_polygon([[0, 0], [1, 1], [2, 2], [0, 0]]))
        assert exc_info.value.code == "GEOMETRY_ZERO_AREA"

    def test_collinear_geographic_ring_rejected(self, registry: CRSRegistry) -> None:
        ring = [[-74.0, 40.5], [-73.5, 41.0], [-73.0, 41.5]]
        with pytest.raises(ZeroAreaPolygonError):
            validate(_polygon(ring), crs="EPSG:4326", registry=registry)

    def test_collinear_hole_does_not_reject(self) -> None:
        """Only the outer boundary must enclose area."""
        hole = [[0.2, 0.2], [0.4, 0.4], [0.6, 0.6], [0.2, 0.2]]
        polygon = validate(_polygon(UNIT_SQUARE, hole))
        assert len(polygon.holes) == 1

    def test_empty_ring_rejected(self) -> None:
        with pytest.raises(UnclosedRingError):
            validate(_polygon([]))

    def test_no_rings_rejected(self) -> None:
        with pytest.raises(UnclosedRingError, match="outer boundary"):
            validate({"type": "Polygon", "coordinates": []})

    def test_holes_are_closed_too(self) -> None:
        hole = [[0.25, 0.25], [0.25, 0.75], [0.75, 0.75], [0.75, 0.25]]
        polygon = validate(_polygon(UNIT_SQUARE, hole))
        assert len(polygon.holes) == 1
        assert polygon.holes[0][0] == polygon.holes[0][-1]

    def test_close_ring_direct(self) -> None:
        ring = close_ring([(0.0, 0.0), (0.0, 1.0), (1.0, 1.0)], tolerance=1e-9)
        assert ring == ((0.0, 0.0), (0.0, 1.0), (1.0, 1.0), (0.0, 0.0))


class TestCoordinates:
    """Malformed and non-finite coordinates are rejected."""

    @pytest.mark.parametrize("bad", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_rejected(self, bad: float) -> None:
        ring = [[0, 0], [0, bad], [1, 1], [1, 0], [0, 0]]
        with pytest.raises(InvalidCoordinateError, match="Non-finite"):
            validate(_polygon(ring))

    def test_nan_string_rejected(self) -> None:
        ring = [[0, 0], ["nan", 1], [1, 1], [1, 0], [0, 0]]
        with pytest.raises(InvalidCoordinateError):
            validate(_polygon(ring))

    def test_non_numeric_rejected(self) -> None:
        ring = [[0, 0], ["abc", 1], [1, 1], [1, 0], [0, 0]]
        with pytest.raises(InvalidCoordinateError, match="cannot convert"):
            validate(_polygon(ring))

    def test_short_coordinate_rejected(self) -> None:
        ring = [[0, 0], [1], [1, 1], [1, 0], [0, 0]]
        with pytest.raises(InvalidCoordinateError, match="at least 2"):
            validate(_polygon(ring))

    def test_coordinates_not_a_list_rejected(self) -> None:
        with pytest.raises(InvalidCoordinateError):
            validate({"type": "Polygon", "coordinates": "0,0 1,1"})

    def test_altitude_dropped(self) -> None:
        coords = coords_to_tuples([[1, 2, 300], [3, 4, 5]])
        assert coords == [(1.0, 2.0), (3.0, 4.0)]

    def test_string_numbers_coerced(self) -> None:
        coords = coords_to_tuples([["1.5", "2.5"]])
        assert coords == [(1.5, 2.5)]

    def test_all_errors_share_validation_base(self) -> None:
        with pytest.raises(GeometryValidationError):
            validate(_polygon([[0, 0], [0, float("nan")], [1, 1], [0, 0]]))


class TestGeographicBounds:
    """Geographic CRS enforces WGS 84 longitude/latitude ranges."""

    def test_longitude_out_of_range(self, registry: CRSRegistry) -> None:
        ring = [[0, 0], [0, 1], [181, 1], [1, 0], [0, 0]]
        with pytest.raises(InvalidCoordinateError, match="Longitude"):
            validate(_polygon(ring), crs="EPSG:4326", registry=registry)

    def test_latitude_out_of_range(self, registry: CRSRegistry) -> None:
        ring = [[0, 0], [0, 91], [1, 1], [1, 0], [0, 0]]
        with pytest.raises(InvalidCoordinateError, match="Latitude"):
            validate(_polygon(ring), crs="EPSG:4326", registry=registry)

    def test_projected_crs_not_bounded(self, registry: CRSRegistry) -> None:
        ring = [[0, 0], [0, 5_000_000], [5_000_000, 5_000_000], [5_000_000, 0], [0, 0]]
        polygon = validate(_polygon(ring), crs="EPSG:3857", registry=registry)
        assert polygon.exterior[2] == (5_000_000.0, 5_000_000.0)

    def test_bounds_check_can_be_disabled(self, registry: CRSRegistry) -> None:
        ring = [[0, 0], [0, 1], [181, 1], [1, 0], [0, 0]]
        config = EngineConfig(enforce_geographic_bounds=False)
        polygon = validate(_polygon(ring), crs="EPSG:4326", config=config, registry=registry)
        assert polygon.exterior[2] == (181.0, 1.0)

    def test_unknown_crs_rejected(self, registry: CRSRegistry) -> None:
        with pytest.raises(UnknownCRSError):
            validate(_polygon(UNIT_SQUARE), crs="EPSG:9999", registry=registry)


class TestVertexLimit:
    """Polygons above the configured vertex limit are rejected."""

    def test_over_limit_rejected(self) -> None:
        config = EngineConfig(max_vertices=4)
        with pytest.raises(GeometryTooLargeError, match="limit is 4"):
            validate(_polygon(UNIT_SQUARE), config=config)

    def test_at_limit_accepted(self) -> None:
        config = EngineConfig(max_vertices=5)
        polygon = validate(_polygon(UNIT_SQUARE), config=config)
        assert polygon.vertex_count == 5

    def test_limit_counts_auto_closed_point(self) -> None:
        config = EngineConfig(max_vertices=4)
        with pytest.raises(GeometryTooLargeError):
            validate(_polygon(UNCLOSED_SQUARE), config=config)

    def test_limit_counts_all_rings(self) -> None:
        config = EngineConfig(max_vertices=9)
        hole = [[0.25, 0.25], [0.25, 0.75], [0.75, 0.75], [0.75, 0.25], [0.25, 0.25]]
        with pytest.raises(GeometryTooLargeError):
            validate(_polygon(UNIT_SQUARE, hole), config=config)


class TestPurity:
    def test_input_not_mutated(self) -> None:
        geometry = _polygon(UNCLOSED_SQUARE)
        snapshot = copy.deepcopy(geometry)
        validate(geometry)
        assert geometry == snapshot
