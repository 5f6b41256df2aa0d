"""Spatial query evaluator.

Answers "is this polygon within the bounding box?" using containment
semantics: every vertex of every ring must lie inside the box or on its
boundary. A polygon that only partially overlaps the box is excluded.
Intersection is a different question and is not answered here.

No reprojection happens here. Polygon and box must already share a CRS;
callers that know the box's CRS pass it as ``bbox_crs`` so a mismatch is
reported instead of silently compared.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from site_polygons.core.exceptions import CRSMismatchError
from site_polygons.geometry.crs import default_registry

if TYPE_CHECKING:
    from site_polygons.geometry.crs import CRSRegistry
    from site_polygons.models.geometry import BoundingBox, Polygon


def within_bounding_box(
    polygon: Polygon,
    bbox: BoundingBox,
    crs: str,
    *,
    bbox_crs: str | None = None,
    registry: CRSRegistry | None = None,
) -> bool:
    """Return whether ``polygon`` lies fully within ``bbox`` (boundary inclusive).

    Args:
        polygon: Polygon expressed in ``crs``.
        bbox: Query box expressed in ``crs``.
        crs: CRS shared by the polygon and the box.
        bbox_crs: CRS the box was supplied in, if known.
        registry: CRS registry used to resolve ``crs``.

    Raises:
        UnknownCRSError: If ``crs`` is not registered.
        CRSMismatchError: If ``bbox_crs`` is given and differs from ``crs``.
    """
    (registry or default_registry()).get(crs)
    if bbox_crs is not None and bbox_crs != crs:
        msg = f"Bounding box CRS {bbox_crs} does not match feature CRS {crs}"
        raise CRSMismatchError(msg)

    return all(bbox.contains_point(x, y) for x, y in polygon.iter_coords())
