"""Site Polygons geometry engine.

Validates tenant-scoped site polygons, reprojects them between coordinate
reference systems, computes their surface area and evaluates
bounding-box containment for features tracked across epochs.
"""

__version__ = "0.1.0"
