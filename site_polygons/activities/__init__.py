"""Activities used by the orchestration layer.

Each activity composes the geometry engine for one request type:
- create_feature: validate a submitted feature and compute its stored area
- present_features: epoch-window selection, reprojection, area recalculation
- query_bbox: features fully within a query bounding box
- seed_data: sample payloads for demos
"""
