"""Point-in-polygon hit testing against the annotation boundaries."""

from __future__ import annotations

from typing import Callable, Sequence

from .models import AnnotationBoundary, AnnotationPoint, RegionHit
from .regions import region_id, region_label

SkipPredicate = Callable[[str, AnnotationBoundary], bool]


def is_point_inside_polygon(
    vertices: Sequence[AnnotationPoint], x: float, y: float
) -> bool:
    """Even-odd ray casting with a ray from (x, y) towards +x.

    Horizontal edges are ignored. Crossings are counted only when the edge
    straddles ``y`` half-open (``yi > y != yj > y``) and lies strictly to the
    right of ``x``, so points on a polygon's left or bottom edge count as
    inside and points on its right or top edge count as outside. Polygons
    with fewer than three vertices contain nothing.
    """

    n = len(vertices)
    if n < 3:
        return False

    inside = False
    j = n - 1
    for i in range(n):
        xi, yi = vertices[i].x, vertices[i].y
        xj, yj = vertices[j].x, vertices[j].y
        j = i

        denominator = yj - yi
        if denominator == 0:
            continue

        if (yi > y) != (yj > y) and x < (xj - xi) * (y - yi) / denominator + xi:
            inside = not inside
    return inside


def find_region_containing_point(
    boundaries: Sequence[AnnotationBoundary],
    x: float,
    y: float,
    skip: SkipPredicate | None = None,
) -> RegionHit | None:
    """Return the first boundary (in array order) that contains the point.

    A boundary for which ``skip(id, boundary)`` is true is passed over and
    the search continues with the next one.
    """

    for index, boundary in enumerate(boundaries):
        if not is_point_inside_polygon(boundary.vertices, x, y):
            continue
        rid = region_id(index)
        if skip is not None and skip(rid, boundary):
            continue
        return RegionHit(id=rid, label=region_label(index), boundary=boundary)
    return None
