"""Server-side SVG overlay for the annotation canvas.

The browser only ever receives a rendered image; polygon vertices stay on
the server. Each vertex is nudged by a deterministic hash so the outline
looks hand-drawn while identical inputs still give byte-identical output.
"""

from __future__ import annotations

import base64
import math
from dataclasses import dataclass
from typing import Iterable, Literal, Sequence

from .models import AnnotationBoundary, AnnotationDataset, AnnotationPoint
from .regions import get_boundary_by_id

CANVAS_WIDTH = 1049
CANVAS_HEIGHT = 695

DATA_URI_PREFIX = "data:image/svg+xml;base64,"

JITTER_AMPLITUDE = 0.3  # pixels

OUTLINE_STROKE = "rgba(148, 163, 184, 0.55)"

# kind -> (fill, stroke)
SEGMENT_STYLES = {
    "hover": ("rgba(59,130,246,0.35)", "rgba(37,99,235,0.95)"),
    "queue": ("rgba(220,38,38,0.28)", "rgba(220,38,38,0.95)"),
}

SegmentKind = Literal["hover", "queue"]


@dataclass(frozen=True)
class OverlaySegment:
    id: str
    boundary: AnnotationBoundary
    kind: SegmentKind


def jitter(a: float, b: float) -> float:
    """Pseudo-random offset in [-0.3, 0.3) derived from ``(a, b)``."""
    seed = math.sin(a * 12.9898 + b * 78.233) * 43758.5453
    return (seed - math.floor(seed)) * (2 * JITTER_AMPLITUDE) - JITTER_AMPLITUDE


def build_path_data(vertices: Sequence[AnnotationPoint]) -> str:
    """SVG path ``d`` attribute for a closed, jittered polygon."""
    if not vertices:
        return ""

    commands = []
    for index, vertex in enumerate(vertices):
        jx = vertex.x + jitter(vertex.x, vertex.y)
        jy = vertex.y + jitter(vertex.y, vertex.x)
        cmd = "M" if index == 0 else "L"
        commands.append(f"{cmd}{jx:.2f} {jy:.2f}")
    commands.append("Z")
    return " ".join(commands)


def collect_segments(
    dataset: AnnotationDataset,
    highlight_ids: Iterable[str] = (),
    hovered_id: str | None = None,
    disabled_ids: Iterable[str] = (),
) -> list[OverlaySegment]:
    """Queue segments (highlights minus hover) followed by the hover segment.

    Disabled ids and ids that do not resolve to a boundary are dropped.
    """

    disabled = set(disabled_ids)
    # dict.fromkeys dedupes while keeping request order
    queue = dict.fromkeys(highlight_ids)
    if hovered_id:
        queue.pop(hovered_id, None)

    segments: list[OverlaySegment] = []
    for rid in queue:
        if rid in disabled:
            continue
        boundary = get_boundary_by_id(dataset, rid)
        if boundary is None:
            continue
        segments.append(OverlaySegment(rid, boundary, "queue"))

    if hovered_id and hovered_id not in disabled:
        boundary = get_boundary_by_id(dataset, hovered_id)
        if boundary is not None:
            segments.append(OverlaySegment(hovered_id, boundary, "hover"))

    return segments


def _outline_path(boundary: AnnotationBoundary) -> str:
    path_data = build_path_data(boundary.vertices)
    return (
        f'<path d="{path_data}" fill="none" stroke="{OUTLINE_STROKE}" stroke-width="1" '
        'vector-effect="non-scaling-stroke" stroke-dasharray="4 6" />'
    )


def _segment_path(segment: OverlaySegment) -> str:
    fill, stroke = SEGMENT_STYLES[segment.kind]
    path_data = build_path_data(segment.boundary.vertices)
    return (
        f'<path d="{path_data}" fill="{fill}" stroke="{stroke}" stroke-width="2" '
        'vector-effect="non-scaling-stroke" />'
    )


def _drawable(boundary: AnnotationBoundary) -> bool:
    return len(boundary.vertices) >= 3


def to_data_uri(svg: str) -> str:
    return DATA_URI_PREFIX + base64.b64encode(svg.encode("utf-8")).decode("ascii")


def build_empty_overlay(width: int = CANVAS_WIDTH, height: int = CANVAS_HEIGHT) -> str:
    svg = (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
        f'viewBox="0 0 {width} {height}">\n'
        '  <rect width="100%" height="100%" fill="transparent" />\n'
        "</svg>"
    )
    return to_data_uri(svg)


def render_overlay_svg(
    dataset: AnnotationDataset,
    highlight_ids: Iterable[str] = (),
    hovered_id: str | None = None,
    disabled_ids: Iterable[str] = (),
    include_outline: bool = False,
    width: int = CANVAS_WIDTH,
    height: int = CANVAS_HEIGHT,
) -> str:
    """Compose the overlay and return it as a base64 SVG data URI.

    Never fails for "nothing to draw": with no segments and no outline the
    result is a transparent canvas of the right size.
    """

    outline = (
        [b for b in dataset.boundaries if _drawable(b)] if include_outline else []
    )
    segments = [
        s
        for s in collect_segments(dataset, highlight_ids, hovered_id, disabled_ids)
        if _drawable(s.boundary)
    ]

    if not segments and not outline:
        return build_empty_overlay(width, height)

    outline_paths = "\n".join(_outline_path(b) for b in outline)
    segment_paths = "\n".join(_segment_path(s) for s in segments)

    svg = (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
        f'viewBox="0 0 {width} {height}" shape-rendering="geometricPrecision">\n'
        '  <rect width="100%" height="100%" fill="transparent" />\n'
        f"  {outline_paths}\n"
        f"  {segment_paths}\n"
        "</svg>"
    )
    return to_data_uri(svg)


def decode_data_uri(data_uri: str) -> str:
    """Inverse of :func:`to_data_uri`; used by the CLI and tests."""
    if not data_uri.startswith(DATA_URI_PREFIX):
        raise ValueError("not an SVG base64 data URI")
    return base64.b64decode(data_uri[len(DATA_URI_PREFIX):]).decode("utf-8")
