"""Region id <-> boundary index convention.

The boundary at 0-based index ``i`` is ``"region-{i+1}"``. Ids are only
stable while the encrypted file keeps its boundary order.
"""

from __future__ import annotations

import re

from .models import AnnotationBoundary, AnnotationDataset

_REGION_ID_RE = re.compile(r"region-([0-9]+)")

LABEL_TEMPLATE = "領域 {number}"


def region_id(index: int) -> str:
    return f"region-{index + 1}"


def region_label(index: int) -> str:
    return LABEL_TEMPLATE.format(number=index + 1)


def region_index(rid: str) -> int | None:
    """0-based index encoded in *rid*, or ``None`` if it is malformed."""
    if not isinstance(rid, str):
        return None
    match = _REGION_ID_RE.fullmatch(rid)
    if match is None:
        return None
    return int(match.group(1)) - 1


def get_boundary_by_id(dataset: AnnotationDataset, rid: str) -> AnnotationBoundary | None:
    """Resolve *rid* against *dataset*; ``None`` on any parse or range failure."""
    index = region_index(rid)
    if index is None or index < 0 or index >= len(dataset.boundaries):
        return None
    return dataset.boundaries[index]
