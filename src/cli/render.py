#!/usr/bin/env python3
"""CLI for rendering an overlay to a local SVG file."""

from pathlib import Path

from src.annotation.errors import AnnotationError
from src.annotation.loader import load_annotation_dataset
from src.annotation.render import decode_data_uri, render_overlay_svg
from src.core.config import settings


def main(
    out: str,
    hover: str | None = None,
    queue: list[str] | None = None,
    disabled: list[str] | None = None,
    outline: bool = False,
    path: str | None = None,
    key: str | None = None,
) -> int:
    candidates = [Path(path)] if path else None
    try:
        dataset = load_annotation_dataset(secret=key, candidates=candidates)
    except AnnotationError as exc:
        print(f"Error: {type(exc).__name__}: {exc}")
        return 1

    data_uri = render_overlay_svg(
        dataset,
        highlight_ids=queue or [],
        hovered_id=hover,
        disabled_ids=disabled or [],
        include_outline=outline,
        width=settings.canvas_width,
        height=settings.canvas_height,
    )
    target = Path(out)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(decode_data_uri(data_uri), encoding="utf-8")
    print(f"✓ Wrote {target}")
    return 0
