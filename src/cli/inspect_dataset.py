#!/usr/bin/env python3
"""CLI for checking that the configured key can open the dataset."""

from pathlib import Path

from src.annotation.errors import AnnotationError
from src.annotation.loader import load_annotation_dataset
from src.annotation.regions import region_id, region_label


def main(path: str | None = None, key: str | None = None) -> int:
    """Print one line per region; vertices are never printed."""
    candidates = [Path(path)] if path else None
    try:
        dataset = load_annotation_dataset(secret=key, candidates=candidates)
    except AnnotationError as exc:
        print(f"Error: {type(exc).__name__}: {exc}")
        return 1

    print(f"{len(dataset.boundaries)} regions")
    for index, boundary in enumerate(dataset.boundaries):
        print(
            f"  {region_id(index):<12} {region_label(index):<8} "
            f"vertices={len(boundary.vertices):<4} "
            f"score={boundary.score:.3f} iou={boundary.iou:.3f}"
        )
    return 0
