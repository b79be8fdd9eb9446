"""Filtering and de-duplication of extracted paths."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Set, Tuple

from .config import AnalysisConfig
from .models import Catalog, Path, PathKind

logger = logging.getLogger(__name__)


def matches_target(path: Path, target: str) -> bool:
    """Case-insensitive substring match on the path's name or text."""
    if not target:
        return True
    needle = target.lower()
    return needle in path.name.lower() or needle in path.text.lower()


def matches_kind(path: Path, kind: str) -> bool:
    return kind == "all" or path.kind.value == kind


def build_catalog(paths: Iterable[Path], config: Optional[AnalysisConfig] = None) -> Catalog:
    """Filter by target, then by kind, then collapse duplicate ``(kind, text)``.

    Filtering happens before de-duplication, so first-seen order refers to
    the surviving paths.
    """
    config = config or AnalysisConfig()

    seen: Set[Tuple[PathKind, str]] = set()
    kept: List[Path] = []
    total = 0
    for path in paths:
        total += 1
        if not matches_target(path, config.target):
            continue
        if not matches_kind(path, config.kind):
            continue
        if path.key in seen:
            continue
        seen.add(path.key)
        kept.append(path)

    logger.debug("Catalog kept %d of %d paths", len(kept), total)
    return Catalog(tuple(kept))
