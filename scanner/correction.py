"""Post-scan reconciliation of target names with the real source inventory."""

import logging
from pathlib import Path
from typing import Dict, Iterable, Optional

from graph.model import DependencyGraph
from .options import ScanOptions
from .paths import normalize_path, object_to_source_candidates, source_to_object_path
from .resolver import is_existing_file


logger = logging.getLogger(__name__)


def _map(source: str, options: ScanOptions) -> str:
    return source_to_object_path(
        source, options.source_root, options.object_root, options.object_extension
    )


def find_source_for_target(
    target: str,
    object_index: Dict[str, str],
    options: ScanOptions,
    root: Path,
) -> Optional[str]:
    """
    Find the source file a raw target was meant to name.
    
    Args:
        target: Target as recorded during scanning.
        object_index: Mapped object path -> source path for the inventory.
        options: Scan options.
        root: Project root.
    
    Returns:
        The source path, or None if no source can be attributed.
    """
    source = object_index.get(normalize_path(target))
    if source is not None:
        return source
    
    # A target named after the source tree instead of the object tree
    if normalize_path(target).startswith(options.source_root + "/"):
        for candidate in object_to_source_candidates(target, options.object_extension):
            if is_existing_file(root / candidate):
                logger.debug("    reverse-engineered source: %s", candidate)
                return candidate
    
    return None


def correct_targets(
    graph: DependencyGraph,
    sources: Iterable[str],
    options: ScanOptions,
    root: Path,
) -> DependencyGraph:
    """
    Rewrite every target to the canonical object path of its source.
    
    Targets whose source cannot be found are kept as they are. Targets
    that collapse onto the same canonical path have their prerequisites
    merged.
    
    Args:
        graph: Graph accumulated during scanning.
        sources: Every source file on disk.
        options: Scan options.
        root: Project root.
    
    Returns:
        A new, corrected graph.
    """
    object_index: Dict[str, str] = {}
    for source in sources:
        # first spelling wins, as in a sorted glob
        object_index.setdefault(_map(source, options), source)
    
    corrected = DependencyGraph()
    for target, prerequisites in graph.edges.items():
        source = find_source_for_target(target, object_index, options, root)
        if source is not None:
            canonical = _map(source, options)
            if canonical != target:
                logger.debug("  fixed target: %s -> %s", target, canonical)
        else:
            canonical = target
            logger.debug("  kept target: %s (no source found)", target)
        corrected.add_edges(canonical, prerequisites)
    
    return corrected
