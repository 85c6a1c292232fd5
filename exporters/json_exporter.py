"""JSON exporter for scan results (machine-friendly format)."""

import json
from typing import Any, Dict, List

from scanner.builder import ScanResult


def to_json(result: ScanResult, indent: int = 2) -> str:
    """
    Convert a scan result to JSON.
    
    Args:
        result: The scan result to export.
        indent: JSON indentation level.
    
    Returns:
        JSON document with ``targets``, ``exports``, ``objects`` and ``stats``.
    """
    targets: Dict[str, List[str]] = {}
    for target, prerequisites in result.graph.iter_rules():
        targets[target] = list(prerequisites)
    
    stats = result.stats
    data: Dict[str, Any] = {
        "source_root": result.options.source_root,
        "object_root": result.options.object_root,
        "targets": targets,
        "exports": {name: result.exports[name] for name in sorted(result.exports)},
        "objects": result.object_files(),
        "stats": {
            "files_processed": stats.files_processed,
            "modules_found": stats.modules_found,
            "imports_found": stats.imports_found,
            "includes_found": stats.includes_found,
            "errors": list(stats.errors),
        },
    }
    
    return json.dumps(data, indent=indent)
