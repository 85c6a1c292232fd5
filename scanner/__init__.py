"""Scanner module for source discovery, dependency extraction and resolution."""

from .options import ScanOptions, ConfigError, load_options
from .discovery import iter_source_files
from .parser import scan_file, scan_lines, classify_line
from .paths import source_to_object_path
from .resolver import resolve_module, resolve_include
from .builder import build_graph, ScanResult

__all__ = [
    "ScanOptions",
    "ConfigError",
    "load_options",
    "iter_source_files",
    "scan_file",
    "scan_lines",
    "classify_line",
    "source_to_object_path",
    "resolve_module",
    "resolve_include",
    "build_graph",
    "ScanResult",
]
