"""Enumeration of C++ source files in a project tree."""

from pathlib import Path
from typing import Iterator, Optional, Set

from .paths import SOURCE_EXTENSIONS


DEFAULT_EXTENSIONS = set(SOURCE_EXTENSIONS)
DEFAULT_EXCLUDE_DIRS = {
    ".git", ".hg", ".svn",
    "node_modules", "__pycache__",
    ".idea", ".vscode",
    "gcm.cache", "CMakeFiles",
}


def iter_source_files(
    directory: str,
    root: Path,
    exclude_dirs: Optional[Set[str]] = None,
) -> Iterator[str]:
    """
    Iterate over the C++ sources below a directory.
    
    Paths are spelled the way the directory was: ``"."`` yields
    ``./src/main.cpp``, ``""`` yields ``src/main.cpp``. Hidden directories
    are skipped.
    
    Args:
        directory: Directory to scan, relative to ``root`` unless absolute.
        root: Project root.
        exclude_dirs: Directory names to skip (default: DEFAULT_EXCLUDE_DIRS).
    
    Yields:
        Source paths as POSIX strings, sorted within each directory.
    """
    if exclude_dirs is None:
        exclude_dirs = DEFAULT_EXCLUDE_DIRS
    
    start = Path(directory) if directory else Path(".")
    if not start.is_absolute():
        start = root / start
    prefix = directory.replace("\\", "/").rstrip("/") if directory else ""
    
    def _walk(current: Path, relative: str) -> Iterator[str]:
        try:
            entries = sorted(current.iterdir())
        except PermissionError:
            return
        
        for entry in entries:
            name = f"{relative}/{entry.name}" if relative else entry.name
            if entry.is_dir():
                if entry.name.startswith(".") or entry.name in exclude_dirs:
                    continue
                yield from _walk(entry, name)
            elif entry.is_file():
                if entry.suffix.lower() in DEFAULT_EXTENSIONS:
                    yield f"{prefix}/{name}" if prefix else name
    
    yield from _walk(start, "")


def collect_inventory(root: Path, exclude_dirs: Optional[Set[str]] = None) -> Iterator[str]:
    """Iterate over every source file under the project root."""
    return iter_source_files("", root, exclude_dirs)
