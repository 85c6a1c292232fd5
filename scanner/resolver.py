"""Resolution of module and header names to concrete files."""

import logging
import posixpath
import re
from pathlib import Path
from typing import Mapping, Optional

from .options import ScanOptions
from .paths import normalize_path, source_to_object_path


logger = logging.getLogger(__name__)

# Extensions tried after the configured module extension
COMPILED_EXTENSIONS = (".cpp", ".cc", ".cxx")

# Search directories after the configured source root; "." is the project root
EXTRA_SEARCH_DIRS = ("include", "lib", ".")

STD_NAMESPACE = "std"

SYSTEM_HEADER = re.compile(r"^[a-z_]+$")


def is_standard_module(name: str) -> bool:
    """Check whether a module name starts with the standard-library prefix."""
    return name.startswith(STD_NAMESPACE)


def is_existing_file(path: Path) -> bool:
    """Check for a regular file, treating unusable paths as missing."""
    try:
        return path.is_file()
    except (OSError, ValueError):
        return False


def find_module_source(name: str, options: ScanOptions, root: Path) -> Optional[str]:
    """
    Search the project tree for a file that could provide module ``name``.
    
    The search is nested: name transform (literal, dots as directories,
    dots as underscores), then extension, then search directory.
    
    Returns:
        The first existing path, relative to ``root``, or None.
    """
    transforms = [name, name.replace(".", "/"), name.replace(".", "_")]
    extensions = [options.module_extension]
    extensions += [ext for ext in COMPILED_EXTENSIONS if ext != options.module_extension]
    search_dirs = [options.source_root] + [d for d in EXTRA_SEARCH_DIRS if d != options.source_root]
    
    for base in transforms:
        for ext in extensions:
            for search_dir in search_dirs:
                candidate = base + ext if search_dir == "." else posixpath.join(search_dir, base + ext)
                logger.debug("    checking %s", candidate)
                if is_existing_file(root / candidate):
                    return candidate
    return None


def resolve_module(
    name: str,
    registry: Mapping[str, str],
    options: ScanOptions,
    root: Path,
) -> Optional[str]:
    """
    Resolve an imported module name to the object file that provides it.
    
    Resolution order:
    1. The export registry (authoritative).
    2. Standard-library modules are skipped unless enabled.
    3. A filesystem search (see find_module_source).
    
    Args:
        name: Imported module name.
        registry: Module name -> exporting source path, as known so far.
        options: Scan options.
        root: Project root for the filesystem search.
    
    Returns:
        Object file path, or None if nothing provides the module.
    """
    def to_object(source: str) -> str:
        return source_to_object_path(
            source, options.source_root, options.object_root, options.object_extension
        )
    
    source = registry.get(name)
    if source is not None:
        logger.debug("  module %s exported by %s", name, source)
        return to_object(source)
    
    if is_standard_module(name) and not options.include_standard_modules:
        logger.debug("  skipping standard module %s", name)
        return None
    
    source = find_module_source(name, options, root)
    if source is None:
        logger.debug("  no source found for module %s", name)
        return None
    
    logger.debug("  module %s found at %s", name, source)
    return to_object(source)


def resolve_include(
    name: str,
    from_file: str,
    options: ScanOptions,
    root: Path,
) -> Optional[str]:
    """
    Resolve an included header name to a dependency path.
    
    Bare lowercase names (``vector``, ``cstdio``) are treated as standard
    headers and skipped. Other headers are looked up next to the including
    file, then from the project root. A header found nowhere is still
    returned under its literal name.
    
    Args:
        name: Header name as written in the directive.
        from_file: Path of the including file.
        options: Scan options.
        root: Project root.
    
    Returns:
        Header path, or None for standard headers.
    """
    if SYSTEM_HEADER.match(name):
        return None
    
    source_dir = posixpath.dirname(normalize_path(from_file))
    candidates = [posixpath.join(source_dir, name), name] if source_dir else [name]
    
    for candidate in candidates:
        if is_existing_file(root / candidate):
            return posixpath.normpath(candidate)
    
    logger.debug("  header %s not found, keeping literal name", name)
    return name
