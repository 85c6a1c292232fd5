"""Mapping between source file paths and object file paths."""

import posixpath
from typing import Iterator

# Fixed order used wherever a source extension has to be guessed
SOURCE_EXTENSIONS = (".cpp", ".cc", ".cxx", ".c++", ".cppm", ".ccm", ".cxxm", ".c++m")
MODULE_EXTENSIONS = (".cppm", ".ccm", ".cxxm", ".c++m")


def normalize_path(path: str) -> str:
    """Use forward slashes and drop any leading ``./``."""
    normalized = path.replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized


def replace_extension(path: str, extension: str) -> str:
    """Replace the extension of the last path component (or append one)."""
    head, tail = posixpath.split(path)
    stem, _ = posixpath.splitext(tail)
    return posixpath.join(head, stem + extension) if head else stem + extension


def source_to_object_path(
    source_path: str,
    source_root: str = "src",
    object_root: str = "obj",
    object_extension: str = ".o",
) -> str:
    """
    Map a source file path to the object file a build would produce.
    
    Sources under ``source_root`` are relocated under ``object_root``
    (``src/net/tcp.cpp`` -> ``obj/net/tcp.o``). Sources elsewhere keep
    their directory and only get the object extension
    (``gen/parser.cc`` -> ``gen/parser.o``).
    
    Args:
        source_path: Source file path as spelled by the caller.
        source_root: Directory that maps into the object tree.
        object_root: Root of the object tree.
        object_extension: Extension for object files.
    
    Returns:
        The object file path.
    """
    clean = normalize_path(source_path)
    prefix = source_root + "/"
    
    if source_root != "." and clean.startswith(prefix):
        relative = clean[len(prefix):]
        return replace_extension(posixpath.join(object_root, relative), object_extension)
    
    return replace_extension(clean, object_extension)


def object_to_source_candidates(target: str, object_extension: str = ".o") -> Iterator[str]:
    """
    Yield the source paths that could have produced ``target`` in place.
    
    One candidate per entry of SOURCE_EXTENSIONS, in that order.
    """
    stem = normalize_path(target)
    if stem.endswith(object_extension):
        stem = stem[: -len(object_extension)]
    for ext in SOURCE_EXTENSIONS:
        yield stem + ext
