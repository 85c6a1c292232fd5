"""Extraction of module imports, exports and includes from C++ sources."""

import enum
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import FrozenSet, Iterable, List, NamedTuple, Optional, Set, Tuple

from .options import ScanOptions


logger = logging.getLogger(__name__)

# Module names: foo, foo.bar, foo.bar:part, _detail
IDENTIFIER = r"[a-zA-Z_][a-zA-Z0-9_.:]*"


class LineKind(enum.Enum):
    """What a cleaned source line declares."""
    
    IMPORT = "import"
    SYSTEM_IMPORT = "system_import"
    LOCAL_IMPORT = "local_import"
    EXPORT = "export"
    MODULE_IMPL = "module_impl"
    SYSTEM_INCLUDE = "system_include"
    LOCAL_INCLUDE = "local_include"
    NONE = "none"


# Tried in order; the first match classifies the line.
LINE_PATTERNS: List[Tuple[LineKind, "re.Pattern[str]"]] = [
    (LineKind.IMPORT, re.compile(rf"^\s*import\s+({IDENTIFIER})\s*;")),
    (LineKind.SYSTEM_IMPORT, re.compile(r"^\s*import\s+<([^>]+)>\s*;")),
    (LineKind.LOCAL_IMPORT, re.compile(r'^\s*import\s+"([^"]+)"\s*;')),
    (LineKind.EXPORT, re.compile(rf"^\s*export\s+module\s+({IDENTIFIER})\s*;")),
    (LineKind.MODULE_IMPL, re.compile(rf"^\s*module\s+({IDENTIFIER})\s*;")),
    (LineKind.SYSTEM_INCLUDE, re.compile(r"^\s*#\s*include\s+<([^>]+)>")),
    (LineKind.LOCAL_INCLUDE, re.compile(r'^\s*#\s*include\s+"([^"]+)"')),
]

IMPORT_KINDS = {LineKind.IMPORT, LineKind.SYSTEM_IMPORT, LineKind.LOCAL_IMPORT}
EXPORT_KINDS = {LineKind.EXPORT, LineKind.MODULE_IMPL}
INCLUDE_KINDS = {LineKind.SYSTEM_INCLUDE, LineKind.LOCAL_INCLUDE}


class LineMatch(NamedTuple):
    kind: LineKind
    name: Optional[str] = None


@dataclass(frozen=True)
class SourceUnit:
    """
    Dependency-relevant content of one source file.
    
    ``import_statements`` and ``include_statements`` count every statement
    seen, including the ones filtered out by the options.
    """
    
    path: str
    imports: FrozenSet[str] = frozenset()
    exports: FrozenSet[str] = frozenset()
    includes: FrozenSet[str] = frozenset()
    import_statements: int = 0
    include_statements: int = 0


def strip_comments(line: str, in_block: bool) -> Tuple[str, bool]:
    """
    Remove comment text from a line.
    
    Args:
        line: Raw source line.
        in_block: Whether the line starts inside a ``/* */`` comment.
    
    Returns:
        The remaining code and whether a block comment is still open at
        the end of the line.
    """
    kept: List[str] = []
    rest = line
    
    while rest:
        if in_block:
            end = rest.find("*/")
            if end == -1:
                return "".join(kept), True
            rest = rest[end + 2:]
            in_block = False
            kept.append(" ")
            continue
        
        block = rest.find("/*")
        single = rest.find("//")
        if single != -1 and (block == -1 or single < block):
            kept.append(rest[:single])
            break
        if block == -1:
            kept.append(rest)
            break
        
        kept.append(rest[:block])
        rest = rest[block + 2:]
        in_block = True
    
    return "".join(kept), in_block


def classify_line(line: str) -> LineMatch:
    """Classify a comment-free line against LINE_PATTERNS."""
    for kind, pattern in LINE_PATTERNS:
        match = pattern.match(line)
        if match:
            return LineMatch(kind, match.group(1))
    return LineMatch(LineKind.NONE)


def scan_lines(
    lines: Iterable[str],
    options: Optional[ScanOptions] = None,
    path: str = "",
) -> SourceUnit:
    """
    Extract imports, exports and includes from source lines.
    
    Args:
        lines: File content, one line per item (trailing newlines allowed).
        options: Scan options (default: ScanOptions()).
        path: Path recorded on the resulting unit.
    
    Returns:
        A SourceUnit; all sets may be empty.
    """
    if options is None:
        options = ScanOptions()
    
    imports: Set[str] = set()
    exports: Set[str] = set()
    includes: Set[str] = set()
    import_statements = 0
    include_statements = 0
    in_block = False
    
    for line_num, raw in enumerate(lines, start=1):
        code, in_block = strip_comments(raw.rstrip("\r\n"), in_block)
        code = code.strip()
        if not code:
            continue
        
        kind, name = classify_line(code)
        if kind is LineKind.NONE:
            continue
        
        logger.debug("%s:%d: %s %s", path, line_num, kind.value, name)
        
        if kind in IMPORT_KINDS:
            import_statements += 1
            if kind is not LineKind.SYSTEM_IMPORT or options.include_standard_modules:
                imports.add(name)
        elif kind in EXPORT_KINDS:
            exports.add(name)
        elif kind in INCLUDE_KINDS:
            include_statements += 1
            if options.process_includes:
                includes.add(name)
    
    return SourceUnit(
        path=path,
        imports=frozenset(imports),
        exports=frozenset(exports),
        includes=frozenset(includes),
        import_statements=import_statements,
        include_statements=include_statements,
    )


def scan_file(path: str, options: Optional[ScanOptions] = None, root: Optional[Path] = None) -> SourceUnit:
    """
    Read and scan one source file.
    
    Args:
        path: File path, relative to ``root`` unless absolute.
        options: Scan options.
        root: Project root (default: current directory).
    
    Raises:
        OSError, UnicodeDecodeError: If the file cannot be read.
    """
    file_path = Path(path)
    if root is not None and not file_path.is_absolute():
        file_path = root / file_path
    
    content = file_path.read_text(encoding="utf-8")
    return scan_lines(content.splitlines(), options, path=path)
