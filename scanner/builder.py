"""Graph builder that orchestrates scanning, resolution and correction."""

import logging
from dataclasses import dataclass, replace
from pathlib import Path
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Set, Tuple

from graph.model import DependencyGraph, ExportRegistry
from .correction import correct_targets
from .discovery import collect_inventory, iter_source_files
from .options import ScanOptions
from .parser import SourceUnit, scan_file
from .paths import normalize_path, source_to_object_path
from .resolver import resolve_include, resolve_module


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanStats:
    """Counters collected during a scan."""
    
    files_processed: int = 0
    modules_found: int = 0
    imports_found: int = 0
    includes_found: int = 0
    errors: Tuple[str, ...] = ()
    
    def bump(self, **increments: int) -> "ScanStats":
        """Return a copy with the named counters increased."""
        return replace(self, **{name: getattr(self, name) + n for name, n in increments.items()})
    
    def with_error(self, message: str) -> "ScanStats":
        return replace(self, errors=self.errors + (message,))


@dataclass(frozen=True)
class ScanResult:
    """
    Read-only outcome of a scan.
    
    Attributes:
        options: Options the scan ran with.
        exports: Module name -> exporting source path.
        graph: Corrected dependency graph.
        stats: Counters and per-file errors.
        scanned: Paths of the files scanned, in scan order.
        inventory: Every source file found under the project root.
        module_imports: Source path -> modules it imports that resolved.
    """
    
    options: ScanOptions
    exports: Mapping[str, str]
    graph: DependencyGraph
    stats: ScanStats
    scanned: Tuple[str, ...]
    inventory: Tuple[str, ...]
    module_imports: Mapping[str, FrozenSet[str]]
    
    @property
    def has_modules(self) -> bool:
        """Whether any module was exported or any module import resolved."""
        return bool(self.exports) or any(self.module_imports.values())
    
    def object_files(self) -> List[str]:
        """Sorted object paths of every source in the inventory."""
        return sorted({self.target_for(source) for source in self.inventory})
    
    def target_for(self, source: str) -> str:
        opts = self.options
        return source_to_object_path(source, opts.source_root, opts.object_root, opts.object_extension)


class ScanState:
    """
    Accumulator threaded through a scan.
    
    Holds the export registry, the raw graph and the stats; ``snapshot``
    freezes them into a ScanResult.
    """
    
    def __init__(self, options: ScanOptions, root: Path):
        self.options = options
        self.root = root
        self.registry = ExportRegistry()
        self.graph = DependencyGraph()
        self.stats = ScanStats()
        self.scanned: List[str] = []
        self.module_imports: Dict[str, Set[str]] = {}
    
    def read(self, path: str) -> Optional[SourceUnit]:
        """
        Scan one file, recording read failures instead of raising.
        
        Returns:
            The parsed unit, or None if the file could not be read.
        """
        self.stats = self.stats.bump(files_processed=1)
        self.scanned.append(path)
        logger.info("Processing: %s", path)
        
        try:
            unit = scan_file(path, self.options, self.root)
        except (OSError, UnicodeDecodeError) as e:
            message = f"Error processing {path}: {e}"
            self.stats = self.stats.with_error(message)
            logger.warning(message)
            return None
        
        self.stats = self.stats.bump(
            imports_found=unit.import_statements,
            includes_found=unit.include_statements,
        )
        return unit
    
    def register_exports(self, unit: SourceUnit) -> None:
        for module_name in sorted(unit.exports):
            self.registry.register(module_name, unit.path)
            self.stats = self.stats.bump(modules_found=1)
    
    def resolve(self, unit: SourceUnit) -> None:
        """Resolve the unit's imports and includes into graph edges."""
        if not unit.imports and not unit.includes:
            return
        
        opts = self.options
        target = source_to_object_path(
            unit.path, opts.source_root, opts.object_root, opts.object_extension
        )
        
        for module_name in sorted(unit.imports):
            dependency = resolve_module(module_name, self.registry, opts, self.root)
            if dependency is None:
                continue
            self.graph.add_edge(target, normalize_path(dependency))
            self.module_imports.setdefault(unit.path, set()).add(module_name)
        
        if opts.process_includes:
            for header in sorted(unit.includes):
                dependency = resolve_include(header, unit.path, opts, self.root)
                if dependency is None:
                    continue
                self.graph.add_edge(target, normalize_path(dependency))
    
    def snapshot(self, inventory: Iterable[str]) -> ScanResult:
        """Run the correction pass and freeze the accumulated state."""
        inventory = tuple(inventory)
        corrected = correct_targets(self.graph, inventory, self.options, self.root)
        return ScanResult(
            options=self.options,
            exports=MappingProxyType(self.registry.as_dict()),
            graph=corrected,
            stats=self.stats,
            scanned=tuple(self.scanned),
            inventory=inventory,
            module_imports=MappingProxyType(
                {path: frozenset(names) for path, names in self.module_imports.items()}
            ),
        )


def expand_inputs(inputs: Iterable[str], root: Path) -> List[str]:
    """
    Turn file and directory arguments into a list of source paths.
    
    Absolute paths inside ``root`` are made relative to it. Arguments that
    are neither files nor directories are logged and skipped.
    """
    files: List[str] = []
    for arg in inputs:
        path = Path(arg)
        if path.is_absolute():
            try:
                arg = path.resolve().relative_to(root.resolve()).as_posix() or "."
            except ValueError:
                pass
        full = Path(arg) if Path(arg).is_absolute() else root / arg
        
        if full.is_dir():
            logger.info("Parsing directory: %s", arg)
            files.extend(iter_source_files(arg, root))
        elif full.is_file():
            files.append(arg.replace("\\", "/"))
        else:
            logger.warning("%s is not a valid file or directory", arg)
    return files


def build_graph(
    inputs: Optional[Iterable[str]] = None,
    options: Optional[ScanOptions] = None,
    root: Optional[Path] = None,
) -> ScanResult:
    """
    Scan sources and build the corrected dependency graph.
    
    In the default single-pass mode a file only sees modules exported by
    files scanned before it (the filesystem search still applies). With
    ``options.two_pass`` every export is registered before any import is
    resolved.
    
    Args:
        inputs: Files and directories to scan (default: the project root).
        options: Scan options (default: ScanOptions()).
        root: Project root all relative paths refer to (default: cwd).
    
    Returns:
        ScanResult for the run.
    """
    if options is None:
        options = ScanOptions()
    root = Path(root) if root is not None else Path.cwd()
    if inputs is None:
        inputs = ["."]
    
    files = expand_inputs(inputs, root)
    logger.info("Found %d C++ files", len(files))
    
    state = ScanState(options, root)
    units = [unit for unit in (state.read(path) for path in files) if unit is not None]
    
    if options.two_pass:
        for unit in units:
            state.register_exports(unit)
        for unit in units:
            state.resolve(unit)
    else:
        for unit in units:
            state.resolve(unit)
            state.register_exports(unit)
    
    return state.snapshot(collect_inventory(root))
