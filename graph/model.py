"""Graph data model for build targets and module exports."""

import logging
from typing import Dict, Iterable, Iterator, Mapping, Optional, Set, Tuple


logger = logging.getLogger(__name__)


class ExportRegistry:
    """
    Module name -> path of the source file that exports it.
    
    Only grows. A module exported from two files keeps the last one seen.
    """
    
    def __init__(self):
        self._exports: Dict[str, str] = {}
    
    def register(self, module_name: str, source_path: str) -> None:
        """Record that ``source_path`` exports ``module_name``."""
        previous = self._exports.get(module_name)
        if previous is not None and previous != source_path:
            logger.warning(
                "Module '%s' exported by both %s and %s; using %s",
                module_name, previous, source_path, source_path,
            )
        self._exports[module_name] = source_path
    
    def get(self, module_name: str, default: Optional[str] = None) -> Optional[str]:
        return self._exports.get(module_name, default)
    
    def as_dict(self) -> Dict[str, str]:
        """Return a copy of the registry contents."""
        return dict(self._exports)
    
    def __getitem__(self, module_name: str) -> str:
        return self._exports[module_name]
    
    def __contains__(self, module_name: object) -> bool:
        return module_name in self._exports
    
    def __len__(self) -> int:
        return len(self._exports)
    
    def __repr__(self) -> str:
        return f"ExportRegistry(modules={len(self._exports)})"


class DependencyGraph:
    """
    Build targets and their prerequisites.
    
    Keys are object file paths; prerequisites are object file paths or
    header paths. Edges are only ever added; duplicates collapse.
    """
    
    def __init__(self, edges: Optional[Mapping[str, Iterable[str]]] = None):
        self._edges: Dict[str, Set[str]] = {}
        if edges:
            for target, prerequisites in edges.items():
                self.add_edges(target, prerequisites)
    
    @property
    def targets(self) -> Set[str]:
        """Return every target in the graph."""
        return set(self._edges)
    
    @property
    def edges(self) -> Dict[str, Set[str]]:
        """Return adjacency list representation of edges."""
        return {k: v.copy() for k, v in self._edges.items()}
    
    def add_target(self, target: str) -> None:
        """Add a target with no prerequisites (no-op if present)."""
        self._edges.setdefault(target, set())
    
    def add_edge(self, target: str, prerequisite: str) -> None:
        """Add a directed edge from target to prerequisite."""
        self._edges.setdefault(target, set()).add(prerequisite)
    
    def add_edges(self, target: str, prerequisites: Iterable[str]) -> None:
        """Union ``prerequisites`` into the target's prerequisite set."""
        self._edges.setdefault(target, set()).update(prerequisites)
    
    def get_prerequisites(self, target: str) -> Set[str]:
        """Get everything the target depends on."""
        return self._edges.get(target, set()).copy()
    
    def iter_rules(self, suffix: Optional[str] = None) -> Iterator[Tuple[str, Tuple[str, ...]]]:
        """
        Iterate over (target, sorted prerequisites), sorted by target.
        
        Args:
            suffix: If given, keep only prerequisites ending with it
                (e.g. ".o" for object-to-object rules).
        
        Targets left without prerequisites are skipped.
        """
        for target in sorted(self._edges):
            prerequisites = self._edges[target]
            if suffix is not None:
                prerequisites = {p for p in prerequisites if p.endswith(suffix)}
            if prerequisites:
                yield target, tuple(sorted(prerequisites))
    
    def iter_edges(self) -> Iterator[Tuple[str, str]]:
        """Iterate over all edges as (target, prerequisite) tuples."""
        for target in sorted(self._edges):
            for prerequisite in sorted(self._edges[target]):
                yield target, prerequisite
    
    def __len__(self) -> int:
        """Return the number of targets in the graph."""
        return len(self._edges)
    
    def __contains__(self, target: object) -> bool:
        return target in self._edges
    
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DependencyGraph):
            return NotImplemented
        return self._edges == other._edges
    
    def __repr__(self) -> str:
        return f"DependencyGraph(targets={len(self._edges)}, edges={sum(len(p) for p in self._edges.values())})"
