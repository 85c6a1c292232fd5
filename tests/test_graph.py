"""Tests for graph data model and the correction pass."""

import logging
import pytest
from pathlib import Path
import tempfile

from graph.model import DependencyGraph, ExportRegistry
from scanner.correction import correct_targets
from scanner.options import ScanOptions


class TestDependencyGraph:
    """Tests for DependencyGraph class."""
    
    def test_empty_graph(self):
        """Test empty graph initialization."""
        graph = DependencyGraph()
        assert len(graph) == 0
        assert graph.targets == set()
        assert graph.edges == {}
    
    def test_add_edge(self):
        """Test adding edges."""
        graph = DependencyGraph()
        
        graph.add_edge("obj/a.o", "obj/b.o")
        
        assert len(graph) == 1
        assert "obj/a.o" in graph
        assert "obj/b.o" not in graph
        assert graph.get_prerequisites("obj/a.o") == {"obj/b.o"}
    
    def test_duplicate_edges_collapse(self):
        """Test edges are a set union."""
        graph = DependencyGraph()
        
        graph.add_edge("obj/a.o", "obj/b.o")
        graph.add_edges("obj/a.o", ["obj/b.o", "src/a.h"])
        
        assert graph.get_prerequisites("obj/a.o") == {"obj/b.o", "src/a.h"}
    
    def test_edges_are_copies(self):
        """Test the edges property returns a copy."""
        graph = DependencyGraph({"obj/a.o": ["obj/b.o"]})
        
        edges = graph.edges
        edges["obj/a.o"].add("obj/c.o")
        
        assert graph.get_prerequisites("obj/a.o") == {"obj/b.o"}
    
    def test_iter_rules_sorted(self):
        """Test rules are sorted by target and prerequisite."""
        graph = DependencyGraph({"obj/z.o": ["obj/b.o", "obj/a.o"], "obj/m.o": ["obj/a.o"]})
        
        rules = list(graph.iter_rules())
        
        assert rules == [("obj/m.o", ("obj/a.o",)), ("obj/z.o", ("obj/a.o", "obj/b.o"))]
    
    def test_iter_rules_suffix_filter(self):
        """Test header prerequisites are filtered and empty targets dropped."""
        graph = DependencyGraph({"obj/a.o": ["obj/b.o", "src/a.h"], "obj/c.o": ["src/c.h"]})
        graph.add_target("obj/d.o")
        
        assert list(graph.iter_rules(suffix=".o")) == [("obj/a.o", ("obj/b.o",))]
        assert [t for t, _ in graph.iter_rules()] == ["obj/a.o", "obj/c.o"]
    
    def test_cycles_are_kept(self):
        """Test cycles are stored as-is."""
        graph = DependencyGraph({"obj/a.o": ["obj/b.o"], "obj/b.o": ["obj/a.o"]})
        
        assert list(graph.iter_edges()) == [("obj/a.o", "obj/b.o"), ("obj/b.o", "obj/a.o")]
    
    def test_repr(self):
        """Test string representation."""
        graph = DependencyGraph({"obj/a.o": ["obj/b.o", "obj/c.o"]})
        
        assert "targets=1" in repr(graph)
        assert "edges=2" in repr(graph)


class TestExportRegistry:
    """Tests for ExportRegistry class."""
    
    def test_register(self):
        """Test registering and looking up modules."""
        registry = ExportRegistry()
        
        registry.register("math", "src/math.cppm")
        
        assert "math" in registry
        assert registry["math"] == "src/math.cppm"
        assert registry.get("other") is None
        assert len(registry) == 1
    
    def test_last_writer_wins(self, caplog):
        """Test a second exporter replaces the first with a warning."""
        registry = ExportRegistry()
        
        with caplog.at_level(logging.WARNING):
            registry.register("math", "src/a.cppm")
            registry.register("math", "src/b.cppm")
        
        assert registry["math"] == "src/b.cppm"
        assert "exported by both" in caplog.text
    
    def test_as_dict_copy(self):
        """Test as_dict does not expose internal state."""
        registry = ExportRegistry()
        registry.register("math", "src/math.cppm")
        
        exports = registry.as_dict()
        exports["other"] = "x.cppm"
        
        assert "other" not in registry


class TestCorrectionPass:
    """Tests for target correction."""
    
    @pytest.fixture
    def project(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            for name in ("src/a.cpp", "src/b.cppm", "tools/gen.cc"):
                path = root / name
                path.parent.mkdir(parents=True, exist_ok=True)
                path.touch()
            yield root
    
    def test_canonical_targets_unchanged(self, project):
        """Test targets already canonical are kept."""
        graph = DependencyGraph({"obj/a.o": ["obj/b.o"]})
        
        corrected = correct_targets(graph, ["src/a.cpp", "src/b.cppm"], ScanOptions(), project)
        
        assert corrected.edges == {"obj/a.o": {"obj/b.o"}}
    
    def test_two_spellings_merge(self, project):
        """Test ./-prefixed and plain spellings collapse into one target."""
        graph = DependencyGraph()
        graph.add_edge("./obj/a.o", "obj/b.o")
        graph.add_edge("obj/a.o", "src/a.h")
        
        corrected = correct_targets(graph, ["src/a.cpp", "src/b.cppm"], ScanOptions(), project)
        
        assert corrected.edges == {"obj/a.o": {"obj/b.o", "src/a.h"}}
    
    def test_source_tree_target_reverse_engineered(self, project):
        """Test a target named inside the source tree is moved to the object tree."""
        graph = DependencyGraph({"src/a.o": ["obj/b.o"], "obj/a.o": ["src/a.h"]})
        
        # Inventory without src/a.cpp forces the extension search
        corrected = correct_targets(graph, ["src/b.cppm"], ScanOptions(), project)
        
        assert corrected.edges == {"obj/a.o": {"obj/b.o", "src/a.h"}}
    
    def test_unknown_target_kept(self, project):
        """Test targets without a source stay as they are."""
        graph = DependencyGraph({"elsewhere/x.o": ["obj/b.o"]})
        
        corrected = correct_targets(graph, ["src/a.cpp"], ScanOptions(), project)
        
        assert corrected.edges == {"elsewhere/x.o": {"obj/b.o"}}
    
    def test_outside_source_root(self, project):
        """Test sources outside the source root keep their location."""
        graph = DependencyGraph({"tools/gen.o": ["obj/b.o"]})
        
        corrected = correct_targets(graph, ["tools/gen.cc"], ScanOptions(), project)
        
        assert corrected.edges == {"tools/gen.o": {"obj/b.o"}}
    
    def test_input_graph_untouched(self, project):
        """Test correction returns a new graph."""
        graph = DependencyGraph({"src/a.o": ["obj/b.o"]})
        
        correct_targets(graph, [], ScanOptions(), project)
        
        assert graph.edges == {"src/a.o": {"obj/b.o"}}
