"""Tests for the command line interface."""

import json
import pytest
from pathlib import Path

from cli import build_options, main, parse_args


@pytest.fixture
def project(tmp_path: Path) -> Path:
    for name, content in {
        "src/a.cpp": "import b;\n",
        "src/b.cppm": "export module b;\n",
    }.items():
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return tmp_path


class TestArguments:
    """Tests for argument parsing and option layering."""
    
    def test_defaults(self):
        """Test unset flags stay None so config values survive."""
        parsed = parse_args([])
        
        assert parsed.paths == []
        assert parsed.include_std is None
        assert parsed.process_includes is None
    
    def test_flags_override_config(self, tmp_path: Path):
        """Test command-line flags win over the config file."""
        config = tmp_path / "cppdeps.json"
        config.write_text('{"source_root": "code", "object_root": "out"}', encoding="utf-8")
        
        parsed = parse_args(["--config", str(config), "--obj-dir", "build", "--no-headers"])
        options = build_options(parsed, tmp_path)
        
        assert options.source_root == "code"
        assert options.object_root == "build"
        assert options.process_includes is False


class TestMain:
    """Tests for the main entry point."""
    
    def test_fragment_to_stdout(self, project, capsys):
        """Test the default output."""
        assert main(["-C", str(project)]) == 0
        
        captured = capsys.readouterr()
        assert "obj/a.o: obj/b.o" in captured.out
        assert "Summary: 2 files, 1 modules, 1 imports" in captured.err
    
    def test_output_files(self, project, capsys):
        """Test every requested output file is written."""
        result = main([
            "-C", str(project),
            "-o", str(project / "out" / "deps.mk"),
            "-m", str(project / "out" / "Makefile"),
            "-r", str(project / "out" / "report.txt"),
            "-j", str(project / "out" / "deps.json"),
            "src",
        ])
        
        assert result == 0
        assert "obj/a.o: obj/b.o" in (project / "out" / "deps.mk").read_text()
        assert "help:" in (project / "out" / "Makefile").read_text()
        assert "Generated:" in (project / "out" / "report.txt").read_text()
        data = json.loads((project / "out" / "deps.json").read_text())
        assert data["targets"] == {"obj/a.o": ["obj/b.o"]}
        assert "obj/a.o" not in capsys.readouterr().out
    
    def test_write_failure_does_not_stop_other_outputs(self, project, capsys):
        """Test a failed write is reported while other outputs are written."""
        blocker = project / "blocker"
        blocker.write_text("", encoding="utf-8")
        
        result = main([
            "-C", str(project),
            "-m", str(blocker / "Makefile"),
            "-o", str(project / "deps.mk"),
        ])
        
        assert result == 1
        assert (project / "deps.mk").exists()
        assert "Error writing" in capsys.readouterr().err
    
    def test_bad_root(self, tmp_path: Path, capsys):
        """Test a missing root directory."""
        assert main(["-C", str(tmp_path / "missing")]) == 1
        assert "is not a directory" in capsys.readouterr().err
    
    def test_bad_config(self, project, capsys):
        """Test configuration errors are reported."""
        config = project / "cppdeps.json"
        config.write_text('{"bogus": 1}', encoding="utf-8")
        
        assert main(["-C", str(project), "--config", "cppdeps.json"]) == 1
        assert "unknown option" in capsys.readouterr().err
    
    def test_verbose_prints_report(self, project, capsys):
        """Test --verbose prints the report to stdout."""
        assert main(["-C", str(project), "-v"]) == 0
        
        assert "=== C++ Module Dependency Analysis Report ===" in capsys.readouterr().out
