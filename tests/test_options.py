"""Tests for scan options and configuration files."""

import pytest
from pathlib import Path

from scanner.options import ConfigError, ScanOptions, load_options, options_from_mapping


class TestScanOptions:
    """Tests for the ScanOptions dataclass."""
    
    def test_defaults(self):
        """Test default values."""
        options = ScanOptions()
        
        assert options.include_standard_modules is False
        assert options.process_includes is True
        assert options.module_extension == ".cppm"
        assert options.source_root == "src"
        assert options.object_root == "obj"
        assert options.object_extension == ".o"
        assert options.two_pass is False
    
    def test_normalization(self):
        """Test extensions gain a dot and roots lose slashes."""
        options = ScanOptions(module_extension="ixx", source_root="./source/", object_root="build//")
        
        assert options.module_extension == ".ixx"
        assert options.source_root == "source"
        assert options.object_root == "build"
    
    def test_merged_ignores_none(self):
        """Test None overrides leave values alone."""
        options = ScanOptions(source_root="lib").merged(source_root=None, object_root="out")
        
        assert options.source_root == "lib"
        assert options.object_root == "out"


class TestConfigFiles:
    """Tests for configuration file loading."""
    
    def test_yaml(self, tmp_path: Path):
        """Test a YAML config with dashed keys."""
        config = tmp_path / "cppdeps.yaml"
        config.write_text("source-root: source\ninclude-standard-modules: true\n", encoding="utf-8")
        
        options = load_options(config)
        
        assert options.source_root == "source"
        assert options.include_standard_modules is True
    
    def test_empty_yaml(self, tmp_path: Path):
        """Test an empty YAML file gives defaults."""
        config = tmp_path / "cppdeps.yml"
        config.write_text("", encoding="utf-8")
        
        assert load_options(config) == ScanOptions()
    
    def test_pyproject_table(self, tmp_path: Path):
        """Test the [tool.cppdeps] table of pyproject.toml."""
        config = tmp_path / "pyproject.toml"
        config.write_text(
            '[project]\nname = "x"\n\n[tool.cppdeps]\nobject_root = "build"\ntwo_pass = true\n',
            encoding="utf-8",
        )
        
        options = load_options(config)
        
        assert options.object_root == "build"
        assert options.two_pass is True
    
    def test_json(self, tmp_path: Path):
        """Test a JSON config layered on a base."""
        config = tmp_path / "cppdeps.json"
        config.write_text('{"process_includes": false}', encoding="utf-8")
        
        options = load_options(config, ScanOptions(source_root="code"))
        
        assert options.process_includes is False
        assert options.source_root == "code"
    
    def test_unknown_key(self):
        """Test unknown options are rejected."""
        with pytest.raises(ConfigError, match="unknown option"):
            options_from_mapping({"colour": "blue"})
    
    def test_wrong_type(self):
        """Test values of the wrong type are rejected."""
        with pytest.raises(ConfigError, match="must be bool"):
            options_from_mapping({"two_pass": "yes"})
    
    def test_not_a_mapping(self):
        """Test a top-level list is rejected."""
        with pytest.raises(ConfigError):
            options_from_mapping(["src"])
    
    def test_parse_error(self, tmp_path: Path):
        """Test malformed files raise ConfigError."""
        config = tmp_path / "cppdeps.json"
        config.write_text("{not json", encoding="utf-8")
        
        with pytest.raises(ConfigError, match="cannot parse"):
            load_options(config)
    
    def test_missing_file(self, tmp_path: Path):
        """Test missing files raise ConfigError."""
        with pytest.raises(ConfigError, match="cannot read"):
            load_options(tmp_path / "absent.yaml")
