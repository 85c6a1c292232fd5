"""Scan options and configuration file loading."""

import json
import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

try:
    import yaml
    HAS_YAML = True
except ImportError:
    HAS_YAML = False

try:
    import tomllib
except ImportError:
    try:
        import toml as tomllib  # type: ignore
        HAS_TOML = True
    except ImportError:
        HAS_TOML = False
else:
    HAS_TOML = True


logger = logging.getLogger(__name__)

# Table read from pyproject.toml
PYPROJECT_TABLE = "cppdeps"


class ConfigError(ValueError):
    """Raised when a configuration file cannot be loaded or is invalid."""


@dataclass(frozen=True)
class ScanOptions:
    """
    Options controlling how sources are scanned and mapped to targets.
    
    Attributes:
        include_standard_modules: Keep ``import <...>;`` names and resolve
            ``std`` modules instead of skipping them.
        process_includes: Record ``#include`` directives as dependencies.
        module_extension: Extension tried first when searching for a module file.
        source_root: Directory whose contents map into ``object_root``.
        object_root: Directory that receives object files.
        object_extension: Extension of produced object files.
        two_pass: Register every export before resolving any import.
    """
    
    include_standard_modules: bool = False
    process_includes: bool = True
    module_extension: str = ".cppm"
    source_root: str = "src"
    object_root: str = "obj"
    object_extension: str = ".o"
    two_pass: bool = False
    
    def __post_init__(self):
        # frozen, so normalize through object.__setattr__
        object.__setattr__(self, "module_extension", _dotted(self.module_extension))
        object.__setattr__(self, "object_extension", _dotted(self.object_extension))
        object.__setattr__(self, "source_root", _strip_root(self.source_root))
        object.__setattr__(self, "object_root", _strip_root(self.object_root))
    
    def merged(self, **overrides: Any) -> "ScanOptions":
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)


def _dotted(ext: str) -> str:
    if ext and not ext.startswith("."):
        return "." + ext
    return ext


def _strip_root(root: str) -> str:
    root = root.replace("\\", "/")
    while root.startswith("./"):
        root = root[2:]
    return root.rstrip("/") or "."


def options_from_mapping(data: Dict[str, Any], base: Optional[ScanOptions] = None) -> ScanOptions:
    """
    Build options from a plain mapping (as read from a config file).
    
    Keys may use dashes or underscores. Unknown keys and values of the
    wrong type raise ConfigError.
    """
    if base is None:
        base = ScanOptions()
    if not isinstance(data, dict):
        raise ConfigError("configuration must be a mapping of option names to values")
    
    known = {f.name: f for f in fields(ScanOptions)}
    values: Dict[str, Any] = {}
    for key, value in data.items():
        name = str(key).replace("-", "_")
        if name not in known:
            raise ConfigError(f"unknown option '{key}'")
        expected = bool if known[name].type in (bool, "bool") else str
        if not isinstance(value, expected):
            raise ConfigError(
                f"option '{key}' must be {expected.__name__}, got {type(value).__name__}"
            )
        values[name] = value
    
    return base.merged(**values)


def load_options(path: Path, base: Optional[ScanOptions] = None) -> ScanOptions:
    """
    Load scan options from a YAML, TOML or JSON file.
    
    For ``pyproject.toml`` the ``[tool.cppdeps]`` table is used.
    
    Args:
        path: Configuration file.
        base: Options the file values are layered on (default: ScanOptions()).
    
    Returns:
        The merged options.
    
    Raises:
        ConfigError: If the file cannot be read, parsed, or holds bad values.
    """
    suffix = path.suffix.lower()
    
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"cannot read {path}: {e}") from e
    
    try:
        if suffix in {".yaml", ".yml"}:
            if not HAS_YAML:
                raise ConfigError(f"PyYAML is required to read {path}")
            data = yaml.safe_load(content) or {}
        
        elif suffix == ".toml":
            if not HAS_TOML:
                raise ConfigError(f"a TOML parser is required to read {path}")
            data = tomllib.loads(content)
            if path.name == "pyproject.toml":
                data = data.get("tool", {}).get(PYPROJECT_TABLE, {})
        
        else:
            data = json.loads(content)
    
    except ConfigError:
        raise
    except Exception as e:
        raise ConfigError(f"cannot parse {path}: {e}") from e
    
    logger.debug("Loaded configuration from %s: %s", path, data)
    return options_from_mapping(data, base)
