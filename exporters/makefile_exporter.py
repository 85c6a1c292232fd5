"""Makefile exporters: dependency fragment and complete build file."""

from typing import List, Sequence

from scanner.builder import ScanResult
from scanner.paths import MODULE_EXTENSIONS


GENERATED_BY = "# Generated by cppdeps"
MODULE_FLAGS = "-fmodules-ts"
MODULE_CACHE_DIR = "gcm.cache"

CONVENTIONAL_EXTENSIONS = (".cpp", ".cc", ".cxx", ".c++")


def _make_list(name: str, items: Sequence[str], inline_limit: int) -> List[str]:
    """Render ``NAME = ...`` inline, or backslash-continued past the limit."""
    if len(items) <= inline_limit:
        return [f"{name} = {' '.join(items)}"]
    
    lines = [f"{name} = \\"]
    for i, item in enumerate(items):
        lines.append(f"    {item}" if i == len(items) - 1 else f"    {item} \\")
    return lines


def to_fragment(
    result: ScanResult,
    include_objects: bool = True,
    include_module_flags: bool = True,
) -> str:
    """
    Render the dependency fragment meant to be included from a Makefile.
    
    Only object-to-object prerequisites are listed; targets left without
    any are omitted.
    
    Args:
        result: The scan result.
        include_objects: If True, emit the ``OBJECTS`` variable.
        include_module_flags: If True and modules were seen, emit ``MODULE_FLAGS``.
    
    Returns:
        The fragment, or an empty string when the graph is empty.
    """
    if len(result.graph) == 0:
        return ""
    
    opts = result.options
    output = [
        GENERATED_BY,
        f"# Sources in {opts.source_root}/, objects in {opts.object_root}/",
        "",
    ]
    
    objects = result.object_files()
    if include_objects and objects:
        output.append("# Object files")
        output.extend(_make_list("OBJECTS", objects, inline_limit=5))
        output.append("")
    
    output.append("# Dependencies")
    for target, prerequisites in result.graph.iter_rules(suffix=opts.object_extension):
        output.append(f"{target}: {' '.join(prerequisites)}")
    output.append("")
    
    if include_module_flags and result.has_modules:
        output.append("# Module compilation flags")
        output.append(f"MODULE_FLAGS = {MODULE_FLAGS}")
        output.append("")
    
    return "\n".join(output)


def _compile_rule(pattern_target: str, prerequisite: str, module: bool) -> List[str]:
    lines = [f"{pattern_target}: {prerequisite}", "\t@mkdir -p $(dir $@)"]
    if module:
        lines.append("\t@mkdir -p $(MODULE_CACHE_DIR)")
    lines.append("\t$(CXX) $(CXXFLAGS) -c $< -o $@")
    lines.append("")
    return lines


def to_makefile(result: ScanResult) -> str:
    """
    Render a complete Makefile for the scanned project.
    
    Pattern rules compile ``$(SRC_DIR)/%<ext>`` into ``$(OBJ_DIR)/%.o``;
    every dependency, headers included, is listed.
    """
    opts = result.options
    has_modules = result.has_modules
    obj = opts.object_extension
    
    output = [
        "# C++ Makefile with module support",
        GENERATED_BY,
        "",
        "# Project configuration",
        "PROJECT_NAME ?= $(notdir $(CURDIR))",
        "CXX ?= g++",
        "CXXFLAGS ?= -std=c++20 -Wall -Wextra -O2",
        "LDFLAGS ?=",
        "LIBS ?=",
        f"SRC_DIR = {opts.source_root}",
        f"OBJ_DIR = {opts.object_root}",
        "",
    ]
    
    if has_modules:
        output += [
            "# Module configuration",
            f"MODULE_FLAGS = {MODULE_FLAGS}",
            f"MODULE_CACHE_DIR = {MODULE_CACHE_DIR}",
            "CXXFLAGS += $(MODULE_FLAGS)",
            "",
        ]
    
    sources = sorted(result.inventory)
    if sources:
        output.append("# Source files")
        output.extend(_make_list("SOURCES", sources, inline_limit=3))
        output.append("")
    
    objects = sorted(set(result.object_files()) | result.graph.targets)
    if objects:
        output.append("# Object files")
        output.extend(_make_list("OBJECTS", objects, inline_limit=3))
        output.append("")
    
    output += [
        "# Main targets",
        "all: $(PROJECT_NAME)",
        "",
        "$(PROJECT_NAME): $(OBJECTS)",
        "\t$(CXX) $(LDFLAGS) $(OBJECTS) $(LIBS) -o $@",
        "",
    ]
    
    rules = list(result.graph.iter_rules())
    if rules:
        output.append("# Dependencies")
        for target, prerequisites in rules:
            output.append(f"{target}: {' '.join(prerequisites)}")
        output.append("")
    
    if has_modules:
        output.append("# Module compilation rules")
        module_exts = list(MODULE_EXTENSIONS)
        if opts.module_extension not in module_exts:
            module_exts.insert(0, opts.module_extension)
        for ext in module_exts:
            output += _compile_rule(f"$(OBJ_DIR)/%{obj}", f"$(SRC_DIR)/%{ext}", module=True)
    
    output.append("# Standard compilation rules")
    for ext in CONVENTIONAL_EXTENSIONS:
        output += _compile_rule(f"$(OBJ_DIR)/%{obj}", f"$(SRC_DIR)/%{ext}", module=False)
    
    output += [
        "# Utility targets",
        ".PHONY: all clean install debug release help",
        "",
        "clean:",
        "\trm -f $(OBJECTS) $(PROJECT_NAME)",
    ]
    if has_modules:
        output.append("\trm -rf $(MODULE_CACHE_DIR) *.pcm")
    output += [
        "",
        "debug: CXXFLAGS += -g -DDEBUG",
        "debug: $(PROJECT_NAME)",
        "",
        "release: CXXFLAGS += -O3 -DNDEBUG",
        "release: $(PROJECT_NAME)",
        "",
        "install: $(PROJECT_NAME)",
        "\tinstall -D $(PROJECT_NAME) $(DESTDIR)$(PREFIX)/bin/$(PROJECT_NAME)",
        "",
        "help:",
        "\t@echo 'Available targets:'",
        "\t@echo '  all      - Build the project (default)'",
        "\t@echo '  clean    - Remove built files'",
        "\t@echo '  debug    - Build with debug flags'",
        "\t@echo '  release  - Build with optimization'",
        "\t@echo '  install  - Install the binary'",
        "\t@echo '  help     - Show this help'",
    ]
    
    return "\n".join(output) + "\n"
