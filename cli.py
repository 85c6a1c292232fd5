#!/usr/bin/env python3
"""
cppdeps CLI

Scans C++ sources for module imports, exports and includes, and writes
make-style dependency rules.
"""

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Callable

from scanner.builder import ScanResult, build_graph
from scanner.options import ConfigError, ScanOptions, load_options
from exporters import to_fragment, to_makefile, to_report, summary_line, to_json


def parse_args(args=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="cppdeps",
        description="Generate Makefile dependencies from C++20 module imports and includes.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  cppdeps                                  # Parse current directory
  cppdeps src/                             # Parse src directory
  cppdeps -o deps.mk src/                  # Fragment to deps.mk
  cppdeps -m Makefile src/                 # Generate complete Makefile
  cppdeps --src-dir source --obj-dir build # Custom source and object dirs
  cppdeps -v -r report.txt src/            # Verbose with detailed report
  cppdeps --include-std --debug src/       # Include std modules with debug
        """,
    )
    
    # Positional arguments
    parser.add_argument(
        "paths",
        nargs="*",
        help="Files or directories to scan (default: the project root)",
    )
    
    # Output options
    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help="Write the Makefile fragment to FILE",
    )
    
    parser.add_argument(
        "-m", "--makefile",
        type=str,
        default=None,
        help="Write a complete Makefile to FILE",
    )
    
    parser.add_argument(
        "-r", "--report",
        type=str,
        default=None,
        help="Write a detailed report to FILE",
    )
    
    parser.add_argument(
        "-j", "--json",
        type=str,
        default=None,
        help="Write the dependency graph as JSON to FILE",
    )
    
    # Logging options
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output",
    )
    
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Debug output (very verbose)",
    )
    
    # Scanning options
    parser.add_argument(
        "-C", "--root",
        type=str,
        default=".",
        help="Project root all paths are relative to (default: current directory)",
    )
    
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Read options from a YAML, TOML or JSON file",
    )
    
    parser.add_argument(
        "--include-std",
        action="store_const",
        const=True,
        default=None,
        help="Include standard library module dependencies",
    )
    
    parser.add_argument(
        "--no-headers",
        action="store_const",
        const=False,
        default=None,
        dest="process_includes",
        help="Don't process #include dependencies",
    )
    
    parser.add_argument(
        "--module-ext",
        type=str,
        default=None,
        help="Module file extension (default: .cppm)",
    )
    
    parser.add_argument(
        "--src-dir",
        type=str,
        default=None,
        help="Source directory (default: src)",
    )
    
    parser.add_argument(
        "--obj-dir",
        type=str,
        default=None,
        help="Object directory (default: obj)",
    )
    
    parser.add_argument(
        "--obj-ext",
        type=str,
        default=None,
        help="Object file extension (default: .o)",
    )
    
    parser.add_argument(
        "--two-pass",
        action="store_const",
        const=True,
        default=None,
        help="Collect all module exports before resolving imports",
    )
    
    return parser.parse_args(args)


def configure_logging(verbose: bool, debug: bool) -> None:
    """Send log records to stderr at the requested verbosity."""
    level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s", stream=sys.stderr)


def build_options(parsed, root: Path) -> ScanOptions:
    """Layer defaults, the config file and command-line flags."""
    options = ScanOptions()
    if parsed.config:
        config_path = Path(parsed.config)
        if not config_path.is_absolute():
            config_path = root / config_path
        options = load_options(config_path, options)
    
    return options.merged(
        include_standard_modules=parsed.include_std,
        process_includes=parsed.process_includes,
        module_extension=parsed.module_ext,
        source_root=parsed.src_dir,
        object_root=parsed.obj_dir,
        object_extension=parsed.obj_ext,
        two_pass=parsed.two_pass,
    )


def write_output(path: str, render: Callable[[], str], label: str) -> bool:
    """
    Write one rendered output, creating parent directories.
    
    Returns:
        True on success; failures are reported and return False.
    """
    try:
        output_path = Path(path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(render(), encoding="utf-8")
        print(f"{label} written to: {output_path}", file=sys.stderr)
        return True
    except OSError as e:
        print(f"Error writing {label.lower()} to {path}: {e}", file=sys.stderr)
        return False


def main(args=None) -> int:
    """Main entry point."""
    parsed = parse_args(args)
    configure_logging(parsed.verbose, parsed.debug)
    
    root = Path(parsed.root).resolve()
    if not root.is_dir():
        print(f"Error: '{parsed.root}' is not a directory", file=sys.stderr)
        return 1
    
    try:
        options = build_options(parsed, root)
    except ConfigError as e:
        print(f"Error in configuration: {e}", file=sys.stderr)
        return 1
    
    result: ScanResult = build_graph(parsed.paths or None, options, root)
    
    ok = True
    if parsed.makefile:
        ok &= write_output(parsed.makefile, lambda: to_makefile(result), "Complete Makefile")
    if parsed.output:
        ok &= write_output(parsed.output, lambda: to_fragment(result), "Makefile fragment")
    if parsed.json:
        ok &= write_output(parsed.json, lambda: to_json(result), "JSON graph")
    if not (parsed.makefile or parsed.output or parsed.json):
        print(to_fragment(result))
    
    if parsed.report:
        ok &= write_output(
            parsed.report, lambda: to_report(result, generated_at=datetime.now()), "Detailed report"
        )
    elif parsed.verbose or parsed.debug:
        print()
        print(to_report(result, generated_at=datetime.now()))
    
    print(summary_line(result), file=sys.stderr)
    if result.stats.errors:
        print(f"Errors: {len(result.stats.errors)}", file=sys.stderr)
    
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
