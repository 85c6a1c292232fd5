"""Human-readable analysis report."""

from datetime import datetime
from typing import Optional

from scanner.builder import ScanResult


def to_report(result: ScanResult, generated_at: Optional[datetime] = None) -> str:
    """
    Render statistics, module exports, dependencies and errors.
    
    Args:
        result: The scan result.
        generated_at: Timestamp for the header line; omitted when None.
    
    Returns:
        The report text.
    """
    stats = result.stats
    report = ["=== C++ Module Dependency Analysis Report ==="]
    if generated_at is not None:
        report.append(f"Generated: {generated_at:%Y-%m-%d %H:%M:%S}")
    report.append("")
    
    report += [
        "Statistics:",
        f"  Files processed: {stats.files_processed}",
        f"  Modules found: {stats.modules_found}",
        f"  Imports found: {stats.imports_found}",
        f"  Includes found: {stats.includes_found}",
        f"  Errors: {len(stats.errors)}",
        "",
    ]
    
    if result.exports:
        report.append("Module Exports:")
        for module_name in sorted(result.exports):
            report.append(f"  {module_name} -> {result.exports[module_name]}")
        report.append("")
    
    rules = list(result.graph.iter_rules())
    if rules:
        report.append("Dependencies:")
        for target, prerequisites in rules:
            report.append(f"  {target}:")
            report.extend(f"    {dep}" for dep in prerequisites)
        report.append("")
    
    if stats.errors:
        report.append("Errors:")
        report.extend(f"  {error}" for error in stats.errors)
        report.append("")
    
    return "\n".join(report)


def summary_line(result: ScanResult) -> str:
    """One-line summary of the scan counters."""
    stats = result.stats
    return (
        f"Summary: {stats.files_processed} files, {stats.modules_found} modules, "
        f"{stats.imports_found} imports"
    )
