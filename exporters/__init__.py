"""Exporters for converting scan results to various output formats."""

from .makefile_exporter import to_fragment, to_makefile
from .report_exporter import to_report, summary_line
from .json_exporter import to_json

__all__ = ["to_fragment", "to_makefile", "to_report", "summary_line", "to_json"]
