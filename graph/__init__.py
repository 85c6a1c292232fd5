"""Graph data model for build targets and module exports."""

from .model import DependencyGraph, ExportRegistry

__all__ = ["DependencyGraph", "ExportRegistry"]
