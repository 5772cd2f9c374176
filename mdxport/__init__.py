"""Migrate MDX documentation by resolving custom components into native ones.

The two entry points mirror the pipeline's halves: :func:`scan_document`
isolates unknown components behind placeholders, and
:func:`resolve_components` maps each placeholder to its replacement.
Callers splice the result with :func:`splice_conversions`.
"""

from __future__ import annotations

from .models import ChangeRecord, Classification, ComponentBlock, ResolutionResult, ScanResult
from .postproc.splice import splice_conversions
from .resolution.orchestrator import resolve_components
from .scanning.scanner import scan_document

__version__ = "0.1.0"

__all__ = [
    "ChangeRecord",
    "Classification",
    "ComponentBlock",
    "ResolutionResult",
    "ScanResult",
    "__version__",
    "resolve_components",
    "scan_document",
    "splice_conversions",
]
