"""Core data models shared across mdxport components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class Span:
    """Half-open ``[start, end)`` slice of a document plus the text it covers."""

    start: int
    end: int
    text: str


@dataclass(frozen=True)
class FenceRange:
    """Offsets ``[start, end)`` of a paired fenced code block."""

    start: int
    end: int


@dataclass(frozen=True)
class Classification:
    """Best-guess target category for an unknown component name."""

    category: str
    target: str
    confidence: str
    signals: Tuple[str, ...]


@dataclass(frozen=True)
class ChangeRecord:
    """Append-only audit entry emitted by a transformation step."""

    type: str
    count: int
    detail: str


@dataclass
class ComponentBlock:
    """One unknown component name discovered in a document.

    ``usages``, ``contexts`` and ``placeholder_ids`` are parallel lists; entry
    ``i`` of each describes the same occurrence.
    """

    name: str
    definition: Optional[str]
    usages: List[str]
    contexts: List[str]
    placeholder_ids: List[str]
    classification: Classification

    def is_consistent(self) -> bool:
        return len(self.usages) == len(self.contexts) == len(self.placeholder_ids)


@dataclass(frozen=True)
class ResolutionTask:
    """A single usage awaiting generative resolution."""

    placeholder_id: str
    name: str
    definition: Optional[str]
    usage: str
    context: Optional[str]
    classification: Optional[Classification]
    usage_index: int = 0


@dataclass
class ScanResult:
    """Scanner output: component inventory plus placeholder-substituted content."""

    content: str
    component_blocks: List[ComponentBlock]
    unknown_counts: Dict[str, int] = field(default_factory=dict)
    changes: List[ChangeRecord] = field(default_factory=list)

    @property
    def placeholder_ids(self) -> List[str]:
        return [pid for block in self.component_blocks for pid in block.placeholder_ids]


@dataclass
class ResolutionResult:
    """Placeholder -> replacement map (in submission order) plus advisory warnings."""

    conversions: Dict[str, str]
    warnings: List[str] = field(default_factory=list)
    changes: List[ChangeRecord] = field(default_factory=list)


__all__ = [
    "ChangeRecord",
    "Classification",
    "ComponentBlock",
    "FenceRange",
    "ResolutionResult",
    "ResolutionTask",
    "ScanResult",
    "Span",
]
