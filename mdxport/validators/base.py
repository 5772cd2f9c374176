"""Core validation data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol


@dataclass
class ValidationContext:
    """Identifies the component whose replacement is being validated."""

    component: str
    usage: Optional[str] = None
    placeholder_id: Optional[str] = None


@dataclass
class ValidationOutcome:
    """Sanitised replacement plus advisory warnings and per-fix counts."""

    content: str
    warnings: List[str] = field(default_factory=list)
    fixes: Dict[str, int] = field(default_factory=dict)

    def record_fix(self, name: str, count: int, message: str) -> None:
        if count <= 0:
            return
        self.fixes[name] = self.fixes.get(name, 0) + count
        self.warnings.append(message)


class Validator(Protocol):
    """Protocol implemented by replacement validators."""

    name: str

    def validate(self, content: Optional[str], context: ValidationContext) -> ValidationOutcome:
        """Sanitise ``content`` and report anything suspicious. Never raises."""


__all__ = ["ValidationContext", "ValidationOutcome", "Validator"]
