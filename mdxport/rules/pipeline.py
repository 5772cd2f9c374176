"""Deterministic rewrite rules applied to a whole document."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Protocol, Sequence

from ..logging import get_logger
from ..models import ChangeRecord

_LOGGER = get_logger("rules")


@dataclass
class RuleResult:
    """Rewritten content plus the audit entries the rule produced."""

    content: str
    changes: List[ChangeRecord] = field(default_factory=list)


class Rule(Protocol):
    """A pure ``text -> RuleResult`` transformation."""

    def __call__(self, content: str) -> RuleResult:
        ...


def run_rules(content: str, rules: Sequence[Rule]) -> RuleResult:
    """Run ``rules`` in order, threading the content through each."""
    combined = RuleResult(content=content)
    for rule in rules:
        outcome = rule(combined.content)
        combined.content = outcome.content
        for change in outcome.changes:
            _LOGGER.debug("%s: %s", change.type, change.detail)
        combined.changes.extend(outcome.changes)
    return combined


__all__ = ["Rule", "RuleResult", "run_rules"]
