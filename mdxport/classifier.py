"""Name-based classification of unknown components."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Pattern, Tuple

from .models import Classification


@dataclass(frozen=True)
class _NameRule:
    pattern: Pattern[str]
    category: str
    target: str
    confidence: str


def _rule(pattern: str, category: str, target: str, confidence: str) -> _NameRule:
    return _NameRule(re.compile(pattern, re.IGNORECASE), category, target, confidence)


# First match wins, so more specific fragments come first.
NAME_RULES: Tuple[_NameRule, ...] = (
    _rule(r"banner|alert|warning|deprecat|caution", "alert", '<Callout kind="alert">', "high"),
    _rule(r"tip|hint|bestpractice|pro.?tip", "tip", '<Callout kind="tip">', "high"),
    _rule(r"info|note|notice|remind", "info", '<Callout kind="info">', "high"),
    _rule(r"success|confirm|done|complete", "success", '<Callout kind="success">', "high"),
    _rule(r"terminal|cli|console|shell|command", "code", "```bash code block", "high"),
    _rule(r"card|quicklink|navlink|tile", "card", "<Card>", "high"),
    _rule(r"feature|grid|highlight|showcase", "grid", "<Columns> + <Card>", "high"),
    _rule(r"step|tutorial|recipe|guide|wizard", "steps", "<Steps>", "high"),
    _rule(r"code.?compare|before.?after|diff", "tabs", "<Tabs>", "medium"),
    _rule(r"tab|switch|compare|toggle|platform", "tabs", "<Tabs>", "medium"),
    _rule(r"faq|question|quiz|trivia", "expandable", "<Expandable>", "medium"),
    _rule(r"table|matrix|compat|pricing", "table", "Markdown table", "medium"),
    _rule(r"progress|status|bar|meter", "text", "Bold text with value", "medium"),
    _rule(r"slider|carousel|gallery", "images", "Multiple <Image>", "low"),
)

UNKNOWN = Classification(
    category="unknown",
    target="decide later",
    confidence="low",
    signals=("no-signals",),
)


def classify_component(name: str) -> Classification:
    """Return the best-guess target category for ``name``."""
    for rule in NAME_RULES:
        if rule.pattern.search(name):
            return Classification(
                category=rule.category,
                target=rule.target,
                confidence=rule.confidence,
                signals=(f"name:{name}->{rule.category}",),
            )
    return UNKNOWN


__all__ = ["NAME_RULES", "UNKNOWN", "classify_component"]
