"""Structural checks and auto-fixes for converted component markup."""

from __future__ import annotations

import re
from typing import Callable, List, Optional, Tuple

from ..failsafe import manual_review_stub
from ..logging import get_logger
from ..scanning.constants import CONTAINER_COMPONENTS, NATIVE_COMPONENTS
from ..scanning.extractor import find_tag_end
from ..scanning.fences import FenceIndex, rewrite_outside_fences
from .base import ValidationContext, ValidationOutcome

_LOGGER = get_logger("validators.output")

_CAPITALIZED_TAG = re.compile(r"<([A-Z][A-Za-z0-9]*(?:\.[A-Za-z0-9]+)?)")
_DISALLOWED_ATTRIBUTE = re.compile(
    r"""\s+(?:className|class|style)\s*=\s*(?:"[^"]*"|'[^']*'|\{\{[^{}]*\}\}|\{[^{}]*\})"""
)
_MERMAID = re.compile(r"<Mermaid\b[^>]*>(.*?)</Mermaid\s*>", re.DOTALL | re.IGNORECASE)
_SINGLE_QUOTED_ATTRIBUTE = re.compile(r"(\s)([A-Za-z][A-Za-z0-9-]*)='([^'\"]*)'")
_TOP_HEADING = re.compile(r"^# ", re.MULTILINE)
_ICON_URL = re.compile(r"\bicon=\"(https?://[^\"]+)\"")
_LOWERCASE_CONTAINER = re.compile(
    r"<(" + "|".join(name.lower() for name in CONTAINER_COMPONENTS) + r")\b"
)

Fix = Callable[[str], Tuple[str, int]]


class OutputValidator:
    """Sanitises a replacement string; every finding is advisory."""

    name = "output"

    def validate(self, content: Optional[str], context: ValidationContext) -> ValidationOutcome:
        label = f"<{context.component}>"
        if content is None or not content.strip():
            outcome = ValidationOutcome(content=manual_review_stub(context.component, context.usage))
            outcome.warnings.append(f"{label}: empty conversion replaced with manual review stub")
            return outcome

        outcome = ValidationOutcome(content=content)
        steps: List[Tuple[str, Fix, str]] = [
            ("mermaid", self._fix_mermaid, "converted {n} <Mermaid> wrapper(s) to mermaid code block(s)"),
            ("disallowed-attributes", self._strip_attributes, "removed {n} disallowed presentational attribute(s)"),
            ("single-quotes", self._fix_single_quotes, "double-quoted {n} single-quoted attribute value(s)"),
            ("top-heading", self._fix_top_headings, "demoted {n} top-level heading(s) to ##"),
            ("icon-url", self._fix_icon_urls, "moved {n} URL icon value(s) to image"),
        ]
        for fix_name, fix, message in steps:
            outcome.content, count = rewrite_outside_fences(outcome.content, fix)
            outcome.record_fix(fix_name, count, f"{label}: {message.format(n=count)}")

        for warning in self._detect(outcome.content, label):
            outcome.warnings.append(warning)

        for warning in outcome.warnings:
            _LOGGER.debug("Validation: %s", warning)
        return outcome

    def _detect(self, content: str, label: str) -> List[str]:
        fences = FenceIndex.build(content)
        prose = "".join(chunk for chunk, inside in fences.segments(content) if not inside)
        warnings: List[str] = []

        unknown: List[str] = []
        for match in _CAPITALIZED_TAG.finditer(prose):
            tag = match.group(1)
            if tag not in NATIVE_COMPONENTS and tag not in unknown:
                unknown.append(tag)
        for tag in unknown:
            warnings.append(f"{label}: output contains non-native component <{tag}>")

        for native in sorted(NATIVE_COMPONENTS):
            escaped = re.escape(native)
            opens = len(re.findall(rf"<{escaped}(?![\w.])", prose))
            if not opens:
                continue
            closes = len(re.findall(rf"</{escaped}\s*>", prose))
            self_closing = len(re.findall(rf"<{escaped}(?![\w.])[^<>]*/>", prose))
            if opens > closes + self_closing:
                warnings.append(f"{label}: possibly unclosed <{native}> ({opens} open, {closes} closed)")

        lowercase = sorted({match.group(1) for match in _LOWERCASE_CONTAINER.finditer(prose)})
        for tag in lowercase:
            warnings.append(f"{label}: lowercase <{tag}> will not render; component names are PascalCase")
        return warnings

    @staticmethod
    def _strip_attributes(text: str) -> Tuple[str, int]:
        return _DISALLOWED_ATTRIBUTE.subn("", text)

    @staticmethod
    def _fix_mermaid(text: str) -> Tuple[str, int]:
        return _MERMAID.subn(lambda match: "```mermaid\n" + match.group(1).strip() + "\n```", text)

    @staticmethod
    def _fix_single_quotes(text: str) -> Tuple[str, int]:
        parts: List[str] = []
        total = 0
        position = 0
        for match in _CAPITALIZED_TAG.finditer(text):
            if match.start() < position:
                continue
            tag = find_tag_end(text, match.end())
            if tag is None:
                continue
            end, _ = tag
            fixed, count = _SINGLE_QUOTED_ATTRIBUTE.subn(r'\1\2="\3"', text[match.start() : end])
            parts.append(text[position : match.start()])
            parts.append(fixed)
            total += count
            position = end
        parts.append(text[position:])
        return "".join(parts), total

    @staticmethod
    def _fix_top_headings(text: str) -> Tuple[str, int]:
        return _TOP_HEADING.subn("## ", text)

    @staticmethod
    def _fix_icon_urls(text: str) -> Tuple[str, int]:
        return _ICON_URL.subn(r'image="\1"', text)


__all__ = ["OutputValidator"]
