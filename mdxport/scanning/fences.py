"""Fenced code block tracking and repair.

``FenceIndex`` is an immutable value derived from one version of a document.
Any splice invalidates every offset after it, so callers rebuild the index
after each edit instead of patching it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Tuple

from ..logging import get_logger
from ..models import ChangeRecord, FenceRange
from .constants import FENCE_DELIMITER
from .lexer import ScanState, Token, classify_fence_line, transition

_LOGGER = get_logger("scanning.fences")

_HEADING = re.compile(r"^#{1,6}\s")
_DECLARATION = re.compile(r"^export\s+(?:const|function|default)\s")
_COMPONENT_TAG = re.compile(r"^<[A-Z][A-Za-z0-9]*\b")
_DISCOURSE_START = re.compile(
    r"^(?:The|A|An|If|When|This|That|In|On|For|To|You|It|Available|Note)\s"
)
_MARKDOWN_PROSE = (
    _HEADING,
    re.compile(r"^\*\*"),
    re.compile(r"^[-*]\s"),
    re.compile(r"^\d+\.\s"),
    re.compile(r"^\|"),
    re.compile(r"^>"),
)


@dataclass(frozen=True)
class FenceIndex:
    """Sorted, non-overlapping ranges of paired fenced code blocks."""

    ranges: Tuple[FenceRange, ...] = ()

    @classmethod
    def build(cls, text: str) -> "FenceIndex":
        """Pair fence markers in ``text`` and return their character ranges."""
        ranges: List[FenceRange] = []
        state = ScanState.OUTSIDE
        open_start: Optional[int] = None
        offset = 0
        for line in text.split("\n"):
            token = classify_fence_line(line)
            if token is Token.FENCE_OPENER:
                open_start = offset
            elif token is Token.FENCE_BARE and state is ScanState.IN_FENCE and open_start is not None:
                ranges.append(FenceRange(start=open_start, end=offset + len(line)))
                open_start = None
            if token is not None:
                state = transition(state, token)
            offset += len(line) + 1
        return cls(ranges=tuple(ranges))

    def is_inside(self, offset: int) -> bool:
        """True when ``offset`` falls strictly inside a paired fence."""
        for fence in self.ranges:
            if fence.start < offset < fence.end:
                return True
        return False

    def segments(self, text: str) -> Iterator[Tuple[str, bool]]:
        """Yield ``(chunk, inside_fence)`` pairs covering ``text`` in order."""
        position = 0
        for fence in self.ranges:
            if fence.start > position:
                yield text[position:fence.start], False
            yield text[fence.start:fence.end], True
            position = fence.end
        if position < len(text):
            yield text[position:], False


def rewrite_outside_fences(text: str, rewrite: Callable[[str], Tuple[str, int]]) -> Tuple[str, int]:
    """Apply ``rewrite`` to every non-fenced segment of ``text`` and total its counts."""
    fences = FenceIndex.build(text)
    parts: List[str] = []
    total = 0
    for chunk, inside in fences.segments(text):
        if inside:
            parts.append(chunk)
            continue
        rewritten, count = rewrite(chunk)
        parts.append(rewritten)
        total += count
    return "".join(parts), total


def repair_fences(text: str) -> Tuple[str, List[ChangeRecord]]:
    """Drop orphaned closing fences and insert closers for unterminated openers."""
    lines = text.split("\n")
    state = ScanState.OUTSIDE
    open_line: Optional[int] = None
    unclosed: List[int] = []
    orphans: List[int] = []

    for index, line in enumerate(lines):
        token = classify_fence_line(line)
        if token is None:
            continue
        if state is ScanState.OUTSIDE:
            if token is Token.FENCE_OPENER:
                open_line = index
            else:
                orphans.append(index)
        elif token is Token.FENCE_OPENER:
            if open_line is not None:
                unclosed.append(open_line)
            open_line = index
        else:
            open_line = None
        state = transition(state, token)

    if open_line is not None:
        unclosed.append(open_line)

    changes: List[ChangeRecord] = []
    if not unclosed and not orphans:
        return text, changes

    for index in orphans:
        _LOGGER.info("Removing orphaned closing fence on line %d", index + 1)
        lines[index] = ""

    # Bottom-up so earlier line indices stay valid.
    for opener in sorted(unclosed, reverse=True):
        close_after = _find_close_point(lines, opener)
        indent = lines[opener][: len(lines[opener]) - len(lines[opener].lstrip())]
        lines.insert(close_after + 1, f"{indent}{FENCE_DELIMITER}")
        _LOGGER.info(
            "Closed unterminated fence opened on line %d after line %d",
            opener + 1,
            close_after + 1,
        )

    if orphans:
        changes.append(
            ChangeRecord(
                type="fence-orphan",
                count=len(orphans),
                detail=f"removed {len(orphans)} orphaned closing fence(s)",
            )
        )
    if unclosed:
        changes.append(
            ChangeRecord(
                type="fence-repair",
                count=len(unclosed),
                detail=f"inserted {len(unclosed)} synthetic closing fence(s)",
            )
        )
    return "\n".join(lines), changes


def _find_close_point(lines: List[str], opener: int) -> int:
    """Return the line index after which a synthetic closer belongs."""
    last_code = opener
    code_lines = 0
    for index in range(opener + 1, len(lines)):
        trimmed = lines[index].strip()
        if not trimmed:
            if code_lines and index + 1 < len(lines):
                if _is_boundary(lines[index + 1].strip()):
                    return last_code
            continue
        if classify_fence_line(lines[index]) is Token.FENCE_OPENER:
            return last_code
        code_lines += 1
        last_code = index
    return last_code


def _is_boundary(trimmed: str) -> bool:
    if _HEADING.match(trimmed):
        return True
    if _DECLARATION.match(trimmed):
        return True
    if _COMPONENT_TAG.match(trimmed):
        return True
    return is_proselike(trimmed)


def is_proselike(trimmed: str) -> bool:
    """Heuristic: does this line read as documentation rather than code?"""
    if not trimmed:
        return False
    if any(pattern.match(trimmed) for pattern in _MARKDOWN_PROSE):
        return True
    if "a" <= trimmed[0] <= "z" and len(trimmed.split()) >= 4:
        return True
    return bool(_DISCOURSE_START.match(trimmed))


__all__ = ["FenceIndex", "is_proselike", "repair_fences", "rewrite_outside_fences"]
