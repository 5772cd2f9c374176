"""Whitespace linting for converted MDX documents."""

from __future__ import annotations

import re
from typing import Tuple

from ..scanning.fences import rewrite_outside_fences

_BLANK_RUN = re.compile(r"\n{3,}")


def collapse_blank_lines(text: str) -> str:
    """Collapse runs of three or more newlines to two, leaving fence interiors alone."""
    collapsed, _ = rewrite_outside_fences(text, lambda chunk: _BLANK_RUN.subn("\n\n", chunk))
    return collapsed


def _strip_trailing_spaces(chunk: str) -> Tuple[str, int]:
    lines = chunk.split("\n")
    stripped = [line.rstrip() for line in lines]
    changed = sum(1 for before, after in zip(lines, stripped) if before != after)
    return "\n".join(stripped), changed


class MdxLinter:
    """Normalises line endings and whitespace outside fenced code."""

    def lint(self, markdown: str) -> str:
        normalized = markdown.replace("\r\n", "\n").replace("\r", "\n")
        cleaned, _ = rewrite_outside_fences(normalized, _strip_trailing_spaces)
        cleaned = collapse_blank_lines(cleaned)
        return cleaned.strip("\n") + "\n"


__all__ = ["MdxLinter", "collapse_blank_lines"]
