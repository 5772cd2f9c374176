"""Finite-state lexing shared by the fence tracker and the extractor.

One transition table drives both levels of scanning: character-level walks
through declaration bodies and tag attributes (``OUTSIDE``, ``IN_STRING``,
``IN_TEMPLATE``) and line-level walks over fence markers (``OUTSIDE``,
``IN_FENCE``). Pairs missing from the table leave the state unchanged.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from .constants import FENCE_DELIMITER


class ScanState(str, Enum):
    OUTSIDE = "outside"
    IN_STRING = "in_string"
    IN_TEMPLATE = "in_template"
    IN_FENCE = "in_fence"


class Token(str, Enum):
    QUOTE = "quote"
    TEMPLATE = "template"
    FENCE_OPENER = "fence_opener"
    FENCE_BARE = "fence_bare"
    NEWLINE = "newline"


TRANSITIONS: Dict[Tuple[ScanState, Token], ScanState] = {
    (ScanState.OUTSIDE, Token.QUOTE): ScanState.IN_STRING,
    (ScanState.IN_STRING, Token.QUOTE): ScanState.OUTSIDE,
    # Quoted strings cannot span raw newlines; a stray apostrophe in JSX text ends here.
    (ScanState.IN_STRING, Token.NEWLINE): ScanState.OUTSIDE,
    (ScanState.OUTSIDE, Token.TEMPLATE): ScanState.IN_TEMPLATE,
    (ScanState.IN_TEMPLATE, Token.TEMPLATE): ScanState.OUTSIDE,
    (ScanState.OUTSIDE, Token.FENCE_OPENER): ScanState.IN_FENCE,
    # An opener inside an open fence implicitly abandons the previous one.
    (ScanState.IN_FENCE, Token.FENCE_OPENER): ScanState.IN_FENCE,
    (ScanState.IN_FENCE, Token.FENCE_BARE): ScanState.OUTSIDE,
}

_QUOTES = ("'", '"')
_TEMPLATE = "`"
_OPENER_PATTERN = re.compile(re.escape(FENCE_DELIMITER) + r"\w")


def transition(state: ScanState, token: Token) -> ScanState:
    """Return the state reached from ``state`` on ``token``."""
    return TRANSITIONS.get((state, token), state)


def classify_fence_line(line: str) -> Optional[Token]:
    """Classify a line as a fence opener, a bare fence marker, or neither."""
    trimmed = line.strip()
    if not trimmed.startswith(FENCE_DELIMITER):
        return None
    if _OPENER_PATTERN.match(trimmed):
        return Token.FENCE_OPENER
    return Token.FENCE_BARE


def is_escaped(text: str, index: int) -> bool:
    """True when ``text[index]`` is preceded by an odd run of backslashes."""
    count = 0
    position = index - 1
    while position >= 0 and text[position] == "\\":
        count += 1
        position -= 1
    return count % 2 == 1


@dataclass
class CodeLexer:
    """Tracks string and template-literal state while walking source characters."""

    state: ScanState = ScanState.OUTSIDE
    quote: str = ""

    def feed(self, text: str, index: int) -> bool:
        """Consume ``text[index]`` and report whether it is structural.

        A character is structural when it sits outside any string or template
        literal and is not itself a string or template delimiter.
        """
        char = text[index]
        if char == "\n" and self.state is ScanState.IN_STRING:
            self.state = transition(self.state, Token.NEWLINE)
            self.quote = ""
            return True
        if char in _QUOTES and self.state is not ScanState.IN_TEMPLATE:
            if self.state is ScanState.OUTSIDE:
                self.state = transition(self.state, Token.QUOTE)
                self.quote = char
            elif char == self.quote and not is_escaped(text, index):
                self.state = transition(self.state, Token.QUOTE)
                self.quote = ""
            return False
        if char == _TEMPLATE and self.state is not ScanState.IN_STRING:
            if not is_escaped(text, index):
                self.state = transition(self.state, Token.TEMPLATE)
            return False
        return self.state is ScanState.OUTSIDE


__all__ = [
    "CodeLexer",
    "ScanState",
    "TRANSITIONS",
    "Token",
    "classify_fence_line",
    "is_escaped",
    "transition",
]
