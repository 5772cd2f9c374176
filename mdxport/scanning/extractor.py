"""Delimiter-balanced extraction of component definitions and usages.

Both lookups return a ``Span`` over the exact source slice or ``None``; a
partial match is never returned, so a failed lookup leaves the document
untouched.
"""

from __future__ import annotations

import re
from typing import Optional, Tuple

from ..models import Span
from .fences import FenceIndex
from .lexer import CodeLexer

_DEFINITION_TEMPLATES: Tuple[str, ...] = (
    r"^export\s+const\s+{name}\s*=",
    r"^export\s+function\s+{name}\s*\(",
    r"^const\s+{name}\s*=",
    r"^function\s+{name}\s*\(",
)

_NAME_END = r"(?![\w.])"


def find_definition(text: str, name: str, fences: FenceIndex) -> Optional[Span]:
    """Locate the declaration of ``name`` outside fenced code."""
    escaped = re.escape(name)
    for template in _DEFINITION_TEMPLATES:
        pattern = re.compile(template.format(name=escaped), re.MULTILINE)
        for match in pattern.finditer(text):
            start = match.start()
            if fences.is_inside(start):
                continue
            end = _walk_declaration(text, start)
            if end is not None:
                return Span(start=start, end=end, text=text[start:end])
    return None


def find_usage(
    text: str, name: str, fences: FenceIndex, *, start: int = 0
) -> Optional[Span]:
    """Locate the next usage of ``<name>`` outside fenced code.

    Self-closing tags are returned whole. Otherwise same-name nesting is
    tracked until the matching closing tag; a dangling opener yields ``None``.
    """
    opener = re.compile(rf"<{re.escape(name)}{_NAME_END}")
    for match in opener.finditer(text, start):
        if fences.is_inside(match.start()):
            continue
        return _match_usage(text, name, match.start(), match.end(), fences)
    return None


def find_tag_end(text: str, index: int) -> Optional[Tuple[int, bool]]:
    """Return ``(end, self_closing)`` for the opening tag whose attributes start at ``index``.

    Quoted values and ``{...}`` expressions are skipped so ``=>`` or ``>``
    inside them does not terminate the tag.
    """
    lexer = CodeLexer()
    depth = 0
    position = index
    while position < len(text):
        if not lexer.feed(text, position):
            position += 1
            continue
        char = text[position]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth < 0:
                return None
        elif depth == 0 and char == "<":
            return None
        elif depth == 0 and char == ">":
            return position + 1, text[index:position].rstrip().endswith("/")
        position += 1
    return None


def _match_usage(
    text: str, name: str, start: int, name_end: int, fences: FenceIndex
) -> Optional[Span]:
    tag = find_tag_end(text, name_end)
    if tag is None:
        return None
    end, self_closing = tag
    if self_closing:
        return Span(start=start, end=end, text=text[start:end])

    escaped = re.escape(name)
    any_tag = re.compile(rf"<(/?){escaped}{_NAME_END}")
    close_rest = re.compile(r"\s*>")
    depth = 1
    position = end
    while True:
        match = any_tag.search(text, position)
        if match is None:
            return None
        if fences.is_inside(match.start()):
            position = match.end()
            continue
        if match.group(1):
            closing = close_rest.match(text, match.end())
            if closing is None:
                position = match.end()
                continue
            depth -= 1
            if depth == 0:
                return Span(start=start, end=closing.end(), text=text[start:closing.end()])
            position = closing.end()
        else:
            nested = find_tag_end(text, match.end())
            if nested is None:
                return None
            nested_end, nested_self_closing = nested
            if not nested_self_closing:
                depth += 1
            position = nested_end


def _walk_declaration(text: str, start: int) -> Optional[int]:
    """Return the end offset of the declaration starting at ``start``.

    Braces only count at paren depth zero. The first such brace opens the
    body and its match closes it. Arrow functions whose body is a
    parenthesised group end with that group; other arrow expressions end at a
    top-level ``;``. A top-level ``;`` before any body or arrow means the
    declaration is not a component and yields ``None``.
    """
    lexer = CodeLexer()
    braces = 0
    parens = 0
    found_body = False
    arrow_mode: Optional[str] = None
    position = start
    while position < len(text):
        if not lexer.feed(text, position):
            position += 1
            continue
        char = text[position]
        if (
            char == "="
            and text.startswith("=>", position)
            and braces == 0
            and parens == 0
            and not found_body
            and arrow_mode is None
        ):
            following = _next_significant(text, position + 2)
            if following is not None and text[following] == "(":
                arrow_mode = "group"
            elif following is not None and text[following] != "{":
                arrow_mode = "expression"
            position += 2
            continue
        if char == "(":
            parens += 1
        elif char == ")":
            parens -= 1
            if parens < 0:
                return None
            if arrow_mode == "group" and parens == 0 and braces == 0:
                return _consume_tail(text, position + 1)
        elif char == "{" and parens == 0:
            braces += 1
            if arrow_mode is None:
                found_body = True
        elif char == "}" and parens == 0:
            braces -= 1
            if braces < 0:
                return None
            if found_body and braces == 0:
                return _consume_tail(text, position + 1)
        elif char == ";" and braces == 0 and parens == 0 and not found_body:
            if "=>" in text[start:position]:
                return _consume_tail(text, position)
            return None
        position += 1
    return None


def _next_significant(text: str, index: int) -> Optional[int]:
    while index < len(text):
        if not text[index].isspace():
            return index
        index += 1
    return None


def _consume_tail(text: str, index: int) -> int:
    """Extend past trailing ``;``/spaces and at most one newline."""
    while index < len(text) and text[index] in "; \t":
        index += 1
    if index < len(text) and text[index] == "\n":
        index += 1
    return index


__all__ = ["find_definition", "find_tag_end", "find_usage"]
