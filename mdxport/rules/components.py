"""Built-in rewrite rules for source components with a direct native equivalent."""

from __future__ import annotations

import re
from typing import List, Tuple

from ..models import ChangeRecord
from ..scanning.fences import rewrite_outside_fences
from .pipeline import Rule, RuleResult

RENAMES = (("AccordionGroup", "ExpandableGroup"), ("Accordion", "Expandable"))

_EXPANDABLE_ICON = re.compile(r"(<Expandable\s[^>]*?)\s+icon\s*=\s*([\"'])[^\"']*\2")
_CARDS_OPEN = re.compile(r"<Cards(\s|>)")
_CARDS_CLOSE = re.compile(r"</Cards\s*>")
_COLUMNS_PROP = re.compile(r"(<Columns\s[^>]*?)\bcolumns\s*=\s*\{\s*(\d+)\s*\}")
_EMBED = re.compile(r"<Embed\b([^<>]*?)(?:/>|>\s*</Embed\s*>)")


def convert_accordions(content: str) -> RuleResult:
    """``<Accordion>``/``<AccordionGroup>`` become ``<Expandable>``/``<ExpandableGroup>`` without icons."""

    def rewrite(chunk: str) -> Tuple[str, int]:
        count = 0
        for source, target in RENAMES:
            chunk, opened = re.subn(rf"<{source}(\s|>|/)", rf"<{target}\1", chunk)
            chunk = re.sub(rf"</{source}\s*>", f"</{target}>", chunk)
            count += opened
        if count:
            chunk = _EXPANDABLE_ICON.sub(r"\1", chunk)
        return chunk, count

    content, count = rewrite_outside_fences(content, rewrite)
    return _result(content, "accordion", count, "<Accordion> -> <Expandable> (icon prop removed)")


def convert_cards(content: str) -> RuleResult:
    """``<Cards columns={N}>`` becomes ``<Columns cols={N}>``."""

    def rewrite(chunk: str) -> Tuple[str, int]:
        chunk, count = _CARDS_OPEN.subn(r"<Columns\1", chunk)
        if count:
            chunk = _CARDS_CLOSE.sub("</Columns>", chunk)
            chunk = _COLUMNS_PROP.sub(r"\1cols={\2}", chunk)
        return chunk, count

    content, count = rewrite_outside_fences(content, rewrite)
    return _result(content, "cards", count, "<Cards columns={N}> -> <Columns cols={N}>")


def convert_embeds(content: str) -> RuleResult:
    """``<Embed url="..."/>`` becomes ``<Iframe src="..."/>``."""

    def render(match: re.Match[str]) -> str:
        attributes = match.group(1)
        url = _attribute(attributes, "url") or _attribute(attributes, "src") or ""
        title = _attribute(attributes, "title")
        title_attr = f' title="{title}"' if title else ""
        return f'<Iframe src="{url}"{title_attr} width="100%" height="400" />'

    content, count = rewrite_outside_fences(content, lambda chunk: _EMBED.subn(render, chunk))
    return _result(content, "embed", count, "<Embed> -> <Iframe>")


DEFAULT_RULES: List[Rule] = [convert_accordions, convert_cards, convert_embeds]


def _attribute(attributes: str, name: str) -> str | None:
    match = re.search(rf"\b{name}\s*=\s*(?:\"([^\"]*)\"|'([^']*)')", attributes)
    if match is None:
        return None
    return match.group(1) if match.group(1) is not None else match.group(2)


def _result(content: str, change_type: str, count: int, detail: str) -> RuleResult:
    changes = [ChangeRecord(type=change_type, count=count, detail=detail)] if count else []
    return RuleResult(content=content, changes=changes)


__all__ = ["DEFAULT_RULES", "convert_accordions", "convert_cards", "convert_embeds"]
