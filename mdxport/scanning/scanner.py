"""Discovery and isolation of unknown components in an MDX document."""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set

from ..classifier import classify_component
from ..logging import get_logger
from ..models import ChangeRecord, ComponentBlock, ScanResult, Span
from ..postproc.lint import collapse_blank_lines
from .constants import KNOWN_COMPONENTS, PARENT_CHILDREN
from .extractor import find_definition, find_usage
from .fences import FenceIndex, repair_fences

_LOGGER = get_logger("scanning.scanner")

TAG_NAME = re.compile(r"<([A-Z][A-Za-z0-9]*(?:\.[A-Za-z0-9]+)?)\b")
PLACEHOLDER_PREFIX = "__MDXPORT_CONVERT__"
_EXISTING_PLACEHOLDER = re.compile(re.escape(PLACEHOLDER_PREFIX) + r"[A-Za-z0-9.]+__(\d+)__")
CONTEXT_MARKER = "[COMPONENT HERE]"


def make_placeholder(name: str, index: int) -> str:
    return "{/* " + f"{PLACEHOLDER_PREFIX}{name}__{index}__" + " */}"


class ComponentScanner:
    """Extracts definitions and usages of components outside the allow-list.

    Every splice rebuilds the ``FenceIndex`` before the next lookup; offsets
    from an older index are never reused.
    """

    def __init__(
        self,
        *,
        context_chars: int = 200,
        exclude: Iterable[str] = (),
        parent_children: Optional[Mapping[str, Sequence[str]]] = None,
    ) -> None:
        self.context_chars = max(0, context_chars)
        self.known = frozenset(KNOWN_COMPONENTS) | frozenset(exclude)
        table: Dict[str, tuple] = {parent: tuple(children) for parent, children in PARENT_CHILDREN.items()}
        for parent, children in (parent_children or {}).items():
            table[parent] = tuple(children)
        self.parent_children = table

    def scan(self, text: Optional[str]) -> ScanResult:
        content, changes = repair_fences(text or "")
        fences = FenceIndex.build(content)

        counts = self._discover(content, fences)
        ordered = self.order_names(counts, wrappers=self._wrappers(content, fences, counts))
        placeholder_index = _next_placeholder_index(content)

        blocks: List[ComponentBlock] = []
        definitions_removed = 0
        for name in ordered:
            definition = find_definition(content, name, fences)
            if definition is not None:
                content = content[: definition.start] + content[definition.end :]
                fences = FenceIndex.build(content)

            usages: List[str] = []
            contexts: List[str] = []
            placeholder_ids: List[str] = []
            while True:
                usage = find_usage(content, name, fences)
                if usage is None:
                    break
                placeholder = make_placeholder(name, placeholder_index)
                placeholder_index += 1
                usages.append(usage.text)
                contexts.append(self._context(content, usage))
                placeholder_ids.append(placeholder)
                content = content[: usage.start] + placeholder + content[usage.end :]
                fences = FenceIndex.build(content)

            if not usages:
                if definition is not None:
                    # Nothing was spliced since the removal, so the offset is still valid.
                    content = content[: definition.start] + definition.text + content[definition.start :]
                    fences = FenceIndex.build(content)
                _LOGGER.debug("Dropping %s: no usages outside fenced code", name)
                continue

            if definition is not None:
                definitions_removed += 1
            _LOGGER.debug("Extracted %s: %d usage(s), definition=%s", name, len(usages), definition is not None)
            blocks.append(
                ComponentBlock(
                    name=name,
                    definition=definition.text if definition is not None else None,
                    usages=usages,
                    contexts=contexts,
                    placeholder_ids=placeholder_ids,
                    classification=classify_component(name),
                )
            )

        content = collapse_blank_lines(content)
        total = sum(len(block.usages) for block in blocks)
        if blocks:
            changes.append(
                ChangeRecord(
                    type="unknown-extract",
                    count=total,
                    detail=(
                        f"isolated {total} usage(s) of {len(blocks)} unknown component(s); "
                        f"removed {definitions_removed} definition(s)"
                    ),
                )
            )
        _LOGGER.info("Scan found %d unknown component(s) with %d usage(s)", len(blocks), total)
        return ScanResult(content=content, component_blocks=blocks, unknown_counts=counts, changes=changes)

    def order_names(
        self, names: Iterable[str], wrappers: Optional[Mapping[str, Set[str]]] = None
    ) -> List[str]:
        """Return ``names`` with every parent ahead of its (transitive) children.

        Parents come from the parent->children table and from ``wrappers``,
        which maps a name to the names observed wrapping one of its usages.
        """
        listed = list(names)
        depths = {name: self._depth(name, set(), wrappers or {}) for name in listed}
        return sorted(listed, key=lambda name: depths[name])

    def _depth(self, name: str, visiting: Set[str], wrappers: Mapping[str, Set[str]]) -> int:
        if name in visiting:
            return 0
        visiting = visiting | {name}
        parents = set(wrappers.get(name, ()))
        parents.update(parent for parent, children in self.parent_children.items() if name in children)
        parents.discard(name)
        return max((self._depth(parent, visiting, wrappers) + 1 for parent in parents), default=0)

    def _wrappers(self, content: str, fences: FenceIndex, names: Iterable[str]) -> Dict[str, Set[str]]:
        spans = {name: _usage_spans(content, name, fences) for name in names}
        wrappers: Dict[str, Set[str]] = {}
        for inner, inner_spans in spans.items():
            for outer, outer_spans in spans.items():
                if outer == inner:
                    continue
                if any(o.start < i.start and i.end <= o.end for i in inner_spans for o in outer_spans):
                    wrappers.setdefault(inner, set()).add(outer)
        return wrappers

    def _discover(self, content: str, fences: FenceIndex) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for match in TAG_NAME.finditer(content):
            name = match.group(1)
            if name in self.known or fences.is_inside(match.start()):
                continue
            counts[name] = counts.get(name, 0) + 1
        return counts

    def _context(self, content: str, usage: Span) -> str:
        before = content[max(0, usage.start - self.context_chars) : usage.start]
        after = content[usage.end : usage.end + self.context_chars]
        before_lines = "\n".join(before.split("\n")[-3:]).strip()
        after_lines = "\n".join(after.split("\n")[:3]).strip()
        return f"...{before_lines}\n{CONTEXT_MARKER}\n{after_lines}..."


def _usage_spans(content: str, name: str, fences: FenceIndex) -> List[Span]:
    spans: List[Span] = []
    position = 0
    while True:
        usage = find_usage(content, name, fences, start=position)
        if usage is None:
            return spans
        spans.append(usage)
        position = usage.end


def _next_placeholder_index(content: str) -> int:
    existing = [int(match.group(1)) for match in _EXISTING_PLACEHOLDER.finditer(content)]
    return max(existing) + 1 if existing else 0


def scan_document(text: Optional[str], **options) -> ScanResult:
    """Scan ``text`` with a default-configured ``ComponentScanner``."""
    return ComponentScanner(**options).scan(text)


__all__ = [
    "CONTEXT_MARKER",
    "ComponentScanner",
    "PLACEHOLDER_PREFIX",
    "TAG_NAME",
    "make_placeholder",
    "scan_document",
]
