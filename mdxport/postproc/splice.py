"""Final splice of resolved replacements into placeholder-substituted content."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Mapping

from ..logging import get_logger
from ..models import ChangeRecord
from ..scanning.scanner import PLACEHOLDER_PREFIX

_LOGGER = get_logger("postproc.splice")

_PLACEHOLDER = re.compile(r"\{/\* " + re.escape(PLACEHOLDER_PREFIX) + r"[A-Za-z0-9.]+__\d+__ \*/\}")


@dataclass
class SpliceResult:
    content: str
    warnings: List[str] = field(default_factory=list)
    changes: List[ChangeRecord] = field(default_factory=list)


def splice_conversions(content: str, conversions: Mapping[str, str]) -> SpliceResult:
    """Replace each placeholder with its conversion using literal string replacement.

    Replacement text is never interpreted as a pattern, so ``\\1`` or ``$&``
    in generated markup survive verbatim. A placeholder carried inside another
    conversion (a usage restored verbatim around a nested usage) is picked up
    on a later pass; each placeholder is replaced at most once.
    """
    result = SpliceResult(content=content)
    pending = dict(conversions)
    spliced = 0
    while pending:
        present = [placeholder for placeholder in pending if placeholder in result.content]
        if not present:
            break
        for placeholder in present:
            result.content = result.content.replace(placeholder, pending.pop(placeholder))
            spliced += 1

    for placeholder in pending:
        message = f"Placeholder {placeholder} not found in content; conversion dropped"
        _LOGGER.warning(message)
        result.warnings.append(message)

    leftovers = [match.group(0) for match in _PLACEHOLDER.finditer(result.content)]
    for placeholder in leftovers:
        if placeholder in conversions:
            continue
        message = f"Placeholder {placeholder} has no conversion"
        _LOGGER.warning(message)
        result.warnings.append(message)

    if spliced:
        result.changes.append(
            ChangeRecord(type="splice", count=spliced, detail=f"spliced {spliced} resolved component usage(s)")
        )
    return result


__all__ = ["SpliceResult", "splice_conversions"]
