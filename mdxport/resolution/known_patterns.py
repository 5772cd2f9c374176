"""Exact-name converters for components with a fixed structural mapping."""

from __future__ import annotations

import math
import re
from typing import Callable, Dict, List, Optional

_RECIPE_STEP = re.compile(
    r'<RecipeStep\s+title="([^"]*)"(?:\s+language="([^"]*)")?\s*>(.*?)</RecipeStep\s*>',
    re.DOTALL,
)
_NUMERIC_PROP = r"{name}\s*=\s*\{{?\s*(\d+)\s*\}}?"


def convert_known_pattern(name: str, usage: Optional[str]) -> Optional[str]:
    """Return the native markup for ``usage`` or ``None`` when no converter applies."""
    if not usage:
        return None
    converter = KNOWN_PATTERNS.get(name.lower())
    if converter is None:
        return None
    return converter(usage)


def has_known_pattern(name: str) -> bool:
    return name.lower() in KNOWN_PATTERNS


def convert_recipe(usage: str) -> Optional[str]:
    steps: List[str] = []
    for match in _RECIPE_STEP.finditer(usage):
        steps.append(_render_step(match.group(1), match.group(2), match.group(3)))
    if not steps:
        return None
    return "<Steps>\n" + "\n".join(steps) + "\n</Steps>"


def convert_recipe_step(usage: str) -> Optional[str]:
    match = _RECIPE_STEP.search(usage)
    if match is None:
        return None
    step = _render_step(match.group(1), match.group(2), match.group(3))
    return f"<Steps>\n{step}\n</Steps>"


def convert_progress_bar(usage: str) -> Optional[str]:
    value = _numeric_prop(usage, "value")
    if value is None:
        return None
    maximum = _numeric_prop(usage, "max")
    if maximum is None:
        maximum = 100
    if maximum == 0:
        return None
    label = _string_prop(usage, "label") or "Progress"
    percent = math.floor(value * 100 / maximum + 0.5)
    return f"**{label}:** {value}/{maximum} ({percent}%)"


def _render_step(title: str, language: Optional[str], body: str) -> str:
    content = body.strip()
    if language:
        content = f"```{language}\n{content}\n```"
    return f'  <Step title="{title}">\n    {content}\n  </Step>'


def _numeric_prop(usage: str, name: str) -> Optional[int]:
    match = re.search(r"\b" + _NUMERIC_PROP.format(name=re.escape(name)), usage)
    return int(match.group(1)) if match else None


def _string_prop(usage: str, name: str) -> Optional[str]:
    match = re.search(rf"\b{re.escape(name)}\s*=\s*(?:\"([^\"]*)\"|'([^']*)')", usage)
    if match is None:
        return None
    return match.group(1) if match.group(1) is not None else match.group(2)


KNOWN_PATTERNS: Dict[str, Callable[[str], Optional[str]]] = {
    "recipe": convert_recipe,
    "recipestep": convert_recipe_step,
    "progressbar": convert_progress_bar,
}


__all__ = [
    "KNOWN_PATTERNS",
    "convert_known_pattern",
    "convert_progress_bar",
    "convert_recipe",
    "convert_recipe_step",
    "has_known_pattern",
]
