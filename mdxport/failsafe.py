"""Fail-safe stubs for components that could not be converted automatically."""

from __future__ import annotations

MANUAL_REVIEW_MARKER = "MANUAL REVIEW NEEDED"


def escape_usage(usage: str | None) -> str:
    """Return ``usage`` with braces escaped and comment terminators broken."""
    cleaned = (usage or "").replace("{", "\\{").replace("}", "\\}")
    return cleaned.replace("*/", "* /").strip()


def manual_review_stub(name: str, usage: str | None) -> str:
    """Return a non-rendering comment block that preserves the original usage."""
    lines = [
        "{/* " + f"{MANUAL_REVIEW_MARKER}: <{name}>" + " */}",
        "{/* This component could not be automatically converted. */}",
        "{/* Original usage: */}",
        "{/* " + escape_usage(usage) + " */}",
    ]
    return "\n".join(lines)


def is_manual_review_stub(text: str) -> bool:
    return MANUAL_REVIEW_MARKER in text


__all__ = ["MANUAL_REVIEW_MARKER", "escape_usage", "is_manual_review_stub", "manual_review_stub"]
