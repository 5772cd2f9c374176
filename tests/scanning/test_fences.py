"""Tests for fence indexing and repair."""

from __future__ import annotations

from mdxport.models import FenceRange
from mdxport.scanning.fences import FenceIndex, is_proselike, repair_fences, rewrite_outside_fences


def test_build_pairs_opener_with_next_bare_marker() -> None:
    text = "intro\n```js\ncode\n```\nafter"
    index = FenceIndex.build(text)

    assert index.ranges == (FenceRange(start=6, end=20),)
    assert index.is_inside(12) is True
    assert index.is_inside(6) is False
    assert index.is_inside(20) is False
    assert index.is_inside(2) is False


def test_is_inside_is_idempotent() -> None:
    text = "```py\nx = 1\n```\n"
    index = FenceIndex.build(text)

    for offset in range(len(text) + 1):
        assert index.is_inside(offset) == index.is_inside(offset)


def test_build_ignores_orphan_closers() -> None:
    assert FenceIndex.build("```\ntext").ranges == ()


def test_reopened_fence_abandons_previous_opener() -> None:
    text = "```js\na\n```py\nb\n```"
    assert FenceIndex.build(text).ranges == (FenceRange(start=8, end=19),)


def test_segments_cover_the_whole_text() -> None:
    text = "a\n```js\nb\n```\nc\n```py\nd\n```"
    index = FenceIndex.build(text)
    segments = list(index.segments(text))

    assert "".join(chunk for chunk, _ in segments) == text
    assert [inside for _, inside in segments] == [False, True, False, True]


def test_repair_closes_fence_before_heading() -> None:
    text = "```js\nconst a = 1;\n\n## Next\nText"
    repaired, changes = repair_fences(text)

    assert repaired == "```js\nconst a = 1;\n```\n\n## Next\nText"
    assert [change.type for change in changes] == ["fence-repair"]
    assert changes[0].count == 1


def test_repair_closes_at_end_of_document() -> None:
    repaired, _ = repair_fences("```py\nprint(1)\nprint(2)")
    assert repaired == "```py\nprint(1)\nprint(2)\n```"


def test_repair_places_closer_after_last_code_line_when_trailing_blank_lines() -> None:
    repaired, _ = repair_fences("```py\nx = 1\n\n")
    assert repaired == "```py\nx = 1\n```\n\n"


def test_repair_closes_before_the_next_opener() -> None:
    repaired, changes = repair_fences("```js\na()\n```py\nb()\n```")

    assert repaired == "```js\na()\n```\n```py\nb()\n```"
    assert changes[0].type == "fence-repair"


def test_repair_stops_before_prose_and_component_tags() -> None:
    prose, _ = repair_fences("```bash\nnpm install\n\nthen run the server locally\n")
    assert prose.startswith("```bash\nnpm install\n```\n\nthen run")

    tag, _ = repair_fences("```bash\nnpm install\n\n<Card title=\"x\" />\n")
    assert tag.startswith("```bash\nnpm install\n```\n\n<Card")


def test_repair_removes_orphan_closer() -> None:
    repaired, changes = repair_fences("Text\n```\nMore")

    assert repaired == "Text\n\nMore"
    assert [change.type for change in changes] == ["fence-orphan"]


def test_repair_is_a_no_op_for_balanced_documents() -> None:
    text = "```js\nx\n```\n"
    assert repair_fences(text) == (text, [])


def test_is_proselike_heuristics() -> None:
    assert is_proselike("this is a sentence here")
    assert is_proselike("The value")
    assert is_proselike("- item")
    assert is_proselike("## Heading")
    assert not is_proselike("x = 1")
    assert not is_proselike("return value;")
    assert not is_proselike("")


def test_rewrite_outside_fences_skips_fence_interiors() -> None:
    text = "a\n```py\na\n```\na"
    rewritten, count = rewrite_outside_fences(text, lambda chunk: (chunk.replace("a", "b"), chunk.count("a")))

    assert rewritten == "b\n```py\na\n```\nb"
    assert count == 2
