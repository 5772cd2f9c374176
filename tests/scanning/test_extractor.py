"""Tests for delimiter-balanced definition and usage extraction."""

from __future__ import annotations

from mdxport.scanning.extractor import find_definition, find_tag_end, find_usage
from mdxport.scanning.fences import FenceIndex


def _definition(text: str, name: str):
    return find_definition(text, name, FenceIndex.build(text))


def _usage(text: str, name: str):
    return find_usage(text, name, FenceIndex.build(text))


def test_arrow_definition_with_brace_body() -> None:
    declaration = (
        "export const Foo = ({ title }) => {\n"
        "  return <div>{title}</div>;\n"
        "};\n"
    )
    text = "Intro\n\n" + declaration + "\n<Foo title=\"a\" />\n"

    span = _definition(text, "Foo")

    assert span is not None
    assert span.text == declaration
    assert text[span.start : span.end] == declaration


def test_definition_removal_round_trips() -> None:
    text = (
        "# Page\n\n"
        "export function Bar(props) {\n"
        "  if (props.x) { return null; }\n"
        "  return <p>hi</p>;\n"
        "}\n"
        "\n<Bar x />\n"
    )
    span = _definition(text, "Bar")
    assert span is not None

    removed = text[: span.start] + text[span.end :]
    assert "function Bar" not in removed
    assert removed[: span.start] + span.text + removed[span.start :] == text


def test_arrow_definition_with_parenthesised_body() -> None:
    text = "export const Baz = () => (\n  <div>Hi</div>\n);\n\nNext"
    span = _definition(text, "Baz")

    assert span is not None
    assert span.text == "export const Baz = () => (\n  <div>Hi</div>\n);\n"


def test_arrow_expression_definition_ends_at_semicolon() -> None:
    span = _definition("const Qux = (a) => a * 2;\nmore", "Qux")

    assert span is not None
    assert span.text == "const Qux = (a) => a * 2;\n"


def test_value_declaration_without_arrow_is_not_a_definition() -> None:
    text = 'export const Note = "hello";\n\nKeep this paragraph {value} intact.\n\n<Note />\n'
    assert _definition(text, "Note") is None

    styled = "const Box = styled.div`\n  color: red;\n`;\n\nSee {props}.\n"
    assert _definition(styled, "Box") is None


def test_strings_with_braces_do_not_confuse_the_walk() -> None:
    text = "const Label = () => {\n  const s = \"}\";\n  return <b>{s}</b>;\n};\nafter"
    span = _definition(text, "Label")

    assert span is not None
    assert span.text.endswith("};\n")


def test_definition_inside_fence_is_ignored() -> None:
    fenced = "```jsx\nexport const Foo = () => {};\n```\n"
    assert _definition(fenced, "Foo") is None

    text = fenced + "\nexport const Foo = () => {\n  return null;\n};\n"
    span = _definition(text, "Foo")
    assert span is not None
    assert span.start > len(fenced)


def test_unbalanced_definition_returns_none() -> None:
    assert _definition("export const Foo = () => {\n  return 1;\n", "Foo") is None


def test_self_closing_usage() -> None:
    span = _usage("Before <Foo x={1} /> after", "Foo")

    assert span is not None
    assert span.text == "<Foo x={1} />"


def test_arrow_inside_attribute_does_not_end_tag() -> None:
    text = "<Foo onClick={() => go()}>body</Foo>"
    span = _usage(text, "Foo")

    assert span is not None
    assert span.text == text


def test_same_name_nesting_is_tracked() -> None:
    text = "<Foo>\n  <Foo>inner</Foo>\n  <Foo />\n</Foo>\nafter"
    span = _usage(text, "Foo")

    assert span is not None
    assert span.text == "<Foo>\n  <Foo>inner</Foo>\n  <Foo />\n</Foo>"


def test_dangling_opener_returns_none() -> None:
    assert _usage("<Foo>\nno close", "Foo") is None


def test_fenced_usage_is_skipped() -> None:
    text = "```jsx\n<Foo />\n```\n<Foo a=\"1\" />"
    span = _usage(text, "Foo")

    assert span is not None
    assert span.text == '<Foo a="1" />'
    assert span.start == text.rindex("<Foo")


def test_longer_names_are_not_prefix_matched() -> None:
    span = _usage("<FooBar />\n<Foo />", "Foo")

    assert span is not None
    assert span.text == "<Foo />"


def test_find_tag_end_reports_self_closing() -> None:
    assert find_tag_end('<Foo a="x>" />', 4) == (14, True)
    assert find_tag_end("<Foo>", 4) == (5, False)
    assert find_tag_end("<Foo a={1", 4) is None
