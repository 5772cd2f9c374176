"""Static component tables shared by the scanner and the output validator."""

from __future__ import annotations

# Components the target dialect renders natively.
NATIVE_COMPONENTS: frozenset[str] = frozenset(
    {
        "Callout",
        "Card",
        "Columns",
        "Column",
        "Image",
        "Video",
        "Iframe",
        "CodeGroup",
        "Expandable",
        "ExpandableGroup",
        "Steps",
        "Step",
        "Tabs",
        "Tab",
        "Update",
        "ParamField",
        "ResponseField",
        "Request",
        "Response",
        "Frame",
        "Icon",
    }
)

HTML_TAGS: frozenset[str] = frozenset(
    {
        "div", "span", "p", "a", "img", "br", "hr", "table", "thead", "tbody",
        "tr", "th", "td", "ul", "ol", "li", "pre", "code", "blockquote",
        "h1", "h2", "h3", "h4", "h5", "h6", "em", "strong", "del", "sub", "sup",
        "details", "summary", "section", "article", "aside", "header", "footer",
        "nav", "main", "figure", "figcaption", "iframe", "video", "audio", "source",
        "svg", "path", "circle", "rect", "line", "polyline", "polygon", "g",
        "kbd", "input", "meta", "link", "b", "i", "u", "s", "small", "mark",
        "abbr", "cite", "q", "dl", "dt", "dd",
    }
)

# Source components rewritten by the deterministic rule pipeline before or
# after resolution; the scanner never extracts them.
DETERMINISTIC_COMPONENTS: frozenset[str] = frozenset({"Cards", "Accordion", "AccordionGroup"})

KNOWN_COMPONENTS: frozenset[str] = NATIVE_COMPONENTS | HTML_TAGS | DETERMINISTIC_COMPONENTS

# Names the resolution stage hands back to the rule pipeline verbatim.
PIPELINE_HANDLED_COMPONENTS: frozenset[str] = DETERMINISTIC_COMPONENTS | {"Embed"}

# Parents are extracted before children so a child's standalone usage is not
# pulled out of its parent's wrapping usage.
PARENT_CHILDREN: dict[str, tuple[str, ...]] = {
    "Recipe": ("RecipeStep",),
}

# Native components that wrap other content and are checked for lowercase misspellings.
CONTAINER_COMPONENTS: tuple[str, ...] = (
    "Callout",
    "Card",
    "Columns",
    "Steps",
    "Step",
    "Tabs",
    "Tab",
    "Expandable",
    "CodeGroup",
)

FENCE_DELIMITER = "```"


__all__ = [
    "CONTAINER_COMPONENTS",
    "DETERMINISTIC_COMPONENTS",
    "FENCE_DELIMITER",
    "HTML_TAGS",
    "KNOWN_COMPONENTS",
    "NATIVE_COMPONENTS",
    "PARENT_CHILDREN",
    "PIPELINE_HANDLED_COMPONENTS",
]
