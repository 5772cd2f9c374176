"""Tests for name-based component classification."""

from __future__ import annotations

import pytest

from mdxport.classifier import UNKNOWN, classify_component


@pytest.mark.parametrize(
    ("name", "category"),
    [
        ("WarningBanner", "alert"),
        ("ProTip", "tip"),
        ("ReleaseNote", "info"),
        ("TerminalOutput", "code"),
        ("FeatureGrid", "grid"),
        ("FAQSection", "expandable"),
        ("PricingMatrix", "table"),
        ("ImageCarousel", "images"),
        ("BeforeAfterGallery", "tabs"),
    ],
)
def test_classify_component_matches_name_fragments(name: str, category: str) -> None:
    assert classify_component(name).category == category


def test_classification_records_the_matching_signal() -> None:
    result = classify_component("WarningBanner")

    assert result.target == '<Callout kind="alert">'
    assert result.confidence == "high"
    assert result.signals == ("name:WarningBanner->alert",)


def test_matching_is_case_insensitive_and_deterministic() -> None:
    assert classify_component("protip") == classify_component("protip")
    assert classify_component("protip").category == "tip"


def test_unmatched_names_fall_back_to_unknown() -> None:
    result = classify_component("Xyzzy")

    assert result == UNKNOWN
    assert result.category == "unknown"
    assert result.target == "decide later"
    assert result.confidence == "low"
