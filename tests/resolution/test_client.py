"""Tests for the generative service request/response contract."""

from __future__ import annotations

import pytest

from mdxport.classifier import classify_component
from mdxport.llm.runner import GenerativeServiceError, LLMRunner
from mdxport.models import ResolutionTask
from mdxport.prompting.constants import SYSTEM_PROMPT
from mdxport.resolution.client import GenerativeClient, parse_response


def _task(**overrides) -> ResolutionTask:
    values = dict(
        placeholder_id="{/* __MDXPORT_CONVERT__Foo__0__ */}",
        name="Foo",
        definition=None,
        usage="<Foo kind=\"x\">Body</Foo>",
        context="...before\n[COMPONENT HERE]\nafter...",
        classification=classify_component("Foo"),
    )
    values.update(overrides)
    return ResolutionTask(**values)


def test_parse_response_reads_plain_json() -> None:
    response = parse_response(
        '{"converted": "<Callout kind=\\"info\\">Hi</Callout>", "confidence": "HIGH", "reasoning": "info box"}',
        "Foo",
    )

    assert response.converted == '<Callout kind="info">Hi</Callout>'
    assert response.confidence == "high"
    assert response.reasoning == "info box"


def test_parse_response_strips_json_fences() -> None:
    response = parse_response('```json\n{"converted": "**Done**"}\n```', "Foo")

    assert response.converted == "**Done**"
    assert response.confidence == "medium"
    assert response.reasoning == ""


def test_parse_response_normalises_unexpected_confidence() -> None:
    response = parse_response('{"converted": "x", "confidence": "certain"}', "Foo")
    assert response.confidence == "medium"


def test_parse_response_salvages_native_markup() -> None:
    text = 'Sure! Here it is:\n<Callout kind="tip">Use it</Callout>\nHope that helps.'
    response = parse_response(text, "Foo")

    assert response.converted == '<Callout kind="tip">Use it</Callout>'
    assert response.confidence == "low"
    assert response.reasoning == "Extracted from non-JSON response"


def test_parse_response_rejects_unusable_answers() -> None:
    with pytest.raises(GenerativeServiceError):
        parse_response("I cannot help with that.", "Foo")
    with pytest.raises(GenerativeServiceError):
        parse_response('{"confidence": "high"}', "Foo")


def test_client_sends_json_request_with_system_prompt() -> None:
    captured = {}

    def fake_runner(request):
        captured["request"] = request
        return '{"converted": "<Callout kind=\\"info\\">Body</Callout>", "confidence": "high"}'

    client = GenerativeClient(LLMRunner(api_key="test-key", runner=fake_runner))
    response = client.convert(_task())

    request = captured["request"]
    assert client.is_configured
    assert request.json_response is True
    assert request.system == SYSTEM_PROMPT
    assert "Component name: <Foo>" in request.prompt
    assert '<Foo kind="x">Body</Foo>' in request.prompt
    assert response.converted == '<Callout kind="info">Body</Callout>'


def test_client_reports_missing_credentials() -> None:
    client = GenerativeClient(LLMRunner(api_key=None, runner=lambda request: ""))
    assert client.is_configured is False


def test_client_rejects_empty_responses() -> None:
    client = GenerativeClient(LLMRunner(api_key="k", runner=lambda request: "   "))

    with pytest.raises(GenerativeServiceError):
        client.convert(_task())
