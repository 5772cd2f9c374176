"""Request/response contract with the generative conversion service."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass

from ..llm.runner import GenerativeServiceError, LLMRunner
from ..logging import get_logger
from ..models import ResolutionTask
from ..prompting.builder import PromptBuilder

_LOGGER = get_logger("resolution.client")

CONFIDENCE_LEVELS = ("high", "medium", "low")

_FENCE_OPEN_JSON = re.compile(r"^```json\s*", re.MULTILINE)
_FENCE_OPEN = re.compile(r"^```\s*", re.MULTILINE)
_FENCE_CLOSE = re.compile(r"```\s*$", re.MULTILINE)
_CONTAINERS = r"(?:Callout|Card|Columns|Steps|Tabs|Expandable|ExpandableGroup|CodeGroup)"
_NATIVE_FRAGMENT = re.compile(rf"<{_CONTAINERS}.*?</{_CONTAINERS}>", re.DOTALL)


@dataclass(frozen=True)
class GenerativeResponse:
    """Replacement markup returned for one usage."""

    converted: str
    confidence: str
    reasoning: str


def parse_response(text: str, name: str) -> GenerativeResponse:
    """Decode the service's JSON answer, salvaging bare native markup when possible.

    Raises ``GenerativeServiceError`` when neither a ``converted`` string nor a
    native container fragment can be recovered.
    """
    cleaned = _FENCE_OPEN_JSON.sub("", text, count=1)
    cleaned = _FENCE_OPEN.sub("", cleaned, count=1)
    cleaned = _FENCE_CLOSE.sub("", cleaned, count=1).strip()

    try:
        parsed = json.loads(cleaned)
        if not isinstance(parsed, dict):
            raise ValueError("response is not a JSON object")
        converted = parsed.get("converted")
        if not isinstance(converted, str) or not converted:
            raise ValueError("missing 'converted' field")
    except ValueError as exc:
        _LOGGER.warning("Response for <%s> was not valid JSON, trying extraction", name)
        fragment = _NATIVE_FRAGMENT.search(text)
        if fragment is None:
            raise GenerativeServiceError(f"Could not parse response for <{name}>: {exc}") from exc
        return GenerativeResponse(
            converted=fragment.group(0),
            confidence="low",
            reasoning="Extracted from non-JSON response",
        )

    confidence = str(parsed.get("confidence") or "medium").strip().lower()
    if confidence not in CONFIDENCE_LEVELS:
        confidence = "medium"
    reasoning = parsed.get("reasoning")
    return GenerativeResponse(
        converted=converted,
        confidence=confidence,
        reasoning=reasoning if isinstance(reasoning, str) else "",
    )


class GenerativeClient:
    """Sends one ``ResolutionTask`` at a time to the generative service."""

    def __init__(self, runner: LLMRunner, *, builder: PromptBuilder | None = None) -> None:
        self.runner = runner
        self.builder = builder or PromptBuilder()

    @property
    def is_configured(self) -> bool:
        return self.runner.is_configured

    def convert(self, task: ResolutionTask) -> GenerativeResponse:
        request = self.builder.build(task)
        text = self.runner.run(request.user, system=request.system, json_response=True)
        if not isinstance(text, str) or not text.strip():
            raise GenerativeServiceError(f"Empty response for <{task.name}>")
        return parse_response(text, task.name)


__all__ = [
    "CONFIDENCE_LEVELS",
    "GenerativeClient",
    "GenerativeResponse",
    "GenerativeServiceError",
    "parse_response",
]
