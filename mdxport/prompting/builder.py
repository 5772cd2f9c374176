"""Builds chat prompts for generative component conversion."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from ..models import ResolutionTask
from .constants import CLOSING_INSTRUCTION, SYSTEM_PROMPT


@dataclass(frozen=True)
class PromptMessage:
    """Represents a single chat message for LLM prompting."""

    role: str
    content: str


@dataclass
class PromptRequest:
    """Encapsulates the chat messages for one resolution task."""

    placeholder_id: str
    messages: List[PromptMessage]
    metadata: Dict[str, object] = field(default_factory=dict)

    @property
    def system(self) -> str | None:
        for message in self.messages:
            if message.role == "system":
                return message.content
        return None

    @property
    def user(self) -> str:
        return "\n\n".join(message.content for message in self.messages if message.role == "user")


class PromptBuilder:
    """Turns a ``ResolutionTask`` into system and user messages."""

    def __init__(self, *, system_prompt: str | None = None) -> None:
        self.system_prompt = system_prompt or SYSTEM_PROMPT

    def build(self, task: ResolutionTask) -> PromptRequest:
        messages = [
            PromptMessage(role="system", content=self.system_prompt),
            PromptMessage(role="user", content=self.render_user_prompt(task)),
        ]
        metadata: Dict[str, object] = {"name": task.name, "usage_index": task.usage_index}
        if task.classification is not None:
            metadata["category"] = task.classification.category
        return PromptRequest(placeholder_id=task.placeholder_id, messages=messages, metadata=metadata)

    def render_user_prompt(self, task: ResolutionTask) -> str:
        parts = [
            "Convert this unknown component to native MDX.",
            f"Component name: <{task.name}>",
        ]

        classification = task.classification
        if classification is not None and classification.category != "unknown":
            parts.append(
                "\n".join(
                    [
                        "### Classification (pre-analyzed)",
                        f"Category: {classification.category}",
                        f"Suggested target: {classification.target}",
                        f"Confidence: {classification.confidence}",
                        f"Signals: {', '.join(classification.signals)}",
                        "",
                        "Use this classification as a strong hint, but override it if the actual content suggests otherwise.",
                    ]
                )
            )

        if task.definition:
            parts.append(f"### Component source code:\n```jsx\n{_fence_safe(task.definition)}\n```")
        if task.usage:
            parts.append(f"### Usage:\n```jsx\n{_fence_safe(task.usage)}\n```")
        if task.context:
            parts.append(f"Surrounding context:\n{task.context}")

        parts.append(CLOSING_INSTRUCTION)
        return "\n\n".join(parts)


def _fence_safe(source: str) -> str:
    # Backticks inside the snippet would terminate the surrounding jsx fence.
    return source.replace("`", "'")


__all__ = ["PromptBuilder", "PromptMessage", "PromptRequest"]
