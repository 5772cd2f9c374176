"""Scripted stand-ins for the generative service."""

from __future__ import annotations

import threading
import time
from typing import Callable, Dict, List

from mdxport.llm.runner import GenerativeServiceError
from mdxport.models import ResolutionTask
from mdxport.resolution.client import GenerativeResponse

Script = Callable[[ResolutionTask, int], GenerativeResponse]


class ScriptedClient:
    """Implements the ``GenerativeClient`` surface with a per-task script.

    The script receives the task and the 1-based attempt number for that
    placeholder and either returns a response or raises.
    """

    def __init__(self, script: Script, *, configured: bool = True) -> None:
        self._script = script
        self._configured = configured
        self._lock = threading.Lock()
        self.attempts: Dict[str, int] = {}
        self.calls: List[str] = []

    @property
    def is_configured(self) -> bool:
        return self._configured

    def convert(self, task: ResolutionTask) -> GenerativeResponse:
        with self._lock:
            attempt = self.attempts.get(task.placeholder_id, 0) + 1
            self.attempts[task.placeholder_id] = attempt
            self.calls.append(task.placeholder_id)
        return self._script(task, attempt)


def echo_callout(task: ResolutionTask, attempt: int) -> GenerativeResponse:
    return GenerativeResponse(
        converted=f'<Callout kind="info">{task.name} #{task.usage_index}</Callout>',
        confidence="high",
        reasoning="info box",
    )


def fail_for(name: str) -> Script:
    def script(task: ResolutionTask, attempt: int) -> GenerativeResponse:
        if task.name == name:
            raise GenerativeServiceError("service unavailable")
        return echo_callout(task, attempt)

    return script


def slow_first(delays: Dict[int, float]) -> Script:
    """Sleep ``delays[usage_index]`` seconds before answering, so later tasks settle first."""

    def script(task: ResolutionTask, attempt: int) -> GenerativeResponse:
        time.sleep(delays.get(task.usage_index, 0.0))
        return echo_callout(task, attempt)

    return script


__all__ = ["ScriptedClient", "echo_callout", "fail_for", "slow_first"]
