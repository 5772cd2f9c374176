"""Resolution of extracted components into native replacements.

Each usage moves through ``Pending -> {Skipped | KnownPattern | AIQueued} ->
Resolved``. Queued usages are sent to the generative service in fixed-width
batches; batches run one after another and every task in a batch settles
independently, so one failure never discards its siblings' results.
"""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Iterable, List, Optional, Sequence

from tenacity import AsyncRetrying, before_sleep_log, stop_after_attempt, wait_fixed

from ..failsafe import manual_review_stub
from ..logging import get_logger
from ..models import ChangeRecord, ComponentBlock, ResolutionResult, ResolutionTask
from ..scanning.constants import PIPELINE_HANDLED_COMPONENTS
from ..validators.base import ValidationContext, Validator
from ..validators.output import OutputValidator
from .client import GenerativeClient, GenerativeResponse
from .known_patterns import convert_known_pattern

_LOGGER = get_logger("resolution.orchestrator")

NO_CREDENTIAL_WARNING = (
    "Generative conversion skipped: no API key configured "
    "(set MDXPORT_LLM_API_KEY or XAI_API_KEY)"
)
DISABLED_WARNING = "Generative conversion disabled; unknown components need manual review"


class ResolutionOrchestrator:
    """Turns ``ComponentBlock`` usages into a placeholder -> replacement map."""

    def __init__(
        self,
        client: GenerativeClient | None = None,
        *,
        validator: Validator | None = None,
        batch_size: int = 5,
        retries: int = 1,
        retry_delay: float = 0.5,
        timeout: float | None = 60.0,
        skip_components: Iterable[str] | None = None,
        use_ai: bool = True,
    ) -> None:
        self.client = client
        self.validator = validator or OutputValidator()
        self.batch_size = max(1, batch_size)
        self.retries = max(0, retries)
        self.retry_delay = max(0.0, retry_delay)
        self.timeout = timeout
        self.skip_components = frozenset(skip_components or PIPELINE_HANDLED_COMPONENTS)
        self.use_ai = use_ai

    def resolve(self, blocks: Sequence[ComponentBlock] | None) -> ResolutionResult:
        """Blocking wrapper around :meth:`resolve_async`."""
        return asyncio.run(self.resolve_async(blocks))

    async def resolve_async(self, blocks: Sequence[ComponentBlock] | None) -> ResolutionResult:
        result = ResolutionResult(conversions={})
        queued: List[ResolutionTask] = []
        skipped = 0
        known = 0

        for position, block in enumerate(blocks or []):
            if not isinstance(block, ComponentBlock):
                self._note(result, f"Ignoring malformed component entry at index {position}")
                continue
            if not block.is_consistent():
                self._note(result, f"Ignoring <{block.name}>: usages, contexts and placeholders differ in length")
                continue
            for index, (placeholder, usage, context) in enumerate(
                zip(block.placeholder_ids, block.usages, block.contexts)
            ):
                if not isinstance(placeholder, str) or not isinstance(usage, str):
                    self._note(result, f"Ignoring malformed usage {index + 1} of <{block.name}>")
                    continue
                # Slot reserved up front so the map iterates in submission order.
                result.conversions[placeholder] = usage
                if block.name in self.skip_components:
                    skipped += 1
                    continue
                converted = convert_known_pattern(block.name, usage)
                if converted is not None:
                    result.conversions[placeholder] = converted
                    known += 1
                    continue
                queued.append(
                    ResolutionTask(
                        placeholder_id=placeholder,
                        name=block.name,
                        definition=block.definition,
                        usage=usage,
                        context=context if isinstance(context, str) else None,
                        classification=block.classification,
                        usage_index=index,
                    )
                )

        if skipped:
            result.changes.append(
                ChangeRecord(type="unknown-skip", count=skipped, detail=f"restored {skipped} usage(s) for the rule pipeline")
            )
        if known:
            result.changes.append(
                ChangeRecord(type="known-pattern", count=known, detail=f"converted {known} usage(s) with exact-name converters")
            )
        if queued:
            await self._resolve_queued(queued, result)
        return result

    async def _resolve_queued(self, tasks: List[ResolutionTask], result: ResolutionResult) -> None:
        if not self.use_ai or self.client is None or not self.client.is_configured:
            result.warnings.append(NO_CREDENTIAL_WARNING if self.use_ai else DISABLED_WARNING)
            _LOGGER.warning(result.warnings[-1])
            for task in tasks:
                result.conversions[task.placeholder_id] = manual_review_stub(task.name, task.usage)
            result.changes.append(
                ChangeRecord(type="manual-review", count=len(tasks), detail=f"{len(tasks)} usage(s) left for manual review")
            )
            return

        converted = 0
        failed = 0
        # Timed-out calls keep their worker; the pool caps in-flight calls at the batch width.
        executor = ThreadPoolExecutor(max_workers=self.batch_size, thread_name_prefix="mdxport-resolve")
        try:
            for start in range(0, len(tasks), self.batch_size):
                batch = tasks[start : start + self.batch_size]
                _LOGGER.info(
                    "Resolving batch %d (%d task(s))", start // self.batch_size + 1, len(batch)
                )
                outcomes = await asyncio.gather(
                    *(self._run_with_retry(task, executor) for task in batch), return_exceptions=True
                )
                for task, outcome in zip(batch, outcomes):
                    if isinstance(outcome, BaseException):
                        if not isinstance(outcome, Exception):
                            raise outcome
                        failed += 1
                        self._fail(task, outcome, result)
                    else:
                        converted += 1
                        self._accept(task, outcome, result)
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        if converted:
            result.changes.append(
                ChangeRecord(type="ai-convert", count=converted, detail=f"converted {converted} usage(s) with the generative service")
            )
        if failed:
            result.changes.append(
                ChangeRecord(type="manual-review", count=failed, detail=f"{failed} usage(s) left for manual review")
            )

    async def _run_with_retry(self, task: ResolutionTask, executor: Executor) -> GenerativeResponse:
        controller = AsyncRetrying(
            stop=stop_after_attempt(self.retries + 1),
            wait=wait_fixed(self.retry_delay),
            before_sleep=before_sleep_log(_LOGGER, logging.DEBUG),
            reraise=True,
        )
        return await controller(self._attempt, task, executor)

    async def _attempt(self, task: ResolutionTask, executor: Executor) -> GenerativeResponse:
        if self.client is None:
            raise RuntimeError("No generative client configured for resolution")
        loop = asyncio.get_running_loop()
        call = loop.run_in_executor(executor, self.client.convert, task)
        if self.timeout:
            return await asyncio.wait_for(call, self.timeout)
        return await call

    def _accept(self, task: ResolutionTask, response: GenerativeResponse, result: ResolutionResult) -> None:
        outcome = self.validator.validate(
            response.converted,
            ValidationContext(component=task.name, usage=task.usage, placeholder_id=task.placeholder_id),
        )
        result.conversions[task.placeholder_id] = outcome.content
        result.warnings.extend(outcome.warnings)
        if response.confidence == "low":
            message = f"Low confidence: <{task.name}> usage {task.usage_index + 1}"
            if response.reasoning:
                message = f"{message}: {response.reasoning}"
            result.warnings.append(message)

    def _fail(self, task: ResolutionTask, error: Exception, result: ResolutionResult) -> None:
        message = f"Generative conversion failed for <{task.name}> usage {task.usage_index + 1}: {str(error) or type(error).__name__}"
        _LOGGER.warning(message)
        result.warnings.append(message)
        result.conversions[task.placeholder_id] = manual_review_stub(task.name, task.usage)

    @staticmethod
    def _note(result: ResolutionResult, message: str) -> None:
        _LOGGER.warning(message)
        result.warnings.append(message)


def resolve_components(
    blocks: Sequence[ComponentBlock] | None,
    client: Optional[GenerativeClient] = None,
    **options,
) -> ResolutionResult:
    """Resolve ``blocks`` with a one-off ``ResolutionOrchestrator``."""
    return ResolutionOrchestrator(client, **options).resolve(blocks)


__all__ = [
    "DISABLED_WARNING",
    "NO_CREDENTIAL_WARNING",
    "ResolutionOrchestrator",
    "resolve_components",
]
