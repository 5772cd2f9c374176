from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from mdxport.llm.runner import LLMRunner
from tests._fixtures.document_builder import DocumentBuilder


@pytest.fixture
def document_builder(tmp_path: Path) -> DocumentBuilder:
    """Provide a reusable document builder rooted at the pytest tmp_path."""
    return DocumentBuilder(tmp_path)


@pytest.fixture(autouse=True)
def _no_service_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's real API keys out of every test."""
    for key in (*LLMRunner.ENV_API_KEY_KEYS, *LLMRunner.ENV_MODEL_KEYS, *LLMRunner.ENV_BASE_URL_KEYS):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def _reset_mdxport_logger() -> Iterator[None]:
    """Undo ``configure_logging`` so handlers never outlive a captured stream."""
    logger = logging.getLogger("mdxport")
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
