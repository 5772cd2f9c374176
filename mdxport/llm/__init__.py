"""Generative service runner adapters."""

from .runner import GenerativeServiceError, LLMRequest, LLMRunner

__all__ = ["GenerativeServiceError", "LLMRequest", "LLMRunner"]
