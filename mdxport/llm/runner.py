"""Client for OpenAI-compatible chat-completions endpoints."""

from __future__ import annotations

import json
import os
import socket
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

_AUTO_API_KEY = object()
_ERROR_DETAIL_LIMIT = 200


class GenerativeServiceError(RuntimeError):
    """Raised when the generative service cannot produce a usable response."""


@dataclass(frozen=True)
class LLMRequest:
    """One chat-completions call, fully resolved against settings and environment."""

    prompt: str
    system: Optional[str]
    model: str
    temperature: Optional[float]
    max_tokens: Optional[int]
    base_url: str
    api_key: Optional[str]
    request_timeout: Optional[float]
    json_response: bool = False

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/chat/completions"

    def messages(self) -> List[Dict[str, str]]:
        chat = [{"role": "system", "content": self.system}] if self.system else []
        chat.append({"role": "user", "content": self.prompt})
        return chat


class LLMRunner:
    """Sends prompts to the configured generative service.

    ``runner`` replaces the HTTP transport, which keeps tests and alternative
    backends off the network.
    """

    DEFAULT_MODEL = "grok-3-mini"
    DEFAULT_BASE_URL = "https://api.x.ai/v1"
    DEFAULT_TIMEOUT = 60.0
    ENV_MODEL_KEYS = ("MDXPORT_LLM_MODEL",)
    ENV_BASE_URL_KEYS = ("MDXPORT_LLM_BASE_URL",)
    ENV_API_KEY_KEYS = ("MDXPORT_LLM_API_KEY", "XAI_API_KEY", "OPENAI_API_KEY")

    def __init__(
        self,
        model: str | None = None,
        *,
        base_url: str | None = None,
        temperature: Optional[float] = 0.2,
        max_tokens: Optional[int] = 4096,
        api_key: str | None | object = _AUTO_API_KEY,
        request_timeout: Optional[float] = DEFAULT_TIMEOUT,
        runner: Callable[[LLMRequest], str] | None = None,
    ) -> None:
        self.model = model or _from_env(self.ENV_MODEL_KEYS) or self.DEFAULT_MODEL
        chosen_url = base_url or _from_env(self.ENV_BASE_URL_KEYS) or self.DEFAULT_BASE_URL
        self.base_url = chosen_url.rstrip("/")
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.api_key = _from_env(self.ENV_API_KEY_KEYS) if api_key is _AUTO_API_KEY else api_key
        self.request_timeout = request_timeout
        self._runner = runner or self._http_runner

    @property
    def is_configured(self) -> bool:
        """True when a credential is available for the remote service."""
        return bool(self.api_key)

    def run(self, prompt: str, *, system: str | None = None, json_response: bool = False) -> str:
        """Send the prompt and return the assistant message text."""
        return self._runner(
            LLMRequest(
                prompt=prompt,
                system=system,
                model=self.model,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                base_url=self.base_url,
                api_key=self.api_key,  # type: ignore[arg-type]
                request_timeout=self.request_timeout,
                json_response=json_response,
            )
        )

    @classmethod
    def _http_runner(cls, request: LLMRequest) -> str:
        timeout = request.request_timeout or cls.DEFAULT_TIMEOUT
        headers = {"Content-Type": "application/json"}
        if request.api_key:
            headers["Authorization"] = f"Bearer {request.api_key}"
        body = json.dumps(cls._payload(request)).encode("utf-8")

        raw = cls._post(Request(request.endpoint, data=body, headers=headers, method="POST"), timeout)
        try:
            decoded = json.loads(raw.decode("utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise GenerativeServiceError("Generative service returned invalid JSON") from exc

        text = _message_text(decoded)
        if not text:
            raise GenerativeServiceError("Generative service returned an empty response")
        return text.strip()

    @staticmethod
    def _payload(request: LLMRequest) -> Dict[str, object]:
        payload: Dict[str, object] = {"model": request.model, "messages": request.messages()}
        optional = {"temperature": request.temperature, "max_tokens": request.max_tokens}
        payload.update({key: value for key, value in optional.items() if value is not None})
        if request.json_response:
            payload["response_format"] = {"type": "json_object"}
        return payload

    @staticmethod
    def _post(http_request: Request, timeout: float) -> bytes:
        try:
            with urlopen(http_request, timeout=timeout) as response:  # type: ignore[arg-type]
                return response.read()
        except HTTPError as exc:
            body = exc.read().decode("utf-8", errors="ignore") if exc.fp is not None else ""
            detail = (body.strip() or str(exc.reason))[:_ERROR_DETAIL_LIMIT]
            raise GenerativeServiceError(f"Generative service returned status {exc.code}: {detail}") from exc
        except URLError as exc:
            raise GenerativeServiceError(f"Generative service request failed: {exc.reason}") from exc
        except (socket.timeout, TimeoutError) as exc:
            raise GenerativeServiceError(f"Generative service timed out after {timeout}s") from exc


def _message_text(payload: object) -> str:
    """Pull the first choice's text out of a chat or legacy completions payload."""
    choices = payload.get("choices") if isinstance(payload, dict) else None
    if not choices or not isinstance(choices, list) or not isinstance(choices[0], dict):
        return ""
    choice = choices[0]
    message = choice.get("message")
    for candidate in (message.get("content") if isinstance(message, dict) else None, choice.get("text")):
        if isinstance(candidate, str):
            return candidate
    return ""


def _from_env(keys: Sequence[str]) -> str | None:
    return next((os.environ[key] for key in keys if os.environ.get(key)), None)


__all__ = ["GenerativeServiceError", "LLMRequest", "LLMRunner"]
