"""Ollama providers: the one-shot generate endpoint and the chat endpoint."""

from __future__ import annotations

import json
from typing import Any, Optional

import httpx

from reviewbot_core.errors import InferenceError
from reviewbot_core.providers.base import BaseInferenceClient

DEFAULT_URL = "http://localhost:11434"


class _OllamaClient(BaseInferenceClient):
    MODEL = "llama2"

    def __init__(
        self,
        base_url: str = DEFAULT_URL,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.model = model or self.MODEL
        self.client = httpx.Client(
            base_url=base_url.rstrip("/"),
            headers={"Content-Type": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.client.close()

    def close(self):
        self.client.close()

    def _post(self, endpoint: str, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            response = self.client.post(endpoint, json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise InferenceError(f"Ollama {endpoint} answered {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise InferenceError(f"Ollama {endpoint} unreachable: {e}") from e
        except ValueError as e:
            raise InferenceError(f"Ollama {endpoint} returned invalid JSON") from e
        if not isinstance(data, dict):
            raise InferenceError(f"Ollama {endpoint} returned an unexpected payload")
        return data

    def list_models(self) -> list[dict[str, Any]]:
        """Return the models installed on the Ollama server."""
        try:
            response = self.client.get("/api/tags")
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise InferenceError(f"Could not list Ollama models: {e}") from e
        if not isinstance(data, dict):
            return []
        return data.get("models") or []


class OllamaGenerateClient(_OllamaClient):
    """``POST /api/generate {model, prompt, stream: false} -> {response}``."""

    def _call_api(self, prompt: str) -> str:
        data = self._post("/api/generate", {"model": self.model, "prompt": prompt, "stream": False})
        answer = data.get("response")
        if not isinstance(answer, str):
            raise InferenceError("Ollama generate payload has no 'response' text")
        return answer


class OllamaChatClient(_OllamaClient):
    """``POST /api/chat {model, messages, stream: false} -> {message: {...}}``.

    A message may carry tool calls instead of text; those are returned as
    JSON so the caller still gets a readable answer.
    """

    def _call_api(self, prompt: str) -> str:
        data = self._post(
            "/api/chat",
            {"model": self.model, "messages": [{"role": "user", "content": prompt}], "stream": False},
        )
        message = data.get("message")
        if not isinstance(message, dict):
            raise InferenceError("Ollama chat payload has no 'message' object")
        content = message.get("content")
        if isinstance(content, str) and content.strip():
            return content
        tool_calls = message.get("tool_calls")
        if tool_calls:
            return json.dumps([call.get("function", call) for call in tool_calls], indent=2)
        raise InferenceError("Ollama chat message has neither content nor tool calls")
