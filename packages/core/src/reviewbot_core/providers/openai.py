from __future__ import annotations

from typing import Optional

try:
    from openai import OpenAI as _OpenAI
except ImportError:
    _OpenAI = None  # type: ignore[assignment,misc]

from reviewbot_core.providers.base import BaseInferenceClient


class OpenAIClient(BaseInferenceClient):
    MODEL = "gpt-4o"
    TEMPERATURE = 0.2
    MAX_TOKENS = 1024

    def __init__(self, api_key: str, model: Optional[str] = None, timeout: Optional[float] = None):
        if _OpenAI is None:
            raise ImportError(
                "The 'openai' package is required for this provider. " "Install it with: pip install 'reviewbot[openai]'"
            )
        self.model = model or self.MODEL
        self.client = _OpenAI(api_key=api_key, timeout=timeout)

    def _call_api(self, prompt: str) -> str:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            temperature=self.TEMPERATURE,
            max_tokens=self.MAX_TOKENS,
        )
        return response.choices[0].message.content
