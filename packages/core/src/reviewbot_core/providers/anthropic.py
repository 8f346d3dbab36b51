from __future__ import annotations

from typing import Optional

from reviewbot_core.providers.base import BaseInferenceClient


class AnthropicClient(BaseInferenceClient):
    MODEL = "claude-sonnet-4-20250514"
    TEMPERATURE = 0.3
    MAX_TOKENS = 1024

    def __init__(self, api_key: str, model: Optional[str] = None, timeout: Optional[float] = None):
        try:
            from anthropic import Anthropic
        except ImportError:
            raise ImportError(
                "The 'anthropic' package is required for this provider. "
                "Install it with: pip install 'reviewbot[anthropic]'"
            )
        self.model = model or self.MODEL
        self.client = Anthropic(api_key=api_key, timeout=timeout)

    def _call_api(self, prompt: str) -> str:
        # Imported inside the method because the anthropic package is optional;
        # __init__ already validated it is installed before we reach here.
        from anthropic.types import TextBlock

        response = self.client.messages.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            temperature=self.TEMPERATURE,
            max_tokens=self.MAX_TOKENS,
        )
        text_blocks = [block.text for block in response.content if isinstance(block, TextBlock)]
        return "".join(text_blocks).strip()
