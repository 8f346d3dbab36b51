"""Base inference client implementing the Template Method pattern.

All providers share the same contract:
    ask() → _call_api()   ← only this differs per provider
          → empty/malformed answers and transport failures → InferenceError

Subclasses implement two things only:
  - __init__: validate and store the SDK or HTTP client
  - _call_api: make one raw API call and return the text response

There is no retry and no timeout policy at this layer: one
prompt is one request, and callers decide how long they are willing to wait.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from reviewbot_core.errors import InferenceError

logger = logging.getLogger(__name__)

APOLOGY = "Sorry, I couldn't connect to the AI."

_PING_PROMPT = "Say hello"


class BaseInferenceClient(ABC):
    MODEL: str = ""

    # ------------------------------------------------------------------ #
    # Public interface                                                     #
    # ------------------------------------------------------------------ #

    def ask(self, prompt: str) -> str:
        """Send a single-turn prompt and return the model's text answer.

        Raises InferenceError on any failure, including an empty answer.
        """
        try:
            answer = self._call_api(prompt)
        except InferenceError:
            raise
        except Exception as e:
            raise InferenceError(f"{self.__class__.__name__} request failed: {e}") from e
        if not isinstance(answer, str) or not answer.strip():
            raise InferenceError(f"{self.__class__.__name__} returned an empty answer")
        return answer.strip()

    def ping(self) -> bool:
        """Return True when the endpoint answers a trivial prompt. Never raises."""
        try:
            self.ask(_PING_PROMPT)
        except InferenceError as e:
            logger.error("%s connection test failed: %s", self.__class__.__name__, e)
            return False
        return True

    # ------------------------------------------------------------------ #
    # Abstract: implement in each provider                                #
    # ------------------------------------------------------------------ #

    @abstractmethod
    def _call_api(self, prompt: str) -> str:
        """Make a single API call and return the raw text response.

        It should raise on failure; ask() translates the failure.
        """


def ask_or_apologize(client: BaseInferenceClient, prompt: str) -> str:
    """Ask the model, substituting the apology text when inference fails."""
    try:
        return client.ask(prompt)
    except InferenceError as e:
        logger.error("Inference failed, answering with apology: %s", e)
        return APOLOGY
