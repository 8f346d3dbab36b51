"""Continuation state carried by the chat UI itself.

There is no per-conversation server state for most steps, so a later step
gets its context in one of two ways:

1. Explicit encoding: the control that triggers the next step carries the
   state in its value (a bare PR number, or a small JSON payload). Lossless.
2. Text recovery: the PR number is scraped from the literal ``PR #<n>`` in
   the message being replaced. Only used when the checklist's session token
   has expired; every render preceding a submit must contain the literal.

Anything missing or malformed raises StateRecoveryError.
"""

from __future__ import annotations

import json
import logging
import re

from reviewbot_core.errors import StateRecoveryError

logger = logging.getLogger(__name__)

# Slack rejects button values longer than this.
VALUE_LIMIT = 2000
TRUNCATION_MARK = "..."

PR_LITERAL = "PR #{number}"
_PR_LITERAL_RE = re.compile(r"PR #(\d+)\b")


def pr_literal(pr_number: int) -> str:
    return PR_LITERAL.format(number=pr_number)


def encode_pr_value(pr_number: int) -> str:
    return str(pr_number)


def decode_pr_value(value: str | None) -> int:
    try:
        pr_number = int((value or "").strip())
    except ValueError:
        raise StateRecoveryError(f"Control value {value!r} is not a PR number.") from None
    if pr_number <= 0:
        raise StateRecoveryError(f"Control value {value!r} is not a PR number.")
    return pr_number


def _dump_suggest_payload(pr_number: int, suggestions: list[str]) -> str:
    return json.dumps({"pr": pr_number, "s": "\n".join(suggestions)}, separators=(",", ":"))


def _fit_single_suggestion(pr_number: int, suggestion: str, limit: int) -> str:
    """Cut one suggestion short, with an ellipsis, until its payload fits ``limit``."""
    cut = len(suggestion)
    while cut > 0:
        value = _dump_suggest_payload(pr_number, [suggestion[:cut].rstrip() + TRUNCATION_MARK])
        if len(value) <= limit:
            return value
        # Escaped characters take more than one char, so step by the overshoot.
        cut -= max(1, len(value) - limit)
    return _dump_suggest_payload(pr_number, [])


def encode_suggest_payload(pr_number: int, suggestions: list[str], limit: int = VALUE_LIMIT) -> str:
    """Serialize the PR number and its suggestions into one control value.

    Trailing suggestions are dropped until the payload fits ``limit``. A first
    suggestion that is too long on its own is truncated rather than dropped,
    so a non-empty list never encodes to an empty payload.
    """
    kept = list(suggestions)
    value = _dump_suggest_payload(pr_number, kept)
    while len(value) > limit and len(kept) > 1:
        kept.pop()
        value = _dump_suggest_payload(pr_number, kept)
    if len(value) > limit and kept:
        value = _fit_single_suggestion(pr_number, kept[0], limit)
        logger.warning("Suggest payload for PR #%d truncated its only suggestion to fit %d chars", pr_number, limit)
    if len(kept) < len(suggestions):
        logger.warning(
            "Suggest payload for PR #%d trimmed from %d to %d suggestion(s) to fit %d chars",
            pr_number,
            len(suggestions),
            len(kept),
            limit,
        )
    return value


def decode_suggest_payload(value: str | None) -> tuple[int, list[str]]:
    try:
        payload = json.loads(value or "")
    except json.JSONDecodeError:
        raise StateRecoveryError("Suggest payload is not valid JSON.") from None
    if not isinstance(payload, dict) or not isinstance(payload.get("s"), str):
        raise StateRecoveryError("Suggest payload is missing its suggestions.")
    pr_number = payload.get("pr")
    if isinstance(pr_number, bool) or not isinstance(pr_number, int) or pr_number <= 0:
        raise StateRecoveryError("Suggest payload is missing its PR number.")
    suggestions = [line for line in payload["s"].split("\n") if line.strip()]
    return pr_number, suggestions


def recover_pr_number(text: str | None) -> int:
    """Scrape the PR number out of a previously rendered message."""
    match = _PR_LITERAL_RE.search(text or "")
    if not match:
        raise StateRecoveryError("Rendered message does not name a PR.")
    return int(match.group(1))
