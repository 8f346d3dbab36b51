"""Best-effort extraction of suggestions and a quality score from a review.

The model is asked for a fixed layout but nothing guarantees it follows it,
so every missing piece degrades to a documented fallback instead of raising:

    Suggestions:            ← absent, or no dash lines  → ["No suggestions."]
    - Fix X
    - Fix Y
    Quality: 82%            ← absent, or not 0..100     → "N/A"
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Union

NO_SUGGESTIONS = "No suggestions."
QUALITY_UNKNOWN = "N/A"

SUGGESTIONS_MARKER = "Suggestions:"
QUALITY_MARKER = "Quality:"

_DASH_LINE_RE = re.compile(r"^\s*-\s*(.*?)\s*$")
_QUALITY_RE = re.compile(re.escape(QUALITY_MARKER) + r"[^%\n]*?(?<![\d.])(\d+)(?:\.\d+)?\s*%")

Quality = Union[int, str]


@dataclass
class ReviewResult:
    summary: str
    suggestions: list[str] = field(default_factory=lambda: [NO_SUGGESTIONS])
    quality: Quality = QUALITY_UNKNOWN

    @property
    def actionable_suggestions(self) -> list[str]:
        """Suggestions that can be offered in a checklist (the sentinel is not)."""
        return [s for s in self.suggestions if s != NO_SUGGESTIONS]

    @property
    def quality_label(self) -> str:
        if isinstance(self.quality, int):
            return f"{self.quality}%"
        return str(self.quality)


def parse_suggestions(text: str | None) -> list[str]:
    text = text or ""
    start = text.find(SUGGESTIONS_MARKER)
    if start == -1:
        return [NO_SUGGESTIONS]
    block = text[start + len(SUGGESTIONS_MARKER) :]
    end = block.find(QUALITY_MARKER)
    if end != -1:
        block = block[:end]

    suggestions = []
    for line in block.splitlines():
        match = _DASH_LINE_RE.match(line)
        if not match:
            continue
        item = match.group(1)
        # Skip bare dashes and markdown rules such as "---".
        if not item.strip("-").strip():
            continue
        suggestions.append(item)
    return suggestions or [NO_SUGGESTIONS]


def parse_quality(text: str | None) -> Quality:
    match = _QUALITY_RE.search(text or "")
    if not match:
        return QUALITY_UNKNOWN
    value = int(match.group(1))
    if not 0 <= value <= 100:
        return QUALITY_UNKNOWN
    return value


def parse_review(text: str | None) -> tuple[list[str], Quality]:
    """Return ``(suggestions, quality)`` extracted from a free-form review."""
    return parse_suggestions(text), parse_quality(text)


def build_review_result(summary: str, review_text: str | None) -> ReviewResult:
    """Combine the summary answer (passed through verbatim) with a parsed review."""
    suggestions, quality = parse_review(review_text)
    return ReviewResult(summary=summary, suggestions=suggestions, quality=quality)
