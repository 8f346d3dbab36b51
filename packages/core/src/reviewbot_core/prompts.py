"""Prompts for the two independent analyses run on a selected PR, and for free-form questions.

The review prompt pins down the ``Suggestions:`` / ``Quality:`` layout that
review_parser extracts; the quality score itself is whatever the model says.
"""

from __future__ import annotations

from reviewbot_core.gh.pull_request import PullRequest


def _clip(diff_text: str, max_chars: int) -> str:
    if len(diff_text) > max_chars:
        return diff_text[:max_chars] + "\n... [diff truncated]"
    return diff_text


def build_summary_prompt(pr: PullRequest, max_chars: int = 20000) -> str:
    return f"""Summarize the following pull request for a teammate in 2-3 sentences.
Describe what the change does, not how well it is written.

## PR #{pr.number}: {pr.title}

## Diff
{_clip(pr.diff_text, max_chars)}"""


def build_review_prompt(pr: PullRequest, max_chars: int = 20000) -> str:
    return f"""You are a strict and precise senior code reviewer.
Review the pull request below and reply in exactly this format:

Suggestions:
- <one concise, actionable suggestion per line>
Quality: <integer from 0 to 100>%

If there is nothing to improve, leave the Suggestions list empty.
Do not add any other text.

## PR #{pr.number}: {pr.title}

## Diff
{_clip(pr.diff_text, max_chars)}"""


def build_question_prompt(question: str) -> str:
    return f"Answer this question briefly and concisely (max 2-3 sentences): {question}"
