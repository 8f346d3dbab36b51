"""Views for every workflow state, as plain text plus Slack Block Kit blocks.

The text is what gets scanned by text recovery and what non-block clients
show, so any view that precedes a suggestion submit names the PR with the
literal ``PR #<n>``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from reviewbot_core.chat.codec import encode_pr_value, encode_suggest_payload, pr_literal
from reviewbot_core.gh.pull_request import PullRequest
from reviewbot_core.review_parser import ReviewResult

logger = logging.getLogger(__name__)

LABEL_LIMIT = 75
ELLIPSIS = "..."
# Slack caps static selects at 100 options and checkbox groups at 10.
SELECT_OPTION_LIMIT = 100
CHECKLIST_OPTION_LIMIT = 10


class ActionId(str, Enum):
    SELECT_PR = "select_pr"
    APPROVE = "approve_pr"
    SUGGEST = "suggest_pr"
    SUBMIT_SUGGESTIONS = "submit_suggestions"


CHECKLIST_ACTION_ID = "suggestion_checks"


@dataclass
class View:
    text: str
    blocks: list[dict] = field(default_factory=list)


def truncate_label(label: str, limit: int = LABEL_LIMIT) -> str:
    """Cut ``label`` to exactly ``limit`` characters, ending in an ellipsis."""
    if len(label) <= limit:
        return label
    return label[: limit - len(ELLIPSIS)] + ELLIPSIS


def pr_label(pr: PullRequest, limit: int = LABEL_LIMIT) -> str:
    return truncate_label(f"#{pr.number}: {pr.title}", limit)


def _section(text: str) -> dict:
    return {"type": "section", "text": {"type": "mrkdwn", "text": text}}


def _plain(text: str) -> dict:
    return {"type": "plain_text", "text": text}


def _button(text: str, action_id: ActionId, value: str, style: str | None = None) -> dict:
    button = {"type": "button", "text": _plain(text), "action_id": action_id.value}
    if value:
        button["value"] = value
    if style:
        button["style"] = style
    return button


def notice_view(text: str) -> View:
    return View(text=text, blocks=[_section(text)])


def pr_list_view(prs: list[PullRequest], base_branch: str, label_limit: int = LABEL_LIMIT) -> View:
    if not prs:
        return notice_view(f"No open PRs targeting `{base_branch}`.")
    if len(prs) > SELECT_OPTION_LIMIT:
        logger.warning("Showing the first %d of %d open PRs", SELECT_OPTION_LIMIT, len(prs))
    options = [
        {"text": _plain(pr_label(pr, label_limit)), "value": encode_pr_value(pr.number)}
        for pr in prs[:SELECT_OPTION_LIMIT]
    ]
    text = f"{len(prs)} open PR(s) targeting `{base_branch}`. Pick one to review:"
    return View(
        text=text,
        blocks=[
            {
                "type": "section",
                "text": {"type": "mrkdwn", "text": text},
                "accessory": {
                    "type": "static_select",
                    "action_id": ActionId.SELECT_PR.value,
                    "placeholder": _plain("Select a PR"),
                    "options": options,
                },
            }
        ],
    )


def working_view(pr_number: int) -> View:
    return notice_view(f":hourglass_flowing_sand: Reviewing {pr_literal(pr_number)}, please wait...")


def review_view(pr: PullRequest, result: ReviewResult) -> View:
    bullet_list = "\n".join(f"• {s}" for s in result.suggestions)
    text = (
        f"*{pr_literal(pr.number)}: {pr.title}*\n\n"
        f"*Summary*\n{result.summary}\n\n"
        f"*Suggestions*\n{bullet_list}\n\n"
        f"*Quality:* {result.quality_label}"
    )
    buttons = [_button("Approve", ActionId.APPROVE, encode_pr_value(pr.number), style="primary")]
    if result.actionable_suggestions:
        buttons.append(
            _button("Suggest", ActionId.SUGGEST, encode_suggest_payload(pr.number, result.actionable_suggestions))
        )
    return View(text=text, blocks=[_section(text), {"type": "actions", "elements": buttons}])


def checklist_view(pr_number: int, suggestions: list[str], token: str, label_limit: int = LABEL_LIMIT) -> View:
    """Checkbox list of suggestions; labels are truncated, values are not."""
    if len(suggestions) > CHECKLIST_OPTION_LIMIT:
        logger.warning(
            "Checklist for PR #%d shows the first %d of %d suggestions",
            pr_number,
            CHECKLIST_OPTION_LIMIT,
            len(suggestions),
        )
    options = [
        {"text": _plain(truncate_label(s, label_limit)), "value": s} for s in suggestions[:CHECKLIST_OPTION_LIMIT]
    ]
    text = f"Select the suggestions to post as a comment on {pr_literal(pr_number)}:"
    return View(
        text=text,
        blocks=[
            _section(text),
            {
                "type": "actions",
                "block_id": f"suggestions:{token}",
                "elements": [
                    {"type": "checkboxes", "action_id": CHECKLIST_ACTION_ID, "options": options},
                    _button("Post selected", ActionId.SUBMIT_SUGGESTIONS, token, style="primary"),
                ],
            },
        ],
    )


def approved_view(pr_number: int) -> View:
    return notice_view(f":white_check_mark: {pr_literal(pr_number)} approved.")


def commented_view(pr_number: int, count: int) -> View:
    return notice_view(f":speech_balloon: Posted {count} suggestion(s) as a comment on {pr_literal(pr_number)}.")


def nothing_selected_view() -> View:
    return notice_view("No suggestions selected. Nothing was posted.")


def missing_question_view() -> View:
    return notice_view("Please provide a question after 'ask'.")


def context_lost_view() -> View:
    return notice_view("Selection context lost, please restart with the list command.")


def upstream_error_view(message: str) -> View:
    return notice_view(f":warning: GitHub request failed: {message}")


def unsupported_action_view(action_id: str) -> View:
    return notice_view(f"Unsupported action `{action_id}`.")
