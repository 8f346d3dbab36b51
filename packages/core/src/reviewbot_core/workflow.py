"""Interactive PR review workflow.

    list ─▶ select ─▶ (diff, summary ∥ review, parse) ─▶ decision
                                                        ├─ approve ─▶ approved
                                                        └─ suggest ─▶ checklist ─▶ submit ─▶ commented

Each step is driven by one chat event and ends by rendering the next view.
Nothing is remembered between steps except what the rendered UI carries (and
the checklist session, which is only an optimisation over text recovery).
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Optional

from reviewbot_core.chat import blocks
from reviewbot_core.chat.codec import decode_pr_value, decode_suggest_payload, recover_pr_number
from reviewbot_core.chat.gateway import ActionEvent, ChatGateway, CommandEvent, MessageRef, RenderRequest
from reviewbot_core.config import DEFAULT_CONFIG
from reviewbot_core.errors import StateRecoveryError, UpstreamError
from reviewbot_core.gh.pull_request import CodeHostClient, PullRequest
from reviewbot_core.prompts import build_question_prompt, build_review_prompt, build_summary_prompt
from reviewbot_core.providers.base import BaseInferenceClient, ask_or_apologize
from reviewbot_core.review_parser import ReviewResult, build_review_result

if TYPE_CHECKING:
    from reviewbot_store.base import BaseSessionStore

logger = logging.getLogger(__name__)


def get_inference_client(config: dict) -> BaseInferenceClient:
    model = config["model"]
    timeout = config.get("inference_timeout")
    if model in ("ollama", "ollama-chat"):
        from reviewbot_core.providers.ollama import OllamaChatClient, OllamaGenerateClient

        cls = OllamaChatClient if model == "ollama-chat" else OllamaGenerateClient
        return cls(base_url=config["ollama_url"], model=config.get("ollama_model"), timeout=timeout)
    if model == "openai":
        from reviewbot_core.providers.openai import OpenAIClient

        return OpenAIClient(api_key=config["openai_api_key"], model=config.get("openai_model"), timeout=timeout)
    if model == "anthropic":
        from reviewbot_core.providers.anthropic import AnthropicClient

        return AnthropicClient(
            api_key=config["anthropic_api_key"], model=config.get("anthropic_model"), timeout=timeout
        )
    raise ValueError(f"Unknown model provider: {model!r}. Choose 'ollama', 'ollama-chat', 'openai' or 'anthropic'.")


def format_comment_body(suggestions: list[str]) -> str:
    return "\n".join(f"- {s}" for s in suggestions)


class ReviewWorkflow:
    def __init__(
        self,
        code_host: CodeHostClient,
        inference: BaseInferenceClient,
        gateway: ChatGateway,
        store: Optional[BaseSessionStore] = None,
        config: Optional[dict] = None,
    ):
        """``store`` is optional: without one, checklists carry no session
        token and submits always recover the PR from the message text.

        The store is duck-typed so reviewbot_core has no import dependency on
        reviewbot_store; the CLI wires the two together.
        """
        self.code_host = code_host
        self.inference = inference
        self.gateway = gateway
        self.store = store
        self.config = {**DEFAULT_CONFIG, **(config or {})}

    # ------------------------------------------------------------------ #
    # Rendering                                                            #
    # ------------------------------------------------------------------ #

    def render(
        self,
        view: blocks.View,
        channel_id: str,
        user_id: str = "",
        replace_target: Optional[MessageRef] = None,
    ) -> MessageRef:
        return self.gateway.render(
            RenderRequest(
                text=view.text,
                blocks=view.blocks,
                channel_id=channel_id,
                ephemeral=True,
                replace_target=replace_target,
                user_id=user_id,
            )
        )

    def render_reply(self, view: blocks.View, event: ActionEvent) -> MessageRef:
        """Replace the message whose control triggered ``event``."""
        target = event.trigger_message.ref if event.trigger_message else None
        return self.render(view, event.channel_id, event.user_id, replace_target=target)

    # ------------------------------------------------------------------ #
    # Transitions                                                          #
    # ------------------------------------------------------------------ #

    def list_pull_requests(self, event: CommandEvent, base_branch: Optional[str] = None) -> MessageRef:
        base = base_branch or self.config["base_branch"]
        prs = self.code_host.list_open_pull_requests(base)
        logger.info("Listing %d open PR(s) on %s for %s", len(prs), base, event.user_id)
        view = blocks.pr_list_view(prs, base, self.config["label_limit"])
        return self.render(view, event.channel_id, event.user_id)

    def select(self, event: ActionEvent) -> MessageRef:
        pr_number = decode_pr_value(event.value)
        # The selection came from the list message, so the placeholder is a
        # new message; everything after it replaces the placeholder.
        placeholder = self.render(blocks.working_view(pr_number), event.channel_id, event.user_id)
        try:
            pr = self.code_host.get_pull_request(pr_number)
        except UpstreamError as e:
            logger.error("Could not fetch PR #%d: %s", pr_number, e)
            return self.render(
                blocks.upstream_error_view(str(e)), event.channel_id, event.user_id, replace_target=placeholder
            )
        result = self.analyze(pr)
        logger.info(
            "Reviewed PR #%d: %d suggestion(s), quality %s",
            pr_number,
            len(result.actionable_suggestions),
            result.quality_label,
        )
        return self.render(blocks.review_view(pr, result), event.channel_id, event.user_id, replace_target=placeholder)

    def analyze(self, pr: PullRequest) -> ReviewResult:
        """Run the summary and review prompts and combine their answers.

        The two prompts do not depend on each other; by default they run
        concurrently and are joined before parsing.
        """
        max_chars = self.config["max_diff_chars"]
        summary_prompt = build_summary_prompt(pr, max_chars)
        review_prompt = build_review_prompt(pr, max_chars)
        if self.config["concurrent_inference"]:
            with ThreadPoolExecutor(max_workers=2, thread_name_prefix="reviewbot-inference") as pool:
                summary_future = pool.submit(ask_or_apologize, self.inference, summary_prompt)
                review_future = pool.submit(ask_or_apologize, self.inference, review_prompt)
                summary, review = summary_future.result(), review_future.result()
        else:
            summary = ask_or_apologize(self.inference, summary_prompt)
            review = ask_or_apologize(self.inference, review_prompt)
        return build_review_result(summary, review)

    def answer_question(self, event: CommandEvent, question: str) -> MessageRef:
        """Free-form question outside the review flow; one prompt, no controls."""
        question = question.strip()
        if not question:
            return self.render(blocks.missing_question_view(), event.channel_id, event.user_id)
        logger.info("Answering question from %s", event.user_id)
        answer = ask_or_apologize(self.inference, build_question_prompt(question))
        return self.render(blocks.notice_view(answer), event.channel_id, event.user_id)

    def approve(self, event: ActionEvent) -> MessageRef:
        pr_number = decode_pr_value(event.value)
        # Not deduplicated: a second click posts a second approval request.
        self.code_host.post_approval(pr_number)
        return self.render_reply(blocks.approved_view(pr_number), event)

    def suggest(self, event: ActionEvent) -> MessageRef:
        pr_number, suggestions = decode_suggest_payload(event.value)
        if not suggestions:
            raise StateRecoveryError(f"Suggest payload for PR #{pr_number} carries no suggestions.")
        token = ""
        if self.store is not None:
            token = self.store.open(pr_number, suggestions, user_id=event.user_id).token
        view = blocks.checklist_view(pr_number, suggestions, token, self.config["label_limit"])
        return self.render_reply(view, event)

    def submit(self, event: ActionEvent) -> MessageRef:
        token = event.value or ""
        session = self.store.get(token) if self.store is not None and token else None
        if session is not None:
            pr_number = session.pr_number
            if session.user_id and session.user_id != event.user_id:
                logger.warning(
                    "Checklist for PR #%d opened by %s was submitted by %s",
                    pr_number,
                    session.user_id,
                    event.user_id,
                )
            selected = [s for s in event.selected if s in session.suggestions]
            dropped = len(event.selected) - len(selected)
            if dropped:
                logger.warning("Dropped %d selection(s) not offered for PR #%d", dropped, pr_number)
        else:
            logger.info("No live session for checklist; recovering PR from message text")
            trigger_text = event.trigger_message.text if event.trigger_message else ""
            pr_number = recover_pr_number(trigger_text)
            selected = list(event.selected)

        selected = [s for s in selected if s.strip()]
        if not selected:
            return self.render_reply(blocks.nothing_selected_view(), event)

        self.code_host.post_comment(pr_number, format_comment_body(selected))
        if session is not None:
            self.store.discard(token)
        return self.render_reply(blocks.commented_view(pr_number, len(selected)), event)
