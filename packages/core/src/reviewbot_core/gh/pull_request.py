"""GitHub access for the review workflow.

Every call is a plain request/response against the REST API through PyGithub.
Nothing is cached: each workflow step refetches what it needs, so a PR's
number is the only thing that has to survive between steps.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from github import Github, GithubException

from reviewbot_core.errors import UpstreamError

logger = logging.getLogger(__name__)

APPROVAL_BODY = "Approved from chat review."


@dataclass(frozen=True)
class PullRequest:
    number: int
    title: str
    diff_text: str = ""


def get_repo(repo_name: str, token: str):
    return Github(token).get_repo(repo_name)


def get_pull(repo, pr_number: int):
    return repo.get_pull(pr_number)


def get_pull_requests(repo, state: str = "open", base: str | None = None):
    if base:
        return repo.get_pulls(state=state, base=base)
    return repo.get_pulls(state=state)


def format_file_diff(file) -> str:
    """Render one changed file in unified diff form.

    The pulls API only hands out per-file patches, so the ``diff --git``
    header and the ``---``/``+++`` lines are rebuilt from the file metadata.
    """
    new_path = file.filename
    old_path = getattr(file, "previous_filename", None) or new_path
    old_ref = "/dev/null" if file.status == "added" else f"a/{old_path}"
    new_ref = "/dev/null" if file.status == "removed" else f"b/{new_path}"
    lines = [f"diff --git a/{old_path} b/{new_path}", f"--- {old_ref}", f"+++ {new_ref}"]
    if file.patch:
        lines.append(file.patch.rstrip("\n"))
    else:
        # GitHub omits the patch for binary files and for very large text diffs.
        lines.append(f"(patch omitted by GitHub: {file.changes or 0} line(s) changed)")
    return "\n".join(lines)


def get_diff(pr) -> str:
    return "\n".join(format_file_diff(f) for f in pr.get_files())


def _upstream(action: str, error: Exception) -> UpstreamError:
    status = getattr(error, "status", None)
    detail = error.data.get("message") if isinstance(getattr(error, "data", None), dict) else None
    message = f"GitHub {action} failed"
    if status is not None:
        message += f" ({status})"
    message += f": {detail or error}"
    logger.warning(message)
    return UpstreamError(message, status=status)


class CodeHostClient:
    """Thin, stateless wrapper over one GitHub repository.

    All PyGithub and transport failures surface as UpstreamError so the
    dispatcher can render them as terminal messages.
    """

    def __init__(self, repo):
        self._repo = repo

    @classmethod
    def from_token(cls, repo_name: str, token: str) -> CodeHostClient:
        try:
            return cls(get_repo(repo_name, token))
        except (GithubException, OSError) as e:
            raise _upstream(f"lookup of {repo_name}", e) from e

    def list_open_pull_requests(self, base_branch: str = "main") -> list[PullRequest]:
        try:
            pulls = list(get_pull_requests(self._repo, state="open", base=base_branch))
        except (GithubException, OSError) as e:
            raise _upstream("pull request listing", e) from e
        return [PullRequest(number=p.number, title=p.title or "") for p in pulls]

    def get_pull_request(self, pr_number: int) -> PullRequest:
        try:
            pr = get_pull(self._repo, pr_number)
            diff = get_diff(pr)
        except (GithubException, OSError) as e:
            raise _upstream(f"fetch of PR #{pr_number}", e) from e
        return PullRequest(number=pr.number, title=pr.title or "", diff_text=diff)

    def get_diff(self, pr_number: int) -> str:
        return self.get_pull_request(pr_number).diff_text

    def post_comment(self, pr_number: int, comment_body: str) -> None:
        # Not idempotent: two calls create two comments.
        try:
            get_pull(self._repo, pr_number).create_issue_comment(comment_body)
        except (GithubException, OSError) as e:
            raise _upstream(f"comment on PR #{pr_number}", e) from e
        logger.info("Posted comment on PR #%d", pr_number)

    def post_approval(self, pr_number: int, body: str = APPROVAL_BODY) -> None:
        try:
            get_pull(self._repo, pr_number).create_review(body=body, event="APPROVE")
        except (GithubException, OSError) as e:
            raise _upstream(f"approval of PR #{pr_number}", e) from e
        logger.info("Approved PR #%d", pr_number)
