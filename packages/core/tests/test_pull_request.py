"""Tests for the GitHub pull request helpers and CodeHostClient."""

from unittest.mock import MagicMock

import pytest
from github import GithubException

from reviewbot_core.errors import UpstreamError
from reviewbot_core.gh.pull_request import (
    APPROVAL_BODY,
    CodeHostClient,
    PullRequest,
    format_file_diff,
    get_diff,
    get_pull_requests,
)


def _file(filename, status="modified", patch="@@ -1 +1 @@\n-a\n+b", previous_filename=None, changes=2):
    f = MagicMock()
    f.changes = changes
    f.filename = filename
    f.status = status
    f.patch = patch
    f.previous_filename = previous_filename
    return f


def _pull(number, title):
    p = MagicMock()
    p.number = number
    p.title = title
    return p


class TestFormatFileDiff:
    def test_modified_file(self):
        diff = format_file_diff(_file("src/app.py"))
        assert diff.splitlines()[:3] == [
            "diff --git a/src/app.py b/src/app.py",
            "--- a/src/app.py",
            "+++ b/src/app.py",
        ]
        assert diff.endswith("+b")

    def test_added_file_uses_dev_null(self):
        diff = format_file_diff(_file("new.py", status="added", patch="@@ -0,0 +1 @@\n+x"))
        assert "--- /dev/null" in diff
        assert "+++ b/new.py" in diff

    def test_removed_file_uses_dev_null(self):
        diff = format_file_diff(_file("old.py", status="removed", patch="@@ -1 +0,0 @@\n-x"))
        assert "--- a/old.py" in diff
        assert "+++ /dev/null" in diff

    def test_renamed_file_keeps_both_paths(self):
        diff = format_file_diff(_file("b.py", status="renamed", previous_filename="a.py"))
        assert diff.startswith("diff --git a/a.py b/b.py")

    def test_missing_patch_is_described_neutrally(self):
        diff = format_file_diff(_file("schema.sql", patch=None, changes=48000))
        assert diff.endswith("(patch omitted by GitHub: 48000 line(s) changed)")
        assert "Binary" not in diff

    def test_missing_patch_without_change_count(self):
        diff = format_file_diff(_file("logo.png", patch=None, changes=None))
        assert diff.endswith("(patch omitted by GitHub: 0 line(s) changed)")


def test_get_diff_joins_files():
    pr = MagicMock()
    pr.get_files.return_value = [_file("a.py"), _file("b.py")]
    diff = get_diff(pr)
    assert diff.count("diff --git") == 2
    assert diff.index("a/a.py") < diff.index("a/b.py")


class TestGetPullRequests:
    def test_filters_by_base(self):
        repo = MagicMock()
        get_pull_requests(repo, base="develop")
        repo.get_pulls.assert_called_once_with(state="open", base="develop")

    def test_no_base(self):
        repo = MagicMock()
        get_pull_requests(repo)
        repo.get_pulls.assert_called_once_with(state="open")


class TestCodeHostClient:
    def test_lists_open_pull_requests(self):
        repo = MagicMock()
        repo.get_pulls.return_value = [_pull(3, "Fix login"), _pull(5, None)]
        prs = CodeHostClient(repo).list_open_pull_requests("main")

        repo.get_pulls.assert_called_once_with(state="open", base="main")
        assert prs == [PullRequest(3, "Fix login"), PullRequest(5, "")]

    def test_get_pull_request_includes_diff(self):
        repo = MagicMock()
        pr = _pull(42, "Add cache")
        pr.get_files.return_value = [_file("cache.py")]
        repo.get_pull.return_value = pr

        result = CodeHostClient(repo).get_pull_request(42)

        repo.get_pull.assert_called_once_with(42)
        assert result.number == 42
        assert result.title == "Add cache"
        assert "diff --git a/cache.py b/cache.py" in result.diff_text

    def test_post_comment(self):
        repo = MagicMock()
        CodeHostClient(repo).post_comment(42, "- Add tests")
        repo.get_pull.return_value.create_issue_comment.assert_called_once_with("- Add tests")

    def test_post_approval(self):
        repo = MagicMock()
        CodeHostClient(repo).post_approval(42)
        repo.get_pull.return_value.create_review.assert_called_once_with(body=APPROVAL_BODY, event="APPROVE")

    def test_github_error_becomes_upstream_error(self):
        repo = MagicMock()
        repo.get_pull.side_effect = GithubException(404, {"message": "Not Found"}, None)

        with pytest.raises(UpstreamError) as exc_info:
            CodeHostClient(repo).get_pull_request(999)

        assert exc_info.value.status == 404
        assert "Not Found" in str(exc_info.value)
        assert "PR #999" in str(exc_info.value)

    def test_approval_conflict_keeps_status(self):
        repo = MagicMock()
        repo.get_pull.return_value.create_review.side_effect = GithubException(
            422, {"message": "Can not approve your own pull request"}, None
        )
        with pytest.raises(UpstreamError) as exc_info:
            CodeHostClient(repo).post_approval(7)
        assert exc_info.value.status == 422

    def test_network_error_becomes_upstream_error(self):
        repo = MagicMock()
        repo.get_pulls.side_effect = ConnectionError("connection reset")
        with pytest.raises(UpstreamError) as exc_info:
            CodeHostClient(repo).list_open_pull_requests()
        assert exc_info.value.status is None
        assert "connection reset" in str(exc_info.value)
