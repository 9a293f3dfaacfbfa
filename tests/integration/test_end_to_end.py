"""
End-to-End Integration Tests

Tests the complete flow from a pull request diff to the check run
conclusion and PR comment, with the GitHub API mocked.
"""

import pytest
from unittest.mock import Mock

from todo_pr_checker.api import TodoCheckerAPI, analyze, build_report
from todo_pr_checker.config import AppConfig, GitHubConfig
from todo_pr_checker.formatting.report import COMMENT_FOOTER, NO_ITEMS_TITLE, RESOLVED_TITLE
from todo_pr_checker.github.client import GitHubAPIError, GitHubClient
from todo_pr_checker.models.diff import LineRange, Match
from todo_pr_checker.models.events import CheckRunRequest
from todo_pr_checker.options import DEFAULT_OPTIONS, ScanOptions


PR_DIFF = """diff --git a/src/app.js b/src/app.js
index 1111111..2222222 100644
--- a/src/app.js
+++ b/src/app.js
@@ -1,2 +1,6 @@
 const a = 1;
+// TODO: validate input
+/*
+ * FIXME: race condition
+ */
 const b = 2;
diff --git a/docs/notes.md b/docs/notes.md
new file mode 100644
index 0000000..3333333
--- /dev/null
+++ b/docs/notes.md
@@ -0,0 +1,2 @@
+<!-- bug: broken link -->
+Plain text mentioning todo
diff --git a/assets/logo.png b/assets/logo.png
new file mode 100644
index 0000000..4444444
Binary files /dev/null and b/assets/logo.png differ
"""

CLEAN_DIFF = """diff --git a/src/app.py b/src/app.py
--- a/src/app.py
+++ b/src/app.py
@@ -1 +1,2 @@
 import os
+# regular comment
"""

LINK_BASE = "https://github.com/owner/repo/blob/abc123"


class TestAnalysisPipeline:
    """Test the pure analysis pipeline."""

    def test_multi_file_diff(self):
        """Test matches and ranges across files."""
        result = analyze(PR_DIFF)

        assert result.matches_by_file == {
            "src/app.js": [
                Match("src/app.js", 2, "// TODO: validate input"),
                Match("src/app.js", 4, " * FIXME: race condition"),
            ],
            "docs/notes.md": [Match("docs/notes.md", 1, "<!-- bug: broken link -->")],
        }
        assert result.ranges_by_file == {
            "src/app.js": [LineRange("src/app.js", 2, 4)],
            "docs/notes.md": [LineRange("docs/notes.md", 1, 1)],
        }
        assert result.total_matches == 3

    def test_analysis_is_idempotent(self):
        """Test the same input always produces the same result."""
        assert analyze(PR_DIFF) == analyze(PR_DIFF)

    def test_options_change_result(self):
        """Test options flow through every stage."""
        options = ScanOptions(
            action_items=("fixme", "bug"),
            ignore_files=("docs/**",),
            always_split_snippets=True,
        )

        result = analyze(PR_DIFF, options)

        assert list(result.matches_by_file) == ["src/app.js"]
        assert result.ranges_by_file["src/app.js"] == [LineRange("src/app.js", 4, 4)]

    def test_build_report(self):
        """Test the rendered report links every range."""
        result = analyze(PR_DIFF)

        report = build_report(result, DEFAULT_OPTIONS, "owner/repo", "abc123")

        assert report.total_matches == 3
        assert report.links_by_file == {
            "src/app.js": [f"{LINK_BASE}/src/app.js#L2-L4"],
            "docs/notes.md": [f"{LINK_BASE}/docs/notes.md#L1"],
        }
        assert "(2 action items)" in report.body
        assert "(1 action item)" in report.body

    def test_line_separator_inside_comment(self):
        """Test a Unicode line separator inside a comment does not shift later lines."""
        diff_text = (
            "+++ b/src/app.js\n"
            "@@ -0,0 +1,2 @@\n"
            "+// note\u2028continued\n"
            "+// TODO: real item\n"
        )

        result = analyze(diff_text)

        assert [m.line for m in result.matches_by_file["src/app.js"]] == [2]

    def test_clean_diff(self):
        """Test a diff without action items."""
        result = analyze(CLEAN_DIFF)

        assert result.matches_by_file == {}
        assert result.has_unresolved_items is False


class TestCheckRunFlow:
    """Test complete check runs against a mocked GitHub client."""

    def setup_method(self):
        """Set up test fixtures."""
        self.config = AppConfig(github=GitHubConfig(token="ghs_test", app_identifier=42, webhook_secret="s"))
        self.client = Mock(spec=GitHubClient)
        self.client.get_file_content.return_value = None
        self.client.get_pull_request_diff.return_value = PR_DIFF
        self.client.find_app_comment.return_value = None
        self.api = TodoCheckerAPI(self.config, client=self.client)
        self.request = CheckRunRequest(
            full_repo_name="owner/repo", pull_number=5, head_sha="abc123", check_run_id=99
        )

    def _final_check_run_update(self):
        return self.client.update_check_run.call_args_list[-1].kwargs

    def test_items_found(self):
        """Test found items fail the check and post a comment."""
        result = self.api.run_check(self.request)

        assert result.conclusion == "failure"
        assert result.total_matches == 3
        assert result.comment_action == "created"
        assert result.error is None

        first_update = self.client.update_check_run.call_args_list[0]
        assert first_update.args == ("owner/repo", 99)
        assert first_update.kwargs == {"status": "in_progress"}

        self.client.get_pull_request_diff.assert_called_once_with("owner/repo", 5)
        self.client.find_app_comment.assert_called_once_with("owner/repo", 5, 42)

        repo, number, body = self.client.create_issue_comment.call_args.args
        assert (repo, number) == ("owner/repo", 5)
        assert body.startswith("There are **3** unresolved action items in this Pull Request:")
        assert body.endswith(COMMENT_FOOTER)

        final = self._final_check_run_update()
        assert final["status"] == "completed"
        assert final["conclusion"] == "failure"
        assert final["output"]["title"] == "✘ 3 unresolved action items found!"

    def test_items_found_updates_existing_comment(self):
        """Test the app's earlier comment is edited instead of duplicated."""
        self.client.find_app_comment.return_value = {"id": 77, "body": "old"}

        result = self.api.run_check(self.request)

        assert result.comment_action == "updated"
        self.client.create_issue_comment.assert_not_called()
        repo, comment_id, body = self.client.update_issue_comment.call_args.args
        assert (repo, comment_id) == ("owner/repo", 77)
        assert "src/app.js#L2-L4" in body

    def test_post_comment_never(self):
        """Test no comment is posted when disabled."""
        self.client.get_file_content.return_value = "todo-pr-checker:\n  post_comment: never\n"

        result = self.api.run_check(self.request)

        assert result.conclusion == "failure"
        assert result.comment_action is None
        self.client.create_issue_comment.assert_not_called()
        self.client.update_issue_comment.assert_not_called()

    def test_options_from_second_path(self):
        """Test `.github/config.yaml` is used when `.github/config.yml` is missing."""
        self.client.get_file_content.side_effect = [
            None,
            "todo-pr-checker:\n  action_items: [hack]\n",
        ]

        result = self.api.run_check(self.request)

        assert result.conclusion == "success"
        assert result.total_matches == 0
        paths = [c.args[1] for c in self.client.get_file_content.call_args_list]
        assert paths == [".github/config.yml", ".github/config.yaml"]

    def test_no_items_resolves_existing_comment(self):
        """Test an earlier comment is marked resolved."""
        self.client.get_pull_request_diff.return_value = CLEAN_DIFF
        self.client.find_app_comment.return_value = {"id": 77}

        result = self.api.run_check(self.request)

        assert result.conclusion == "success"
        assert result.comment_action == "updated"
        self.client.update_issue_comment.assert_called_once_with(
            "owner/repo", 77, RESOLVED_TITLE + COMMENT_FOOTER
        )
        assert self._final_check_run_update()["output"]["title"] == RESOLVED_TITLE

    def test_no_items_without_comment(self):
        """Test a clean pull request gets no comment by default."""
        self.client.get_pull_request_diff.return_value = CLEAN_DIFF

        result = self.api.run_check(self.request)

        assert result.conclusion == "success"
        assert result.comment_action is None
        self.client.create_issue_comment.assert_not_called()
        final = self._final_check_run_update()
        assert final["conclusion"] == "success"
        assert final["output"]["title"] == NO_ITEMS_TITLE

    def test_no_items_post_comment_always(self):
        """Test a comment is posted for clean pull requests when always wanted."""
        self.client.get_pull_request_diff.return_value = CLEAN_DIFF
        self.client.get_file_content.return_value = "todo-pr-checker:\n  post_comment: always\n"

        result = self.api.run_check(self.request)

        assert result.comment_action == "created"
        self.client.create_issue_comment.assert_called_once_with(
            "owner/repo", 5, NO_ITEMS_TITLE + COMMENT_FOOTER
        )

    @pytest.mark.parametrize("failing_method", [
        "get_pull_request_diff",
        "get_file_content",
        "find_app_comment",
        "create_issue_comment",
    ])
    def test_errors_conclude_neutral(self, failing_method):
        """Test any failure completes the check run as neutral."""
        getattr(self.client, failing_method).side_effect = GitHubAPIError("boom", status_code=500)

        result = self.api.run_check(self.request)

        assert result.conclusion == "neutral"
        assert result.error == "boom"
        final = self._final_check_run_update()
        assert final["conclusion"] == "neutral"
        assert final["output"]["text"] == "boom"

    def test_error_reporting_failure_is_logged(self):
        """Test a failing error report does not raise."""
        self.client.update_check_run.side_effect = GitHubAPIError("unavailable", status_code=503)

        result = self.api.run_check(self.request)

        assert result.conclusion == "neutral"
        assert result.error == "unavailable"

    def test_create_check_run(self):
        """Test check runs are created queued under the app name."""
        self.api.create_check_run("owner/repo", "abc123")

        self.client.create_check_run.assert_called_once_with(
            "owner/repo", "Todo PR Checker", "abc123", status="queued"
        )
