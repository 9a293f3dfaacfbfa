"""
Main Todo Checker API

Main interface that runs the action item pipeline on a diff and
orchestrates a complete check run, from fetching the diff to reporting
the outcome on GitHub.
"""

import logging
from typing import Dict, Optional
from datetime import datetime
from dataclasses import dataclass

from .config import AppConfig
from .github.client import GitHubClient
from .github.parser import DiffParser
from .scanning.grammar import CommentGrammarTable
from .scanning.matcher import KeywordMatcherSet
from .scanning.scanner import ActionItemScanner
from .scanning.grouper import RangeGrouper
from .formatting.report import (
    COMMENT_FOOTER,
    INTERNAL_ERROR_SUMMARY,
    INTERNAL_ERROR_TITLE,
    NO_ITEMS_SUMMARY,
    NO_ITEMS_TITLE,
    RESOLVED_TITLE,
    ReportAssembler,
    blob_link_base,
)
from .models.events import CheckRunRequest
from .models.report import AnalysisResult, Report
from .options import DEFAULT_OPTIONS, OPTIONS_FILE_PATHS, ScanOptions, load_options


logger = logging.getLogger(__name__)


@dataclass
class CheckRunResult:
    """Result of a completed check run."""
    check_run_id: int
    repository: str
    pr_number: int
    conclusion: str  # 'success', 'failure', 'neutral'
    total_matches: int
    comment_action: Optional[str]  # 'created', 'updated' or None
    processing_time: float
    created_at: datetime
    error: Optional[str] = None


def analyze(diff_text: str, options: ScanOptions = DEFAULT_OPTIONS) -> AnalysisResult:
    """
    Run the action item pipeline on a diff.

    The result depends only on the arguments.

    Args:
        diff_text: Unified diff of the change set
        options: Validated scan options

    Returns:
        AnalysisResult with matches and grouped ranges per file
    """
    added_lines = DiffParser(options.ignore_files).parse(diff_text)

    scanner = ActionItemScanner(
        grammar_table=CommentGrammarTable(options.add_languages),
        matchers=KeywordMatcherSet.compile(options.action_items, options.case_sensitive),
        multiline_comments=options.multiline_comments,
    )
    matches_by_file = scanner.scan(added_lines)

    grouper = RangeGrouper(options.additional_lines, options.always_split_snippets)
    ranges_by_file = {file: grouper.group(matches) for file, matches in matches_by_file.items()}

    return AnalysisResult(matches_by_file=matches_by_file, ranges_by_file=ranges_by_file)


def build_report(
    result: AnalysisResult,
    options: ScanOptions,
    full_repo_name: str,
    head_sha: str,
) -> Report:
    """Render an analysis result into check run and comment text."""
    assembler = ReportAssembler(
        additional_lines=options.additional_lines,
        link_base=blob_link_base(full_repo_name, head_sha),
    )
    counts = {file: len(matches) for file, matches in result.matches_by_file.items()}
    return assembler.render(result.ranges_by_file, counts)


class TodoCheckerAPI:
    """
    Main Todo Checker API interface.

    Orchestrates a check run:
    1. Mark the check run in progress
    2. Load repository options and the pull request diff
    3. Find action items in added comment lines
    4. Create or update the app's PR comment
    5. Complete the check run (failure if items were found)
    """

    def __init__(self, config: AppConfig, client: Optional[GitHubClient] = None):
        """
        Initialize Todo Checker API.

        Args:
            config: Application configuration
            client: GitHub client; built from the configuration if omitted
        """
        self.config = config
        self.client = client or GitHubClient(
            config.github.token,
            base_url=config.github.api_base_url,
            timeout_seconds=config.github.timeout_seconds,
        )

    def create_check_run(self, full_repo_name: str, head_sha: str) -> Dict:
        """Create a queued check run; the check itself runs on the `created` event."""
        return self.client.create_check_run(
            full_repo_name, self.config.github.app_name, head_sha, status='queued'
        )

    def load_options(self, full_repo_name: str, head_sha: str) -> ScanOptions:
        """Load the repository's options at the head commit, falling back to defaults."""
        for path in OPTIONS_FILE_PATHS:
            content = self.client.get_file_content(full_repo_name, path, head_sha)
            if content is not None:
                logger.debug(f"Loaded options from {path}")
                return load_options(content)

        logger.debug("No options file found, using default options")
        return DEFAULT_OPTIONS

    def run_check(self, request: CheckRunRequest) -> CheckRunResult:
        """
        Run a complete check for a pull request.

        Args:
            request: CheckRunRequest identifying the check run

        Returns:
            CheckRunResult; errors are reported as a neutral conclusion
        """
        start_time = datetime.now()
        repo = request.full_repo_name
        logger.info(f"Starting check run {request.check_run_id} for {repo}#{request.pull_number}")

        try:
            self.client.update_check_run(repo, request.check_run_id, status='in_progress')

            options = self.load_options(repo, request.head_sha)
            diff_text = self.client.get_pull_request_diff(repo, request.pull_number)
            result = analyze(diff_text, options)

            app_comment = self.client.find_app_comment(
                repo, request.pull_number, self.config.github.app_identifier
            )

            if result.has_unresolved_items:
                report = build_report(result, options, repo, request.head_sha)
                comment_action = self._report_items(request, options, report, app_comment)
                conclusion = 'failure'
            else:
                comment_action = self._report_no_items(request, options, app_comment)
                conclusion = 'success'

            processing_time = (datetime.now() - start_time).total_seconds()
            logger.info(
                f"Check run {request.check_run_id} completed: {conclusion}, "
                f"{result.total_matches} action items ({processing_time:.2f}s)"
            )
            return CheckRunResult(
                check_run_id=request.check_run_id,
                repository=repo,
                pr_number=request.pull_number,
                conclusion=conclusion,
                total_matches=result.total_matches,
                comment_action=comment_action,
                processing_time=processing_time,
                created_at=start_time,
            )

        except Exception as e:
            logger.error(f"Check run {request.check_run_id} failed: {e}")
            self._report_error(request, e)

            return CheckRunResult(
                check_run_id=request.check_run_id,
                repository=repo,
                pr_number=request.pull_number,
                conclusion='neutral',
                total_matches=0,
                comment_action=None,
                processing_time=(datetime.now() - start_time).total_seconds(),
                created_at=start_time,
                error=str(e),
            )

    def _report_items(
        self,
        request: CheckRunRequest,
        options: ScanOptions,
        report: Report,
        app_comment: Optional[Dict],
    ) -> Optional[str]:
        """Post the item list and fail the check run."""
        comment_action = None
        if options.post_comment != 'never':
            comment_action = self._upsert_comment(request, report.comment_text + COMMENT_FOOTER, app_comment)

        self.client.update_check_run(
            request.full_repo_name,
            request.check_run_id,
            status='completed',
            conclusion='failure',
            output={
                'title': report.title,
                'summary': report.summary,
                'text': report.body + COMMENT_FOOTER,
            },
        )
        return comment_action

    def _report_no_items(
        self,
        request: CheckRunRequest,
        options: ScanOptions,
        app_comment: Optional[Dict],
    ) -> Optional[str]:
        """Resolve an earlier comment (or post one if always wanted) and pass the check run."""
        title = NO_ITEMS_TITLE
        comment_action = None

        if app_comment:
            title = RESOLVED_TITLE
            comment_action = self._upsert_comment(request, title + COMMENT_FOOTER, app_comment)
        elif options.post_comment == 'always':
            comment_action = self._upsert_comment(request, title + COMMENT_FOOTER, None)

        self.client.update_check_run(
            request.full_repo_name,
            request.check_run_id,
            status='completed',
            conclusion='success',
            output={'title': title, 'summary': NO_ITEMS_SUMMARY + COMMENT_FOOTER},
        )
        return comment_action

    def _upsert_comment(self, request: CheckRunRequest, body: str, app_comment: Optional[Dict]) -> str:
        if app_comment:
            self.client.update_issue_comment(request.full_repo_name, app_comment['id'], body)
            return 'updated'
        self.client.create_issue_comment(request.full_repo_name, request.pull_number, body)
        return 'created'

    def _report_error(self, request: CheckRunRequest, error: Exception) -> None:
        try:
            self.client.update_check_run(
                request.full_repo_name,
                request.check_run_id,
                status='completed',
                conclusion='neutral',
                output={
                    'title': INTERNAL_ERROR_TITLE,
                    'summary': INTERNAL_ERROR_SUMMARY,
                    'text': str(error),
                },
            )
        except Exception as e:
            logger.error(f"Could not report error on check run {request.check_run_id}: {e}")
