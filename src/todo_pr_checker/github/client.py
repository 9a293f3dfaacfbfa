"""
GitHub API Client

Handles GitHub API authentication, rate limiting, and communication.
Provides methods for diff retrieval, repository file access, issue
comments and check runs.
"""

import time
import base64
import logging
from typing import Callable, Dict, List, Optional, Union
from datetime import datetime
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry


logger = logging.getLogger(__name__)


JSON_MEDIA_TYPE = 'application/vnd.github+json'
DIFF_MEDIA_TYPE = 'application/vnd.github.v3.diff'

TokenProvider = Callable[[], str]


class GitHubAPIError(Exception):
    """GitHub API related errors"""
    def __init__(self, message: str, status_code: Optional[int] = None, response_data: Optional[Dict] = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data


class RateLimitExceeded(GitHubAPIError):
    """GitHub API rate limit exceeded"""
    def __init__(self, reset_time: datetime):
        super().__init__(f"Rate limit exceeded. Resets at {reset_time}", status_code=429)
        self.reset_time = reset_time


class GitHubClient:
    """
    GitHub API client with authentication, rate limiting, and error handling.

    Provides methods for:
    - Pull request diff retrieval
    - Repository file contents (options file)
    - Issue comment listing, creation and update
    - Check run creation and update
    """

    def __init__(
        self,
        token: Union[str, TokenProvider],
        base_url: str = "https://api.github.com",
        timeout_seconds: int = 30,
    ):
        """
        Initialize GitHub client.

        Args:
            token: Access token, or a callable returning a fresh one per request
            base_url: GitHub API base URL (default: https://api.github.com)
            timeout_seconds: Timeout for each request
        """
        if not token:
            raise ValueError("GitHub token is required")

        self._token_provider: TokenProvider = token if callable(token) else (lambda: token)
        self.base_url = base_url.rstrip('/')
        self.timeout_seconds = timeout_seconds
        self.session = self._create_session()
        self.rate_limit_remaining = 5000
        self.rate_limit_reset = datetime.now()

    def _create_session(self) -> requests.Session:
        """Create requests session with retry strategy and default headers."""
        session = requests.Session()

        # Configure retry strategy
        retry_strategy = Retry(
            total=3,
            backoff_factor=1,
            status_forcelist=[429, 500, 502, 503, 504],
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        session.headers.update({
            'Accept': JSON_MEDIA_TYPE,
            'User-Agent': 'Todo-PR-Checker/1.0'
        })

        return session

    def _check_rate_limit(self) -> None:
        """Check and handle GitHub API rate limits."""
        if self.rate_limit_remaining <= 10 and datetime.now() < self.rate_limit_reset:
            wait_time = (self.rate_limit_reset - datetime.now()).total_seconds()
            if wait_time > 0:
                logger.warning(f"Rate limit low ({self.rate_limit_remaining}), resets in {wait_time:.1f}s")
                raise RateLimitExceeded(self.rate_limit_reset)

    def _update_rate_limit(self, response: requests.Response) -> None:
        """Update rate limit information from response headers."""
        if 'X-RateLimit-Remaining' in response.headers:
            self.rate_limit_remaining = int(response.headers['X-RateLimit-Remaining'])

        if 'X-RateLimit-Reset' in response.headers:
            reset_timestamp = int(response.headers['X-RateLimit-Reset'])
            self.rate_limit_reset = datetime.fromtimestamp(reset_timestamp)

    def _make_request(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        """
        Make authenticated request to GitHub API with rate limiting.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint (without base URL)
            **kwargs: Additional arguments for requests

        Returns:
            Response object

        Raises:
            GitHubAPIError: For API errors
            RateLimitExceeded: When rate limit is exceeded
        """
        self._check_rate_limit()

        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        headers = dict(kwargs.pop('headers', None) or {})
        headers['Authorization'] = f'token {self._token_provider()}'
        kwargs.setdefault('timeout', self.timeout_seconds)

        try:
            response = self.session.request(method, url, headers=headers, **kwargs)
        except requests.RequestException as e:
            logger.error(f"Request failed: {e}")
            raise GitHubAPIError(f"Request failed: {str(e)}")

        self._update_rate_limit(response)

        if response.status_code == 429:
            reset_time = datetime.fromtimestamp(int(response.headers.get('X-RateLimit-Reset', time.time() + 3600)))
            raise RateLimitExceeded(reset_time)

        if not response.ok:
            try:
                error_data = response.json() if response.content else {}
            except ValueError:
                error_data = {}
            raise GitHubAPIError(
                f"GitHub API error: {response.status_code} - {error_data.get('message', 'Unknown error')}",
                status_code=response.status_code,
                response_data=error_data
            )

        return response

    def get_pull_request_diff(self, full_repo_name: str, pull_number: int) -> str:
        """
        Get the unified diff of a pull request.

        Args:
            full_repo_name: Repository in `owner/repo` form
            pull_number: Pull request number

        Returns:
            Diff text
        """
        logger.info(f"Fetching diff for {full_repo_name}#{pull_number}")

        response = self._make_request(
            'GET',
            f'/repos/{full_repo_name}/pulls/{pull_number}',
            headers={'Accept': DIFF_MEDIA_TYPE}
        )
        return response.text

    def get_file_content(self, full_repo_name: str, path: str, ref: str) -> Optional[str]:
        """
        Get the decoded content of a repository file.

        Args:
            full_repo_name: Repository in `owner/repo` form
            path: File path inside the repository
            ref: Commit SHA or branch

        Returns:
            File content, or None if the file does not exist
        """
        try:
            response = self._make_request(
                'GET', f'/repos/{full_repo_name}/contents/{path}', params={'ref': ref}
            )
        except GitHubAPIError as e:
            if e.status_code == 404:
                logger.debug(f"File not found: {full_repo_name}/{path}@{ref}")
                return None
            raise

        data = response.json()
        content = data.get('content')
        if content is None:
            return None
        return base64.b64decode(content).decode('utf-8')

    def list_issue_comments(self, full_repo_name: str, issue_number: int) -> List[Dict]:
        """
        Get all comments on a pull request conversation.

        Args:
            full_repo_name: Repository in `owner/repo` form
            issue_number: Pull request number

        Returns:
            List of comment data
        """
        comments = []
        page = 1
        per_page = 100

        while True:
            response = self._make_request(
                'GET',
                f'/repos/{full_repo_name}/issues/{issue_number}/comments',
                params={'page': page, 'per_page': per_page}
            )

            page_comments = response.json()
            if not page_comments:
                break

            comments.extend(page_comments)

            if len(page_comments) < per_page:
                break

            page += 1

        logger.debug(f"Found {len(comments)} comments on {full_repo_name}#{issue_number}")
        return comments

    def find_app_comment(self, full_repo_name: str, issue_number: int, app_id: int) -> Optional[Dict]:
        """Return the comment previously posted by the app, if any."""
        for comment in self.list_issue_comments(full_repo_name, issue_number):
            app = comment.get('performed_via_github_app') or {}
            if app.get('id') == app_id:
                return comment
        return None

    def create_issue_comment(self, full_repo_name: str, issue_number: int, body: str) -> Dict:
        """Post a new comment on a pull request conversation."""
        logger.info(f"Creating comment on {full_repo_name}#{issue_number}")
        response = self._make_request(
            'POST', f'/repos/{full_repo_name}/issues/{issue_number}/comments', json={'body': body}
        )
        return response.json()

    def update_issue_comment(self, full_repo_name: str, comment_id: int, body: str) -> Dict:
        """Replace the body of an existing comment."""
        logger.info(f"Updating comment {comment_id} on {full_repo_name}")
        response = self._make_request(
            'PATCH', f'/repos/{full_repo_name}/issues/comments/{comment_id}', json={'body': body}
        )
        return response.json()

    def create_check_run(self, full_repo_name: str, name: str, head_sha: str, status: str = 'queued') -> Dict:
        """
        Create a check run on a commit.

        Args:
            full_repo_name: Repository in `owner/repo` form
            name: Check run name shown on the pull request
            head_sha: Commit to attach the check run to
            status: Initial status

        Returns:
            Check run data
        """
        logger.info(f"Creating check run '{name}' for {full_repo_name}@{head_sha}")
        response = self._make_request(
            'POST',
            f'/repos/{full_repo_name}/check-runs',
            json={'name': name, 'head_sha': head_sha, 'status': status}
        )
        return response.json()

    def update_check_run(self, full_repo_name: str, check_run_id: int, **fields) -> Dict:
        """
        Update a check run.

        Args:
            full_repo_name: Repository in `owner/repo` form
            check_run_id: Check run to update
            **fields: status, conclusion, output, ...

        Returns:
            Check run data
        """
        logger.info(f"Updating check run {check_run_id} on {full_repo_name}: {fields.get('status')}")
        response = self._make_request(
            'PATCH', f'/repos/{full_repo_name}/check-runs/{check_run_id}', json=fields
        )
        return response.json()
