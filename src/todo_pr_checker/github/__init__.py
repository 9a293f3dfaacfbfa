"""
GitHub Integration Layer

This module provides GitHub API integration for PR diff retrieval,
comments and check runs, unified diff parsing, and webhook handling.
"""

from .client import GitHubClient, GitHubAPIError, RateLimitExceeded
from .parser import DiffParser, parse_diff

__all__ = ['GitHubClient', 'GitHubAPIError', 'RateLimitExceeded', 'DiffParser', 'parse_diff']
