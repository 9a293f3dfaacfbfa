"""
Todo PR Checker

GitHub App that reports unresolved action item comments (TODO, FIXME,
BUG, ...) added by a pull request
"""

__version__ = "1.0.0"

from .api import TodoCheckerAPI, analyze

__all__ = ["TodoCheckerAPI", "analyze"]
