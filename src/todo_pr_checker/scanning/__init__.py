"""
Action Item Scanning

This module provides comment grammars, keyword matching, the comment
state machine and range grouping for added diff lines.
"""

from .grammar import CommentGrammarTable, resolve_grammar
from .matcher import KeywordMatcherSet
from .scanner import ActionItemScanner, CommentState, scan_for_action_items
from .grouper import RangeGrouper

__all__ = [
    'CommentGrammarTable',
    'resolve_grammar',
    'KeywordMatcherSet',
    'ActionItemScanner',
    'CommentState',
    'scan_for_action_items',
    'RangeGrouper',
]
