"""
Keyword Matcher

Compiles configured action item keywords into whole-word patterns.
"""

import re
import logging
from typing import Iterable, List, Pattern


logger = logging.getLogger(__name__)


class KeywordMatcherSet:
    """Whole-word patterns for action item keywords such as `todo` or `fixme`."""

    def __init__(self, patterns: List[Pattern]):
        self.patterns = patterns

    @classmethod
    def compile(cls, action_items: Iterable[str], case_sensitive: bool = False) -> "KeywordMatcherSet":
        """
        Compile keywords into `\\bkeyword\\b` patterns.

        Args:
            action_items: Keywords to look for
            case_sensitive: Whether matching respects case

        Returns:
            KeywordMatcherSet
        """
        flags = 0 if case_sensitive else re.IGNORECASE
        patterns = [
            re.compile(rf'\b{re.escape(item)}\b', flags)
            for item in action_items
            if item
        ]
        logger.debug(f"Compiled {len(patterns)} action item patterns (case_sensitive={case_sensitive})")
        return cls(patterns)

    def matches(self, text: str) -> bool:
        """Check whether any keyword appears in the trimmed text."""
        text = text.strip()
        return any(pattern.search(text) for pattern in self.patterns)

    def __len__(self) -> int:
        return len(self.patterns)
