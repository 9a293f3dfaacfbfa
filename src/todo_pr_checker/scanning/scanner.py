"""
Action Item Scanner

Runs a per-file comment state machine over added lines and reports the
lines that sit inside a comment and mention an action item keyword.
"""

import logging
from enum import Enum
from typing import Dict, List, Sequence

from ..models.diff import AddedLine, Match
from ..models.grammar import CommentGrammar
from .grammar import CommentGrammarTable
from .matcher import KeywordMatcherSet


logger = logging.getLogger(__name__)


class CommentState(Enum):
    """Block comment state of the line being scanned."""
    NORMAL = "normal"
    IN_BLOCK = "in_block"


def file_extension(file_path: str) -> str:
    """
    Get the lowercased extension of a path.

    Args:
        file_path: Path to file

    Returns:
        Text after the last dot of the base name, or '' if there is none
    """
    base_name = file_path.rsplit('/', 1)[-1]
    if '.' not in base_name:
        return ''
    return base_name.rsplit('.', 1)[-1].lower()


class ActionItemScanner:
    """
    Scans added lines for action items inside comments.

    A line counts as a comment when its trimmed text starts with the line
    marker or the block start marker, or when a block comment opened on an
    earlier added line has not been closed yet. Comments trailing code on
    the same line are not recognized.
    """

    def __init__(
        self,
        grammar_table: CommentGrammarTable,
        matchers: KeywordMatcherSet,
        multiline_comments: bool = True,
    ):
        """
        Initialize scanner.

        Args:
            grammar_table: Comment grammars by extension
            matchers: Compiled action item keywords
            multiline_comments: Whether block comments span lines
        """
        self.grammar_table = grammar_table
        self.matchers = matchers
        self.multiline_comments = multiline_comments

    def scan(self, added_lines_by_file: Dict[str, Sequence[AddedLine]]) -> Dict[str, List[Match]]:
        """
        Scan every file of a parsed diff.

        Args:
            added_lines_by_file: Output of the diff parser

        Returns:
            Matches by file; files without matches or without a grammar are omitted
        """
        matches_by_file = {}

        for file_path, added_lines in added_lines_by_file.items():
            grammar = self.grammar_table.resolve(file_extension(file_path))
            if grammar is None:
                logger.debug(f"Skipping unsupported file type: {file_path}")
                continue

            file_matches = self.scan_file(added_lines, grammar)
            if file_matches:
                matches_by_file[file_path] = file_matches

        logger.info(f"Found action items in {len(matches_by_file)} of {len(added_lines_by_file)} files")
        return matches_by_file

    def scan_file(self, added_lines: Sequence[AddedLine], grammar: CommentGrammar) -> List[Match]:
        """Scan the added lines of one file. State never carries over between files."""
        state = CommentState.NORMAL
        file_matches = []

        for added_line in added_lines:
            text = added_line.text.strip()

            opens = self._opens_block(text, grammar)
            opened = opens and state is CommentState.NORMAL
            if opens:
                state = CommentState.IN_BLOCK

            if self._is_comment_line(text, grammar, state) and self.matchers.matches(text):
                file_matches.append(Match.from_added_line(added_line))

            if self._closes_block(text, grammar, opened):
                state = CommentState.NORMAL

        return file_matches

    def _opens_block(self, text: str, grammar: CommentGrammar) -> bool:
        return (
            self.multiline_comments
            and grammar.block_start is not None
            and text.startswith(grammar.block_start)
        )

    @staticmethod
    def _is_comment_line(text: str, grammar: CommentGrammar, state: CommentState) -> bool:
        if text.startswith(grammar.line_marker):
            return True
        if grammar.block_start is not None and text.startswith(grammar.block_start):
            return True
        return state is CommentState.IN_BLOCK

    def _closes_block(self, text: str, grammar: CommentGrammar, opened: bool) -> bool:
        if not self.multiline_comments:
            return True
        if grammar.block_end is None:
            return False
        # The opening marker itself never counts as the closing one
        if opened:
            text = text[len(grammar.block_start):]
        return text.endswith(grammar.block_end)


def scan_for_action_items(
    added_lines_by_file: Dict[str, Sequence[AddedLine]],
    grammar_table: CommentGrammarTable,
    matchers: KeywordMatcherSet,
    multiline_comments: bool = True,
) -> Dict[str, List[Match]]:
    """Convenience wrapper around ActionItemScanner.scan."""
    scanner = ActionItemScanner(grammar_table, matchers, multiline_comments)
    return scanner.scan(added_lines_by_file)
