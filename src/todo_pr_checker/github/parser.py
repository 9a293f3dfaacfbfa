"""
PR Diff Parser

Parses unified diff text, as returned by GitHub's diff media type, into
added lines grouped by file. Ignored files are dropped while parsing.
"""

import re
import logging
from typing import Dict, Iterable, List, Optional, Pattern

from ..models.diff import AddedLine


logger = logging.getLogger(__name__)


FILE_HEADER_PREFIX = '+++ '
HUNK_HEADER_PREFIX = '@@ '
NO_NEWLINE_MARKER = '\\ No newline at end of file'
DEV_NULL = '/dev/null'


def glob_to_regex(pattern: str) -> Optional[Pattern]:
    """
    Translate an ignore-file glob into a regular expression.

    `*` and `**` match any run of characters (slashes included), `?` matches
    one character other than a slash and `.` is literal. Everything else is
    handed to the regex engine unchanged, so `[abc]` keeps its class meaning.

    Args:
        pattern: Glob from the `ignore_files` option

    Returns:
        Compiled pattern, or None if it does not compile
    """
    translated = []
    for char in pattern:
        if char == '*':
            translated.append('.*')
        elif char == '?':
            translated.append('[^/]')
        elif char == '.':
            translated.append(r'\.')
        else:
            translated.append(char)

    try:
        return re.compile(''.join(translated))
    except re.error as e:
        logger.warning(f"Ignoring invalid ignore_files pattern '{pattern}': {e}")
        return None


class DiffParser:
    """
    Parser for unified diff text.

    Records every added line with its line number in the new version of
    the file. Never raises on malformed input; portions it cannot
    interpret are skipped.
    """

    def __init__(self, ignore_patterns: Iterable[str] = ()):
        """
        Initialize diff parser.

        Args:
            ignore_patterns: Globs of files to leave out of the result
        """
        self.hunk_header_pattern = re.compile(r'^@@\s*-(\d+)(?:,(\d+))?\s*\+(\d+)(?:,(\d+))?\s*@@')
        self.ignore_patterns = [
            compiled for compiled in (glob_to_regex(p) for p in ignore_patterns)
            if compiled is not None
        ]

    def is_ignored(self, file_path: str) -> bool:
        """Check whether a path matches any ignore pattern (unanchored search)."""
        return any(pattern.search(file_path) for pattern in self.ignore_patterns)

    def parse(self, diff_text: str) -> Dict[str, List[AddedLine]]:
        """
        Parse diff text into added lines by file.

        Args:
            diff_text: Raw unified diff

        Returns:
            Added lines by file path, in diff order
        """
        changes: Dict[str, List[AddedLine]] = {}
        current_file: Optional[str] = None
        skipping = False
        in_hunk = False
        line_number = 0

        # Only `\n` ends a diff line; form feeds and Unicode separators belong to the content
        for line in diff_text.split('\n'):
            line = line.rstrip('\r')
            if line.startswith(FILE_HEADER_PREFIX):
                current_file = self._extract_file_path(line)
                in_hunk = False
                skipping = current_file is not None and self.is_ignored(current_file)
                if skipping:
                    logger.debug(f"Ignoring file: {current_file}")
                elif current_file is not None:
                    changes[current_file] = []
                continue

            if skipping:
                continue

            if line.startswith(HUNK_HEADER_PREFIX):
                start = self._parse_hunk_start(line)
                in_hunk = start is not None
                if in_hunk:
                    line_number = start - 1
            elif line.startswith('+') and in_hunk and current_file is not None:
                changes[current_file].append(AddedLine(file=current_file, line=line_number, text=line[1:]))

            if not (line.startswith('-') or line == NO_NEWLINE_MARKER):
                line_number += 1

        logger.info(f"Parsed diff: {len(changes)} files, {sum(len(v) for v in changes.values())} added lines")
        return changes

    @staticmethod
    def _extract_file_path(line: str) -> Optional[str]:
        """Path of a `+++` header, without git's `b/` prefix. None for deleted files."""
        file_path = line[len(FILE_HEADER_PREFIX):].strip()
        if file_path == DEV_NULL:
            return None
        if file_path.startswith('b/'):
            file_path = file_path[2:]
        return file_path or None

    def _parse_hunk_start(self, line: str) -> Optional[int]:
        """New-file start line of a hunk header, or None if the header is malformed."""
        header_match = self.hunk_header_pattern.match(line)
        if not header_match:
            logger.debug(f"Malformed hunk header: {line!r}")
            return None
        start = int(header_match.group(3))
        # `+0,0` hunks (file emptied) have no added lines
        return start if start > 0 else None


def parse_diff(diff_text: str, ignore_patterns: Iterable[str] = ()) -> Dict[str, List[AddedLine]]:
    """Parse diff text with a one-off DiffParser."""
    return DiffParser(ignore_patterns).parse(diff_text)
