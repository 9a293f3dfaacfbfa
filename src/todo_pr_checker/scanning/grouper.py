"""
Range Grouper

Coalesces a file's matched lines into reporting ranges so that nearby
action items share one deep link.
"""

from typing import List, Sequence

from ..models.diff import LineRange, Match


# Matches this many lines apart (or closer) always share a range
MAX_LINE_GAP = 3


class RangeGrouper:
    """
    Groups matches of a single file into LineRanges.

    Two consecutive matches are split into separate ranges only when they
    are more than MAX_LINE_GAP lines apart and the padding appended after
    the previous match (`additional_lines`) does not bridge the gap.
    """

    def __init__(self, additional_lines: int = 0, always_split_snippets: bool = False):
        self.additional_lines = additional_lines
        self.always_split_snippets = always_split_snippets

    def should_split(self, prev_line: int, curr_line: int) -> bool:
        """Whether `curr_line` starts a new range after `prev_line`."""
        if self.always_split_snippets:
            return True
        return (
            curr_line - prev_line > MAX_LINE_GAP
            and curr_line - (prev_line + self.additional_lines) > 1
        )

    def group(self, matches: Sequence[Match]) -> List[LineRange]:
        """
        Group matches into ranges.

        Args:
            matches: Matches of one file, in any order

        Returns:
            Ranges ordered by first line
        """
        ordered = sorted(matches, key=lambda m: m.line)
        if not ordered:
            return []

        groups = [[ordered[0]]]
        for prev, curr in zip(ordered, ordered[1:]):
            if self.should_split(prev.line, curr.line):
                groups.append([curr])
            else:
                groups[-1].append(curr)

        return [
            LineRange(file=group[0].file, first=group[0].line, last=group[-1].line)
            for group in groups
        ]
