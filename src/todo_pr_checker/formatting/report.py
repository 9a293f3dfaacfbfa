"""
Report Assembler

Formats grouped action item ranges as GitHub deep links and builds the
check run title, summary and PR comment body around them.
"""

import logging
from typing import Dict, List

from ..models.diff import LineRange
from ..models.report import Report


logger = logging.getLogger(__name__)


GITHUB_WEB_URL = "https://github.com"

NO_ITEMS_TITLE = "✔ No action items found!"
RESOLVED_TITLE = "✔ All action items have been resolved!"
NO_ITEMS_SUMMARY = (
    "There are no new action items added in this Pull Request. "
    "If any are added later on, the bot will make sure to let you know.\n"
)
COMMENT_FOOTER = "\n----\nThis comment is kept up to date every time the check runs."
INTERNAL_ERROR_TITLE = "An internal error has occurred!"
INTERNAL_ERROR_SUMMARY = "The check could not be completed. Re-run it to try again."


def blob_link_base(full_repo_name: str, head_sha: str) -> str:
    """Base URL for file links at a commit."""
    return f"{GITHUB_WEB_URL}/{full_repo_name}/blob/{head_sha}"


def pluralize_items(count: int) -> str:
    if count == 1:
        return "1 action item"
    return f"{count} action items"


class ReportAssembler:
    """
    Renders LineRanges into link lists and comment texts.

    Pure formatting: which lines belong together is decided by the
    RangeGrouper.
    """

    def __init__(self, additional_lines: int = 0, link_base: str = ""):
        """
        Initialize report assembler.

        Args:
            additional_lines: Extra lines appended to every rendered range
            link_base: `https://github.com/{repo}/blob/{sha}` for file links
        """
        self.additional_lines = additional_lines
        self.link_base = link_base.rstrip('/')

    def render_range(self, line_range: LineRange) -> str:
        """Render the line anchor of a range, e.g. `#L10` or `#L10-L12`."""
        if line_range.is_single_line and self.additional_lines == 0:
            return f"#L{line_range.first}"
        return f"#L{line_range.first}-L{line_range.last + self.additional_lines}"

    def file_link(self, file: str) -> str:
        return f"{self.link_base}/{file}"

    def render_links(self, ranges_by_file: Dict[str, List[LineRange]]) -> Dict[str, List[str]]:
        """Full deep links per file, in range order."""
        return {
            file: [self.file_link(file) + self.render_range(r) for r in ranges]
            for file, ranges in ranges_by_file.items()
        }

    def render(
        self,
        ranges_by_file: Dict[str, List[LineRange]],
        counts_by_file: Dict[str, int],
    ) -> Report:
        """
        Build the report for a run with unresolved action items.

        Args:
            ranges_by_file: Grouped ranges per file
            counts_by_file: Number of matches per file

        Returns:
            Report with title, summary, body and links
        """
        total = sum(counts_by_file.values())
        links_by_file = self.render_links(ranges_by_file)

        body_parts = []
        for file, links in links_by_file.items():
            count = counts_by_file.get(file, 0)
            body_parts.append(f"\n## [`{file}`]({self.file_link(file)}) ({pluralize_items(count)}):\n")
            body_parts.append("".join(f"{link} " for link in links))

        logger.debug(f"Rendered {sum(len(v) for v in links_by_file.values())} links for {total} action items")
        return Report(
            title=self.render_title(total),
            summary=self.render_summary(total),
            body="".join(body_parts),
            total_matches=total,
            links_by_file=links_by_file,
        )

    @staticmethod
    def render_title(total: int) -> str:
        if total == 1:
            return "✘ 1 unresolved action item found!"
        return f"✘ {total} unresolved action items found!"

    @staticmethod
    def render_summary(total: int) -> str:
        if total == 1:
            return "There is **1** unresolved action item in this Pull Request:\n\n"
        return f"There are **{total}** unresolved action items in this Pull Request:\n\n"
