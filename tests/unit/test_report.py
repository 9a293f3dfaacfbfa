"""
Unit tests for report formatting.
"""

import pytest

from todo_pr_checker.formatting.report import ReportAssembler, blob_link_base, pluralize_items
from todo_pr_checker.models.diff import LineRange


LINK_BASE = "https://github.com/owner/repo/blob/abc123"


class TestReportAssembler:
    """Unit tests for ReportAssembler class."""

    @pytest.mark.parametrize("first,last,additional_lines,expected", [
        (10, 10, 0, "#L10"),
        (10, 10, 2, "#L10-L12"),
        (10, 15, 0, "#L10-L15"),
        (10, 15, 3, "#L10-L18"),
    ])
    def test_render_range(self, first, last, additional_lines, expected):
        """Test line anchors for single and multi line ranges."""
        assembler = ReportAssembler(additional_lines=additional_lines)

        assert assembler.render_range(LineRange("a.py", first, last)) == expected

    def test_blob_link_base(self):
        """Test commit link base."""
        assert blob_link_base("owner/repo", "abc123") == LINK_BASE

    def test_render_report(self):
        """Test full report rendering."""
        assembler = ReportAssembler(additional_lines=0, link_base=LINK_BASE + "/")
        ranges = {
            "src/app.py": [LineRange("src/app.py", 3, 3), LineRange("src/app.py", 20, 22)],
            "README.md": [LineRange("README.md", 7, 7)],
        }
        counts = {"src/app.py": 3, "README.md": 1}

        report = assembler.render(ranges, counts)

        assert report.total_matches == 4
        assert report.title == "✘ 4 unresolved action items found!"
        assert report.summary == "There are **4** unresolved action items in this Pull Request:\n\n"
        assert report.links_by_file == {
            "src/app.py": [f"{LINK_BASE}/src/app.py#L3", f"{LINK_BASE}/src/app.py#L20-L22"],
            "README.md": [f"{LINK_BASE}/README.md#L7"],
        }
        assert report.body == (
            f"\n## [`src/app.py`]({LINK_BASE}/src/app.py) (3 action items):\n"
            f"{LINK_BASE}/src/app.py#L3 {LINK_BASE}/src/app.py#L20-L22 "
            f"\n## [`README.md`]({LINK_BASE}/README.md) (1 action item):\n"
            f"{LINK_BASE}/README.md#L7 "
        )
        assert report.comment_text == report.summary + report.body

    def test_singular_wording(self):
        """Test singular title and summary."""
        assembler = ReportAssembler(link_base=LINK_BASE)

        report = assembler.render({"a.py": [LineRange("a.py", 1, 1)]}, {"a.py": 1})

        assert report.title == "✘ 1 unresolved action item found!"
        assert report.summary == "There is **1** unresolved action item in this Pull Request:\n\n"

    def test_pluralize_items(self):
        """Test item count wording."""
        assert pluralize_items(1) == "1 action item"
        assert pluralize_items(2) == "2 action items"
