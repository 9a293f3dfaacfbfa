"""
Report Formatter

This module provides formatting of action item ranges into GitHub
deep links, check run output and PR comment text.
"""

from .report import ReportAssembler, blob_link_base

__all__ = ['ReportAssembler', 'blob_link_base']
