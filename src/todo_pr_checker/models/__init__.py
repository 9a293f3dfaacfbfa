"""
Data Models

Todo PR Checker 시스템의 핵심 데이터 모델들
"""

from .diff import AddedLine, Match, LineRange
from .grammar import CommentGrammar, GrammarOverride, LineOnly, SymmetricOpen, Explicit
from .report import AnalysisResult, Report
from .events import WebhookEvent, CheckRunRequest

__all__ = [
    "AddedLine",
    "Match",
    "LineRange",
    "CommentGrammar",
    "GrammarOverride",
    "LineOnly",
    "SymmetricOpen",
    "Explicit",
    "AnalysisResult",
    "Report",
    "WebhookEvent",
    "CheckRunRequest",
]
