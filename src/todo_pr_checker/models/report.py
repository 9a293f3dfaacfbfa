"""
Report Data Models

분석 결과 및 코멘트 리포트 관련 데이터 모델들
"""

from dataclasses import dataclass, field
from typing import Dict, List

from .diff import LineRange, Match


@dataclass(frozen=True)
class AnalysisResult:
    """한 번의 분석 실행 결과"""
    matches_by_file: Dict[str, List[Match]]
    ranges_by_file: Dict[str, List[LineRange]]

    def __post_init__(self):
        """데이터 검증"""
        if set(self.matches_by_file) != set(self.ranges_by_file):
            raise ValueError("Matches and ranges must cover the same files")

    @property
    def total_matches(self) -> int:
        """전체 액션 아이템 수 (범위 수가 아님)"""
        return sum(len(matches) for matches in self.matches_by_file.values())

    @property
    def has_unresolved_items(self) -> bool:
        """해결되지 않은 액션 아이템 존재 여부"""
        return self.total_matches > 0

    def count_for_file(self, file: str) -> int:
        return len(self.matches_by_file.get(file, []))


@dataclass(frozen=True)
class Report:
    """체크 런 / PR 코멘트용 렌더링 결과"""
    title: str
    summary: str
    body: str
    total_matches: int
    links_by_file: Dict[str, List[str]] = field(default_factory=dict)

    @property
    def comment_text(self) -> str:
        """PR 코멘트 본문 (요약 + 파일별 링크)"""
        return self.summary + self.body
