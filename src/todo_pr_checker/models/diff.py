"""
Diff Data Models

PR diff 분석 파이프라인에서 사용하는 데이터 모델들
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class AddedLine:
    """PR에서 추가된 개별 라인"""
    file: str
    line: int  # 새 파일 기준 1부터 시작
    text: str

    def __post_init__(self):
        """데이터 검증"""
        if self.line < 1:
            raise ValueError("Line numbers must be positive")
        if not self.file:
            raise ValueError("File path cannot be empty")


@dataclass(frozen=True)
class Match:
    """주석 안에서 액션 아이템 키워드가 발견된 라인"""
    file: str
    line: int
    text: str

    def __post_init__(self):
        """데이터 검증"""
        if self.line < 1:
            raise ValueError("Line numbers must be positive")

    @classmethod
    def from_added_line(cls, added_line: AddedLine) -> "Match":
        return cls(file=added_line.file, line=added_line.line, text=added_line.text)


@dataclass(frozen=True)
class LineRange:
    """리포트에 링크로 표시될 라인 범위"""
    file: str
    first: int
    last: int

    def __post_init__(self):
        """데이터 검증"""
        if self.first < 1:
            raise ValueError("Line numbers must be positive")
        if self.first > self.last:
            raise ValueError("first cannot be greater than last")

    @property
    def is_single_line(self) -> bool:
        """단일 라인 범위인지 확인"""
        return self.first == self.last

    def __contains__(self, line: int) -> bool:
        return self.first <= line <= self.last
