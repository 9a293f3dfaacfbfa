"""
Comment Grammar Models

파일 타입별 주석 문법과 사용자 정의 오버라이드 모델들
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Union


@dataclass(frozen=True)
class CommentGrammar:
    """파일 타입의 주석 문법 (라인 주석 + 선택적 블록 주석)"""
    line_marker: str
    block_start: Optional[str] = None
    block_end: Optional[str] = None

    def __post_init__(self):
        """데이터 검증"""
        if not self.line_marker:
            raise ValueError("Line marker cannot be empty")
        if (self.block_start is None) != (self.block_end is None):
            raise ValueError("Block start and block end must be given together")
        if self.block_start == "" or self.block_end == "":
            raise ValueError("Block markers cannot be empty")

    @property
    def supports_blocks(self) -> bool:
        """블록 주석 지원 여부"""
        return self.block_start is not None


@dataclass(frozen=True)
class LineOnly:
    """`[ext, line]` 형식: 라인 주석만 지원"""
    extension: str
    line: str

    def to_grammar(self) -> CommentGrammar:
        return CommentGrammar(line_marker=self.line)


@dataclass(frozen=True)
class SymmetricOpen:
    """`[ext, line, end]` 형식: 블록 시작 토큰이 라인 토큰과 같음"""
    extension: str
    line: str
    end: str

    def to_grammar(self) -> CommentGrammar:
        return CommentGrammar(line_marker=self.line, block_start=self.line, block_end=self.end)


@dataclass(frozen=True)
class Explicit:
    """`[ext, line, start, end]` 형식: 명시적 블록 주석"""
    extension: str
    line: str
    start: str
    end: str

    def to_grammar(self) -> CommentGrammar:
        return CommentGrammar(line_marker=self.line, block_start=self.start, block_end=self.end)


class GrammarOverride:
    """
    Constructor for user supplied comment grammar overrides.

    The `add_languages` option holds lists of two to four strings. Their
    arity selects the variant; `from_sequence` is the only place that
    looks at the length.
    """

    Variant = Union[LineOnly, SymmetricOpen, Explicit]

    @staticmethod
    def normalize_extension(extension: str) -> str:
        """Strip a single leading dot from an extension and lowercase it."""
        extension = extension[1:] if extension.startswith('.') else extension
        return extension.lower()

    @classmethod
    def from_sequence(cls, values: Sequence[Optional[str]]) -> "GrammarOverride.Variant":
        """
        Build an override variant from a raw option entry.

        Args:
            values: `[ext, line]`, `[ext, line, end]` or `[ext, line, start, end]`

        Returns:
            LineOnly, SymmetricOpen or Explicit

        Raises:
            ValueError: If the entry cannot describe a valid grammar
        """
        if isinstance(values, (str, bytes)) or not 2 <= len(values) <= 4:
            raise ValueError(f"Override must have 2 to 4 elements: {values!r}")

        extension, line = values[0], values[1]
        if not extension or not line:
            raise ValueError(f"Override needs an extension and a line marker: {values!r}")
        extension = cls.normalize_extension(extension)
        if not extension:
            raise ValueError(f"Override extension is empty: {values!r}")

        if len(values) == 2:
            return LineOnly(extension, line)

        if len(values) == 3:
            if not values[2]:
                return LineOnly(extension, line)
            return SymmetricOpen(extension, line, values[2])

        start, end = values[2], values[3]
        if not start and not end:
            return LineOnly(extension, line)
        if not start or not end:
            raise ValueError(f"Block start and end must be given together: {values!r}")
        return Explicit(extension, line, start, end)
