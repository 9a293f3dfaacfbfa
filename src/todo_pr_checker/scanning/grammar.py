"""
Comment Grammar Table

Maps file extensions to their comment syntax. Built-in defaults cover
common languages; user overrides from the `add_languages` option replace
an extension's entry wholesale.
"""

import logging
from typing import Dict, Iterable, Optional, Sequence

from ..models.grammar import CommentGrammar, GrammarOverride


logger = logging.getLogger(__name__)


DEFAULT_COMMENT_GRAMMARS = {
    ('md', 'html', 'xml'): CommentGrammar('<!--', '<!--', '-->'),
    ('astro',): CommentGrammar('//', '<!--', '-->'),
    (
        'js', 'java', 'ts', 'c', 'cpp', 'cs', 'php', 'swift', 'go', 'kt', 'rs',
        'dart', 'scala', 'sc', 'groovy', 'less', 'sass', 'scss',
    ): CommentGrammar('//', '/*', '*/'),
    ('css',): CommentGrammar('/*', '/*', '*/'),
    ('r', 'gitignore', 'sh', 'bash', 'yml', 'yaml'): CommentGrammar('#'),
    ('rb',): CommentGrammar('#', '=begin', '=end'),
    ('pl',): CommentGrammar('#', '=', '=cut'),
    ('py',): CommentGrammar('#', "'''", "'''"),
    ('ps1',): CommentGrammar('#', '<#', '#>'),
    ('sql',): CommentGrammar('--', '/*', '*/'),
    ('hs',): CommentGrammar('--', '{-', '-}'),
    ('lua',): CommentGrammar('--', '--[[', ']]'),
    ('m',): CommentGrammar('%', '%{', '%}'),
    ('tex',): CommentGrammar('%'),
}


class CommentGrammarTable:
    """
    Extension to comment grammar lookup.

    The table is built once per analysis run from the defaults and the
    overrides in effect for the repository under review.
    """

    def __init__(self, overrides: Iterable[GrammarOverride.Variant] = ()):
        """
        Initialize grammar table.

        Args:
            overrides: Override variants, later entries win for the same extension
        """
        self._grammars: Dict[str, CommentGrammar] = {}
        for extensions, grammar in DEFAULT_COMMENT_GRAMMARS.items():
            for extension in extensions:
                self._grammars[extension] = grammar

        for override in overrides:
            self._grammars[override.extension] = override.to_grammar()
            logger.debug(f"Comment grammar override for '{override.extension}': {override}")

    @classmethod
    def from_raw(cls, raw_overrides: Iterable[Sequence[Optional[str]]]) -> "CommentGrammarTable":
        """
        Build a table from raw `add_languages` entries.

        Entries that do not describe a valid grammar are skipped.
        """
        overrides = []
        for raw in raw_overrides:
            try:
                overrides.append(GrammarOverride.from_sequence(raw))
            except (TypeError, ValueError) as e:
                logger.warning(f"Ignoring invalid language override: {e}")
        return cls(overrides)

    def resolve(self, extension: str) -> Optional[CommentGrammar]:
        """
        Resolve the comment grammar for an extension.

        Args:
            extension: File extension without the leading dot

        Returns:
            CommentGrammar or None if the file type is not supported
        """
        return self._grammars.get(GrammarOverride.normalize_extension(extension))

    def __contains__(self, extension: str) -> bool:
        return self.resolve(extension) is not None

    @property
    def extensions(self) -> Sequence[str]:
        """Supported extensions, sorted."""
        return sorted(self._grammars)


def resolve_grammar(
    extension: str,
    overrides: Iterable[GrammarOverride.Variant] = (),
) -> Optional[CommentGrammar]:
    """Resolve a single extension against defaults and overrides."""
    return CommentGrammarTable(overrides).resolve(extension)
