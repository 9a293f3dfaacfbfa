"""
Repository Options

Options read from `.github/config.yml` under the `todo-pr-checker` key.
Every field is validated on its own; an absent or invalid value falls back
to that field's default without affecting the others.
"""

import re
import logging
from dataclasses import dataclass
from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple

import yaml
from pydantic import AfterValidator, Field, StrictBool, StrictInt, StrictStr, TypeAdapter, ValidationError

from .models.grammar import GrammarOverride


logger = logging.getLogger(__name__)


OPTIONS_SECTION = 'todo-pr-checker'
OPTIONS_FILE_PATHS = ('.github/config.yml', '.github/config.yaml')

# A .gitignore-like pattern: optional leading `/` or `**/`, optional trailing `/**` or `/`
IGNORE_FILE_PATTERN = re.compile(r'^(/?(\*\*/)?[\w*\[\]{}?./-]+(/\*\*)?/?)$')


def _check_ignore_pattern(value: str) -> str:
    if not IGNORE_FILE_PATTERN.match(value):
        raise ValueError(f"Not a valid ignore pattern: {value!r}")
    return value


PostComment = Literal['items_found', 'always', 'never']


@dataclass(frozen=True)
class ScanOptions:
    """Validated options for one analysis run."""
    post_comment: PostComment = 'items_found'
    multiline_comments: bool = True
    action_items: Tuple[str, ...] = ('todo', 'fixme', 'bug')
    case_sensitive: bool = False
    add_languages: Tuple[GrammarOverride.Variant, ...] = ()
    ignore_files: Tuple[str, ...] = ()
    additional_lines: int = 0
    always_split_snippets: bool = False


DEFAULT_OPTIONS = ScanOptions()


FIELD_ADAPTERS: Dict[str, TypeAdapter] = {
    'post_comment': TypeAdapter(PostComment),
    'multiline_comments': TypeAdapter(StrictBool),
    'action_items': TypeAdapter(
        Annotated[List[Annotated[StrictStr, Field(min_length=1)]], Field(max_length=15)]
    ),
    'case_sensitive': TypeAdapter(StrictBool),
    'add_languages': TypeAdapter(
        Annotated[
            List[Annotated[List[Optional[StrictStr]], Field(min_length=2, max_length=4)]],
            Field(min_length=1, max_length=10),
        ]
    ),
    'ignore_files': TypeAdapter(
        Annotated[
            List[Annotated[StrictStr, AfterValidator(_check_ignore_pattern)]],
            Field(min_length=1, max_length=7),
        ]
    ),
    'additional_lines': TypeAdapter(Annotated[StrictInt, Field(ge=0, le=10)]),
    'always_split_snippets': TypeAdapter(StrictBool),
}


def validate_field(name: str, raw: Any) -> Optional[Any]:
    """
    Validate a single option value.

    Args:
        name: Option name
        raw: Value as read from the options file

    Returns:
        The validated value converted to its ScanOptions form, or None if
        the value is absent or invalid
    """
    if raw is None:
        return None

    try:
        value = FIELD_ADAPTERS[name].validate_python(raw)
    except ValidationError as e:
        logger.warning(f"Invalid value for option '{name}', using default: {e.error_count()} error(s)")
        return None

    if name == 'action_items':
        return tuple(dict.fromkeys(value))
    if name == 'ignore_files':
        return tuple(value)
    if name == 'add_languages':
        overrides = []
        for entry in value:
            try:
                overrides.append(GrammarOverride.from_sequence(entry))
            except ValueError as e:
                logger.warning(f"Ignoring invalid language override: {e}")
        return tuple(overrides)
    return value


def validate_options(raw: Any) -> ScanOptions:
    """
    Merge raw options with defaults, field by field.

    Args:
        raw: Mapping from the options file; anything else yields defaults

    Returns:
        ScanOptions
    """
    if not isinstance(raw, dict):
        if raw is not None:
            logger.warning(f"Options section must be a mapping, got {type(raw).__name__}; using defaults")
        return DEFAULT_OPTIONS

    values = {}
    for name in FIELD_ADAPTERS:
        value = validate_field(name, raw.get(name))
        values[name] = getattr(DEFAULT_OPTIONS, name) if value is None else value

    unknown = [str(k) for k in raw if k not in FIELD_ADAPTERS]
    if unknown:
        logger.debug(f"Unknown options ignored: {sorted(unknown)}")

    return ScanOptions(**values)


def load_options(yaml_text: Optional[str]) -> ScanOptions:
    """
    Load options from the text of a repository config file.

    Args:
        yaml_text: Contents of `.github/config.yml`, or None if missing

    Returns:
        ScanOptions; defaults when the file is missing or not valid YAML
    """
    if not yaml_text:
        return DEFAULT_OPTIONS

    try:
        document = yaml.safe_load(yaml_text)
    except yaml.YAMLError as e:
        logger.warning(f"Could not parse options file, using defaults: {e}")
        return DEFAULT_OPTIONS

    if not isinstance(document, dict):
        return DEFAULT_OPTIONS

    return validate_options(document.get(OPTIONS_SECTION))
