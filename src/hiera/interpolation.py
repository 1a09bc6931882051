"""String and answer interpolation.

This module resolves `%{key}` tokens against a lookup scope. It
provides:

- a tokenizer splitting text into literal and placeholder segments;
- recursive string resolution with interpolation loop detection;
- deep interpolation of nested answers, including mapping keys.

Token contents are used verbatim as scope keys. No whitespace is
trimmed and no namespace prefix (`::`) is stripped on a failed lookup.
"""

from typing import TYPE_CHECKING, NamedTuple

from hiera.errors import InterpolationLoopError
from hiera.names import TOKEN_PATTERN
from hiera.scope import Missing, Scope
from hiera.values import MAPPINGS, SEQUENCES, render

if TYPE_CHECKING:
    from collections.abc import Mapping

if TYPE_CHECKING:
    from hiera.values import RuntimeValue


class Literal(NamedTuple):
    """Verbatim text between interpolation tokens."""

    text: str


class Placeholder(NamedTuple):
    """An interpolation token referencing a scope variable."""

    key: str


type Segment = Literal | Placeholder


def tokenize(text: str) -> list[Segment]:
    """Split text into literal and placeholder segments.

    Args:
        text: Text possibly containing `%{...}` tokens.

    Returns:
        Segments in source order. Empty literals are omitted.
    """
    segments: list[Segment] = []
    position = 0

    for match in TOKEN_PATTERN.finditer(text):
        if match.start() > position:
            segments.append(Literal(text[position:match.start()]))
        segments.append(Placeholder(match.group('key')))
        position = match.end()

    if position < len(text):
        segments.append(Literal(text[position:]))

    return segments


def _first_key(segments: list[Segment]) -> str | None:
    """Return the key of the first placeholder, if any."""
    for segment in segments:
        if isinstance(segment, Placeholder):
            return segment.key

    return None


def _substitute(key: str, scope: Scope, extra_data: Scope) -> str:
    """Resolve a single token key.

    The scope is consulted first, then extra data. Missing and
    undefined values in both produce an empty string.
    """
    for source in (scope, extra_data):
        fetched = source.fetch(key)
        if not isinstance(fetched, Missing):
            return render(fetched.value)

    return ''


def resolve_string(text: 'RuntimeValue',
                   scope: 'Mapping[str, RuntimeValue] | None' = None,
                   extra_data: 'Mapping[str, RuntimeValue] | None' = None) -> 'RuntimeValue':
    """Interpolate all tokens in a string.

    Every pass substitutes all tokens in the current text. If the
    result still contains tokens another pass is made. The key of the
    first token of each pass is recorded; meeting a recorded key again
    means the substitutions can never settle.

    Args:
        text: Value to interpolate. Non-string values are returned as is.
        scope: Primary variable context.
        extra_data: Fallback variables, used when the scope has no value.

    Returns:
        The interpolated string, or the original object when it is not
        a string or contains no tokens.

    Raises:
        InterpolationLoopError: If recursive interpolation loops.
    """
    if not isinstance(text, str):
        return text

    segments = tokenize(text)
    key = _first_key(segments)
    if key is None:
        return text

    scope = Scope.wrap(scope)
    extra_data = Scope.wrap(extra_data)
    visited: dict[str, None] = {}

    while key is not None:
        if key in visited:
            raise InterpolationLoopError(list(visited))
        visited[key] = None

        text = ''.join(
            segment.text
            if isinstance(segment, Literal)
            else _substitute(segment.key, scope, extra_data)
            for segment in segments
        )
        segments = tokenize(text)
        key = _first_key(segments)

    return text


def parse_answer(data: 'RuntimeValue',
                 scope: 'Mapping[str, RuntimeValue] | None' = None,
                 extra_data: 'Mapping[str, RuntimeValue] | None' = None) -> 'RuntimeValue':
    """Recursively interpolate every string in an answer.

    Args:
        data: Answer to interpolate.
        scope: Primary variable context.
        extra_data: Fallback variables.

    Returns:
        A value of the same shape: strings are interpolated, sequences
        are rebuilt as lists element by element, mappings are rebuilt
        with both keys and values interpolated, and all other values
        are returned unchanged.

    Raises:
        InterpolationLoopError: If recursive interpolation loops.
    """
    if isinstance(data, str):
        return resolve_string(data, scope, extra_data)

    scope = Scope.wrap(scope)
    extra_data = Scope.wrap(extra_data)

    if isinstance(data, MAPPINGS):
        return {
            parse_answer(key, scope, extra_data): parse_answer(item, scope, extra_data)
            for key, item in data.items()
        }

    if isinstance(data, SEQUENCES):
        return [
            parse_answer(item, scope, extra_data)
            for item in data
        ]

    return data
