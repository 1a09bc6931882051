"""Core type definitions for lookup answers and scope values.

This module defines the value types that flow through the lookup
engine: scope variables supplied by callers, raw answers produced by
backends, and the explicit marker used to declare a scope variable as
present but undefined.
"""

from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any

#: Scalars are atomic answer values that are never traversed
#: by the answer parser.
type Scalar = str | int | float | bool

#: An answer is any value a backend may produce for a key: a scalar,
#: a nested structure of sequences and mappings, or `None`.
type Answer = Scalar | Sequence['Answer'] | Mapping[str, 'Answer'] | None

#: A value in runtime represents any Python object received from
#: callers, YAML or JSON loaders prior to interpolation.
type RuntimeValue = Any

MAPPINGS = (dict,)
SEQUENCES = (list, tuple)


class Undefined(Enum):
    """Marker for scope variables that are present but have no value.

    Scope entries set to `UNDEFINED` (or to `None`) are treated as
    non-values: interpolation falls through to extra data and then
    to an empty string.
    """

    UNDEFINED = 'undefined'

    def __repr__(self) -> str:
        """String representation."""
        return 'UNDEFINED'


UNDEFINED = Undefined.UNDEFINED


def render(value: RuntimeValue) -> str:
    """Render a scope value as interpolated text.

    Booleans are rendered in lowercase so that `False` produces the
    literal `false` expected by data files.

    Args:
        value: Scope or extra data value.

    Returns:
        Text substituted in place of an interpolation token.
    """
    if isinstance(value, bool):
        return 'true' if value else 'false'

    return str(value)
