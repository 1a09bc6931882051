"""Scope variable resolution for interpolation.

This module defines the tri-state result of a scope lookup and a
scope mapping able to tell apart missing variables, variables that
are present but undefined, and real values (including `False`).
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from hiera.values import UNDEFINED

if TYPE_CHECKING:
    from collections.abc import Mapping

if TYPE_CHECKING:
    from hiera.values import RuntimeValue


@dataclass(frozen=True, slots=True)
class Present:
    """A scope variable that holds a real value."""

    value: 'RuntimeValue'


class Missing(Enum):
    """A scope variable that holds no usable value."""

    #: The key is not in the scope at all.
    ABSENT = 'absent'
    #: The key is in the scope but marked as having no value.
    UNDEFINED = 'undefined'


type Fetched = Present | Missing


class Scope(dict[str, 'RuntimeValue']):
    """Variable context used to resolve interpolation tokens.

    Both `None` and the `UNDEFINED` marker declare a variable as
    present but undefined. Any other value, including `False` and
    empty strings, is a real value.
    """

    def fetch(self, key: str) -> Fetched:
        """Look up a variable by its exact name.

        Args:
            key: Variable name as written inside the token.

        Returns:
            `Present` with the value, or the reason it is missing.
        """
        if key not in self:
            return Missing.ABSENT

        value = self[key]
        if value is None or value is UNDEFINED:
            return Missing.UNDEFINED

        return Present(value)

    @classmethod
    def wrap(cls, values: 'Mapping[str, RuntimeValue] | None') -> 'Scope':
        """Coerce a caller-supplied mapping into a scope.

        Existing scopes are returned as is, without copying.
        """
        if isinstance(values, cls):
            return values

        return cls(values or {})
