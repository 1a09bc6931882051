"""Name patterns and validated identifiers.

This module defines the interpolation token pattern and the
strongly-typed aliases used when validating configuration.
"""

from re import ASCII
from re import compile as regexp
from typing import Annotated

from pydantic import Field

#: Base pattern for backend identifiers.
#: Identifiers must start with a letter and may contain letters, digits, or underscores
_NAME_PATTERN = r'[a-zA-Z][\w]*'

#: Compiled pattern for interpolation tokens.
#: The token content is captured verbatim, including surrounding whitespace.
TOKEN_PATTERN = regexp(r'%\{(?P<key>[^}]*)\}')

#: Compiled pattern for backend identifiers
BACKEND_PATTERN = regexp(
    rf'^(?P<name>{_NAME_PATTERN})$',
    flags=ASCII,
)

#: Default hierarchy level used when nothing else resolves.
DEFAULT_SOURCE = 'common'


BackendName = Annotated[
    str, Field(
        pattern=rf'^{_NAME_PATTERN}$',
        title='Backend identifier',
        description=(
            'Name of a registered backend queried during lookups. '
            'Backend identifiers must start with a letter and may contain '
            'letters, digits, or underscores. '
            'Names are restricted to ASCII characters.'
        ),
        examples=[
            'yaml',
            'json',
        ],
    ),
]

HierarchyLevel = Annotated[
    str, Field(
        title='Hierarchy level',
        description=(
            'Template naming a data source. '
            'May contain interpolation tokens resolved against the '
            'lookup scope, for example `%{environment}`.'
        ),
        examples=[
            'common',
            'nodes/%{fqdn}',
        ],
    ),
]
