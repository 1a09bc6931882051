"""Example backends for hiera tests.

`StaticBackend` answers from an in-memory mapping of data sources
to key/value pairs, which makes lookup order easy to observe.
"""

from typing import TYPE_CHECKING, Any, ClassVar

from hiera.backends import Backend
from hiera.interpolation import parse_answer

if TYPE_CHECKING:
    from collections.abc import Mapping

if TYPE_CHECKING:
    from hiera.engine import Hiera
    from hiera.resolution import ResolutionPolicy
    from hiera.values import Answer


class StaticBackend(Backend):
    """Backend answering from a mapping of sources to data."""

    name = 'static'

    #: Number of instances created, across all engines.
    instances: ClassVar[int] = 0

    data: ClassVar[dict[str, dict[str, Any]]] = {
        'common': {
            'greeting': 'Hello, %{name}!',
            'servers': ['ntp1', 'ntp2'],
        },
        'production': {
            'servers': ['ntp3'],
        },
    }

    def __init__(self, hiera: 'Hiera') -> None:
        super().__init__(hiera)
        type(self).instances += 1

    def lookup(self, key: str, scope: 'Mapping[str, Any]',
               source: str, policy: 'ResolutionPolicy | None') -> 'Answer':
        if key not in (values := self.data.get(source, {})):
            return None

        return parse_answer(values[key], scope)
