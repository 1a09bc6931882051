"""Hierarchy level resolution.

Turns hierarchy templates into concrete data source names by
interpolating them against the lookup scope.
"""

from typing import TYPE_CHECKING

from hiera.interpolation import resolve_string
from hiera.names import DEFAULT_SOURCE

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping, Sequence

if TYPE_CHECKING:
    from hiera.values import RuntimeValue


def datasources(scope: 'Mapping[str, RuntimeValue] | None',
                override: str | None = None,
                hierarchy: 'Sequence[str] | str | None' = None) -> 'Iterator[str]':
    """Yield data source names, most specific first.

    Levels are interpolated with the scope only; levels resolving to an
    empty string are skipped. When nothing survives, the default
    `common` source is yielded.

    Args:
        scope: Variables used to interpolate level templates.
        override: Optional level checked before the hierarchy.
        hierarchy: Level templates. A single string is one level;
            `None` or an empty hierarchy falls back to `common`.

    Yields:
        Resolved data source names.

    Raises:
        InterpolationLoopError: If a level template loops.
    """
    if isinstance(hierarchy, str):
        hierarchy = [hierarchy]

    levels = list(hierarchy or (DEFAULT_SOURCE,))
    if override is not None:
        levels.insert(0, override)

    emitted = False
    for level in levels:
        source = resolve_string(level, scope)
        if source == '':
            continue
        emitted = True
        yield source

    if not emitted:
        yield DEFAULT_SOURCE
