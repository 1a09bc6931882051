"""Recursive mapping merge.

A single merge primitive used by hash lookups. It is parameterized by
two independent choices: whether the left-hand mapping is updated in
place or copied, and how lists found under the same key are combined.
"""

from copy import deepcopy
from enum import StrEnum
from typing import Any

from hiera.values import MAPPINGS, SEQUENCES


class ListMerge(StrEnum):
    """Strategy for lists found under the same key."""

    #: Concatenate both lists and drop duplicates, keeping first occurrences.
    UNION = 'union'
    #: Take the right-hand list as is.
    REPLACE = 'replace'


def unique(items: list[Any]) -> list[Any]:
    """Remove duplicates while preserving first-occurrence order.

    Items are duplicates only when both their types and values match,
    so `1`, `1.0` and `True` are kept apart. Equality is used rather
    than hashing, so unhashable items such as nested mappings are
    supported.
    """
    result: list[Any] = []
    for item in items:
        if not any(type(seen) is type(item) and seen == item for seen in result):
            result.append(item)

    return result


def deep_merge(left: dict[str, Any], right: dict[str, Any], *,
               mutate: bool = False,
               lists: ListMerge = ListMerge.UNION) -> dict[str, Any]:
    """Recursively merge `right` into `left`.

    Nested mappings present on both sides are merged recursively. Lists
    present on both sides are combined according to `lists`. Any other
    conflict is resolved in favour of `right`.

    Args:
        left: Base mapping.
        right: Mapping whose values take precedence.
        mutate: If true, `left` (and nested mappings within it) is
            updated in place and returned. Otherwise both inputs are
            left untouched and a new mapping is returned.
        lists: How lists under the same key are combined.

    Returns:
        The merged mapping.
    """
    merged = left if mutate else deepcopy(left)
    _merge_into(merged, right, copy=not mutate, lists=lists)

    return merged


def _merge_into(target: dict[str, Any], source: dict[str, Any], *,
                copy: bool, lists: ListMerge) -> None:
    """Merge `source` into `target` in place, copying taken values if asked."""
    for key, value in source.items():
        current = target.get(key)
        if copy:
            value = deepcopy(value)  # noqa: PLW2901

        if isinstance(value, MAPPINGS) and isinstance(current, MAPPINGS):
            _merge_into(current, value, copy=False, lists=lists)
        elif (lists is ListMerge.UNION
              and isinstance(value, SEQUENCES) and isinstance(current, SEQUENCES)):
            target[key] = unique([*current, *value])
        else:
            target[key] = value
