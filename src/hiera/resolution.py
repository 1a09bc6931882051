"""Answer post-processing and merge strategy selection.

This module defines the resolution policies used to combine backend
answers and the configurable behaviors used when merging mapping
answers during hash lookups.
"""

from enum import StrEnum
from typing import TYPE_CHECKING, Any

from hiera.merge import ListMerge, deep_merge, unique
from hiera.values import SEQUENCES

if TYPE_CHECKING:
    from hiera.values import Answer


class ResolutionPolicy(StrEnum):
    """Strategy for combining answers from several sources.

    An unset policy (`None`) behaves as `PRIORITY`.
    """

    #: First answer found wins.
    PRIORITY = 'priority'
    #: Answers from all sources are concatenated into one list.
    ARRAY = 'array'
    #: Mapping answers from all sources are merged.
    HASH = 'hash'

    @classmethod
    def coerce(cls, value: 'ResolutionPolicy | str | None') -> 'ResolutionPolicy | None':
        """Convert a policy name into a member, keeping `None` as unset."""
        if value is None:
            return None

        return cls(value)


class MergeBehavior(StrEnum):
    """Configured strategy for merging mapping answers."""

    #: Top-level merge, nested values are replaced wholesale.
    NATIVE = 'native'
    #: Recursive merge producing a new mapping.
    DEEP = 'deep'
    #: Recursive merge updating the left-hand mapping in place.
    DEEPER = 'deeper'


def resolve_answer(answer: 'Answer', policy: ResolutionPolicy | str | None) -> 'Answer':
    """Post-process an accumulated answer.

    Array answers are flattened by one level and deduplicated, keeping
    first occurrences. A single non-sequence answer is treated as a
    one-element array. Every other policy returns the answer unchanged.

    Args:
        answer: Accumulated answer.
        policy: Resolution policy of the lookup.

    Returns:
        The processed answer.
    """
    if ResolutionPolicy.coerce(policy) is not ResolutionPolicy.ARRAY:
        return answer

    if answer is None:
        answer = []
    elif not isinstance(answer, SEQUENCES):
        answer = [answer]

    flattened: list[Any] = []
    for item in answer:
        if isinstance(item, SEQUENCES):
            flattened.extend(item)
        else:
            flattened.append(item)

    return unique(flattened)


def merge_answer(left: dict[str, Any], right: dict[str, Any],
                 behavior: MergeBehavior | str = MergeBehavior.NATIVE) -> dict[str, Any]:
    """Merge two mapping answers, `right` taking precedence.

    Args:
        left: Base mapping. Updated in place by `DEEPER` merges.
        right: Mapping whose values win on conflicting keys.
        behavior: Configured merge behavior.

    Returns:
        The merged mapping.
    """
    match MergeBehavior(behavior):
        case MergeBehavior.DEEP:
            return deep_merge(left, right, lists=ListMerge.UNION)
        case MergeBehavior.DEEPER:
            return deep_merge(left, right, mutate=True, lists=ListMerge.UNION)
        case _:
            return {**left, **right}
