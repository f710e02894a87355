"""Context store for template variables.

A run uses one active context built by merging the selected named
contexts in order. The merged context is a plain string mapping and is
never modified while the run executes.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping


class ContextDict(dict[str, str]):
    """Active lookup table of context variables for a single run.

    Context instances are expected to be immutable in practice, although
    this is not strictly enforced at the type level.
    """

    @classmethod
    def merge(cls, contexts: 'Iterable[Mapping[str, str]]') -> 'ContextDict':
        """Merge named contexts left to right.

        Later contexts override earlier ones on key collision. Values are
        not validated.

        Args:
            contexts: Ordered contexts to merge.

        Returns:
            A new merged context.
        """
        merged = cls()
        for context in contexts:
            merged.update(context)

        return merged


def merge_contexts(*contexts: 'Mapping[str, str]') -> ContextDict:
    """Merge contexts left to right into a new `ContextDict`."""
    return ContextDict.merge(contexts)
