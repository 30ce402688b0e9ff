"""
Reactive Structures AnyChangeMerger - Unified "Something Changed" Stream
========================================================================

Merges a sequence's structural ``changed`` stream with an
ElementChangeAggregator over the same sequence into a single stream of
``None`` signals. It is a merge, not a combine-latest: every upstream event
produces exactly one downstream signal, in arrival order, with no coalescing.

Example:
    ```python
    any_change(people).subscribe(lambda _: render(people))

    people.append(bob)   # render: structural change
    bob.age = 30         # render: element change
    ```
"""

from typing import Any

import rx
from rx import operators as ops
from rx.core import Observable

from .aggregator import ElementChangeAggregator, ElementErrorPolicy
from .sequence import ObservableSequence


class AnyChangeMerger(Observable):
    """
    Cold observable emitting ``None`` for every structural or element change.

    Each subscription subscribes to ``sequence.changed`` and to a fresh
    ElementChangeAggregator subscription; disposing it disposes both. The
    stream completes when the sequence is closed and fails when the
    aggregator fails (see ElementErrorPolicy).

    Args:
        sequence: An ObservableSequence whose elements implement
            ObservableValue.
        error_policy: Failure policy forwarded to the aggregator.
    """

    def __init__(
        self,
        sequence: ObservableSequence,
        *,
        error_policy: ElementErrorPolicy = ElementErrorPolicy.FAIL,
    ) -> None:
        super().__init__(self._subscribe_merged)
        self._merged = rx.merge(
            sequence.changed.pipe(ops.map(lambda _: None)),
            ElementChangeAggregator(sequence, error_policy=error_policy).pipe(
                ops.map(lambda _: None)
            ),
        )

    def _subscribe_merged(self, observer: Any, scheduler: Any = None):
        return self._merged.subscribe(observer, scheduler=scheduler)


def any_change(
    sequence: ObservableSequence,
    *,
    error_policy: ElementErrorPolicy = ElementErrorPolicy.FAIL,
) -> AnyChangeMerger:
    """Create a fresh AnyChangeMerger for ``sequence``."""
    return AnyChangeMerger(sequence, error_policy=error_policy)
