"""
Reactive Structures ElementChangeAggregator - Per-Element Change Stream
=======================================================================

This module provides ElementChangeAggregator, a cold Rx observable that emits
``ElementChange(element, property)`` whenever any element currently in an
ObservableSequence reports a change on its ``property_changed`` stream.

Membership Tracking
-------------------

Every subscription owns a subscription table that mirrors the sequence
position by position. The table is filled from a snapshot of the sequence at
subscribe time and then kept in step with the ``changed`` stream:

- ``Added([start, end))`` subscribes to each new element and inserts the
  handles at ``start``.
- ``Removed([start, end))`` disposes and deletes the handles at
  ``[start, end)``.

Keying the table by position instead of by value means two equal elements,
or the same object present twice, are tracked per occurrence: removing one
occurrence cancels exactly one subscription.

Failure Handling
----------------

An element whose ``property_changed`` fails is handled per
``ElementErrorPolicy``:

- ``FAIL`` (default): the aggregated stream terminates with an
  ElementStreamError naming the element's position; every internal
  subscription is disposed.
- ``ISOLATE``: the failing element goes quiet and a warning is logged; the
  aggregated stream keeps running.

Example:
    ```python
    people = ObservableSequence([arthur])
    ElementChangeAggregator(people).subscribe(
        lambda change: print(change.element.name, change.property)
    )
    arthur.name = "Alec"    # Alec name
    ```
"""

import logging
import weakref
from enum import Enum
from typing import Any, Callable, List, NamedTuple, Optional

from rx.core import Observable
from rx.disposable import Disposable

from .events import Added, ChangeEvent, Removed
from .exceptions import ElementStreamError
from .sequence import ObservableSequence


class ElementErrorPolicy(str, Enum):
    """What an aggregator does when an element's stream fails."""

    FAIL = "fail"
    ISOLATE = "isolate"

    def __str__(self):
        return self.value


class ElementChange(NamedTuple):
    """One property change reported by a tracked element."""

    element: Any
    property: str


class _Slot:
    """Subscription table entry for one occurrence of an element."""

    __slots__ = ("element", "index_hint", "subscription", "active")

    def __init__(self, element: Any, index_hint: int):
        self.element = element
        # Position the slot is created for, until it is placed in the table
        self.index_hint = index_hint
        self.subscription: Optional[Any] = None
        self.active = True

    def release(self) -> None:
        self.active = False
        if self.subscription is not None:
            self.subscription.dispose()
            self.subscription = None


class _ElementChangeSubscription:
    """Bookkeeping of a single subscription to an ElementChangeAggregator."""

    def __init__(self, observer: Any, error_policy: ElementErrorPolicy, label: str):
        self._observer = observer
        self._error_policy = error_policy
        self._label = label
        self._slots: List[_Slot] = []
        self._changes: Optional[Any] = None
        self._stopped = False

    def start(self, sequence: ObservableSequence) -> Disposable:
        for index, element in enumerate(sequence.snapshot()):
            slot = self._track(element, index)
            if self._stopped:
                slot.release()
                break
            self._slots.append(slot)

        if not self._stopped:
            changes = sequence.changed.subscribe(
                on_next=self._on_change,
                on_error=self._on_sequence_error,
                on_completed=self._on_sequence_completed,
            )
            if self._stopped:
                # Sequence was already closed
                changes.dispose()
            else:
                self._changes = changes

        logging.debug(
            f"Tracking {len(self._slots)} elements of sequence '{self._label}'"
        )
        return Disposable(self.dispose)

    # ------------------------------------------------------------------
    # Subscription table
    # ------------------------------------------------------------------

    def _track(self, element: Any, index: int) -> _Slot:
        """Subscribe to ``element``, which is about to occupy ``index``."""
        slot = _Slot(element, index)
        try:
            subscription = element.property_changed.subscribe(
                on_next=lambda name: self._on_property(slot, name),
                on_error=lambda error: self._on_element_error(slot, error),
                on_completed=lambda: self._on_element_completed(slot),
            )
        except Exception as error:
            self._on_element_error(slot, error, index)
            slot.active = False
            return slot

        if slot.active:
            slot.subscription = subscription
        else:
            # Failed or completed during subscribe
            subscription.dispose()
        return slot

    def _position(self, slot: _Slot) -> int:
        for index, candidate in enumerate(self._slots):
            if candidate is slot:
                return index
        return -1

    def _on_change(self, event: ChangeEvent) -> None:
        if self._stopped:
            return

        if isinstance(event, Added):
            slots = []
            for offset, element in enumerate(event.elements):
                slots.append(self._track(element, event.start + offset))
                if self._stopped:
                    for slot in slots:
                        slot.release()
                    return
            self._slots[event.start : event.start] = slots
        elif isinstance(event, Removed):
            removed = self._slots[event.start : event.end]
            del self._slots[event.start : event.end]
            if len(removed) != len(event.elements) or any(
                slot.element is not element
                for slot, element in zip(removed, event.elements)
            ):
                logging.warning(
                    f"Subscription table of sequence '{self._label}' out of step with {event!r}"
                )
            for slot in removed:
                slot.release()

        logging.debug(
            f"Tracking {len(self._slots)} elements of sequence '{self._label}'"
        )

    # ------------------------------------------------------------------
    # Element callbacks
    # ------------------------------------------------------------------

    def _on_property(self, slot: _Slot, name: str) -> None:
        if self._stopped or not slot.active:
            return
        self._observer.on_next(ElementChange(slot.element, name))

    def _on_element_error(
        self, slot: _Slot, error: Exception, index: Optional[int] = None
    ) -> None:
        if self._stopped or not slot.active:
            return

        if index is None:
            index = self._position(slot)
            if index < 0:
                index = slot.index_hint
        if self._error_policy is ElementErrorPolicy.ISOLATE:
            logging.warning(
                f"Isolating element at index {index} of sequence '{self._label}': {error!r}"
            )
            slot.release()
            return

        self.dispose()
        self._observer.on_error(ElementStreamError(index, slot.element, error))

    def _on_element_completed(self, slot: _Slot) -> None:
        slot.release()

    # ------------------------------------------------------------------
    # Sequence callbacks
    # ------------------------------------------------------------------

    def _on_sequence_error(self, error: Exception) -> None:
        if self._stopped:
            return
        self.dispose()
        self._observer.on_error(error)

    def _on_sequence_completed(self) -> None:
        if self._stopped:
            return
        self.dispose()
        self._observer.on_completed()

    def dispose(self) -> None:
        """Cancel every internal subscription. Idempotent."""
        if self._stopped:
            return
        self._stopped = True

        if self._changes is not None:
            self._changes.dispose()
            self._changes = None

        slots, self._slots = self._slots, []
        for slot in slots:
            slot.release()
        logging.debug(f"Released element subscriptions of sequence '{self._label}'")


class ElementChangeAggregator(Observable):
    """
    Cold observable of ElementChange for every element of a sequence.

    Each subscription builds its own subscription table, so two subscribers
    never share bookkeeping, and disposing one subscription cancels every
    element subscription it created along with its subscription to the
    sequence's ``changed`` stream. The stream completes when the sequence is
    closed.

    The aggregator keeps only a weak reference to the sequence; subscribing
    after the sequence has been collected completes immediately.

    Args:
        sequence: An ObservableSequence whose elements implement
            ObservableValue.
        error_policy: How to react when an element's stream fails.
    """

    def __init__(
        self,
        sequence: ObservableSequence,
        *,
        error_policy: ElementErrorPolicy = ElementErrorPolicy.FAIL,
    ) -> None:
        super().__init__(self._subscribe_table)
        self._sequence_ref: Callable[[], Optional[ObservableSequence]] = weakref.ref(
            sequence
        )
        self._label = sequence.name
        self._error_policy = ElementErrorPolicy(error_policy)

    @property
    def error_policy(self) -> ElementErrorPolicy:
        return self._error_policy

    def _subscribe_table(self, observer: Any, scheduler: Any = None) -> Disposable:
        sequence = self._sequence_ref()
        if sequence is None:
            observer.on_completed()
            return Disposable()

        table = _ElementChangeSubscription(observer, self._error_policy, self._label)
        return table.start(sequence)


def element_changes(
    sequence: ObservableSequence,
    *,
    error_policy: ElementErrorPolicy = ElementErrorPolicy.FAIL,
) -> ElementChangeAggregator:
    """Create a fresh ElementChangeAggregator for ``sequence``."""
    return ElementChangeAggregator(sequence, error_policy=error_policy)
