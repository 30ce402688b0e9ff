"""
Reactive Structures ObservableSequence - List-Like Container With Change Events
===============================================================================

This module provides ObservableSequence, an ordered, indexable, mutable
container that publishes a change event for every mutation on its ``changed``
stream.

Event Semantics
---------------

Each mutating call translates into the smallest set of events that describes
it (see ``events.py`` for the event model):

- ``append``, ``insert``, ``append_all`` emit a single ``Added``.
- ``remove_at``, ``remove_first``, ``remove_last``, ``pop_last``,
  ``remove_all``, ``remove_range`` emit a single ``Removed`` whose range
  indexes the pre-removal sequence.
- ``set``, ``replace_range`` and subscript assignment emit a ``Removed``
  followed by an ``Added`` at the same start index.

A mutation with no effect (clearing an empty sequence, appending an empty
batch) emits nothing. A mutation that fails its precondition raises before the
storage is touched and emits nothing.

Delivery
--------

Events are delivered synchronously, before the mutating call returns, and
only after the backing storage reached its new state, so a handler reading the
sequence always sees post-mutation content. A handler that mutates the
sequence while an event is being delivered has its events queued behind the
one in flight; every subscriber therefore observes the same event order.

Example:
    ```python
    from reactive_structures import ObservableSequence

    names = ObservableSequence(["stuff", "things"])
    names.changed.subscribe(print)

    names.append("item")       # Added([2, 3), ['item'])
    names[0] = "other"         # Removed([0, 1), ['stuff'])
                               # Added([0, 1), ['other'])
    names.remove_all()         # Removed([0, 3), ['other', 'things', 'item'])
    ```
"""

import logging
import operator
import weakref
from collections import deque
from typing import (
    Any,
    Deque,
    Generic,
    Iterable,
    Iterator,
    List,
    Optional,
    Tuple,
    TypeVar,
    Union,
    overload,
)

from rx import operators as ops
from rx.core import Observable
from rx.subject import Subject

from .events import Added, ChangeEvent, Removed
from .exceptions import (
    EmptyCollectionError,
    IndexOutOfBoundsError,
    SequenceClosedError,
)

T = TypeVar("T")


def _complete_channel(subject: Subject, name: str) -> None:
    """Complete the change channel; runs once, on close() or at collection."""
    logging.debug(f"Completing change channel of sequence '{name}'")
    subject.on_completed()


class ObservableSequence(Generic[T]):
    """
    An ordered, mutable sequence that emits a change event on every mutation.

    The sequence owns its backing list exclusively: the constructor copies the
    initial iterable and reads hand out copies, never the list itself.

    Args:
        iterable: Initial contents, copied in order.
        name: Optional label used in reprs and log records.
    """

    def __init__(self, iterable: Iterable[T] = (), *, name: Optional[str] = None):
        self._items: List[T] = list(iterable)
        self._name = name or "<unnamed>"

        self._subject: Subject = Subject()
        self._changed: Observable = self._subject.pipe(ops.as_observable())

        # Breadth-first delivery queue for re-entrant mutations
        self._pending: Deque[ChangeEvent[T]] = deque()
        self._delivering = False

        self._finalizer = weakref.finalize(
            self, _complete_channel, self._subject, self._name
        )

    # ------------------------------------------------------------------
    # Stream & lifecycle
    # ------------------------------------------------------------------

    @property
    def changed(self) -> Observable:
        """Multicast stream of ChangeEvent, completed when the sequence closes."""
        return self._changed

    @property
    def name(self) -> str:
        return self._name

    @property
    def closed(self) -> bool:
        return not self._finalizer.alive

    def close(self) -> None:
        """
        Complete the ``changed`` stream.

        Live subscribers receive ``on_completed``; later subscribers complete
        immediately. Reads keep working, mutations raise SequenceClosedError.
        Closing twice is a no-op.
        """
        self._finalizer()

    def __enter__(self) -> "ObservableSequence[T]":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def _check_open(self) -> None:
        if self.closed:
            raise SequenceClosedError(f"Sequence '{self._name}' is closed")

    def _publish(self, *events: ChangeEvent[T]) -> None:
        self._pending.extend(events)
        if self._delivering:
            return

        self._delivering = True
        try:
            while self._pending:
                event = self._pending.popleft()
                logging.debug(f"Sequence '{self._name}' publishing {event!r}")
                self._subject.on_next(event)
        except Exception:
            # A failing handler aborts the remaining queued deliveries
            self._pending.clear()
            raise
        finally:
            self._delivering = False

    # ------------------------------------------------------------------
    # Index validation
    # ------------------------------------------------------------------

    def _check_index(self, index: int) -> int:
        """Validate ``0 <= index < count``."""
        index = operator.index(index)
        if not 0 <= index < len(self._items):
            raise IndexOutOfBoundsError(index, len(self._items))
        return index

    def _normalize_index(self, index: int) -> int:
        """Resolve a negative subscript the way list does, then validate."""
        index = operator.index(index)
        size = len(self._items)
        if -size <= index < 0:
            index += size
        if not 0 <= index < size:
            raise IndexOutOfBoundsError(index, size)
        return index

    def _check_range(self, start: int, end: int) -> Tuple[int, int]:
        """Validate ``0 <= start <= end <= count``."""
        start, end = operator.index(start), operator.index(end)
        if not 0 <= start <= end <= len(self._items):
            raise IndexOutOfBoundsError(
                (start, end),
                len(self._items),
                f"Range [{start}, {end}) out of bounds for sequence of size {len(self._items)}",
            )
        return start, end

    def _slice_bounds(self, key: slice) -> Tuple[int, int]:
        start, stop, step = key.indices(len(self._items))
        if step != 1:
            raise ValueError("ObservableSequence only supports contiguous slices")
        return start, max(start, stop)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def count(self) -> int:
        return len(self._items)

    def at(self, index: int) -> T:
        """Return the element at ``index``; ``0 <= index < count`` is required."""
        return self._items[self._check_index(index)]

    @property
    def first(self) -> Optional[T]:
        """The first element, or None when the sequence is empty."""
        return self._items[0] if self._items else None

    @property
    def last(self) -> Optional[T]:
        """The last element, or None when the sequence is empty."""
        return self._items[-1] if self._items else None

    def to_list(self) -> List[T]:
        return list(self._items)

    def snapshot(self) -> List[T]:
        """
        Contents as seen by a subscriber joining ``changed`` right now.

        Outside delivery this equals ``to_list()``. While an event is being
        delivered, mutations queued behind it are already applied to the
        storage but not yet published; they are undone here so that the
        snapshot followed by the events still to come yields the current
        contents exactly once.
        """
        items = list(self._items)
        for event in reversed(self._pending):
            if isinstance(event, Added):
                del items[event.start : event.end]
            else:
                items[event.start : event.start] = event.elements
        return items

    @overload
    def __getitem__(self, index: int) -> T: ...

    @overload
    def __getitem__(self, index: slice) -> List[T]: ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            return self._items[index]
        return self._items[self._normalize_index(index)]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __reversed__(self) -> Iterator[T]:
        return reversed(self._items)

    def __contains__(self, value: Any) -> bool:
        return value in self._items

    def __bool__(self) -> bool:
        return bool(self._items)

    def index(self, value: Any, start: int = 0, stop: Optional[int] = None) -> int:
        if stop is None:
            return self._items.index(value, start)
        return self._items.index(value, start, stop)

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, ObservableSequence):
            return self._items == other._items
        if isinstance(other, (list, tuple)):
            return self._items == list(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if self._name == "<unnamed>":
            return f"ObservableSequence({self._items!r})"
        return f"ObservableSequence({self._items!r}, name={self._name!r})"

    # ------------------------------------------------------------------
    # Insertion
    # ------------------------------------------------------------------

    def append(self, element: T) -> None:
        """Insert ``element`` at the end. Emits ``Added([count-1, count))``."""
        self._check_open()
        self._items.append(element)
        self._publish(Added(len(self._items) - 1, (element,)))

    def insert(self, index: int, element: T) -> None:
        """
        Insert ``element`` before position ``index``.

        Unlike ``list.insert`` the index is not clamped: it must satisfy
        ``0 <= index <= count``.

        Raises:
            IndexOutOfBoundsError: If ``index`` is outside ``[0, count]``.
        """
        self._check_open()
        index = operator.index(index)
        if not 0 <= index <= len(self._items):
            raise IndexOutOfBoundsError(index, len(self._items))
        self._items.insert(index, element)
        self._publish(Added(index, (element,)))

    def append_all(self, elements: Iterable[T]) -> None:
        """Append a batch of elements as a single ``Added`` event."""
        self._check_open()
        batch = tuple(elements)
        if not batch:
            return
        start = len(self._items)
        self._items.extend(batch)
        self._publish(Added(start, batch))

    extend = append_all

    def __iadd__(self, elements: Iterable[T]) -> "ObservableSequence[T]":
        self.append_all(elements)
        return self

    # ------------------------------------------------------------------
    # Removal
    # ------------------------------------------------------------------

    def remove_at(self, index: int) -> T:
        """
        Remove and return the element at ``index``.

        Emits ``Removed([index, index+1))`` using the pre-removal index.

        Raises:
            IndexOutOfBoundsError: If ``index`` is outside ``[0, count)``.
        """
        self._check_open()
        index = self._check_index(index)
        element = self._items.pop(index)
        self._publish(Removed(index, (element,)))
        return element

    def remove_first(self) -> T:
        """Remove the first element. Raises EmptyCollectionError when empty."""
        self._check_open()
        if not self._items:
            raise EmptyCollectionError("remove_first")
        return self.remove_at(0)

    def remove_last(self) -> T:
        """Remove the last element. Raises EmptyCollectionError when empty."""
        self._check_open()
        if not self._items:
            raise EmptyCollectionError("remove_last")
        return self.remove_at(len(self._items) - 1)

    def pop_last(self) -> Optional[T]:
        """Remove the last element, or return None without emitting when empty."""
        self._check_open()
        if not self._items:
            return None
        return self.remove_last()

    def pop(self, index: int = -1) -> T:
        """``list.pop`` flavour of ``remove_at``; accepts negative indices."""
        self._check_open()
        if not self._items:
            raise EmptyCollectionError("pop")
        return self.remove_at(self._normalize_index(index))

    def remove(self, value: T) -> None:
        """Remove the first occurrence of ``value``; ValueError if absent."""
        self._check_open()
        self.remove_at(self._items.index(value))

    def remove_range(self, start: int, end: int) -> List[T]:
        """
        Remove the elements in ``[start, end)`` and return them.

        Emits one ``Removed`` for the whole range, nothing for an empty range.
        """
        self._check_open()
        start, end = self._check_range(start, end)
        removed = self._items[start:end]
        if not removed:
            return removed
        del self._items[start:end]
        self._publish(Removed(start, tuple(removed)))
        return removed

    def remove_all(self) -> None:
        """
        Empty the sequence with a single ``Removed([0, count))``.

        Clearing an already-empty sequence has no effect and emits nothing.
        """
        self._check_open()
        if not self._items:
            return
        removed = tuple(self._items)
        self._items.clear()
        self._publish(Removed(0, removed))

    clear = remove_all

    # ------------------------------------------------------------------
    # Replacement
    # ------------------------------------------------------------------

    def replace_range(self, start: int, end: int, elements: Iterable[T]) -> None:
        """
        Replace the elements in ``[start, end)`` with ``elements``.

        The storage length changes by ``len(elements) - (end - start)``. Emits
        ``Removed([start, end), old)`` followed by
        ``Added([start, start + len(elements)), elements)``; observers folding
        events must see the removal before the addition. Replacing an empty
        range with nothing has no effect and emits nothing.

        Raises:
            IndexOutOfBoundsError: Unless ``0 <= start <= end <= count``.
        """
        self._check_open()
        start, end = self._check_range(start, end)
        new = tuple(elements)
        old = tuple(self._items[start:end])
        if not old and not new:
            return
        self._items[start:end] = new
        self._publish(Removed(start, old), Added(start, new))

    set_range = replace_range

    def set(self, index: int, value: T) -> None:
        """
        Overwrite the element at ``index``.

        Emits ``Removed([index, index+1), [old])`` then
        ``Added([index, index+1), [value])``.
        """
        self._check_open()
        index = self._check_index(index)
        old = self._items[index]
        self._items[index] = value
        self._publish(Removed(index, (old,)), Added(index, (value,)))

    def reverse(self) -> None:
        """Reverse in place, described as one replacement of the whole sequence."""
        self._check_open()
        if len(self._items) < 2:
            return
        self.replace_range(0, len(self._items), reversed(self._items))

    @overload
    def __setitem__(self, index: int, value: T) -> None: ...

    @overload
    def __setitem__(self, index: slice, value: Iterable[T]) -> None: ...

    def __setitem__(self, index, value):
        if isinstance(index, slice):
            start, end = self._slice_bounds(index)
            self.replace_range(start, end, value)
        else:
            self.set(self._normalize_index(index), value)

    def __delitem__(self, index: Union[int, slice]) -> None:
        if isinstance(index, slice):
            self.remove_range(*self._slice_bounds(index))
        else:
            self.remove_at(self._normalize_index(index))
