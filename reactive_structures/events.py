"""
Reactive Structures Change Events
=================================

Every mutation of an ObservableSequence is described by one or two change
events. There are exactly two variants:

- ``Added``: ``elements`` now occupy ``range`` in the post-mutation sequence.
- ``Removed``: ``elements`` occupied ``range`` in the pre-mutation sequence.

Compound operations (replacing a range, assigning to an index) are described
as a ``Removed`` followed by an ``Added`` at the same start index. Folding the
events in order over a snapshot of the sequence reproduces the sequence:

```python
snapshot = list(seq)
seq.changed.subscribe(lambda event: apply_change(snapshot, event))

seq.append("x")
seq[0] = "y"
assert snapshot == list(seq)
```
"""

from dataclasses import dataclass
from enum import Enum
from typing import (
    Any,
    Generic,
    Iterable,
    List,
    MutableSequence,
    Optional,
    Tuple,
    TypeVar,
)

from .exceptions import IndexOutOfBoundsError

T = TypeVar("T")


class ChangeKind(str, Enum):
    """Discriminator of the change event variants."""

    ADDED = "added"
    REMOVED = "removed"

    def __str__(self):
        return self.value


# ============================================================================
# EVENT VARIANTS
# ============================================================================


@dataclass(frozen=True)
class ChangeEvent(Generic[T]):
    """
    A contiguous structural change of a sequence.

    Attributes:
        start: Index of the first affected position.
        elements: The affected elements, in sequence order.

    Two events are equal only when they are the same variant with the same
    start and pairwise-equal elements.
    """

    start: int
    elements: Tuple[T, ...]

    kind = None  # type: Optional[ChangeKind]

    def __post_init__(self):
        if type(self) is ChangeEvent:
            raise TypeError("ChangeEvent is abstract; use Added or Removed")
        if self.start < 0:
            raise ValueError(f"start must be non-negative, got {self.start}")
        if not isinstance(self.elements, tuple):
            object.__setattr__(self, "elements", tuple(self.elements))

    @classmethod
    def of(cls, start: int, elements: Iterable[T]) -> "ChangeEvent[T]":
        """Build an event from any iterable of elements."""
        return cls(start, tuple(elements))

    @property
    def end(self) -> int:
        return self.start + len(self.elements)

    @property
    def range(self) -> range:
        """Half-open index range ``[start, end)`` covered by the event."""
        return range(self.start, self.end)

    def __len__(self) -> int:
        return len(self.elements)

    def single(self) -> Optional[Tuple[T, int]]:
        """Return ``(element, index)`` if the event covers exactly one element."""
        if len(self.elements) == 1:
            return self.elements[0], self.start
        return None

    def inserted_element(self) -> Optional[Tuple[T, int]]:
        """``(element, index)`` for a single-element insert, else None."""
        return None

    def removed_element(self) -> Optional[Tuple[T, int]]:
        """``(element, index)`` for a single-element removal, else None."""
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}([{self.start}, {self.end}), {list(self.elements)!r})"


@dataclass(frozen=True, repr=False)
class Added(ChangeEvent[T]):
    """Elements inserted at ``range`` of the post-mutation sequence."""

    kind = ChangeKind.ADDED

    def inserted_element(self) -> Optional[Tuple[T, int]]:
        return self.single()


@dataclass(frozen=True, repr=False)
class Removed(ChangeEvent[T]):
    """Elements that occupied ``range`` of the pre-mutation sequence."""

    kind = ChangeKind.REMOVED

    def removed_element(self) -> Optional[Tuple[T, int]]:
        return self.single()


# ============================================================================
# FOLDING
# ============================================================================


def apply_change(target: MutableSequence[Any], event: ChangeEvent[Any]) -> None:
    """
    Apply a single change event to ``target`` in place.

    Args:
        target: A snapshot of the sequence as it was before the event.
        event: The event to fold in.

    Raises:
        IndexOutOfBoundsError: If the event range does not fit ``target``.
        ValueError: If a Removed event does not match the snapshot content.
    """
    if isinstance(event, Added):
        if event.start > len(target):
            raise IndexOutOfBoundsError(event.start, len(target))
        target[event.start : event.start] = list(event.elements)
    elif isinstance(event, Removed):
        if event.end > len(target):
            raise IndexOutOfBoundsError(event.range, len(target))
        current = list(target[event.start : event.end])
        if current != list(event.elements):
            raise ValueError(
                f"{event!r} does not match snapshot content {current!r}"
            )
        del target[event.start : event.end]
    else:
        raise TypeError(f"Unknown change event: {event!r}")


def replay(events: Iterable[ChangeEvent[T]], initial: Iterable[T] = ()) -> List[T]:
    """Fold an ordered event log over ``initial`` and return the result."""
    result = list(initial)
    for event in events:
        apply_change(result, event)
    return result
