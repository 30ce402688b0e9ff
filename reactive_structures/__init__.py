"""
Reactive Structures - Observable Sequences With Fine-Grained Change Events

An ordered, mutable sequence that emits a precise change event for every
mutation, plus streams that aggregate changes of the elements themselves and a
unified "anything changed" signal for UI and state-binding layers.
"""

# Change event model
from .events import Added, ChangeEvent, ChangeKind, Removed, apply_change, replay

# Errors
from .exceptions import (
    ElementStreamError,
    EmptyCollectionError,
    IndexOutOfBoundsError,
    ObservableSequenceError,
    SequenceClosedError,
)

# The container
from .sequence import ObservableSequence

# Per-element change capability
from .capability import ObservableObject, ObservableValue, observable_property

# Derived streams
from .aggregator import (
    ElementChange,
    ElementChangeAggregator,
    ElementErrorPolicy,
    element_changes,
)
from .merger import AnyChangeMerger, any_change

__all__ = [
    # Events
    "ChangeEvent",
    "ChangeKind",
    "Added",
    "Removed",
    "apply_change",
    "replay",
    # Container
    "ObservableSequence",
    # Capability
    "ObservableValue",
    "ObservableObject",
    "observable_property",
    # Derived streams
    "ElementChange",
    "ElementChangeAggregator",
    "ElementErrorPolicy",
    "element_changes",
    "AnyChangeMerger",
    "any_change",
    # Exceptions
    "ObservableSequenceError",
    "IndexOutOfBoundsError",
    "EmptyCollectionError",
    "SequenceClosedError",
    "ElementStreamError",
]
