"""
Reactive Structures Exceptions
==============================

Every precondition failure of a mutating call is raised synchronously at the
call site, before any state changes and before anything is emitted. Failures
that happen inside a stream (an element's ``property_changed`` erroring) are
reported through the Rx ``on_error`` channel instead.
"""

from typing import Any, Optional


class ObservableSequenceError(Exception):
    """Base class for all reactive_structures errors."""

    pass


class IndexOutOfBoundsError(ObservableSequenceError, IndexError):
    """Index or range outside the valid bounds for the current size."""

    def __init__(self, index: Any, size: int, message: Optional[str] = None):
        self.index = index
        self.size = size
        super().__init__(
            message or f"Index {index} out of bounds for sequence of size {size}"
        )


class EmptyCollectionError(ObservableSequenceError, IndexError):
    """Removal requested from an empty sequence."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"{operation}() called on an empty sequence")


class SequenceClosedError(ObservableSequenceError):
    """Mutation attempted after the sequence was closed."""

    pass


class ElementStreamError(ObservableSequenceError):
    """
    Terminal error of an element-change stream.

    Raised into ``on_error`` when the ``property_changed`` stream of a tracked
    element fails. ``index`` is the element's position in the subscription
    table at the time of the failure, which mirrors its position in the
    sequence. The original exception is chained as ``__cause__``.
    """

    def __init__(self, index: int, element: Any, error: BaseException):
        self.index = index
        self.element = element
        self.error = error
        super().__init__(
            f"property_changed of element at index {index} failed: {error!r}"
        )
        self.__cause__ = error
