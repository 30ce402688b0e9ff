"""
Memory testing utilities for reactive structures.

These utilities help verify that sequences and derived streams release their
resources once nothing references them any more.

Examples:
    >>> from tests.utils.memory_utils import assert_cleaned_up
    >>> seq = ObservableSequence([1, 2, 3])
    >>> seq_ref = weakref.ref(seq)
    >>> del seq
    >>> assert_cleaned_up(seq_ref)
"""

import gc
import weakref


def assert_cleaned_up(
    obj_ref: weakref.ref, description: str = "Object should be cleaned up"
) -> None:
    """Assert that the object behind a weak reference gets garbage collected.

    Args:
        obj_ref: Weak reference to an object the caller no longer holds
        description: Custom description for the assertion failure
    """
    gc.collect()

    assert obj_ref() is None, f"{description}: object was not cleaned up"
