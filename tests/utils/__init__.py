"""
Test utilities for reactive_structures.

Shared element types, stream recorders and cleanup assertions used across
the unit and integration suites.
"""

from .elements import FailedElement, ManualElement, Person
from .memory_utils import assert_cleaned_up
from .recorders import Recorder, record

__all__ = [
    "assert_cleaned_up",
    "FailedElement",
    "ManualElement",
    "Person",
    "Recorder",
    "record",
]
