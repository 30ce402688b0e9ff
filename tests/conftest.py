"""
Shared pytest fixtures and configuration for reactive_structures tests.
"""

import pytest

from reactive_structures import ObservableSequence
from tests.utils import Recorder, record


@pytest.fixture
def collection():
    """A two-element sequence, the starting point of most sequence tests."""
    seq = ObservableSequence(["stuff", "things"], name="collection")
    yield seq
    seq.close()


@pytest.fixture
def events(collection) -> Recorder:
    """Recorder subscribed to ``collection.changed``."""
    recorder = record(collection.changed)
    yield recorder
    recorder.dispose()
