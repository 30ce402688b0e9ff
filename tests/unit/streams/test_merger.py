"""Unit tests for AnyChangeMerger."""

import pytest

from reactive_structures import (
    AnyChangeMerger,
    ElementErrorPolicy,
    ElementStreamError,
    ObservableSequence,
    any_change,
)
from tests.utils import ManualElement, Person, record


@pytest.mark.unit
@pytest.mark.merger
def test_one_signal_per_structural_event():
    seq = ObservableSequence([ManualElement("a")])
    signals = record(any_change(seq))

    seq.append(ManualElement("b"))
    seq[0] = ManualElement("c")  # Removed + Added

    assert signals.values == [None, None, None]


@pytest.mark.unit
@pytest.mark.merger
def test_one_signal_per_element_change():
    person = Person("Arthur", 20)
    seq = ObservableSequence([person])
    signals = record(any_change(seq))

    person.name = "Alec"
    person.age = 21

    assert signals.values == [None, None]


@pytest.mark.unit
@pytest.mark.merger
def test_total_count_is_sum_of_both_sources():
    """No coalescing: structural and element signals simply add up"""
    a = ManualElement("a")
    seq = ObservableSequence([a])
    structural = record(seq.changed)
    signals = record(any_change(seq))

    b = ManualElement("b")
    seq.append(b)           # 1 structural
    a.fire("p")             # 1 element
    b.fire("q")             # 1 element
    seq.replace_range(0, 1, [])  # 2 structural
    a.fire("ignored")       # a is gone
    b.fire("r")             # 1 element

    assert len(structural) == 3
    assert len(signals) == len(structural) + 3


@pytest.mark.unit
@pytest.mark.merger
def test_dispose_tears_down_both_legs():
    element = ManualElement("a")
    seq = ObservableSequence([element])
    signals = record(AnyChangeMerger(seq))
    assert element.live_subscriptions == 1

    signals.dispose()
    seq.append(ManualElement("b"))
    element.fire("p")

    assert signals.values == []
    assert element.live_subscriptions == 0


@pytest.mark.unit
@pytest.mark.merger
def test_completes_when_sequence_closes():
    element = ManualElement("a")
    seq = ObservableSequence([element])
    signals = record(any_change(seq))

    seq.close()

    assert signals.completed
    assert signals.error is None
    assert element.live_subscriptions == 0


@pytest.mark.unit
@pytest.mark.merger
def test_each_call_builds_a_fresh_stream():
    seq = ObservableSequence()

    assert any_change(seq) is not any_change(seq)


@pytest.mark.unit
@pytest.mark.merger
@pytest.mark.edge_case
def test_element_failure_propagates_under_fail_policy():
    element = ManualElement("a")
    seq = ObservableSequence([element])
    signals = record(any_change(seq))

    element.fail(RuntimeError("boom"))
    seq.append(ManualElement("b"))

    assert isinstance(signals.error, ElementStreamError)
    assert signals.values == []


@pytest.mark.unit
@pytest.mark.merger
@pytest.mark.edge_case
def test_element_failure_is_isolated_when_requested():
    bad, good = ManualElement("bad"), ManualElement("good")
    seq = ObservableSequence([bad, good])
    signals = record(any_change(seq, error_policy=ElementErrorPolicy.ISOLATE))

    bad.fail(RuntimeError("boom"))
    good.fire("p")

    assert signals.error is None
    assert signals.values == [None]
