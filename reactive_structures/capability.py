"""
Reactive Structures ObservableValue - Per-Element Change Capability
===================================================================

Elements of an ObservableSequence can opt into per-element change tracking by
exposing a ``property_changed`` stream that emits the name of a property each
time it changes. The sequence itself never looks at what the names mean.

The ``ObservableValue`` protocol is structural: any object with a
``property_changed`` Rx observable satisfies it. ``ObservableObject`` and
``observable_property`` are a ready-made implementation:

```python
class Person(ObservableObject):
    name = observable_property("")
    age = observable_property(0)

    def __init__(self, name, age):
        super().__init__()
        self.name = name
        self.age = age

arthur = Person("Arthur", 20)
arthur.property_changed.subscribe(print)
arthur.name = "Alec"  # prints "name"
```
"""

import logging
from typing import Any, Generic, Optional, Protocol, TypeVar, overload, runtime_checkable

from rx import operators as ops
from rx.core import Observable
from rx.subject import Subject

T = TypeVar("T")


@runtime_checkable
class ObservableValue(Protocol):
    """
    Protocol for objects that announce their own internal changes.

    ``property_changed`` must emit only after the corresponding change is
    visible to readers of the object.
    """

    @property
    def property_changed(self) -> Observable:
        """Stream of property identifiers, one per internal change."""
        ...


class ObservableObject:
    """
    Base class implementing ObservableValue with a private Subject.

    Subclasses call ``notify_property_changed(name)`` after changing state, or
    declare attributes with ``observable_property`` to have it done for them.
    """

    def __init__(self) -> None:
        self._property_subject: Subject = Subject()
        self._property_changed = self._property_subject.pipe(ops.as_observable())

    @property
    def property_changed(self) -> Observable:
        return self._property_changed

    def notify_property_changed(self, name: str) -> None:
        """Emit ``name`` on ``property_changed``."""
        self._property_subject.on_next(name)

    def close(self) -> None:
        """Complete ``property_changed``; later notifications are dropped."""
        self._property_subject.on_completed()


class observable_property(Generic[T]):
    """
    Descriptor for attributes of an ObservableObject that notify on change.

    The new value is stored first, then ``property_changed`` emits the
    attribute name. Assigning a value equal to the current one does not
    notify.

    Args:
        default: Value returned before the attribute is first assigned.
    """

    def __init__(self, default: Optional[T] = None) -> None:
        self.default = default
        self.name: Optional[str] = None
        self.private_name: Optional[str] = None

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name
        self.private_name = f"_{name}_value"

    @overload
    def __get__(self, instance: None, owner: type) -> "observable_property[T]": ...

    @overload
    def __get__(self, instance: Any, owner: type) -> T: ...

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        return instance.__dict__.get(self.private_name, self.default)

    def __set__(self, instance: ObservableObject, value: T) -> None:
        sentinel = object()
        old = instance.__dict__.get(self.private_name, sentinel)
        instance.__dict__[self.private_name] = value
        if old is sentinel or old != value:
            logging.debug(f"{type(instance).__name__}.{self.name} changed")
            instance.notify_property_changed(self.name)
