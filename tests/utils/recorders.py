"""Observer that records everything an Rx stream delivers."""

from typing import Any, List, Optional


class Recorder:
    """Collects on_next values, the terminal error and completion of a stream."""

    def __init__(self) -> None:
        self.values: List[Any] = []
        self.error: Optional[BaseException] = None
        self.completed = False
        self.subscription: Any = None

    def on_next(self, value: Any) -> None:
        self.values.append(value)

    def on_error(self, error: BaseException) -> None:
        self.error = error

    def on_completed(self) -> None:
        self.completed = True

    def dispose(self) -> None:
        self.subscription.dispose()

    def clear(self) -> None:
        self.values.clear()

    def __len__(self) -> int:
        return len(self.values)


def record(stream: Any) -> Recorder:
    """Subscribe a fresh Recorder to ``stream`` and return it."""
    recorder = Recorder()
    recorder.subscription = stream.subscribe(
        on_next=recorder.on_next,
        on_error=recorder.on_error,
        on_completed=recorder.on_completed,
    )
    return recorder
