# tests/fakes.py

from __future__ import annotations


class FakeClock:
    """
    Deterministic millisecond clock for TaskStore.

    Each call advances by `step_ms`, so creation order == timestamp order.
    """

    def __init__(self, start_ms: int = 1_700_000_000_000, step_ms: int = 1) -> None:
        self.now_ms = start_ms
        self.step_ms = step_ms

    def __call__(self) -> int:
        value = self.now_ms
        self.now_ms += self.step_ms
        return value


class FakeNotifier:
    """Captures notifications for assertions."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def notify(self, text: str) -> None:
        self.messages.append(text)

    @property
    def last(self) -> str | None:
        return self.messages[-1] if self.messages else None
