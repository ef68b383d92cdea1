"""Shared helpers for tests."""

from typing import Any

from mysqlkit import PoolObserver


class RecordingObserver(PoolObserver):
    """Observer keeping the names of the events it receives."""

    def __init__(self) -> None:
        self.events: list[str] = []
        self.errors: list[BaseException] = []

    def on_connection(self, connection: Any) -> None:
        self.events.append("connection")

    def on_acquire(self, connection: Any) -> None:
        self.events.append("acquire")

    def on_release(self, connection: Any) -> None:
        self.events.append("release")

    def on_enqueue(self) -> None:
        self.events.append("enqueue")

    def on_error(self, error: BaseException) -> None:
        self.events.append("error")
        self.errors.append(error)
