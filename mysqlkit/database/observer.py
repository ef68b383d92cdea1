"""Observers notified of connection pool lifecycle events."""

from typing import Any

from mysqlkit.log import get_logger

logger = get_logger(__name__)


class PoolObserver:
    """Base observer; override the hooks of interest.

    ``connection`` arguments are the driver-level (DBAPI) connections the pool
    manages.
    """

    def on_connection(self, connection: Any) -> None:
        """A new physical connection was opened."""

    def on_acquire(self, connection: Any) -> None:
        """A connection was checked out of the pool."""

    def on_release(self, connection: Any) -> None:
        """A connection was returned to the pool."""

    def on_enqueue(self) -> None:
        """An acquire has to wait because every pooled connection is in use."""

    def on_error(self, error: BaseException) -> None:
        """The driver reported an error."""


class LoggingPoolObserver(PoolObserver):
    """Observer writing pool events to the log."""

    def on_connection(self, connection: Any) -> None:
        logger.debug(f"Opened connection {id(connection):#x}")

    def on_acquire(self, connection: Any) -> None:
        logger.debug(f"Acquired connection {id(connection):#x}")

    def on_release(self, connection: Any) -> None:
        logger.debug(f"Released connection {id(connection):#x}")

    def on_enqueue(self) -> None:
        logger.debug("Waiting for a free connection")

    def on_error(self, error: BaseException) -> None:
        logger.debug(f"Driver error: {error}")


class ObserverGroup:
    """Fans events out to registered observers.

    A failing observer is logged and skipped so it cannot break the database
    operation that triggered the event.
    """

    def __init__(self, observers: list[PoolObserver] | None = None) -> None:
        self._observers: list[PoolObserver] = list(observers or [])

    def add(self, observer: PoolObserver) -> None:
        """Register an observer."""
        self._observers.append(observer)

    def remove(self, observer: PoolObserver) -> None:
        """Unregister an observer."""
        self._observers.remove(observer)

    def __len__(self) -> int:
        return len(self._observers)

    def notify(self, event: str, *args: Any) -> None:
        """Call ``on_<event>`` on every observer."""
        for observer in list(self._observers):
            try:
                getattr(observer, f"on_{event}")(*args)
            except Exception as e:
                logger.error(
                    f"Pool observer {type(observer).__name__} failed on {event}: {e}",
                    exc_info=True,
                )
