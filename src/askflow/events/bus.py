"""Minimal multicast primitive and the session answer bus.

A ``Subject`` keeps a list of listeners and forwards ``next`` values to
each of them, followed by exactly one terminal notification: ``error``
or ``complete``. Nothing is replayed: a listener only sees what is
emitted after it subscribed. A subscriber that arrives after
termination is told about the termination straight away.

Usage
-----
::

    from askflow.events import EventBus

    bus = EventBus()
    subscription = bus.subscribe(
        on_next=lambda event: print(event.name, event.answer),
        on_complete=lambda: print("done"),
    )
    bus.next(AnswerEvent("q1", True))
    bus.complete()

    # or, from a coroutine
    async for event in session.events:
        ...
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class AnswerEvent:
    """Notification emitted after an answer is committed.

    Parameters
    ----------
    name:
        The question's dot-path name.
    answer:
        The committed answer value.
    """

    name: str
    answer: Any


@dataclass
class _Listener(Generic[T]):
    on_next: Callable[[T], Any] | None
    on_error: Callable[[BaseException], Any] | None
    on_complete: Callable[[], Any] | None


class Subscription:
    """Handle returned by ``Subject.subscribe``."""

    def __init__(self, subject: "Subject[Any]", listener: _Listener[Any]) -> None:
        self._subject = subject
        self._listener = listener

    @property
    def closed(self) -> bool:
        return self._listener not in self._subject._listeners

    def unsubscribe(self) -> None:
        """Stop receiving notifications. Safe to call more than once."""
        try:
            self._subject._listeners.remove(self._listener)
        except ValueError:
            pass


class Subject(Generic[T]):
    """Multicast stream with ``next`` / ``error`` / ``complete`` signalling."""

    def __init__(self) -> None:
        self._listeners: list[_Listener[T]] = []
        self._error: BaseException | None = None
        self._completed = False

    @property
    def stopped(self) -> bool:
        """True once ``error`` or ``complete`` has been signalled."""
        return self._completed or self._error is not None

    @property
    def observer_count(self) -> int:
        return len(self._listeners)

    def subscribe(
        self,
        on_next: Callable[[T], Any] | None = None,
        on_error: Callable[[BaseException], Any] | None = None,
        on_complete: Callable[[], Any] | None = None,
    ) -> Subscription:
        """Register listener callbacks and return a ``Subscription``."""
        listener: _Listener[T] = _Listener(on_next, on_error, on_complete)
        subscription = Subscription(self, listener)
        if self._error is not None:
            self._call(on_error, self._error)
        elif self._completed:
            self._call(on_complete)
        else:
            self._listeners.append(listener)
        return subscription

    def next(self, value: T) -> None:
        if self.stopped:
            logger.debug("Ignoring value emitted after termination: %r", value)
            return
        for listener in list(self._listeners):
            self._call(listener.on_next, value)

    def error(self, exc: BaseException) -> None:
        if self.stopped:
            return
        self._error = exc
        listeners, self._listeners = self._listeners, []
        for listener in listeners:
            self._call(listener.on_error, exc)

    def complete(self) -> None:
        if self.stopped:
            return
        self._completed = True
        listeners, self._listeners = self._listeners, []
        for listener in listeners:
            self._call(listener.on_complete)

    @staticmethod
    def _call(callback: Callable[..., Any] | None, *args: Any) -> None:
        if callback is None:
            return
        try:
            callback(*args)
        except Exception:
            logger.exception("Subscriber callback %r raised; continuing.", callback)

    def __aiter__(self) -> AsyncIterator[T]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[T]:
        queue: asyncio.Queue[tuple[str, Any]] = asyncio.Queue()
        subscription = self.subscribe(
            on_next=lambda value: queue.put_nowait(("next", value)),
            on_error=lambda exc: queue.put_nowait(("error", exc)),
            on_complete=lambda: queue.put_nowait(("complete", None)),
        )
        try:
            while True:
                kind, item = await queue.get()
                if kind == "complete":
                    return
                if kind == "error":
                    raise item
                yield item
        finally:
            subscription.unsubscribe()


class EventBus(Subject[AnswerEvent]):
    """Live stream of committed answers for one session."""

    def __repr__(self) -> str:
        return f"EventBus(observers={self.observer_count}, stopped={self.stopped})"
