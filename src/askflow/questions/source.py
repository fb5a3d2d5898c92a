"""Question source normalization.

A session accepts its questions in several shapes:

- a single ``Question`` or a single question mapping;
- an ordered sequence (list, tuple, or any other iterable) of questions;
- a mapping of ``name -> question``, walked in declaration order, with
  each key injected as the question's ``name`` when it has none;
- a push-based ``QuestionStream`` or any async iterable, consumed one
  item at a time in arrival order.

Static sources are converted to a list up front so that malformed
questions and unknown prompt types are reported before the session
touches its transport.
"""
from __future__ import annotations

import asyncio
import logging
from collections import deque
from collections.abc import AsyncIterable, AsyncIterator, Iterable, Mapping
from typing import Any

from askflow.errors import ConfigurationError, StreamOverflowError
from askflow.events.bus import Subject
from askflow.questions.question import Question

logger = logging.getLogger(__name__)


class QuestionStream(Subject[Any]):
    """Push-based question source.

    Producers push each question, then signal exactly one of
    ``complete()`` or ``error(exc)``. A session subscribes when it is
    created, so questions pushed before the session exists are not seen.
    Push from the thread running the session's event loop.

    At most one pushed question may wait for the session at a time.
    ``await put(question)`` waits for room and returns once the session
    has pulled the question; ``next(question)`` never waits and raises
    ``StreamOverflowError`` when a question is already pending.

    Example
    -------
    ::

        stream = QuestionStream()
        session = prompt(stream)

        async def produce():
            await stream.put({"type": "confirm", "name": "q1"})
            await stream.put({"type": "confirm", "name": "q2"})
            stream.complete()

        producer = asyncio.ensure_future(produce())
        answers = await session
    """

    def __init__(self) -> None:
        super().__init__()
        self._readers: list[StreamReader] = []
        self._put_lock = asyncio.Lock()

    @property
    def pending(self) -> int:
        """Number of pushed questions no session has pulled yet."""
        return max((reader.pending for reader in self._readers), default=0)

    def next(self, value: Any) -> None:
        if not self.stopped and self.pending:
            raise StreamOverflowError(
                f"Cannot push {value!r}: a question is still waiting to be "
                "asked. Use 'await stream.put(question)' to wait for room."
            )
        super().next(value)

    async def put(self, question: Any) -> None:
        """Push ``question`` once there is room, then wait until it is pulled."""
        async with self._put_lock:
            await self._drained()
            self.next(question)
            await self._drained()

    async def _drained(self) -> None:
        for reader in list(self._readers):
            await reader.drained()

    def __repr__(self) -> str:
        return (
            f"QuestionStream(observers={self.observer_count}, "
            f"pending={self.pending}, stopped={self.stopped})"
        )


class StreamReader:
    """Async iterator over the questions pushed into a ``Subject``.

    The reader subscribes immediately and holds at most one question the
    consumer has not pulled. A second push while one is waiting records a
    ``StreamOverflowError``, raised once the waiting question is consumed.
    """

    def __init__(self, subject: Subject[Any]) -> None:
        self._items: deque[Any] = deque()
        self._error: BaseException | None = None
        self._done = False
        self._closed = False
        self._waiter: asyncio.Future[None] | None = None
        self._drained_waiter: asyncio.Future[None] | None = None
        self._stream = subject if isinstance(subject, QuestionStream) else None
        if self._stream is not None:
            self._stream._readers.append(self)
        self._subscription = subject.subscribe(
            on_next=self._on_next,
            on_error=self._on_error,
            on_complete=self._on_complete,
        )

    @property
    def pending(self) -> int:
        return len(self._items)

    def _wake(self) -> None:
        if self._waiter is not None and not self._waiter.done():
            self._waiter.set_result(None)

    def _release(self) -> None:
        if self._drained_waiter is not None and not self._drained_waiter.done():
            self._drained_waiter.set_result(None)

    def _on_next(self, item: Any) -> None:
        if self._items:
            logger.debug("Question %r pushed while another is pending", item)
            if self._error is None:
                self._error = StreamOverflowError(
                    f"Question {item!r} was pushed while another question "
                    "was still waiting to be asked"
                )
            self._subscription.unsubscribe()
        else:
            self._items.append(item)
        self._wake()

    def _on_error(self, exc: BaseException) -> None:
        if self._error is None:
            self._error = exc
        self._wake()

    def _on_complete(self) -> None:
        self._done = True
        self._wake()

    async def drained(self) -> None:
        """Wait until no pushed question is waiting to be pulled."""
        while self._items and not self._closed:
            if self._drained_waiter is None or self._drained_waiter.done():
                self._drained_waiter = asyncio.get_running_loop().create_future()
            await self._drained_waiter

    def __aiter__(self) -> "StreamReader":
        return self

    async def __anext__(self) -> Any:
        while not self._items:
            if self._error is not None:
                raise self._error
            if self._done or self._closed:
                raise StopAsyncIteration
            self._waiter = asyncio.get_running_loop().create_future()
            await self._waiter
            self._waiter = None
        item = self._items.popleft()
        self._release()
        return item

    def close(self) -> None:
        """Stop listening to the subject and drop any unpulled question."""
        self._closed = True
        self._items.clear()
        self._subscription.unsubscribe()
        if self._stream is not None and self in self._stream._readers:
            self._stream._readers.remove(self)
        self._release()
        self._wake()

    async def aclose(self) -> None:
        self.close()


def _is_single_question(source: Mapping[str, Any]) -> bool:
    # A mapping of questions has only mapping/Question values.
    if not source:
        return False
    return not all(isinstance(value, (Mapping, Question)) for value in source.values())


def normalize_source(source: Any) -> list[Question] | AsyncIterator[Any]:
    """Turn any accepted source shape into a list or an async iterator.

    Returns
    -------
    list[Question] | AsyncIterator[Any]
        A list of validated questions for static sources; an async
        iterator of raw items for push-based and async sources. Raw
        items must still be passed through ``Question.coerce``.

    Raises
    ------
    ConfigurationError
        If the source has an unsupported shape or holds a malformed
        question.
    """
    if isinstance(source, Subject):
        return StreamReader(source)
    if isinstance(source, AsyncIterable):
        return aiter(source)
    if isinstance(source, Question):
        return [source]
    if isinstance(source, Mapping):
        if _is_single_question(source):
            return [Question.from_mapping(source)]
        return [Question.coerce(item, name=str(key)) for key, item in source.items()]
    if isinstance(source, Iterable) and not isinstance(source, (str, bytes)):
        return [Question.coerce(item) for item in source]
    raise ConfigurationError(
        f"Unsupported question source {type(source).__name__!r}: expected a "
        "sequence, a mapping, a QuestionStream or an async iterable"
    )
