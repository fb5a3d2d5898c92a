"""Unit tests for askflow.events — Subject semantics and the EventBus."""
from __future__ import annotations

import asyncio
import logging
from typing import Any

import pytest

from askflow.events import AnswerEvent, EventBus, Subject


def _recorder() -> tuple[list[Any], dict[str, Any]]:
    log: list[Any] = []
    callbacks = {
        "on_next": lambda value: log.append(("next", value)),
        "on_error": lambda exc: log.append(("error", exc)),
        "on_complete": lambda: log.append(("complete",)),
    }
    return log, callbacks


class TestSubject:
    def test_multicasts_values_in_order(self) -> None:
        subject: Subject[int] = Subject()
        first, first_callbacks = _recorder()
        second, second_callbacks = _recorder()
        subject.subscribe(**first_callbacks)
        subject.subscribe(**second_callbacks)

        subject.next(1)
        subject.next(2)
        subject.complete()

        expected = [("next", 1), ("next", 2), ("complete",)]
        assert first == expected
        assert second == expected

    def test_no_replay_for_late_subscribers(self) -> None:
        subject: Subject[int] = Subject()
        subject.next(1)
        log, callbacks = _recorder()
        subject.subscribe(**callbacks)
        subject.next(2)
        assert log == [("next", 2)]

    def test_exactly_one_terminal_notification(self) -> None:
        subject: Subject[int] = Subject()
        log, callbacks = _recorder()
        subject.subscribe(**callbacks)
        failure = RuntimeError("x")

        subject.error(failure)
        subject.complete()
        subject.error(RuntimeError("y"))
        subject.next(3)

        assert log == [("error", failure)]
        assert subject.stopped

    def test_subscriber_after_completion_is_told_immediately(self) -> None:
        subject: Subject[int] = Subject()
        subject.complete()
        log, callbacks = _recorder()
        subscription = subject.subscribe(**callbacks)
        assert log == [("complete",)]
        assert subscription.closed

    def test_unsubscribe_stops_notifications(self) -> None:
        subject: Subject[int] = Subject()
        log, callbacks = _recorder()
        subscription = subject.subscribe(**callbacks)
        subscription.unsubscribe()
        subscription.unsubscribe()
        subject.next(1)
        assert log == []
        assert subject.observer_count == 0

    def test_failing_listener_does_not_break_others(self, caplog: pytest.LogCaptureFixture) -> None:
        subject: Subject[int] = Subject()
        log, callbacks = _recorder()

        def broken(value: int) -> None:
            raise ValueError("listener failed")

        subject.subscribe(on_next=broken)
        subject.subscribe(**callbacks)
        with caplog.at_level(logging.ERROR, logger="askflow.events.bus"):
            subject.next(1)

        assert log == [("next", 1)]
        assert "listener failed" in caplog.text

    def test_partial_callbacks(self) -> None:
        subject: Subject[int] = Subject()
        values: list[int] = []
        subject.subscribe(on_next=values.append)
        subject.next(1)
        subject.error(RuntimeError("ignored"))
        assert values == [1]


class TestAsyncIteration:
    @pytest.mark.asyncio
    async def test_iterates_until_complete(self) -> None:
        subject: Subject[int] = Subject()

        async def collect() -> list[int]:
            return [value async for value in subject]

        task = asyncio.ensure_future(collect())
        await asyncio.sleep(0)
        subject.next(1)
        subject.next(2)
        subject.complete()

        assert await task == [1, 2]
        assert subject.observer_count == 0

    @pytest.mark.asyncio
    async def test_error_is_raised_from_iteration(self) -> None:
        subject: Subject[Any] = Subject()

        async def collect() -> list[Any]:
            return [value async for value in subject]

        task = asyncio.ensure_future(collect())
        await asyncio.sleep(0)
        subject.next(ValueError("a value, not an error"))
        subject.error(RuntimeError("stream failed"))

        with pytest.raises(RuntimeError, match="stream failed"):
            await task


class TestEventBus:
    def test_answer_event_equality(self) -> None:
        assert AnswerEvent("q1", True) == AnswerEvent(name="q1", answer=True)

    def test_repr(self) -> None:
        bus = EventBus()
        bus.subscribe()
        assert repr(bus) == "EventBus(observers=1, stopped=False)"
