"""Dynamic field resolution.

Most question fields (``message``, ``default``, ``choices``, ``when``,
``validate``, ``filter``, ``transformer``) may be given in one of three
forms:

1. A literal value, used as-is.
2. A function of the current answers. Its return value is used, and
   awaited first when it is awaitable (so ``async def`` works).
3. A function that defers its result. Either it calls ``defer()`` while
   it runs and later invokes the returned callback as
   ``done(error, value)``, or it returns a ``Deferred`` whose register
   function receives that callback.

Usage
-----
::

    from askflow.resolver import Deferred, defer, resolve

    def message(answers):
        done = defer()
        loop.call_later(0.5, done, None, f"Hello {answers['name']}")

    await resolve(message, answers, field="message")

    def choices(answers):
        return Deferred(lambda done: fetch_choices(callback=done))
"""
from __future__ import annotations

import asyncio
import contextvars
import inspect
import logging
from collections.abc import Callable, Mapping
from typing import Any

from askflow.errors import AskflowError, FieldResolutionError

logger = logging.getLogger(__name__)

DoneCallback = Callable[..., None]


class Deferred:
    """Explicit deferred result of a field function.

    Parameters
    ----------
    register:
        Called once with a ``done(error, value)`` callback. The callback
        may be invoked at any later time, from any thread.
    """

    __slots__ = ("_register",)

    def __init__(self, register: Callable[[DoneCallback], Any]) -> None:
        self._register = register

    @classmethod
    def of(cls, value: Any) -> "Deferred":
        """Return a ``Deferred`` that is already settled with ``value``."""
        return cls(lambda done: done(None, value))

    def register(self, done: DoneCallback) -> None:
        self._register(done)


class _Completion:
    """One-shot ``done(error, value)`` callback bound to a future."""

    def __init__(self, loop: asyncio.AbstractEventLoop, field: str) -> None:
        self._loop = loop
        self._field = field
        self.future: asyncio.Future[Any] = loop.create_future()
        self.requested = False

    def __call__(self, error: Any = None, value: Any = None) -> None:
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is self._loop:
            self._settle(error, value)
        else:
            self._loop.call_soon_threadsafe(self._settle, error, value)

    def _settle(self, error: Any, value: Any) -> None:
        if self.future.cancelled():
            logger.debug(
                "Deferred completion for field %r arrived after resolution was cancelled.",
                self._field,
            )
            return
        if self.future.done():
            logger.warning(
                "Deferred completion for field %r was invoked more than once; "
                "ignoring the extra call.",
                self._field,
            )
            return
        if error is None:
            self.future.set_result(value)
        elif isinstance(error, BaseException):
            self.future.set_exception(error)
        else:
            self.future.set_exception(RuntimeError(str(error)))


_current_completion: contextvars.ContextVar[_Completion | None] = contextvars.ContextVar(
    "askflow_current_completion", default=None
)


def defer() -> DoneCallback:
    """Switch the field function that is currently running to deferred mode.

    Returns the ``done(error, value)`` callback that settles the field.
    Calling ``defer()`` twice within the same call returns the same
    callback.

    Raises
    ------
    RuntimeError
        If called outside of a field function invoked by the resolver.
    """
    completion = _current_completion.get()
    if completion is None:
        raise RuntimeError(
            "defer() can only be called from a question field function "
            "while askflow is resolving it."
        )
    completion.requested = True
    return completion


async def resolve(
    value: Any,
    *args: Any,
    field: str = "value",
    question_name: str | None = None,
) -> Any:
    """Resolve one dynamic field.

    Parameters
    ----------
    value:
        The raw field value: a literal or a callable.
    *args:
        Arguments passed to a callable ``value``; normally just the
        current answers. ``validate``, ``filter`` and ``transformer``
        receive ``(input, answers)``.
    field:
        Field name used in error messages and logs.
    question_name:
        Name of the question being resolved, used in error messages.

    Returns
    -------
    Any
        The resolved value.

    Raises
    ------
    FieldResolutionError
        If the function raises, its awaitable raises, or it completes
        its deferred callback with an error. ``AskflowError`` instances
        raised by user code pass through unchanged.
    """
    if not callable(value):
        return value

    completion = _Completion(asyncio.get_running_loop(), field)
    token = _current_completion.set(completion)
    try:
        try:
            result = value(*args)
        finally:
            _current_completion.reset(token)

        if completion.requested:
            logger.debug("Field %r of %r resolves deferred", field, question_name)
            return await completion.future
        if isinstance(result, Deferred):
            result.register(completion)
            return await completion.future
        if inspect.isawaitable(result):
            return await result
        return result
    except AskflowError:
        raise
    except Exception as exc:
        raise FieldResolutionError(field, exc, question_name) from exc


async def resolve_all(
    fields: Mapping[str, Any],
    *args: Any,
    question_name: str | None = None,
) -> dict[str, Any]:
    """Resolve several independent fields concurrently.

    Literal fields are taken as-is. When any field fails, the remaining
    resolutions are cancelled and the first failure (in ``fields`` order)
    is raised.
    """
    resolved: dict[str, Any] = {}
    tasks: dict[str, asyncio.Task[Any]] = {}
    for name, value in fields.items():
        if callable(value):
            tasks[name] = asyncio.ensure_future(
                resolve(value, *args, field=name, question_name=question_name)
            )
        else:
            resolved[name] = value

    if not tasks:
        return resolved

    try:
        done, pending = await asyncio.wait(
            tasks.values(), return_when=asyncio.FIRST_EXCEPTION
        )
    except BaseException:
        for task in tasks.values():
            task.cancel()
        raise

    for task in pending:
        task.cancel()

    failure: BaseException | None = None
    for task in tasks.values():
        if task in done and not task.cancelled():
            exc = task.exception()
            if exc is not None and failure is None:
                failure = exc
    if failure is not None:
        raise failure

    for name, task in tasks.items():
        resolved[name] = task.result()
    return resolved
