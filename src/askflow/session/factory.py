"""Session factory: prompt modules and prompt sessions.

A ``PromptModule`` is the callable users ask questions with. Each call
creates a new ``PromptSession`` with its own transport, answer store and
event bus. A session is awaitable and resolves to the collected answers.

Usage
-----
::

    import askflow

    prompt = askflow.create_prompt_module(strict_interactivity_check=True)
    session = prompt(
        [
            {"type": "confirm", "name": "q1", "message": "Continue?"},
            {"type": "input", "name": "user.name", "message": "Name?"},
        ],
        {"prefilled": True},
    )
    session.events.subscribe(on_next=print)
    answers = await session
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Generator, Mapping
from typing import IO, Any

from askflow.answers import Answers, copy_tree
from askflow.errors import ConfigurationError
from askflow.events import EventBus
from askflow.prompts.registry import PromptFactory, PromptRegistry, default_registry
from askflow.questions import normalize_source
from askflow.questions.source import StreamReader
from askflow.session.config import SessionConfig, TransportFactory
from askflow.session.guard import SessionResourceGuard
from askflow.session.sequencer import QuestionSequencer, SequencerState
from askflow.transport import StreamTransport, Transport

logger = logging.getLogger(__name__)


class PromptSession:
    """One execution of a question sequence.

    The transport is opened when the session is created and closed
    exactly once when it finishes, before the awaited result (or
    exception) reaches the caller. Nothing is asked until the session is
    awaited or ``start()`` is called.

    Attributes
    ----------
    answers:
        The live answer store. Seeded with a copy of the initial
        answers in which nested mappings are copied and leaf values are
        shared; ``when`` callbacks may mutate it.
    events:
        Live bus of ``AnswerEvent`` notifications.
    transport:
        The session transport, or ``None`` when the session failed
        validation before it was opened.
    """

    def __init__(
        self,
        questions: Any,
        answers: Mapping[str, Any] | None = None,
        *,
        config: SessionConfig,
        registry: PromptRegistry,
    ) -> None:
        self.answers = Answers()
        self.events = EventBus()
        self.transport: Transport | None = None
        self._guard: SessionResourceGuard | None = None
        self._sequencer: QuestionSequencer | None = None
        self._setup_error: Exception | None = None
        self._task: asyncio.Future[Answers] | None = None

        try:
            if answers is not None and not isinstance(answers, Mapping):
                raise ConfigurationError(
                    f"Initial answers must be a mapping, got {type(answers).__name__!r}"
                )
            self.answers.update(copy_tree(answers or {}))
            source = normalize_source(questions)
            if isinstance(source, list):
                for question in source:
                    registry.get(question.type)
        except ConfigurationError as exc:
            logger.debug("Session rejected before opening a transport: %s", exc)
            self._setup_error = exc
            return

        try:
            self._guard = SessionResourceGuard.acquire(config)
        except Exception as exc:
            logger.debug("Session could not open its transport: %s", exc)
            if isinstance(source, StreamReader):
                source.close()
            self._setup_error = exc
            return

        self.transport = self._guard.transport
        self._sequencer = QuestionSequencer(
            source, registry, self.transport, self.answers, self.events
        )

    @property
    def state(self) -> SequencerState:
        if self._sequencer is None:
            return SequencerState.FAILED
        return self._sequencer.state

    def start(self) -> "asyncio.Future[Answers]":
        """Schedule the session on the running loop and return its task."""
        if self._task is None:
            self._task = asyncio.ensure_future(self._run())
        return self._task

    def __await__(self) -> Generator[Any, None, Answers]:
        return self.start().__await__()

    async def _run(self) -> Answers:
        if self._setup_error is not None:
            self.events.error(self._setup_error)
            raise self._setup_error

        guard, sequencer = self._guard, self._sequencer
        if guard is None or sequencer is None:
            raise RuntimeError("PromptSession was not initialised")
        try:
            with guard:
                try:
                    guard.ensure_interactive()
                except BaseException:
                    sequencer.abandon()
                    raise
                answers = await sequencer.run()
        except BaseException as exc:
            self.events.error(exc)
            raise
        self.events.complete()
        return answers

    def run_sync(self) -> Answers:
        """Run the session to completion on a new event loop."""

        async def _main() -> Answers:
            return await self

        return asyncio.run(_main())

    def close(self) -> None:
        """Release the transport of a session that was never started.

        Started sessions close their transport themselves; for them this
        is a no-op.
        """
        if self._task is not None or self._guard is None:
            return
        if self._sequencer is not None:
            self._sequencer.abandon()
        self._guard.close()

    def __repr__(self) -> str:
        return f"PromptSession(state={self.state.name}, answers={dict(self.answers)!r})"


class PromptModule:
    """Callable that creates prompt sessions sharing one configuration.

    Parameters
    ----------
    config:
        Session options. Defaults to ``SessionConfig()``.
    registry:
        Prompt registry. Defaults to the shared ``default_registry``.
    """

    def __init__(
        self,
        config: SessionConfig | None = None,
        registry: PromptRegistry | None = None,
    ) -> None:
        self.config = config if config is not None else SessionConfig()
        self.prompts = registry if registry is not None else default_registry

    def __call__(
        self, questions: Any, answers: Mapping[str, Any] | None = None
    ) -> PromptSession:
        """Create a session for ``questions``, seeded with ``answers``."""
        return PromptSession(questions, answers, config=self.config, registry=self.prompts)

    def register_prompt(self, type_name: str, factory: PromptFactory) -> PromptFactory | None:
        """Register ``factory`` for ``type_name``; returns the previous factory."""
        return self.prompts.register(type_name, factory)

    def restore_default_prompts(self) -> None:
        """Reinstate the built-in prompt types of this module's registry."""
        self.prompts.restore_defaults()

    def __repr__(self) -> str:
        return f"PromptModule(config={self.config!r}, prompts={self.prompts!r})"


def create_prompt_module(
    *,
    input: IO[str] | None = None,  # noqa: A002
    output: IO[str] | None = None,
    strict_interactivity_check: bool = False,
    registry: PromptRegistry | None = None,
    transport_factory: TransportFactory = StreamTransport,
) -> PromptModule:
    """Return a new, independent ``PromptModule``.

    Parameters
    ----------
    input, output:
        Streams for the sessions' transports (default stdin/stdout).
    strict_interactivity_check:
        Fail instead of warning when the input is not a terminal.
    registry:
        Prompt registry to use; defaults to the shared registry. Pass a
        fresh ``PromptRegistry()`` to isolate overrides.
    transport_factory:
        ``factory(input, output) -> Transport`` used per session.
    """
    config = SessionConfig(
        input=input,
        output=output,
        strict_interactivity_check=strict_interactivity_check,
        transport_factory=transport_factory,
    )
    return PromptModule(config, registry)


prompt = PromptModule()
