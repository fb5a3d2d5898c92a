"""Question sequencer: the per-question protocol of a session.

For every question, in source order:

1. skip it when its path is already answered (unless ``ask_answered``);
2. resolve ``when`` and skip it when falsy;
3. resolve ``message``, ``default`` and ``choices`` concurrently;
4. build the registered prompt and await its ``run()``;
5. store the answer at the question's path and emit an ``AnswerEvent``.

Any failure aborts the remaining questions. Terminating the event bus
and closing the transport are left to the owning ``PromptSession``.
"""
from __future__ import annotations

import inspect
import logging
from collections.abc import AsyncIterator
from dataclasses import replace
from enum import Enum, auto
from typing import Any

from askflow.answers import Answers, copy_tree
from askflow.errors import AskflowError, PromptExecutionError
from askflow.events import AnswerEvent, EventBus
from askflow.prompts.registry import PromptRegistry
from askflow.questions import Question
from askflow.questions.source import StreamReader
from askflow.resolver import resolve, resolve_all
from askflow.transport import Transport

logger = logging.getLogger(__name__)


class SequencerState(Enum):
    """Where the sequencer is in its run.

    INIT
        Nothing evaluated yet.
    EVALUATE_ANSWERED
        Checking whether the current question is already answered.
    EVALUATE_WHEN
        Resolving the current question's ``when``.
    SKIP
        The current question was skipped.
    RUN
        Resolving fields and running the current question's prompt.
    DONE
        The source is exhausted and every answer is committed.
    FAILED
        A stage failed; no further questions are evaluated.
    """

    INIT = auto()
    EVALUATE_ANSWERED = auto()
    EVALUATE_WHEN = auto()
    SKIP = auto()
    RUN = auto()
    DONE = auto()
    FAILED = auto()


class QuestionSequencer:
    """Drives one session's questions through their prompts.

    Parameters
    ----------
    source:
        Normalized question source: a list of questions, or an async
        iterator of raw question items.
    registry:
        Prompt registry used to look up each question's ``type``.
    transport:
        Transport handed to every prompt.
    answers:
        The session's live answer store.
    events:
        Bus that receives one ``AnswerEvent`` per committed answer.
    """

    def __init__(
        self,
        source: list[Question] | AsyncIterator[Any],
        registry: PromptRegistry,
        transport: Transport,
        answers: Answers,
        events: EventBus,
    ) -> None:
        self._source = source
        self._registry = registry
        self._transport = transport
        self.answers = answers
        self.events = events
        self.state = SequencerState.INIT

    async def run(self) -> Answers:
        """Process every question and return the answer store."""
        try:
            if isinstance(self._source, list):
                for question in self._source:
                    await self.process(question)
            else:
                async for item in self._source:
                    await self.process(Question.coerce(item))
        except BaseException:
            self.state = SequencerState.FAILED
            raise
        finally:
            await self.close_source()
        self.state = SequencerState.DONE
        return self.answers

    async def close_source(self) -> None:
        aclose = getattr(self._source, "aclose", None)
        if aclose is not None:
            await aclose()

    def abandon(self) -> None:
        """Mark the run as failed without running it, releasing a pushed source."""
        self.state = SequencerState.FAILED
        if isinstance(self._source, StreamReader):
            self._source.close()

    async def process(self, question: Question) -> None:
        """Run the per-question protocol for a single question."""
        name = question.name
        factory = self._registry.get(question.type)

        self.state = SequencerState.EVALUATE_ANSWERED
        if not question.ask_answered and self.answers.has_path(name):
            logger.debug("Skipping %r: already answered", name)
            self.state = SequencerState.SKIP
            return

        self.state = SequencerState.EVALUATE_WHEN
        if question.when is not None:
            should_ask = await resolve(
                question.when, self.answers, field="when", question_name=name
            )
            if not should_ask:
                logger.debug("Skipping %r: 'when' is falsy", name)
                self.state = SequencerState.SKIP
                return

        self.state = SequencerState.RUN
        fields = await resolve_all(
            {
                "message": question.message,
                "default": question.default,
                "choices": question.choices,
            },
            self.answers,
            question_name=name,
        )
        if fields["message"] is None:
            fields["message"] = f"{name}:"
        resolved = replace(question, **fields)

        answer = await self._execute(factory, resolved)
        self.answers.set_path(name, answer)
        logger.debug("Committed answer for %r", name)
        self.events.next(AnswerEvent(name=name, answer=answer))

    async def _execute(self, factory: Any, question: Question) -> Any:
        snapshot = Answers(copy_tree(self.answers))
        try:
            prompt = factory(question, self._transport, snapshot)
            result = prompt.run()
            if inspect.isawaitable(result):
                result = await result
        except AskflowError:
            raise
        except Exception as exc:
            raise PromptExecutionError(question.name, exc) from exc
        return result
