"""Base classes for prompts.

A prompt renders one question over the session transport and produces
its answer. The sequencer treats prompts as opaque: it builds one with
``factory(question, transport, answers)`` and awaits ``run()``.

``LinePrompt`` implements the shared line-oriented loop used by every
built-in prompt:

1. write the question line;
2. read one line and ``parse`` it into a value;
3. pass the value through the question's ``filter``;
4. check it with the question's ``validate``; on rejection write the
   message and start again;
5. echo the answer (through ``transformer`` when given) and return it.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from rich.text import Text

from askflow.resolver import resolve

if TYPE_CHECKING:
    from askflow.questions import Question
    from askflow.transport import Transport

logger = logging.getLogger(__name__)

DEFAULT_INVALID_MESSAGE = "Please enter a valid value"


class InvalidInput(ValueError):
    """Raised by ``LinePrompt.parse`` when a line cannot be interpreted."""


class Prompt(ABC):
    """Abstract prompt.

    Parameters
    ----------
    question:
        The question with ``message``, ``default`` and ``choices``
        already resolved.
    transport:
        The session transport.
    answers:
        Snapshot of the answers collected so far.
    """

    def __init__(
        self,
        question: "Question",
        transport: "Transport",
        answers: Mapping[str, Any],
    ) -> None:
        self.question = question
        self.transport = transport
        self.answers = answers

    @abstractmethod
    async def run(self) -> Any:
        """Interact with the user and return the answer."""


class LinePrompt(Prompt):
    """Prompt that reads one answer per line."""

    prefix = "?"

    def hint(self) -> str | None:
        """Short input hint shown after the message, e.g. ``(Y/n)``."""
        return None

    def render(self) -> None:
        """Write everything shown before reading a line."""
        self.transport.write(self.question_line())

    def question_line(self) -> Text:
        line = Text()
        line.append(f"{self.prefix} ", style="bold green")
        line.append(str(self.question.message), style="bold")
        hint = self.hint()
        if hint:
            line.append(f" {hint}", style="dim")
        line.append(" ")
        return line

    @abstractmethod
    def parse(self, raw: str) -> Any:
        """Turn a raw input line into an answer value.

        Raises
        ------
        InvalidInput
            If the line is not acceptable; the prompt asks again.
        """

    def display(self, value: Any) -> str:
        """Text echoed once ``value`` has been accepted."""
        return "" if value is None else str(value)

    async def read(self) -> str:
        return await self.transport.read_line()

    async def run(self) -> Any:
        question = self.question
        while True:
            self.render()
            raw = await self.read()
            try:
                value = self.parse(raw)
            except InvalidInput as exc:
                self.write_error(str(exc) or DEFAULT_INVALID_MESSAGE)
                continue

            if question.filter is not None:
                value = await resolve(
                    question.filter, value, self.answers,
                    field="filter", question_name=question.name,
                )

            if question.validate is not None:
                verdict = await resolve(
                    question.validate, value, self.answers,
                    field="validate", question_name=question.name,
                )
                if verdict is not True:
                    message = verdict if isinstance(verdict, str) and verdict else DEFAULT_INVALID_MESSAGE
                    logger.debug("Answer for %r rejected: %s", question.name, message)
                    self.write_error(message)
                    continue

            await self.echo(value)
            return value

    async def echo(self, value: Any) -> None:
        question = self.question
        if question.transformer is not None:
            shown = await resolve(
                question.transformer, value, self.answers,
                field="transformer", question_name=question.name,
            )
        else:
            shown = self.display(value)
        self.transport.write(Text(f"{shown}\n", style="cyan"))

    def write_error(self, message: str) -> None:
        self.transport.write(Text(f">> {message}\n", style="red"))
