"""Built-in line-oriented prompt types.

==========  =========================================================
Type        Answer
==========  =========================================================
input       The typed text, or ``default`` on an empty line.
password    Like ``input``; the answer is echoed masked.
number      An ``int`` or ``float``.
confirm     ``True`` / ``False``; ``default`` is ``True`` unless given.
list        The value of the chosen entry (by number or by name).
rawlist     The value of the chosen entry (by number only).
checkbox    A list of values (comma separated numbers).
expand      The value of the entry whose ``key`` was typed.
editor      Multi-line text, ended by an empty line.
==========  =========================================================
"""
from __future__ import annotations

import re
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from rich.text import Text

from askflow.errors import ConfigurationError
from askflow.prompts.base import InvalidInput, LinePrompt, Prompt
from askflow.prompts.choices import Choice, Separator, normalize_choices

if TYPE_CHECKING:
    from askflow.questions import Question
    from askflow.transport import Transport

_YES = re.compile(r"^y(es)?", re.IGNORECASE)
_SPLIT = re.compile(r"[\s,]+")


class InputPrompt(LinePrompt):
    def hint(self) -> str | None:
        default = self.question.default
        return None if default is None else f"({default})"

    def parse(self, raw: str) -> Any:
        if raw == "" and self.question.default is not None:
            return self.question.default
        return raw


class PasswordPrompt(InputPrompt):
    def hint(self) -> str | None:
        return None

    def display(self, value: Any) -> str:
        mask = self.question.get("mask", "*")
        return str(mask) * len(str(value or ""))


class NumberPrompt(LinePrompt):
    def hint(self) -> str | None:
        default = self.question.default
        return None if default is None else f"({default})"

    def parse(self, raw: str) -> Any:
        text = raw.strip()
        if text == "":
            if self.question.default is None:
                raise InvalidInput("Please enter a number")
            return self.question.default
        try:
            return int(text)
        except ValueError:
            pass
        try:
            return float(text)
        except ValueError:
            raise InvalidInput("Please enter a valid number") from None


class ConfirmPrompt(LinePrompt):
    @property
    def default_value(self) -> bool:
        default = self.question.default
        return True if default is None else bool(default)

    def hint(self) -> str | None:
        return "(Y/n)" if self.default_value else "(y/N)"

    def parse(self, raw: str) -> bool:
        text = raw.strip()
        if text == "":
            return self.default_value
        return bool(_YES.match(text))

    def display(self, value: Any) -> str:
        return "Yes" if value else "No"


class ListPrompt(LinePrompt):
    """Single choice from a numbered list."""

    match_names = True

    def __init__(
        self,
        question: "Question",
        transport: "Transport",
        answers: Mapping[str, Any],
    ) -> None:
        super().__init__(question, transport, answers)
        self.choices = normalize_choices(question.choices)
        self.selectable = [c for c in self.choices if isinstance(c, Choice) and c.selectable]
        if not self.selectable:
            raise ConfigurationError(
                f"Question {question.name!r} needs at least one selectable choice"
            )

    def render(self) -> None:
        self.transport.write(self.question_line())
        self.transport.write("\n")
        number = 0
        for entry in self.choices:
            if isinstance(entry, Separator):
                self.transport.write(Text(f"   {entry.line}\n", style="dim"))
                continue
            if entry.selectable:
                number += 1
                self.transport.write(f"  {number}) {entry.name}\n")
            else:
                reason = entry.disabled if isinstance(entry.disabled, str) else "disabled"
                self.transport.write(Text(f"  -  {entry.name} ({reason})\n", style="dim"))
        self.transport.write(Text("  Answer: ", style="bold"))

    def default_choice(self) -> Choice:
        default = self.question.default
        if isinstance(default, int) and not isinstance(default, bool):
            if 0 <= default < len(self.selectable):
                return self.selectable[default]
        for choice in self.selectable:
            if default is not None and choice.value == default:
                return choice
        return self.selectable[0]

    def pick(self, text: str) -> Choice:
        if text.isdigit():
            index = int(text) - 1
            if 0 <= index < len(self.selectable):
                return self.selectable[index]
        elif self.match_names:
            for choice in self.selectable:
                if choice.name == text:
                    return choice
        raise InvalidInput(f"Please enter a number between 1 and {len(self.selectable)}")

    def parse(self, raw: str) -> Any:
        text = raw.strip()
        self.chosen = self.default_choice() if text == "" else self.pick(text)
        return self.chosen.value

    def display(self, value: Any) -> str:
        chosen = getattr(self, "chosen", None)
        return chosen.short if chosen is not None else str(value)


class RawListPrompt(ListPrompt):
    match_names = False


class CheckboxPrompt(ListPrompt):
    """Multiple choices, entered as comma separated numbers."""

    def hint(self) -> str | None:
        return "(comma separated numbers)"

    def parse(self, raw: str) -> list[Any]:
        text = raw.strip()
        if text == "":
            default = self.question.default
            if default is not None:
                return list(default)
            return [c.value for c in self.selectable if c.checked]
        picked: list[Choice] = []
        for token in _SPLIT.split(text):
            if not token:
                continue
            choice = self.pick(token)
            if choice not in picked:
                picked.append(choice)
        return [c.value for c in picked]

    def display(self, value: Any) -> str:
        if not isinstance(value, list):
            return str(value)
        return ", ".join(c.short for c in self.selectable if c.value in value)


class ExpandPrompt(ListPrompt):
    """Single choice selected by its one-letter ``key``."""

    def __init__(
        self,
        question: "Question",
        transport: "Transport",
        answers: Mapping[str, Any],
    ) -> None:
        super().__init__(question, transport, answers)
        keys = [c.key for c in self.selectable]
        if any(k is None or len(k) != 1 for k in keys) or len(set(keys)) != len(keys):
            raise ConfigurationError(
                f"Question {question.name!r}: expand choices need unique one-letter keys"
            )

    def hint(self) -> str | None:
        default = self.default_choice()
        keys = "".join(
            c.key.upper() if c is default else c.key  # type: ignore[union-attr]
            for c in self.selectable
        )
        return f"({keys})"

    def render(self) -> None:
        self.transport.write(self.question_line())

    def pick(self, text: str) -> Choice:
        for choice in self.selectable:
            if choice.key == text.lower():
                return choice
        raise InvalidInput("Please enter a valid key")


class EditorPrompt(LinePrompt):
    """Multi-line text; an empty line ends the answer."""

    def hint(self) -> str | None:
        return "(end with an empty line)"

    async def read(self) -> str:
        lines: list[str] = []
        while True:
            line = await self.transport.read_line()
            if line == "":
                return "\n".join(lines)
            lines.append(line)

    def parse(self, raw: str) -> Any:
        if raw == "" and self.question.default is not None:
            return self.question.default
        return raw


BUILTIN_PROMPTS: dict[str, type[Prompt]] = {
    "input": InputPrompt,
    "password": PasswordPrompt,
    "number": NumberPrompt,
    "confirm": ConfirmPrompt,
    "list": ListPrompt,
    "rawlist": RawListPrompt,
    "checkbox": CheckboxPrompt,
    "expand": ExpandPrompt,
    "editor": EditorPrompt,
}
