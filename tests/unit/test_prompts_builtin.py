"""Unit tests for the built-in prompt types and choice normalization."""
from __future__ import annotations

import asyncio
import io
from typing import Any

import pytest

from askflow.errors import ConfigurationError, FieldResolutionError
from askflow.prompts import Choice, Separator
from askflow.prompts.builtin import (
    CheckboxPrompt,
    ConfirmPrompt,
    EditorPrompt,
    ExpandPrompt,
    InputPrompt,
    ListPrompt,
    NumberPrompt,
    PasswordPrompt,
    RawListPrompt,
)
from askflow.prompts.choices import normalize_choices, to_choice
from askflow.questions import Question
from askflow.transport import StreamTransport

COLORS = ["red", "green", {"name": "Blue", "value": "blue", "short": "B"}]


def _run(prompt_cls: type, lines: str, answers: dict[str, Any] | None = None, **fields: Any) -> tuple[Any, str]:
    """Run one prompt over in-memory streams and return (answer, output)."""
    fields.setdefault("name", "q")
    fields.setdefault("message", "Question?")
    question = Question.from_mapping(fields)
    output = io.StringIO()
    transport = StreamTransport(io.StringIO(lines), output)
    prompt = prompt_cls(question, transport, answers or {})
    answer = asyncio.run(prompt.run())
    return answer, output.getvalue()


# ===========================================================================
# Choices
# ===========================================================================


class TestChoices:
    def test_plain_values(self) -> None:
        choice = to_choice(3)
        assert choice == Choice(name="3", value=3, short="3")

    def test_mapping_with_value_only(self) -> None:
        choice = to_choice({"value": "v"})
        assert (choice.name, choice.value, choice.short) == ("v", "v", "v")

    def test_mapping_keys(self) -> None:
        choice = to_choice({"name": "Yes", "value": True, "key": "Y", "checked": True})
        assert choice.key == "y"
        assert choice.checked
        assert choice.selectable

    def test_disabled_choice(self) -> None:
        assert not to_choice({"name": "x", "disabled": "soon"}).selectable

    def test_separator_mapping(self) -> None:
        assert to_choice({"type": "separator", "line": "--"}) == Separator("--")

    def test_empty_mapping_raises(self) -> None:
        with pytest.raises(ConfigurationError):
            to_choice({})

    def test_normalize_rejects_string(self) -> None:
        with pytest.raises(ConfigurationError):
            normalize_choices("abc")

    def test_normalize_none(self) -> None:
        assert normalize_choices(None) == []


# ===========================================================================
# Text prompts
# ===========================================================================


class TestInputPrompts:
    def test_input_returns_typed_text(self) -> None:
        answer, output = _run(InputPrompt, "hello\n")
        assert answer == "hello"
        assert "Question?" in output
        assert "hello" in output

    def test_input_empty_line_uses_default(self) -> None:
        answer, output = _run(InputPrompt, "\n", default="bar")
        assert answer == "bar"
        assert "(bar)" in output

    def test_input_empty_line_without_default(self) -> None:
        assert _run(InputPrompt, "\n")[0] == ""

    def test_password_is_masked(self) -> None:
        answer, output = _run(PasswordPrompt, "secret\n", mask="#")
        assert answer == "secret"
        assert "######" in output
        assert "secret" not in output

    def test_editor_reads_until_empty_line(self) -> None:
        answer, _ = _run(EditorPrompt, "line 1\nline 2\n\n")
        assert answer == "line 1\nline 2"

    def test_editor_default(self) -> None:
        assert _run(EditorPrompt, "\n", default="text")[0] == "text"

    def test_eof_raises(self) -> None:
        with pytest.raises(EOFError):
            _run(InputPrompt, "")


class TestNumberPrompt:
    def test_int(self) -> None:
        assert _run(NumberPrompt, "42\n")[0] == 42

    def test_float(self) -> None:
        assert _run(NumberPrompt, "2.5\n")[0] == 2.5

    def test_invalid_then_valid(self) -> None:
        answer, output = _run(NumberPrompt, "abc\n7\n")
        assert answer == 7
        assert ">> Please enter a valid number" in output

    def test_empty_uses_default(self) -> None:
        assert _run(NumberPrompt, "\n", default=3)[0] == 3


class TestConfirmPrompt:
    @pytest.mark.parametrize(
        ("line", "expected"),
        [("y", True), ("Yes", True), ("n", False), ("no", False), ("maybe", False)],
    )
    def test_answers(self, line: str, expected: bool) -> None:
        assert _run(ConfirmPrompt, f"{line}\n")[0] is expected

    def test_empty_defaults_to_true(self) -> None:
        answer, output = _run(ConfirmPrompt, "\n")
        assert answer is True
        assert "(Y/n)" in output

    def test_empty_uses_false_default(self) -> None:
        answer, output = _run(ConfirmPrompt, "\n", default=False)
        assert answer is False
        assert "(y/N)" in output


# ===========================================================================
# List-like prompts
# ===========================================================================


class TestListPrompts:
    def test_pick_by_number(self) -> None:
        answer, output = _run(ListPrompt, "3\n", choices=COLORS)
        assert answer == "blue"
        assert "3) Blue" in output

    def test_pick_by_name(self) -> None:
        assert _run(ListPrompt, "green\n", choices=COLORS)[0] == "green"

    def test_default_by_value(self) -> None:
        assert _run(ListPrompt, "\n", choices=COLORS, default="green")[0] == "green"

    def test_default_by_index(self) -> None:
        assert _run(ListPrompt, "\n", choices=COLORS, default=2)[0] == "blue"

    def test_default_first_selectable(self) -> None:
        choices = [Separator(), {"name": "off", "disabled": True}, "on"]
        assert _run(ListPrompt, "\n", choices=choices)[0] == "on"

    def test_out_of_range_asks_again(self) -> None:
        answer, output = _run(ListPrompt, "9\n1\n", choices=COLORS)
        assert answer == "red"
        assert "between 1 and 3" in output

    def test_rawlist_ignores_names(self) -> None:
        answer, output = _run(RawListPrompt, "green\n2\n", choices=COLORS)
        assert answer == "green"
        assert ">>" in output

    def test_no_selectable_choice(self) -> None:
        with pytest.raises(ConfigurationError):
            _run(ListPrompt, "\n", choices=[Separator()])

    def test_checkbox_multiple(self) -> None:
        answer, output = _run(CheckboxPrompt, "1, 3\n", choices=COLORS)
        assert answer == ["red", "blue"]
        assert "red, B" in output

    def test_checkbox_empty_uses_checked(self) -> None:
        choices = ["a", {"name": "b", "checked": True}]
        assert _run(CheckboxPrompt, "\n", choices=choices)[0] == ["b"]

    def test_checkbox_empty_uses_default(self) -> None:
        assert _run(CheckboxPrompt, "\n", choices=COLORS, default=["red"])[0] == ["red"]

    def test_expand_by_key(self) -> None:
        choices = [
            {"key": "y", "name": "Overwrite", "value": "overwrite"},
            {"key": "n", "name": "Skip", "value": "skip"},
        ]
        answer, output = _run(ExpandPrompt, "N\n", choices=choices, default="overwrite")
        assert answer == "skip"
        assert "(Yn)" in output

    def test_expand_requires_unique_keys(self) -> None:
        choices = [{"key": "a", "name": "one"}, {"key": "a", "name": "two"}]
        with pytest.raises(ConfigurationError):
            _run(ExpandPrompt, "a\n", choices=choices)


# ===========================================================================
# filter / validate / transformer
# ===========================================================================


class TestPromptLoop:
    def test_validate_retries_with_message(self) -> None:
        def validate(value: str, answers: dict[str, Any]) -> Any:
            return True if value.isdigit() else "Digits only"

        answer, output = _run(InputPrompt, "abc\n123\n", validate=validate)
        assert answer == "123"
        assert ">> Digits only" in output

    def test_validate_false_uses_generic_message(self) -> None:
        answer, output = _run(InputPrompt, "\nok\n", validate=lambda value, answers: bool(value))
        assert answer == "ok"
        assert ">> Please enter a valid value" in output

    def test_filter_before_validate(self) -> None:
        seen: list[Any] = []

        def validate(value: Any, answers: dict[str, Any]) -> bool:
            seen.append(value)
            return True

        answer, _ = _run(
            InputPrompt,
            " Foo \n",
            filter=lambda value, answers: value.strip().lower(),
            validate=validate,
        )
        assert answer == "foo"
        assert seen == ["foo"]

    def test_filter_and_validate_receive_answers(self) -> None:
        snapshot = {"prefilled": True}
        answer, _ = _run(
            InputPrompt,
            "x\n",
            answers=snapshot,
            filter=lambda value, answers: f"{value}-{answers['prefilled']}",
        )
        assert answer == "x-True"

    def test_transformer_changes_echo_only(self) -> None:
        answer, output = _run(
            InputPrompt, "abc\n", transformer=lambda value, answers: value.upper()
        )
        assert answer == "abc"
        assert "ABC" in output

    def test_failing_validate_is_a_field_error(self) -> None:
        def validate(value: Any, answers: dict[str, Any]) -> bool:
            raise RuntimeError("validator crashed")

        with pytest.raises(FieldResolutionError) as info:
            _run(InputPrompt, "x\n", validate=validate)
        assert info.value.field == "validate"
