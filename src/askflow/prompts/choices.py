"""Choice normalization for list-like prompts.

Questions may list their choices as plain values, as mappings with
``name`` / ``value`` / ``short`` / ``key`` / ``checked`` / ``disabled``
keys, or as ``Separator`` entries that group choices visually.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from askflow.errors import ConfigurationError


class Separator:
    """Non-selectable line between choices."""

    DEFAULT_LINE = "──────────────"

    def __init__(self, line: str | None = None) -> None:
        self.line = line if line is not None else self.DEFAULT_LINE

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Separator) and other.line == self.line

    def __hash__(self) -> int:
        return hash(("Separator", self.line))

    def __repr__(self) -> str:
        return f"Separator({self.line!r})"


@dataclass(frozen=True)
class Choice:
    """A single selectable choice.

    Parameters
    ----------
    name:
        Text shown to the user.
    value:
        Value stored as the answer. Defaults to ``name``.
    short:
        Text echoed once the choice is selected.
    key:
        Single-character shortcut used by the ``expand`` prompt.
    checked:
        Pre-selected in ``checkbox`` prompts.
    disabled:
        ``True`` or a reason string; disabled choices cannot be selected.
    """

    name: str
    value: Any
    short: str
    key: str | None = None
    checked: bool = False
    disabled: bool | str = False

    @property
    def selectable(self) -> bool:
        return not self.disabled


def to_choice(item: Any) -> Choice | Separator:
    """Normalize one raw choice entry."""
    if isinstance(item, (Choice, Separator)):
        return item
    if isinstance(item, Mapping):
        if item.get("type") == "separator":
            return Separator(item.get("line"))
        if "name" not in item and "value" not in item:
            raise ConfigurationError(f"Choice {dict(item)!r} has neither a name nor a value")
        value = item.get("value", item.get("name"))
        name = str(item.get("name", value))
        key = item.get("key")
        return Choice(
            name=name,
            value=value,
            short=str(item.get("short", name)),
            key=str(key).lower() if key is not None else None,
            checked=bool(item.get("checked", False)),
            disabled=item.get("disabled", False),
        )
    return Choice(name=str(item), value=item, short=str(item))


def normalize_choices(choices: Iterable[Any] | None) -> list[Choice | Separator]:
    """Normalize a question's resolved ``choices`` field."""
    if choices is None:
        return []
    if isinstance(choices, (str, bytes)) or not isinstance(choices, Iterable):
        raise ConfigurationError(f"Choices must be a sequence, got {choices!r}")
    return [to_choice(item) for item in choices]
