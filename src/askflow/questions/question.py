"""The ``Question`` model.

A question is the declarative description of one prompt. Callers may
pass ``Question`` instances or plain mappings; mappings are converted
with ``Question.from_mapping``.

Dynamic fields (``message``, ``default``, ``choices``, ``when``,
``validate``, ``filter``, ``transformer``) may hold literals or
functions; see ``askflow.resolver``.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from typing import Any

from askflow.errors import ConfigurationError

DEFAULT_TYPE = "input"

# Mapping keys accepted in place of the Python field names.
_ALIASES = {"askAnswered": "ask_answered"}


@dataclass
class Question:
    """Declarative description of one prompt.

    Parameters
    ----------
    name:
        Dot-delimited path where the answer is stored.
    type:
        Registered prompt type name. Defaults to ``"input"``.
    message:
        Text shown to the user. Defaults to ``"<name>:"``.
    default:
        Value used when the user submits an empty line.
    choices:
        Choices for list-like prompts.
    validate:
        ``validate(input, answers)`` returning ``True`` to accept, or
        ``False`` / an error message to reject.
    filter:
        ``filter(input, answers)`` returning the value to store.
    transformer:
        ``transformer(value, answers)`` returning the text echoed back.
    when:
        Literal or function of the answers; falsy skips the question.
        ``None`` means the question always runs.
    ask_answered:
        Ask even when an answer already exists at ``name``.
    extra:
        Prompt-specific parameters, forwarded untouched.
    """

    name: str
    type: str = DEFAULT_TYPE
    message: Any = None
    default: Any = None
    choices: Any = None
    validate: Any = None
    filter: Any = None
    transformer: Any = None
    when: Any = None
    ask_answered: bool = False
    extra: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise ConfigurationError(
                f"Question name must be a non-empty string, got {self.name!r}"
            )
        if any(not segment for segment in self.name.split(".")):
            raise ConfigurationError(f"Question name {self.name!r} is not a valid path")
        if not isinstance(self.type, str) or not self.type:
            raise ConfigurationError(
                f"Question {self.name!r} has an invalid type {self.type!r}"
            )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], name: str | None = None) -> "Question":
        """Build a ``Question`` from a plain mapping.

        Parameters
        ----------
        data:
            The question mapping. Unknown keys end up in ``extra``.
        name:
            Name to use when ``data`` has none (mapping-of-questions
            sources inject their key here).

        Raises
        ------
        ConfigurationError
            If the mapping has no usable name or type.
        """
        known = {f.name for f in fields(cls)} - {"extra"}
        kwargs: dict[str, Any] = {}
        extra: dict[str, Any] = dict(data.get("extra") or {})
        for key, value in data.items():
            key = _ALIASES.get(key, key)
            if key == "extra":
                continue
            if key in known:
                kwargs[key] = value
            else:
                extra[key] = value
        if kwargs.get("name") is None:
            if name is None:
                raise ConfigurationError(f"Question has no name: {dict(data)!r}")
            kwargs["name"] = name
        if kwargs.get("type") is None:
            kwargs["type"] = DEFAULT_TYPE
        return cls(extra=extra, **kwargs)

    @classmethod
    def coerce(cls, item: Any, name: str | None = None) -> "Question":
        """Return ``item`` as a ``Question``, converting mappings."""
        if isinstance(item, Question):
            return item
        if isinstance(item, Mapping):
            return cls.from_mapping(item, name=name)
        raise ConfigurationError(
            f"Malformed question {item!r}: expected a mapping or a Question"
        )

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a field or a prompt-specific extra by name."""
        if key in self.extra:
            return self.extra[key]
        return getattr(self, key, default)
