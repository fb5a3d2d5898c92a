"""askflow — declarative, conditional question flows for the terminal.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    import askflow

    async def main():
        answers = await askflow.prompt(
            [
                {"type": "confirm", "name": "deploy", "message": "Deploy now?"},
                {
                    "type": "list",
                    "name": "target.env",
                    "message": "Environment",
                    "choices": ["staging", "production"],
                    "when": lambda answers: answers["deploy"],
                },
            ]
        )
        # {'deploy': True, 'target': {'env': 'staging'}}

    # Override a prompt type, then go back to the built-ins
    askflow.register_prompt("confirm", MyConfirmPrompt)
    askflow.restore_default_prompts()

    askflow.__version__
    '0.1.0'
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import IO, TYPE_CHECKING, Any

from askflow.errors import (
    AskflowError,
    ConfigurationError,
    FieldResolutionError,
    NonInteractiveEnvironmentError,
    PromptExecutionError,
    PromptTypeNotFoundError,
    StreamOverflowError,
)
from askflow.prompts.choices import Separator
from askflow.questions import Question, QuestionStream
from askflow.resolver import Deferred, defer

__version__: str = "0.1.0"

if TYPE_CHECKING:
    from askflow.prompts.registry import PromptFactory, PromptRegistry
    from askflow.session.config import TransportFactory
    from askflow.session.factory import PromptModule, PromptSession


def prompt(questions: Any, answers: Mapping[str, Any] | None = None) -> "PromptSession":
    """Ask ``questions`` on stdin/stdout using the shared prompt registry.

    Parameters
    ----------
    questions:
        A question, a sequence of questions, a mapping of name to
        question, a ``QuestionStream``, or an async iterable.
    answers:
        Initial answers. Questions whose path is already answered are
        skipped unless they set ``ask_answered``.

    Returns
    -------
    PromptSession
        Awaitable that resolves to the answers ``dict``.
    """
    from askflow.session.factory import prompt as _prompt

    return _prompt(questions, answers)


def create_prompt_module(
    *,
    input: IO[str] | None = None,  # noqa: A002
    output: IO[str] | None = None,
    strict_interactivity_check: bool = False,
    registry: "PromptRegistry | None" = None,
    transport_factory: "TransportFactory | None" = None,
) -> "PromptModule":
    """Return an independent prompt function with its own configuration.

    Parameters
    ----------
    input, output:
        Streams used by every session of the module.
    strict_interactivity_check:
        When ``True``, sessions fail with
        ``NonInteractiveEnvironmentError`` if the input is not a terminal.
    registry:
        Prompt registry; defaults to the shared one.
    transport_factory:
        ``factory(input, output) -> Transport`` called once per session;
        defaults to ``StreamTransport``.
    """
    from askflow.session.factory import create_prompt_module as _create
    from askflow.transport import StreamTransport

    return _create(
        input=input,
        output=output,
        strict_interactivity_check=strict_interactivity_check,
        registry=registry,
        transport_factory=transport_factory or StreamTransport,
    )


def register_prompt(type_name: str, factory: "PromptFactory") -> "PromptFactory | None":
    """Register ``factory`` for ``type_name`` in the shared registry.

    Returns
    -------
    PromptFactory | None
        The factory previously registered under ``type_name``.
    """
    from askflow.prompts.registry import default_registry

    return default_registry.register(type_name, factory)


def restore_default_prompts() -> None:
    """Discard every override in the shared registry."""
    from askflow.prompts.registry import default_registry

    default_registry.restore_defaults()


__all__ = [
    "__version__",
    "prompt",
    "create_prompt_module",
    "register_prompt",
    "restore_default_prompts",
    "defer",
    "Deferred",
    "Question",
    "QuestionStream",
    "Separator",
    "AskflowError",
    "ConfigurationError",
    "FieldResolutionError",
    "NonInteractiveEnvironmentError",
    "PromptExecutionError",
    "PromptTypeNotFoundError",
    "StreamOverflowError",
]
