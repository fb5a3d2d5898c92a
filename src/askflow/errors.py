"""Error types raised by askflow sessions.

Every fatal problem in a session surfaces as exactly one exception from
awaiting the session. All of them derive from ``AskflowError`` so that
callers can catch the whole family at once, and all of them carry an
``is_tty_error`` flag so that callers can branch on non-interactive
environments without an ``isinstance`` check.
"""
from __future__ import annotations


class AskflowError(Exception):
    """Base class for all askflow errors."""

    is_tty_error: bool = False


class ConfigurationError(AskflowError):
    """Raised for an unknown prompt type or a malformed question.

    For sequence and mapping sources this is raised before the session's
    transport is opened.
    """


class PromptTypeNotFoundError(ConfigurationError, KeyError):
    """Raised when a question names a prompt type that is not registered."""

    def __init__(self, type_name: str, registry_name: str) -> None:
        self.type_name = type_name
        self.registry_name = registry_name
        super().__init__(
            f"Prompt type {type_name!r} is not registered in the "
            f"{registry_name!r} registry. Register it with "
            "register_prompt() or install a package that provides it."
        )

    # KeyError.__str__ would wrap the message in quotes
    def __str__(self) -> str:
        return str(self.args[0])


class NonInteractiveEnvironmentError(AskflowError):
    """Raised in strict mode when the session input is not a terminal."""

    is_tty_error = True

    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            message
            or "Prompts cannot be rendered in a non-interactive environment. "
            "Disable strict_interactivity_check to proceed anyway."
        )


class FieldResolutionError(AskflowError):
    """Raised when a dynamic question field throws or completes with an error.

    Parameters
    ----------
    field:
        The question field being resolved, e.g. ``"when"`` or ``"default"``.
    cause:
        The original exception (also chained as ``__cause__``).
    question_name:
        The ``name`` of the question the field belongs to, when known.
    """

    def __init__(
        self,
        field: str,
        cause: BaseException,
        question_name: str | None = None,
    ) -> None:
        self.field = field
        self.cause = cause
        self.question_name = question_name
        where = f" of question {question_name!r}" if question_name else ""
        super().__init__(f"Failed to resolve {field!r}{where}: {cause}")


class PromptExecutionError(AskflowError):
    """Raised when a prompt's ``run()`` fails."""

    def __init__(self, question_name: str | None, cause: BaseException | str) -> None:
        self.question_name = question_name
        self.cause = cause
        super().__init__(f"Prompt for question {question_name!r} failed: {cause}")


class StreamOverflowError(AskflowError):
    """Raised when a question is pushed while another is still waiting.

    A pushed source holds at most one question that the session has not
    pulled yet. Producers that cannot pace themselves should use
    ``QuestionStream.put``, which waits for the session to catch up.
    """
