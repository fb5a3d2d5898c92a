"""Line transport used by prompts to talk to the user.

A transport reads whole lines from an input stream and writes rendered
text to an output stream. It is the only I/O a session performs, and a
session owns exactly one transport for its whole lifetime.

``StreamTransport`` is the built-in implementation. It renders through a
``rich`` console bound to the output stream, so styling degrades to
plain text when the output is not a terminal.
"""
from __future__ import annotations

import asyncio
import logging
import sys
from typing import IO, Any, Protocol, runtime_checkable

from rich.console import Console
from rich.text import Text

logger = logging.getLogger(__name__)


class TransportClosedError(RuntimeError):
    """Raised when reading from a transport that has been closed."""


@runtime_checkable
class Transport(Protocol):
    """Protocol for line transports.

    Implementations
    ---------------
    - :class:`StreamTransport` — text streams rendered through rich.
    - Tests may supply any object with these members.
    """

    @property
    def closed(self) -> bool: ...  # pragma: no cover

    async def read_line(self) -> str:
        """Return the next input line without its line terminator.

        Raises
        ------
        EOFError
            When the input is exhausted.
        """
        ...  # pragma: no cover

    def write(self, text: "str | Text") -> None: ...  # pragma: no cover

    def close(self) -> None: ...  # pragma: no cover

    def is_interactive(self) -> bool: ...  # pragma: no cover


class StreamTransport:
    """Transport over a text input stream and a text output stream.

    Parameters
    ----------
    input:
        Readable text stream. Defaults to ``sys.stdin``.
    output:
        Writable text stream. Defaults to ``sys.stdout``.

    The streams belong to the caller: ``close()`` flushes the output but
    never closes either stream.
    """

    def __init__(self, input: IO[str] | None = None, output: IO[str] | None = None) -> None:  # noqa: A002
        self.input: IO[str] = input if input is not None else sys.stdin
        self.output: IO[str] = output if output is not None else sys.stdout
        self.console = Console(file=self.output, highlight=False, soft_wrap=True)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def is_interactive(self) -> bool:
        """Return True if the input stream is attached to a terminal."""
        isatty = getattr(self.input, "isatty", None)
        if isatty is None:
            return False
        try:
            return bool(isatty())
        except (OSError, ValueError):
            return False

    async def read_line(self) -> str:
        if self._closed:
            raise TransportClosedError("Cannot read from a closed transport")
        line = await asyncio.to_thread(self.input.readline)
        if not line:
            raise EOFError("Input stream ended before an answer was given")
        return line.rstrip("\r\n")

    def write(self, text: "str | Text", **kwargs: Any) -> None:
        if self._closed:
            logger.debug("Dropping write to closed transport: %r", text)
            return
        if isinstance(text, str):
            text = Text(text)
        self.console.print(text, end="", **kwargs)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self.output.flush()
        except (OSError, ValueError):
            logger.debug("Output stream could not be flushed on close", exc_info=True)

    def __repr__(self) -> str:
        return f"StreamTransport(input={self.input!r}, closed={self._closed})"
