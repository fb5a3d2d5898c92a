"""Session configuration."""
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import IO, Any

from askflow.transport import StreamTransport, Transport

TransportFactory = Callable[[Any, Any], Transport]


@dataclass(frozen=True)
class SessionConfig:
    """Options shared by every session a prompt module creates.

    Parameters
    ----------
    input:
        Input stream handed to the transport factory. ``None`` means
        ``sys.stdin``.
    output:
        Output stream handed to the transport factory. ``None`` means
        ``sys.stdout``.
    strict_interactivity_check:
        When ``True``, a session whose input is not a terminal fails with
        ``NonInteractiveEnvironmentError`` before asking anything. When
        ``False`` (the default) it logs a warning and proceeds.
    transport_factory:
        ``factory(input, output) -> Transport``, called once per session.
    """

    input: IO[str] | None = None
    output: IO[str] | None = None
    strict_interactivity_check: bool = False
    transport_factory: TransportFactory = StreamTransport
