"""Session resource guard.

Owns the one transport of a session, queries its interactivity exactly
once, and closes it exactly once whichever way the session ends.
"""
from __future__ import annotations

import logging

from askflow.errors import NonInteractiveEnvironmentError
from askflow.session.config import SessionConfig
from askflow.transport import Transport

logger = logging.getLogger(__name__)


class SessionResourceGuard:
    """Exactly-once owner of a session transport.

    Parameters
    ----------
    transport:
        The transport to own. It is considered open from here on.
    strict_interactivity_check:
        Fail in ``ensure_interactive`` instead of warning.
    """

    def __init__(self, transport: Transport, strict_interactivity_check: bool = False) -> None:
        self.transport = transport
        self.strict_interactivity_check = strict_interactivity_check
        self._closed = False
        try:
            self.interactive = bool(transport.is_interactive())
        except BaseException:
            self.close()
            raise
        logger.debug("Opened transport %r (interactive=%s)", transport, self.interactive)

    @classmethod
    def acquire(cls, config: SessionConfig) -> "SessionResourceGuard":
        """Create a fresh transport from ``config`` and guard it."""
        transport = config.transport_factory(config.input, config.output)
        return cls(transport, strict_interactivity_check=config.strict_interactivity_check)

    @property
    def closed(self) -> bool:
        return self._closed

    def ensure_interactive(self) -> None:
        """Apply the interactivity policy.

        Raises
        ------
        NonInteractiveEnvironmentError
            In strict mode, when the transport is not interactive.
        """
        if self.interactive:
            return
        if self.strict_interactivity_check:
            raise NonInteractiveEnvironmentError()
        logger.warning("Session input is not a terminal; prompting anyway.")

    def close(self) -> None:
        """Close the transport. Only the first call has any effect."""
        if self._closed:
            return
        self._closed = True
        self.transport.close()
        logger.debug("Closed transport %r", self.transport)

    def __enter__(self) -> "SessionResourceGuard":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
