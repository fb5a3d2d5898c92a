"""Shared test fixtures for askflow.

Fixtures defined here are available to all tests in the suite without
needing an explicit import. Add project-wide fixtures here; keep
domain-specific fixtures close to the tests that use them.
"""
from __future__ import annotations

import io
from collections.abc import Callable
from typing import IO

import pytest

from askflow.prompts import PromptRegistry
from askflow.session import PromptModule, create_prompt_module
from askflow.transport import StreamTransport


class RecordingTransport(StreamTransport):
    """StreamTransport that counts reads and closes."""

    def __init__(
        self,
        input: IO[str] | None = None,  # noqa: A002
        output: IO[str] | None = None,
        interactive: bool = False,
    ) -> None:
        super().__init__(input, output)
        self._interactive = interactive
        self.read_calls = 0
        self.close_calls = 0
        self.interactivity_queries = 0

    def is_interactive(self) -> bool:
        self.interactivity_queries += 1
        return self._interactive

    async def read_line(self) -> str:
        self.read_calls += 1
        return await super().read_line()

    def close(self) -> None:
        self.close_calls += 1
        super().close()

    @property
    def text(self) -> str:
        return self.output.getvalue()  # type: ignore[attr-defined]


@pytest.fixture()
def package_name() -> str:
    """Return the importable package name for assertions."""
    return "askflow"


@pytest.fixture()
def expected_version() -> str:
    """Return the current expected version string.

    Update this fixture when cutting a release so that the version
    test immediately catches stale ``__version__`` values.
    """
    return "0.1.0"


@pytest.fixture()
def transports() -> list[RecordingTransport]:
    """Every transport created by ``make_prompt`` modules, in order."""
    return []


@pytest.fixture()
def make_prompt(transports: list[RecordingTransport]) -> Callable[..., PromptModule]:
    """Return a factory for prompt modules fed from an in-memory input.

    ``lines`` is the whole input text; each prompt reads one line. Each
    module gets a fresh registry unless one is passed explicitly.
    """

    def _make(
        lines: str = "",
        *,
        strict: bool = False,
        interactive: bool = False,
        registry: PromptRegistry | None = None,
    ) -> PromptModule:
        def factory(input: IO[str] | None, output: IO[str] | None) -> RecordingTransport:  # noqa: A002
            transport = RecordingTransport(input, output, interactive=interactive)
            transports.append(transport)
            return transport

        return create_prompt_module(
            input=io.StringIO(lines),
            output=io.StringIO(),
            strict_interactivity_check=strict,
            registry=registry if registry is not None else PromptRegistry(),
            transport_factory=factory,
        )

    return _make
