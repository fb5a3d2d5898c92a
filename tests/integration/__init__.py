"""Integration tests.

These drive whole prompt sessions through ``create_prompt_module`` over
in-memory streams: sources, conditional questions, deferred fields,
the answer bus and the transport lifecycle. Run the fast unit tests
alone with ``pytest tests/unit/``.
"""
from __future__ import annotations
