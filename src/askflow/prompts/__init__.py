"""Prompt subsystem for askflow.

Prompts render a single question over the session transport. Built-in
types live in ``askflow.prompts.builtin``; the registry maps question
``type`` names to prompt factories and can be extended at runtime or via
``importlib.metadata`` entry-points under the "askflow.prompts" group.
"""
from __future__ import annotations

from askflow.prompts.base import InvalidInput, LinePrompt, Prompt
from askflow.prompts.builtin import BUILTIN_PROMPTS
from askflow.prompts.choices import Choice, Separator
from askflow.prompts.registry import PromptRegistry, default_registry

__all__ = [
    "BUILTIN_PROMPTS",
    "Choice",
    "InvalidInput",
    "LinePrompt",
    "Prompt",
    "PromptRegistry",
    "Separator",
    "default_registry",
]
