"""Session package: configuration, resource guard, sequencer and factory."""
from __future__ import annotations

from askflow.session.config import SessionConfig
from askflow.session.factory import PromptModule, PromptSession, create_prompt_module, prompt
from askflow.session.guard import SessionResourceGuard
from askflow.session.sequencer import QuestionSequencer, SequencerState

__all__ = [
    "PromptModule",
    "PromptSession",
    "QuestionSequencer",
    "SequencerState",
    "SessionConfig",
    "SessionResourceGuard",
    "create_prompt_module",
    "prompt",
]
