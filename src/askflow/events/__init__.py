"""Event package: the multicast ``Subject`` and the session ``EventBus``."""
from __future__ import annotations

from askflow.events.bus import AnswerEvent, EventBus, Subject, Subscription

__all__ = [
    "AnswerEvent",
    "EventBus",
    "Subject",
    "Subscription",
]
