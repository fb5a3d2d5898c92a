"""Dynamic field resolver package."""
from __future__ import annotations

from askflow.resolver.resolver import Deferred, defer, resolve, resolve_all

__all__ = [
    "Deferred",
    "defer",
    "resolve",
    "resolve_all",
]
