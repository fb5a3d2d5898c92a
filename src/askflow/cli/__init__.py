"""CLI package.

The ``cli`` sub-package contains the Click application and all
command implementations. It should import only from the public API
of the parent package and the prompt registry, never from session
internals directly.
"""
from __future__ import annotations
