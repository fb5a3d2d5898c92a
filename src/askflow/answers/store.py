"""Path-addressed answer storage.

Answers are kept in a plain nested ``dict``. A question ``name`` is a
dot-delimited path into that structure, so the question ``"foo.bar.q1"``
stores its answer at ``answers["foo"]["bar"]["q1"]``.

Usage
-----
::

    from askflow.answers import Answers

    answers = Answers({"prefilled": True})
    answers.set_path("foo.bar.q1", True)
    answers.get_path("foo.bar.q1")   # True
    answers.has_path("foo.q2")       # False
    answers
    # {'prefilled': True, 'foo': {'bar': {'q1': True}}}
"""
from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping
from typing import Any

logger = logging.getLogger(__name__)

_MISSING = object()


def split_path(path: str) -> list[str]:
    """Split a dot path into its segments.

    Raises
    ------
    ValueError
        If ``path`` is empty or contains an empty segment.
    """
    segments = path.split(".")
    if not path or any(not segment for segment in segments):
        raise ValueError(f"Invalid answer path {path!r}")
    return segments


def get_path(data: Mapping[str, Any], path: str, default: Any = None) -> Any:
    """Return the value stored at ``path``, or ``default`` when undefined."""
    node: Any = data
    for segment in split_path(path):
        if not isinstance(node, Mapping) or segment not in node:
            return default
        node = node[segment]
    return node


def has_path(data: Mapping[str, Any], path: str) -> bool:
    """Return True if every segment of ``path`` exists in ``data``.

    A stored ``None`` counts as defined.
    """
    return get_path(data, path, _MISSING) is not _MISSING


def set_path(data: MutableMapping[str, Any], path: str, value: Any) -> None:
    """Store ``value`` at ``path``, creating intermediate mappings as needed.

    Sibling keys along the path are preserved. When an intermediate
    segment holds a non-mapping value, that value is replaced by a new
    mapping.
    """
    segments = split_path(path)
    node: MutableMapping[str, Any] = data
    for index, segment in enumerate(segments[:-1]):
        child = node.get(segment, _MISSING)
        if not isinstance(child, MutableMapping):
            if child is not _MISSING:
                logger.debug(
                    "Replacing scalar at %r with a mapping to store %r",
                    ".".join(segments[: index + 1]),
                    path,
                )
            child = {}
            node[segment] = child
        node = child
    node[segments[-1]] = value


def copy_tree(data: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of ``data`` in which every nested mapping is copied.

    Leaf values (including lists and arbitrary objects such as locks or
    connections) are shared with ``data``, never copied.
    """
    return {
        key: copy_tree(value) if isinstance(value, Mapping) else value
        for key, value in data.items()
    }


class Answers(dict):
    """The answer store of one session.

    A ``dict`` subclass so that it can be handed to user callbacks and
    returned to callers as-is. Callbacks may mutate it directly; the
    path helpers are conveniences on top.
    """

    def get_path(self, path: str, default: Any = None) -> Any:
        return get_path(self, path, default)

    def has_path(self, path: str) -> bool:
        return has_path(self, path)

    def set_path(self, path: str, value: Any) -> None:
        set_path(self, path, value)

    def __repr__(self) -> str:
        return f"Answers({dict.__repr__(self)})"
