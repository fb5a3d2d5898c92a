"""Answer store package.

Exports the ``Answers`` mapping and the dot-path helpers it is built on.
"""
from __future__ import annotations

from askflow.answers.store import Answers, copy_tree, get_path, has_path, set_path, split_path

__all__ = [
    "Answers",
    "copy_tree",
    "get_path",
    "has_path",
    "set_path",
    "split_path",
]
