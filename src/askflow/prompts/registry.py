"""Prompt type registry for askflow.

Maps question ``type`` names to prompt factories. A factory is any
callable ``factory(question, transport, answers)`` returning an object
with a ``run()`` method; ``Prompt`` subclasses qualify directly.

Third-party packages can ship prompt types by declaring entry-points in
their own ``pyproject.toml`` under the "askflow.prompts" group.

Example
-------
Override a built-in type and put it back::

    from askflow.prompts import default_registry

    previous = default_registry.register("confirm", MyConfirm)
    ...
    default_registry.restore_defaults()

Register a new type with the decorator::

    @default_registry.register("rating")
    class RatingPrompt(LinePrompt):
        def parse(self, raw: str) -> int:
            return int(raw)

Load all installed prompt types via entry-points::

    default_registry.load_entrypoints()
"""
from __future__ import annotations

import importlib.metadata
import logging
from collections.abc import Callable, Mapping
from typing import Any, overload

from askflow.errors import PromptTypeNotFoundError
from askflow.prompts.builtin import BUILTIN_PROMPTS

logger = logging.getLogger(__name__)

ENTRYPOINT_GROUP = "askflow.prompts"

PromptFactory = Callable[..., Any]


class PromptRegistry:
    """Replaceable mapping of prompt type names to factories.

    Parameters
    ----------
    defaults:
        The built-in set, reinstated by ``restore_defaults``. Defaults to
        ``BUILTIN_PROMPTS``.
    name:
        A human-readable name for this registry (used in error messages).
    """

    def __init__(
        self,
        defaults: Mapping[str, PromptFactory] | None = None,
        name: str = "prompts",
    ) -> None:
        self._defaults: dict[str, PromptFactory] = dict(
            BUILTIN_PROMPTS if defaults is None else defaults
        )
        self._name = name
        self._factories: dict[str, PromptFactory] = dict(self._defaults)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    @overload
    def register(self, type_name: str) -> Callable[[PromptFactory], PromptFactory]: ...

    @overload
    def register(self, type_name: str, factory: PromptFactory) -> PromptFactory | None: ...

    def register(
        self, type_name: str, factory: PromptFactory | None = None
    ) -> Any:
        """Map ``type_name`` to ``factory``, replacing any existing entry.

        Parameters
        ----------
        type_name:
            The question ``type`` the factory handles.
        factory:
            Callable ``(question, transport, answers) -> prompt``. When
            omitted, a class decorator is returned instead.

        Returns
        -------
        PromptFactory | None
            The factory previously registered under ``type_name``, or
            ``None``. In decorator form, the decorator.

        Raises
        ------
        TypeError
            If ``factory`` is not callable.
        """
        if factory is None:

            def decorator(cls: PromptFactory) -> PromptFactory:
                self.register(type_name, cls)
                return cls

            return decorator

        if not callable(factory):
            raise TypeError(
                f"Cannot register {factory!r} under {type_name!r}: "
                "a prompt factory must be callable."
            )
        previous = self._factories.get(type_name)
        self._factories[type_name] = factory
        logger.debug(
            "Registered prompt type %r -> %s in registry %r",
            type_name,
            getattr(factory, "__qualname__", repr(factory)),
            self._name,
        )
        return previous

    def deregister(self, type_name: str) -> None:
        """Remove a prompt type from the registry.

        Raises
        ------
        PromptTypeNotFoundError
            If ``type_name`` is not currently registered.
        """
        if type_name not in self._factories:
            raise PromptTypeNotFoundError(type_name, self._name)
        del self._factories[type_name]
        logger.debug("Deregistered prompt type %r from registry %r", type_name, self._name)

    def restore_defaults(self) -> None:
        """Discard every override and reinstate the built-in set."""
        self._factories = dict(self._defaults)
        logger.debug("Restored default prompt types in registry %r", self._name)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, type_name: str) -> PromptFactory:
        """Return the factory registered under ``type_name``.

        Raises
        ------
        PromptTypeNotFoundError
            If no factory is registered under ``type_name``.
        """
        try:
            return self._factories[type_name]
        except KeyError:
            raise PromptTypeNotFoundError(type_name, self._name) from None

    def list_types(self) -> list[str]:
        """Return a sorted list of all registered type names."""
        return sorted(self._factories)

    def __getitem__(self, type_name: str) -> PromptFactory:
        return self.get(type_name)

    def __contains__(self, type_name: object) -> bool:
        """Support ``"confirm" in registry`` membership test."""
        return type_name in self._factories

    def __len__(self) -> int:
        """Return the number of registered prompt types."""
        return len(self._factories)

    def __repr__(self) -> str:
        return f"PromptRegistry(name={self._name!r}, types={self.list_types()})"

    # ------------------------------------------------------------------
    # Entry-point loading
    # ------------------------------------------------------------------

    def load_entrypoints(self, group: str = ENTRYPOINT_GROUP) -> None:
        """Discover and register prompt types declared as package entry-points.

        Types that are already registered (built-ins, explicit overrides,
        or a previous call) are skipped with a debug-level log entry, so
        repeated calls are idempotent and never shadow explicit
        registrations.

        Example
        -------
        In a downstream package's ``pyproject.toml``::

            [project.entry-points."askflow.prompts"]
            rating = "my_package.prompts:RatingPrompt"
        """
        for ep in importlib.metadata.entry_points(group=group):
            if ep.name in self._factories:
                logger.debug(
                    "Entry-point %r already registered in %r; skipping.",
                    ep.name,
                    self._name,
                )
                continue
            try:
                factory = ep.load()
            except Exception:
                logger.exception(
                    "Failed to load entry-point %r from group %r; skipping.",
                    ep.name,
                    group,
                )
                continue
            try:
                self.register(ep.name, factory)
            except TypeError:
                logger.warning(
                    "Entry-point %r loaded but could not be registered "
                    "in registry %r; skipping.",
                    ep.name,
                    self._name,
                )


default_registry = PromptRegistry(name="default")
