from __future__ import annotations

import inspect
import logging
import threading
from typing import TYPE_CHECKING, Any

from ._bindings import ConstructorBinding, ConstructorKind, Entry, InjectionConfig, ValueBinding
from ._errors import NotRegisteredError


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence


class Registry:
    """Binding name -> entry store with hierarchical lookup.

    Keys are stored verbatim. A key may be a composite path such as
    ``"Service->Repo"`` which overrides ``"Repo"`` only while resolving the
    dependencies of ``Service``.
    """

    def __init__(self, separator: str = "->") -> None:
        if not isinstance(separator, str) or not separator:
            msg = "Binding path separator must be a non-empty string."
            raise ValueError(msg)

        self._separator = separator
        self._entries: dict[str, Entry] = {}
        self._lock = threading.RLock()

    @property
    def separator(self) -> str:
        return self._separator

    def register(
        self,
        name: str,
        constructor: type | None = None,
        config: object = None,
        *,
        factory: Callable[..., Any] | None = None,
    ) -> None:
        """Register a class or a factory callable under ``name``.

        Example:
          registry.register("repo", Repo, ["db"])
          registry.register("db", factory=make_db, config={"config": ["logger"]})

        ``config`` overrides anything declared for the constructor with ``injectable``.
        """
        if constructor is not None and factory is not None:
            msg = "Provide either `constructor` or `factory`, not both."
            raise ValueError(msg)

        if constructor is None and factory is None:
            msg = "Either `constructor` or `factory` must be provided."
            raise ValueError(msg)

        if constructor is not None:
            if not inspect.isclass(constructor):
                msg = f"Constructor for {name!r} must be a class; pass callables with `factory=`."
                raise TypeError(msg)
            entry = ConstructorBinding(constructor, ConstructorKind.CLASS, InjectionConfig.coerce(config))
        else:
            if not callable(factory):
                msg = f"Factory for {name!r} must be callable."
                raise TypeError(msg)
            entry = ConstructorBinding(factory, ConstructorKind.FACTORY, InjectionConfig.coerce(config))

        self._store(name, entry)

    def set(self, name: str, value: Any) -> None:
        """Bind ``name`` to a fixed value."""
        self._store(name, ValueBinding(value))

    def is_registered(self, name: str) -> bool:
        with self._lock:
            return name in self._entries

    def lookup(self, path: Sequence[str], name: str) -> Entry:
        """Find the most specific entry for ``name`` reached through ``path``.

        Candidates are tried from the full path down to the bare name.
        """
        candidate = [*path, name]
        with self._lock:
            for start in range(len(candidate)):
                key = self._separator.join(candidate[start:])
                entry = self._entries.get(key)
                if entry is not None:
                    if start:
                        logger.debug("'%s' resolved via '%s'", self._separator.join(candidate), key)
                    return entry

        raise NotRegisteredError(name, path, self._separator)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.is_registered(name)

    def __len__(self) -> int:
        return len(self._entries)

    def _store(self, name: str, entry: Entry) -> None:
        with self._lock:
            if name in self._entries:
                logger.debug("Replacing binding '%s' with %s entry", name, entry.kind)
            else:
                logger.debug("Registering %s entry for '%s'", entry.kind, name)
            self._entries[name] = entry
