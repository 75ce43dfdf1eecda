from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ._bindings import (
    BindingName,
    ConstructorBinding,
    Directive,
    DirectiveMode,
    DirectiveSource,
    InjectionConfig,
    Value,
    ValueBinding,
    declared_config,
)
from ._errors import (
    CyclicDependencyError,
    InvalidBindingDefinitionError,
    InvalidBindingNameError,
    SetterTargetNotCallableError,
)
from ._registry import Registry


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    BindingPath = tuple[str, ...]
    Binding = str | Callable[["Container", BindingPath], Any]

_ORDINALS = ("first", "second", "third")


def ordinal(index: int) -> str:
    """0 -> 'first', 1 -> 'second', 2 -> 'third', 3 -> '4th', ..."""
    if index < len(_ORDINALS):
        return _ORDINALS[index]
    return f"{index + 1}th"


class Container:
    """Path-aware DI container.

    - register classes or factories, with optional explicit injection config
    - bind names to fixed values
    - resolve with constructor, property and setter injection
    - no caching: every `create` builds a fresh graph.
    """

    def __init__(self, *, separator: str = "->", validate_names: bool = False) -> None:
        self._registry = Registry(separator)
        self._validate_names = validate_names

    @property
    def registry(self) -> Registry:
        return self._registry

    @property
    def separator(self) -> str:
        return self._registry.separator

    def register(
        self,
        name: str,
        constructor: type | None = None,
        config: object = None,
        *,
        factory: Callable[..., Any] | None = None,
    ) -> None:
        """Register a class or factory for ``name``.

        Example:
          container.register("Service", Service, ["Repo", Value(3)])
          container.register("Service->Repo", FakeRepo)
          container.register("clock", factory=make_clock, config={"config": ["(set_tz)"]})

        """
        self._registry.register(name, constructor, config, factory=factory)

    def set(self, name: str, value: Any) -> None:
        """Bind ``name`` to ``value``; `create` returns it as is."""
        self._registry.set(name, value)

    def is_registered(self, name: str) -> bool:
        return self._registry.is_registered(name)

    def create(self, binding: Binding, current_path: Sequence[str] | None = None) -> Any:
        """Resolve ``binding`` into an instance.

        ``binding`` is either a binding name or a callback invoked as
        ``callback(container, current_path)``. ``current_path`` is the chain of
        names already being resolved; it drives override lookup and cycle
        detection.
        """
        path: BindingPath = tuple(current_path or ())

        if callable(binding):
            return binding(self, path)

        if not isinstance(binding, str):
            raise InvalidBindingNameError(binding)

        if self._validate_names:
            BindingName.parse(binding, self.separator)

        if binding in path:
            raise CyclicDependencyError([*path, binding], self.separator)

        entry = self._registry.lookup(path, binding)

        if isinstance(entry, ValueBinding):
            return entry.value

        new_path = (*path, binding)
        return self._construct(entry, new_path)

    def _construct(self, entry: ConstructorBinding, path: BindingPath) -> Any:
        config = self._effective_config(entry)

        args = [self._resolve_argument(arg, path, index) for index, arg in enumerate(config.inject)]
        instance = entry.instantiate(args)

        for position, raw in enumerate(config.config):
            directive = Directive.normalize(raw, path, position, self.separator)
            self._apply_directive(instance, directive, path, position)

        logger.debug("Created '%s' (%s)", self.separator.join(path), type(instance).__name__)
        return instance

    def _effective_config(self, entry: ConstructorBinding) -> InjectionConfig:
        # Explicit and declared configs are alternatives, never merged.
        if entry.config is not None:
            return entry.config
        return declared_config(entry.constructor) or InjectionConfig()

    def _resolve_argument(self, arg: object, path: BindingPath, index: int) -> Any:
        if isinstance(arg, str):
            return self.create(arg, path)

        if isinstance(arg, Value):
            return arg.value

        if callable(arg):
            return arg(self, path, index)

        msg = (
            f"Invalid {ordinal(index)} constructor argument binding for "
            f"{self.separator.join(path)}: {arg!r}"
        )
        raise InvalidBindingDefinitionError(msg, path, index)

    def _apply_directive(self, instance: Any, directive: Directive, path: BindingPath, position: int) -> None:
        if directive.mode is DirectiveMode.CALLBACK:
            directive.payload(self, path, position, instance)
            return

        if directive.mode is DirectiveMode.SETTER and not callable(getattr(instance, directive.target, None)):
            raise SetterTargetNotCallableError(directive.target, path, self.separator)

        if directive.source is DirectiveSource.VALUE:
            value = directive.payload
        elif isinstance(directive.payload, Value):
            value = directive.payload.value
        else:
            value = self.create(directive.payload, path)

        if directive.mode is DirectiveMode.SETTER:
            getattr(instance, directive.target)(value)
        else:
            setattr(instance, directive.target, value)
