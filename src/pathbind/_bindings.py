from __future__ import annotations

import inspect
import re
import weakref
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from ._errors import InvalidBindingDefinitionError, InvalidBindingNameError


_SEGMENT_RE = re.compile(r"([A-Za-z_$][A-Za-z0-9_$]*)(\??)")


@dataclass(frozen=True)
class Segment:
    name: str
    optional: bool = False


@dataclass(frozen=True)
class BindingName:
    """A parsed binding name.

    A binding name is one or more segments joined by the container separator.
    Each segment may carry a trailing ``?`` which is recorded in ``optional``
    but has no effect on resolution.
    """

    raw: str
    segments: tuple[Segment, ...]

    @property
    def optional(self) -> bool:
        return self.segments[-1].optional

    @classmethod
    def parse(cls, raw: object, separator: str = "->") -> BindingName:
        if not isinstance(raw, str) or not raw:
            raise InvalidBindingNameError(raw)

        segments = []
        for part in raw.split(separator):
            match = _SEGMENT_RE.fullmatch(part)
            if match is None:
                raise InvalidBindingNameError(raw)
            segments.append(Segment(match.group(1), optional=match.group(2) == "?"))

        return cls(raw, tuple(segments))


class ConstructorKind(Enum):
    CLASS = "class"
    FACTORY = "factory"


@dataclass(frozen=True)
class InjectionConfig:
    """Injection directives for one constructor.

    - ``inject``: constructor arguments, resolved positionally.
    - ``config``: property/setter directives, applied in order after construction.
    """

    inject: tuple[Any, ...] = ()
    config: tuple[Any, ...] = ()

    @classmethod
    def coerce(cls, raw: object) -> InjectionConfig | None:
        """Accept an InjectionConfig, a bare argument sequence or an ``inject``/``config`` mapping."""
        if raw is None or isinstance(raw, InjectionConfig):
            return raw
        if isinstance(raw, Mapping):
            unknown = set(raw) - {"inject", "config"}
            if unknown:
                msg = f"Unknown injection config keys: {', '.join(sorted(unknown))}"
                raise ValueError(msg)
            return cls(
                inject=_directives(raw.get("inject", ()), "inject"),
                config=_directives(raw.get("config", ()), "config"),
            )
        if isinstance(raw, Sequence) and not isinstance(raw, str):
            return cls(inject=tuple(raw))

        msg = f"Injection config must be a sequence, a mapping or an InjectionConfig, got {type(raw).__name__}"
        raise TypeError(msg)


def _directives(raw: object, field_name: str) -> tuple[Any, ...]:
    if isinstance(raw, str) or not isinstance(raw, Sequence):
        msg = f"`{field_name}` must be a sequence of directives, got {type(raw).__name__}"
        raise TypeError(msg)
    return tuple(raw)


@dataclass(frozen=True)
class ValueBinding:
    value: Any
    kind: str = field(default="value", init=False)


@dataclass(frozen=True)
class ConstructorBinding:
    constructor: Callable[..., Any]
    constructor_kind: ConstructorKind
    config: InjectionConfig | None = None
    kind: str = field(default="constructor", init=False)

    def instantiate(self, args: Sequence[Any]) -> Any:
        if self.constructor_kind is ConstructorKind.CLASS:
            # A class may still hand back another object from __new__; Python call semantics apply.
            return self.constructor(*args)

        instance = self.constructor(*args)
        if instance is None:
            name = getattr(self.constructor, "__qualname__", repr(self.constructor))
            msg = f"Factory {name} returned None instead of an instance"
            raise TypeError(msg)
        return instance


Entry = Union[ValueBinding, ConstructorBinding]


@dataclass(frozen=True)
class Value:
    """Literal value usable wherever a binding is expected."""

    value: Any


class DirectiveMode(Enum):
    PROPERTY = "property"
    SETTER = "setter"
    CALLBACK = "callback"


class DirectiveSource(Enum):
    BINDING = "binding"
    VALUE = "value"


@dataclass(frozen=True)
class Directive:
    """A normalized injection directive.

    ``CALLBACK`` directives carry the callable in ``payload`` and have no target;
    it is invoked as ``callback(container, path, position, instance)``.
    """

    mode: DirectiveMode
    source: DirectiveSource
    target: str
    payload: Any

    @classmethod
    def property(cls, target: str, binding: Any = None, *, value: Any = inspect.Parameter.empty) -> Directive:
        return cls._build(DirectiveMode.PROPERTY, target, binding, value)

    @classmethod
    def setter(cls, target: str, binding: Any = None, *, value: Any = inspect.Parameter.empty) -> Directive:
        return cls._build(DirectiveMode.SETTER, target, binding, value)

    @classmethod
    def _build(cls, mode: DirectiveMode, target: str, binding: Any, value: Any) -> Directive:
        if value is not inspect.Parameter.empty:
            return cls(mode, DirectiveSource.VALUE, target, value)
        return cls(mode, DirectiveSource.BINDING, target, target if binding is None else binding)

    @classmethod
    def normalize(cls, raw: object, path: Sequence[str], position: int, separator: str) -> Directive:  # noqa: C901
        if isinstance(raw, Directive):
            return raw

        where = f"directive #{position + 1} of {separator.join(path)}"

        if isinstance(raw, str):
            if raw.startswith("(") and raw.endswith(")"):
                name = raw[1:-1]
                mode = DirectiveMode.SETTER
            else:
                name = raw
                mode = DirectiveMode.PROPERTY

            if not name:
                msg = f"Empty {mode.value} directive in {where}"
                raise InvalidBindingDefinitionError(msg, path, position)
            return cls(mode, DirectiveSource.BINDING, name, name)

        if isinstance(raw, Mapping):
            if "setter" in raw:
                mode, target = DirectiveMode.SETTER, raw["setter"]
            elif "property" in raw:
                mode, target = DirectiveMode.PROPERTY, raw["property"]
            else:
                msg = f"No property or setter target specified in {where}"
                raise InvalidBindingDefinitionError(msg, path, position)

            if not isinstance(target, str) or not target:
                msg = f"Injection target must be a non-empty string in {where}, got {target!r}"
                raise InvalidBindingDefinitionError(msg, path, position)

            if "binding" in raw:
                binding = raw["binding"]
                if not isinstance(binding, (str, Value)) and not callable(binding):
                    msg = f"Binding must be a name, a Value or a callback in {where}, got {binding!r}"
                    raise InvalidBindingDefinitionError(msg, path, position)
                return cls(mode, DirectiveSource.BINDING, target, binding)
            if "value" in raw:
                return cls(mode, DirectiveSource.VALUE, target, raw["value"])

            msg = f"No binding or value specified in {where}"
            raise InvalidBindingDefinitionError(msg, path, position)

        if callable(raw):
            return cls(DirectiveMode.CALLBACK, DirectiveSource.BINDING, "", raw)

        msg = f"Unsupported injection directive {raw!r} in {where}"
        raise InvalidBindingDefinitionError(msg, path, position)


# Declared configuration lives beside the constructor, keyed by its identity.
_declarations: weakref.WeakKeyDictionary[Callable[..., Any], InjectionConfig] = weakref.WeakKeyDictionary()


def declare(target: Callable[..., Any], inject: Sequence[Any] = (), config: Sequence[Any] = ()) -> None:
    """Attach injection directives to ``target``; used when ``register`` gets no explicit config."""
    _declarations[target] = InjectionConfig(inject=_directives(inject, "inject"), config=_directives(config, "config"))


def injectable(inject: Sequence[Any] = (), config: Sequence[Any] = ()) -> Callable[[Any], Any]:
    """Decorator form of :func:`declare`.

    Example:
        @injectable(inject=["db"], config=["logger", "(set_cache)"])
        class Repo: ...

    """

    def decorator(target: Any) -> Any:
        declare(target, inject=inject, config=config)
        return target

    return decorator


def declared_config(target: Callable[..., Any]) -> InjectionConfig | None:
    try:
        return _declarations.get(target)
    except TypeError:
        # not weak-referenceable, so nothing could have been declared
        return None
