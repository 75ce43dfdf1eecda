from __future__ import annotations

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from collections.abc import Sequence


class InjectionError(RuntimeError):
    """Base class for every error raised while registering or resolving bindings."""

    code = "INJECT"

    def __init__(self, msg: str) -> None:
        super().__init__(msg)
        self.msg = msg

    def __str__(self) -> str:
        return self.msg


class NotRegisteredError(InjectionError, KeyError):
    code = "NOTREG"

    def __init__(self, name: str, path: Sequence[str], separator: str) -> None:
        chain = separator.join([*path, name])
        super().__init__(f'Binding "{name}" not found in registry (binding chain: {chain})')
        self.name = name
        self.path = tuple(path)


class CyclicDependencyError(InjectionError):
    code = "CYCLE"

    def __init__(self, chain: Sequence[str], separator: str) -> None:
        super().__init__(f"Cyclic dependency detected in binding chain: {separator.join(chain)}")
        self.chain = tuple(chain)


class InvalidBindingDefinitionError(InjectionError, TypeError):
    code = "BINDDEF"

    def __init__(self, msg: str, path: Sequence[str], position: int | None = None) -> None:
        super().__init__(msg)
        self.path = tuple(path)
        self.position = position


class SetterTargetNotCallableError(InjectionError, TypeError):
    code = "SETTERNF"

    def __init__(self, target: str, path: Sequence[str], separator: str) -> None:
        super().__init__(f"Attempted setter injection into non-function: {separator.join(path)}#{target}()")
        self.target = target
        self.path = tuple(path)


class InvalidBindingNameError(InjectionError, ValueError):
    code = "BINDNAME"

    def __init__(self, name: object) -> None:
        super().__init__(f"Invalid binding name {name!r}")
        self.name = name
