"""Path-aware dependency injection container.

Bindings are resolved by name. A registration under a composite path such as
``"Service->Repo"`` overrides the global ``"Repo"`` binding only while
``Service`` is being built. Dependencies are declared explicitly, either at
registration time or with the ``injectable`` decorator.

Exports:
- `Container`: registry plus resolver performing constructor, property and setter injection.
- `Registry`: the underlying binding store with hierarchical lookup.
- `injectable` / `declare`: attach injection directives to a class or factory.
- `Value`, `Directive`, `InjectionConfig`: explicit directive and config forms.
- error classes, all deriving from `InjectionError`.
"""

from ._bindings import (
    BindingName,
    ConstructorKind,
    Directive,
    InjectionConfig,
    Value,
    declare,
    declared_config,
    injectable,
)
from ._container import Container
from ._errors import (
    CyclicDependencyError,
    InjectionError,
    InvalidBindingDefinitionError,
    InvalidBindingNameError,
    NotRegisteredError,
    SetterTargetNotCallableError,
)
from ._registry import Registry


__all__ = [
    "BindingName",
    "ConstructorKind",
    "Container",
    "CyclicDependencyError",
    "Directive",
    "InjectionConfig",
    "InjectionError",
    "InvalidBindingDefinitionError",
    "InvalidBindingNameError",
    "NotRegisteredError",
    "Registry",
    "SetterTargetNotCallableError",
    "Value",
    "declare",
    "declared_config",
    "injectable",
]
