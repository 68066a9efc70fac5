"""Composite classes: factory, base class, resolution engine and registry."""

from conjugate.compose.conjugate import (
    FORWARDED_SPECIAL_METHODS,
    C,
    Conjugate,
    ConjugateBase,
    component,
    components,
    is_conjugated,
)
from conjugate.compose.registry import ConjugateRegistry, get_registry
from conjugate.compose.resolution import (
    resolve_delete,
    resolve_get,
    resolve_has,
    resolve_member_names,
    resolve_own_keys,
    resolve_set,
)

__all__ = [
    # Factory
    "Conjugate",
    "C",
    "ConjugateBase",
    "FORWARDED_SPECIAL_METHODS",
    "component",
    "components",
    "is_conjugated",
    # Registry
    "ConjugateRegistry",
    "get_registry",
    # Resolution
    "resolve_has",
    "resolve_get",
    "resolve_set",
    "resolve_delete",
    "resolve_own_keys",
    "resolve_member_names",
]
