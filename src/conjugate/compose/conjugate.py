"""Composite classes: structured, reusable multiple class composition.

Usage:
    class Base:
        def who(self):
            return "Base"

    class Mixin:
        def __init__(self, label: str):
            self.label = label

    Composite = Conjugate(Base, Mixin)
    obj = Composite((), ("mixin",))
    obj.who()     # "Base"
    obj.label     # "mixin", stored on the Mixin instance

    # Subclass members win over every component
    class Named(Conjugate(Base, Mixin)):
        def __init__(self, label: str):
            super().__init__((), (label,))

        def who(self):
            return "Named"
"""

from __future__ import annotations

import inspect
import logging
import reprlib
from collections.abc import Callable
from typing import Any, ClassVar

from conjugate.compose.registry import get_registry
from conjugate.compose.resolution import (
    resolve_delete,
    resolve_get,
    resolve_has,
    resolve_member_names,
    resolve_own_keys,
    resolve_set,
)
from conjugate.config.settings import WritePolicy, get_settings
from conjugate.core import reflect
from conjugate.core.layers import COMPONENTS_ATTR, PARTS_ATTR, generated_class, parts_of
from conjugate.core.types import ABSENT, Args, ArgSet
from conjugate.shape.resolver import (
    SHAPE_ATTR,
    composite_signature,
    resolve_args_shape,
    resolve_instance_shape,
)

logger = logging.getLogger(__name__)

FORWARDED_SPECIAL_METHODS = (
    "__call__",
    "__len__",
    "__iter__",
    "__contains__",
    "__getitem__",
    "__setitem__",
    "__delitem__",
    "__enter__",
    "__exit__",
)
"""Special methods Python looks up on the type; forwarded when a component defines them."""


class ConjugateBase:
    """Base class for all composite classes.

    Holds the component instances and routes attribute traffic through the
    resolution order. Only dunder names live here, so nothing shadows a
    component member.
    """

    __slots__ = (PARTS_ATTR,)

    __conjugate_write_policy__: ClassVar[WritePolicy] = WritePolicy.PRIMARY

    def __init__(self, *arg_sets: ArgSet) -> None:
        components: tuple[type, ...] | None = getattr(type(self), COMPONENTS_ATTR, None)
        if components is None:
            raise TypeError("ConjugateBase cannot be instantiated directly; use Conjugate(...)")
        if len(arg_sets) > len(components):
            raise TypeError(
                f"{type(self).__name__} takes {len(components)} argument sets "
                f"but {len(arg_sets)} were given"
            )
        normalized = [Args.coerce(a) for a in arg_sets]
        normalized.extend(Args() for _ in range(len(components) - len(normalized)))

        instances = []
        for cls, args in zip(components, normalized, strict=True):
            logger.debug(f"Constructing {cls.__name__} for {type(self).__name__}")
            instances.append(reflect.construct(cls, args.args, args.kwargs))
        primary, *auxiliaries = instances
        object.__setattr__(self, PARTS_ATTR, (primary, tuple(auxiliaries)))

    def __getattr__(self, key: str) -> Any:
        # Reached only when ordinary lookup (own __dict__, subclass members) fails.
        if parts_of(self) is None:
            raise AttributeError(f"'{type(self).__name__}' object has no attribute '{key}'")
        value = resolve_get(self, key)
        if value is ABSENT:
            raise AttributeError(f"'{type(self).__name__}' object has no attribute '{key}'")
        return value

    def __setattr__(self, key: str, value: Any) -> None:
        resolve_set(self, key, value, type(self).__conjugate_write_policy__)

    def __delattr__(self, key: str) -> None:
        resolve_delete(self, key)

    def __dir__(self) -> list[str]:
        names = set(object.__dir__(self))
        if parts_of(self) is not None:
            names.update(resolve_member_names(self))
        return sorted(names)

    @reprlib.recursive_repr()
    def __repr__(self) -> str:
        if parts_of(self) is None:
            return f"<{type(self).__name__} (unconstructed)>"
        fields = ", ".join(
            f"{key}={resolve_get(self, key)!r}"
            for key in resolve_own_keys(self)
            if not key.startswith("_")
        )
        return f"{type(self).__name__}({fields})"

    def __conjugate_has__(self, key: str) -> bool:
        return resolve_has(self, key)

    def __conjugate_get__(self, key: str) -> Any:
        return resolve_get(self, key)

    def __conjugate_own_keys__(self) -> list[str]:
        return resolve_own_keys(self)


def _forward_special(name: str) -> Callable[..., Any]:
    def forward(self: ConjugateBase, *args: Any, **kwargs: Any) -> Any:
        target = resolve_get(self, name)
        if target is ABSENT:
            logger.warning(f"{type(self).__name__}: no component provides {name} anymore")
            raise TypeError(f"'{type(self).__name__}' object does not support {name}")
        return target(*args, **kwargs)

    forward.__name__ = forward.__qualname__ = name
    return forward


def _provides(cls: type, name: str) -> bool:
    generated = generated_class(cls)
    if generated is None:
        return reflect.class_has(cls, name)
    for klass in cls.__mro__:
        if klass is generated:
            break
        if name in klass.__dict__:
            return True
    return any(_provides(c, name) for c in generated.__dict__[COMPONENTS_ATTR])


def _make_init(components: tuple[type, ...]) -> Callable[..., None]:
    def __init__(self: ConjugateBase, *arg_sets: ArgSet) -> None:
        ConjugateBase.__init__(self, *arg_sets)

    sig = composite_signature(components)
    this = inspect.Parameter("self", inspect.Parameter.POSITIONAL_ONLY)
    __init__.__signature__ = sig.replace(parameters=[this, *sig.parameters.values()])  # type: ignore[attr-defined]
    return __init__


def _build(components: tuple[type, ...], policy: WritePolicy, forward: bool) -> type[ConjugateBase]:
    name = f"Conjugate<{','.join(c.__name__ for c in components)}>"
    shape = resolve_instance_shape(components)
    namespace: dict[str, Any] = {
        "__module__": components[0].__module__,
        "__qualname__": name,
        "__doc__": f"Composite of {', '.join(c.__qualname__ for c in components)}.",
        "__annotations__": shape.annotations(),
        "__init__": _make_init(components),
        COMPONENTS_ATTR: components,
        SHAPE_ATTR: shape,
        "__conjugate_args__": resolve_args_shape(components),
        "__conjugate_write_policy__": policy,
    }
    if forward:
        for special in FORWARDED_SPECIAL_METHODS:
            if any(_provides(c, special) for c in components):
                namespace[special] = _forward_special(special)
    cls = type(name, (ConjugateBase,), namespace)
    logger.debug(f"Generated {name} (write policy {policy.value})")
    return cls


def Conjugate(
    base: type,
    /,
    *mixins: type,
    write_policy: WritePolicy | str | None = None,
) -> type[ConjugateBase]:
    """Compose a primary class and mixin classes into one composite class.

    Instances are built as ``Composite(base_args, *mixin_args)``, one argument
    set per component. Resolution order: own storage, mixin instances (last
    first), base instance, base class, mixin classes (first first).

    Args:
        base: Primary class; wins class-level collisions.
        *mixins: Auxiliary classes.
        write_policy: Fallback for writes with no owner. Defaults to the
            configured ``write_policy`` setting.

    Returns:
        Generated composite class named ``Conjugate<Base,Mixin,...>``.

    Raises:
        TypeError: If a component is not a class or is abstract.
    """
    components = (base, *mixins)
    for cls in components:
        if not isinstance(cls, type):
            raise TypeError(f"Conjugate() components must be classes, got {cls!r}")
        if inspect.isabstract(cls):
            raise TypeError(f"Cannot conjugate abstract class {cls.__name__}")

    settings = get_settings()
    policy = WritePolicy(write_policy) if write_policy is not None else settings.write_policy
    key = (components, policy, settings.forward_special_methods)

    registry = get_registry()
    if settings.cache_composites:
        cached = registry.get(key)
        if cached is not None:
            return cached  # type: ignore[return-value]

    cls = _build(components, policy, settings.forward_special_methods)
    if settings.cache_composites:
        return registry.register(key, cls)  # type: ignore[return-value]
    return cls


C = Conjugate


# Component access


def components(obj: object) -> tuple[Any, ...]:
    """Return every component instance of a composite, in supplied order.

    Raises:
        TypeError: If obj is not a constructed composite.
    """
    parts = parts_of(obj)
    if parts is None:
        raise TypeError(f"{type(obj).__name__} is not a constructed composite")
    primary, auxiliaries = parts
    return (primary, *auxiliaries)


def component[T](obj: object, cls: type[T]) -> T:
    """Return the component instance of type ``cls``, searching nested composites.

    Exact type matches win over subclass matches; earlier components win ties.

    Args:
        obj: Composite instance.
        cls: Component class to find.

    Returns:
        The component instance, typed as ``cls``.

    Raises:
        TypeError: If obj is not a constructed composite.
        LookupError: If no component is an instance of cls.
    """
    parts = components(obj)
    for part in parts:
        if type(part) is cls:
            return part
    for part in parts:
        if isinstance(part, cls):
            return part
    for part in parts:
        if parts_of(part) is not None:
            try:
                return component(part, cls)
            except LookupError:
                continue
    raise LookupError(f"{type(obj).__name__} has no component of type {cls.__name__}")


def is_conjugated(obj: object) -> bool:
    """Check whether an object or class is a composite."""
    cls = obj if isinstance(obj, type) else type(obj)
    return generated_class(cls) is not None
