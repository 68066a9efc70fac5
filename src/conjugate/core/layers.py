"""Lookup layers: one source of attributes in a composite's resolution order.

A composite never copies members. It keeps an ordered list of layers, each
wrapping one live object or class chain, and asks them in turn. Layers are
rebuilt on every access, so class mutations are always visible.

Order for a composite (see ``resolution_layers``):
    own __dict__ -> subclass-declared members -> auxiliary instances (reverse)
    -> primary instance -> primary class chain -> auxiliary class chains (forward)
"""

from __future__ import annotations

import inspect
import types
from collections.abc import Callable, Iterator
from typing import Any, Protocol, runtime_checkable

from conjugate.core import reflect
from conjugate.core.types import ABSENT

PARTS_ATTR = "_conjugate_parts"
"""Slot holding ``(primary, auxiliaries)`` on composite instances."""

COMPONENTS_ATTR = "__conjugate_components__"
"""Class attribute holding the component classes of a generated composite."""

# C-level descriptors refuse foreign receivers; they bind to the owning instance,
# as does code using zero-argument super() (see _uses_class_cell).
_BUILTIN_DESCRIPTORS = (
    types.MethodDescriptorType,
    types.WrapperDescriptorType,
    types.ClassMethodDescriptorType,
    types.MemberDescriptorType,
    types.GetSetDescriptorType,
)

type Store = Callable[[object, str, Any], None]


def _uses_class_cell(attr: Any) -> bool:
    """Check for code compiled with zero-argument ``super()`` or ``__class__``.

    Such code only runs against an instance of its defining class, so it binds
    to the owning component instead of the composite.
    """
    if isinstance(attr, property):
        accessors = (attr.fget, attr.fset, attr.fdel)
        return any(_uses_class_cell(f) for f in accessors if f is not None)
    return isinstance(attr, types.FunctionType) and "__class__" in attr.__code__.co_freevars


@runtime_checkable
class Layer(Protocol):
    """One attribute source: existence, read, write, delete and enumeration."""

    enumerable: bool

    def has(self, key: str) -> bool: ...
    def get(self, key: str, receiver: object) -> Any: ...
    def set(self, key: str, value: Any, receiver: object) -> bool: ...
    def delete(self, key: str) -> bool: ...
    def keys(self) -> list[str]: ...


class StorageLayer[T]:
    """Instance storage of one component (``__dict__`` and set slots)."""

    __slots__ = ("_component",)

    enumerable = True

    def __init__(self, component: T) -> None:
        self._component = component

    def unwrap(self) -> T:
        """Return the wrapped component instance."""
        return self._component

    @property
    def component_type(self) -> type[T]:
        """Return the type of the wrapped component."""
        return type(self._component)

    def has(self, key: str) -> bool:
        return reflect.has_own(self._component, key)

    def get(self, key: str, receiver: object) -> Any:
        # Stored values are returned as stored; bound methods keep their own receiver.
        store = reflect.instance_dict(self._component)
        if store is not None and key in store:
            return store[key]
        if reflect.has_own(self._component, key):
            return getattr(self._component, key)
        return ABSENT

    def set(self, key: str, value: Any, receiver: object) -> bool:
        if not self.has(key):
            return False
        setattr(self._component, key, value)
        return True

    def delete(self, key: str) -> bool:
        if not self.has(key):
            return False
        delattr(self._component, key)
        return True

    def keys(self) -> list[str]:
        return reflect.storage_keys(self._component)


class OwnLayer(StorageLayer[Any]):
    """A composite's own ``__dict__``, written without re-entering interception."""

    __slots__ = ()

    def has(self, key: str) -> bool:
        store = reflect.instance_dict(self._component)
        return store is not None and key in store

    def get(self, key: str, receiver: object) -> Any:
        store = reflect.instance_dict(self._component)
        if store is None:
            return ABSENT
        return store.get(key, ABSENT)

    def set(self, key: str, value: Any, receiver: object) -> bool:
        if not self.has(key):
            return False
        object.__setattr__(self._component, key, value)
        return True

    def delete(self, key: str) -> bool:
        if not self.has(key):
            return False
        object.__delattr__(self._component, key)
        return True

    def keys(self) -> list[str]:
        store = reflect.instance_dict(self._component)
        return [k for k in store if isinstance(k, str)] if store is not None else []


class ClassLayer:
    """A component's class chain, read live from each class ``__dict__``.

    Args:
        cls: Class whose MRO is walked (``object`` excluded).
        owner: Component instance that logically owns the class members.
        stop: Walk ends before this class (used for composite subclasses).
        store: Writer used when a write shadows a plain class member.
    """

    __slots__ = ("_cls", "_owner", "_stop", "_store")

    enumerable = False

    def __init__(
        self,
        cls: type,
        owner: object,
        stop: type | None = None,
        store: Store = setattr,
    ) -> None:
        self._cls = cls
        self._owner = owner
        self._stop = stop
        self._store = store

    def chain(self) -> Iterator[type]:
        """Yield the classes consulted, in MRO order."""
        for klass in self._cls.__mro__:
            if klass is self._stop or klass is object:
                return
            yield klass

    def lookup(self, key: str) -> tuple[type, Any] | None:
        """Find the first class declaring ``key`` and its raw ``__dict__`` entry."""
        for klass in self.chain():
            if key in klass.__dict__:
                return klass, klass.__dict__[key]
        return None

    def declares(self, key: str) -> bool:
        """Check for a member or a bare annotation (``name: int``) on the chain."""
        return any(
            key in klass.__dict__ or key in inspect.get_annotations(klass)
            for klass in self.chain()
        )

    def has(self, key: str) -> bool:
        return self.lookup(key) is not None

    def get(self, key: str, receiver: object) -> Any:
        found = self.lookup(key)
        if found is None:
            return ABSENT
        _, attr = found
        if isinstance(attr, _BUILTIN_DESCRIPTORS) or _uses_class_cell(attr):
            return attr.__get__(self._owner, type(self._owner))
        getter = getattr(type(attr), "__get__", None)
        if getter is None:
            return attr
        return getter(attr, receiver, type(self._owner))

    def set(self, key: str, value: Any, receiver: object) -> bool:
        found = self.lookup(key)
        if found is None:
            if not self.declares(key):
                return False
            self._store(self._owner, key, value)
            return True
        _, attr = found
        setter = getattr(type(attr), "__set__", None)
        if setter is None:
            self._store(self._owner, key, value)
        elif isinstance(attr, _BUILTIN_DESCRIPTORS) or _uses_class_cell(attr):
            setter(attr, self._owner, value)
        else:
            setter(attr, receiver, value)
        return True

    def delete(self, key: str) -> bool:
        # Class members are read-only through a composite.
        return False

    def keys(self) -> list[str]:
        names: list[str] = []
        for klass in self.chain():
            names.extend(k for k in klass.__dict__ if k not in names)
        return names


# Composite structure


def parts_of(obj: object) -> tuple[object, tuple[object, ...]] | None:
    """Return ``(primary, auxiliaries)`` for a composite, None for anything else."""
    if not hasattr(type(obj), COMPONENTS_ATTR):
        return None
    try:
        return object.__getattribute__(obj, PARTS_ATTR)
    except AttributeError:
        return None


def generated_class(cls: type) -> type | None:
    """Return the generated composite class in ``cls.__mro__``, if any."""
    for klass in cls.__mro__:
        if COMPONENTS_ATTR in klass.__dict__:
            return klass
    return None


def instance_layers(obj: object) -> list[StorageLayer[Any] | ClassLayer]:
    """Instance-level layers of an object, highest precedence first.

    Nested composites expand to their own instance layers, so their
    subclass-declared members keep beating their components' fields.
    """
    parts = parts_of(obj)
    if parts is None:
        return [StorageLayer(obj)]
    primary, auxiliaries = parts
    layers: list[StorageLayer[Any] | ClassLayer] = [
        OwnLayer(obj),
        ClassLayer(type(obj), obj, stop=generated_class(type(obj)), store=object.__setattr__),
    ]
    for aux in reversed(auxiliaries):
        layers.extend(instance_layers(aux))
    layers.extend(instance_layers(primary))
    return layers


def class_layers(obj: object) -> list[ClassLayer]:
    """Class-level layers of an object: primary chain first, then auxiliaries forward."""
    parts = parts_of(obj)
    if parts is None:
        return [ClassLayer(type(obj), obj)]
    primary, auxiliaries = parts
    layers = class_layers(primary)
    for aux in auxiliaries:
        layers.extend(class_layers(aux))
    return layers


def resolution_layers(obj: object) -> Iterator[StorageLayer[Any] | ClassLayer]:
    """Yield every layer of a composite in resolution order, built lazily."""
    yield from instance_layers(obj)
    yield from class_layers(obj)
