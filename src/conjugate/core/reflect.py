"""Typed reflection helpers over plain objects and composites.

Python counterparts of the has/get/set/own-keys reflection primitives. Every
helper validates its key before touching the target, and the structural
helpers reject ``None`` and immutable scalars.

Composites implement the ``Reflective`` protocol, so the helpers dispatch to
the composite's resolution order instead of ordinary attribute lookup.

Usage:
    from conjugate.core import reflect

    reflect.has(obj, "name")        # static check, getters are not run
    reflect.get(obj, "name")        # value or ABSENT
    reflect.put(obj, "name", value)
    reflect.own_keys(obj)           # instance storage keys, in insertion order
"""

from __future__ import annotations

import inspect
import types
from collections.abc import Callable, Iterator, Mapping, Sequence
from typing import Any, Protocol, TypeGuard, TypeVar, runtime_checkable

from conjugate.core.errors import MalformedKeyError, NonObjectTargetError
from conjugate.core.types import ABSENT, Absent

T = TypeVar("T")

_SCALARS = (bool, int, float, complex, str, bytes)


@runtime_checkable
class Reflective(Protocol):
    """Objects that answer reflection through their own resolution order."""

    def __conjugate_has__(self, key: str) -> bool: ...
    def __conjugate_get__(self, key: str) -> Any: ...
    def __conjugate_own_keys__(self) -> list[str]: ...


def is_object(val: object) -> TypeGuard[object]:
    """Check that a value can carry attributes of its own.

    Args:
        val: Value to check.

    Returns:
        False for None and immutable scalars, True otherwise.
    """
    return val is not None and not isinstance(val, _SCALARS)


def require_object(val: object, role: str = "Target") -> None:
    """Raise NonObjectTargetError unless ``is_object(val)``."""
    if not is_object(val):
        raise NonObjectTargetError(val, role)


def validate_key(key: object) -> str:
    """Return ``key`` unchanged if it is a string.

    Raises:
        MalformedKeyError: If key is not a str. No coercion is attempted.
    """
    if not isinstance(key, str):
        raise MalformedKeyError(key)
    return key


def _is_reflective(target: object) -> bool:
    # Checked on the type: a composite's instance lookup would resolve anything.
    return issubclass(type(target), Reflective)


# Instance storage


def _slot_names(cls: type) -> Iterator[tuple[type, str]]:
    for klass in cls.__mro__:
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if name in ("__dict__", "__weakref__"):
                continue
            if name.startswith("__") and not name.endswith("__"):
                name = f"_{klass.__name__.lstrip('_')}{name}"
            yield klass, name


def _slot_is_set(obj: object, klass: type, name: str) -> bool:
    descriptor = klass.__dict__.get(name)
    if not isinstance(descriptor, types.MemberDescriptorType):
        return False
    try:
        descriptor.__get__(obj, klass)
    except AttributeError:
        return False
    return True


def instance_dict(obj: object) -> dict[str, Any] | None:
    """Return the instance ``__dict__`` without going through ``__getattr__``."""
    try:
        return object.__getattribute__(obj, "__dict__")
    except AttributeError:
        return None


def storage_keys(obj: object) -> list[str]:
    """List keys held in an object's own storage: ``__dict__`` first, then set slots."""
    keys: list[str] = []
    store = instance_dict(obj)
    if store is not None:
        keys.extend(k for k in store if isinstance(k, str))
    for klass, name in _slot_names(type(obj)):
        if name not in keys and _slot_is_set(obj, klass, name):
            keys.append(name)
    return keys


def has_own(obj: object, key: str) -> bool:
    """Check whether ``key`` lives in the object's own storage."""
    store = instance_dict(obj)
    if store is not None and key in store:
        return True
    return any(n == key and _slot_is_set(obj, k, n) for k, n in _slot_names(type(obj)))


def class_has(cls: type, key: str) -> bool:
    """Check whether any class along ``cls.__mro__`` declares ``key``, excluding object."""
    return any(key in klass.__dict__ for klass in cls.__mro__ if klass is not object)


# Reflection primitives


def has(target: object, key: str) -> bool:
    """Check attribute existence without running getters.

    Args:
        target: Object to inspect.
        key: Attribute name.

    Returns:
        True if the attribute exists on the object or its class chain.
    """
    validate_key(key)
    require_object(target)
    if _is_reflective(target):
        return target.__conjugate_has__(key)  # type: ignore[attr-defined]
    return inspect.getattr_static(target, key, ABSENT) is not ABSENT


def get(target: object, key: str, default: T | Absent = ABSENT) -> Any | T | Absent:
    """Read an attribute, returning ``default`` (ABSENT) when nothing holds it.

    Args:
        target: Object to read from.
        key: Attribute name.
        default: Value returned for a missing attribute.

    Returns:
        The attribute value, or default.
    """
    validate_key(key)
    require_object(target)
    if _is_reflective(target):
        value = target.__conjugate_get__(key)  # type: ignore[attr-defined]
        return default if value is ABSENT else value
    return getattr(target, key, default)


def put(target: object, key: str, value: Any) -> None:
    """Assign an attribute on an object (composites route the write to its owner)."""
    validate_key(key)
    require_object(target)
    setattr(target, key, value)


def delete(target: object, key: str) -> None:
    """Delete an attribute from an object."""
    validate_key(key)
    require_object(target)
    delattr(target, key)


def own_keys(target: object) -> list[str]:
    """List keys held in instance storage, excluding class-only members.

    Args:
        target: Object to enumerate.

    Returns:
        De-duplicated keys in resolution order for composites,
        insertion order for plain objects.
    """
    require_object(target)
    if _is_reflective(target):
        return target.__conjugate_own_keys__()  # type: ignore[attr-defined]
    return storage_keys(target)


def construct(cls: Callable[..., T], args: Sequence[Any] = (), kwargs: Mapping[str, Any] | None = None) -> T:
    """Instantiate a class; constructor errors propagate unchanged."""
    return cls(*args, **(kwargs or {}))


def bounded(value: T, instance: object) -> T:
    """Bind a plain function to ``instance``; other values are returned unchanged.

    Raises:
        NonObjectTargetError: If instance is None or a scalar.
    """
    require_object(instance, "Instance")
    if isinstance(value, types.FunctionType):
        return types.MethodType(value, instance)  # type: ignore[return-value]
    return value
