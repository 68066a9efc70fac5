"""Resolution engine: has/get/set/delete/own-keys over a composite's layers.

Pure functions over live objects. Nothing is cached between calls; each call
walks ``resolution_layers`` from the top and stops at the first layer that
holds the key.
"""

from __future__ import annotations

import logging
from typing import Any

from conjugate.config.settings import WritePolicy
from conjugate.core import reflect
from conjugate.core.errors import UnknownAttributeError
from conjugate.core.layers import (
    ClassLayer,
    class_layers,
    instance_layers,
    parts_of,
    resolution_layers,
)
from conjugate.core.types import ABSENT

logger = logging.getLogger(__name__)


def resolve_has(composite: object, key: str) -> bool:
    """Check whether any source in resolution order holds ``key``.

    Args:
        composite: Composite instance.
        key: Attribute name.

    Returns:
        True on the first layer holding the key, False if none does.

    Raises:
        MalformedKeyError: If key is not a str.
    """
    reflect.validate_key(key)
    return any(layer.has(key) for layer in resolution_layers(composite))


def resolve_get(composite: object, key: str) -> Any:
    """Read ``key`` from the first source holding it.

    Class-level members are bound with the composite as receiver, so a method
    found on any component sees the composite as ``self``. Builtin methods and
    code using zero-argument ``super()`` bind to their owning component.

    Args:
        composite: Composite instance (also the receiver).
        key: Attribute name.

    Returns:
        The resolved value, or ABSENT when no source holds the key.

    Raises:
        MalformedKeyError: If key is not a str.
    """
    reflect.validate_key(key)
    for layer in resolution_layers(composite):
        if layer.has(key):
            return layer.get(key, composite)
    return ABSENT


def resolve_set(composite: object, key: str, value: Any, policy: WritePolicy) -> None:
    """Write ``value`` onto the first owner of ``key``, or apply the write policy.

    Args:
        composite: Composite instance.
        key: Attribute name.
        value: Value to store; stored as is, never copied.
        policy: What to do when no source owns the key.

    Raises:
        MalformedKeyError: If key is not a str.
        UnknownAttributeError: If nothing owns the key and policy is REJECT.
    """
    reflect.validate_key(key)
    for layer in resolution_layers(composite):
        if layer.set(key, value, composite):
            return

    parts = parts_of(composite)
    if parts is None or policy is WritePolicy.OWN:
        object.__setattr__(composite, key, value)
        return
    if policy is WritePolicy.REJECT:
        raise UnknownAttributeError(type(composite).__name__, key)

    primary, _ = parts
    logger.debug(f"No owner for '{key}' on {type(composite).__name__}; storing on primary")
    setattr(primary, key, value)


def resolve_delete(composite: object, key: str) -> None:
    """Delete ``key`` from its first instance-level owner.

    Raises:
        MalformedKeyError: If key is not a str.
        AttributeError: If only a class holds the key, or nothing does.
    """
    reflect.validate_key(key)
    for layer in instance_layers(composite):
        if isinstance(layer, ClassLayer):
            continue
        if layer.delete(key):
            return
    if any(layer.has(key) for layer in class_layers(composite)):
        raise AttributeError(
            f"'{type(composite).__name__}' cannot delete class member '{key}' of a component"
        )
    raise AttributeError(f"'{type(composite).__name__}' object has no attribute '{key}'")


def resolve_own_keys(composite: object) -> list[str]:
    """List instance-level keys, de-duplicated, in resolution order.

    Own storage first, then auxiliary instances in reverse, then the primary.
    Class-only members are not listed.
    """
    seen: dict[str, None] = {}
    for layer in instance_layers(composite):
        if not layer.enumerable:
            continue
        for key in layer.keys():
            seen.setdefault(key, None)
    return list(seen)


def resolve_member_names(composite: object) -> list[str]:
    """List every key any layer holds, class members included (for ``dir()``)."""
    seen: dict[str, None] = dict.fromkeys(resolve_own_keys(composite))
    for layer in class_layers(composite):
        for key in layer.keys():
            seen.setdefault(key, None)
    return list(seen)
