"""Shape resolution: merged instance members and constructor layout.

Python has no intersection types, so the combined shape of a composite is
computed once when its class is generated and published on the class
(``__annotations__``, ``__init__`` signature, ``__conjugate_shape__``). It
describes members present at class-creation time; members added to a
component class later are still resolved at runtime, just not listed here.

Usage:
    shape = resolve_instance_shape((Base, Mixin1, Mixin2))
    shape["who"].owner        # Base: earlier classes win class-level collisions
    shape["name"].owner       # fields follow instance precedence, auxiliaries first
    resolve_args_shape((Base, Mixin1))[1]   # Mixin1's constructor signature
"""

from __future__ import annotations

import inspect
import re
from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import Any

from conjugate.core.layers import generated_class
from conjugate.core.types import ArgSet
from conjugate.shape.models import ArgsShape, InstanceShape, Member, MemberKind

SHAPE_ATTR = "__conjugate_shape__"


def _is_dunder(name: str) -> bool:
    return len(name) > 4 and name.startswith("__") and name.endswith("__")


def signature_of(obj: Any) -> inspect.Signature | None:
    """Signature of a callable, or None for builtins without signature metadata."""
    try:
        return inspect.signature(obj)
    except (TypeError, ValueError):
        return None


def _drop_first(sig: inspect.Signature | None) -> inspect.Signature | None:
    if sig is None or not sig.parameters:
        return sig
    return sig.replace(parameters=list(sig.parameters.values())[1:])


def _member(name: str, attr: Any, owner: type, annotations: Mapping[str, Any]) -> Member:
    if name in annotations:
        return Member(name, MemberKind.FIELD, owner, annotations[name])
    if isinstance(attr, staticmethod):
        return Member(name, MemberKind.METHOD, owner, signature=signature_of(attr.__func__))
    if isinstance(attr, classmethod):
        sig = _drop_first(signature_of(attr.__func__))
        return Member(name, MemberKind.METHOD, owner, signature=sig)
    if inspect.isfunction(attr) or (inspect.ismethoddescriptor(attr) and callable(attr)):
        return Member(name, MemberKind.METHOD, owner, signature=_drop_first(signature_of(attr)))
    if isinstance(attr, property):
        returns = inspect.Parameter.empty
        if attr.fget is not None:
            returns = inspect.get_annotations(attr.fget).get("return", inspect.Parameter.empty)
        return Member(name, MemberKind.PROPERTY, owner, returns)
    if isinstance(attr, type):
        return Member(name, MemberKind.CONSTRUCTOR, owner, attr, signature_of(attr))
    if hasattr(type(attr), "__get__"):
        return Member(name, MemberKind.PROPERTY, owner)
    return Member(name, MemberKind.ATTRIBUTE, owner, type(attr))


def _chain_members(classes: Sequence[type]) -> dict[str, Member]:
    """Members along an MRO slice; derived classes override their bases."""
    members: dict[str, Member] = {}
    for klass in reversed(classes):
        annotations = inspect.get_annotations(klass)
        for name in annotations:
            if not _is_dunder(name):
                members[name] = _member(name, None, klass, annotations)
        for name, attr in klass.__dict__.items():
            if _is_dunder(name) or name in annotations:
                continue
            members[name] = _member(name, attr, klass, annotations)
    return members


def class_members(cls: type) -> dict[str, Member]:
    """Instance members of one class.

    Composite classes expand to their recorded shape, with members declared
    on their subclasses taking precedence.

    Args:
        cls: Component class.

    Returns:
        Mapping of member name to Member, in declaration order.
    """
    generated = generated_class(cls)
    if generated is None:
        return _chain_members([k for k in cls.__mro__ if k is not object])
    declared = []
    for klass in cls.__mro__:
        if klass is generated:
            break
        declared.append(klass)
    shape: InstanceShape = generated.__dict__[SHAPE_ATTR]
    return mix(_chain_members(declared), shape.members)


def mix(primary: Mapping[str, Member], secondary: Mapping[str, Member]) -> dict[str, Member]:
    """Merge two member maps, preferring ``primary`` on name collisions.

    Key order is the primary's keys followed by the secondary's remaining keys.
    """
    merged = dict(primary)
    for name, member in secondary.items():
        merged.setdefault(name, member)
    return merged


def fold_class_members(classes: Sequence[type]) -> dict[str, Member]:
    """Fold member maps from the last class to the first, earlier classes winning."""
    if not classes:
        return {}
    head, *rest = classes
    if not rest:
        return class_members(head)
    return mix(class_members(head), fold_class_members(rest))


def instance_fields(classes: Sequence[type]) -> dict[str, Member]:
    """Annotated fields in instance precedence: last auxiliary first, primary last."""
    fields: dict[str, Member] = {}
    for cls in [*reversed(classes[1:]), *classes[:1]]:
        for name, member in class_members(cls).items():
            if member.kind is MemberKind.FIELD:
                fields.setdefault(name, member)
    return fields


def resolve_members(classes: Sequence[type]) -> dict[str, Member]:
    """Merged members of a component list, matching runtime resolution.

    Class-level members follow the class fold (earlier classes win). Fields
    live on instances, where auxiliaries shadow the primary, so they are
    replaced by the field of the highest-precedence instance. Key order is
    that of the class fold.
    """
    members = fold_class_members(classes)
    members.update(instance_fields(classes))
    return members


def resolve_instance_shape(classes: Sequence[type]) -> InstanceShape:
    """Compute the combined instance shape of a component list.

    Args:
        classes: Component classes, primary first.

    Returns:
        InstanceShape with the merged, read-only member map.
    """
    return InstanceShape(tuple(classes), MappingProxyType(resolve_members(classes)))


def resolve_args_shape(classes: Sequence[type]) -> ArgsShape:
    """Compute the constructor layout: one signature per component, in order."""
    return ArgsShape(tuple(classes), tuple(signature_of(cls) for cls in classes))


def parameter_name(cls: type) -> str:
    """Snake-case parameter name for a component's argument set (``MixinOne`` -> ``mixin_one_args``)."""
    name = re.sub(r"\W+", "_", cls.__name__)
    name = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", name).strip("_").lower()
    if not name or not name.isidentifier():
        name = f"arg_{name}"
    return f"{name}_args"


def composite_signature(classes: Sequence[type]) -> inspect.Signature:
    """Signature of a composite constructor: one positional argument set per component.

    Every argument set defaults to empty, so components without required
    constructor arguments may be omitted from the end.
    """
    params: list[inspect.Parameter] = []
    used: set[str] = set()
    for cls in classes:
        name = base = parameter_name(cls)
        suffix = 1
        while name in used:
            name = f"{base}_{suffix}"
            suffix += 1
        used.add(name)
        params.append(
            inspect.Parameter(
                name, inspect.Parameter.POSITIONAL_ONLY, default=(), annotation=ArgSet
            )
        )
    return inspect.Signature(params)
