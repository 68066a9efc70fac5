"""Shape resolution: merged instance members and per-component constructor layout."""

from conjugate.shape.models import ArgsShape, InstanceShape, Member, MemberKind
from conjugate.shape.resolver import (
    class_members,
    composite_signature,
    fold_class_members,
    instance_fields,
    mix,
    resolve_args_shape,
    resolve_instance_shape,
    resolve_members,
)

__all__ = [
    # Models
    "ArgsShape",
    "InstanceShape",
    "Member",
    "MemberKind",
    # Resolver
    "class_members",
    "composite_signature",
    "fold_class_members",
    "instance_fields",
    "mix",
    "resolve_args_shape",
    "resolve_instance_shape",
    "resolve_members",
]
