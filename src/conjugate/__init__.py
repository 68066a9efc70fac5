"""conjugate: structured, reusable multiple class composition.

Usage:
    from conjugate import C

    class Base:
        def who(self):
            return "Base"

    class Mixin:
        def __init__(self, size: int):
            self.size = size

    class Widget(C(Base, Mixin)):
        def __init__(self, size: int):
            super().__init__((), (size,))

    widget = Widget(3)
    widget.who()    # "Base"
    widget.size     # 3, stored on the Mixin instance
"""

__version__ = "0.1.3"

# Composition
from conjugate.compose import (
    C,
    Conjugate,
    ConjugateBase,
    component,
    components,
    get_registry,
    is_conjugated,
)

# Configuration
from conjugate.config import ConjugateSettings, WritePolicy, configure, get_settings

# Core primitives
from conjugate.core import (
    ABSENT,
    Args,
    ConjugateError,
    MalformedKeyError,
    NonObjectTargetError,
    UnknownAttributeError,
)
from conjugate.core import reflect
from conjugate.core.reflect import has, own_keys

# Shape
from conjugate.shape import ArgsShape, InstanceShape, Member, MemberKind

__all__ = [
    # Version
    "__version__",
    # Composition
    "Conjugate",
    "C",
    "ConjugateBase",
    "component",
    "components",
    "is_conjugated",
    "get_registry",
    # Reflection
    "reflect",
    "has",
    "own_keys",
    "ABSENT",
    "Args",
    # Errors
    "ConjugateError",
    "MalformedKeyError",
    "NonObjectTargetError",
    "UnknownAttributeError",
    # Configuration
    "ConjugateSettings",
    "WritePolicy",
    "configure",
    "get_settings",
    # Shape
    "InstanceShape",
    "ArgsShape",
    "Member",
    "MemberKind",
]
