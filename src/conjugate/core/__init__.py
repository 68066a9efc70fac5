"""Core functionalities: stateless primitives shared by composer and shape resolver.

Architecture Note:
    core/ holds pure helpers with no process state: reflection primitives,
    lookup layers, errors and type definitions. Composite classes and their
    registry live in compose/, shape resolution in shape/.
"""

from conjugate.core.errors import (
    ConjugateError,
    MalformedKeyError,
    NonObjectTargetError,
    UnknownAttributeError,
)
from conjugate.core.layers import ClassLayer, Layer, OwnLayer, StorageLayer
from conjugate.core.types import ABSENT, Absent, Args, ArgSet, Key

__all__ = [
    # Types
    "ABSENT",
    "Absent",
    "Args",
    "ArgSet",
    "Key",
    # Errors
    "ConjugateError",
    "MalformedKeyError",
    "NonObjectTargetError",
    "UnknownAttributeError",
    # Layers
    "Layer",
    "StorageLayer",
    "OwnLayer",
    "ClassLayer",
]
