"""Shape models: the merged member map and constructor layout of a composite."""

from __future__ import annotations

import inspect
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any


class MemberKind(Enum):
    """How a member is provided by its class."""

    FIELD = auto()  # Annotated instance field
    METHOD = auto()  # Function, classmethod or staticmethod
    PROPERTY = auto()  # property or other data descriptor
    CONSTRUCTOR = auto()  # Nested class
    ATTRIBUTE = auto()  # Plain class-level value


@dataclass(slots=True, frozen=True)
class Member:
    """One named member of a composite's instance shape."""

    name: str
    kind: MemberKind
    owner: type
    """Class that declares the member."""

    annotation: Any = inspect.Parameter.empty
    """Declared type: field annotation, property return type or value type."""

    signature: inspect.Signature | None = None
    """Call signature for methods and nested constructors, when introspectable."""


@dataclass(slots=True, frozen=True)
class InstanceShape:
    """Merged members of a component list, as the composite resolves them at runtime."""

    components: tuple[type, ...]
    members: Mapping[str, Member]

    def __contains__(self, name: object) -> bool:
        return name in self.members

    def __getitem__(self, name: str) -> Member:
        return self.members[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self.members)

    def __len__(self) -> int:
        return len(self.members)

    def of_kind(self, kind: MemberKind) -> dict[str, Member]:
        """Members of one kind, in shape order."""
        return {name: m for name, m in self.members.items() if m.kind is kind}

    def annotations(self) -> dict[str, Any]:
        """Field annotations in shape order, suitable for ``__annotations__``."""
        return {name: m.annotation for name, m in self.of_kind(MemberKind.FIELD).items()}


@dataclass(slots=True, frozen=True)
class ArgsShape:
    """Constructor layout: entry ``i`` is the signature of component ``i``."""

    components: tuple[type, ...]
    signatures: tuple[inspect.Signature | None, ...]

    def __len__(self) -> int:
        return len(self.signatures)

    def __iter__(self) -> Iterator[inspect.Signature | None]:
        return iter(self.signatures)

    def __getitem__(self, index: int) -> inspect.Signature | None:
        return self.signatures[index]
