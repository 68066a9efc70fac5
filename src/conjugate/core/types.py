"""Core type definitions for conjugate."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Final, Literal


class _AbsentType(Enum):
    """Sentinel type for attributes that no source holds."""

    ABSENT = "ABSENT"

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT: Final = _AbsentType.ABSENT
"""Result of a read that found no owner.

Distinct from ``None`` so that an attribute holding ``None`` is still "present".
Falsy, so ``value or default`` reads naturally.
"""

type Absent = Literal[_AbsentType.ABSENT]
"""Type of the ``ABSENT`` sentinel, for ``T | Absent`` return annotations."""

type Key = str
"""Attribute identifier accepted by the resolution engine."""


@dataclass(frozen=True, slots=True, init=False)
class Args:
    """Positional and keyword arguments for one component constructor.

    Usage:
        Composite((1, 2), Args("name", flag=True), {"size": 3})
    """

    args: tuple[Any, ...] = ()
    kwargs: Mapping[str, Any] = field(default_factory=dict)

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        object.__setattr__(self, "args", args)
        object.__setattr__(self, "kwargs", kwargs)

    @classmethod
    def coerce(cls, value: ArgSet) -> Args:
        """Normalize an argument set.

        Args:
            value: Args, a tuple/list of positional arguments,
                or a mapping of keyword arguments.

        Returns:
            Equivalent Args instance.

        Raises:
            TypeError: If value is none of the accepted forms.
        """
        if isinstance(value, Args):
            return value
        if isinstance(value, (tuple, list)):
            return cls(*value)
        if isinstance(value, Mapping):
            return cls(**value)
        raise TypeError(
            f"Component arguments must be a tuple, list, mapping or Args, "
            f"got {type(value).__name__}"
        )


type ArgSet = Args | tuple[Any, ...] | list[Any] | Mapping[str, Any]
"""One component's constructor arguments, as accepted by a composite constructor."""
