"""Registry of generated composite classes.

Maps a component list and its construction options to the composite class
generated for it, so that ``Conjugate(A, B) is Conjugate(A, B)`` and
``isinstance`` checks against a composite class work across call sites.
Only classes are cached; attribute resolution is never cached. Entries are
held weakly, so a composite class nobody references any more is released
together with its component classes.
"""

from __future__ import annotations

import logging
from weakref import WeakValueDictionary

from conjugate.config.settings import WritePolicy
from conjugate.core.layers import generated_class

logger = logging.getLogger(__name__)

type RegistryKey = tuple[tuple[type, ...], WritePolicy, bool]
"""(components, write policy, special-method forwarding)."""


class ConjugateRegistry:
    """Process-local registry mapping component lists to generated composite classes."""

    def __init__(self) -> None:
        """Initialize empty composite registry."""
        self._by_key: WeakValueDictionary[RegistryKey, type] = WeakValueDictionary()

    def get(self, key: RegistryKey) -> type | None:
        """Get the composite class generated for a key.

        Args:
            key: Components, write policy and forwarding flag.

        Returns:
            Composite class if registered, None otherwise.
        """
        cls = self._by_key.get(key)
        if cls is not None:
            logger.debug(f"Registry hit for {cls.__name__}")
        return cls

    def register(self, key: RegistryKey, cls: type) -> type:
        """Register a generated composite class and return the registered class.

        Args:
            key: Components, write policy and forwarding flag.
            cls: Generated composite class.

        Returns:
            The class already registered for key, or cls if none was.

        Raises:
            TypeError: If cls is not a generated composite class.
        """
        if generated_class(cls) is not cls:
            raise TypeError(f"{cls.__name__} is not a generated composite class")
        return self._by_key.setdefault(key, cls)

    def is_registered(self, cls: type) -> bool:
        """Check if a class is a registered composite class.

        Args:
            cls: Class to check.

        Returns:
            True if cls was registered, False otherwise.
        """
        return cls in self._by_key.values()

    def clear(self) -> None:
        """Forget every registered composite class."""
        self._by_key.clear()

    def __len__(self) -> int:
        return len(self._by_key)


# Module-level registry instance
_registry = ConjugateRegistry()


def get_registry() -> ConjugateRegistry:
    """Access the global composite registry.

    Returns:
        The process-local ConjugateRegistry instance.
    """
    return _registry
