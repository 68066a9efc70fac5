"""Configuration settings using Pydantic Settings.

Provides typed, process-wide configuration for composite construction with
environment variable support.

Usage:
    from conjugate.config import configure, get_settings

    # Load from environment variables (CONJUGATE_*)
    settings = get_settings()

    # Or override with explicit values
    configure(write_policy="reject")
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic_settings import BaseSettings, SettingsConfigDict


class WritePolicy(Enum):
    """Where a write goes when no source in the resolution order owns the key."""

    PRIMARY = "primary"
    """Create the attribute on the primary component instance. Default."""

    OWN = "own"
    """Create the attribute on the composite's own storage."""

    REJECT = "reject"
    """Raise UnknownAttributeError."""


class ConjugateSettings(BaseSettings):  # type: ignore[misc]
    """Configuration for composite classes.

    Attributes:
        write_policy: Fallback for writes with no owner.
        forward_special_methods: Install forwarders for protocol special methods
            (``__len__``, ``__iter__``, ...) that components define.
        cache_composites: Reuse the generated class for identical component lists.
            Cached classes are held weakly and released once unreferenced.

    Environment Variables:
        CONJUGATE_WRITE_POLICY
        CONJUGATE_FORWARD_SPECIAL_METHODS
        CONJUGATE_CACHE_COMPOSITES
    """

    model_config = SettingsConfigDict(
        env_prefix="CONJUGATE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    write_policy: WritePolicy = WritePolicy.PRIMARY
    forward_special_methods: bool = True
    cache_composites: bool = True


_settings: ConjugateSettings | None = None


def get_settings() -> ConjugateSettings:
    """Access the process-wide settings, loading them on first use.

    Returns:
        The current ConjugateSettings instance.
    """
    global _settings
    if _settings is None:
        _settings = ConjugateSettings()
    return _settings


def configure(**overrides: Any) -> ConjugateSettings:
    """Replace the process-wide settings.

    Values not given are loaded from the environment as usual. Composite
    classes already generated keep the settings they were built with.

    Args:
        **overrides: Field values, e.g. ``write_policy="own"``.

    Returns:
        The new ConjugateSettings instance.
    """
    global _settings
    _settings = ConjugateSettings(**overrides)
    return _settings


def reset_settings() -> None:
    """Drop the process-wide settings so the next access reloads them."""
    global _settings
    _settings = None
