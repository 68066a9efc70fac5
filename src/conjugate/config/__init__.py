"""Configuration module using Pydantic Settings.

Usage:
    from conjugate.config import WritePolicy, configure

    configure(write_policy=WritePolicy.OWN)
"""

from conjugate.config.settings import (
    ConjugateSettings,
    WritePolicy,
    configure,
    get_settings,
    reset_settings,
)

__all__ = [
    "ConjugateSettings",
    "WritePolicy",
    "configure",
    "get_settings",
    "reset_settings",
]
