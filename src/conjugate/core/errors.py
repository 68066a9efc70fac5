"""Errors raised by conjugate.

Every error derives from ``ConjugateError`` and from the builtin exception a
plain Python object would raise in the same situation, so ``except TypeError``
and ``except AttributeError`` keep working for callers that do not know about
this package.
"""


class ConjugateError(Exception):
    """Base class for conjugate errors."""

    pass


class MalformedKeyError(ConjugateError, TypeError):
    """Raised when an attribute key is not a string."""

    def __init__(self, key: object) -> None:
        super().__init__(f"Attribute name must be a string, not {type(key).__name__}: {key!r}")
        self.key = key


class NonObjectTargetError(ConjugateError, TypeError):
    """Raised when a structural helper receives None or an immutable scalar."""

    def __init__(self, target: object, role: str = "Target") -> None:
        super().__init__(f"{role} must be a non-null object, got {type(target).__name__}")
        self.target = target


class UnknownAttributeError(ConjugateError, AttributeError):
    """Raised when a write has no owner and the write policy rejects it."""

    def __init__(self, composite_name: str, key: str) -> None:
        super().__init__(
            f"'{composite_name}' has no attribute '{key}' and its write policy "
            f"rejects creating new attributes"
        )
        self.key = key
