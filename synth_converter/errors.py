"""
Conversion errors.

Every failure raised while building or rendering a batch graph derives from
ConversionError. The mapper never recovers from these; the first one aborts
the whole conversion.
"""


class ConversionError(Exception):
    """
    Base class for all conversion failures.

    Carries a record path (``context``) so that a failure deep inside a
    nested sample can be traced back to the action that contained it.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        self.context: list[str] = []

    def with_context(self, label: str) -> "ConversionError":
        """Prepend a record-path label and return the same error."""
        self.context.insert(0, label)
        return self

    def __str__(self) -> str:
        if not self.context:
            return self.message
        return f"{' > '.join(self.context)}: {self.message}"


class InvalidIri(ConversionError, ValueError):
    """Raised when a named node is built from a malformed IRI."""

    def __init__(self, iri: str, reason: str):
        super().__init__(f"Invalid IRI {iri!r}: {reason}")
        self.iri = iri


class UnknownPrefix(ConversionError, KeyError):
    """Raised when the namespace registry has no binding for a prefix."""

    def __init__(self, prefix: str, known: list[str] | None = None):
        hint = f" (registered: {', '.join(known)})" if known else ""
        super().__init__(f"Unknown namespace prefix {prefix!r}{hint}")
        self.prefix = prefix


class InvalidTriplePosition(ConversionError, TypeError):
    """Raised when a term kind is not allowed in the position it was given."""

    def __init__(self, position: str, term: object):
        super().__init__(
            f"{type(term).__name__} {term!r} cannot be used as triple {position}"
        )
        self.position = position
        self.term = term


class StoreFrozen(ConversionError):
    """Raised when inserting into a graph store that is being serialized."""


class SerializationFailure(ConversionError):
    """Raised when a renderer cannot produce output."""

    def __init__(self, fmt: str, reason: str):
        super().__init__(f"Failed to serialize graph to {fmt}: {reason}")
        self.format = fmt


class UnsupportedFormat(ConversionError, ValueError):
    """Raised when no renderer is registered for an output format."""

    def __init__(self, fmt: str, supported: list[str]):
        super().__init__(f"Unsupported format: {fmt}. Supported: {supported}")
        self.format = fmt
