"""Typed errors raised while generating an API document.

Every error aborts the whole run. Callers add context with ``wrap`` and
re-raise ``from`` the caught error so the kind stays catchable.
"""


class GenerationError(Exception):
    """Base class for all generation failures."""

    def __init__(self, message: str, subject: str = ""):
        super().__init__(message)
        self.subject = subject

    def wrap(self, context: str) -> "GenerationError":
        """Return an error of the same kind with context prefixed to the message."""
        return type(self)(f"{context}: {self}", subject=self.subject)


class MissingApplicationName(GenerationError):
    """No application name was configured."""


class InvalidParameter(GenerationError):
    """The protoc parameter string could not be parsed."""


class UnknownType(GenerationError):
    """A fully-qualified type name is not declared in the document."""


class InvalidMapKey(GenerationError):
    """A map field uses a non-scalar key type."""


class UnresolvedFieldType(GenerationError):
    """A field type matches none of the schema resolution rules."""
