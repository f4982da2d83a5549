"""Domain-level exceptions.

Invalid bundle rules, bad money amounts and unavailable products are all
expressed as subclasses of DomainException so the CLI layer can catch them
uniformly and display user-friendly messages.

The allocation engine itself raises none of these over well-formed input.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""
