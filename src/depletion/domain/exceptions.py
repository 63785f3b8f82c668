"""Domain-level exceptions.

Every failure the core can report is a subclass of DomainException so the
CLI and HTTP layers can catch them uniformly and map them to user-facing
messages or status codes.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist (or is outside the caller's store)."""


class OutOfStockError(ValidationError):
    """A usage was requested for a product with no remaining units."""


class PersistenceError(DomainException):
    """The storage layer failed; nothing from the unit of work was written."""
