"""
Failure taxonomy of the pet registry.

Every operation of ``PetService`` either returns a value or raises one
of the ``RegistryError`` subclasses below.  The HTTP layer maps each
subclass onto a status code; other callers can catch ``RegistryError``
and read ``message``.
"""


class RegistryError(Exception):
    """Base class for all registry failures."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(RegistryError):
    """Missing or invalid field, non-positive number or blank identifier."""


class NotFoundError(RegistryError):
    """No record is stored under the requested id."""


class UnauthorizedError(RegistryError):
    """The caller does not own the record it tries to remove."""


class StorageError(RegistryError):
    """The record store rejected a write (size limit or database error)."""


class NoDataError(RegistryError):
    """An aggregate was requested over an empty store."""
