"""
Failure taxonomy for the library circulation system.

Every service operation either returns a value or raises exactly one of the
exceptions below. Callers catch by kind and present a user-facing message;
the MCP tools turn any ``LibraryError`` into an ``isError`` response.
"""


class LibraryError(Exception):
    """Base class for all library domain failures."""


class NotFoundError(LibraryError):
    """A referenced patron, book, branch, record or reservation does not exist."""


class NotAvailableError(LibraryError):
    """The book's status prevents the requested lending or reservation transition."""


class AlreadyAvailableError(NotAvailableError):
    """A reservation was requested for a book that can be checked out right now."""


class LimitExceededError(LibraryError):
    """The patron has reached the borrowing cap of their patron type."""


class DuplicateReservationError(LibraryError):
    """The patron already holds an active reservation for the ISBN."""


class NoActiveLoanError(LibraryError):
    """Return or renewal requested with no open borrowing record."""


class ReservationMismatchError(LibraryError):
    """Fulfilment requested for a patron who is not at the head of the queue."""


class DuplicateError(LibraryError):
    """Raised when attempting to create an entity whose id already exists."""


class OperationNotAllowedError(LibraryError):
    """A management operation would break an inventory or loan invariant."""


class RepositoryException(LibraryError):
    """The entity store failed to read or write."""
