"""
Circulation tools for the library circulation MCP server.

Tools are the operations with side effects:

1. checkout_book: lend a book (collecting a held reservation if there is one)
2. return_book: take a book back and notify the next patron in line
3. renew_book: extend an open loan
4. reserve_book: join the wait-queue for a book that is out
5. cancel_reservation: leave the wait-queue
6. reservation_status: look up a reservation and its queue position

Every handler validates its arguments with a Pydantic input model, runs the
operation on the shared ``Library`` and answers with readable text plus
structured data. Validation and domain failures come back as ``isError``
results; they never escape the handler.
"""

import logging
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from ..errors import LibraryError
from ..library import get_library
from .responses import error_response, success_response

logger = logging.getLogger(__name__)


class _LoanInput(BaseModel):
    patron_id: str = Field(
        ...,
        description="Identifier of the patron",
        min_length=1,
        max_length=50,
        examples=["patron_3f9a1c2b7d"],
    )

    isbn: str = Field(
        ...,
        description="ISBN of the book",
        min_length=1,
        max_length=32,
        examples=["978-0-13-235088-4"],
    )

    @field_validator("patron_id", "isbn")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        return v.strip()


class CheckoutBookInput(_LoanInput):
    """Input schema for the checkout_book tool."""

    branch_id: str | None = Field(
        default=None,
        description="Branch where the checkout takes place",
        examples=["branch_1a2b3c4d5e"],
    )


class ReturnBookInput(_LoanInput):
    """Input schema for the return_book tool."""


class RenewBookInput(_LoanInput):
    """Input schema for the renew_book tool."""


class ReserveBookInput(_LoanInput):
    """Input schema for the reserve_book tool."""


class ReservationIdInput(BaseModel):
    """Input schema for tools addressing one reservation."""

    reservation_id: str = Field(
        ...,
        description="Identifier of the reservation",
        min_length=1,
        max_length=50,
        examples=["reservation_5b6c7d8e9f"],
    )


def _invalid(tool: str, error: ValidationError) -> dict[str, Any]:
    logger.warning("Invalid %s parameters: %s", tool, error)
    return error_response(f"Invalid {tool} parameters: {error}")


def _failed(tool: str, error: Exception) -> dict[str, Any]:
    if isinstance(error, LibraryError):
        logger.info("%s failed: %s", tool, error)
        return error_response(str(error))
    logger.exception("Unexpected error in %s tool", tool)
    return error_response(f"An unexpected error occurred: {error!s}")


async def checkout_book_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    """Handler for the checkout_book tool."""
    try:
        params = CheckoutBookInput.model_validate(arguments)
    except ValidationError as e:
        return _invalid("checkout", e)

    try:
        library = get_library()
        record = library.checkout(params.patron_id, params.isbn, params.branch_id)
        book = library.catalog.find_book(params.isbn)
    except Exception as e:
        return _failed("checkout_book", e)

    title = book.title if book else params.isbn
    return success_response(
        f"Checked out '{title}' to patron '{record.patron_id}'. "
        f"Due date: {record.due_date.strftime('%B %d, %Y')}",
        {"record": record.model_dump(mode="json")},
    )


async def return_book_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    """Handler for the return_book tool."""
    try:
        params = ReturnBookInput.model_validate(arguments)
    except ValidationError as e:
        return _invalid("return", e)

    try:
        library = get_library()
        record, notified = library.return_and_notify(params.isbn, params.patron_id)
        book = library.catalog.find_book(params.isbn)
    except Exception as e:
        return _failed("return_book", e)

    message = f"Returned book '{params.isbn}' from patron '{record.patron_id}'."
    if notified is not None:
        message += f" Patron '{notified.patron_id}' has been notified for pickup."

    return success_response(
        message,
        {
            "record": record.model_dump(mode="json"),
            "book_status": book.status.value if book else None,
        },
    )


async def renew_book_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    """Handler for the renew_book tool."""
    try:
        params = RenewBookInput.model_validate(arguments)
    except ValidationError as e:
        return _invalid("renewal", e)

    try:
        record = get_library().renew(params.isbn, params.patron_id)
    except Exception as e:
        return _failed("renew_book", e)

    return success_response(
        f"Renewed book '{params.isbn}' for patron '{record.patron_id}'. "
        f"New due date: {record.due_date.strftime('%B %d, %Y')}",
        {"record": record.model_dump(mode="json")},
    )


async def reserve_book_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    """Handler for the reserve_book tool."""
    try:
        params = ReserveBookInput.model_validate(arguments)
    except ValidationError as e:
        return _invalid("reservation", e)

    try:
        library = get_library()
        reservation = library.reserve(params.patron_id, params.isbn)
        position = library.reservations.queue_position(reservation.id)
    except Exception as e:
        return _failed("reserve_book", e)

    return success_response(
        f"Reserved book '{params.isbn}' for patron '{params.patron_id}'. "
        f"Position in queue: {position}",
        {"reservation": reservation.model_dump(mode="json"), "queue_position": position},
    )


async def cancel_reservation_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    """Handler for the cancel_reservation tool."""
    try:
        params = ReservationIdInput.model_validate(arguments)
    except ValidationError as e:
        return _invalid("cancellation", e)

    try:
        reservation = get_library().cancel_reservation(params.reservation_id)
    except Exception as e:
        return _failed("cancel_reservation", e)

    return success_response(
        f"Cancelled reservation '{reservation.id}' for book '{reservation.isbn}'.",
        {"reservation": reservation.model_dump(mode="json")},
    )


async def reservation_status_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    """Handler for the reservation_status tool."""
    try:
        params = ReservationIdInput.model_validate(arguments)
    except ValidationError as e:
        return _invalid("reservation status", e)

    library = get_library()
    reservation = library.reservations.get_reservation(params.reservation_id)
    if reservation is None:
        return error_response(f"Reservation not found: {params.reservation_id}")

    position = library.reservations.queue_position(reservation.id)
    if position > 0:
        message = (
            f"Reservation '{reservation.id}' is {reservation.status.value}, "
            f"position {position} in the queue for book '{reservation.isbn}'."
        )
    else:
        message = f"Reservation '{reservation.id}' is {reservation.status.value}."

    return success_response(
        message,
        {"reservation": reservation.model_dump(mode="json"), "queue_position": position},
    )


# Tool definitions for FastMCP registration
checkout_book = {
    "name": "checkout_book",
    "description": (
        "Check out a book to a patron. The book must be available, or held for this "
        "patron after a reservation notice. Due date follows the patron type's loan period."
    ),
    "inputSchema": CheckoutBookInput.model_json_schema(),
    "handler": checkout_book_handler,
}

return_book = {
    "name": "return_book",
    "description": (
        "Return a borrowed book. The next patron waiting for it, if any, is notified "
        "and the book is held for them."
    ),
    "inputSchema": ReturnBookInput.model_json_schema(),
    "handler": return_book_handler,
}

renew_book = {
    "name": "renew_book",
    "description": "Extend an open loan by the patron type's loan period.",
    "inputSchema": RenewBookInput.model_json_schema(),
    "handler": renew_book_handler,
}

reserve_book = {
    "name": "reserve_book",
    "description": (
        "Join the first-come-first-served wait-queue for a book that is currently out."
    ),
    "inputSchema": ReserveBookInput.model_json_schema(),
    "handler": reserve_book_handler,
}

cancel_reservation = {
    "name": "cancel_reservation",
    "description": "Cancel a reservation and leave the wait-queue.",
    "inputSchema": ReservationIdInput.model_json_schema(),
    "handler": cancel_reservation_handler,
}

reservation_status = {
    "name": "reservation_status",
    "description": "Show a reservation's status and its position in the wait-queue.",
    "inputSchema": ReservationIdInput.model_json_schema(),
    "handler": reservation_status_handler,
}

circulation_tools = [
    checkout_book,
    return_book,
    renew_book,
    reserve_book,
    cancel_reservation,
    reservation_status,
]
