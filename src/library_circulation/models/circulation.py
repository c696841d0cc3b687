"""
Circulation models for the library circulation system.

- BorrowingRecord: one loan of one book to one patron. Created at checkout,
  closed (``return_date`` set) at return, never deleted.
- Reservation: one patron waiting for one ISBN. Lives in the per-ISBN FIFO
  queue owned by ``ReservationService``.
"""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ReservationStatus(str, Enum):
    """Lifecycle of a reservation.

    ACTIVE -> NOTIFIED -> FULFILLED, or ACTIVE/NOTIFIED -> CANCELLED.
    EXPIRED is declared for completeness; nothing drives a reservation there.
    """

    ACTIVE = "active"
    NOTIFIED = "notified"
    FULFILLED = "fulfilled"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


class BorrowingRecord(BaseModel):
    """
    Represents a single loan.

    ``due_date`` moves forward on renewal; ``return_date`` stays ``None``
    until the book comes back.
    """

    id: str = Field(
        ...,
        description="Unique identifier for the borrowing record",
        min_length=1,
        max_length=50,
        examples=["record_0c1d2e3f4a"],
    )

    patron_id: str = Field(
        ...,
        description="ID of the patron who borrowed the book",
        examples=["patron_3f9a1c2b7d"],
    )

    isbn: str = Field(
        ...,
        description="ISBN of the borrowed book",
        examples=["978-0-13-235088-4"],
    )

    branch_id: str | None = Field(
        None,
        description="Branch where the checkout took place",
    )

    checkout_date: date = Field(
        default_factory=date.today,
        description="Date the book was checked out",
    )

    due_date: date = Field(
        ...,
        description="Date the book should be returned",
    )

    return_date: date | None = Field(
        None,
        description="Date the book was actually returned",
    )

    @model_validator(mode="after")
    def validate_dates(self) -> "BorrowingRecord":
        """Due and return dates cannot precede the checkout date."""
        if self.due_date < self.checkout_date:
            raise ValueError("Due date cannot be before checkout date")
        if self.return_date and self.return_date < self.checkout_date:
            raise ValueError("Return date cannot be before checkout date")
        return self

    @property
    def is_returned(self) -> bool:
        return self.return_date is not None

    @property
    def is_overdue(self) -> bool:
        """An open loan whose due date has passed."""
        return self.return_date is None and date.today() > self.due_date

    @property
    def days_overdue(self) -> int:
        if not self.is_overdue:
            return 0
        return (date.today() - self.due_date).days

    model_config = ConfigDict(
        validate_assignment=True,
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "record_0c1d2e3f4a",
                "patron_id": "patron_3f9a1c2b7d",
                "isbn": "978-0-13-235088-4",
                "branch_id": "branch_main000001",
                "checkout_date": "2024-03-01",
                "due_date": "2024-03-15",
                "return_date": None,
            }
        },
    )


class Reservation(BaseModel):
    """Represents a patron's place in the wait queue for a book."""

    id: str = Field(
        ...,
        description="Unique identifier for the reservation",
        min_length=1,
        max_length=50,
        examples=["reservation_5b6c7d8e9f"],
    )

    patron_id: str = Field(
        ...,
        description="ID of the waiting patron",
    )

    isbn: str = Field(
        ...,
        description="ISBN of the reserved book",
    )

    created_at: datetime = Field(
        default_factory=datetime.now,
        description="When the reservation joined the queue",
    )

    status: ReservationStatus = Field(
        default=ReservationStatus.ACTIVE,
        description="Current lifecycle state",
    )

    notification_sent_at: datetime | None = Field(
        None,
        description="When the pickup notification went out",
    )

    @property
    def is_waiting(self) -> bool:
        """ACTIVE or NOTIFIED reservations still hold a queue slot."""
        return self.status in (ReservationStatus.ACTIVE, ReservationStatus.NOTIFIED)

    model_config = ConfigDict(validate_assignment=True)
