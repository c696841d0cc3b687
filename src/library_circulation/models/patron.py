"""
Patron model for the library circulation system.

A patron is a library member. The patron type fixes how many books the
patron may hold at once and for how long each loan runs. The patron record
also carries the ids of every borrowing record ever created for them, the
ISBNs they currently hold and the ISBNs they are waiting for.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator


class PatronType(str, Enum):
    """Patron classification fixing borrowing limits."""

    STUDENT = "student"
    FACULTY = "faculty"
    GENERAL = "general"

    @property
    def max_books_allowed(self) -> int:
        """Maximum number of books held at the same time."""
        return _BORROWING_LIMITS[self][0]

    @property
    def max_borrow_days(self) -> int:
        """Length of a loan (and of each renewal) in days."""
        return _BORROWING_LIMITS[self][1]


# (max books, loan days)
_BORROWING_LIMITS: dict[PatronType, tuple[int, int]] = {
    PatronType.STUDENT: (3, 14),
    PatronType.FACULTY: (10, 30),
    PatronType.GENERAL: (5, 21),
}


class Patron(BaseModel):
    """
    Represents a library patron who can borrow and reserve books.

    ``current_borrowed_books`` and ``reserved_books`` behave as sets (no
    duplicates) but keep insertion order so snapshots compare predictably.
    """

    id: str = Field(
        ...,
        description="Unique identifier for the patron",
        min_length=1,
        max_length=50,
        examples=["patron_3f9a1c2b7d", "patron_smith001"],
    )

    name: str = Field(
        ...,
        description="Full name of the patron",
        min_length=2,
        max_length=200,
        examples=["Alice Johnson", "Dr. Smith"],
    )

    email: EmailStr = Field(
        ...,
        description="Email address for patron notifications",
        examples=["alice@example.com"],
    )

    phone: str | None = Field(
        None,
        description="Phone number for SMS notifications",
        pattern=r"^\+?[\d\s\-\(\)]+$",
        examples=["555-1001", "+1 (555) 123-4567"],
    )

    patron_type: PatronType = Field(
        default=PatronType.GENERAL,
        description="Patron classification fixing borrowing limits",
    )

    borrowing_history: list[str] = Field(
        default_factory=list,
        description="Ids of every borrowing record created for this patron, oldest first",
    )

    current_borrowed_books: list[str] = Field(
        default_factory=list,
        description="ISBNs currently checked out by the patron",
    )

    reserved_books: list[str] = Field(
        default_factory=list,
        description="ISBNs the patron is waiting for",
    )

    @field_validator("current_borrowed_books", "reserved_books")
    @classmethod
    def remove_duplicates(cls, v: list[str]) -> list[str]:
        """Keep the first occurrence of each ISBN."""
        return list(dict.fromkeys(v))

    @model_validator(mode="after")
    def validate_borrowing_limit(self) -> "Patron":
        """A patron never holds more books than their type allows."""
        if len(self.current_borrowed_books) > self.patron_type.max_books_allowed:
            raise ValueError("Current borrowed books cannot exceed the patron type's limit")
        return self

    @property
    def can_borrow_more_books(self) -> bool:
        """Check if the patron is below their borrowing cap."""
        return len(self.current_borrowed_books) < self.patron_type.max_books_allowed

    def add_borrowing_record(self, record_id: str) -> None:
        self.borrowing_history.append(record_id)

    def add_current_borrowed_book(self, isbn: str) -> None:
        if isbn not in self.current_borrowed_books:
            self.current_borrowed_books.append(isbn)

    def remove_current_borrowed_book(self, isbn: str) -> None:
        if isbn in self.current_borrowed_books:
            self.current_borrowed_books.remove(isbn)

    def add_reserved_book(self, isbn: str) -> None:
        if isbn not in self.reserved_books:
            self.reserved_books.append(isbn)

    def remove_reserved_book(self, isbn: str) -> None:
        if isbn in self.reserved_books:
            self.reserved_books.remove(isbn)

    model_config = ConfigDict(
        validate_assignment=True,
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "patron_3f9a1c2b7d",
                "name": "Alice Johnson",
                "email": "alice@example.com",
                "phone": "555-1001",
                "patron_type": "student",
                "borrowing_history": [],
                "current_borrowed_books": [],
                "reserved_books": [],
            }
        },
    )
