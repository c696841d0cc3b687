"""
Book model for the library circulation system.

A book is a single catalog item identified by its ISBN. Its ``status`` is the
one piece of state the circulation services move around:

- AVAILABLE -> CHECKED_OUT on checkout
- CHECKED_OUT -> AVAILABLE on return
- CHECKED_OUT -> RESERVED when the head of its reservation queue is notified
- MAINTENANCE / LOST are set by catalog staff
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BookStatus(str, Enum):
    """Circulation status of a book. Exactly one applies at a time."""

    AVAILABLE = "available"
    CHECKED_OUT = "checked_out"
    RESERVED = "reserved"
    MAINTENANCE = "maintenance"
    LOST = "lost"


class Book(BaseModel):
    """
    Represents a book in the library catalog.

    Instances handed out by the repositories are snapshots: changing a field
    does nothing until the book is saved back through ``BookRepository.save``.
    """

    isbn: str = Field(
        ...,
        description="International Standard Book Number, the book's identity",
        min_length=1,
        max_length=32,
        examples=["978-0-13-235088-4", "9780134685991"],
    )

    title: str = Field(
        ...,
        description="The title of the book",
        min_length=1,
        max_length=500,
        examples=["Clean Code", "Effective Java"],
    )

    author: str = Field(
        ...,
        description="Author name as printed on the book",
        min_length=1,
        max_length=200,
        examples=["Robert C. Martin", "Joshua Bloch"],
    )

    publication_year: int = Field(
        ...,
        description="Year the book was published",
        ge=1450,
        le=datetime.now().year + 1,
        examples=[2008, 2018],
    )

    status: BookStatus = Field(
        default=BookStatus.AVAILABLE,
        description="Current circulation status",
    )

    current_branch_id: str | None = Field(
        None,
        description="Branch that physically holds the book",
        examples=["branch_main000001"],
    )

    @field_validator("isbn", "title", "author")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        """Strip leading/trailing whitespace; blank values are rejected."""
        v = v.strip()
        if not v:
            raise ValueError("Value cannot be blank")
        return v

    @property
    def is_available(self) -> bool:
        """Check if the book can be checked out right now."""
        return self.status == BookStatus.AVAILABLE

    model_config = ConfigDict(
        validate_assignment=True,
        from_attributes=True,
        json_schema_extra={
            "example": {
                "isbn": "978-0-13-235088-4",
                "title": "Clean Code",
                "author": "Robert C. Martin",
                "publication_year": 2008,
                "status": "available",
                "current_branch_id": "branch_main000001",
            }
        },
    )
