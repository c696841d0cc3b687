"""
Library circulation models.

Pydantic v2 models for every entity the system tracks:
- Book: catalog items and their circulation status
- Patron: members and their borrowing limits
- LibraryBranch: physical locations and their inventory
- BorrowingRecord / Reservation: loans and wait-queue entries
"""

from .book import Book, BookStatus
from .branch import LibraryBranch
from .circulation import BorrowingRecord, Reservation, ReservationStatus
from .patron import Patron, PatronType

__all__ = [
    "Book",
    "BookStatus",
    "BorrowingRecord",
    "LibraryBranch",
    "Patron",
    "PatronType",
    "Reservation",
    "ReservationStatus",
]
