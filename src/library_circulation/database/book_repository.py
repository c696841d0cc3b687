"""
Book repository implementation.

The catalog is keyed by ISBN. Besides the keyed contract, the services need
to scan books by circulation status and by the branch that holds them.
"""

from sqlalchemy import select

from ..database.schema import Book as BookDB
from ..models.book import Book as BookModel
from ..models.book import BookStatus
from .repository import BaseRepository


class BookRepository(BaseRepository[BookDB, BookModel]):
    """Repository for catalog books."""

    @property
    def model_class(self) -> type[BookDB]:
        return BookDB

    @property
    def response_schema(self) -> type[BookModel]:
        return BookModel

    @property
    def key_field(self) -> str:
        return "isbn"

    def find_by_status(self, status: BookStatus) -> list[BookModel]:
        """Books currently in the given status, oldest first."""
        return self._fetch_all(
            select(BookDB).where(BookDB.status == status),
            f"Failed to find books with status {status.value}",
        )

    def find_by_branch(self, branch_id: str) -> list[BookModel]:
        """Books whose ``current_branch_id`` is the given branch."""
        return self._fetch_all(
            select(BookDB).where(BookDB.current_branch_id == branch_id),
            f"Failed to find books at branch {branch_id}",
        )
