"""
Borrowing record repository implementation.

Records are written at checkout, rewritten at renewal and return, and never
deleted by circulation. The finders below back the lending service's
history, active-loan and overdue queries.
"""

from datetime import date

from sqlalchemy import and_, select

from ..database.schema import BorrowingRecord as BorrowingRecordDB
from ..models.circulation import BorrowingRecord as BorrowingRecordModel
from .repository import BaseRepository


class BorrowingRecordRepository(BaseRepository[BorrowingRecordDB, BorrowingRecordModel]):
    """Repository for borrowing records."""

    @property
    def model_class(self) -> type[BorrowingRecordDB]:
        return BorrowingRecordDB

    @property
    def response_schema(self) -> type[BorrowingRecordModel]:
        return BorrowingRecordModel

    def find_by_patron(self, patron_id: str) -> list[BorrowingRecordModel]:
        """Every record for a patron, oldest first."""
        return self._fetch_all(
            select(BorrowingRecordDB).where(BorrowingRecordDB.patron_id == patron_id),
            f"Failed to find records for patron {patron_id}",
        )

    def find_by_isbn(self, isbn: str) -> list[BorrowingRecordModel]:
        """Every record for an ISBN, oldest first."""
        return self._fetch_all(
            select(BorrowingRecordDB).where(BorrowingRecordDB.isbn == isbn),
            f"Failed to find records for ISBN {isbn}",
        )

    def find_active(self, patron_id: str | None = None) -> list[BorrowingRecordModel]:
        """Open records (no return date), optionally for one patron."""
        conditions = [BorrowingRecordDB.return_date.is_(None)]
        if patron_id is not None:
            conditions.append(BorrowingRecordDB.patron_id == patron_id)
        return self._fetch_all(
            select(BorrowingRecordDB).where(and_(*conditions)),
            "Failed to find active records",
        )

    def find_active_loan(self, patron_id: str, isbn: str) -> BorrowingRecordModel | None:
        """The first open record matching patron and ISBN, if any."""
        records = self._fetch_all(
            select(BorrowingRecordDB).where(
                and_(
                    BorrowingRecordDB.patron_id == patron_id,
                    BorrowingRecordDB.isbn == isbn,
                    BorrowingRecordDB.return_date.is_(None),
                )
            ),
            f"Failed to find active loan of {isbn} for patron {patron_id}",
        )
        return records[0] if records else None

    def find_overdue(
        self, patron_id: str | None = None, as_of: date | None = None
    ) -> list[BorrowingRecordModel]:
        """Open records whose due date is before ``as_of`` (today by default)."""
        as_of = as_of or date.today()
        conditions = [
            BorrowingRecordDB.return_date.is_(None),
            BorrowingRecordDB.due_date < as_of,
        ]
        if patron_id is not None:
            conditions.append(BorrowingRecordDB.patron_id == patron_id)
        return self._fetch_all(
            select(BorrowingRecordDB).where(and_(*conditions)),
            "Failed to find overdue records",
        )
