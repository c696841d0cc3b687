"""
Lending core: checkout, return and renewal.

Every mutating operation validates first and writes only once all checks
pass, so a failed call leaves books, patrons and records untouched. Each
successful transition is announced on the lending publisher.
"""

import logging
from datetime import date, timedelta
from typing import TYPE_CHECKING

from ..database import BookRepository, BorrowingRecordRepository, PatronRepository
from ..errors import LimitExceededError, NoActiveLoanError, NotAvailableError, NotFoundError
from ..ids import generate_id
from ..models import Book, BookStatus, BorrowingRecord, Patron
from ..notifications import NotificationPublisher

if TYPE_CHECKING:
    from .reservations import ReservationService


class LendingService:
    """Moves books between patrons and the shelf."""

    def __init__(
        self,
        books: BookRepository,
        patrons: PatronRepository,
        records: BorrowingRecordRepository,
        publisher: NotificationPublisher[str],
        reservations: "ReservationService | None" = None,
        logger: logging.Logger | None = None,
    ):
        self.books = books
        self.patrons = patrons
        self.records = records
        self.publisher = publisher
        self.reservations = reservations
        self.logger = logger or logging.getLogger(__name__)

    def _require_patron(self, patron_id: str) -> Patron:
        patron = self.patrons.get_by_id(patron_id)
        if patron is None:
            self.logger.error("Patron not found: %s", patron_id)
            raise NotFoundError(f"Patron not found: {patron_id}")
        return patron

    def _require_book(self, isbn: str) -> Book:
        book = self.books.get_by_id(isbn)
        if book is None:
            self.logger.error("Book not found: %s", isbn)
            raise NotFoundError(f"Book not found: {isbn}")
        return book

    def _require_active_loan(self, patron_id: str, isbn: str) -> BorrowingRecord:
        record = self.records.find_active_loan(patron_id, isbn)
        if record is None:
            self.logger.warning("No active loan of %s for patron %s", isbn, patron_id)
            raise NoActiveLoanError(f"No active loan of book {isbn} for patron {patron_id}")
        return record

    def checkout(self, patron_id: str, isbn: str, branch_id: str | None = None) -> BorrowingRecord:
        """
        Lend a book to a patron.

        Checks run in order: patron exists, patron under their cap, book
        exists, book AVAILABLE.

        Returns:
            The new borrowing record

        Raises:
            NotFoundError: Patron or book does not exist
            LimitExceededError: Patron already holds their maximum
            NotAvailableError: Book is not AVAILABLE
        """
        patron = self._require_patron(patron_id)
        if not patron.can_borrow_more_books:
            self.logger.warning(
                "Patron %s reached borrowing limit of %d",
                patron_id,
                patron.patron_type.max_books_allowed,
            )
            raise LimitExceededError(
                f"Patron {patron_id} has reached the borrowing limit of "
                f"{patron.patron_type.max_books_allowed} books"
            )

        book = self._require_book(isbn)
        if book.status != BookStatus.AVAILABLE:
            self.logger.warning("Book %s is not available (status: %s)", isbn, book.status.value)
            raise NotAvailableError(f"Book {isbn} is not available (status: {book.status.value})")

        today = date.today()
        record = BorrowingRecord(
            id=generate_id("record"),
            patron_id=patron_id,
            isbn=isbn,
            branch_id=branch_id,
            checkout_date=today,
            due_date=today + timedelta(days=patron.patron_type.max_borrow_days),
        )

        book.status = BookStatus.CHECKED_OUT
        patron.add_borrowing_record(record.id)
        patron.add_current_borrowed_book(isbn)

        self.books.save(book)
        self.patrons.save(patron)
        record = self.records.save(record)

        self.logger.info("Book %s checked out to patron %s until %s", isbn, patron_id, record.due_date)
        self.publisher.broadcast(
            f"Book '{book.title}' checked out successfully. Due date: {record.due_date}"
        )
        return record

    def return_book(self, isbn: str, patron_id: str) -> BorrowingRecord:
        """
        Take a book back from a patron.

        Returns:
            The closed borrowing record

        Raises:
            NotFoundError: Patron or book does not exist
            NoActiveLoanError: The patron holds no open loan for the ISBN
        """
        patron = self._require_patron(patron_id)
        book = self._require_book(isbn)
        record = self._require_active_loan(patron_id, isbn)

        late = record.is_overdue
        record.return_date = date.today()
        book.status = BookStatus.AVAILABLE
        patron.remove_current_borrowed_book(isbn)

        record = self.records.save(record)
        self.books.save(book)
        self.patrons.save(patron)

        if late:
            self.logger.info("Book %s returned late by patron %s", isbn, patron_id)
            self.publisher.broadcast(
                f"Book '{book.title}' was returned late. Please check for any late fees."
            )
        else:
            self.logger.info("Book %s returned by patron %s", isbn, patron_id)
            self.publisher.broadcast(f"Book '{book.title}' returned successfully. Thank you!")
        return record

    def renew(self, isbn: str, patron_id: str) -> BorrowingRecord:
        """
        Extend an open loan by the patron type's loan period.

        The new due date counts from the current due date. Waiting
        reservations do not block a renewal.

        Raises:
            NoActiveLoanError: The patron holds no open loan for the ISBN
            NotFoundError: Patron or book does not exist
        """
        record = self._require_active_loan(patron_id, isbn)
        patron = self._require_patron(patron_id)
        book = self._require_book(isbn)

        if self.reservations is not None:
            waiting = self.reservations.waiting_count(isbn)
            if waiting:
                self.logger.warning(
                    "Renewing %s for patron %s while %d reservation(s) are waiting",
                    isbn,
                    patron_id,
                    waiting,
                )

        record.due_date = record.due_date + timedelta(days=patron.patron_type.max_borrow_days)
        record = self.records.save(record)

        self.logger.info("Book %s renewed for patron %s until %s", isbn, patron_id, record.due_date)
        self.publisher.broadcast(
            f"Book '{book.title}' renewed successfully. New due date: {record.due_date}"
        )
        return record

    def borrowing_history(self, patron_id: str) -> list[BorrowingRecord]:
        return self.records.find_by_patron(patron_id)

    def active_borrowings(self) -> list[BorrowingRecord]:
        return self.records.find_active()

    def overdue_borrowings(self) -> list[BorrowingRecord]:
        return self.records.find_overdue()
