"""
The ``Library`` facade.

Builds the entity store, the two notification publishers and every service
exactly once and shares them by reference. Callers that only need one
service can use it directly (``library.catalog``, ``library.reservations``,
...); the operations defined here are the ones that span the lending and
reservation cores:

- a returned book is offered to the next patron in its reservation queue
- a notified patron collecting a RESERVED book fulfils their reservation
- cancelling a notified reservation passes the hold on or releases the book
- removing a patron cancels their reservations first
"""

import logging

from .config import get_config
from .database import (
    BookRepository,
    BorrowingRecordRepository,
    BranchRepository,
    DatabaseManager,
    PatronRepository,
)
from .models import BookStatus, BorrowingRecord, Reservation, ReservationStatus
from .notifications import NotificationPublisher
from .services import (
    BranchService,
    CatalogService,
    LendingService,
    PatronService,
    RecommendationService,
    ReservationService,
)


class Library:
    """One library: its store, its publishers and its services."""

    def __init__(
        self,
        database_url: str | None = None,
        pickup_window_days: int | None = None,
        logger: logging.Logger | None = None,
    ):
        config = get_config()
        self.logger = logger or logging.getLogger("library_circulation")

        self.db_manager = DatabaseManager(database_url or config.database_url)
        self.db_manager.init_database()
        self.session = self.db_manager.create_session()

        self.book_repository = BookRepository(self.session)
        self.patron_repository = PatronRepository(self.session)
        self.branch_repository = BranchRepository(self.session)
        self.record_repository = BorrowingRecordRepository(self.session)

        self.lending_notifications: NotificationPublisher[str] = NotificationPublisher(self.logger)
        self.reservation_notifications: NotificationPublisher[str] = NotificationPublisher(
            self.logger
        )

        self.catalog = CatalogService(self.book_repository, self.branch_repository, self.logger)
        self.patrons = PatronService(self.patron_repository, self.logger)
        self.branches = BranchService(self.branch_repository, self.book_repository, self.logger)
        self.reservations = ReservationService(
            self.book_repository,
            self.patron_repository,
            self.reservation_notifications,
            pickup_window_days=pickup_window_days or config.pickup_window_days,
            logger=self.logger,
        )
        self.lending = LendingService(
            self.book_repository,
            self.patron_repository,
            self.record_repository,
            self.lending_notifications,
            reservations=self.reservations,
            logger=self.logger,
        )
        self.recommendations = RecommendationService(
            self.book_repository, self.patron_repository, self.record_repository, self.logger
        )

    def checkout(self, patron_id: str, isbn: str, branch_id: str | None = None) -> BorrowingRecord:
        """
        Check a book out, collecting a held reservation on the way.

        When the book is RESERVED for this patron (their reservation is at
        the head of the queue and NOTIFIED), the reservation is fulfilled and
        the loan proceeds. A book held for somebody else stays unavailable.
        """
        book = self.book_repository.get_by_id(isbn)
        patron = self.patron_repository.get_by_id(patron_id)

        if (
            book is not None
            and patron is not None
            and patron.can_borrow_more_books
            and book.status == BookStatus.RESERVED
        ):
            head = self.reservations.head_of_queue(isbn)
            if (
                head is not None
                and head.patron_id == patron_id
                and head.status == ReservationStatus.NOTIFIED
            ):
                self.reservations.fulfill_reservation(isbn, patron_id)
                book.status = BookStatus.AVAILABLE
                self.book_repository.save(book)
                self.logger.info("Patron %s collected reserved book %s", patron_id, isbn)

        return self.lending.checkout(patron_id, isbn, branch_id)

    def return_book(self, isbn: str, patron_id: str) -> BorrowingRecord:
        """Return a book, then notify whoever is first in its queue."""
        record, _ = self.return_and_notify(isbn, patron_id)
        return record

    def return_and_notify(
        self, isbn: str, patron_id: str
    ) -> tuple[BorrowingRecord, Reservation | None]:
        """Return a book and also report the reservation notified for it, if any."""
        record = self.lending.return_book(isbn, patron_id)
        notified = self.reservations.notify_next_in_queue(isbn)
        return record, notified

    def renew(self, isbn: str, patron_id: str) -> BorrowingRecord:
        return self.lending.renew(isbn, patron_id)

    def reserve(self, patron_id: str, isbn: str) -> Reservation:
        return self.reservations.reserve(patron_id, isbn)

    def cancel_reservation(self, reservation_id: str) -> Reservation:
        """
        Cancel a reservation.

        If it was holding the book (NOTIFIED), the hold passes to the next
        patron in line, or the book becomes AVAILABLE when nobody is waiting.
        """
        previous = self.reservations.get_reservation(reservation_id)
        cancelled = self.reservations.cancel(reservation_id)

        if previous is not None and previous.status == ReservationStatus.NOTIFIED:
            book = self.book_repository.get_by_id(cancelled.isbn)
            if book is not None and book.status == BookStatus.RESERVED:
                if self.reservations.notify_next_in_queue(cancelled.isbn) is None:
                    book.status = BookStatus.AVAILABLE
                    self.book_repository.save(book)
                    self.logger.info("Book %s released; no reservations waiting", cancelled.isbn)

        return cancelled

    def remove_patron(self, patron_id: str) -> None:
        """
        Delete a patron after cancelling their reservations.

        A hold the patron was notified about passes to the next patron in
        line, as with any cancellation.

        Raises:
            NotFoundError: No such patron
            OperationNotAllowedError: The patron still has borrowed books
        """
        patron = self.patrons.find_patron(patron_id)
        if patron is not None and not patron.current_borrowed_books:
            for reservation in self.reservations.reservations_for_patron(patron_id):
                self.cancel_reservation(reservation.id)
        self.patrons.remove_patron(patron_id)

    def close(self) -> None:
        """Discard the store."""
        self.session.close()
        self.db_manager.close()


class _LibraryStore:
    """Internal storage for the library served over MCP."""

    _instance: Library | None = None


def get_library() -> Library:
    """Get or create the process-wide library used by tools and resources."""
    if _LibraryStore._instance is None:  # type: ignore[reportPrivateUsage]
        _LibraryStore._instance = Library()  # type: ignore[reportPrivateUsage]
    return _LibraryStore._instance  # type: ignore[reportPrivateUsage]


def reset_library() -> None:
    """Close and drop the process-wide library (used by tests)."""
    if _LibraryStore._instance is not None:  # type: ignore[reportPrivateUsage]
        _LibraryStore._instance.close()  # type: ignore[reportPrivateUsage]
    _LibraryStore._instance = None  # type: ignore[reportPrivateUsage]
