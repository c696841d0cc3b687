"""
Reservation core: one FIFO wait-queue per ISBN.

Queues live in this service, not in the entity store. Every reservation is
also kept in an id index for its whole life, so cancelled and fulfilled
reservations can still be looked up after they leave their queue.

Lifecycle::

    ACTIVE --notify_next_in_queue--> NOTIFIED --fulfill_reservation--> FULFILLED
    ACTIVE/NOTIFIED --cancel--> CANCELLED

Everything handed back to callers is a copy; mutating it never reaches the
queues.
"""

import logging
from collections import deque
from datetime import datetime

from ..config import get_config
from ..database import BookRepository, PatronRepository
from ..errors import (
    AlreadyAvailableError,
    DuplicateReservationError,
    NotFoundError,
    OperationNotAllowedError,
    ReservationMismatchError,
)
from ..ids import generate_id
from ..models import BookStatus, Reservation, ReservationStatus
from ..notifications import NotificationPublisher


class ReservationService:
    """Owns the per-ISBN reservation queues and the reservation index."""

    def __init__(
        self,
        books: BookRepository,
        patrons: PatronRepository,
        publisher: NotificationPublisher[str],
        pickup_window_days: int | None = None,
        logger: logging.Logger | None = None,
    ):
        self.books = books
        self.patrons = patrons
        self.publisher = publisher
        self.pickup_window_days = (
            pickup_window_days if pickup_window_days is not None else get_config().pickup_window_days
        )
        self.logger = logger or logging.getLogger(__name__)

        self._queues: dict[str, deque[Reservation]] = {}
        self._index: dict[str, Reservation] = {}

    def reserve(self, patron_id: str, isbn: str) -> Reservation:
        """
        Put a patron at the tail of the queue for a book.

        Raises:
            NotFoundError: Patron or book does not exist
            AlreadyAvailableError: The book can be checked out right now
            DuplicateReservationError: The patron already has an ACTIVE
                reservation for this ISBN
        """
        patron = self.patrons.get_by_id(patron_id)
        if patron is None:
            self.logger.error("Patron not found: %s", patron_id)
            raise NotFoundError(f"Patron not found: {patron_id}")

        book = self.books.get_by_id(isbn)
        if book is None:
            self.logger.error("Book not found: %s", isbn)
            raise NotFoundError(f"Book not found: {isbn}")

        if book.status == BookStatus.AVAILABLE:
            self.logger.warning("Book %s is available; reservation refused", isbn)
            raise AlreadyAvailableError(f"Book {isbn} is available and can be checked out directly")

        queue = self._queues.setdefault(isbn, deque())
        if any(
            r.patron_id == patron_id and r.status == ReservationStatus.ACTIVE for r in queue
        ):
            self.logger.warning("Patron %s already has a reservation for %s", patron_id, isbn)
            raise DuplicateReservationError(
                f"Patron {patron_id} already has an active reservation for book {isbn}"
            )

        reservation = Reservation(id=generate_id("reservation"), patron_id=patron_id, isbn=isbn)
        queue.append(reservation)
        self._index[reservation.id] = reservation

        patron.add_reserved_book(isbn)
        self.patrons.save(patron)

        self.logger.info(
            "Reservation %s created for %s by patron %s (position %d)",
            reservation.id,
            isbn,
            patron_id,
            len(queue),
        )
        return reservation.model_copy()

    def cancel(self, reservation_id: str) -> Reservation:
        """
        Cancel a reservation and drop it from its queue.

        Returns:
            The cancelled reservation

        Raises:
            NotFoundError: No reservation has this id
            OperationNotAllowedError: The reservation is already FULFILLED or
                CANCELLED
        """
        reservation = self._require(reservation_id)
        if not reservation.is_waiting:
            self.logger.warning(
                "Cannot cancel reservation %s in status %s", reservation_id, reservation.status.value
            )
            raise OperationNotAllowedError(
                f"Reservation {reservation_id} is {reservation.status.value} and cannot be cancelled"
            )

        self._drop(reservation)
        self.logger.info("Reservation %s cancelled", reservation_id)
        return reservation.model_copy()

    def notify_next_in_queue(self, isbn: str) -> Reservation | None:
        """
        Tell the patron at the head of the queue that the book is waiting.

        The head moves to NOTIFIED and the book is held as RESERVED. An empty
        queue, or a head that is not ACTIVE, makes this a no-op. Reservations
        at the head whose patron no longer exists are cancelled first.

        Returns:
            The notified reservation, or None when nothing happened
        """
        queue = self._queues.get(isbn)
        if not queue:
            return None

        # Reservations of patrons who no longer exist are skipped
        while queue and self.patrons.get_by_id(queue[0].patron_id) is None:
            orphan = queue[0]
            self.logger.warning(
                "Cancelling reservation %s of missing patron %s", orphan.id, orphan.patron_id
            )
            self._drop(orphan)
        if not queue:
            return None

        head = queue[0]
        if head.status != ReservationStatus.ACTIVE:
            self.logger.debug("Head of queue for %s is %s; nothing to notify", isbn, head.status.value)
            return None

        book = self.books.get_by_id(isbn)
        if book is None:
            self.logger.error("Book not found: %s", isbn)
            raise NotFoundError(f"Book not found: {isbn}")

        head.status = ReservationStatus.NOTIFIED
        head.notification_sent_at = datetime.now()
        book.status = BookStatus.RESERVED
        self.books.save(book)

        self.logger.info("Patron %s notified that %s is ready for pickup", head.patron_id, isbn)
        self.publisher.broadcast(
            f"Good news! The book '{book.title}' you reserved is now available. "
            f"Please collect it within {self.pickup_window_days} days."
        )
        return head.model_copy()

    def fulfill_reservation(self, isbn: str, patron_id: str) -> Reservation | None:
        """
        Complete the head reservation when its patron collects the book.

        Returns:
            The fulfilled reservation, or None if the queue is empty

        Raises:
            ReservationMismatchError: ``patron_id`` is not at the head of the
                queue; the queue is left as it was
        """
        queue = self._queues.get(isbn)
        if not queue:
            return None

        head = queue[0]
        if head.patron_id != patron_id:
            self.logger.warning(
                "Patron %s tried to collect %s but patron %s is first in line",
                patron_id,
                isbn,
                head.patron_id,
            )
            raise ReservationMismatchError(
                f"Patron {patron_id} is not at the head of the reservation queue for book {isbn}"
            )

        queue.popleft()
        head.status = ReservationStatus.FULFILLED
        self._release_reserved_book(patron_id, isbn)

        self.logger.info("Reservation %s fulfilled", head.id)
        return head.model_copy()

    def queue_position(self, reservation_id: str) -> int:
        """1-based place in the queue, or -1 if unknown or no longer queued."""
        reservation = self._index.get(reservation_id)
        if reservation is None:
            return -1
        for position, queued in enumerate(self._queues.get(reservation.isbn, ()), start=1):
            if queued is reservation:
                return position
        return -1

    def get_reservation(self, reservation_id: str) -> Reservation | None:
        reservation = self._index.get(reservation_id)
        return reservation.model_copy() if reservation else None

    def head_of_queue(self, isbn: str) -> Reservation | None:
        queue = self._queues.get(isbn)
        return queue[0].model_copy() if queue else None

    def reservations_for_book(self, isbn: str) -> list[Reservation]:
        """Queued reservations for an ISBN, head first."""
        return [r.model_copy() for r in self._queues.get(isbn, ())]

    def reservations_for_patron(self, patron_id: str) -> list[Reservation]:
        """The patron's ACTIVE or NOTIFIED reservations, oldest first."""
        return [
            r.model_copy()
            for r in self._index.values()
            if r.patron_id == patron_id and r.is_waiting
        ]

    def waiting_count(self, isbn: str) -> int:
        return len(self._queues.get(isbn, ()))

    def _drop(self, reservation: Reservation) -> None:
        """Mark a queued reservation CANCELLED and take it out of its queue."""
        reservation.status = ReservationStatus.CANCELLED
        queue = self._queues.get(reservation.isbn)
        if queue is not None:
            for queued in queue:
                if queued is reservation:
                    queue.remove(queued)
                    break
        self._release_reserved_book(reservation.patron_id, reservation.isbn)

    def _release_reserved_book(self, patron_id: str, isbn: str) -> None:
        """Clear the patron's reserved entry unless they are still queued for the ISBN."""
        if any(r.patron_id == patron_id for r in self._queues.get(isbn, ())):
            return
        patron = self.patrons.get_by_id(patron_id)
        if patron is not None:
            patron.remove_reserved_book(isbn)
            self.patrons.save(patron)

    def _require(self, reservation_id: str) -> Reservation:
        reservation = self._index.get(reservation_id)
        if reservation is None:
            self.logger.error("Reservation not found: %s", reservation_id)
            raise NotFoundError(f"Reservation not found: {reservation_id}")
        return reservation
